from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from attrs import define, field

from cmdtree.exceptions import (
    CmdtreeError,
    CoercionError,
    MissingRequiredError,
    RepeatLimitError,
    UnexpectedPositionalError,
    UnknownFlagError,
)
from cmdtree.parameter import Parameter
from cmdtree.utils import is_flag_like

if TYPE_CHECKING:
    from cmdtree.command import Command


def _unique_parameters(command: "Command") -> list[Parameter]:
    """Flags then positionals; a flag indexed under both spellings appears once."""
    out: list[Parameter] = []
    for parameter in command.flags.values():
        if not any(parameter is p for p in out):
            out.append(parameter)
    out.extend(command.positionals)
    return out


def seed_defaults(command: "Command") -> dict[str, Any]:
    """Initial value map for ``command``'s own parameters.

    Repeatable parameters are seeded with a fresh empty list; scalars with their declared default.
    """
    return {parameter.name: parameter.default_value() for parameter in _unique_parameters(command)}  # pyright: ignore[reportReturnType]


@define
class Binder:
    """Token-consumption state machine binding tokens to a single command's parameters.

    A ``Binder`` holds all per-call state, so one must be created for every token list.
    """

    command: "Command"

    values: dict[str, Any] = field(factory=dict)
    """Value map being filled. Expected to be seeded via :func:`seed_defaults`."""

    errors: list[CmdtreeError] = field(factory=list)

    # Index into ``command.positionals``; only ever increases.
    pos_index: int = field(default=0, init=False)

    # Flag token awaiting its value.
    pending_flag: str | None = field(default=None, init=False)

    def _error(self, error: CmdtreeError):
        error.command = self.command
        self.errors.append(error)

    def store_flag(self, flag: str, value: str | None):
        """Store ``value`` for the parameter registered under ``flag``.

        Scalars are overwritten (last one wins); repeatables are appended to.
        """
        parameter = self.command.flags.get(flag)
        if parameter is None:
            self._error(UnknownFlagError(flag=flag))
            return

        try:
            converted = parameter.convert(value)
        except ValueError:
            self._error(CoercionError(parameter=parameter, value=value, flag=flag))
            return

        if not parameter.is_repeatable:
            self.values[parameter.name] = converted  # pyright: ignore[reportArgumentType]
            return

        values = self.values.setdefault(parameter.name, [])  # pyright: ignore[reportArgumentType]
        if parameter.max_cnt > 0 and len(values) >= parameter.max_cnt:
            self._error(RepeatLimitError(parameter=parameter, flag=flag))
            return
        # A valueless string flag contributes nothing to the list.
        if converted is not None:
            values.append(converted)

    def store_positional(self, value: str):
        """Store ``value`` into the positional parameter at the cursor."""
        try:
            parameter = self.command._positionals[self.pos_index]
        except IndexError:
            self._error(UnexpectedPositionalError(value=value))
            return

        try:
            converted = parameter.convert(value)
        except ValueError:
            self._error(CoercionError(parameter=parameter, value=value))
            return

        if not parameter.is_repeatable:
            self.values[parameter.name] = converted  # pyright: ignore[reportArgumentType]
            self.pos_index += 1
            return

        values = self.values.setdefault(parameter.name, [])  # pyright: ignore[reportArgumentType]
        values.append(converted)
        # Unbounded parameters never release the cursor.
        if parameter.max_cnt > 0 and len(values) >= parameter.max_cnt:
            self.pos_index += 1

    def feed(self, token: str):
        """Advance the state machine by a single token."""
        if is_flag_like(token):
            if self.pending_flag is not None:
                self.store_flag(self.pending_flag, None)
            self.pending_flag = token
        elif self.pending_flag is not None:
            flag, self.pending_flag = self.pending_flag, None
            self.store_flag(flag, token)
        else:
            self.store_positional(token)

    def finish(self):
        """Flush a trailing valueless flag."""
        if self.pending_flag is not None:
            flag, self.pending_flag = self.pending_flag, None
            self.store_flag(flag, None)

    def settle_arguments(self, tokens: Iterable[str]):
        """Consume all ``tokens``. Errors are collected into :attr:`errors`; consumption never stops early."""
        for token in tokens:
            self.feed(token)
        self.finish()


def bind(command: "Command", tokens: Iterable[str]) -> tuple[dict[str, Any], list[CmdtreeError]]:
    """Bind ``tokens`` to ``command``'s parameters.

    Parameters
    ----------
    command: Command
        Resolved command whose flags and positionals are being filled.
    tokens: Iterable[str]
        Tokens left over after command resolution.

    Returns
    -------
    dict[str, Any]
        Value map keyed by parameter name.
    list[CmdtreeError]
        Every error encountered; empty on success.
    """
    binder = Binder(command, seed_defaults(command))
    binder.settle_arguments(tokens)
    return binder.values, binder.errors


def check_required(command: "Command", values: dict[str, Any]) -> list[MissingRequiredError]:
    """Report every required parameter of ``command`` that has no value.

    A scalar is missing when its value is :obj:`None`; a repeatable when its list is empty.
    """
    errors = []
    for parameter in _unique_parameters(command):
        if not parameter.required:
            continue
        value = values.get(parameter.name)  # pyright: ignore[reportArgumentType]
        if parameter.is_repeatable:
            missing = not value
        else:
            missing = value is None
        if missing:
            errors.append(MissingRequiredError(parameter=parameter, command=command))
    return errors
