from enum import Enum
from typing import TYPE_CHECKING, Optional

from attrs import define, field

from cmdtree.parameter import Parameter

if TYPE_CHECKING:
    from rich.console import Console

    from cmdtree.command import Command


__all__ = [
    "CmdtreeError",
    "CoercionError",
    "CommandCollisionError",
    "CommandFrozenError",
    "ErrorKind",
    "MissingRequiredError",
    "ParameterCollisionError",
    "ParseError",
    "RepeatLimitError",
    "UnexpectedPositionalError",
    "UnknownFlagError",
]


class CommandCollisionError(Exception):
    """A command with the same name has already been registered as a sibling."""

    # This doesn't derive from CmdtreeError since this is a developer error
    # rather than a runtime error.


class ParameterCollisionError(Exception):
    """A parameter name or flag spelling has already been registered to the command."""


class CommandFrozenError(Exception):
    """The command tree was modified after it was frozen for parsing."""


class ErrorKind(str, Enum):
    UNKNOWN_FLAG = "unknown_flag"
    CONVERSION_FAILURE = "conversion_failure"
    REPEAT_LIMIT_EXCEEDED = "repeat_limit_exceeded"
    UNEXPECTED_POSITIONAL = "unexpected_positional"
    MISSING_REQUIRED = "missing_required"


@define(kw_only=True)
class CmdtreeError(Exception):
    """Root exception for errors caused by user-supplied tokens.

    Parsing collects these rather than raising them; see :func:`cmdtree.parse`.
    """

    kind: ErrorKind | None = field(default=None, init=False)
    """Tag identifying the kind of error. Set by each subclass."""

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    verbose: bool = False
    """
    More verbose error messages; aimed towards developers debugging their application.
    """

    root_input_tokens: list[str] | None = None
    """
    The tokens that were initially fed into the :class:`~cmdtree.Application`.
    """

    command: Optional["Command"] = field(default=None, eq=False, repr=False)
    """
    The resolved command whose parameters were being bound.
    """

    console: Optional["Console"] = field(default=None, eq=False, repr=False)
    """:class:`~rich.console.Console` to display runtime errors."""

    def __str__(self):
        if self.msg is not None:
            return self.msg

        strings = []
        if self.verbose:
            strings.append(type(self).__name__)
            if self.command is not None:
                strings.append(f"Command: {self.command.name}")
            if self.root_input_tokens is not None:
                strings.append(f"Root Input Tokens: {self.root_input_tokens}")

        if strings:
            return "\n".join(strings) + "\n"
        else:
            return ""


@define(kw_only=True)
class UnknownFlagError(CmdtreeError):
    """A flag token does not match any flag declared by the resolved command.

    A nearest-neighbor flag suggestion may be appended.
    """

    kind: ErrorKind = field(default=ErrorKind.UNKNOWN_FLAG, init=False)

    flag: str
    """The offending flag token."""

    def __str__(self):
        response = f"unexpected flag: {self.flag}"

        if self.command is not None:
            import difflib

            close_matches = difflib.get_close_matches(self.flag, list(self.command.flags), n=1, cutoff=0.6)
            if close_matches:
                response += f' (did you mean "{close_matches[0]}"?)'

        return super().__str__() + response


@define(kw_only=True)
class CoercionError(CmdtreeError):
    """A raw token could not be converted into the parameter's declared type."""

    kind: ErrorKind = field(default=ErrorKind.CONVERSION_FAILURE, init=False)

    parameter: Parameter
    """Parameter the token was bound to."""

    value: str | None = None
    """Raw token that couldn't be converted. :obj:`None` if a flag was given no value."""

    flag: str | None = None
    """Flag token the value was paired with; :obj:`None` for positionals."""

    def __str__(self):
        if self.msg is not None:
            return self.msg

        type_name = self.parameter.type
        if self.flag is None:
            response = (
                f"failed to convert '{self.value}' to type '{type_name}' "
                f"for positional parameter '{self.parameter.name}'"
            )
        elif self.value is None:
            response = f"flag '{self.flag}' requires a value of type {type_name}"
        else:
            response = f"failed to convert '{self.value}' to type {type_name} for flag '{self.flag}'"

        return super().__str__() + response


@define(kw_only=True)
class RepeatLimitError(CmdtreeError):
    """A bounded-repeatable flag was supplied more times than its ``max_cnt``."""

    kind: ErrorKind = field(default=ErrorKind.REPEAT_LIMIT_EXCEEDED, init=False)

    parameter: Parameter

    flag: str
    """The repeated flag token."""

    def __str__(self):
        return super().__str__() + f"flag {self.flag} is passed more times than allowed"


@define(kw_only=True)
class UnexpectedPositionalError(CmdtreeError):
    """More positional tokens were supplied than the command declares."""

    kind: ErrorKind = field(default=ErrorKind.UNEXPECTED_POSITIONAL, init=False)

    value: str

    def __str__(self):
        return super().__str__() + f"unexpected positional parameter: {self.value}"


@define(kw_only=True)
class MissingRequiredError(CmdtreeError):
    """A required parameter has no value after binding."""

    kind: ErrorKind = field(default=ErrorKind.MISSING_REQUIRED, init=False)

    parameter: Parameter

    def __str__(self):
        return super().__str__() + f"missing required parameter: {self.parameter}"


@define(kw_only=True)
class ParseError(CmdtreeError):
    """One or more errors occurred while parsing a token list.

    Raised by :meth:`cmdtree.Application.parse_args`; the individual errors are in :attr:`errors`.
    """

    errors: list[CmdtreeError] = field(factory=list)

    def __str__(self):
        if self.msg is not None:
            return self.msg

        indent = "\n    "
        if self.errors and all(isinstance(e, MissingRequiredError) for e in self.errors):
            header = "following parameter(s) is required, but missing:"
            lines = [str(e.parameter) for e in self.errors]  # pyright: ignore[reportAttributeAccessIssue]
        else:
            header = "following error(s) occurred while parsing:"
            lines = [str(e) for e in self.errors]

        return super().__str__() + header + indent + indent.join(lines)
