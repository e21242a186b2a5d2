import warnings
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from attrs import define, field

from cmdtree.exceptions import CommandCollisionError, CommandFrozenError, ParameterCollisionError
from cmdtree.parameter import Parameter
from cmdtree.utils import to_tuple_converter

HELP_COMMAND_NAME = "help"

Operation = Callable[[dict[str, Any]], Any]


@define(eq=False)
class Command:
    """A named node of the command tree.

    Commands are built in two phases. While building, :meth:`add_subcommands`,
    :meth:`add_parameters` and :meth:`set_operation` register children, parameters
    and the bound operation; each returns the command so calls can be chained.
    :meth:`freeze` ends the build phase, after which the tree is read-only and may be
    shared by any number of concurrent :func:`~cmdtree.parse` calls.

    .. code-block:: python

        say = Command("say", help="print input text").add_parameters(
            [
                {"name": "input", "max_cnt": 0, "required": True},
                {"long": "repeat-count", "short": "n", "type": "number", "default": 1},
            ]
        )
    """

    name: str = field()

    help: str | None = field(default=None)

    is_hidden: bool = field(default=False, kw_only=True)
    """Exclude this command from help listings and shell completion."""

    # This can ONLY ever be a Tuple[str, ...]
    topics: None | str | Iterable[str] = field(default=None, converter=to_tuple_converter, kw_only=True)
    """Tags used to filter subcommand listings in help output."""

    help_subcommand: bool = field(default=True, kw_only=True)
    """Install a ``help`` subcommand when the tree is frozen."""

    ######################
    # Private Attributes #
    ######################
    _flags: dict[str, Parameter] = field(init=False, factory=dict, repr=False)
    _positionals: list[Parameter] = field(init=False, factory=list, repr=False)
    _parameters: list[Parameter] = field(init=False, factory=list, repr=False)
    _subcommands: dict[str, "Command"] = field(init=False, factory=dict, repr=False)
    _subcommand_list: list["Command"] = field(init=False, factory=list, repr=False)
    _operation: Operation | None = field(init=False, default=None, repr=False)
    _frozen: bool = field(init=False, default=False, repr=False)

    def __attrs_post_init__(self):
        if not self.name:
            raise ValueError("name must be provided for a command")

    ###########
    # Builder #
    ###########
    def _check_not_frozen(self):
        if self._frozen:
            raise CommandFrozenError(f"Command {self.name!r} is frozen and can no longer be modified.")

    def add_subcommands(self, commands: Iterable["Command"]) -> "Command":
        """Register child commands.

        Raises
        ------
        CommandCollisionError
            If a child with the same name is already registered.
        """
        self._check_not_frozen()
        for command in commands:
            if command.name in self._subcommands:
                raise CommandCollisionError(f'Command "{command.name}" already registered under "{self.name}".')
            self._subcommands[command.name] = command
            self._subcommand_list.append(command)
        return self

    def add_parameters(self, parameters: Iterable[Parameter | Mapping[str, Any]]) -> "Command":
        """Register parameters, given as :class:`Parameter` objects or as keyword mappings for one.

        Raises
        ------
        ParameterCollisionError
            If the parameter's name or any of its flag spellings is already registered.
        """
        self._check_not_frozen()
        for parameter in parameters:
            if not isinstance(parameter, Parameter):
                parameter = Parameter(**parameter)
            self._register_parameter(parameter)
        return self

    def _register_parameter(self, parameter: Parameter):
        if any(p.name == parameter.name for p in self._parameters):
            raise ParameterCollisionError(f'duplicated parameter name: "{parameter.name}" in command "{self.name}"')
        for flag in parameter.flags:
            if flag in self._flags:
                raise ParameterCollisionError(f'duplicated flag: "{flag}" in command "{self.name}"')

        if parameter.is_flag:
            for flag in parameter.flags:
                self._flags[flag] = parameter
        else:
            if self._positionals and self._positionals[-1].is_unbounded:
                warnings.warn(
                    f'Positional parameter "{parameter.name}" of command "{self.name}" is unreachable; '
                    f'it is declared after unbounded positional "{self._positionals[-1].name}".',
                    stacklevel=3,
                )
            self._positionals.append(parameter)
        self._parameters.append(parameter)

    def set_operation(self, operation: Operation | None) -> "Command":
        """Bind the callable invoked with the parsed value map when this command is run."""
        self._check_not_frozen()
        self._operation = operation
        return self

    def freeze(self) -> "Command":
        """Finish building this command and all of its descendants.

        Installs the ``help`` subcommand where enabled. Idempotent.
        """
        if self._frozen:
            return self

        if self.help_subcommand and self.name != HELP_COMMAND_NAME and HELP_COMMAND_NAME not in self._subcommands:
            from cmdtree.help import create_help_command

            self.add_subcommands([create_help_command(self)])

        for command in self._subcommand_list:
            command.freeze()

        self._flags = MappingProxyType(self._flags)  # pyright: ignore[reportAttributeAccessIssue]
        self._subcommands = MappingProxyType(self._subcommands)  # pyright: ignore[reportAttributeAccessIssue]
        self._positionals = tuple(self._positionals)  # pyright: ignore[reportAttributeAccessIssue]
        self._parameters = tuple(self._parameters)  # pyright: ignore[reportAttributeAccessIssue]
        self._subcommand_list = tuple(self._subcommand_list)  # pyright: ignore[reportAttributeAccessIssue]
        self._frozen = True
        return self

    ###########
    # Lookups #
    ###########
    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def flags(self) -> Mapping[str, Parameter]:
        """Mapping of flag token (``--long`` and ``-s``) to :class:`Parameter`."""
        return MappingProxyType(self._flags)

    @property
    def positionals(self) -> tuple[Parameter, ...]:
        """Positional parameters in binding order."""
        return tuple(self._positionals)

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        """All parameters in declaration order."""
        return tuple(self._parameters)

    @property
    def subcommands(self) -> tuple["Command", ...]:
        """Child commands in registration order."""
        return tuple(self._subcommand_list)

    @property
    def operation(self) -> Operation | None:
        return self._operation

    def visible_subcommands(self, topic: str | None = None) -> list["Command"]:
        """Non-hidden children, optionally limited to those tagged with ``topic``."""
        return [
            command
            for command in self._subcommand_list
            if not command.is_hidden and (topic is None or topic in command.topics)  # pyright: ignore[reportOperatorIssue]
        ]

    def get_subcommand(self, name: str) -> "Command | None":
        return self._subcommands.get(name)

    def __getitem__(self, name: str) -> "Command":
        """Get the child command ``name``.

        Raises
        ------
        KeyError
            If no such child exists.
        """
        return self._subcommands[name]

    def __contains__(self, name: str) -> bool:
        return name in self._subcommands

    def __iter__(self) -> Iterator[str]:
        """Iterate over child command names in registration order."""
        for command in self._subcommand_list:
            yield command.name

    def __str__(self):
        from cmdtree.help import format_command

        return format_command(self)
