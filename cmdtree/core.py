import os
import sys
from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from attrs import define, field

from cmdtree.bind import bind, check_required
from cmdtree.command import Command, Operation
from cmdtree.completion import COMPLETE_COMMAND_NAME, complete, generate_completion_script
from cmdtree.exceptions import CmdtreeError, ParseError
from cmdtree.help import HelpOperation, format_command, print_help
from cmdtree.panel import ErrorPanel
from cmdtree.parameter import Parameter
from cmdtree.resolve import resolve_command
from cmdtree.utils import create_error_console_from_console, normalize_tokens

if TYPE_CHECKING:
    from rich.console import Console


def parse(root: Command, tokens: Iterable[str]) -> tuple[Command, dict[str, Any], list[CmdtreeError]]:
    """Resolve ``tokens`` against the tree rooted at ``root`` and bind them.

    ``root`` is frozen if it isn't already.

    Binding errors take precedence: if any occurred, they are returned as-is and
    required-parameter validation is skipped.

    Parameters
    ----------
    root: Command
        Root of the command tree.
    tokens: Iterable[str]
        Input tokens, excluding the program name.

    Returns
    -------
    Command
        Deepest command addressed by ``tokens``.
    dict[str, Any]
        Value map keyed by parameter name.
    list[CmdtreeError]
        Errors encountered; empty on success.
    """
    root.freeze()
    command, remaining = resolve_command(root, list(tokens))
    values, errors = bind(command, remaining)
    if errors:
        return command, values, errors
    return command, values, list(check_required(command, values))


def _default_name() -> str:
    return Path(sys.argv[0]).stem or "app"


@define
class Application:
    """A command tree plus program metadata and terminal I/O.

    .. code-block:: python

        from cmdtree import Application, Command

        app = Application("demo", version="1.2.0")
        app.add_subcommands([Command("say").set_operation(print)])
        app()
    """

    _name: str | None = field(default=None, alias="name")

    _help: str | None = field(default=None, alias="help")

    version: str = field(default="0.1.0", kw_only=True)

    root: Command = field(default=None, kw_only=True)
    """Root command. Created from ``name`` and ``help`` if not provided."""

    _console: Optional["Console"] = field(default=None, kw_only=True, alias="console")

    _error_console: Optional["Console"] = field(default=None, kw_only=True, alias="error_console")

    print_error: bool | None = field(default=None, kw_only=True)

    exit_on_error: bool | None = field(default=None, kw_only=True)

    help_on_error: bool | None = field(default=None, kw_only=True)

    verbose: bool | None = field(default=None, kw_only=True)

    complete_command: str | None = field(default=COMPLETE_COMMAND_NAME, kw_only=True)
    """Leading token that answers shell-completion requests instead of running a command. :obj:`None` disables."""

    _fallback_console: Optional["Console"] = field(init=False, default=None, repr=False)

    _fallback_error_console: Optional["Console"] = field(init=False, default=None, repr=False)

    def __attrs_post_init__(self):
        if self.root is None:
            self.root = Command(self._name or _default_name(), help=self._help)

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def help(self) -> str | None:
        return self.root.help

    @property
    def console(self) -> "Console":
        if self._console is not None:
            return self._console

        # We always want to return back the same console object,
        # but if someone manually overrides `console`, then
        # we want to return that.
        if self._fallback_console is None:
            from rich.console import Console

            self._fallback_console = Console()

        return self._fallback_console

    @console.setter
    def console(self, console: Optional["Console"]):
        self._console = console

    @property
    def error_console(self) -> "Console":
        if self._error_console is not None:
            return self._error_console

        if self._fallback_error_console is None:
            self._fallback_error_console = create_error_console_from_console(self.console)

        return self._fallback_error_console

    @error_console.setter
    def error_console(self, console: Optional["Console"]):
        self._error_console = console

    ###########
    # Builder #
    ###########
    def add_subcommands(self, commands: Iterable[Command]) -> "Application":
        self.root.add_subcommands(commands)
        return self

    def add_parameters(self, parameters: Iterable[Parameter | Mapping[str, Any]]) -> "Application":
        self.root.add_parameters(parameters)
        return self

    def set_operation(self, operation: Operation | None) -> "Application":
        self.root.set_operation(operation)
        return self

    def __getitem__(self, name: str) -> Command:
        return self.root[name]

    def __contains__(self, name: str) -> bool:
        return name in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(self.root)

    ###########
    # Parsing #
    ###########
    def parse(self, tokens: None | str | Iterable[str] = None) -> tuple[Command, dict[str, Any], list[CmdtreeError]]:
        """Like :func:`cmdtree.parse`, but also accepts a string or :obj:`None` (``sys.argv[1:]``)."""
        return parse(self.root, normalize_tokens(tokens))

    def parse_args(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        console: Optional["Console"] = None,
        error_console: Optional["Console"] = None,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
        verbose: bool | None = None,
    ) -> tuple[Command, dict[str, Any]]:
        """Interpret tokens into a resolved :class:`Command` and its value map.

        Raises
        ------
        ParseError
            If any errors were collected and ``exit_on_error`` is :obj:`False`.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Either a string, or a list of strings.
            Defaults to ``sys.argv[1:]``.
        console: ~rich.console.Console
            Console to print help to. Defaults to :attr:`Application.console`.
        error_console: ~rich.console.Console
            Console to print errors to. Defaults to :attr:`Application.error_console`.
        print_error: bool | None
            Print a rich-formatted error on error.
            If :obj:`None`, inherits from :attr:`Application.print_error`, eventually defaulting to :obj:`True`.
        exit_on_error: bool | None
            If there is an error parsing the tokens invoke ``sys.exit(1)``.
            Otherwise, continue to raise the exception.
            If :obj:`None`, inherits from :attr:`Application.exit_on_error`, eventually defaulting to :obj:`True`.
        help_on_error: bool | None
            Prints the resolved command's help before printing an error.
            If :obj:`None`, inherits from :attr:`Application.help_on_error`, eventually defaulting to :obj:`False`.
        verbose: bool | None
            Populate exception strings with more information intended for developers.
            If :obj:`None`, inherits from :attr:`Application.verbose`, eventually defaulting to :obj:`False`.

        Returns
        -------
        command: Command
            Deepest command addressed by the tokens.
        values: dict[str, Any]
            Parsed and converted parameter values.
        """
        if tokens is None:
            _log_framework_warning(_detect_test_framework())

        tokens = normalize_tokens(tokens)
        command, values, errors = parse(self.root, tokens)
        if not errors:
            return command, values

        print_error = _resolve(print_error, self.print_error, True)
        exit_on_error = _resolve(exit_on_error, self.exit_on_error, True)
        help_on_error = _resolve(help_on_error, self.help_on_error, False)
        verbose = _resolve(verbose, self.verbose, False)

        e = ParseError(
            errors=errors,
            verbose=verbose,
            root_input_tokens=tokens,
            command=command,
            console=error_console or self.error_console,
        )
        assert e.console is not None
        if help_on_error:
            print_help(command, console or self.console)
        if print_error:
            e.console.print(ErrorPanel(e))
        if exit_on_error:
            sys.exit(1)
        raise e

    def __call__(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        console: Optional["Console"] = None,
        error_console: Optional["Console"] = None,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
        verbose: bool | None = None,
    ) -> Any:
        """Interprets and executes a command.

        If the resolved command has no operation, its help page is printed instead.

        Parameters are the same as :meth:`parse_args`.

        Returns
        -------
        return_value: Any
            The value the command's operation returns.
        """
        if tokens is None:
            _log_framework_warning(_detect_test_framework())
        tokens = normalize_tokens(tokens)

        if self.complete_command and tokens and tokens[0] == self.complete_command:
            for candidate in complete(self.root.freeze(), tokens[1:]):
                print(candidate)
            return None

        command, values = self.parse_args(
            tokens,
            console=console,
            error_console=error_console,
            print_error=print_error,
            exit_on_error=exit_on_error,
            help_on_error=help_on_error,
            verbose=verbose,
        )

        operation = command.operation
        if operation is None:
            print_help(command, console or self.console)
            return None
        elif isinstance(operation, HelpOperation):
            return operation(values, console=console or self.console)
        else:
            return operation(values)

    run_with_args = __call__

    def run(self) -> Any:
        """Execute with ``sys.argv[1:]``."""
        return self(None)

    ##########
    # Output #
    ##########
    def info_str(self) -> str:
        return f"{self.name} ({self.version})"

    def help_print(self, tokens: None | str | Iterable[str] = None, *, console: Optional["Console"] = None) -> None:
        """Print the help page of the command addressed by ``tokens`` (the root by default)."""
        command, _ = resolve_command(self.root.freeze(), normalize_tokens(() if tokens is None else tokens))
        print_help(command, console or self.console)

    def generate_completion(self, prog_name: str | None = None) -> str:
        """Bash completion script for this application.

        Raises
        ------
        ValueError
            If completion is disabled via :attr:`complete_command`.
        """
        if not self.complete_command:
            raise ValueError("Shell completion is disabled; set Application.complete_command.")
        return generate_completion_script(prog_name or self.name, self.complete_command)

    def version_print(self, console: Optional["Console"] = None) -> None:
        from rich.text import Text

        (console or self.console).print(Text(self.version))

    def __str__(self):
        return self.info_str() + "\n\n" + format_command(self.root)


def _resolve(override: bool | None, configured: bool | None, fallback: bool) -> bool:
    if override is not None:
        return override
    if configured is not None:
        return configured
    return fallback


@lru_cache
def _detect_test_framework() -> str:
    """Name of the unit-test framework we are running under; empty string if none."""
    # PYTEST_VERSION can be set if a script is invoked via subprocess within a pytest unit-test.
    if "pytest" in sys.modules and os.environ.get("PYTEST_VERSION") is not None:
        return "pytest"
    return ""


@lru_cache  # Prevent logging of multiple warnings
def _log_framework_warning(framework: str) -> None:
    """Warn about reading :obj:`sys.argv` while under a unit-test framework."""
    if not framework:
        return
    import warnings

    message = f'Application invoked without tokens under unit-test framework "{framework}". Did you mean "app([])"?'
    warnings.warn(UserWarning(message), stacklevel=3)
