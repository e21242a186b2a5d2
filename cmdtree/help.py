"""Plain-text help rendering for command trees."""

from typing import TYPE_CHECKING, Any, Optional

from attrs import frozen

from cmdtree.parameter import Parameter
from cmdtree.resolve import resolve_command

if TYPE_CHECKING:
    from rich.console import Console

    from cmdtree.command import Command

INDENT = "    "
INDENT_SECONDARY = "  "


def format_title(command: "Command", topic: str | None = None) -> str:
    """Single usage-like line, e.g. ``say [Subcommand] [Options] <input>``."""
    buffer = [command.name]
    if command.visible_subcommands(topic):
        buffer.append(" [Subcommand]")
    if command.flags:
        buffer.append(" [Options]")
    for parameter in command.positionals:
        buffer.append(f" <{parameter.name}>")
    return "".join(buffer)


def format_command(command: "Command", *, topic: str | None = None, indent: str = "") -> str:
    """Render the help page of ``command``.

    .. code-block:: text

        * say [Subcommand] [Options] <input>
          |=> print input text

          |-- Parameters
            - input: string, max_repeat(Inf)
            - repeat_count? (-n, --repeat-count): number
              |> how many times to repeat

          |-- Subcommands
            * help

    Parameters
    ----------
    command: Command
        Command to render.
    topic: str | None
        If provided, only list subcommands tagged with this topic.
    indent: str
        Prefix for every line.
    """
    lines = [f"{indent}* {format_title(command, topic)}"]

    if command.help:
        lines.append(f"{indent}{INDENT_SECONDARY}|=> {command.help}")

    if command.parameters:
        lines.append("")
        lines.append(f"{indent}{INDENT_SECONDARY}|-- Parameters")
        for parameter in command.parameters:
            lines.append(f"{indent}{INDENT}- {parameter}")
            if parameter.help:
                lines.append(f"{indent}{INDENT}{INDENT_SECONDARY}|> {parameter.help}")

    subcommands = command.visible_subcommands(topic)
    if subcommands:
        lines.append("")
        lines.append(f"{indent}{INDENT_SECONDARY}|-- Subcommands")
        for subcommand in subcommands:
            lines.append(f"{indent}{INDENT}* {subcommand.name}")

    return "\n".join(lines)


def print_help(command: "Command", console: Optional["Console"] = None, *, topic: str | None = None) -> None:
    """Print the help page of ``command`` to ``console`` (defaults to stdout)."""
    from rich.console import Console
    from rich.text import Text

    if console is None:
        console = Console()
    console.print(Text(format_command(command, topic=topic)))


@frozen
class HelpOperation:
    """Operation bound to the built-in ``help`` subcommand.

    Prints the help of the command addressed by ``path``, relative to :attr:`command`.
    """

    command: "Command"
    """Parent of the ``help`` subcommand."""

    def __call__(self, values: dict[str, Any], console: Optional["Console"] = None) -> None:
        path = values.get("path") or []
        target, remaining = resolve_command(self.command, path)
        if remaining:
            from rich.console import Console
            from rich.text import Text

            (console or Console()).print(Text("command not found"))
        else:
            print_help(target, console, topic=values.get("topic"))


def create_help_command(parent: "Command") -> "Command":
    """Build the ``help`` subcommand installed on ``parent`` when it is frozen."""
    from cmdtree.command import HELP_COMMAND_NAME, Command

    return (
        Command(HELP_COMMAND_NAME, help="show help message for command", help_subcommand=False)
        .add_parameters(
            [
                Parameter(name="path", max_cnt=0, help="subcommand path to show help for"),
                Parameter(long="topic", short="t", help="only list subcommands tagged with this topic"),
            ]
        )
        .set_operation(HelpOperation(parent))
    )
