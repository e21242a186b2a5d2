r"""Shell completion.

Completion is dynamic: the generated bash hook calls back into the program with the
words typed so far, and the program prints one candidate per line.

.. code-block:: bash

    _demo() {
        local IFS=$'\n'
        COMPREPLY=( $(demo __complete "${COMP_WORDS[@]:1:$COMP_CWORD}") )
    }
    complete -o default -F _demo demo
"""

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cmdtree.resolve import resolve_command
from cmdtree.utils import is_flag_like

if TYPE_CHECKING:
    from cmdtree.command import Command

COMPLETE_COMMAND_NAME = "__complete"


def complete(root: "Command", words: Sequence[str]) -> list[str]:
    """List completion candidates for the last word of ``words``.

    Parameters
    ----------
    root: Command
        Root of the command tree.
    words: Sequence[str]
        Words typed so far, excluding the program name. The last element is the
        (possibly empty) word being completed.

    Returns
    -------
    list[str]
        Flag spellings of the resolved command if the current word looks like a flag,
        otherwise its visible subcommand names. Only candidates starting with the
        current word are returned.
    """
    if words:
        *context, current = words
    else:
        context, current = [], ""

    command, remaining = resolve_command(root, context)

    if is_flag_like(current):
        candidates = list(command.flags)
    elif remaining:
        # Positionals were already supplied; subcommands can no longer be addressed.
        candidates = []
    else:
        candidates = [subcommand.name for subcommand in command.visible_subcommands()]

    return [candidate for candidate in candidates if candidate.startswith(current)]


def generate_completion_script(prog_name: str, complete_command: str = COMPLETE_COMMAND_NAME) -> str:
    """Generate a bash completion script for ``prog_name``.

    Parameters
    ----------
    prog_name : str
        Name of the executable.
    complete_command : str
        Hidden command the executable answers completion requests on.

    Raises
    ------
    ValueError
        If prog_name contains invalid characters.
    """
    if not prog_name or not re.match(r"^[a-zA-Z0-9_-]+$", prog_name):
        raise ValueError(f"Invalid prog_name: {prog_name!r}. Must be alphanumeric with hyphens/underscores.")

    func_name = "_" + prog_name.replace("-", "_")
    lines = [
        f"# bash completion for {prog_name}",
        f"{func_name}() {{",
        "    local IFS=$'\\n'",
        f'    COMPREPLY=( $({prog_name} {complete_command} "${{COMP_WORDS[@]:1:$COMP_CWORD}}") )',
        "}",
        f"complete -o default -F {func_name} {prog_name}",
        "",
    ]
    return "\n".join(lines)
