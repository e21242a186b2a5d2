from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdtree.command import Command


def resolve_command(root: "Command", tokens: Sequence[str]) -> tuple["Command", list[str]]:
    """Walk ``tokens`` down the command tree, starting at ``root``.

    Tokens are consumed strictly in order for as long as each one exactly names a child of the
    current command. Matching is greedy and never backtracks: a positional value that happens to
    equal a subcommand name selects that subcommand.

    Parameters
    ----------
    root: Command
        Command to start resolution from.
    tokens: Sequence[str]
        Input tokens.

    Returns
    -------
    Command
        Deepest command addressed by ``tokens``; ``root`` if the first token names no child.
    list[str]
        The unconsumed suffix of ``tokens``.
    """
    command = root
    index = 0
    for token in tokens:
        child = command.get_subcommand(token)
        if child is None:
            break
        command = child
        index += 1
    return command, list(tokens[index:])
