import pytest

from cmdtree import resolve_command


def test_resolve_deepest(root, loud):
    command, remaining = resolve_command(root, ["say", "loud", "x"])
    assert command is loud
    assert remaining == ["x"]


def test_resolve_stops_at_first_non_child(root, say):
    command, remaining = resolve_command(root, ["say", "unknown", "x"])
    assert command is say
    assert remaining == ["unknown", "x"]


def test_resolve_no_match_returns_root(root):
    tokens = ["bogus", "say"]
    command, remaining = resolve_command(root, tokens)
    assert command is root
    assert remaining == tokens
    assert remaining is not tokens


def test_resolve_empty(root):
    command, remaining = resolve_command(root, [])
    assert command is root
    assert remaining == []


def test_resolve_flag_breaks_chain(root, say):
    command, remaining = resolve_command(root, ["say", "-n", "loud"])
    assert command is say
    assert remaining == ["-n", "loud"]


def test_resolve_positional_equal_to_subcommand_is_swallowed(root, loud):
    # "loud" was intended as a positional value of "say".
    command, remaining = resolve_command(root, ["say", "loud"])
    assert command is loud
    assert remaining == []


@pytest.mark.parametrize(
    "tokens, consumed",
    [
        ([], 0),
        (["say"], 1),
        (["say", "loud"], 2),
        (["say", "loud", "loud"], 2),
        (["say", "say"], 1),
        (["loud"], 0),
    ],
)
def test_resolve_prefix_greedy(root, tokens, consumed):
    _, remaining = resolve_command(root, tokens)
    assert remaining == tokens[consumed:]
