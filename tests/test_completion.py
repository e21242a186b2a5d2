import pytest

from cmdtree import Command, complete
from cmdtree.completion import generate_completion_script


@pytest.fixture
def frozen_root(root):
    root.add_subcommands([Command("secret", is_hidden=True), Command("serve")])
    return root.freeze()


@pytest.mark.parametrize(
    "words, expected",
    [
        ([], ["say", "serve", "help"]),
        ([""], ["say", "serve", "help"]),
        (["s"], ["say", "serve"]),
        (["se"], ["serve"]),
        (["say", ""], ["loud", "help"]),
        (["say", "l"], ["loud"]),
        (["say", "-"], ["--repeat-count", "-n"]),
        (["say", "--r"], ["--repeat-count"]),
        (["say", "hello", ""], []),
        (["say", "hello", "-"], ["--repeat-count", "-n"]),
        (["bogus", ""], []),
        (["x"], []),
    ],
)
def test_complete(frozen_root, words, expected):
    assert complete(frozen_root, words) == expected


def test_complete_hidden_is_excluded(frozen_root):
    assert "secret" not in complete(frozen_root, [""])


def test_generate_completion_script():
    script = generate_completion_script("my-prog")
    assert script.splitlines() == [
        "# bash completion for my-prog",
        "_my_prog() {",
        "    local IFS=$'\\n'",
        '    COMPREPLY=( $(my-prog __complete "${COMP_WORDS[@]:1:$COMP_CWORD}") )',
        "}",
        "complete -o default -F _my_prog my-prog",
    ]
    assert script.endswith("\n")


def test_generate_completion_script_custom_command():
    assert "prog _complete_me " in generate_completion_script("prog", "_complete_me")


@pytest.mark.parametrize("prog_name", ["", "my prog", "prog;rm", "$(x)"])
def test_generate_completion_script_invalid_prog_name(prog_name):
    with pytest.raises(ValueError):
        generate_completion_script(prog_name)
