from textwrap import dedent

import pytest

from cmdtree import parse
from cmdtree.config import Toml


@pytest.fixture
def config_path(tmp_path):
    """Path to TOML configuration file in tmp_path"""
    return tmp_path / "pyproject.toml"


def test_config_toml(config_path):
    config_path.write_text(
        dedent(
            """\
            [tool.demo]
            name = "demo"

            [[tool.demo.subcommands]]
            name = "say"
            help = "print input text"

            [[tool.demo.subcommands.parameters]]
            name = "input"
            max_cnt = 0
            required = true

            [[tool.demo.subcommands.parameters]]
            long = "repeat-count"
            short = "n"
            type = "number"
            default = 1

            [[tool.demo.subcommands.subcommands]]
            name = "loud"
            is_hidden = true
            """
        )
    )
    root = Toml(config_path, root_keys=("tool", "demo")).load()

    command, values, errors = parse(root, ["say", "hello", "-n", "3"])
    assert command is root["say"]
    assert values == {"input": ["hello"], "repeat_count": 3}
    assert errors == []

    assert root["say"]["loud"].is_hidden


def test_config_toml_invalid(config_path):
    config_path.write_text("[tool")
    with pytest.raises(ValueError, match="Failed to load configuration"):
        Toml(config_path).load()
