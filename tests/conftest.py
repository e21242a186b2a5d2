import pytest
from rich.console import Console

from cmdtree import Application, Command


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def say():
    """``say`` command with an unbounded required positional and a numeric flag."""
    return Command("say", help="print input text").add_parameters(
        [
            {"name": "input", "max_cnt": 0, "required": True},
            {"long": "repeat-count", "short": "n", "type": "number", "default": 1, "help": "how many times to repeat"},
        ]
    )


@pytest.fixture
def loud():
    return Command("loud", help="shout input text").add_parameters([{"name": "text"}])


@pytest.fixture
def root(say, loud):
    say.add_subcommands([loud])
    return Command("demo", help="demo application").add_subcommands([say])


@pytest.fixture
def app(root, console):
    return Application(root=root, version="1.2.3", console=console, error_console=console)
