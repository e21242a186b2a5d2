__version__ = "0.1.0"

__all__ = [
    "Application",
    "Binder",
    "CmdtreeError",
    "CoercionError",
    "Command",
    "CommandCollisionError",
    "CommandFrozenError",
    "ErrorKind",
    "ErrorPanel",
    "MissingRequiredError",
    "Parameter",
    "ParameterCollisionError",
    "ParameterType",
    "ParseError",
    "RepeatLimitError",
    "UnexpectedPositionalError",
    "UnknownFlagError",
    "bind",
    "check_required",
    "complete",
    "config",
    "convert",
    "parse",
    "resolve_command",
    "seed_defaults",
]

from cmdtree._convert import ParameterType, convert
from cmdtree.bind import Binder, bind, check_required, seed_defaults
from cmdtree.command import Command
from cmdtree.completion import complete
from cmdtree.core import Application, parse
from cmdtree.exceptions import (
    CmdtreeError,
    CoercionError,
    CommandCollisionError,
    CommandFrozenError,
    ErrorKind,
    MissingRequiredError,
    ParameterCollisionError,
    ParseError,
    RepeatLimitError,
    UnexpectedPositionalError,
    UnknownFlagError,
)
from cmdtree.panel import ErrorPanel
from cmdtree.parameter import Parameter
from cmdtree.resolve import resolve_command


def __getattr__(name: str):
    """Lazy-load the configuration loaders; they are only needed for declarative trees."""
    if name == "config":
        import importlib

        module = importlib.import_module("cmdtree.config")
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
