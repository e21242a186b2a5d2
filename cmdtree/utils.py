"""To prevent circular dependencies, this module should never import anything else from cmdtree."""

import importlib
import shlex
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

FLAG_START = "-"

if TYPE_CHECKING:
    from rich.console import Console


def is_iterable(obj) -> bool:
    if isinstance(obj, list | tuple | set | dict):  # Fast path for common types
        return True
    return not isinstance(obj, str) and isinstance(obj, Iterable)


def to_tuple_converter(value: None | Any | Iterable[Any]) -> tuple[Any, ...]:
    """Convert a single element or an iterable of elements into a tuple.

    Intended to be used in an ``attrs.Field``. If :obj:`None` is provided, returns an empty tuple.
    If a single element is provided, returns a tuple containing just that element.
    If an iterable is provided, converts it into a tuple.
    """
    if value is None:
        return ()
    elif is_iterable(value):
        return tuple(value)
    else:
        return (value,)


def is_flag_like(token: str) -> bool:
    """Whether ``token`` is interpreted as a flag.

    Any token starting with ``-`` is a flag, including negative numbers.
    """
    return token.startswith(FLAG_START)


def flag_to_name(long: str) -> str:
    """Derive a value-map key from a long flag spelling.

    .. code-block:: python

        >>> flag_to_name("repeat-count")
        'repeat_count'
    """
    return long.replace("-", "_")


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


def import_object(path: str) -> Any:
    """Import an object from a ``"module.name:attribute"`` string.

    Raises
    ------
    ImportError
        If the module cannot be imported.
    AttributeError
        If the module has no such attribute.
    ValueError
        If ``path`` is not of the form ``module:attribute``.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Expected an import string of the form 'module:attribute', got {path!r}.")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(f"Cannot import module '{module_name}': {e}") from e

    obj = module
    for part in attribute.split("."):
        if not hasattr(obj, part):
            raise AttributeError(f"Module '{module_name}' has no attribute '{attribute}'")
        obj = getattr(obj, part)
    return obj


def create_error_console_from_console(console: "Console") -> "Console":
    """Create an error console (stderr=True) that inherits settings from a source console.

    Parameters
    ----------
    console : Console
        Source Rich Console to copy settings from.

    Returns
    -------
    Console
        New Rich Console with stderr=True and inherited settings.
    """
    from rich.console import Console

    color_system = console.color_system or "auto"

    return Console(
        stderr=True,
        color_system=color_system,  # type: ignore[arg-type]
        force_terminal=getattr(console, "_force_terminal", None),
        force_jupyter=console.is_jupyter or None,
        force_interactive=console.is_interactive or None,
        soft_wrap=console.soft_wrap,
        width=console._width,
        height=getattr(console, "_height", None),
        tab_size=console.tab_size,
        markup=getattr(console, "_markup", True),
        emoji=getattr(console, "_emoji", True),
        highlight=getattr(console, "_highlight", True),
        no_color=console.no_color,
        legacy_windows=console.legacy_windows,
        safe_box=console.safe_box,
    )
