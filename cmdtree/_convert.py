from collections.abc import Callable
from enum import Enum
from typing import Any


class ParameterType(str, Enum):
    """Closed set of value types a :class:`~cmdtree.Parameter` may declare."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"

    def __str__(self) -> str:
        return self.value


def _string(value: str | None) -> str | None:
    # A valueless flag leaves the slot empty; required-ness is checked after binding.
    return value


def _boolean(value: str | None) -> bool:
    # A valueless flag is an enabled flag.
    if value is None:
        return True
    return value.lower() not in ("false", "f")


def _number(value: str | None) -> int | float:
    if value is None:
        raise ValueError("missing value")

    s = value.strip()
    if not s or "_" in s:
        raise ValueError(f"invalid number {value!r}")

    try:
        return int(s)
    except ValueError:
        pass

    body = s.lstrip("+-").lower()
    if body.startswith("0x"):
        return int(s, 16)
    if body.startswith(("inf", "nan")):
        raise ValueError(f"invalid number {value!r}")
    return float(s)


_converters: dict[ParameterType, Callable[[str | None], Any]] = {
    ParameterType.STRING: _string,
    ParameterType.BOOLEAN: _boolean,
    ParameterType.NUMBER: _number,
}


def convert(type_: ParameterType, value: str | None) -> Any:
    """Convert a raw CLI token into ``type_``.

    Parameters
    ----------
    type_: ParameterType
        Declared parameter type.
    value: str | None
        Raw token. :obj:`None` indicates that a flag was supplied without a value.

    Raises
    ------
    ValueError
        If ``value`` cannot be interpreted as ``type_``.

    Returns
    -------
    Any
        Converted value.
    """
    return _converters[ParameterType(type_)](value)


def is_instance_of(type_: ParameterType, value: Any) -> bool:
    """Whether an already-typed python ``value`` (e.g. a default) matches ``type_``."""
    type_ = ParameterType(type_)
    if type_ is ParameterType.STRING:
        return isinstance(value, str)
    elif type_ is ParameterType.BOOLEAN:
        return isinstance(value, bool)
    else:
        return isinstance(value, int | float) and not isinstance(value, bool)
