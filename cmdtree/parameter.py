from typing import Any

import attrs
from attrs import field, frozen

from cmdtree._convert import ParameterType, convert, is_instance_of
from cmdtree.utils import flag_to_name


def _type_converter(value: str | ParameterType | None) -> ParameterType:
    if value is None:
        return ParameterType.STRING
    try:
        return ParameterType(value)
    except ValueError:
        choices = ", ".join(repr(x.value) for x in ParameterType)
        raise ValueError(f"invalid parameter type: {value!r}. Must be one of {choices}.") from None


def _short_validator(instance, attribute, value):
    if value is not None and len(value) != 1:
        raise ValueError(f"short flag has more than one letter (-{value})")


def _not_hyphen_validator(instance, attribute, value):
    if value is not None and value.startswith("-"):
        raise ValueError(f'{attribute.alias} value must NOT start with "-".')


@frozen(kw_only=True)
class Parameter:
    """A single argument slot of a :class:`~cmdtree.Command`.

    A parameter with a ``long`` and/or ``short`` spelling is a *flag*; otherwise it is a *positional*.

    .. code-block:: python

        from cmdtree import Parameter

        Parameter(long="repeat-count", short="n", type="number", default=1)
        Parameter(name="input", max_cnt=0, required=True)
    """

    name: str | None = field(default=None)
    """Key in the resulting value map. Defaults to ``long`` with hyphens replaced by underscores."""

    long: str | None = field(default=None, validator=_not_hyphen_validator)
    """Long flag spelling, without the leading ``--``."""

    short: str | None = field(default=None, validator=[_short_validator, _not_hyphen_validator])
    """Single character short flag spelling, without the leading ``-``."""

    required: bool = field(default=False, converter=attrs.converters.default_if_none(False))

    type: ParameterType = field(default=ParameterType.STRING, converter=_type_converter)

    help: str | None = field(default=None)

    default: Any = field(default=None)

    max_cnt: int = field(default=1, converter=attrs.converters.default_if_none(1))
    """Maximum number of times this parameter may be supplied.

    ``1`` binds a scalar; ``> 1`` binds a bounded list; ``<= 0`` binds an unbounded list.
    """

    def __attrs_post_init__(self):
        if not self.name:
            if not self.long:
                raise ValueError("parameter must have a name or long flag name.")
            # Circumvent frozen protection.
            object.__setattr__(self, "name", flag_to_name(self.long))

        if self.default is not None and not is_instance_of(self.type, self.default):
            raise TypeError(
                f"{self.name!r}: type of default value ({type(self.default).__name__}) "
                f"doesn't match parameter type ({self.type})"
            )

    @property
    def is_flag(self) -> bool:
        return self.long is not None or self.short is not None

    @property
    def is_positional(self) -> bool:
        return not self.is_flag

    @property
    def is_repeatable(self) -> bool:
        return self.max_cnt != 1

    @property
    def is_unbounded(self) -> bool:
        return self.max_cnt <= 0

    @property
    def flags(self) -> tuple[str, ...]:
        """Flag keys this parameter is registered under, long spelling first."""
        out = []
        if self.long is not None:
            out.append("--" + self.long)
        if self.short is not None:
            out.append("-" + self.short)
        return tuple(out)

    @property
    def display_name(self) -> str:
        """Most descriptive CLI spelling; the long flag, short flag, or positional name."""
        return self.flags[0] if self.flags else self.name  # pyright: ignore[reportReturnType]

    def convert(self, value: str | None) -> Any:
        """Convert a raw token according to :attr:`type`.

        Raises
        ------
        ValueError
            If conversion failed.
        """
        return convert(self.type, value)

    def default_value(self) -> Any:
        """Initial value-map entry before any token is consumed."""
        return [] if self.is_repeatable else self.default

    def __str__(self):
        buffer = [self.name]  # pyright: ignore[reportAssignmentType]

        if not self.required:
            buffer.append("?")

        if self.short and self.long:
            buffer.append(f" (-{self.short}, --{self.long})")
        elif self.short:
            buffer.append(f" (-{self.short})")
        elif self.long:
            buffer.append(f" (--{self.long})")

        buffer.append(f": {self.type}")

        if self.max_cnt > 1:
            buffer.append(f", max_repeat({self.max_cnt})")
        elif self.max_cnt <= 0:
            buffer.append(", max_repeat(Inf)")

        return "".join(buffer)
