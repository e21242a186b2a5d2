import attrs
import pytest

from cmdtree import Parameter, ParameterType


def test_parameter_name_from_long():
    p = Parameter(long="repeat-count", short="n")
    assert p.name == "repeat_count"
    assert p.flags == ("--repeat-count", "-n")
    assert p.is_flag
    assert not p.is_positional


def test_parameter_explicit_name_wins():
    p = Parameter(name="count", long="repeat-count")
    assert p.name == "count"


def test_parameter_positional():
    p = Parameter(name="input")
    assert p.is_positional
    assert p.flags == ()
    assert p.display_name == "input"


def test_parameter_short_only_is_flag():
    p = Parameter(name="verbose", short="v", type="boolean")
    assert p.is_flag
    assert p.flags == ("-v",)
    assert p.display_name == "-v"


def test_parameter_defaults():
    p = Parameter(name="input")
    assert p.type is ParameterType.STRING
    assert p.required is False
    assert p.default is None
    assert p.max_cnt == 1
    assert not p.is_repeatable


def test_parameter_none_config_values_use_defaults():
    p = Parameter(name="input", required=None, type=None, max_cnt=None)  # pyright: ignore[reportArgumentType]
    assert p.required is False
    assert p.type is ParameterType.STRING
    assert p.max_cnt == 1


def test_parameter_missing_name():
    with pytest.raises(ValueError, match="must have a name"):
        Parameter()

    with pytest.raises(ValueError, match="must have a name"):
        Parameter(short="n")


def test_parameter_short_too_long():
    with pytest.raises(ValueError, match="more than one letter"):
        Parameter(long="repeat-count", short="nn")


def test_parameter_flag_with_hyphen():
    with pytest.raises(ValueError):
        Parameter(long="--repeat-count")


def test_parameter_invalid_type():
    with pytest.raises(ValueError, match="invalid parameter type"):
        Parameter(name="input", type="integer")  # pyright: ignore[reportArgumentType]


@pytest.mark.parametrize(
    "type_, default",
    [
        ("string", 1),
        ("number", "1"),
        ("number", True),
        ("boolean", 1),
    ],
)
def test_parameter_default_type_mismatch(type_, default):
    with pytest.raises(TypeError, match="doesn't match parameter type"):
        Parameter(name="foo", type=type_, default=default)


@pytest.mark.parametrize(
    "type_, default",
    [
        ("string", "a"),
        ("number", 1),
        ("number", 1.5),
        ("boolean", False),
    ],
)
def test_parameter_default_type_match(type_, default):
    assert Parameter(name="foo", type=type_, default=default).default == default


def test_parameter_is_immutable():
    p = Parameter(name="input")
    with pytest.raises(attrs.exceptions.FrozenInstanceError):
        p.name = "other"  # pyright: ignore[reportAttributeAccessIssue]


def test_parameter_repeatable():
    assert Parameter(name="a", max_cnt=2).is_repeatable
    assert not Parameter(name="a", max_cnt=2).is_unbounded
    assert Parameter(name="a", max_cnt=0).is_unbounded
    assert Parameter(name="a", max_cnt=-1).is_unbounded


def test_parameter_default_value():
    assert Parameter(name="a", max_cnt=0, default="x").default_value() == []
    assert Parameter(name="a", default="x").default_value() == "x"


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"name": "input", "max_cnt": 0, "required": True}, "input: string, max_repeat(Inf)"),
        ({"name": "input"}, "input?: string"),
        ({"long": "repeat-count", "short": "n", "type": "number"}, "repeat_count? (-n, --repeat-count): number"),
        ({"long": "repeat-count", "type": "number", "required": True}, "repeat_count (--repeat-count): number"),
        ({"name": "verbose", "short": "v", "type": "boolean"}, "verbose? (-v): boolean"),
        ({"long": "tag", "max_cnt": 3}, "tag? (--tag): string, max_repeat(3)"),
    ],
)
def test_parameter_str(kwargs, expected):
    assert str(Parameter(**kwargs)) == expected
