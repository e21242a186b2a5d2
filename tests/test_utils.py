import os.path

import pytest

from cmdtree.utils import flag_to_name, import_object, is_flag_like, normalize_tokens, to_tuple_converter


def test_to_tuple_converter():
    assert to_tuple_converter(None) == ()
    assert to_tuple_converter("foo") == ("foo",)
    assert to_tuple_converter(["foo", "bar"]) == ("foo", "bar")


@pytest.mark.parametrize(
    "token, expected",
    [
        ("-n", True),
        ("--repeat-count", True),
        ("-", True),
        ("-5", True),
        ("hello", False),
        ("", False),
    ],
)
def test_is_flag_like(token, expected):
    assert is_flag_like(token) is expected


def test_flag_to_name():
    assert flag_to_name("repeat-count") == "repeat_count"
    assert flag_to_name("verbose") == "verbose"


def test_normalize_tokens(monkeypatch):
    monkeypatch.setattr("sys.argv", ["prog", "a", "b"])
    assert normalize_tokens(None) == ["a", "b"]
    assert normalize_tokens('say "hello world" -n 2') == ["say", "hello world", "-n", "2"]
    assert normalize_tokens(("a", "b")) == ["a", "b"]


def test_import_object():
    assert import_object("os.path:join") is os.path.join
    assert import_object("os:path.join") is os.path.join


@pytest.mark.parametrize("path", ["os.path", ":join", "os.path:"])
def test_import_object_malformed(path):
    with pytest.raises(ValueError):
        import_object(path)


def test_import_object_missing():
    with pytest.raises(ImportError):
        import_object("does_not_exist_module:foo")
    with pytest.raises(AttributeError):
        import_object("os.path:does_not_exist")
