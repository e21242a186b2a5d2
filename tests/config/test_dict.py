import pytest

from cmdtree import Command, ParameterCollisionError
from cmdtree.config import Dict, command_from_dict


def test_command_from_dict():
    def operation(values):
        return values

    root = command_from_dict(
        {
            "name": "demo",
            "help": "demo application",
            "subcommands": [
                {
                    "name": "say",
                    "operation": operation,
                    "topics": "text",
                    "parameters": [{"name": "input", "max_cnt": 0}],
                }
            ],
        }
    )
    assert isinstance(root, Command)
    assert root.help == "demo application"
    assert root["say"].operation is operation
    assert root["say"].topics == ("text",)
    assert root["say"].positionals[0].is_unbounded


def test_command_from_dict_missing_name():
    with pytest.raises(ValueError, match="name must be provided"):
        command_from_dict({"help": "foo"})


def test_command_from_dict_unknown_key():
    with pytest.raises(ValueError, match="Unknown command configuration key"):
        command_from_dict({"name": "demo", "flags": []})


def test_command_from_dict_bad_operation():
    with pytest.raises(ValueError, match="module:attribute"):
        command_from_dict({"name": "demo", "operation": "not_an_import_string"})

    with pytest.raises(AttributeError):
        command_from_dict({"name": "demo", "operation": "os.path:does_not_exist"})


def test_command_from_dict_parameter_errors():
    with pytest.raises(ParameterCollisionError):
        command_from_dict({"name": "demo", "parameters": [{"long": "foo"}, {"long": "foo"}]})

    with pytest.raises(ValueError, match="invalid parameter type"):
        command_from_dict({"name": "demo", "parameters": [{"name": "foo", "type": "integer"}]})


def test_config_dict():
    config = Dict({"outer": {"name": "demo"}}, root_keys=["outer"])
    assert config.source == "dict"
    assert config.load().name == "demo"


def test_config_dict_missing_root_key():
    with pytest.raises(KeyError, match='Missing key "inner" in configuration from dict'):
        Dict({"outer": {}}, root_keys=["outer", "inner"]).load()
