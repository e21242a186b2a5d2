__all__ = [
    "ConfigFromFile",
    "Dict",
    "Json",
    "Toml",
    "Yaml",
    "command_from_dict",
]

from cmdtree.config._common import ConfigFromFile, Dict, command_from_dict
from cmdtree.config._json import Json
from cmdtree.config._toml import Toml
from cmdtree.config._yaml import Yaml
