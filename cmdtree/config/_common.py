import errno
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from attrs import define, field

from cmdtree.command import Command
from cmdtree.parameter import Parameter
from cmdtree.utils import import_object, to_tuple_converter

_COMMAND_KEYS = frozenset(
    {"name", "help", "is_hidden", "topics", "help_subcommand", "parameters", "subcommands", "operation"}
)


def _resolve_operation(operation: str | Callable | None) -> Callable | None:
    if operation is None or callable(operation):
        return operation
    return import_object(operation)


def command_from_dict(data: Mapping[str, Any]) -> Command:
    """Build a :class:`~cmdtree.Command` tree from a nested configuration record.

    .. code-block:: python

        command_from_dict(
            {
                "name": "demo",
                "subcommands": [
                    {
                        "name": "say",
                        "operation": "demo.ops:say",
                        "parameters": [
                            {"name": "input", "max_cnt": 0, "required": True},
                            {"long": "repeat-count", "short": "n", "type": "number", "default": 1},
                        ],
                    },
                ],
            }
        )

    ``operation`` may be a callable or a ``"module:attribute"`` import string.
    Each entry of ``parameters`` holds the keyword arguments of :class:`~cmdtree.Parameter`.

    Raises
    ------
    ValueError
        If the record contains unknown keys or lacks a name.
    """
    unknown = set(data) - _COMMAND_KEYS
    if unknown:
        raise ValueError(f"Unknown command configuration key(s): {', '.join(sorted(unknown))}.")
    if "name" not in data:
        raise ValueError("name must be provided for a command")

    command = Command(
        data["name"],
        help=data.get("help"),
        is_hidden=bool(data.get("is_hidden", False)),
        topics=data.get("topics"),
        help_subcommand=bool(data.get("help_subcommand", True)),
    )
    command.add_parameters(Parameter(**p) for p in data.get("parameters", ()))
    command.add_subcommands(command_from_dict(x) for x in data.get("subcommands", ()))
    command.set_operation(_resolve_operation(data.get("operation")))
    return command


@define(kw_only=True)
class ConfigBase(ABC):
    """Base class for command-tree configuration sources."""

    root_keys: Iterable[str] = field(default=(), converter=to_tuple_converter)
    """Keys leading to the command record inside the loaded structure, e.g. ``("tool", "demo")``."""

    @property
    @abstractmethod
    def config(self) -> dict[str, Any]:
        """Return the configuration dictionary."""
        raise NotImplementedError

    @property
    @abstractmethod
    def source(self) -> str:
        """Return a string identifying the configuration source for error messages."""
        raise NotImplementedError

    def load(self) -> Command:
        """Build the configured command tree.

        Raises
        ------
        KeyError
            If a key of :attr:`root_keys` is missing.
        """
        config: Any = self.config
        for key in self.root_keys:
            try:
                config = config[key]
            except KeyError:
                raise KeyError(f'Missing key "{key}" in configuration from {self.source}.') from None
        return command_from_dict(config)


class FileCacheKey:
    """Abstraction to quickly check if a file needs to be read again.

    If a newly instantiated ``CacheKey`` doesn't equal a previously instantiated ``CacheKey``,
    then the file needs to be re-read.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).absolute()
        stat = self.path.stat()
        self._mtime = stat.st_mtime
        self._size = stat.st_size

    def __eq__(self, other):
        if not isinstance(other, type(self)):
            return False

        return self._mtime == other._mtime and self._size == other._size and self.path == other.path


@define
class ConfigFromFile(ConfigBase):
    """Configuration source that loads from a file, caching until the file changes."""

    path: str | Path = field(converter=Path)

    _config: dict[str, Any] | None = field(default=None, init=False, repr=False)
    "Loaded configuration structure (to be loaded by subclassed ``_load_config`` method)."

    _config_cache_key: FileCacheKey | None = field(default=None, init=False, repr=False)
    "Conditions under which ``_config`` was loaded."

    @abstractmethod
    def _load_config(self, path: Path) -> dict[str, Any]:
        """Load the config dictionary from path.

        Do **not** do any downstream caching; ``ConfigFromFile`` handles caching.

        Parameters
        ----------
        path: Path
            Path to the file. Guaranteed to exist.

        Returns
        -------
        dict
            Loaded configuration.
        """
        raise NotImplementedError

    @property
    def config(self) -> dict[str, Any]:
        assert isinstance(self.path, Path)
        path = self.path.expanduser()
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(self.path))

        cache_key = FileCacheKey(path)
        if self._config is not None and self._config_cache_key == cache_key:
            return self._config

        try:
            self._config = self._load_config(path)
        except Exception as e:
            msg = getattr(type(e), "__name__", "")
            if e.args:
                msg += f": {e.args[0]}"
            raise ValueError(f"Failed to load configuration from {self.source}. {msg}") from e
        self._config_cache_key = cache_key
        return self._config

    @property
    def source(self) -> str:
        assert isinstance(self.path, Path)
        return str(self.path.absolute())


@define
class Dict(ConfigBase):
    """Configuration source from an in-memory dictionary.

    Useful for programmatically generated configurations.
    """

    data: dict[str, Any]

    @property
    def config(self) -> dict[str, Any]:
        return self.data

    @property
    def source(self) -> str:
        return "dict"
