import json
from pathlib import Path
from typing import Any

from cmdtree.config._common import ConfigFromFile


class Json(ConfigFromFile):
    def _load_config(self, path: Path) -> dict[str, Any]:
        with path.open() as f:
            return json.load(f)
