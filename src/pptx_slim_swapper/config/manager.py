"""設定管理器。

設定分三層：內建預設、使用者 JSON 檔、執行期 ``set``。
讀取時由上層往下層合併，巢狀 key 以 ``.`` 分隔（例如 ``swap.media_folder``）。
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional

from . import defaults
from .schema import validate_config


def _merge(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in layer.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = _merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _lookup(tree: dict[str, Any], dotted_key: str) -> tuple[bool, Any]:
    node: Any = tree
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node


class ConfigManager:
    """三層設定管理：預設、使用者、執行期。"""

    def __init__(self, user_config_path: Optional[Path] = None) -> None:
        self.user_config_path = Path(user_config_path) if user_config_path else None
        self._defaults = copy.deepcopy(defaults.DEFAULT_CONFIG)
        self._user = self._read_user_layer(self.user_config_path)
        self._runtime: dict[str, Any] = {}
        self._effective = self._rebuild()

    @staticmethod
    def _read_user_layer(path: Optional[Path]) -> dict[str, Any]:
        if path is None or not path.exists():
            return {}
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"設定檔必須是 JSON 物件: {path}")
        return payload

    def _rebuild(self) -> dict[str, Any]:
        return _merge(_merge(self._defaults, self._user), self._runtime)

    def get(self, key: str, default: Any = None) -> Any:
        found, value = _lookup(self._effective, key)
        return value if found else default

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node = self._runtime
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
        self._effective = self._rebuild()

    # -- swap 路徑相關 -------------------------------------------------------

    def manifest_path(self, folder: Path) -> Path:
        return Path(folder) / str(self.get("swap.manifest_file_name"))

    def media_dir(self, output_dir: Path) -> Path:
        return Path(output_dir) / str(self.get("swap.media_folder"))

    def extension_for(self, content_type: str) -> str:
        mapping = self.get("content_type_extensions") or {}
        return mapping.get(content_type.lower(), defaults.FALLBACK_EXTENSION)

    # -- 驗證 ---------------------------------------------------------------

    def validate_config(self) -> list[str]:
        return validate_config(self._effective)
