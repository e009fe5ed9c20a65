"""設定檔驗證邏輯。"""

from __future__ import annotations

from typing import Any

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    swap = config.get("swap", {})
    for key in (
        "manifest_file_name",
        "media_folder",
        "slim_suffix",
        "restored_suffix",
        "default_output_folder",
    ):
        value = swap.get(key)
        if not isinstance(value, str) or not value.strip():
            add_error(f"swap.{key}", "必須是非空字串")
    if swap.get("slim_suffix") and swap.get("slim_suffix") == swap.get("restored_suffix"):
        add_error("swap", "slim_suffix 與 restored_suffix 不可相同")

    placeholder = config.get("placeholder", {})
    width = placeholder.get("width")
    height = placeholder.get("height")
    draw_label = placeholder.get("draw_label", True)
    if not isinstance(width, int) or isinstance(width, bool) or not (1 <= width <= 4096):
        add_error("placeholder.width", "必須是 1 到 4096 的整數")
    if not isinstance(height, int) or isinstance(height, bool) or not (1 <= height <= 4096):
        add_error("placeholder.height", "必須是 1 到 4096 的整數")
    if not isinstance(draw_label, bool):
        add_error("placeholder.draw_label", "必須是布林值")

    matching = config.get("matching", {})
    for key in ("metadata_fallback", "name_fallback", "verify_fingerprint"):
        if not isinstance(matching.get(key, True), bool):
            add_error(f"matching.{key}", "必須是布林值")

    hash_config = config.get("hash", {})
    chunk_size_kb = hash_config.get("chunk_size_kb")
    if not isinstance(chunk_size_kb, int) or chunk_size_kb <= 0:
        add_error("hash.chunk_size_kb", "必須是正整數")

    extensions = config.get("content_type_extensions", {})
    if not isinstance(extensions, dict):
        add_error("content_type_extensions", "必須是物件")
    else:
        for content_type, ext in extensions.items():
            if not isinstance(ext, str) or not ext.startswith("."):
                add_error(f"content_type_extensions.{content_type}", "副檔名必須以 . 開頭")

    logging_config = config.get("logging", {})
    level = logging_config.get("level", "INFO")
    error_log = logging_config.get("error_log")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        add_error("logging.level", "必須是 DEBUG/INFO/WARNING/ERROR/CRITICAL")
    if error_log is not None and not isinstance(error_log, str):
        add_error("logging.error_log", "必須是字串或 null")

    return errors
