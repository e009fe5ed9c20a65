"""Manifest writer and reader."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from ..models import SwapManifest
from ..utils import file_ops, time_utils
from .errors import ManifestFormatError, ManifestNotFoundError


def new_manifest(source_path: Path) -> SwapManifest:
    return SwapManifest(
        created_at=datetime.now().astimezone(),
        source_file_name=Path(source_path).name,
    )


def write_manifest(manifest_path: Path, manifest: SwapManifest) -> Path:
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2)
    file_ops.write_text_atomic(manifest_path, text + "\n")
    return manifest_path


def load_manifest(manifest_path: Path) -> SwapManifest:
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"找不到 manifest: {manifest_path}")

    try:
        with manifest_path.open("r", encoding="utf-8-sig") as handle:
            payload = json.load(handle)
    except (OSError, ValueError, RecursionError) as exc:
        raise ManifestFormatError(f"manifest 讀取失敗: {manifest_path} ({exc})") from exc

    if not isinstance(payload, dict):
        raise ManifestFormatError(f"manifest 必須是 JSON 物件: {manifest_path}")

    created_at = time_utils.parse_iso_timestamp(str(payload.get("createdAt") or ""))
    if created_at is None:
        raise ManifestFormatError(f"createdAt 格式錯誤: {payload.get('createdAt')!r}")

    try:
        return SwapManifest.from_dict(payload, created_at=created_at)
    except (KeyError, TypeError, ValueError) as exc:
        raise ManifestFormatError(f"manifest 內容錯誤: {manifest_path} ({exc})") from exc
