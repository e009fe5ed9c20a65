"""Content fingerprint helpers."""

from __future__ import annotations

import base64
import hashlib
from pathlib import Path
from typing import Optional


def compute_fingerprint(data: bytes) -> str:
    """SHA-256 of the exact bytes, rendered as standard base64."""
    digest = hashlib.sha256(data).digest()
    return base64.b64encode(digest).decode("ascii")


def compute_file_fingerprint(
    path: Path,
    chunk_size_kb: int = 1024,
    logger=None,
) -> Optional[str]:
    hasher = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(chunk_size_kb * 1024)
                if not chunk:
                    break
                hasher.update(chunk)
    except OSError as exc:
        if logger is not None:
            logger.warning(f"無法計算 fingerprint: {path} ({exc})")
        return None
    return base64.b64encode(hasher.digest()).decode("ascii")


def fingerprints_match(expected: Optional[str], actual: Optional[str]) -> bool:
    if not expected or not actual:
        return True
    return expected == actual
