"""swap-out / swap-in 的執行結果。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .error_record import ProcessError
from .swap_manifest import SwapManifest


@dataclass
class SwapOutResult:
    output_path: Path
    manifest_path: Path
    media_count: int
    original_size_bytes: int
    slim_size_bytes: int
    manifest: SwapManifest


@dataclass
class SwapInResult:
    output_path: Path
    restored_count: int
    record_count: int
    slim_size_bytes: int
    restored_size_bytes: int
    skipped: List[ProcessError] = field(default_factory=list)
