"""執行結果摘要輸出。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


@dataclass
class SizeComparison:
    before_bytes: int
    after_bytes: int

    @property
    def delta_bytes(self) -> int:
        return self.after_bytes - self.before_bytes

    @property
    def reduction_percent(self) -> float:
        if self.before_bytes <= 0:
            return 0.0
        return (self.before_bytes - self.after_bytes) / self.before_bytes * 100


def format_file_size(size_bytes: int) -> str:
    value = float(size_bytes)
    order = 0
    while abs(value) >= 1024 and order < len(_SIZE_UNITS) - 1:
        order += 1
        value /= 1024
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[order]}"


def build_swap_out_lines(
    *,
    media_count: int,
    output_path: str,
    manifest_path: str,
    sizes: SizeComparison,
    elapsed_ms: Optional[int] = None,
) -> List[str]:
    lines: List[str] = []
    if elapsed_ms is not None:
        lines.append(f"Done in {elapsed_ms}ms")
    lines.extend(
        [
            f"Swapped media: {media_count}",
            f"Slim package: {output_path}",
            f"Manifest: {manifest_path}",
            "",
            f"Original size: {format_file_size(sizes.before_bytes)}",
            f"New size: {format_file_size(sizes.after_bytes)}",
            f"Reduction: {format_file_size(-sizes.delta_bytes)} ({sizes.reduction_percent:.2f}%)",
        ]
    )
    return lines


def build_swap_in_lines(
    *,
    restored_count: int,
    record_count: int,
    output_path: str,
    sizes: SizeComparison,
    skipped: int = 0,
    elapsed_ms: Optional[int] = None,
) -> List[str]:
    lines: List[str] = []
    if elapsed_ms is not None:
        lines.append(f"Done in {elapsed_ms}ms")
    lines.extend(
        [
            f"Restored media: {restored_count}/{record_count}",
            f"Skipped: {skipped}",
            f"Restored package: {output_path}",
            "",
            f"Slim size: {format_file_size(sizes.before_bytes)}",
            f"Restored size: {format_file_size(sizes.after_bytes)}",
            f"Increase: {format_file_size(sizes.delta_bytes)}",
        ]
    )
    return lines
