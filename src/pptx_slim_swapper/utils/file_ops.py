"""檔案操作工具。"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

from .logger import get_logger


def derive_output_path(input_path: Path, output_dir: Path, suffix: str) -> Path:
    return output_dir / f"{input_path.stem}{suffix}{input_path.suffix}"


def copy_file(src_path: Path, dst_path: Path) -> Path:
    dst_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src_path, dst_path)
    return dst_path


def write_bytes_atomic(path: Path, data: bytes) -> None:
    temp_path = path.with_name(f"{path.name}.tmp")
    with temp_path.open("wb") as handle:
        handle.write(data)
    temp_path.replace(path)


def write_text_atomic(path: Path, text: str) -> None:
    temp_path = path.with_name(f"{path.name}.tmp")
    with temp_path.open("w", encoding="utf-8") as handle:
        handle.write(text)
    temp_path.replace(path)


def remove_quietly(path: Path, logger=None) -> bool:
    op_logger = logger or get_logger("FileOps")
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as exc:
        op_logger.warning(f"無法刪除檔案: {path} ({exc})")
        return False


def file_size(path: Path) -> Optional[int]:
    try:
        return path.stat().st_size
    except OSError:
        return None
