"""影像資訊讀取工具。"""

from __future__ import annotations

import io
from typing import Optional, Tuple

from PIL import Image


def get_image_dimensions(data: bytes, logger=None) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except Exception as exc:
        if logger is not None:
            logger.info(f"無法讀取解析度 ({exc})")
        return None
