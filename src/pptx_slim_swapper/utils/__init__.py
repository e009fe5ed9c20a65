"""工具模組。"""

from . import file_ops, hash_calc, image_utils, png_chunks, reporting, time_utils

__all__ = ["file_ops", "hash_calc", "image_utils", "png_chunks", "reporting", "time_utils"]
