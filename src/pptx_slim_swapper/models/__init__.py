"""資料模型模組。"""

from .error_record import ErrorLevel, ProcessError
from .media_record import ImageDimensions, MediaKind, MediaRecord
from .placeholder_metadata import PlaceholderMetadata
from .swap_manifest import SwapManifest
from .swap_result import SwapInResult, SwapOutResult

__all__ = [
    "ErrorLevel",
    "ProcessError",
    "ImageDimensions",
    "MediaKind",
    "MediaRecord",
    "PlaceholderMetadata",
    "SwapManifest",
    "SwapInResult",
    "SwapOutResult",
]
