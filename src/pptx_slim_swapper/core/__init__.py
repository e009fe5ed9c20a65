"""核心流程模組。"""

from . import placeholder
from .errors import (
    ManifestFormatError,
    ManifestNotFoundError,
    PackageFormatError,
    PackageNotFoundError,
    SwapError,
)
from .manifest import load_manifest, new_manifest, write_manifest
from .matcher import MatchResult, MatchStrategy, MediaMatcher
from .package import MediaLocation, MediaPackage, unique_locations
from .placeholder import PlaceholderGenerator
from .swap_in import SwapInRunner
from .swap_out import SwapOutRunner

__all__ = [
    "placeholder",
    "ManifestFormatError",
    "ManifestNotFoundError",
    "PackageFormatError",
    "PackageNotFoundError",
    "SwapError",
    "load_manifest",
    "new_manifest",
    "write_manifest",
    "MatchResult",
    "MatchStrategy",
    "MediaMatcher",
    "MediaLocation",
    "MediaPackage",
    "unique_locations",
    "PlaceholderGenerator",
    "SwapInRunner",
    "SwapOutRunner",
]
