"""swap-in 時找出 manifest 記錄對應的套件位置。

依序嘗試：
1. part 參照完全相同
2. 佔位圖內嵌 metadata 的 id 相同
3. content type 相同且檔名包含原始檔名主幹（不分大小寫）

第 3 種只是最後手段，多個同類型、相似檔名的媒體可能會配錯。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..config import ConfigManager
from ..models import MediaKind, MediaRecord, PlaceholderMetadata
from ..utils.logger import get_logger
from . import placeholder
from .package import MediaLocation, MediaPackage


class MatchStrategy(str, Enum):
    LOCATION = "location"
    METADATA = "metadata"
    NAME = "name"


@dataclass(frozen=True)
class MatchResult:
    location: MediaLocation
    strategy: MatchStrategy


class MediaMatcher:
    def __init__(self, package: MediaPackage, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.package = package
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self._locations: Dict[MediaKind, List[MediaLocation]] = {
            kind: package.media_locations(kind) for kind in MediaKind
        }
        self._claimed: set[str] = set()
        self._metadata_cache: Dict[str, Optional[PlaceholderMetadata]] = {}

    def candidates(self, kind: MediaKind) -> List[MediaLocation]:
        return [
            location
            for location in self._locations.get(kind, [])
            if location.part_uri not in self._claimed
        ]

    def claim(self, location: MediaLocation) -> None:
        self._claimed.add(location.part_uri)
        self._metadata_cache.pop(location.part_uri, None)

    def match(self, record: MediaRecord) -> Optional[MatchResult]:
        candidates = self.candidates(record.media_kind)

        location = self._match_location(record, candidates)
        if location is not None:
            return MatchResult(location, MatchStrategy.LOCATION)

        if self.config.get("matching.metadata_fallback", True):
            location = self._match_metadata(record, candidates)
            if location is not None:
                return MatchResult(location, MatchStrategy.METADATA)

        if self.config.get("matching.name_fallback", True):
            location = self._match_name(record, candidates)
            if location is not None:
                return MatchResult(location, MatchStrategy.NAME)

        return None

    def _match_location(
        self, record: MediaRecord, candidates: List[MediaLocation]
    ) -> Optional[MediaLocation]:
        for location in candidates:
            if location.part_uri != record.location_reference:
                continue
            # 參照相同但佔位圖屬於另一筆記錄，表示 part 已被重新編號
            if self._belongs_to_other(location, record):
                self.logger.info(f"參照相同但 metadata 不符，改用其他策略: {location.part_uri}")
                return None
            return location
        return None

    def _match_metadata(
        self, record: MediaRecord, candidates: List[MediaLocation]
    ) -> Optional[MediaLocation]:
        for location in candidates:
            metadata = self._metadata(location)
            if metadata is None or metadata.id != record.id:
                continue
            if (
                metadata.content_fingerprint
                and record.content_fingerprint
                and metadata.content_fingerprint != record.content_fingerprint
            ):
                self.logger.warning(f"佔位圖 fingerprint 與 manifest 不一致: {record.id}")
            return location
        return None

    def _match_name(
        self, record: MediaRecord, candidates: List[MediaLocation]
    ) -> Optional[MediaLocation]:
        stem = record.file_stem.lower()
        if not stem:
            return None
        for location in candidates:
            if location.content_type != record.content_type:
                continue
            if self._belongs_to_other(location, record):
                continue
            if stem in location.file_name.lower():
                return location
        return None

    def _belongs_to_other(self, location: MediaLocation, record: MediaRecord) -> bool:
        metadata = self._metadata(location)
        return metadata is not None and metadata.id != record.id

    def _metadata(self, location: MediaLocation) -> Optional[PlaceholderMetadata]:
        if location.part_uri not in self._metadata_cache:
            self._metadata_cache[location.part_uri] = placeholder.decode(
                self.package.read_part(location.part_uri)
            )
        return self._metadata_cache[location.part_uri]
