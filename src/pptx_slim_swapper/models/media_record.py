"""單一被替換媒體的記錄。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["ImageDimensions"]:
        if not isinstance(payload, Mapping):
            return None
        width = payload.get("width")
        height = payload.get("height")
        if not isinstance(width, int) or not isinstance(height, int):
            return None
        return cls(width=width, height=height)


@dataclass
class MediaRecord:
    """manifest 中的一筆媒體記錄，欄位名稱需與 JSON schema 一致。"""

    id: str
    original_file_name: str
    media_kind: MediaKind
    content_type: str
    original_size_bytes: int
    location_reference: str
    stored_path: str
    content_fingerprint: Optional[str] = None
    dimensions: Optional[ImageDimensions] = None

    @property
    def file_stem(self) -> str:
        name = self.original_file_name
        stem, dot, _ = name.rpartition(".")
        return stem if dot and stem else name

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "originalFileName": self.original_file_name,
            "mediaType": self.media_kind.value,
            "contentType": self.content_type,
            "originalSize": self.original_size_bytes,
            "partUri": self.location_reference,
            "savedFilePath": self.stored_path,
            "dataHash": self.content_fingerprint,
            "imageDimensions": self.dimensions.to_dict() if self.dimensions else None,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MediaRecord":
        """由 manifest JSON 建立記錄；缺少必要欄位時丟出 ``KeyError``/``ValueError``。"""
        record_id = payload["id"]
        stored_path = payload["savedFilePath"]
        if not isinstance(record_id, str) or not record_id:
            raise ValueError("id 必須是非空字串")
        if not isinstance(stored_path, str) or not stored_path:
            raise ValueError("savedFilePath 必須是非空字串")

        fingerprint = payload.get("dataHash")
        return cls(
            id=record_id,
            original_file_name=str(payload.get("originalFileName") or ""),
            media_kind=MediaKind(payload["mediaType"]),
            content_type=str(payload.get("contentType") or ""),
            original_size_bytes=int(payload.get("originalSize") or 0),
            location_reference=str(payload.get("partUri") or ""),
            stored_path=stored_path,
            content_fingerprint=str(fingerprint) if fingerprint else None,
            dimensions=ImageDimensions.from_dict(payload.get("imageDimensions")),
        )
