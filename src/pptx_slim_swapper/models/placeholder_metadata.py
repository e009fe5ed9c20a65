"""嵌入在佔位圖中的自我描述資訊。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .media_record import MediaKind


@dataclass(frozen=True)
class PlaceholderMetadata:
    id: str
    file_name: str
    content_type: str
    content_fingerprint: Optional[str] = None
    media_kind: Optional[MediaKind] = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": self.id,
            "originalFileName": self.file_name,
            "contentType": self.content_type,
        }
        if self.media_kind is not None:
            payload["mediaType"] = self.media_kind.value
        if self.content_fingerprint:
            payload["dataHash"] = self.content_fingerprint
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["PlaceholderMetadata"]:
        if not isinstance(payload, Mapping):
            return None
        record_id = payload.get("id")
        if not isinstance(record_id, str) or not record_id:
            return None
        try:
            media_kind = MediaKind(payload["mediaType"]) if payload.get("mediaType") else None
        except ValueError:
            media_kind = None
        fingerprint = payload.get("dataHash")
        return cls(
            id=record_id,
            file_name=str(payload.get("originalFileName") or ""),
            content_type=str(payload.get("contentType") or ""),
            content_fingerprint=str(fingerprint) if fingerprint else None,
            media_kind=media_kind,
        )
