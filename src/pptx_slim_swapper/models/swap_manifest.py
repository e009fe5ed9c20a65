"""一次 swap-out 產生的 manifest。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, List, Mapping

from .media_record import MediaRecord


@dataclass
class SwapManifest:
    created_at: datetime
    source_file_name: str
    records: List[MediaRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[MediaRecord]:
        return iter(self.records)

    def append(self, record: MediaRecord) -> None:
        if any(existing.id == record.id for existing in self.records):
            raise ValueError(f"重複的媒體 id: {record.id}")
        if any(existing.stored_path == record.stored_path for existing in self.records):
            raise ValueError(f"重複的儲存路徑: {record.stored_path}")
        self.records.append(record)

    def to_dict(self) -> dict[str, object]:
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.astimezone()
        return {
            "createdAt": created_at.isoformat(),
            "originalFileName": self.source_file_name,
            "mediaFiles": [record.to_dict() for record in self.records],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], created_at: datetime) -> "SwapManifest":
        media_files = payload.get("mediaFiles") or []
        if not isinstance(media_files, list):
            raise ValueError("mediaFiles 必須是陣列")
        manifest = cls(
            created_at=created_at,
            source_file_name=str(payload.get("originalFileName") or ""),
        )
        for item in media_files:
            if not isinstance(item, Mapping):
                raise ValueError("mediaFiles 項目必須是物件")
            manifest.append(MediaRecord.from_dict(item))
        return manifest
