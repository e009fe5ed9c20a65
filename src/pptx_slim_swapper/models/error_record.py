"""swap 過程中的錯誤與警告記錄。"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class ErrorLevel(str, Enum):
    INFO = "I"
    RECOVERABLE = "W"
    FATAL = "E"


@dataclass
class ProcessError:
    """單筆記錄的處理問題；``record_id`` / ``location_reference`` 指向 manifest 記錄。"""

    code: str
    level: ErrorLevel
    message: str
    record_id: Optional[str] = None
    location_reference: Optional[str] = None

    def describe(self) -> str:
        target = self.location_reference or self.record_id or "-"
        return f"[{self.level.value}] {self.code} {target}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["level"] = self.level.value
        return payload
