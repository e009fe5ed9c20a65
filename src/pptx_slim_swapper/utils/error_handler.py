"""錯誤收集與報告工具。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..models.error_record import ErrorLevel, ProcessError


@dataclass
class ErrorHandler:
    """集中管理單次 swap 的錯誤與警告。"""

    errors: List[ProcessError] = field(default_factory=list)

    def add(self, error: ProcessError) -> None:
        self.errors.append(error)

    def add_warning(
        self,
        code: str,
        message: str,
        record_id: Optional[str] = None,
        location_reference: Optional[str] = None,
    ) -> None:
        self.add(
            ProcessError(
                code=code,
                level=ErrorLevel.RECOVERABLE,
                message=message,
                record_id=record_id,
                location_reference=location_reference,
            )
        )

    def get_by_level(self, level: ErrorLevel) -> List[ProcessError]:
        return [error for error in self.errors if error.level == level]

    def get_by_code(self, code: str) -> List[ProcessError]:
        return [error for error in self.errors if error.code == code]

    def has_warnings(self) -> bool:
        return bool(self.get_by_level(ErrorLevel.RECOVERABLE))

    def to_dicts(self) -> List[dict[str, object]]:
        return [error.to_dict() for error in self.errors]
