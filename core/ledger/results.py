"""
서비스 결과 타입

서비스/파사드 경계에서 도메인 예외를 LedgerResult로 변환.
호출자는 errors 목록으로 항목별 메시지를 표시하고,
error_code로 에러 종류를 구분한다.
"""

from dataclasses import dataclass, field
from typing import Any

from core.ledger.errors import LedgerError
from core.ledger.journal import Journal


@dataclass
class LedgerResult:
    """서비스 작업 결과"""

    success: bool
    journal: Journal | None = None
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None
    data: Any = None

    @classmethod
    def ok(cls, journal: Journal | None = None, data: Any = None) -> "LedgerResult":
        return cls(success=True, journal=journal, data=data)

    @classmethod
    def fail(cls, error: LedgerError) -> "LedgerResult":
        return cls(success=False, errors=list(error.errors), error_code=error.code)
