"""
Ledger 예외 정의

도메인 객체는 예외를 발생시키고, 서비스/파사드 경계에서
LedgerResult로 변환하여 호출자에게 전달.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스

    Attributes:
        code: 에러 코드 (LedgerResult.error_code, HTTP 상태 매핑에 사용)
        errors: 항목별 에러 메시지 목록
    """

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors if errors else [message]


class ValidationError(LedgerError):
    """입력 검증 실패 (항목별 에러 목록 포함)"""

    code = "VALIDATION_ERROR"


class StateError(LedgerError):
    """허용되지 않은 상태 전이 (예: 전기된 분개 재전기)"""

    code = "STATE_ERROR"


class NotFoundError(LedgerError):
    """대상 엔티티 없음"""

    code = "NOT_FOUND"


class AccountNotFoundError(NotFoundError):
    """계정과목 없음"""

    code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_code: str, message: str | None = None) -> None:
        super().__init__(message or f"계정과목을 찾을 수 없습니다: {account_code}")
        self.account_code = account_code


class RuleNotFoundError(LedgerError):
    """거래에 일치하는 분개 생성 규칙 없음"""

    code = "RULE_NOT_FOUND"


class TransferLimitExceededError(LedgerError):
    """회계구분 간 이체 제한 위반"""

    code = "TRANSFER_LIMIT_EXCEEDED"


class ConsistencyError(LedgerError):
    """장부 정합성 오류 (시산표 불일치 등)"""

    code = "CONSISTENCY_ERROR"


class ImportPayloadError(LedgerError):
    """가져오기 페이로드 / 스냅샷 손상"""

    code = "IMPORT_PAYLOAD_ERROR"
