"""
LedgerResult → HTTP 응답 변환

에러 코드별 상태 코드:
- 422: 검증 실패, 규칙 없음, 구분 간 이체 제한
- 409: 상태 전이 불가
- 404: 분개, 계정과목 등 대상 없음
- 500: 장부 정합성 오류
- 400: 가져오기 페이로드 손상
"""

from fastapi import HTTPException

from core.ledger.errors import LedgerError
from core.ledger.results import LedgerResult

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 422,
    "RULE_NOT_FOUND": 422,
    "TRANSFER_LIMIT_EXCEEDED": 422,
    "STATE_ERROR": 409,
    "NOT_FOUND": 404,
    "ACCOUNT_NOT_FOUND": 404,
    "CONSISTENCY_ERROR": 500,
    "IMPORT_PAYLOAD_ERROR": 400,
}


def status_for(error_code: str | None) -> int:
    return STATUS_BY_ERROR_CODE.get(error_code or "", 400)


def ensure_success(result: LedgerResult) -> LedgerResult:
    """실패 결과면 HTTPException 발생

    Raises:
        HTTPException: detail에 errors, errorCode
    """
    if not result.success:
        raise HTTPException(
            status_code=status_for(result.error_code),
            detail={"errors": result.errors, "errorCode": result.error_code},
        )
    return result


def http_error(error: LedgerError) -> HTTPException:
    return HTTPException(
        status_code=status_for(error.code),
        detail={"errors": error.errors, "errorCode": error.code},
    )
