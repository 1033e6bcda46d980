"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from core.ledger.facade import Ledger
from core.utils.timezone import now_utc
from web.dependencies import get_ledger
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
def health_check(ledger: Ledger = Depends(get_ledger)) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, version, 계정/분개 수
    """
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        timestamp=now_utc(),
        accounts=len(ledger.accounts),
        journals=len(ledger.journals.all_journals()),
    )
