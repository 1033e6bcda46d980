"""
분개 라우트

분개 생성/조회/수정/전기/승인/취소/삭제 API
"""

from fastapi import APIRouter, Depends, Path, Query

from core.ledger.errors import NotFoundError
from core.ledger.facade import Ledger
from core.ledger.payloads import JournalRecord
from core.ledger.types import JournalStatus
from web.dependencies import get_ledger
from web.errors import ensure_success, http_error
from web.models.requests import (
    JournalCancelRequest,
    JournalCreateRequest,
    JournalUpdateRequest,
)
from web.models.responses import JournalListResponse, JournalResultResponse, encode

router = APIRouter(prefix="/api/journals", tags=["Journals"])

WEB_ACTOR = "web:admin"


@router.get("", response_model=JournalListResponse)
def list_journals(
    status: JournalStatus | None = Query(default=None, description="상태 필터"),
    division: str | None = Query(default=None, description="회계구분"),
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    account_code: str | None = Query(default=None, description="계정 코드 포함 분개"),
    tag: str | None = Query(default=None, description="태그"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalListResponse:
    """분개 목록 (일자, 번호 순)"""
    journals = ledger.journals.list_journals(
        status=status,
        division=division,
        date_from=date_from,
        date_to=date_to,
        account_code=account_code,
        tag=tag,
    )
    return JournalListResponse(
        items=[JournalRecord.from_domain(j) for j in journals],
        total=len(journals),
    )


@router.get("/summary")
def journal_summary(ledger: Ledger = Depends(get_ledger)) -> dict:
    """상태별 분개 건수"""
    return encode(ledger.journals.summary())


@router.get("/{journal_id}", response_model=JournalRecord)
def get_journal(
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalRecord:
    """분개 상세"""
    try:
        journal = ledger.journals.require_journal(journal_id)
    except NotFoundError as e:
        raise http_error(e) from e
    return JournalRecord.from_domain(journal)


@router.post("", response_model=JournalResultResponse, status_code=201)
def create_journal(
    request: JournalCreateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """분개 생성 (autoPost=true면 즉시 전기)

    전기 단계에서 실패하면 DRAFT 분개는 남고 실패 응답을 반환한다.
    """
    result = ledger.create_journal(
        request.to_domain(), auto_post=request.auto_post, actor=WEB_ACTOR
    )
    return JournalResultResponse.from_result(ensure_success(result))


@router.patch("/{journal_id}", response_model=JournalResultResponse)
def update_journal(
    request: JournalUpdateRequest,
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """DRAFT 분개 수정"""
    result = ledger.update_journal(journal_id, request.to_domain())
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/{journal_id}/post", response_model=JournalResultResponse)
def post_journal(
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """분개 전기"""
    result = ledger.post_journal_by_id(journal_id, actor=WEB_ACTOR)
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/{journal_id}/submit", response_model=JournalResultResponse)
def submit_journal(
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """승인 요청"""
    result = ledger.submit_journal(journal_id, actor=WEB_ACTOR)
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/{journal_id}/approve", response_model=JournalResultResponse)
def approve_journal(
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """승인"""
    result = ledger.approve_journal(journal_id, actor=WEB_ACTOR)
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/{journal_id}/cancel", response_model=JournalResultResponse)
def cancel_journal(
    request: JournalCancelRequest,
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """분개 취소 (전기된 분개는 역기록)"""
    result = ledger.cancel_journal(journal_id, request.reason, actor=WEB_ACTOR)
    return JournalResultResponse.from_result(ensure_success(result))


@router.delete("/{journal_id}", response_model=JournalResultResponse)
def delete_journal(
    journal_id: str = Path(..., description="분개 ID"),
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """DRAFT 분개 삭제"""
    result = ledger.delete_journal(journal_id)
    return JournalResultResponse.from_result(ensure_success(result))
