"""
계정과목 / 회계구분 / 보조원장 라우트
"""

from fastapi import APIRouter, Depends, Path, Query

from core.ledger.errors import LedgerError
from core.ledger.facade import Ledger
from core.ledger.payloads import AccountRecord
from core.ledger.types import AccountType, DivisionCode
from web.dependencies import get_ledger
from web.errors import ensure_success, http_error
from web.models.responses import (
    AccountLedgerResponse,
    AccountListResponse,
    DivisionResponse,
    encode,
)

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.get("/accounts", response_model=AccountListResponse)
def list_accounts(
    type: AccountType | None = Query(default=None, description="계정 유형"),
    division: DivisionCode | None = Query(default=None, description="회계구분"),
    is_active: bool | None = Query(default=None, description="활성 여부"),
    is_postable: bool | None = Query(default=None, description="전기 가능 여부"),
    parent_code: str | None = Query(default=None, description="상위 계정"),
    ledger: Ledger = Depends(get_ledger),
) -> AccountListResponse:
    """계정과목 목록 (표시 순서)"""
    accounts = ledger.accounts.list(
        account_type=type,
        division=division,
        is_active=is_active,
        is_postable=is_postable,
        parent_code=parent_code,
    )
    return AccountListResponse(
        items=[AccountRecord.from_domain(a) for a in accounts],
        total=len(accounts),
    )


@router.put("/accounts/{code}", response_model=AccountRecord)
def upsert_account(
    request: AccountRecord,
    code: str = Path(..., description="계정 코드"),
    ledger: Ledger = Depends(get_ledger),
) -> AccountRecord:
    """계정과목 등록/갱신 (경로 코드 우선)"""
    try:
        account = ledger.accounts.upsert(request.model_copy(update={"code": code}).to_domain())
    except LedgerError as e:
        raise http_error(e) from e
    return AccountRecord.from_domain(account)


@router.get("/accounts/{code}", response_model=AccountRecord)
def get_account(
    code: str = Path(..., description="계정 코드"),
    ledger: Ledger = Depends(get_ledger),
) -> AccountRecord:
    """계정과목 상세"""
    try:
        account = ledger.accounts.require(code)
    except LedgerError as e:
        raise http_error(e) from e
    return AccountRecord.from_domain(account)


@router.get("/accounts/{code}/ledger", response_model=AccountLedgerResponse)
def get_account_ledger(
    code: str = Path(..., description="계정 코드"),
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    ledger: Ledger = Depends(get_ledger),
) -> AccountLedgerResponse:
    """계정별 원장 (잔액 누계)"""
    result = ensure_success(ledger.get_account_ledger(code, date_from, date_to))
    return AccountLedgerResponse.model_validate(result.data)


@router.get("/divisions", response_model=list[DivisionResponse])
def list_divisions(ledger: Ledger = Depends(get_ledger)) -> list[DivisionResponse]:
    """회계구분 목록 (설정 및 잔액)"""
    return [
        DivisionResponse(
            code=d.code,
            name=d.name,
            description=d.description,
            is_required=d.is_required,
            is_restricted=d.is_restricted,
            require_approval=d.require_approval,
            transfer_limits=dict(d.transfer_limits),
            default_accounts=dict(d.default_accounts),
            balance=d.get_balance(),
        )
        for d in ledger.divisions.list()
    ]


@router.get("/auxiliary")
def auxiliary_summary(ledger: Ledger = Depends(get_ledger)) -> list[dict]:
    """기본 계정별 보조원장 잔액"""
    return encode(ledger.auxiliary.summary())


@router.get("/auxiliary/receivables")
def unit_receivables(ledger: Ledger = Depends(get_ledger)) -> list[dict]:
    """세대별 미수금 잔액"""
    return encode(ledger.auxiliary.unit_receivables())


@router.get("/auxiliary/{master_code}/{aux_code}")
def auxiliary_report(
    master_code: str = Path(..., description="기본 계정 코드"),
    aux_code: str = Path(..., description="보조 코드"),
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """보조원장 상세 (기간 거래, 기초/기말 잔액)"""
    try:
        report = ledger.auxiliary.report(master_code, aux_code, date_from, date_to)
    except LedgerError as e:
        raise http_error(e) from e
    return encode(report)
