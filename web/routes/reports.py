"""
보고서 라우트

시산표, 손익계산서, 대차대조표, 계정 트리, 수입/지출 명세.
장부 정합성 오류(차대 불일치)는 보고서 없이 500 응답.
"""

from fastapi import APIRouter, Depends, Query

from core.ledger.errors import LedgerError
from core.ledger.facade import Ledger
from web.dependencies import get_ledger
from web.errors import ensure_success, http_error
from web.models.responses import (
    AccountTreeNodeResponse,
    BalanceSheetResponse,
    DetailReportResponse,
    DetailItemResponse,
    IncomeStatementResponse,
    TrialBalanceResponse,
)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/trial-balance", response_model=TrialBalanceResponse)
def trial_balance(
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> TrialBalanceResponse:
    """시산표"""
    result = ensure_success(ledger.get_trial_balance(date_from, date_to, division))
    return TrialBalanceResponse.model_validate(result.data)


@router.get("/division-trial-balances", response_model=dict[str, TrialBalanceResponse])
def division_trial_balances(
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, TrialBalanceResponse]:
    """필수 회계구분별 시산표"""
    result = ensure_success(ledger.get_division_trial_balances(date_from, date_to))
    return {
        code: TrialBalanceResponse.model_validate(trial) for code, trial in result.data.items()
    }


@router.get("/income-statement", response_model=IncomeStatementResponse)
def income_statement(
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> IncomeStatementResponse:
    """손익계산서"""
    result = ensure_success(ledger.get_income_statement(date_from, date_to, division))
    return IncomeStatementResponse.model_validate(result.data)


@router.get("/balance-sheet", response_model=BalanceSheetResponse)
def balance_sheet(
    as_of: str = Query(..., description="기준일 (YYYY-MM-DD)"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> BalanceSheetResponse:
    """대차대조표 (미마감 당기순이익 포함)"""
    result = ensure_success(ledger.get_balance_sheet(as_of, division))
    return BalanceSheetResponse.model_validate(result.data)


@router.get("/account-tree", response_model=list[AccountTreeNodeResponse])
def account_tree(
    date_from: str | None = Query(default=None, description="시작일"),
    date_to: str | None = Query(default=None, description="종료일"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> list[AccountTreeNodeResponse]:
    """계층형 계정 잔액"""
    result = ensure_success(ledger.get_account_tree(date_from, date_to, division))
    return [AccountTreeNodeResponse.model_validate(node) for node in result.data]


@router.get("/income-details", response_model=DetailReportResponse)
def income_details(
    date_from: str = Query(..., description="시작일"),
    date_to: str = Query(..., description="종료일"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> DetailReportResponse:
    """수입 명세"""
    try:
        items = ledger.reports.income_details(date_from, date_to, division)
        summary = ledger.reports.income_detail_summary(date_from, date_to, division)
    except LedgerError as e:
        raise http_error(e) from e
    return DetailReportResponse(
        items=[DetailItemResponse.model_validate(i) for i in items],
        summary=summary,
    )


@router.get("/expense-details", response_model=DetailReportResponse)
def expense_details(
    date_from: str = Query(..., description="시작일"),
    date_to: str = Query(..., description="종료일"),
    division: str | None = Query(default=None, description="회계구분"),
    ledger: Ledger = Depends(get_ledger),
) -> DetailReportResponse:
    """지출 명세"""
    try:
        items = ledger.reports.expense_details(date_from, date_to, division)
        summary = ledger.reports.expense_detail_summary(date_from, date_to, division)
    except LedgerError as e:
        raise http_error(e) from e
    return DetailReportResponse(
        items=[DetailItemResponse.model_validate(i) for i in items],
        summary=summary,
    )
