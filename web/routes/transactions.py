"""
거래 라우트

거래 → 분개 생성기, 결제 처리, 표 형식 행 일괄 처리, 분류 제안,
월 부과, 결산 마감, 분개 생성 규칙 조회 API
"""

from fastapi import APIRouter, Depends

from core.ledger.facade import Ledger
from core.ledger.payloads import RuleRecord
from web.dependencies import get_ledger
from web.errors import ensure_success
from web.models.requests import (
    ClosingRequest,
    JournalSuggestionRequest,
    MonthlyBillingRequest,
    RecordTransactionRequest,
    SettleTransactionRequest,
    TransactionRequest,
    TransactionRowsRequest,
)
from web.models.responses import (
    GeneratedJournalResponse,
    JournalResultResponse,
    encode,
)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

WEB_ACTOR = "web:admin"


@router.get("/rules", response_model=list[RuleRecord])
def list_rules(ledger: Ledger = Depends(get_ledger)) -> list[RuleRecord]:
    """분개 생성 규칙 (적용 순서)"""
    return [RuleRecord.from_domain(rule) for rule in ledger.generator.get_rules()]


@router.post("/generate", response_model=GeneratedJournalResponse)
def generate_journal(
    request: TransactionRequest,
    ledger: Ledger = Depends(get_ledger),
) -> GeneratedJournalResponse:
    """거래 → 분개 미리보기 (저장하지 않음)"""
    data = ensure_success(ledger.generate_journal(request.to_domain())).data
    return GeneratedJournalResponse(
        date=data.date,
        description=data.description,
        division=data.division,
        reference=data.reference,
        lines=encode(
            [
                {
                    "accountCode": line.account_code,
                    "debitAmount": line.debit_amount,
                    "creditAmount": line.credit_amount,
                    "description": line.description,
                }
                for line in data.lines
            ]
        ),
    )


@router.post("/record", response_model=JournalResultResponse, status_code=201)
def record_transaction(
    request: RecordTransactionRequest,
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """거래 기록 (분개 생성 및 전기)"""
    result = ledger.record_transaction(
        request.to_domain(), auto_post=request.auto_post, actor=WEB_ACTOR
    )
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/settle", response_model=JournalResultResponse, status_code=201)
def settle_transaction(
    request: SettleTransactionRequest,
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """미결제 거래 결제 처리"""
    result = ledger.settle_transaction(
        request.transaction.to_domain(),
        request.payment_account_code,
        payment_date=request.payment_date,
        auto_post=request.auto_post,
        actor=WEB_ACTOR,
    )
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/rows")
def create_from_rows(
    request: TransactionRowsRequest,
    ledger: Ledger = Depends(get_ledger),
) -> list[dict]:
    """표 형식 행 일괄 처리 (행별 결과, 실패 행이 있어도 200)"""
    return ledger.create_transactions_from_rows(
        request.rows,
        bank_account_code=request.bank_account_code,
        income_account_code=request.income_account_code,
        expense_account_code=request.expense_account_code,
        auto_post=request.auto_post,
        actor=WEB_ACTOR,
    )


@router.post("/suggestions", response_model=JournalResultResponse, status_code=201)
def create_from_suggestion(
    request: JournalSuggestionRequest,
    ledger: Ledger = Depends(get_ledger),
) -> JournalResultResponse:
    """분류 제안 → 분개"""
    result = ledger.create_journal_from_suggestion(
        request.to_domain(),
        min_confidence=request.min_confidence,
        auto_post=request.auto_post,
        actor=WEB_ACTOR,
    )
    return JournalResultResponse.from_result(ensure_success(result))


@router.post("/billing", response_model=list[JournalResultResponse])
def monthly_billing(
    request: MonthlyBillingRequest,
    ledger: Ledger = Depends(get_ledger),
) -> list[JournalResultResponse]:
    """월 관리비/수선적립금 부과 (회계구분별 결과)"""
    results = ledger.create_monthly_billing(
        request.billing_date, auto_post=request.auto_post, actor=WEB_ACTOR
    )
    return [JournalResultResponse.from_result(r) for r in results]


@router.post("/closing", response_model=list[JournalResultResponse])
def closing(
    request: ClosingRequest,
    ledger: Ledger = Depends(get_ledger),
) -> list[JournalResultResponse]:
    """결산 마감 (회계구분별 결과)"""
    results = ledger.create_closing_entries(
        request.closing_date, request.date_from, actor=WEB_ACTOR
    )
    return [JournalResultResponse.from_result(r) for r in results]
