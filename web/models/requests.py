"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
필드명은 camelCase (예: accountCode), snake_case로도 입력 가능.
"""

from decimal import Decimal
from typing import Any

from pydantic import Field

from core.ledger.facade import JournalSuggestion
from core.ledger.generator import Transaction
from core.ledger.journal import JournalInput, JournalLine, JournalPatch
from core.ledger.payloads import CamelModel
from core.ledger.types import ZERO, LedgerAccounts, PaymentStatus, TransactionType


class JournalLineRequest(CamelModel):
    """분개 라인 요청"""

    account_code: str = Field(..., min_length=1, description="계정 코드")
    debit_amount: Decimal = Field(default=ZERO, ge=0, description="차변 금액")
    credit_amount: Decimal = Field(default=ZERO, ge=0, description="대변 금액")
    auxiliary_code: str | None = Field(default=None, description="보조 코드")
    service_month: str | None = Field(default=None, description="대상 월 (YYYY-MM)")
    payer_id: str | None = Field(default=None, description="납부자 ID")
    description: str | None = Field(default=None, description="라인 적요")

    def to_domain(self) -> JournalLine:
        return JournalLine(
            account_code=self.account_code,
            debit_amount=self.debit_amount,
            credit_amount=self.credit_amount,
            auxiliary_code=self.auxiliary_code or None,
            service_month=self.service_month,
            payer_id=self.payer_id,
            description=self.description,
        )


class JournalCreateRequest(CamelModel):
    """분개 생성 요청"""

    date: str = Field(..., description="분개 일자 (YYYY-MM-DD)")
    description: str = Field(..., description="적요")
    lines: list[JournalLineRequest] = Field(..., description="분개 라인")
    division: str | None = Field(default=None, description="회계구분 (미지정 시 계정에서 추론)")
    reference: str | None = Field(default=None, description="참조")
    tags: list[str] = Field(default_factory=list, description="태그")
    auto_post: bool = Field(default=False, description="생성 즉시 전기")

    model_config = {
        **CamelModel.model_config,
        "json_schema_extra": {
            "examples": [
                {
                    "date": "2026-04-01",
                    "description": "4월 관리비 부과",
                    "division": "MANAGEMENT",
                    "lines": [
                        {"accountCode": "1301", "debitAmount": "10000", "auxiliaryCode": "101"},
                        {"accountCode": "5101", "creditAmount": "10000"},
                    ],
                    "autoPost": True,
                }
            ]
        },
    }

    def to_domain(self) -> JournalInput:
        return JournalInput(
            date=self.date,
            description=self.description,
            lines=[line.to_domain() for line in self.lines],
            division=self.division,
            reference=self.reference,
            tags=list(self.tags),
        )


class JournalUpdateRequest(CamelModel):
    """DRAFT 분개 수정 요청 (지정한 필드만 변경)"""

    date: str | None = None
    description: str | None = None
    reference: str | None = None
    division: str | None = None
    tags: list[str] | None = None
    lines: list[JournalLineRequest] | None = None

    def to_domain(self) -> JournalPatch:
        return JournalPatch(
            date=self.date,
            description=self.description,
            reference=self.reference,
            division=self.division,
            tags=self.tags,
            lines=[line.to_domain() for line in self.lines] if self.lines is not None else None,
        )


class JournalCancelRequest(CamelModel):
    """분개 취소 요청"""

    reason: str = Field(..., min_length=1, description="취소 사유")


class TransactionRequest(CamelModel):
    """거래 요청 (분개 생성기 입력)"""

    id: str = Field(..., min_length=1, description="거래 ID")
    type: TransactionType = Field(..., description="income / expense / transfer")
    account_code: str = Field(..., min_length=1, description="거래 계정 코드")
    amount: Decimal = Field(..., description="금액")
    occurred_on: str = Field(..., description="거래일 (YYYY-MM-DD)")
    status: PaymentStatus = Field(default=PaymentStatus.UNPAID, description="결제 상태")
    payment_account_code: str | None = Field(default=None, description="결제 계정 코드")
    division_code: str | None = Field(default=None, description="회계구분")
    note: str | None = Field(default=None, description="메모")
    tags: list[str] = Field(default_factory=list, description="태그")

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            type=self.type,
            account_code=self.account_code,
            amount=self.amount,
            occurred_on=self.occurred_on,
            status=self.status,
            payment_account_code=self.payment_account_code,
            division_code=self.division_code,
            note=self.note,
            tags=list(self.tags),
        )


class RecordTransactionRequest(TransactionRequest):
    """거래 기록 요청"""

    auto_post: bool = Field(default=True, description="생성 즉시 전기")


class SettleTransactionRequest(CamelModel):
    """결제 처리 요청"""

    transaction: TransactionRequest = Field(..., description="미결제 거래")
    payment_account_code: str = Field(..., min_length=1, description="결제 계정 코드")
    payment_date: str | None = Field(default=None, description="결제일 (미지정 시 오늘)")
    auto_post: bool = Field(default=True, description="생성 즉시 전기")


class TransactionRowsRequest(CamelModel):
    """표 형식 행 일괄 처리 요청"""

    rows: list[dict[str, Any]] = Field(..., description="행 (date/description/deposit/withdrawal/amount)")
    bank_account_code: str = Field(default=LedgerAccounts.BANK_MANAGEMENT, description="입출금 계좌")
    income_account_code: str = Field(
        default=LedgerAccounts.INCOME_MANAGEMENT_FEE, description="입금 기본 수익 계정"
    )
    expense_account_code: str | None = Field(default=None, description="출금 기본 비용 계정")
    auto_post: bool = Field(default=True, description="생성 즉시 전기")


class JournalSuggestionRequest(CamelModel):
    """분류 제안 분개 요청"""

    transaction_id: str
    date: str
    description: str
    debit_account: str
    credit_account: str
    amount: Decimal = Field(..., gt=0)
    confidence: int = Field(default=0, ge=0, le=100, description="신뢰도 (0~100)")
    division: str | None = None
    auxiliary_code: str | None = None
    memo: str | None = None
    reasoning: str | None = None
    min_confidence: int = Field(default=0, ge=0, le=100, description="허용 최소 신뢰도")
    auto_post: bool = False

    def to_domain(self) -> JournalSuggestion:
        return JournalSuggestion(
            transaction_id=self.transaction_id,
            date=self.date,
            description=self.description,
            debit_account=self.debit_account,
            credit_account=self.credit_account,
            amount=self.amount,
            confidence=self.confidence,
            division=self.division,
            auxiliary_code=self.auxiliary_code,
            memo=self.memo,
            reasoning=self.reasoning,
        )


class MonthlyBillingRequest(CamelModel):
    """월 부과 요청"""

    billing_date: str = Field(..., description="부과일 (YYYY-MM-DD)")
    auto_post: bool = True


class ClosingRequest(CamelModel):
    """결산 마감 요청"""

    closing_date: str = Field(..., description="마감일 (YYYY-MM-DD)")
    date_from: str | None = Field(default=None, description="회계기간 시작일")


class CsvImportRequest(CamelModel):
    """CSV 가져오기 요청"""

    content: str = Field(..., description="CSV 본문 (헤더 포함)")
    auto_post: bool = True
