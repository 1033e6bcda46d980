"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
보고서 모델은 core.ledger.reports의 dataclass에서 속성으로 변환 (from_attributes).
금액(Decimal)은 JSON 문자열로 직렬화된다.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import Field

from core.ledger.payloads import AccountRecord, CamelModel, JournalRecord
from core.ledger.results import LedgerResult
from core.ledger.types import AccountType, NormalBalance


class ReportModel(CamelModel):
    """dataclass 변환용 기본 모델"""

    model_config = {**CamelModel.model_config, "from_attributes": True}


class HealthResponse(CamelModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")
    accounts: int = Field(..., description="계정과목 수")
    journals: int = Field(..., description="분개 수")


class ErrorResponse(CamelModel):
    """실패 응답 (HTTPException detail)"""

    errors: list[str]
    error_code: str | None = None


class JournalResultResponse(CamelModel):
    """분개 작업 결과"""

    success: bool
    journal: JournalRecord | None = None
    errors: list[str] = Field(default_factory=list)
    error_code: str | None = None

    @classmethod
    def from_result(cls, result: LedgerResult) -> JournalResultResponse:
        return cls(
            success=result.success,
            journal=JournalRecord.from_domain(result.journal) if result.journal else None,
            errors=result.errors,
            error_code=result.error_code,
        )


class JournalListResponse(CamelModel):
    """분개 목록"""

    items: list[JournalRecord]
    total: int


class AccountListResponse(CamelModel):
    """계정과목 목록"""

    items: list[AccountRecord]
    total: int


class AccountBalanceResponse(CamelModel):
    """계정 잔액"""

    code: str
    name: str
    balance: Decimal


class DivisionResponse(CamelModel):
    """회계구분"""

    code: str
    name: str
    description: str
    is_required: bool
    is_restricted: bool
    require_approval: bool
    transfer_limits: dict[str, Decimal]
    default_accounts: dict[str, str]
    balance: Decimal


class GeneratedJournalResponse(CamelModel):
    """생성기 미리보기 (저장하지 않은 분개 입력)"""

    date: str
    description: str
    division: str | None = None
    reference: str | None = None
    lines: list[dict[str, Any]]


# =============================================================================
# 보고서
# =============================================================================


class TrialBalanceRowResponse(ReportModel):
    code: str
    name: str
    account_type: AccountType | None
    normal_balance: NormalBalance | None
    debit_total: Decimal
    credit_total: Decimal
    balance: Decimal


class TrialBalanceResponse(ReportModel):
    """시산표"""

    date_from: str | None
    date_to: str | None
    division: str | None
    rows: list[TrialBalanceRowResponse]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool


class StatementRowResponse(ReportModel):
    code: str
    name: str
    amount: Decimal


class IncomeStatementResponse(ReportModel):
    """손익계산서"""

    date_from: str | None
    date_to: str | None
    division: str | None
    revenues: list[StatementRowResponse]
    expenses: list[StatementRowResponse]
    total_revenue: Decimal
    total_expense: Decimal
    net_income: Decimal


class BalanceSheetDebugRowResponse(ReportModel):
    code: str
    name: str
    account_type: AccountType | None
    normal_balance: NormalBalance | None
    debit_total: Decimal
    credit_total: Decimal
    calculated_balance: Decimal
    displayed_amount: Decimal


class BalanceSheetResponse(ReportModel):
    """대차대조표"""

    as_of: str
    division: str | None
    assets: list[StatementRowResponse]
    liabilities: list[StatementRowResponse]
    equity: list[StatementRowResponse]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    net_income: Decimal
    difference: Decimal
    is_balanced: bool
    debug: list[BalanceSheetDebugRowResponse] = Field(default_factory=list)


class AccountTreeNodeResponse(ReportModel):
    code: str
    name: str
    account_type: AccountType
    level: int
    own_balance: Decimal
    total_balance: Decimal
    children: list[AccountTreeNodeResponse] = Field(default_factory=list)


class AccountLedgerRowResponse(ReportModel):
    journal_id: str
    journal_number: str
    date: str
    description: str
    debit_amount: Decimal
    credit_amount: Decimal
    balance: Decimal
    auxiliary_code: str | None = None


class AccountLedgerResponse(ReportModel):
    """계정별 원장"""

    code: str
    name: str
    opening_balance: Decimal
    debit_total: Decimal
    credit_total: Decimal
    closing_balance: Decimal
    rows: list[AccountLedgerRowResponse]


class DetailItemResponse(ReportModel):
    journal_id: str
    journal_number: str
    date: str
    account_code: str
    account_name: str
    description: str
    amount: Decimal
    division: str | None
    auxiliary_code: str | None = None
    auxiliary_name: str | None = None


class DetailReportResponse(CamelModel):
    """수입/지출 명세 (항목 + 계정별 합계)"""

    items: list[DetailItemResponse]
    summary: list[dict[str, Any]]


def encode(data: Any) -> Any:
    """딕셔너리 응답 직렬화 (Decimal은 문자열 유지)"""
    return jsonable_encoder(data, custom_encoder={Decimal: str})
