"""
가져오기/내보내기 페이로드 (Pydantic)

JSON 가져오기, 내보내기, 스냅샷 직렬화에 사용하는 스키마.
외부 필드명은 camelCase (예: debitAmount), 내부 필드명은 snake_case.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from core.constants import Defaults
from core.ledger.accounts import Account
from core.ledger.auxiliary import UnitOwner, Vendor
from core.ledger.generator import (
    JournalGenerationRule,
    JournalPattern,
    RuleCondition,
)
from core.ledger.journal import Journal, JournalLine
from core.ledger.types import (
    ZERO,
    AccountType,
    ApprovalStatus,
    DivisionCode,
    JournalSide,
    JournalStatus,
    NormalBalance,
    PaymentStatus,
    TransactionType,
)

SNAPSHOT_VERSION = 1


class CamelModel(BaseModel):
    """camelCase 별칭 기본 모델 (snake_case 이름으로도 입력 가능)"""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def dump(self) -> dict[str, Any]:
        """JSON 호환 딕셔너리 (camelCase)"""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# 마스터
# =============================================================================


class AccountRecord(CamelModel):
    """계정과목"""

    code: str = Field(..., min_length=1, description="계정 코드")
    name: str = Field(..., description="계정명")
    type: AccountType = Field(..., description="계정 유형")
    normal_balance: NormalBalance | None = Field(default=None, description="정상 잔액 방향")
    parent_code: str | None = Field(default=None, description="상위 계정 코드")
    division: DivisionCode | None = Field(default=None, description="회계구분 태그")
    is_active: bool = Field(default=True, description="활성 여부")
    is_postable: bool = Field(default=True, description="전기 가능 여부")
    description: str | None = Field(default=None, description="설명")
    display_order: int = Field(default=0, description="표시 순서")

    @classmethod
    def from_domain(cls, account: Account) -> AccountRecord:
        return cls(
            code=account.code,
            name=account.name,
            type=account.account_type,
            normal_balance=account.normal_balance,
            parent_code=account.parent_code,
            division=account.division,
            is_active=account.is_active,
            is_postable=account.is_postable,
            description=account.description,
            display_order=account.display_order,
        )

    def to_domain(self) -> Account:
        return Account(
            code=self.code,
            name=self.name,
            account_type=self.type,
            normal_balance=self.normal_balance,
            parent_code=self.parent_code or None,
            division=self.division,
            is_active=self.is_active,
            is_postable=self.is_postable,
            description=self.description,
            display_order=self.display_order,
        )


class UnitOwnerRecord(CamelModel):
    """구분소유자"""

    unit_number: str = Field(..., min_length=1, description="세대 번호")
    owner_name: str = Field(..., description="소유자명")
    monthly_management_fee: Decimal = Field(default=ZERO, ge=0, description="월 관리비")
    monthly_reserve_fund: Decimal = Field(default=ZERO, ge=0, description="월 수선적립금")
    parking_fee: Decimal = Field(default=ZERO, ge=0, description="주차장 사용료")
    is_active: bool = Field(default=True, description="활성 여부")

    @classmethod
    def from_domain(cls, owner: UnitOwner) -> UnitOwnerRecord:
        return cls(
            unit_number=owner.unit_number,
            owner_name=owner.owner_name,
            monthly_management_fee=owner.monthly_management_fee,
            monthly_reserve_fund=owner.monthly_reserve_fund,
            parking_fee=owner.parking_fee,
            is_active=owner.is_active,
        )

    def to_domain(self) -> UnitOwner:
        return UnitOwner(
            unit_number=self.unit_number,
            owner_name=self.owner_name,
            monthly_management_fee=self.monthly_management_fee,
            monthly_reserve_fund=self.monthly_reserve_fund,
            parking_fee=self.parking_fee,
            is_active=self.is_active,
        )


class VendorRecord(CamelModel):
    """거래처"""

    code: str = Field(..., min_length=1, description="거래처 코드")
    name: str = Field(..., description="거래처명")
    category: str = Field(default="", description="분류")

    @classmethod
    def from_domain(cls, vendor: Vendor) -> VendorRecord:
        return cls(code=vendor.code, name=vendor.name, category=vendor.category)

    def to_domain(self) -> Vendor:
        return Vendor(code=self.code, name=self.name, category=self.category)


class DivisionRecord(CamelModel):
    """회계구분 (설정 및 잔액)"""

    code: str = Field(..., description="회계구분 코드")
    name: str = Field(default="", description="회계구분명")
    require_approval: bool = Field(default=False, description="전기 전 승인 필요 여부")
    transfer_limits: dict[str, Decimal] = Field(default_factory=dict, description="이체 한도")
    balance: Decimal | None = Field(default=None, description="구분 잔액 (내보내기 전용)")


# =============================================================================
# 분개
# =============================================================================


class JournalLineRecord(CamelModel):
    """분개 라인"""

    id: str | None = Field(default=None, description="라인 ID")
    account_code: str = Field(..., min_length=1, description="계정 코드")
    debit_amount: Decimal = Field(default=ZERO, ge=0, description="차변 금액")
    credit_amount: Decimal = Field(default=ZERO, ge=0, description="대변 금액")
    auxiliary_code: str | None = Field(default=None, description="보조 코드")
    service_month: str | None = Field(default=None, description="대상 월 (YYYY-MM)")
    payer_id: str | None = Field(default=None, description="납부자 ID")
    description: str | None = Field(default=None, description="라인 적요")
    account_name: str | None = Field(default=None, description="계정명 (표시용)")

    @classmethod
    def from_domain(cls, line: JournalLine) -> JournalLineRecord:
        return cls(
            id=line.id or None,
            account_code=line.account_code,
            debit_amount=line.debit_amount,
            credit_amount=line.credit_amount,
            auxiliary_code=line.auxiliary_code,
            service_month=line.service_month,
            payer_id=line.payer_id,
            description=line.description,
            account_name=line.account_name,
        )

    def to_domain(self) -> JournalLine:
        return JournalLine(
            account_code=self.account_code,
            debit_amount=self.debit_amount,
            credit_amount=self.credit_amount,
            auxiliary_code=self.auxiliary_code or None,
            service_month=self.service_month,
            payer_id=self.payer_id,
            description=self.description,
            account_name=self.account_name,
            id=self.id or "",
        )


class JournalImportRecord(CamelModel):
    """가져오기 분개"""

    date: str = Field(..., description="분개 일자 (YYYY-MM-DD)")
    description: str = Field(..., description="적요")
    reference: str | None = Field(default=None, description="참조")
    number: str | None = Field(default=None, description="분개 번호 (지정 시 유지)")
    status: JournalStatus | None = Field(default=None, description="가져온 후 상태")
    division: str | None = Field(default=None, description="회계구분")
    tags: list[str] = Field(default_factory=list, description="태그")
    details: list[JournalLineRecord] = Field(..., description="분개 라인")


class JournalRecord(CamelModel):
    """분개 전체 기록 (내보내기 / 스냅샷)"""

    id: str
    number: str
    date: str
    description: str
    division: str | None = None
    status: JournalStatus = JournalStatus.DRAFT
    reference: str | None = None
    tags: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)
    details: list[JournalLineRecord]
    total_debit: Decimal | None = None
    total_credit: Decimal | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    posted_at: datetime | None = None
    posted_by: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    approval_status: ApprovalStatus = ApprovalStatus.NONE
    submitted_at: datetime | None = None
    submitted_by: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None

    @classmethod
    def from_domain(cls, journal: Journal) -> JournalRecord:
        return cls(
            id=journal.id,
            number=journal.journal_number,
            date=journal.date,
            description=journal.description,
            division=journal.division,
            status=journal.status,
            reference=journal.reference,
            tags=list(journal.tags),
            meta=dict(journal.meta),
            details=[JournalLineRecord.from_domain(line) for line in journal.lines],
            total_debit=journal.total_debit,
            total_credit=journal.total_credit,
            created_at=journal.created_at,
            updated_at=journal.updated_at,
            created_by=journal.created_by,
            posted_at=journal.posted_at,
            posted_by=journal.posted_by,
            cancelled_at=journal.cancelled_at,
            cancelled_by=journal.cancelled_by,
            cancellation_reason=journal.cancellation_reason,
            approval_status=journal.approval_status,
            submitted_at=journal.submitted_at,
            submitted_by=journal.submitted_by,
            approved_at=journal.approved_at,
            approved_by=journal.approved_by,
        )

    def to_domain(self, tolerance: Decimal = Defaults.BALANCE_TOLERANCE) -> Journal:
        return Journal(
            id=self.id,
            journal_number=self.number,
            date=self.date,
            description=self.description,
            division=self.division,
            lines=tuple(line.to_domain() for line in self.details),
            status=self.status,
            reference=self.reference,
            tags=tuple(self.tags),
            meta=dict(self.meta),
            created_at=self.created_at,
            updated_at=self.updated_at,
            created_by=self.created_by,
            posted_at=self.posted_at,
            posted_by=self.posted_by,
            cancelled_at=self.cancelled_at,
            cancelled_by=self.cancelled_by,
            cancellation_reason=self.cancellation_reason,
            approval_status=self.approval_status,
            submitted_at=self.submitted_at,
            submitted_by=self.submitted_by,
            approved_at=self.approved_at,
            approved_by=self.approved_by,
            tolerance=tolerance,
        )


# =============================================================================
# 분개 생성 규칙
# =============================================================================


class RuleRecord(CamelModel):
    """분개 생성 규칙"""

    id: str
    name: str
    priority: int = 100
    is_active: bool = True
    transaction_type: TransactionType | None = None
    payment_status: PaymentStatus | None = None
    account_code: str | None = None
    amount_min: Decimal | None = None
    amount_max: Decimal | None = None
    tags: list[str] = Field(default_factory=list)
    debit_account_code: str | None = None
    credit_account_code: str | None = None
    use_transaction_account: JournalSide | None = None
    use_payment_account: JournalSide | None = None
    default_account_side: JournalSide | None = None
    default_account_code: str | None = None

    @classmethod
    def from_domain(cls, rule: JournalGenerationRule) -> RuleRecord:
        c = rule.condition
        p = rule.pattern
        return cls(
            id=rule.id,
            name=rule.name,
            priority=rule.priority,
            is_active=rule.is_active,
            transaction_type=c.transaction_type,
            payment_status=c.payment_status,
            account_code=c.account_code,
            amount_min=c.amount_min,
            amount_max=c.amount_max,
            tags=list(c.tags),
            debit_account_code=p.debit_account_code,
            credit_account_code=p.credit_account_code,
            use_transaction_account=p.use_transaction_account,
            use_payment_account=p.use_payment_account,
            default_account_side=p.default_account_side,
            default_account_code=p.default_account_code,
        )

    def to_domain(self) -> JournalGenerationRule:
        return JournalGenerationRule(
            id=self.id,
            name=self.name,
            priority=self.priority,
            is_active=self.is_active,
            condition=RuleCondition(
                transaction_type=self.transaction_type,
                payment_status=self.payment_status,
                account_code=self.account_code,
                amount_min=self.amount_min,
                amount_max=self.amount_max,
                tags=list(self.tags),
            ),
            pattern=JournalPattern(
                debit_account_code=self.debit_account_code,
                credit_account_code=self.credit_account_code,
                use_transaction_account=self.use_transaction_account,
                use_payment_account=self.use_payment_account,
                default_account_side=self.default_account_side,
                default_account_code=self.default_account_code,
            ),
        )


# =============================================================================
# 가져오기 / 내보내기 / 스냅샷
# =============================================================================


class OpeningBalanceEntry(CamelModel):
    """기초잔액 항목"""

    account_code: str = Field(..., min_length=1, description="계정 코드")
    debit_amount: Decimal = Field(default=ZERO, ge=0, description="차변 금액")
    credit_amount: Decimal = Field(default=ZERO, ge=0, description="대변 금액")
    auxiliary_code: str | None = Field(default=None, description="보조 코드")


class OpeningBalances(CamelModel):
    """기초잔액"""

    date: str = Field(..., description="기초 일자")
    entries: list[OpeningBalanceEntry] = Field(default_factory=list, description="항목")


class ImportPayload(CamelModel):
    """JSON 가져오기 페이로드"""

    clear_existing: bool = Field(default=False, description="기존 분개/마스터 삭제 후 가져오기")
    auto_post: bool = Field(default=True, description="상태 미지정 분개 자동 전기")
    journals: list[JournalImportRecord] = Field(default_factory=list, description="분개")
    unit_owners: list[UnitOwnerRecord] | None = Field(default=None, description="구분소유자")
    vendors: list[VendorRecord] | None = Field(default=None, description="거래처")
    opening_balances: OpeningBalances | None = Field(default=None, description="기초잔액")


class ExportPayload(CamelModel):
    """JSON 내보내기 페이로드"""

    export_date: datetime
    journals: list[JournalRecord]
    unit_owners: list[UnitOwnerRecord]
    vendors: list[VendorRecord]
    trial_balance: dict[str, Any] | None
    divisions: list[DivisionRecord]


class SnapshotPayload(CamelModel):
    """전체 상태 스냅샷 (serialize / restore)"""

    version: int = Field(default=SNAPSHOT_VERSION)
    created_at: datetime | None = None
    next_sequence: int = Field(default=1, ge=1)
    accounts: list[AccountRecord]
    divisions: list[DivisionRecord] = Field(default_factory=list)
    unit_owners: list[UnitOwnerRecord] = Field(default_factory=list)
    vendors: list[VendorRecord] = Field(default_factory=list)
    auxiliary_ledgers: list[dict[str, Any]] = Field(default_factory=list)
    rules: list[RuleRecord] | None = None
    journals: list[JournalRecord] = Field(default_factory=list)
