"""
보조원장

기본 계정(미수금, 미지급금 등)에 딸린 보조원장 관리.
- 식별자: (기본 계정 코드, 보조 코드) 예: ("1301", "101")
- 잔액 부호는 기본 계정의 정상 잔액 방향을 따름
- 거래는 일자 순으로 삽입되고 잔액 누계(balance_after)를 재계산
- 구분소유자 / 거래처 마스터 등록 시 보조원장 자동 개설
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from core.ledger.accounts import AccountDirectory, signed_balance
from core.ledger.errors import NotFoundError, ValidationError
from core.ledger.types import ZERO, LedgerAccounts, NormalBalance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuxiliaryTransaction:
    """보조원장 거래"""

    date: str
    amount: Decimal
    is_debit: bool
    journal_id: str
    description: str
    balance_after: Decimal = ZERO


@dataclass
class AuxiliaryLedger:
    """보조원장"""

    master_account_code: str
    auxiliary_code: str
    name: str
    normal_balance: NormalBalance
    attributes: dict[str, Any] = field(default_factory=dict)
    transactions: list[AuxiliaryTransaction] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        if not self.transactions:
            return ZERO
        return self.transactions[-1].balance_after

    @property
    def key(self) -> tuple[str, str]:
        return (self.master_account_code, self.auxiliary_code)

    def signed(self, amount: Decimal, is_debit: bool) -> Decimal:
        if is_debit:
            return signed_balance(self.normal_balance, amount, ZERO)
        return signed_balance(self.normal_balance, ZERO, amount)

    def add(self, transaction: AuxiliaryTransaction) -> None:
        """일자 순 삽입 (같은 일자는 기존 거래 뒤) 후 잔액 누계 재계산"""
        index = len(self.transactions)
        while index > 0 and self.transactions[index - 1].date > transaction.date:
            index -= 1
        self.transactions.insert(index, transaction)

        running = ZERO
        recomputed = []
        for t in self.transactions:
            running += self.signed(t.amount, t.is_debit)
            recomputed.append(replace(t, balance_after=running))
        self.transactions = recomputed


@dataclass(frozen=True)
class AuxiliaryReport:
    """보조원장 기간 보고서"""

    master_account_code: str
    auxiliary_code: str
    name: str
    opening_balance: Decimal
    debit_total: Decimal
    credit_total: Decimal
    closing_balance: Decimal
    rows: list[AuxiliaryTransaction]


@dataclass(frozen=True)
class UnitOwner:
    """구분소유자 (세대)"""

    unit_number: str
    owner_name: str
    monthly_management_fee: Decimal = ZERO
    monthly_reserve_fund: Decimal = ZERO
    parking_fee: Decimal = ZERO
    is_active: bool = True


@dataclass(frozen=True)
class Vendor:
    """거래처"""

    code: str
    name: str
    category: str = ""


SAMPLE_UNIT_OWNERS: list[UnitOwner] = [
    UnitOwner("101", "김민준", Decimal("25000"), Decimal("15000"), ZERO),
    UnitOwner("102", "이서연", Decimal("25000"), Decimal("15000"), Decimal("10000")),
    UnitOwner("201", "박지훈", Decimal("30000"), Decimal("18000"), Decimal("10000")),
    UnitOwner("202", "최수아", Decimal("30000"), Decimal("18000"), ZERO),
    UnitOwner("301", "정우진", Decimal("35000"), Decimal("21000"), Decimal("10000")),
    UnitOwner("302", "강하은", Decimal("35000"), Decimal("21000"), Decimal("10000")),
]

SAMPLE_VENDORS: list[Vendor] = [
    Vendor("V001", "한빛관리서비스", "관리업무"),
    Vendor("V002", "클린메인터넌스", "청소업무"),
    Vendor("V003", "한국전력", "수도광열비"),
    Vendor("V004", "상수도사업본부", "수도광열비"),
    Vendor("V005", "대한건설", "수선공사"),
]


class AuxiliaryLedgerService:
    """보조원장 서비스

    Args:
        accounts: 계정과목 디렉토리 (기본 계정의 정상 잔액 조회)
        receivable_account: 관리비 미수금 계정 (구분소유자 보조원장)
        reserve_receivable_account: 수선적립금 미수금 계정 (구분소유자 보조원장)
        payable_account: 미지급금 계정 (거래처 보조원장)
    """

    def __init__(
        self,
        accounts: AccountDirectory,
        receivable_account: str = LedgerAccounts.RECEIVABLE_MANAGEMENT,
        reserve_receivable_account: str = LedgerAccounts.RECEIVABLE_RESERVE,
        payable_account: str = LedgerAccounts.PAYABLE,
    ) -> None:
        self._accounts = accounts
        self._receivable_account = receivable_account
        self._reserve_receivable_account = reserve_receivable_account
        self._payable_account = payable_account

        self._ledgers: dict[tuple[str, str], AuxiliaryLedger] = {}
        self._unit_owners: dict[str, UnitOwner] = {}
        self._vendors: dict[str, Vendor] = {}

    def clear(self) -> None:
        """보조원장 및 마스터 전체 삭제"""
        self._ledgers = {}
        self._unit_owners = {}
        self._vendors = {}

    # =========================================================================
    # 보조원장
    # =========================================================================

    def register(
        self,
        master_code: str,
        aux_code: str,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AuxiliaryLedger:
        """보조원장 개설 (이미 있으면 이름/속성만 갱신)

        Raises:
            AccountNotFoundError: 기본 계정이 없는 경우
        """
        master = self._accounts.require(master_code)
        assert master.normal_balance is not None

        existing = self._ledgers.get((master_code, aux_code))
        if existing is not None:
            existing.name = name
            if attributes:
                existing.attributes.update(attributes)
            return existing

        ledger = AuxiliaryLedger(
            master_account_code=master_code,
            auxiliary_code=aux_code,
            name=name,
            normal_balance=master.normal_balance,
            attributes=dict(attributes or {}),
        )
        self._ledgers[ledger.key] = ledger
        logger.debug(f"[Auxiliary] 보조원장 개설: {master_code}/{aux_code} {name}")
        return ledger

    def get(self, master_code: str, aux_code: str) -> AuxiliaryLedger | None:
        return self._ledgers.get((master_code, aux_code))

    def require(self, master_code: str, aux_code: str) -> AuxiliaryLedger:
        """보조원장 조회

        Raises:
            NotFoundError: 보조원장이 없는 경우
        """
        ledger = self._ledgers.get((master_code, aux_code))
        if ledger is None:
            raise NotFoundError(f"보조원장을 찾을 수 없습니다: {master_code}/{aux_code}")
        return ledger

    def exists(self, master_code: str, aux_code: str) -> bool:
        return (master_code, aux_code) in self._ledgers

    def list(self, master_code: str | None = None) -> list[AuxiliaryLedger]:
        ledgers = [
            ledger
            for ledger in self._ledgers.values()
            if master_code is None or ledger.master_account_code == master_code
        ]
        return sorted(ledgers, key=lambda l: l.key)

    def get_balance(self, master_code: str, aux_code: str) -> Decimal:
        return self.require(master_code, aux_code).balance

    def post(
        self,
        master_code: str,
        aux_code: str,
        amount: Decimal,
        is_debit: bool,
        journal_id: str,
        description: str,
        date: str,
    ) -> AuxiliaryLedger:
        """보조원장 거래 기록 (분개 라인 전기 시 호출)

        Raises:
            NotFoundError: 보조원장이 없는 경우
        """
        ledger = self.require(master_code, aux_code)
        ledger.add(
            AuxiliaryTransaction(
                date=date,
                amount=amount,
                is_debit=is_debit,
                journal_id=journal_id,
                description=description,
            )
        )
        return ledger

    def report(
        self,
        master_code: str,
        aux_code: str,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> AuxiliaryReport:
        """기간별 보조원장 (기초/기말 잔액, 차대 합계, 거래 목록)"""
        ledger = self.require(master_code, aux_code)

        opening = ZERO
        debit_total = ZERO
        credit_total = ZERO
        rows = []
        for t in ledger.transactions:
            if date_from is not None and t.date < date_from:
                opening = t.balance_after
                continue
            if date_to is not None and t.date > date_to:
                break
            rows.append(t)
            if t.is_debit:
                debit_total += t.amount
            else:
                credit_total += t.amount

        closing = opening + signed_balance(ledger.normal_balance, debit_total, credit_total)
        return AuxiliaryReport(
            master_account_code=master_code,
            auxiliary_code=aux_code,
            name=ledger.name,
            opening_balance=opening,
            debit_total=debit_total,
            credit_total=credit_total,
            closing_balance=closing,
            rows=rows,
        )

    def summary(self) -> list[dict[str, Any]]:
        """기본 계정별 보조원장 잔액 요약"""
        grouped: dict[str, list[AuxiliaryLedger]] = {}
        for ledger in self.list():
            grouped.setdefault(ledger.master_account_code, []).append(ledger)

        result = []
        for master_code, ledgers in grouped.items():
            master = self._accounts.get(master_code)
            result.append(
                {
                    "account_code": master_code,
                    "account_name": master.name if master else master_code,
                    "auxiliaries": [
                        {"code": l.auxiliary_code, "name": l.name, "balance": l.balance}
                        for l in ledgers
                    ],
                }
            )
        return result

    # =========================================================================
    # 구분소유자 / 거래처
    # =========================================================================

    def register_unit_owners(self, owners: list[UnitOwner]) -> None:
        """구분소유자 등록 및 미수금 보조원장 개설"""
        for owner in owners:
            if not owner.unit_number:
                raise ValidationError("세대 번호가 비어 있습니다")
            self._unit_owners[owner.unit_number] = owner
            for master_code in (self._receivable_account, self._reserve_receivable_account):
                if self._accounts.exists(master_code):
                    self.register(
                        master_code,
                        owner.unit_number,
                        f"{owner.owner_name}님",
                        {"unit_number": owner.unit_number},
                    )
        logger.info(f"[Auxiliary] 구분소유자 등록: {len(owners)}세대")

    def register_vendors(self, vendors: list[Vendor]) -> None:
        """거래처 등록 및 미지급금 보조원장 개설"""
        for vendor in vendors:
            if not vendor.code:
                raise ValidationError("거래처 코드가 비어 있습니다")
            self._vendors[vendor.code] = vendor
            if self._accounts.exists(self._payable_account):
                self.register(
                    self._payable_account,
                    vendor.code,
                    vendor.name,
                    {"category": vendor.category},
                )
        logger.info(f"[Auxiliary] 거래처 등록: {len(vendors)}곳")

    def unit_owners(self) -> list[UnitOwner]:
        return sorted(self._unit_owners.values(), key=lambda o: o.unit_number)

    def vendors(self) -> list[Vendor]:
        return sorted(self._vendors.values(), key=lambda v: v.code)

    def unit_receivables(self) -> list[dict[str, Any]]:
        """세대별 미수금 잔액 (잔액 0인 세대 제외)"""
        result = []
        for owner in self.unit_owners():
            management = self._balance_or_zero(self._receivable_account, owner.unit_number)
            reserve = self._balance_or_zero(self._reserve_receivable_account, owner.unit_number)
            total = management + reserve
            if total == ZERO:
                continue
            result.append(
                {
                    "unit_number": owner.unit_number,
                    "owner_name": owner.owner_name,
                    "management_fee_receivable": management,
                    "reserve_fund_receivable": reserve,
                    "total_receivable": total,
                }
            )
        return result

    @property
    def receivable_account(self) -> str:
        return self._receivable_account

    @property
    def reserve_receivable_account(self) -> str:
        return self._reserve_receivable_account

    def _balance_or_zero(self, master_code: str, aux_code: str) -> Decimal:
        ledger = self._ledgers.get((master_code, aux_code))
        return ledger.balance if ledger else ZERO
