"""
회계구분 레지스트리

관리회계 / 수선적립금회계 / 주차장회계 / 공통 구분 관리.
- 제한 구분(수선적립금)은 자기 자신에게만 이체 가능
- 그 외 구분은 transfer_limits 한도 내에서 이체 가능
- 구분 잔액은 전기 시 기록되는 거래 내역으로만 변동
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from core.config.loader import LedgerConfig
from core.ledger.errors import NotFoundError, TransferLimitExceededError
from core.ledger.types import (
    DIVISION_MASTER,
    NORMAL_BALANCE_BY_TYPE,
    ZERO,
    AccountType,
    NormalBalance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DivisionTransaction:
    """회계구분 거래 내역 (분개 라인 단위)"""

    journal_id: str
    date: str
    description: str
    amount: Decimal
    is_debit: bool
    account_type: AccountType

    @property
    def signed_amount(self) -> Decimal:
        debit_normal = NORMAL_BALANCE_BY_TYPE[self.account_type] == NormalBalance.DEBIT
        if debit_normal == self.is_debit:
            return self.amount
        return -self.amount


@dataclass
class Division:
    """회계구분"""

    code: str
    name: str
    description: str = ""
    is_required: bool = True
    is_restricted: bool = False
    require_approval: bool = False
    transfer_limits: dict[str, Decimal] = field(default_factory=dict)
    default_accounts: dict[str, str] = field(default_factory=dict)
    transactions: list[DivisionTransaction] = field(default_factory=list)

    def can_transfer_to(self, target: str, amount: Decimal) -> bool:
        """이체 가능 여부

        제한 구분은 자기 자신 외 이체 불가.
        대상 구분 한도가 설정되어 있으면 금액이 한도 이하여야 함.
        """
        if self.is_restricted and target != self.code:
            return False
        limit = self.transfer_limits.get(target)
        if limit is not None and amount > limit:
            return False
        return True

    def get_balance(self) -> Decimal:
        return sum((t.signed_amount for t in self.transactions), ZERO)


class DivisionRegistry:
    """회계구분 레지스트리

    Args:
        config: Ledger 설정 (이체 한도, 승인 필요 여부, 제한 구분)
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self._config = config or LedgerConfig()
        self._divisions: dict[str, Division] = {}

    def initialize(self) -> None:
        """고정 회계구분 등록 (설정의 이체 한도 / 승인 여부 반영)"""
        self._divisions = {}
        for master in DIVISION_MASTER:
            code = master["code"]
            division_config = self._config.division(code)
            self._divisions[code] = Division(
                code=code,
                name=master["name"],
                description=master["description"],
                is_required=master["is_required"],
                is_restricted=code == self._config.restricted_division,
                require_approval=division_config.require_approval,
                transfer_limits=dict(division_config.transfer_limits),
                default_accounts=dict(master["default_accounts"]),
            )
        logger.info(f"[Divisions] 회계구분 초기화 완료: {list(self._divisions)}")

    def reset(self) -> None:
        """거래 내역 초기화 (이체 한도, 승인 여부 등 구분 설정은 유지)"""
        for division in self._divisions.values():
            division.transactions.clear()
        logger.info("[Divisions] 회계구분 거래 내역 초기화")

    def get(self, code: str) -> Division | None:
        return self._divisions.get(code)

    def require(self, code: str) -> Division:
        """회계구분 조회

        Raises:
            NotFoundError: 회계구분이 없는 경우
        """
        division = self._divisions.get(code)
        if division is None:
            raise NotFoundError(f"회계구분을 찾을 수 없습니다: {code}")
        return division

    def list(self) -> list[Division]:
        return list(self._divisions.values())

    def required_divisions(self) -> list[Division]:
        return [d for d in self._divisions.values() if d.is_required]

    # =========================================================================
    # 이체 규칙
    # =========================================================================

    def can_transfer_to(self, source: str, target: str, amount: Decimal) -> bool:
        division = self._divisions.get(source)
        if division is None:
            return False
        return division.can_transfer_to(target, amount)

    def check_transfer(self, source: str, target: str, amount: Decimal) -> None:
        """이체 규칙 검증

        Raises:
            TransferLimitExceededError: 제한 구분 외부 이체 또는 한도 초과
        """
        if self.can_transfer_to(source, target, amount):
            return

        division = self.require(source)
        if division.is_restricted:
            message = f"{division.name}에서 다른 회계구분으로 이체할 수 없습니다: {source} → {target}"
        else:
            limit = division.transfer_limits.get(target)
            message = f"이체 한도 초과: {source} → {target} (금액: {amount}, 한도: {limit})"
        logger.warning(f"[Divisions] {message}")
        raise TransferLimitExceededError(message)

    def set_transfer_limit(self, source: str, target: str, limit: Decimal) -> None:
        self.require(source).transfer_limits[target] = Decimal(str(limit))
        logger.info(f"[Divisions] 이체 한도 설정: {source} → {target} = {limit}")

    # =========================================================================
    # 거래 내역 / 잔액
    # =========================================================================

    def add_transaction(
        self,
        code: str,
        journal_id: str,
        date: str,
        description: str,
        amount: Decimal,
        is_debit: bool,
        account_type: AccountType,
    ) -> None:
        """구분 거래 내역 추가 (전기 / 취소 시에만 호출)"""
        self.require(code).transactions.append(
            DivisionTransaction(
                journal_id=journal_id,
                date=date,
                description=description,
                amount=amount,
                is_debit=is_debit,
                account_type=AccountType(account_type),
            )
        )

    def get_balance(self, code: str) -> Decimal:
        return self.require(code).get_balance()

    def get_balances(self) -> dict[str, Decimal]:
        return {code: d.get_balance() for code, d in self._divisions.items()}
