"""
계정과목 디렉토리

계층형 계정과목표 관리.
- 계정은 코드로 식별 (code → Account 맵)
- 트리는 parent_code 인덱스로 표현 (자식 포인터 없음)
- 삽입 시 부모 존재 / 순환 여부 검증
- 참조된 계정은 삭제하지 않고 비활성화만 허용
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal

from core.ledger.errors import AccountNotFoundError, ValidationError
from core.ledger.types import (
    INITIAL_ACCOUNTS,
    NORMAL_BALANCE_BY_TYPE,
    AccountType,
    DivisionCode,
    NormalBalance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    """계정과목

    normal_balance가 None이면 디렉토리 등록 시 계정 유형에서 유도.
    """

    code: str
    name: str
    account_type: AccountType
    normal_balance: NormalBalance | None = None
    parent_code: str | None = None
    division: DivisionCode | None = None
    is_active: bool = True
    is_postable: bool = True
    description: str | None = None
    display_order: int = 0

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == NormalBalance.DEBIT


def is_debit_account(account_type: AccountType) -> bool:
    """차변 정상 잔액 계정 여부 (자산, 비용)"""
    return NORMAL_BALANCE_BY_TYPE[AccountType(account_type)] == NormalBalance.DEBIT


def is_credit_account(account_type: AccountType) -> bool:
    """대변 정상 잔액 계정 여부 (부채, 순자산, 수익)"""
    return not is_debit_account(account_type)


def signed_balance(
    normal_balance: NormalBalance, debit_total: Decimal, credit_total: Decimal
) -> Decimal:
    """정상 잔액 방향 기준 잔액

    DEBIT 계정: 차변 - 대변
    CREDIT 계정: 대변 - 차변
    """
    if normal_balance == NormalBalance.DEBIT:
        return debit_total - credit_total
    return credit_total - debit_total


def initial_accounts() -> list[Account]:
    """초기 계정과목표 → Account 목록"""
    accounts = []
    for order, (code, name, account_type, parent, postable, division, description) in enumerate(
        INITIAL_ACCOUNTS
    ):
        accounts.append(
            Account(
                code=code,
                name=name,
                account_type=AccountType(account_type),
                parent_code=parent,
                division=DivisionCode(division),
                is_postable=postable,
                description=description,
                display_order=(order + 1) * 10,
            )
        )
    return accounts


class AccountDirectory:
    """계정과목 디렉토리

    사용 예시:
    ```python
    directory = AccountDirectory()
    directory.initialize()

    account = directory.get("1102")
    balance = directory.calculate_balance("1102", Decimal("100"), Decimal("30"))
    ```
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._children: dict[str | None, list[str]] = {}

    # =========================================================================
    # 초기화
    # =========================================================================

    def initialize(self) -> None:
        """초기 계정과목표로 디렉토리 구성"""
        self.rebuild_from(initial_accounts())
        logger.info(f"[Accounts] 계정과목 초기화 완료: {len(self._accounts)}건")

    def rebuild_from(self, definitions: list[Account]) -> None:
        """정의 목록으로 디렉토리 전체 재구성

        부모가 목록 뒤쪽에 있어도 허용. 검증 실패 시 기존 상태 유지.

        Raises:
            ValidationError: 코드 중복, 유형 불일치, 부모 누락, 순환
        """
        accounts: dict[str, Account] = {}
        errors: list[str] = []

        for definition in definitions:
            account = self._normalize(definition)
            if account.code in accounts:
                errors.append(f"중복된 계정 코드입니다: {account.code}")
                continue
            errors.extend(self._check_type(account))
            accounts[account.code] = account

        for account in accounts.values():
            if account.parent_code is None:
                continue
            if account.parent_code not in accounts:
                errors.append(
                    f"상위 계정을 찾을 수 없습니다: {account.code} → {account.parent_code}"
                )
            elif self._has_cycle(accounts, account.code, account.parent_code):
                errors.append(f"계정 트리에 순환이 있습니다: {account.code}")

        if errors:
            raise ValidationError("계정과목표 재구성 실패", errors)

        self._accounts = accounts
        self._rebuild_index()

    # =========================================================================
    # 조회
    # =========================================================================

    def get(self, code: str) -> Account | None:
        return self._accounts.get(code)

    def require(self, code: str) -> Account:
        """계정 조회 (없으면 예외)

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        account = self._accounts.get(code)
        if account is None:
            raise AccountNotFoundError(code)
        return account

    def exists(self, code: str) -> bool:
        return code in self._accounts

    def list(
        self,
        account_type: AccountType | None = None,
        division: DivisionCode | None = None,
        is_active: bool | None = None,
        is_postable: bool | None = None,
        parent_code: str | None = None,
    ) -> list[Account]:
        """계정 목록 (지정한 조건만 적용, 표시 순서 정렬)"""
        result = []
        for account in self._accounts.values():
            if account_type is not None and account.account_type != account_type:
                continue
            if division is not None and account.division != division:
                continue
            if is_active is not None and account.is_active != is_active:
                continue
            if is_postable is not None and account.is_postable != is_postable:
                continue
            if parent_code is not None and account.parent_code != parent_code:
                continue
            result.append(account)
        return sorted(result, key=lambda a: (a.display_order, a.code))

    def __len__(self) -> int:
        return len(self._accounts)

    # =========================================================================
    # 변경
    # =========================================================================

    def upsert(self, definition: Account) -> Account:
        """계정 추가 또는 갱신

        Raises:
            ValidationError: 유형/정상잔액 불일치, 부모 누락, 순환
        """
        account = self._normalize(definition)

        errors = self._check_type(account)
        if account.parent_code is not None:
            if account.parent_code not in self._accounts:
                errors.append(f"상위 계정을 찾을 수 없습니다: {account.parent_code}")
            elif self._has_cycle(self._accounts, account.code, account.parent_code):
                errors.append(f"계정 트리에 순환이 생깁니다: {account.code} → {account.parent_code}")
        if errors:
            raise ValidationError(f"계정 등록 실패: {account.code}", errors)

        is_new = account.code not in self._accounts
        self._accounts[account.code] = account
        self._rebuild_index()

        logger.info(f"[Accounts] 계정 {'등록' if is_new else '갱신'}: {account.code} {account.name}")
        return account

    def set_active(self, code: str, is_active: bool) -> Account:
        """계정 활성/비활성 전환

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        account = replace(self.require(code), is_active=is_active)
        self._accounts[code] = account
        logger.info(f"[Accounts] 계정 {'활성화' if is_active else '비활성화'}: {code}")
        return account

    # =========================================================================
    # 잔액 / 분류
    # =========================================================================

    def calculate_balance(self, code: str, debit_total: Decimal, credit_total: Decimal) -> Decimal:
        """정상 잔액 방향 기준 계정 잔액

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        account = self.require(code)
        assert account.normal_balance is not None
        return signed_balance(account.normal_balance, debit_total, credit_total)

    def belongs_to_division(self, code: str, division: DivisionCode | str) -> bool:
        """계정이 회계구분에 속하는지 (COMMON 계정은 모든 구분에 속함)"""
        account = self._accounts.get(code)
        if account is None:
            return False
        if account.division is None or account.division == DivisionCode.COMMON:
            return True
        return account.division == DivisionCode(division)

    # =========================================================================
    # 트리
    # =========================================================================

    def roots(self) -> list[Account]:
        return self._sorted(self._children.get(None, []))

    def children(self, code: str) -> list[Account]:
        return self._sorted(self._children.get(code, []))

    def ancestors(self, code: str) -> list[Account]:
        """상위 계정 목록 (가까운 순)"""
        result = []
        current = self.require(code).parent_code
        while current is not None:
            parent = self._accounts[current]
            result.append(parent)
            current = parent.parent_code
        return result

    def descendants(self, code: str) -> list[Account]:
        """하위 계정 전체 (깊이 우선, 표시 순서)"""
        result = []
        stack = list(reversed(self.children(code)))
        while stack:
            account = stack.pop()
            result.append(account)
            stack.extend(reversed(self.children(account.code)))
        return result

    def level(self, code: str) -> int:
        """트리 깊이 (최상위 = 0)"""
        return len(self.ancestors(code))

    # =========================================================================
    # 내부
    # =========================================================================

    @staticmethod
    def _normalize(definition: Account) -> Account:
        account_type = AccountType(definition.account_type)
        normal = definition.normal_balance
        if normal is None:
            normal = NORMAL_BALANCE_BY_TYPE[account_type]
        division = DivisionCode(definition.division) if definition.division else None
        return replace(
            definition,
            account_type=account_type,
            normal_balance=NormalBalance(normal),
            division=division,
        )

    @staticmethod
    def _check_type(account: Account) -> list[str]:
        expected = NORMAL_BALANCE_BY_TYPE[account.account_type]
        if account.normal_balance != expected:
            return [
                f"{account.code}: {account.account_type.value} 계정의 정상 잔액은 "
                f"{expected.value}이어야 합니다"
            ]
        return []

    @staticmethod
    def _has_cycle(accounts: dict[str, Account], code: str, parent_code: str) -> bool:
        seen = {code}
        current: str | None = parent_code
        while current is not None:
            if current in seen:
                return True
            seen.add(current)
            parent = accounts.get(current)
            current = parent.parent_code if parent else None
        return False

    def _rebuild_index(self) -> None:
        children: dict[str | None, list[str]] = {}
        for account in self._accounts.values():
            children.setdefault(account.parent_code, []).append(account.code)
        self._children = children

    def _sorted(self, codes: list[str]) -> list[Account]:
        return sorted(
            (self._accounts[c] for c in codes), key=lambda a: (a.display_order, a.code)
        )
