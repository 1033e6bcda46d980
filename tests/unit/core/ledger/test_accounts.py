"""
core/ledger/accounts.py 테스트

계정과목 디렉토리: 초기화, 조회, 등록/갱신, 트리, 잔액 계산
"""

from decimal import Decimal

import pytest

from core.ledger.accounts import (
    Account,
    AccountDirectory,
    is_credit_account,
    is_debit_account,
    signed_balance,
)
from core.ledger.errors import AccountNotFoundError, ValidationError
from core.ledger.types import INITIAL_ACCOUNTS, AccountType, DivisionCode, NormalBalance


@pytest.fixture
def directory() -> AccountDirectory:
    directory = AccountDirectory()
    directory.initialize()
    return directory


class TestBalanceHelpers:
    """정상 잔액 헬퍼 테스트"""

    def test_signed_balance_debit(self) -> None:
        assert signed_balance(NormalBalance.DEBIT, Decimal("100"), Decimal("30")) == Decimal("70")

    def test_signed_balance_credit(self) -> None:
        assert signed_balance(NormalBalance.CREDIT, Decimal("100"), Decimal("30")) == Decimal("-70")

    def test_debit_credit_accounts(self) -> None:
        assert is_debit_account(AccountType.ASSET)
        assert is_debit_account(AccountType.EXPENSE)
        assert is_credit_account(AccountType.REVENUE)
        assert not is_credit_account(AccountType.ASSET)


class TestInitialize:
    """초기화 테스트"""

    def test_loads_initial_chart(self, directory: AccountDirectory) -> None:
        """초기 계정과목표 전체 적재"""
        assert len(directory) == len(INITIAL_ACCOUNTS)

    def test_normal_balance_derived(self, directory: AccountDirectory) -> None:
        """정상 잔액은 유형에서 유도"""
        assert directory.require("1102").normal_balance == NormalBalance.DEBIT
        assert directory.require("5101").normal_balance == NormalBalance.CREDIT


class TestQueries:
    """조회 테스트"""

    def test_require_missing(self, directory: AccountDirectory) -> None:
        """없는 계정"""
        with pytest.raises(AccountNotFoundError) as exc_info:
            directory.require("9998")
        assert exc_info.value.account_code == "9998"
        assert exc_info.value.code == "ACCOUNT_NOT_FOUND"

    def test_list_filters(self, directory: AccountDirectory) -> None:
        """유형 + 전기 가능 필터"""
        revenues = directory.list(account_type=AccountType.REVENUE, is_postable=True)

        assert revenues
        assert all(a.account_type == AccountType.REVENUE and a.is_postable for a in revenues)

    def test_list_by_division(self, directory: AccountDirectory) -> None:
        """회계구분 필터"""
        reserve = directory.list(division=DivisionCode.RESERVE)

        assert "1103" in {a.code for a in reserve}
        assert all(a.division == DivisionCode.RESERVE for a in reserve)

    def test_list_by_parent(self, directory: AccountDirectory) -> None:
        """상위 계정 필터 (표시 순서 정렬)"""
        codes = [a.code for a in directory.list(parent_code="1300")]

        assert codes == ["1301", "1302", "1303"]

    def test_belongs_to_division(self, directory: AccountDirectory) -> None:
        """COMMON 계정은 모든 구분에 속함"""
        assert directory.belongs_to_division("2101", DivisionCode.RESERVE)
        assert directory.belongs_to_division("1103", "RESERVE")
        assert not directory.belongs_to_division("1103", DivisionCode.MANAGEMENT)
        assert not directory.belongs_to_division("0000", DivisionCode.MANAGEMENT)

    def test_calculate_balance(self, directory: AccountDirectory) -> None:
        """정상 잔액 방향 기준 잔액"""
        assert directory.calculate_balance("2101", Decimal("10"), Decimal("50")) == Decimal("40")


class TestTree:
    """계정 트리 테스트"""

    def test_roots(self, directory: AccountDirectory) -> None:
        """최상위 계정"""
        roots = {a.code for a in directory.roots()}
        assert {"1000", "2000", "4000", "5000", "6000"} <= roots

    def test_ancestors_and_level(self, directory: AccountDirectory) -> None:
        """상위 계정 / 깊이"""
        assert [a.code for a in directory.ancestors("1301")] == ["1300", "1000"]
        assert directory.level("1301") == 2
        assert directory.level("1000") == 0

    def test_descendants(self, directory: AccountDirectory) -> None:
        """하위 계정 (깊이 우선)"""
        codes = [a.code for a in directory.descendants("1700")]
        assert codes == ["1710", "1711"]


class TestUpsert:
    """등록/갱신 테스트"""

    def test_add_account(self, directory: AccountDirectory) -> None:
        """신규 계정 등록"""
        account = directory.upsert(
            Account("6311", "청소용품비", AccountType.EXPENSE, parent_code="6300")
        )

        assert account.normal_balance == NormalBalance.DEBIT
        assert "6311" in {a.code for a in directory.children("6300")}

    def test_update_account(self, directory: AccountDirectory) -> None:
        """기존 계정 갱신"""
        directory.upsert(
            Account("6308", "기타잡비", AccountType.EXPENSE, parent_code="6300")
        )

        assert directory.require("6308").name == "기타잡비"

    def test_missing_parent(self, directory: AccountDirectory) -> None:
        """상위 계정 없음"""
        with pytest.raises(ValidationError):
            directory.upsert(Account("7001", "기타", AccountType.EXPENSE, parent_code="7000"))

    def test_wrong_normal_balance(self, directory: AccountDirectory) -> None:
        """유형과 정상 잔액 불일치"""
        with pytest.raises(ValidationError) as exc_info:
            directory.upsert(
                Account("1106", "예금", AccountType.ASSET, normal_balance=NormalBalance.CREDIT)
            )
        assert "정상 잔액" in exc_info.value.errors[0]

    def test_cycle(self, directory: AccountDirectory) -> None:
        """순환 참조 방지"""
        with pytest.raises(ValidationError):
            directory.upsert(
                Account("1000", "유동자산", AccountType.ASSET, parent_code="1301", is_postable=False)
            )

    def test_set_active(self, directory: AccountDirectory) -> None:
        """비활성화"""
        directory.set_active("6308", False)

        assert directory.require("6308").is_active is False


class TestRebuildFrom:
    """재구성 테스트"""

    def test_parent_after_child(self) -> None:
        """부모가 뒤에 있어도 허용"""
        directory = AccountDirectory()
        directory.rebuild_from(
            [
                Account("1101", "현금", AccountType.ASSET, parent_code="1100"),
                Account("1100", "현금예금", AccountType.ASSET, is_postable=False),
            ]
        )

        assert directory.level("1101") == 1

    def test_failure_keeps_state(self, directory: AccountDirectory) -> None:
        """검증 실패 시 기존 상태 유지"""
        before = len(directory)

        with pytest.raises(ValidationError):
            directory.rebuild_from(
                [
                    Account("1", "a", AccountType.ASSET),
                    Account("1", "b", AccountType.ASSET),
                ]
            )
        assert len(directory) == before
