"""
core/ledger/auxiliary.py 테스트

보조원장 개설, 일자 순 삽입과 잔액 누계, 기간 보고서, 마스터 등록
"""

from decimal import Decimal

import pytest

from core.ledger.accounts import AccountDirectory
from core.ledger.auxiliary import AuxiliaryLedgerService, UnitOwner, Vendor
from core.ledger.errors import AccountNotFoundError, NotFoundError, ValidationError


@pytest.fixture
def service() -> AuxiliaryLedgerService:
    accounts = AccountDirectory()
    accounts.initialize()
    return AuxiliaryLedgerService(accounts)


class TestRegister:
    """보조원장 개설 테스트"""

    def test_register(self, service: AuxiliaryLedgerService) -> None:
        """기본 계정의 정상 잔액 방향 상속"""
        ledger = service.register("2101", "V001", "한빛관리")

        assert ledger.key == ("2101", "V001")
        assert ledger.normal_balance.value == "CREDIT"
        assert service.exists("2101", "V001")

    def test_register_existing_updates_name(self, service: AuxiliaryLedgerService) -> None:
        """이미 있으면 이름만 갱신"""
        service.register("1301", "101", "홍길동님")
        service.register("1301", "101", "김철수님", {"phone": "010"})

        ledger = service.require("1301", "101")
        assert ledger.name == "김철수님"
        assert ledger.attributes["phone"] == "010"
        assert len(service.list()) == 1

    def test_unknown_master(self, service: AuxiliaryLedgerService) -> None:
        """없는 기본 계정"""
        with pytest.raises(AccountNotFoundError):
            service.register("9998", "X", "없음")

    def test_require_missing(self, service: AuxiliaryLedgerService) -> None:
        with pytest.raises(NotFoundError):
            service.require("1301", "999")


class TestPost:
    """거래 기록 / 잔액 누계 테스트"""

    def test_running_balance(self, service: AuxiliaryLedgerService) -> None:
        """미수금 (차변 계정): 부과 + / 수납 -"""
        service.register("1301", "101", "홍길동님")
        service.post("1301", "101", Decimal("10000"), True, "j1", "부과", "2026-04-01")
        service.post("1301", "101", Decimal("4000"), False, "j2", "수납", "2026-04-10")

        assert service.get_balance("1301", "101") == Decimal("6000")

    def test_credit_master(self, service: AuxiliaryLedgerService) -> None:
        """미지급금 (대변 계정): 대변 +"""
        service.register("2101", "V001", "한빛관리")
        service.post("2101", "V001", Decimal("50000"), False, "j1", "청구", "2026-04-01")

        assert service.get_balance("2101", "V001") == Decimal("50000")

    def test_out_of_order_insert(self, service: AuxiliaryLedgerService) -> None:
        """이전 일자 거래는 중간에 삽입되고 누계 재계산"""
        service.register("1301", "101", "홍길동님")
        service.post("1301", "101", Decimal("100"), True, "j1", "a", "2026-04-10")
        service.post("1301", "101", Decimal("50"), True, "j2", "b", "2026-04-01")
        service.post("1301", "101", Decimal("30"), False, "j3", "c", "2026-04-10")

        ledger = service.require("1301", "101")
        assert [t.journal_id for t in ledger.transactions] == ["j2", "j1", "j3"]
        assert [t.balance_after for t in ledger.transactions] == [
            Decimal("50"),
            Decimal("150"),
            Decimal("120"),
        ]

    def test_post_missing_ledger(self, service: AuxiliaryLedgerService) -> None:
        with pytest.raises(NotFoundError):
            service.post("1301", "999", Decimal("1"), True, "j", "", "2026-04-01")


class TestReport:
    """기간 보고서 테스트"""

    def test_report(self, service: AuxiliaryLedgerService) -> None:
        """기초 잔액 / 기간 합계 / 기말 잔액"""
        service.register("1301", "101", "홍길동님")
        service.post("1301", "101", Decimal("100"), True, "j1", "3월 부과", "2026-03-01")
        service.post("1301", "101", Decimal("200"), True, "j2", "4월 부과", "2026-04-01")
        service.post("1301", "101", Decimal("150"), False, "j3", "수납", "2026-04-15")
        service.post("1301", "101", Decimal("300"), True, "j4", "5월 부과", "2026-05-01")

        report = service.report("1301", "101", "2026-04-01", "2026-04-30")

        assert report.opening_balance == Decimal("100")
        assert report.debit_total == Decimal("200")
        assert report.credit_total == Decimal("150")
        assert report.closing_balance == Decimal("150")
        assert [r.journal_id for r in report.rows] == ["j2", "j3"]


class TestMasters:
    """구분소유자 / 거래처 등록 테스트"""

    def test_unit_owners_open_receivable_ledgers(self, service: AuxiliaryLedgerService) -> None:
        """관리비/수선적립금 미수금 보조원장 개설"""
        service.register_unit_owners([UnitOwner("101", "홍길동")])

        assert service.require("1301", "101").name == "홍길동님"
        assert service.exists("1302", "101")
        assert [o.unit_number for o in service.unit_owners()] == ["101"]

    def test_vendors_open_payable_ledgers(self, service: AuxiliaryLedgerService) -> None:
        """미지급금 보조원장 개설"""
        service.register_vendors([Vendor("V002", "대한전력", "수도광열"), Vendor("V001", "한빛")])

        assert [v.code for v in service.vendors()] == ["V001", "V002"]
        assert service.require("2101", "V002").attributes["category"] == "수도광열"

    def test_empty_unit_number(self, service: AuxiliaryLedgerService) -> None:
        with pytest.raises(ValidationError):
            service.register_unit_owners([UnitOwner("", "이름없음")])

    def test_unit_receivables(self, service: AuxiliaryLedgerService) -> None:
        """세대별 미수금 (잔액 0 세대 제외)"""
        service.register_unit_owners([UnitOwner("101", "홍길동"), UnitOwner("102", "김철수")])
        service.post("1301", "101", Decimal("10000"), True, "j1", "부과", "2026-04-01")
        service.post("1302", "101", Decimal("5000"), True, "j1", "부과", "2026-04-01")

        receivables = service.unit_receivables()

        assert len(receivables) == 1
        assert receivables[0]["unit_number"] == "101"
        assert receivables[0]["total_receivable"] == Decimal("15000")

    def test_summary_and_clear(self, service: AuxiliaryLedgerService) -> None:
        """요약 후 전체 삭제"""
        service.register_vendors([Vendor("V001", "한빛")])

        summary = service.summary()
        assert summary[0]["account_code"] == "2101"
        assert summary[0]["auxiliaries"][0]["code"] == "V001"

        service.clear()
        assert service.list() == []
        assert service.vendors() == []
