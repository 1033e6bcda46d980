"""
core/ledger/closing.py 테스트

회계구분별 결산 마감 분개
"""

from decimal import Decimal
from typing import Callable

from core.config.loader import LedgerConfig
from core.ledger.closing import CLOSING_TAG
from core.ledger.facade import Ledger
from core.ledger.journal import JournalInput, JournalLine
from core.ledger.types import AccountType

MakeInput = Callable[..., JournalInput]


def _post(ledger: Ledger, data: JournalInput) -> None:
    assert ledger.journals.create_journal(data, auto_post=True).success


class TestClosingEntries:
    """마감 분개 테스트"""

    def test_surplus_transfer(self, ledger: Ledger, make_input: MakeInput) -> None:
        """수익/비용 잔액을 이월금으로 대체"""
        _post(ledger, make_input("1102", "5101", "100000", date="2026-04-10"))
        _post(ledger, make_input("6101", "1102", "30000", date="2026-04-20"))

        results = ledger.create_closing_entries("2027-03-31")

        assert len(results) == 1
        journal = results[0].journal
        assert results[0].success
        assert journal.is_posted
        assert journal.division == "MANAGEMENT"
        assert CLOSING_TAG in journal.tags
        surplus = next(line for line in journal.lines if line.account_code == "4101")
        assert surplus.credit_amount == Decimal("70000")

    def test_zeroes_nominal_accounts(self, ledger: Ledger, make_input: MakeInput) -> None:
        """마감 후 수익/비용 잔액 0, 대차대조표에 당기순이익 행 없음"""
        _post(ledger, make_input("1102", "5101", "100000", date="2026-04-10"))
        _post(ledger, make_input("6101", "1102", "30000", date="2026-04-20"))
        ledger.create_closing_entries("2027-03-31")

        trial = ledger.reports.trial_balance()
        nominal = [
            r for r in trial.rows if r.account_type in (AccountType.REVENUE, AccountType.EXPENSE)
        ]
        assert all(r.balance == Decimal("0") for r in nominal)

        sheet = ledger.reports.balance_sheet("2027-03-31")
        assert sheet.is_balanced
        assert sheet.net_income == Decimal("0")
        assert [r.code for r in sheet.equity] == ["4101"]

    def test_net_loss(self, ledger: Ledger, make_input: MakeInput) -> None:
        """순손실은 이월금 차변"""
        _post(ledger, make_input("6310", "1105", "8000", date="2026-05-01"))

        results = ledger.create_closing_entries("2027-03-31")

        journal = results[0].journal
        assert journal.division == "PARKING"
        surplus = next(line for line in journal.lines if line.account_code == "4103")
        assert surplus.debit_amount == Decimal("8000")

    def test_per_division(self, ledger: Ledger, make_input: MakeInput) -> None:
        """구분별 분개 1건"""
        _post(ledger, make_input("1102", "5101", "100", date="2026-04-10"))
        _post(ledger, make_input("1103", "5201", "200", date="2026-04-10"))

        results = ledger.create_closing_entries("2027-03-31")

        assert sorted(r.journal.division for r in results) == ["MANAGEMENT", "RESERVE"]

    def test_inter_division_transfer(self, ledger: Ledger) -> None:
        """구분 간 전출/전입은 계정의 회계구분별 이월금으로 대체"""
        transfer = JournalInput(
            date="2026-05-10",
            description="수선적립금 전출",
            lines=[
                JournalLine("6501", debit_amount=Decimal("1000")),
                JournalLine("1102", credit_amount=Decimal("1000")),
                JournalLine("1103", debit_amount=Decimal("1000")),
                JournalLine("5402", credit_amount=Decimal("1000")),
            ],
        )
        created = ledger.journals.create_journal(transfer, auto_post=True)
        assert created.journal.division == "MANAGEMENT"

        results = ledger.create_closing_entries("2027-03-31")

        assert sorted(r.journal.division for r in results) == ["MANAGEMENT", "RESERVE"]
        rows = {r.code: r for r in ledger.reports.trial_balance().rows}
        assert rows["4101"].balance == Decimal("-1000")
        assert rows["4102"].balance == Decimal("1000")
        assert rows["6501"].balance == Decimal("0")
        assert rows["5402"].balance == Decimal("0")

    def test_nothing_to_close(self, ledger: Ledger) -> None:
        assert ledger.create_closing_entries("2027-03-31") == []

    def test_fiscal_year_default_range(self, ledger: Ledger, make_input: MakeInput) -> None:
        """기본 마감 기간은 회계연도 시작일부터"""
        _post(ledger, make_input("1102", "5101", "500", date="2026-03-15"))
        _post(ledger, make_input("1102", "5101", "100", date="2026-04-10"))

        results = ledger.create_closing_entries("2027-03-31")

        surplus = next(line for line in results[0].journal.lines if line.account_code == "4101")
        assert surplus.credit_amount == Decimal("100")

    def test_invalid_date(self, ledger: Ledger) -> None:
        results = ledger.create_closing_entries("2027/03/31")

        assert len(results) == 1
        assert results[0].error_code == "VALIDATION_ERROR"

    def test_approval_required_division(self, approval_config: LedgerConfig, make_input: MakeInput) -> None:
        """승인 필요 구분도 자동 승인 후 전기"""
        ledger = Ledger(approval_config)
        data = make_input("1103", "5201", "200", date="2026-04-10")
        created = ledger.journals.create_journal(data)
        ledger.journals.post_approved(created.journal.id)

        results = ledger.create_closing_entries("2027-03-31")

        assert results[0].success
        assert results[0].journal.is_posted
