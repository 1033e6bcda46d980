"""
core/ledger/service.py 테스트

분개 서비스: 생성 검증, 전기, 승인, 구분 간 이체, 취소/삭제/수정, 조회
"""

from decimal import Decimal
from typing import Callable

import pytest

from core.config.loader import DivisionConfig, LedgerConfig
from core.ledger.facade import Ledger
from core.ledger.journal import JournalInput, JournalLine, JournalPatch
from core.ledger.types import ApprovalStatus, JournalStatus

MakeInput = Callable[..., JournalInput]


class TestCreateJournal:
    """분개 생성 테스트"""

    def test_create_draft(self, ledger: Ledger, make_input: MakeInput) -> None:
        """DRAFT 생성, 계정명 채움"""
        result = ledger.journals.create_journal(make_input("1102", "5101", "10000"))

        assert result.success
        journal = result.journal
        assert journal.status == JournalStatus.DRAFT
        assert journal.journal_number == "J000001"
        assert journal.lines[0].account_name == "보통예금"

    def test_auto_post(self, ledger: Ledger, make_input: MakeInput) -> None:
        result = ledger.journals.create_journal(make_input("1102", "5101", "10000"), auto_post=True)

        assert result.success
        assert result.journal.is_posted

    def test_numbers_increase(self, ledger: Ledger, make_input: MakeInput) -> None:
        """번호 단조 증가"""
        numbers = [
            ledger.journals.create_journal(make_input("1102", "5101", "1")).journal.journal_number
            for _ in range(3)
        ]

        assert numbers == ["J000001", "J000002", "J000003"]

    def test_unbalanced(self, ledger: Ledger) -> None:
        """차대 불일치는 검증 실패, 분개 저장 안 됨"""
        data = JournalInput(
            date="2026-04-01",
            description="불일치",
            lines=[
                JournalLine("1102", debit_amount=Decimal("100")),
                JournalLine("5101", credit_amount=Decimal("90")),
            ],
        )

        result = ledger.journals.create_journal(data)

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert ledger.journals.all_journals() == []

    def test_unknown_account(self, ledger: Ledger, make_input: MakeInput) -> None:
        result = ledger.journals.create_journal(make_input("1102", "5999", "100"))

        assert not result.success
        assert result.error_code == "ACCOUNT_NOT_FOUND"

    def test_summary_account(self, ledger: Ledger, make_input: MakeInput) -> None:
        """집계 계정 전기 불가"""
        result = ledger.journals.create_journal(make_input("1100", "5101", "100"))

        assert not result.success
        assert any("집계 계정" in e for e in result.errors)

    def test_inactive_account(self, ledger: Ledger, make_input: MakeInput) -> None:
        ledger.accounts.set_active("5302", False)

        result = ledger.journals.create_journal(make_input("1102", "5302", "100"))

        assert not result.success
        assert any("비활성" in e for e in result.errors)

    def test_unknown_auxiliary(self, ledger: Ledger, make_input: MakeInput) -> None:
        """보조원장 없는 보조 코드"""
        result = ledger.journals.create_journal(make_input("1301", "5101", "100", debit_aux="999"))

        assert not result.success
        assert result.error_code == "NOT_FOUND"

    def test_unknown_division(self, ledger: Ledger, make_input: MakeInput) -> None:
        result = ledger.journals.create_journal(make_input("1102", "5101", "100", division="ETC"))

        assert not result.success
        assert result.error_code == "NOT_FOUND"

    def test_duplicate_number(self, ledger: Ledger, make_input: MakeInput) -> None:
        """지정 번호 중복"""
        ledger.journals.create_journal(make_input("1102", "5101", "1"), journal_number="J000005")

        result = ledger.journals.create_journal(
            make_input("1102", "5101", "1"), journal_number="J000005"
        )

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"


class TestDivisionInference:
    """회계구분 추론 테스트"""

    def test_single_division(self, ledger: Ledger, make_input: MakeInput) -> None:
        """COMMON 제외 단일 구분"""
        journal = ledger.journals.create_journal(make_input("1103", "5201", "100")).journal

        assert journal.division == "RESERVE"

    def test_common_only_uses_default(self, ledger: Ledger, make_input: MakeInput) -> None:
        """COMMON 계정만 있으면 기본 구분"""
        journal = ledger.journals.create_journal(make_input("1501", "2401", "100")).journal

        assert journal.division == "MANAGEMENT"

    def test_explicit_division_kept(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(
            make_input("1501", "2401", "100", division="PARKING")
        ).journal

        assert journal.division == "PARKING"


class TestPostJournal:
    """전기 테스트"""

    def test_double_post(self, ledger: Ledger, make_input: MakeInput) -> None:
        """재전기는 STATE_ERROR, 상태 유지"""
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100"), auto_post=True).journal

        result = ledger.journals.post_journal_by_id(journal.id)

        assert not result.success
        assert result.error_code == "STATE_ERROR"
        assert ledger.journals.get_journal(journal.id).is_posted
        assert len(ledger.divisions.require("MANAGEMENT").transactions) == 2

    def test_post_missing(self, ledger: Ledger) -> None:
        result = ledger.journals.post_journal_by_id("missing")

        assert result.error_code == "NOT_FOUND"

    def test_effects_recorded(self, ledger_with_masters: Ledger, make_input: MakeInput) -> None:
        """전기 시 구분 거래 내역 / 보조원장 기록"""
        ledger = ledger_with_masters
        ledger.journals.create_journal(make_input("1301", "5101", "15000", debit_aux="101"), auto_post=True)

        assert ledger.auxiliary.get_balance("1301", "101") == Decimal("15000")
        # 자산 +15000, 수익 +15000
        assert ledger.divisions.get_balance("MANAGEMENT") == Decimal("30000")

    def test_draft_has_no_effects(self, ledger_with_masters: Ledger, make_input: MakeInput) -> None:
        ledger = ledger_with_masters
        ledger.journals.create_journal(make_input("1301", "5101", "15000", debit_aux="101"))

        assert ledger.auxiliary.get_balance("1301", "101") == Decimal("0")
        assert ledger.divisions.require("MANAGEMENT").transactions == []


class TestApprovalGate:
    """승인 필요 구분 테스트"""

    @pytest.fixture
    def approval_ledger(self, approval_config: LedgerConfig) -> Ledger:
        return Ledger(approval_config)

    def test_post_requires_approval(self, approval_ledger: Ledger, make_input: MakeInput) -> None:
        """미승인 분개 전기 불가"""
        result = approval_ledger.journals.create_journal(
            make_input("1103", "5201", "100"), auto_post=True
        )

        assert not result.success
        assert result.error_code == "STATE_ERROR"
        assert result.journal is not None
        assert result.journal.is_draft

    def test_post_after_approval(self, approval_ledger: Ledger, make_input: MakeInput) -> None:
        journals = approval_ledger.journals
        journal = journals.create_journal(make_input("1103", "5201", "100")).journal

        assert journals.submit_journal(journal.id, actor="writer").success
        assert journals.approve_journal(journal.id, actor="chair").success
        result = journals.post_journal_by_id(journal.id)

        assert result.success
        assert result.journal.approval_status == ApprovalStatus.APPROVED

    def test_post_approved_helper(self, approval_ledger: Ledger, make_input: MakeInput) -> None:
        """시스템 분개 자동 승인 후 전기"""
        journal = approval_ledger.journals.create_journal(make_input("1103", "5201", "100")).journal

        result = approval_ledger.journals.post_approved(journal.id, actor="system")

        assert result.success
        assert result.journal.approved_by == "system"

    def test_other_division_unaffected(self, approval_ledger: Ledger, make_input: MakeInput) -> None:
        result = approval_ledger.journals.create_journal(
            make_input("1102", "5101", "100"), auto_post=True
        )

        assert result.success

    def test_pending_approval_summary(self, approval_ledger: Ledger, make_input: MakeInput) -> None:
        journal = approval_ledger.journals.create_journal(make_input("1103", "5201", "100")).journal
        approval_ledger.journals.submit_journal(journal.id)

        assert approval_ledger.journals.summary()["pending_approval"] == 1


class TestCrossDivision:
    """구분 간 이체 테스트"""

    def test_restricted_outbound_blocked(self, ledger: Ledger, make_input: MakeInput) -> None:
        """수선적립금 계좌 → 관리비 계좌 이체 거부"""
        result = ledger.journals.create_journal(make_input("1102", "1103", "100000"))

        assert not result.success
        assert result.error_code == "TRANSFER_LIMIT_EXCEEDED"
        assert ledger.journals.all_journals() == []

    def test_inbound_to_restricted_allowed(self, ledger: Ledger, make_input: MakeInput) -> None:
        """관리회계 → 수선적립금 전출 허용"""
        result = ledger.journals.create_journal(
            make_input("1103", "1102", "100000", division="MANAGEMENT"), auto_post=True
        )

        assert result.success

    def test_transfer_limit(self, make_input: MakeInput) -> None:
        """설정 한도 초과"""
        ledger = Ledger(
            LedgerConfig(
                divisions={
                    "MANAGEMENT": DivisionConfig(
                        code="MANAGEMENT", transfer_limits={"PARKING": Decimal("50000")}
                    )
                }
            )
        )

        allowed = ledger.journals.create_journal(make_input("1105", "1102", "50000"))
        blocked = ledger.journals.create_journal(make_input("1105", "1102", "50001"))

        assert allowed.success
        assert blocked.error_code == "TRANSFER_LIMIT_EXCEEDED"

    def test_common_accounts_ignored(self, ledger: Ledger, make_input: MakeInput) -> None:
        """COMMON 계정은 이체 검사 제외"""
        result = ledger.journals.create_journal(make_input("2101", "1103", "100", division="RESERVE"))

        assert result.success


class TestCancelJournal:
    """취소 테스트"""

    def test_cancel_reverses_effects(self, ledger_with_masters: Ledger, make_input: MakeInput) -> None:
        """전기 분개 취소 시 구분/보조원장 역기록"""
        ledger = ledger_with_masters
        journal = ledger.journals.create_journal(
            make_input("1301", "5101", "15000", debit_aux="101"), auto_post=True
        ).journal

        result = ledger.journals.cancel_journal(journal.id, "이중 부과", actor="admin")

        assert result.success
        assert result.journal.is_cancelled
        assert ledger.auxiliary.get_balance("1301", "101") == Decimal("0")
        assert ledger.divisions.get_balance("MANAGEMENT") == Decimal("0")
        last = ledger.auxiliary.require("1301", "101").transactions[-1]
        assert last.description.startswith("[취소]")
        assert not last.is_debit

    def test_cancelled_excluded_from_reports(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100"), auto_post=True).journal
        ledger.journals.cancel_journal(journal.id, "오류")

        trial = ledger.reports.trial_balance()

        assert trial.rows == []

    def test_cancel_requires_reason(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal

        result = ledger.journals.cancel_journal(journal.id, "  ")

        assert result.error_code == "VALIDATION_ERROR"

    def test_cancel_twice(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal
        ledger.journals.cancel_journal(journal.id, "취소")

        result = ledger.journals.cancel_journal(journal.id, "다시")

        assert result.error_code == "STATE_ERROR"


class TestDeleteAndUpdate:
    """삭제 / 수정 테스트"""

    def test_delete_draft(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal

        assert ledger.journals.delete_journal(journal.id).success
        assert ledger.journals.get_journal(journal.id) is None

    def test_delete_posted(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100"), auto_post=True).journal

        result = ledger.journals.delete_journal(journal.id)

        assert result.error_code == "STATE_ERROR"

    def test_numbers_not_reused(self, ledger: Ledger, make_input: MakeInput) -> None:
        """삭제된 번호 재사용 없음"""
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal
        ledger.journals.delete_journal(journal.id)

        again = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal

        assert again.journal_number == "J000002"

    def test_update_lines(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal
        patch = JournalPatch(
            lines=[
                JournalLine("1102", debit_amount=Decimal("200")),
                JournalLine("5302", credit_amount=Decimal("200")),
            ]
        )

        result = ledger.journals.update_journal(journal.id, patch)

        assert result.success
        assert result.journal.total_debit == Decimal("200")
        assert result.journal.lines[1].account_name == "잡수입"

    def test_update_invalid(self, ledger: Ledger, make_input: MakeInput) -> None:
        """수정 결과 검증 실패 시 기존 분개 유지"""
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal
        patch = JournalPatch(lines=[JournalLine("1102", debit_amount=Decimal("200"))])

        result = ledger.journals.update_journal(journal.id, patch)

        assert not result.success
        assert ledger.journals.get_journal(journal.id).total_debit == Decimal("100")

    def test_update_posted(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100"), auto_post=True).journal

        result = ledger.journals.update_journal(journal.id, JournalPatch(description="변경"))

        assert result.error_code == "STATE_ERROR"


class TestQueries:
    """조회 테스트"""

    def test_list_filters(self, ledger: Ledger, make_input: MakeInput) -> None:
        ledger.journals.create_journal(make_input("1102", "5101", "100", date="2026-04-02"), auto_post=True)
        ledger.journals.create_journal(make_input("1103", "5201", "100", date="2026-04-01"))
        ledger.journals.create_journal(make_input("6101", "1102", "50", date="2026-05-01"), auto_post=True)

        assert len(ledger.journals.list_journals(status=JournalStatus.POSTED)) == 2
        assert len(ledger.journals.list_journals(division="RESERVE")) == 1
        assert len(ledger.journals.list_journals(date_to="2026-04-30")) == 2
        assert len(ledger.journals.list_journals(account_code="1102")) == 2
        dates = [j.date for j in ledger.journals.list_journals()]
        assert dates == sorted(dates)

    def test_find_by_number(self, ledger: Ledger, make_input: MakeInput) -> None:
        journal = ledger.journals.create_journal(make_input("1102", "5101", "100")).journal

        assert ledger.journals.find_by_number("J000001") == journal
        assert ledger.journals.find_by_number("J999999") is None

    def test_summary(self, ledger: Ledger, make_input: MakeInput) -> None:
        ledger.journals.create_journal(make_input("1102", "5101", "100"), auto_post=True)
        ledger.journals.create_journal(make_input("1102", "5101", "30"))

        summary = ledger.journals.summary()

        assert summary["total"] == 2
        assert summary["posted"] == 1
        assert summary["draft"] == 1
        assert summary["posted_debit_total"] == Decimal("100")
