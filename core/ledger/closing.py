"""
결산 마감

회계구분별로 수익/비용 잔액을 0으로 만들고 차액을 이월금 계정으로 대체하는
마감 분개를 생성/전기한다.
"""

import logging
from decimal import Decimal

from core.constants import Defaults
from core.ledger.accounts import AccountDirectory
from core.ledger.divisions import Division, DivisionRegistry
from core.ledger.errors import LedgerError, ValidationError
from core.ledger.journal import JournalInput, JournalLine
from core.ledger.reports import ReportService, TrialBalanceRow
from core.ledger.results import LedgerResult
from core.ledger.service import JournalService
from core.ledger.types import ZERO, AccountType, DivisionCode
from core.utils.timezone import fiscal_year_range, is_iso_date

logger = logging.getLogger(__name__)

CLOSING_TAG = "closing"


class ClosingService:
    """결산 마감 서비스

    Args:
        journals: 분개 서비스
        divisions: 회계구분 레지스트리 (구분별 이월금 계정)
        reports: 보고서 서비스 (시산표)
        accounts: 계정과목 디렉터리 (계정의 회계구분)
        fiscal_year_start_month: 회계연도 시작월 (마감 기간 기본값)
        default_division: COMMON 계정을 마감할 회계구분
    """

    def __init__(
        self,
        journals: JournalService,
        divisions: DivisionRegistry,
        reports: ReportService,
        accounts: AccountDirectory,
        fiscal_year_start_month: int = Defaults.FISCAL_YEAR_START_MONTH,
        default_division: str = Defaults.DEFAULT_DIVISION,
    ) -> None:
        self._journals = journals
        self._divisions = divisions
        self._reports = reports
        self._accounts = accounts
        self._fiscal_year_start_month = fiscal_year_start_month
        self._default_division = default_division

    def create_closing_entries(
        self,
        closing_date: str,
        date_from: str | None = None,
        actor: str = Defaults.ACTOR,
    ) -> list[LedgerResult]:
        """필수 회계구분별 마감 분개 생성 및 전기

        date_from을 생략하면 closing_date가 속한 회계연도 시작일부터.
        수익/비용 계정은 분개의 구분이 아니라 계정의 회계구분으로 묶는다
        (COMMON 계정은 기본 구분). 수익/비용 잔액이 없는 구분은 건너뛴다.
        승인 필요 구분은 승인 요청/승인 후 전기.

        Returns:
            구분별 결과 목록 (성공 시 journal에 마감 분개)
        """
        if not is_iso_date(closing_date):
            error = ValidationError(f"마감 일자 형식이 올바르지 않습니다: {closing_date}")
            return [LedgerResult.fail(error)]
        if date_from is None:
            date_from, _ = fiscal_year_range(closing_date, self._fiscal_year_start_month)

        try:
            trial = self._reports.trial_balance(date_from, closing_date)
        except LedgerError as e:
            return [LedgerResult.fail(e)]

        rows_by_division: dict[str, list[TrialBalanceRow]] = {}
        for row in trial.rows:
            if row.account_type in (AccountType.REVENUE, AccountType.EXPENSE):
                rows_by_division.setdefault(self._division_of(row.code), []).append(row)

        results = []
        for division in self._divisions.required_divisions():
            rows = rows_by_division.get(division.code, [])
            try:
                data = self._closing_input(division, rows, closing_date)
            except LedgerError as e:
                results.append(LedgerResult.fail(e))
                continue
            if data is None:
                logger.info(f"[Closing] 마감 대상 없음: {division.code}")
                continue
            results.append(self._create_and_post(division, data, actor))
        return results

    def _division_of(self, code: str) -> str:
        account = self._accounts.get(code)
        if account is None or account.division in (None, DivisionCode.COMMON):
            return self._default_division
        return account.division.value

    def _closing_input(
        self, division: Division, rows: list[TrialBalanceRow], closing_date: str
    ) -> JournalInput | None:
        surplus = division.default_accounts.get("surplus")
        if not surplus:
            raise ValidationError(f"이월금 계정이 설정되지 않은 회계구분입니다: {division.code}")

        lines: list[JournalLine] = []
        net_income = ZERO
        for row in rows:
            if row.balance == ZERO:
                continue
            if row.account_type == AccountType.REVENUE:
                net_income += row.balance
                lines.append(self._zero_out(row.code, row.balance, debit_when_positive=True))
            elif row.account_type == AccountType.EXPENSE:
                net_income -= row.balance
                lines.append(self._zero_out(row.code, row.balance, debit_when_positive=False))

        if not lines:
            return None
        if net_income > ZERO:
            lines.append(JournalLine(surplus, credit_amount=net_income, description="당기순이익 대체"))
        elif net_income < ZERO:
            lines.append(JournalLine(surplus, debit_amount=-net_income, description="당기순손실 대체"))

        return JournalInput(
            date=closing_date,
            description=f"결산 마감 ({division.name})",
            lines=lines,
            division=division.code,
            reference=f"closing_{division.code}_{closing_date}",
            tags=[CLOSING_TAG],
        )

    @staticmethod
    def _zero_out(code: str, balance: Decimal, debit_when_positive: bool) -> JournalLine:
        # 잔액이 음수인 계정은 반대 방향으로 대체
        debit = (balance > ZERO) == debit_when_positive
        amount = abs(balance)
        if debit:
            return JournalLine(code, debit_amount=amount, description="결산 대체")
        return JournalLine(code, credit_amount=amount, description="결산 대체")

    def _create_and_post(self, division: Division, data: JournalInput, actor: str) -> LedgerResult:
        created = self._journals.create_journal(data, meta={"closing": True}, actor=actor)
        if not created.success or created.journal is None:
            return created

        result = self._journals.post_approved(created.journal.id, actor=actor)
        if result.success and result.journal is not None:
            logger.info(
                f"[Closing] 마감 분개 전기: {division.code} {result.journal.journal_number}"
            )
        return result
