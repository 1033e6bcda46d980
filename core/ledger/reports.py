"""
보고서 엔진

전기(POSTED)된 분개만으로 재무제표를 계산한다.
- 시산표: 기간 내 계정별 차변/대변 합계와 잔액
- 손익계산서: 수익/비용 구분, 당기순이익
- 대차대조표: 기준일까지 누적, 마감 전 순이익을 순자산에 합산
- 차대 합계 불일치는 엔진 결함으로 보고 ConsistencyError 발생
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.config.loader import LedgerConfig
from core.ledger.accounts import Account, AccountDirectory, signed_balance
from core.ledger.auxiliary import AuxiliaryLedgerService
from core.ledger.divisions import DivisionRegistry
from core.ledger.errors import ConsistencyError
from core.ledger.journal import Journal
from core.ledger.service import JournalService
from core.ledger.types import ZERO, AccountType, LedgerAccounts, NormalBalance

logger = logging.getLogger(__name__)

NET_INCOME_NAME = "당기순이익"


@dataclass(frozen=True)
class TrialBalanceRow:
    """시산표 행 (계정 유형을 알 수 없는 코드는 account_type=None)"""

    code: str
    name: str
    account_type: AccountType | None
    normal_balance: NormalBalance | None
    debit_total: Decimal
    credit_total: Decimal
    balance: Decimal


@dataclass(frozen=True)
class TrialBalance:
    date_from: str | None
    date_to: str | None
    division: str | None
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class StatementRow:
    code: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    date_from: str | None
    date_to: str | None
    division: str | None
    revenues: list[StatementRow]
    expenses: list[StatementRow]
    total_revenue: Decimal
    total_expense: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class BalanceSheetDebugRow:
    """대차대조표 디버그 행 (계정별 계산 잔액 vs 표시 금액)"""

    code: str
    name: str
    account_type: AccountType | None
    normal_balance: NormalBalance | None
    debit_total: Decimal
    credit_total: Decimal
    calculated_balance: Decimal
    displayed_amount: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    as_of: str
    division: str | None
    assets: list[StatementRow]
    liabilities: list[StatementRow]
    equity: list[StatementRow]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    net_income: Decimal
    difference: Decimal
    is_balanced: bool
    debug: list[BalanceSheetDebugRow] = field(default_factory=list)

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity


@dataclass
class AccountTreeNode:
    """계정 트리 노드 (자기 잔액 + 하위 합산 잔액)"""

    code: str
    name: str
    account_type: AccountType
    level: int
    own_balance: Decimal
    total_balance: Decimal
    children: list[AccountTreeNode] = field(default_factory=list)


@dataclass(frozen=True)
class AccountLedgerRow:
    journal_id: str
    journal_number: str
    date: str
    description: str
    debit_amount: Decimal
    credit_amount: Decimal
    balance: Decimal
    auxiliary_code: str | None = None


@dataclass(frozen=True)
class AccountLedger:
    code: str
    name: str
    opening_balance: Decimal
    debit_total: Decimal
    credit_total: Decimal
    closing_balance: Decimal
    rows: list[AccountLedgerRow]


@dataclass(frozen=True)
class DetailItem:
    """수입/지출 명세 항목"""

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


class ReportService:
    """보고서 서비스

    Args:
        accounts: 계정과목 디렉토리
        journals: 분개 서비스 (POSTED 분개 조회)
        divisions: 회계구분 레지스트리
        auxiliary: 보조원장 서비스 (명세의 보조과목명)
        config: Ledger 설정 (허용 오차)
    """

    def __init__(
        self,
        accounts: AccountDirectory,
        journals: JournalService,
        divisions: DivisionRegistry,
        auxiliary: AuxiliaryLedgerService,
        config: LedgerConfig | None = None,
    ) -> None:
        self._accounts = accounts
        self._journals = journals
        self._divisions = divisions
        self._auxiliary = auxiliary
        self._config = config or LedgerConfig()

    # =========================================================================
    # 시산표
    # =========================================================================

    def trial_balance(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> TrialBalance:
        """시산표

        Raises:
            ConsistencyError: 차변 합계와 대변 합계 불일치
        """
        journals = self._journals.posted_journals(date_from, date_to, division)
        totals = self._aggregate(journals, f"시산표 {date_from}~{date_to} {division or '전체'}")

        rows = [self._row(code, debit, credit) for code, (debit, credit) in totals.items()]
        rows.sort(key=self._row_order)
        total_debit = sum((r.debit_total for r in rows), ZERO)
        total_credit = sum((r.credit_total for r in rows), ZERO)

        return TrialBalance(
            date_from=date_from,
            date_to=date_to,
            division=division,
            rows=rows,
            total_debit=total_debit,
            total_credit=total_credit,
            is_balanced=abs(total_debit - total_credit) < self._config.balance_tolerance,
        )

    def division_trial_balances(
        self, date_from: str | None = None, date_to: str | None = None
    ) -> dict[str, TrialBalance]:
        """필수 회계구분별 시산표"""
        return {
            d.code: self.trial_balance(date_from, date_to, d.code)
            for d in self._divisions.required_divisions()
        }

    # =========================================================================
    # 손익계산서
    # =========================================================================

    def income_statement(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> IncomeStatement:
        """손익계산서 (수익 - 비용 = 당기순이익)"""
        trial = self.trial_balance(date_from, date_to, division)
        revenues = [
            StatementRow(r.code, r.name, r.balance)
            for r in trial.rows
            if r.account_type == AccountType.REVENUE
        ]
        expenses = [
            StatementRow(r.code, r.name, r.balance)
            for r in trial.rows
            if r.account_type == AccountType.EXPENSE
        ]
        total_revenue = sum((r.amount for r in revenues), ZERO)
        total_expense = sum((r.amount for r in expenses), ZERO)

        return IncomeStatement(
            date_from=date_from,
            date_to=date_to,
            division=division,
            revenues=revenues,
            expenses=expenses,
            total_revenue=total_revenue,
            total_expense=total_expense,
            net_income=total_revenue - total_expense,
        )

    # =========================================================================
    # 대차대조표
    # =========================================================================

    def balance_sheet(self, as_of: str, division: str | None = None) -> BalanceSheet:
        """대차대조표 (기준일까지 누적)

        마감되지 않은 수익/비용 잔액은 당기순이익(9999) 행으로 순자산에 합산.
        자산 = 부채 + 순자산(당기순이익 포함) 여부와 계정별 디버그 내역을 함께 반환.
        """
        trial = self.trial_balance(None, as_of, division)

        assets: list[StatementRow] = []
        liabilities: list[StatementRow] = []
        equity: list[StatementRow] = []
        debug: list[BalanceSheetDebugRow] = []
        net_income = ZERO

        for row in trial.rows:
            debug.append(
                BalanceSheetDebugRow(
                    code=row.code,
                    name=row.name,
                    account_type=row.account_type,
                    normal_balance=row.normal_balance,
                    debit_total=row.debit_total,
                    credit_total=row.credit_total,
                    calculated_balance=row.debit_total - row.credit_total,
                    displayed_amount=row.balance,
                )
            )
            if row.balance == ZERO:
                continue
            statement_row = StatementRow(row.code, row.name, row.balance)
            if row.account_type == AccountType.ASSET:
                assets.append(statement_row)
            elif row.account_type == AccountType.LIABILITY:
                liabilities.append(statement_row)
            elif row.account_type == AccountType.EQUITY:
                equity.append(statement_row)
            elif row.account_type == AccountType.REVENUE:
                net_income += row.balance
            elif row.account_type == AccountType.EXPENSE:
                net_income -= row.balance

        if net_income != ZERO:
            equity.append(StatementRow(LedgerAccounts.NET_INCOME, NET_INCOME_NAME, net_income))

        total_assets = sum((r.amount for r in assets), ZERO)
        total_liabilities = sum((r.amount for r in liabilities), ZERO)
        total_equity = sum((r.amount for r in equity), ZERO)
        difference = total_assets - (total_liabilities + total_equity)
        is_balanced = abs(difference) < self._config.balance_tolerance
        if not is_balanced:
            logger.error(f"[Reports] 대차대조표 불일치: 기준일={as_of} 차액={difference}")

        return BalanceSheet(
            as_of=as_of,
            division=division,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            net_income=net_income,
            difference=difference,
            is_balanced=is_balanced,
            debug=debug,
        )

    # =========================================================================
    # 계정 트리 / 계정별 원장
    # =========================================================================

    def account_tree(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> list[AccountTreeNode]:
        """계층형 계정 잔액 (하위 계정 잔액을 상위로 합산)

        같은 정상 잔액 방향의 하위 계정은 더하고, 반대 방향은 뺀다.
        """
        trial = self.trial_balance(date_from, date_to, division)
        balances = {r.code: r for r in trial.rows}
        return [self._build_node(root, balances) for root in self._accounts.roots()]

    def account_ledger(
        self,
        code: str,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> AccountLedger:
        """계정별 원장 (잔액 누계 포함)

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        account = self._accounts.require(code)
        assert account.normal_balance is not None

        opening = ZERO
        debit_total = ZERO
        credit_total = ZERO
        rows: list[AccountLedgerRow] = []
        running = ZERO

        for journal in self._journals.posted_journals(None, date_to):
            for line in journal.lines:
                if line.account_code != code:
                    continue
                movement = signed_balance(
                    account.normal_balance, line.debit_amount, line.credit_amount
                )
                if date_from is not None and journal.date < date_from:
                    opening += movement
                    running = opening
                    continue
                running += movement
                debit_total += line.debit_amount
                credit_total += line.credit_amount
                rows.append(
                    AccountLedgerRow(
                        journal_id=journal.id,
                        journal_number=journal.journal_number,
                        date=journal.date,
                        description=line.description or journal.description,
                        debit_amount=line.debit_amount,
                        credit_amount=line.credit_amount,
                        balance=running,
                        auxiliary_code=line.auxiliary_code,
                    )
                )

        return AccountLedger(
            code=account.code,
            name=account.name,
            opening_balance=opening,
            debit_total=debit_total,
            credit_total=credit_total,
            closing_balance=running if rows else opening,
            rows=rows,
        )

    # =========================================================================
    # 수입 / 지출 명세
    # =========================================================================

    def income_details(
        self, date_from: str, date_to: str, division: str | None = None
    ) -> list[DetailItem]:
        """수입 명세 (수익 계정 대변 발생분)"""
        return self._details(AccountType.REVENUE, date_from, date_to, division)

    def expense_details(
        self, date_from: str, date_to: str, division: str | None = None
    ) -> list[DetailItem]:
        """지출 명세 (비용 계정 차변 발생분)"""
        return self._details(AccountType.EXPENSE, date_from, date_to, division)

    def income_detail_summary(
        self, date_from: str, date_to: str, division: str | None = None
    ) -> list[dict[str, Any]]:
        return self._summarize(self.income_details(date_from, date_to, division))

    def expense_detail_summary(
        self, date_from: str, date_to: str, division: str | None = None
    ) -> list[dict[str, Any]]:
        return self._summarize(self.expense_details(date_from, date_to, division))

    # =========================================================================
    # 내부
    # =========================================================================

    def _aggregate(self, journals: list[Journal], label: str) -> dict[str, tuple[Decimal, Decimal]]:
        totals: dict[str, tuple[Decimal, Decimal]] = {}
        total_debit = ZERO
        total_credit = ZERO
        for journal in journals:
            for line in journal.lines:
                debit, credit = totals.get(line.account_code, (ZERO, ZERO))
                totals[line.account_code] = (debit + line.debit_amount, credit + line.credit_amount)
                total_debit += line.debit_amount
                total_credit += line.credit_amount

        if abs(total_debit - total_credit) >= self._config.balance_tolerance:
            logger.error(
                f"[Reports] 정합성 오류: {label} 차변={total_debit} 대변={total_credit}"
            )
            raise ConsistencyError(
                f"장부 정합성 오류: 차변 합계({total_debit})와 대변 합계({total_credit})가 "
                f"일치하지 않습니다"
            )
        return totals

    def _row(self, code: str, debit: Decimal, credit: Decimal) -> TrialBalanceRow:
        account = self._accounts.get(code)
        if account is None:
            return TrialBalanceRow(
                code=code,
                name=code,
                account_type=None,
                normal_balance=None,
                debit_total=debit,
                credit_total=credit,
                balance=debit - credit,
            )
        assert account.normal_balance is not None
        return TrialBalanceRow(
            code=code,
            name=account.name,
            account_type=account.account_type,
            normal_balance=account.normal_balance,
            debit_total=debit,
            credit_total=credit,
            balance=signed_balance(account.normal_balance, debit, credit),
        )

    def _row_order(self, row: TrialBalanceRow) -> tuple[int, int, str]:
        account = self._accounts.get(row.code)
        if account is None:
            return (1, 0, row.code)
        return (0, account.display_order, row.code)

    def _build_node(self, account: Account, balances: dict[str, TrialBalanceRow]) -> AccountTreeNode:
        row = balances.get(account.code)
        own = row.balance if row else ZERO
        node = AccountTreeNode(
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            level=self._accounts.level(account.code),
            own_balance=own,
            total_balance=own,
        )
        for child in self._accounts.children(account.code):
            child_node = self._build_node(child, balances)
            node.children.append(child_node)
            if child.normal_balance == account.normal_balance:
                node.total_balance += child_node.total_balance
            else:
                node.total_balance -= child_node.total_balance
        return node

    def _details(
        self, account_type: AccountType, date_from: str, date_to: str, division: str | None
    ) -> list[DetailItem]:
        items = []
        for journal in self._journals.posted_journals(date_from, date_to):
            for line in journal.lines:
                account = self._accounts.get(line.account_code)
                if account is None or account.account_type != account_type:
                    continue
                account_division = account.division.value if account.division else None
                if division is not None and account_division != division:
                    continue
                amount = signed_balance(
                    account.normal_balance or NormalBalance.DEBIT,
                    line.debit_amount,
                    line.credit_amount,
                )
                if amount <= ZERO:
                    continue
                aux_name = None
                if line.auxiliary_code:
                    aux = self._auxiliary.get(line.account_code, line.auxiliary_code)
                    aux_name = aux.name if aux else None
                items.append(
                    DetailItem(
                        journal_id=journal.id,
                        journal_number=journal.journal_number,
                        date=journal.date,
                        account_code=account.code,
                        account_name=account.name,
                        description=line.description or journal.description,
                        amount=amount,
                        division=account_division,
                        auxiliary_code=line.auxiliary_code,
                        auxiliary_name=aux_name,
                    )
                )
        return sorted(items, key=lambda i: (i.date, i.journal_number))

    @staticmethod
    def _summarize(items: list[DetailItem]) -> list[dict[str, Any]]:
        summary: dict[str, dict[str, Any]] = {}
        for item in items:
            entry = summary.setdefault(
                item.account_code,
                {
                    "account_code": item.account_code,
                    "account_name": item.account_name,
                    "division": item.division,
                    "amount": ZERO,
                    "count": 0,
                    "auxiliary_details": {},
                },
            )
            entry["amount"] += item.amount
            entry["count"] += 1
            if item.auxiliary_code:
                aux = entry["auxiliary_details"].setdefault(
                    item.auxiliary_code,
                    {
                        "auxiliary_code": item.auxiliary_code,
                        "auxiliary_name": item.auxiliary_name,
                        "amount": ZERO,
                        "count": 0,
                    },
                )
                aux["amount"] += item.amount
                aux["count"] += 1

        result = []
        for entry in summary.values():
            entry["auxiliary_details"] = list(entry["auxiliary_details"].values())
            result.append(entry)
        return result
