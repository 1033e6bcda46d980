"""
거래 → 분개 생성기

우선순위 기반 규칙 엔진.
- 활성 규칙 중 조건의 모든 지정 항목이 일치하는 규칙 선택
- 우선순위 내림차순 (같은 우선순위는 먼저 등록된 규칙)
- 차/대변 계정 결정 순서: 고정 코드 → 거래 계정 → 결제 계정 → 기본 계정
- 결과는 같은 금액의 2라인 분개 입력 (JournalInput)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal

from core.config.loader import LedgerConfig
from core.ledger.accounts import AccountDirectory
from core.ledger.errors import AccountNotFoundError, RuleNotFoundError, ValidationError
from core.ledger.journal import JournalInput, JournalLine
from core.ledger.types import (
    RECEIVABLE_BY_REVENUE,
    ZERO,
    JournalSide,
    LedgerAccounts,
    PaymentStatus,
    TransactionType,
)
from core.utils.timezone import today_kst

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transaction:
    """분개 생성기 입력 거래"""

    id: str
    type: TransactionType
    account_code: str
    amount: Decimal
    occurred_on: str
    status: PaymentStatus = PaymentStatus.UNPAID
    payment_account_code: str | None = None
    division_code: str | None = None
    note: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RuleCondition:
    """규칙 조건 (None인 항목은 검사하지 않음, 태그는 하나라도 겹치면 일치)"""

    transaction_type: TransactionType | None = None
    payment_status: PaymentStatus | None = None
    account_code: str | None = None
    amount_min: Decimal | None = None
    amount_max: Decimal | None = None
    tags: list[str] = field(default_factory=list)

    def matches(self, transaction: Transaction) -> bool:
        if self.transaction_type is not None and self.transaction_type != transaction.type:
            return False
        if self.payment_status is not None and self.payment_status != transaction.status:
            return False
        if self.account_code is not None and self.account_code != transaction.account_code:
            return False
        if self.amount_min is not None and transaction.amount < self.amount_min:
            return False
        if self.amount_max is not None and transaction.amount > self.amount_max:
            return False
        if self.tags and not set(self.tags) & set(transaction.tags):
            return False
        return True


@dataclass(frozen=True)
class JournalPattern:
    """분개 패턴 (차/대변 계정 결정 방법)"""

    debit_account_code: str | None = None
    credit_account_code: str | None = None
    use_transaction_account: JournalSide | None = None
    use_payment_account: JournalSide | None = None
    default_account_side: JournalSide | None = None
    default_account_code: str | None = None

    def resolve(self, side: JournalSide, transaction: Transaction) -> str | None:
        fixed = self.debit_account_code if side == JournalSide.DEBIT else self.credit_account_code
        if fixed:
            return fixed
        if self.use_transaction_account == side:
            return transaction.account_code
        if self.use_payment_account == side and transaction.payment_account_code:
            return transaction.payment_account_code
        if self.default_account_side == side and self.default_account_code:
            return self.default_account_code
        return None


@dataclass(frozen=True)
class JournalGenerationRule:
    """분개 생성 규칙"""

    id: str
    name: str
    condition: RuleCondition
    pattern: JournalPattern
    priority: int = 100
    is_active: bool = True


def default_rules() -> list[JournalGenerationRule]:
    """기본 규칙 세트"""
    rules = [
        JournalGenerationRule(
            id="rule_income_unpaid",
            name="수입 거래 (미결제)",
            condition=RuleCondition(
                transaction_type=TransactionType.INCOME, payment_status=PaymentStatus.UNPAID
            ),
            pattern=JournalPattern(
                debit_account_code=LedgerAccounts.RECEIVABLE_MANAGEMENT,
                use_transaction_account=JournalSide.CREDIT,
            ),
            priority=100,
        ),
    ]
    for revenue_code, receivable_code in RECEIVABLE_BY_REVENUE.items():
        rules.append(
            JournalGenerationRule(
                id=f"rule_income_unpaid_{revenue_code}",
                name=f"수입 거래 (미결제, {revenue_code})",
                condition=RuleCondition(
                    transaction_type=TransactionType.INCOME,
                    payment_status=PaymentStatus.UNPAID,
                    account_code=revenue_code,
                ),
                pattern=JournalPattern(
                    debit_account_code=receivable_code,
                    use_transaction_account=JournalSide.CREDIT,
                ),
                priority=110,
            )
        )
    rules.extend(
        [
            JournalGenerationRule(
                id="rule_income_paid",
                name="수입 거래 (결제 완료)",
                condition=RuleCondition(
                    transaction_type=TransactionType.INCOME, payment_status=PaymentStatus.PAID
                ),
                pattern=JournalPattern(
                    use_payment_account=JournalSide.DEBIT,
                    use_transaction_account=JournalSide.CREDIT,
                ),
            ),
            JournalGenerationRule(
                id="rule_expense_unpaid",
                name="지출 거래 (미결제)",
                condition=RuleCondition(
                    transaction_type=TransactionType.EXPENSE, payment_status=PaymentStatus.UNPAID
                ),
                pattern=JournalPattern(
                    use_transaction_account=JournalSide.DEBIT,
                    credit_account_code=LedgerAccounts.PAYABLE,
                ),
            ),
            JournalGenerationRule(
                id="rule_expense_paid",
                name="지출 거래 (결제 완료)",
                condition=RuleCondition(
                    transaction_type=TransactionType.EXPENSE, payment_status=PaymentStatus.PAID
                ),
                pattern=JournalPattern(
                    use_transaction_account=JournalSide.DEBIT,
                    use_payment_account=JournalSide.CREDIT,
                ),
            ),
            JournalGenerationRule(
                id="rule_transfer",
                name="자금 이동",
                condition=RuleCondition(transaction_type=TransactionType.TRANSFER),
                # 거래 계정 = 이동처, 결제 계정 = 이동원
                pattern=JournalPattern(
                    use_transaction_account=JournalSide.DEBIT,
                    use_payment_account=JournalSide.CREDIT,
                ),
            ),
        ]
    )
    return rules


class JournalGenerator:
    """거래 → 분개 생성기

    Args:
        accounts: 계정과목 디렉토리 (계정 존재/전기 가능 여부 확인)
        config: Ledger 설정 (결제 분개의 기본 미수금/미지급금 계정)
        rules: 초기 규칙 (None이면 기본 규칙 세트)
    """

    def __init__(
        self,
        accounts: AccountDirectory,
        config: LedgerConfig | None = None,
        rules: list[JournalGenerationRule] | None = None,
    ) -> None:
        self._accounts = accounts
        self._config = config or LedgerConfig()
        # 등록 순서 유지 (우선순위 정렬은 안정 정렬로 수행)
        self._rules: list[JournalGenerationRule] = []
        for rule in default_rules() if rules is None else rules:
            self.add_rule(rule)

    # =========================================================================
    # 규칙 관리
    # =========================================================================

    def add_rule(self, rule: JournalGenerationRule) -> None:
        """규칙 추가

        Raises:
            ValidationError: 같은 ID의 규칙이 이미 있는 경우
        """
        if any(r.id == rule.id for r in self._rules):
            raise ValidationError(f"이미 등록된 규칙 ID입니다: {rule.id}")
        self._rules.append(rule)
        self._rules = self._sorted(self._rules)

    def update_rule(self, rule_id: str, **changes) -> JournalGenerationRule:
        """규칙 수정 (지정한 필드만)

        Raises:
            RuleNotFoundError: 규칙이 없는 경우
        """
        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                updated = replace(rule, **changes)
                self._rules[index] = updated
                self._rules = self._sorted(self._rules)
                return updated
        raise RuleNotFoundError(f"규칙을 찾을 수 없습니다: {rule_id}")

    def remove_rule(self, rule_id: str) -> bool:
        before = len(self._rules)
        self._rules = [r for r in self._rules if r.id != rule_id]
        return len(self._rules) < before

    def get_rules(self) -> list[JournalGenerationRule]:
        """규칙 목록 (적용 순서)"""
        return list(self._rules)

    # =========================================================================
    # 분개 생성
    # =========================================================================

    def find_rule(self, transaction: Transaction) -> JournalGenerationRule:
        """적용할 규칙 검색

        Raises:
            RuleNotFoundError: 일치하는 활성 규칙이 없는 경우
        """
        for rule in self._rules:
            if rule.is_active and rule.condition.matches(transaction):
                return rule
        raise RuleNotFoundError(
            f"거래 유형 {transaction.type.value}({transaction.status.value})에 "
            f"대한 분개 생성 규칙이 없습니다"
        )

    def generate_journal(self, transaction: Transaction) -> JournalInput:
        """거래 → 분개 입력

        Raises:
            ValidationError: 금액이 0 이하
            RuleNotFoundError: 일치하는 규칙 없음
            AccountNotFoundError: 결정된 계정이 없거나 전기 불가
        """
        self._check_amount(transaction)
        rule = self.find_rule(transaction)

        debit_code = rule.pattern.resolve(JournalSide.DEBIT, transaction)
        credit_code = rule.pattern.resolve(JournalSide.CREDIT, transaction)
        self._require_postable(debit_code, "차변")
        self._require_postable(credit_code, "대변")
        assert debit_code is not None and credit_code is not None

        logger.debug(
            f"[Generator] {transaction.id}: 규칙 {rule.id} → D {debit_code} / C {credit_code}"
        )
        return JournalInput(
            date=transaction.occurred_on,
            description=self.describe(transaction),
            reference=transaction.id,
            division=transaction.division_code,
            tags=list(transaction.tags),
            lines=[
                JournalLine(
                    account_code=debit_code,
                    debit_amount=transaction.amount,
                    description=transaction.note,
                ),
                JournalLine(
                    account_code=credit_code,
                    credit_amount=transaction.amount,
                    description=transaction.note,
                ),
            ],
        )

    def generate_payment_journal(
        self,
        transaction: Transaction,
        payment_account_code: str,
        payment_date: str | None = None,
    ) -> JournalInput:
        """미결제 거래의 결제(정산) 분개 입력

        수입: 차변 결제 계정 / 대변 거래 시 계상한 미수금
        지출: 차변 거래 시 계상한 미지급금 / 대변 결제 계정

        Raises:
            ValidationError: 자금 이동 거래, 금액 0 이하
            AccountNotFoundError: 결제 계정이 없거나 전기 불가
        """
        self._check_amount(transaction)
        self._require_postable(payment_account_code, "결제")

        memo = f"결제: {transaction.note or ''}".rstrip()
        if transaction.type == TransactionType.INCOME:
            receivable = self._settlement_account(transaction, JournalSide.DEBIT)
            lines = [
                JournalLine(payment_account_code, debit_amount=transaction.amount, description=memo),
                JournalLine(receivable, credit_amount=transaction.amount, description=memo),
            ]
        elif transaction.type == TransactionType.EXPENSE:
            payable = self._settlement_account(transaction, JournalSide.CREDIT)
            lines = [
                JournalLine(payable, debit_amount=transaction.amount, description=memo),
                JournalLine(payment_account_code, credit_amount=transaction.amount, description=memo),
            ]
        else:
            raise ValidationError("자금 이동 거래는 결제 처리할 수 없습니다")

        return JournalInput(
            date=payment_date or today_kst(),
            description=f"결제 처리: {self.describe(transaction)}",
            reference=f"payment_{transaction.id}",
            division=transaction.division_code,
            tags=list(transaction.tags),
            lines=lines,
        )

    def describe(self, transaction: Transaction) -> str:
        """거래 적요 (계정명 + 메모)"""
        account = self._accounts.get(transaction.account_code)
        if transaction.type == TransactionType.TRANSFER:
            source = (
                self._accounts.get(transaction.payment_account_code)
                if transaction.payment_account_code
                else None
            )
            if source and account:
                description = f"자금 이동: {source.name} → {account.name}"
            else:
                description = "자금 이동"
        elif account is not None:
            description = account.name
        elif transaction.type == TransactionType.INCOME:
            description = "수입 거래"
        else:
            description = "지출 거래"

        if transaction.note:
            description += f" - {transaction.note}"
        return description

    # =========================================================================
    # 내부
    # =========================================================================

    @staticmethod
    def _sorted(rules: list[JournalGenerationRule]) -> list[JournalGenerationRule]:
        return sorted(rules, key=lambda r: -r.priority)

    @staticmethod
    def _check_amount(transaction: Transaction) -> None:
        if transaction.amount <= ZERO:
            raise ValidationError(f"거래 금액은 0보다 커야 합니다: {transaction.amount}")

    def _require_postable(self, code: str | None, side: str) -> None:
        if not code:
            raise AccountNotFoundError("", f"{side} 계정을 결정할 수 없습니다")
        account = self._accounts.get(code)
        if account is None:
            raise AccountNotFoundError(code, f"{side} 계정과목을 찾을 수 없습니다: {code}")
        if not account.is_postable:
            raise AccountNotFoundError(code, f"{side} 계정과목에 전기할 수 없습니다: {code}")

    def _settlement_account(self, transaction: Transaction, side: JournalSide) -> str:
        """미결제 시점에 계상한 미수금/미지급금 계정

        같은 거래를 미결제로 처리했을 때 적용되는 규칙의 고정 계정을 사용.
        """
        unpaid = replace(transaction, status=PaymentStatus.UNPAID)
        fallback = (
            self._config.receivable_account
            if side == JournalSide.DEBIT
            else self._config.payable_account
        )
        try:
            rule = self.find_rule(unpaid)
        except RuleNotFoundError:
            return fallback
        fixed = (
            rule.pattern.debit_account_code
            if side == JournalSide.DEBIT
            else rule.pattern.credit_account_code
        )
        return fixed or fallback
