"""
Ledger 파사드

하위 서비스(계정과목, 회계구분, 보조원장, 분개, 생성기, 보고서, 마감,
가져오기/내보내기)를 하나의 진입점으로 묶는다.
- 하위 서비스는 명시적 속성으로만 노출 (내부 상태 직접 접근 없음)
- 모든 분개/보고서 작업은 LedgerResult 반환
- 스냅샷 복원은 새 상태를 만든 뒤 성공 시에만 교체
"""

import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from core.config.loader import LedgerConfig, get_settings
from core.constants import Defaults
from core.ledger.accounts import AccountDirectory
from core.ledger.auxiliary import (
    SAMPLE_UNIT_OWNERS,
    SAMPLE_VENDORS,
    AuxiliaryLedgerService,
)
from core.ledger.closing import ClosingService
from core.ledger.divisions import DivisionRegistry
from core.ledger.errors import (
    ConsistencyError,
    LedgerError,
    ValidationError,
)
from core.ledger.generator import JournalGenerator, Transaction
from core.ledger.import_export import ImportExportService
from core.ledger.journal import JournalInput, JournalLine, JournalPatch
from core.ledger.reports import ReportService
from core.ledger.results import LedgerResult
from core.ledger.service import JournalService
from core.ledger.state import LedgerState, build_state
from core.ledger.types import (
    ZERO,
    DivisionCode,
    LedgerAccounts,
    PaymentStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)

# 표 형식 행의 열 이름 (영문 / 한글)
ROW_COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("date", "날짜", "거래일"),
    "description": ("description", "적요", "내용"),
    "deposit": ("deposit", "입금"),
    "withdrawal": ("withdrawal", "출금"),
    "amount": ("amount", "금액"),
    "account_code": ("account_code", "accountCode", "계정코드"),
}


@dataclass(frozen=True)
class JournalSuggestion:
    """외부 분류기가 제안한 분개 (검증 전)

    confidence는 0~100. 제안은 그대로 신뢰하지 않고 일반 분개와 같은 검증을 거친다.
    """

    transaction_id: str
    date: str
    description: str
    debit_account: str
    credit_account: str
    amount: Decimal
    confidence: int = 0
    division: str | None = None
    auxiliary_code: str | None = None
    memo: str | None = None
    reasoning: str | None = None


def _cell(row: dict[str, Any], key: str) -> Any:
    for name in ROW_COLUMNS[key]:
        value = row.get(name)
        if value is not None and str(value).strip() != "":
            return value
    return None


def _to_amount(value: Any, label: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as e:
        raise ValidationError(f"{label} 금액 형식이 올바르지 않습니다: {value}") from e


class Ledger:
    """관리조합 복식부기 장부

    Args:
        config: Ledger 설정 (None이면 Settings의 ledger.yaml)
        seed_accounts: 초기 계정과목표 적재 여부
    """

    def __init__(self, config: LedgerConfig | None = None, seed_accounts: bool = True) -> None:
        self._config = config or get_settings().ledger
        self._state = build_state(self._config, seed_accounts=seed_accounts)

    # =========================================================================
    # 구성 요소
    # =========================================================================

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def accounts(self) -> AccountDirectory:
        return self._state.accounts

    @property
    def divisions(self) -> DivisionRegistry:
        return self._state.divisions

    @property
    def auxiliary(self) -> AuxiliaryLedgerService:
        return self._state.auxiliary

    @property
    def journals(self) -> JournalService:
        return self._state.journals

    @property
    def generator(self) -> JournalGenerator:
        return self._state.generator

    @property
    def reports(self) -> ReportService:
        return self._state.reports

    @property
    def closing(self) -> ClosingService:
        return self._state.closing

    def initialize(self, with_sample_masters: bool = False) -> None:
        """상태 초기화 (계정과목표 재적재, 분개/보조원장 삭제)

        Args:
            with_sample_masters: True면 예시 구분소유자/거래처 등록
        """
        self._state = build_state(self._config)
        if with_sample_masters:
            self._state.auxiliary.register_unit_owners(list(SAMPLE_UNIT_OWNERS))
            self._state.auxiliary.register_vendors(list(SAMPLE_VENDORS))
        logger.info(f"[Ledger] 초기화 완료: 계정 {len(self._state.accounts)}건")

    # =========================================================================
    # 분개
    # =========================================================================

    def create_journal(
        self,
        data: JournalInput,
        auto_post: bool = False,
        meta: dict[str, Any] | None = None,
        actor: str = Defaults.ACTOR,
    ) -> LedgerResult:
        return self.journals.create_journal(data, auto_post=auto_post, meta=meta, actor=actor)

    def post_journal_by_id(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        return self.journals.post_journal_by_id(journal_id, actor=actor)

    def submit_journal(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        return self.journals.submit_journal(journal_id, actor=actor)

    def approve_journal(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        return self.journals.approve_journal(journal_id, actor=actor)

    def delete_journal(self, journal_id: str) -> LedgerResult:
        return self.journals.delete_journal(journal_id)

    def update_journal(self, journal_id: str, patch: JournalPatch) -> LedgerResult:
        return self.journals.update_journal(journal_id, patch)

    def cancel_journal(
        self, journal_id: str, reason: str, actor: str = Defaults.ACTOR
    ) -> LedgerResult:
        return self.journals.cancel_journal(journal_id, reason, actor=actor)

    # =========================================================================
    # 보고서 (정합성 오류 시 보고서 없이 실패 결과)
    # =========================================================================

    def get_trial_balance(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> LedgerResult:
        return self._report(lambda: self.reports.trial_balance(date_from, date_to, division))

    def get_income_statement(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> LedgerResult:
        return self._report(lambda: self.reports.income_statement(date_from, date_to, division))

    def get_balance_sheet(self, as_of: str, division: str | None = None) -> LedgerResult:
        return self._report(lambda: self.reports.balance_sheet(as_of, division))

    def get_division_trial_balances(
        self, date_from: str | None = None, date_to: str | None = None
    ) -> LedgerResult:
        return self._report(lambda: self.reports.division_trial_balances(date_from, date_to))

    def get_account_tree(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> LedgerResult:
        return self._report(lambda: self.reports.account_tree(date_from, date_to, division))

    def get_account_ledger(
        self, code: str, date_from: str | None = None, date_to: str | None = None
    ) -> LedgerResult:
        return self._report(lambda: self.reports.account_ledger(code, date_from, date_to))

    # =========================================================================
    # 거래 → 분개
    # =========================================================================

    def generate_journal(self, transaction: Transaction) -> LedgerResult:
        """거래에서 분개 입력 생성 (저장하지 않음, data에 JournalInput)"""
        try:
            data = self.generator.generate_journal(transaction)
        except LedgerError as e:
            logger.warning(f"[Ledger] 분개 생성 실패: {transaction.id} - {e.message}")
            return LedgerResult.fail(e)
        return LedgerResult.ok(data=data)

    def record_transaction(
        self,
        transaction: Transaction,
        auto_post: bool = True,
        actor: str = Defaults.ACTOR,
    ) -> LedgerResult:
        """거래 → 분개 생성 및 (기본) 전기"""
        generated = self.generate_journal(transaction)
        if not generated.success:
            return generated
        return self.journals.create_journal(
            generated.data,
            auto_post=auto_post,
            meta={"transaction_id": transaction.id, "transaction_type": transaction.type.value},
            actor=actor,
        )

    def settle_transaction(
        self,
        transaction: Transaction,
        payment_account_code: str,
        payment_date: str | None = None,
        auto_post: bool = True,
        actor: str = Defaults.ACTOR,
    ) -> LedgerResult:
        """미결제 거래의 결제 분개 생성 및 (기본) 전기"""
        try:
            data = self.generator.generate_payment_journal(
                transaction, payment_account_code, payment_date
            )
        except LedgerError as e:
            logger.warning(f"[Ledger] 결제 분개 생성 실패: {transaction.id} - {e.message}")
            return LedgerResult.fail(e)
        return self.journals.create_journal(
            data,
            auto_post=auto_post,
            meta={"transaction_id": transaction.id, "settlement": True},
            actor=actor,
        )

    def create_transactions_from_rows(
        self,
        rows: list[dict[str, Any]],
        bank_account_code: str = LedgerAccounts.BANK_MANAGEMENT,
        income_account_code: str = LedgerAccounts.INCOME_MANAGEMENT_FEE,
        expense_account_code: str | None = None,
        auto_post: bool = True,
        actor: str = Defaults.ACTOR,
    ) -> list[dict[str, Any]]:
        """은행 명세 등 표 형식 행 → 거래 → 분개 (행별 결과)

        입금은 결제 완료 수입, 출금은 결제 완료 지출로 본다.
        amount 열만 있으면 양수는 입금, 음수는 출금.
        행의 계정코드가 없으면 income/expense 기본 계정을 사용하고,
        지출 기본 계정도 없으면 해당 행은 실패.
        """
        results = []
        for index, row in enumerate(rows, start=1):
            try:
                transaction = self._row_transaction(
                    index, row, bank_account_code, income_account_code, expense_account_code
                )
            except LedgerError as e:
                results.append({"row": index, **self._result_dict(LedgerResult.fail(e))})
                continue
            if transaction is None:
                continue
            result = self.record_transaction(transaction, auto_post=auto_post, actor=actor)
            results.append({"row": index, **self._result_dict(result)})

        succeeded = sum(1 for r in results if r["success"])
        logger.info(f"[Ledger] 행 일괄 처리: {succeeded}/{len(results)}건 성공")
        return results

    def create_journal_from_suggestion(
        self,
        suggestion: JournalSuggestion,
        min_confidence: int = 0,
        auto_post: bool = False,
        actor: str = Defaults.ACTOR,
    ) -> LedgerResult:
        """분류 제안 → 분개 (신뢰도 미달 또는 검증 실패 시 실패 결과)"""
        if suggestion.confidence < min_confidence:
            return LedgerResult.fail(
                ValidationError(
                    f"제안 신뢰도가 기준 미만입니다: {suggestion.confidence} < {min_confidence}"
                )
            )

        debit = JournalLine(
            suggestion.debit_account,
            debit_amount=suggestion.amount,
            description=suggestion.memo,
        )
        credit = JournalLine(
            suggestion.credit_account,
            credit_amount=suggestion.amount,
            description=suggestion.memo,
        )
        if suggestion.auxiliary_code:
            # 보조원장이 있는 쪽에 보조 코드 부여 (차변 우선)
            if self.auxiliary.exists(suggestion.debit_account, suggestion.auxiliary_code):
                debit = replace(debit, auxiliary_code=suggestion.auxiliary_code)
            elif self.auxiliary.exists(suggestion.credit_account, suggestion.auxiliary_code):
                credit = replace(credit, auxiliary_code=suggestion.auxiliary_code)

        return self.journals.create_journal(
            JournalInput(
                date=suggestion.date,
                description=suggestion.description,
                lines=[debit, credit],
                division=suggestion.division,
                reference=suggestion.transaction_id,
            ),
            auto_post=auto_post,
            meta={"suggestion_confidence": suggestion.confidence},
            actor=actor,
        )

    def create_monthly_billing(
        self, billing_date: str, auto_post: bool = True, actor: str = Defaults.ACTOR
    ) -> list[LedgerResult]:
        """월 관리비/수선적립금 부과 (회계구분별 분개 1건)

        관리비와 월정 주차 사용료는 관리회계, 수선적립금은 수선적립금회계.
        활성 구분소유자가 없거나 부과 금액이 0이면 실패 결과 1건.
        """
        management: list[JournalLine] = []
        reserve: list[JournalLine] = []
        receivable = self.auxiliary.receivable_account
        reserve_receivable = self.auxiliary.reserve_receivable_account

        for owner in self.auxiliary.unit_owners():
            if not owner.is_active:
                continue
            memo = f"{owner.unit_number}호 {billing_date[:7]} 부과"
            if owner.monthly_management_fee > ZERO:
                management += [
                    JournalLine(
                        receivable,
                        debit_amount=owner.monthly_management_fee,
                        auxiliary_code=owner.unit_number,
                        service_month=billing_date[:7],
                        description=memo,
                    ),
                    JournalLine(
                        LedgerAccounts.INCOME_MANAGEMENT_FEE,
                        credit_amount=owner.monthly_management_fee,
                        description=memo,
                    ),
                ]
            if owner.parking_fee > ZERO:
                management += [
                    JournalLine(
                        LedgerAccounts.RECEIVABLE_USAGE,
                        debit_amount=owner.parking_fee,
                        service_month=billing_date[:7],
                        description=memo,
                    ),
                    JournalLine(
                        LedgerAccounts.INCOME_PARKING_USAGE,
                        credit_amount=owner.parking_fee,
                        description=memo,
                    ),
                ]
            if owner.monthly_reserve_fund > ZERO:
                reserve += [
                    JournalLine(
                        reserve_receivable,
                        debit_amount=owner.monthly_reserve_fund,
                        auxiliary_code=owner.unit_number,
                        service_month=billing_date[:7],
                        description=memo,
                    ),
                    JournalLine(
                        LedgerAccounts.INCOME_RESERVE_FUND,
                        credit_amount=owner.monthly_reserve_fund,
                        description=memo,
                    ),
                ]

        if not management and not reserve:
            return [LedgerResult.fail(ValidationError("부과할 금액이 없습니다"))]

        results = []
        for division, lines, label in (
            (DivisionCode.MANAGEMENT, management, "관리비"),
            (DivisionCode.RESERVE, reserve, "수선적립금"),
        ):
            if not lines:
                continue
            created = self.journals.create_journal(
                JournalInput(
                    date=billing_date,
                    description=f"{billing_date[:7]} 월 {label} 부과",
                    lines=lines,
                    division=division.value,
                    reference=f"billing_{division.value}_{billing_date[:7]}",
                    tags=["billing"],
                ),
                meta={"monthly_billing": True},
                actor=actor,
            )
            if auto_post and created.success and created.journal is not None:
                created = self.journals.post_approved(created.journal.id, actor=actor)
            results.append(created)
        return results

    def create_closing_entries(
        self, closing_date: str, date_from: str | None = None, actor: str = Defaults.ACTOR
    ) -> list[LedgerResult]:
        return self.closing.create_closing_entries(closing_date, date_from, actor=actor)

    # =========================================================================
    # 가져오기 / 내보내기 / 스냅샷
    # =========================================================================

    def import_json_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """JSON 가져오기 (스키마 오류 시 ImportPayloadError)"""
        return ImportExportService(self._state).import_json_data(data)

    def export_json(self) -> dict[str, Any]:
        return ImportExportService(self._state).export_json()

    def export_accounts_csv(self) -> str:
        return ImportExportService(self._state).export_accounts_csv()

    def import_accounts_csv(self, text: str) -> list[LedgerResult]:
        return ImportExportService(self._state).import_accounts_csv(text)

    def export_journals_csv(self) -> str:
        return ImportExportService(self._state).export_journals_csv()

    def import_journals_csv(self, text: str, auto_post: bool = True) -> list[dict[str, Any]]:
        return ImportExportService(self._state).import_journals_csv(text, auto_post=auto_post)

    def serialize(self) -> dict[str, Any]:
        return ImportExportService(self._state).serialize()

    def restore(self, data: dict[str, Any]) -> None:
        """스냅샷 복원 (실패 시 기존 상태 유지)

        Raises:
            ImportPayloadError: 스냅샷 손상
        """
        state = ImportExportService.restore(data, self._config)
        self._state = state
        logger.info("[Ledger] 스냅샷 복원 완료")

    def save_snapshot(self, path: Path | None = None) -> Path:
        """스냅샷 파일 저장 (기본: data/ledger_snapshot.json)"""
        target = path or get_settings().snapshot_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(self.serialize(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        logger.info(f"[Ledger] 스냅샷 저장: {target}")
        return target

    def load_snapshot(self, path: Path | None = None) -> None:
        """스냅샷 파일 복원

        Raises:
            FileNotFoundError: 파일이 없는 경우
            ImportPayloadError: 스냅샷 손상
        """
        source = path or get_settings().snapshot_path
        self.restore(json.loads(source.read_text(encoding="utf-8")))

    @property
    def state(self) -> LedgerState:
        return self._state

    # =========================================================================
    # 내부
    # =========================================================================

    def _report(self, build: Any) -> LedgerResult:
        try:
            return LedgerResult.ok(data=build())
        except ConsistencyError as e:
            logger.error(f"[Ledger] 보고서 정합성 오류: {e.message}")
            return LedgerResult.fail(e)
        except LedgerError as e:
            return LedgerResult.fail(e)

    def _row_transaction(
        self,
        index: int,
        row: dict[str, Any],
        bank_account_code: str,
        income_account_code: str,
        expense_account_code: str | None,
    ) -> Transaction | None:
        date = _cell(row, "date")
        if date is None:
            raise ValidationError(f"{index}행: 날짜가 없습니다")

        deposit = _to_amount(_cell(row, "deposit"), f"{index}행 입금")
        withdrawal = _to_amount(_cell(row, "withdrawal"), f"{index}행 출금")
        amount = _to_amount(_cell(row, "amount"), f"{index}행")
        if deposit is None and withdrawal is None and amount is not None:
            if amount >= ZERO:
                deposit = amount
            else:
                withdrawal = -amount

        if deposit and deposit > ZERO:
            tx_type, value = TransactionType.INCOME, deposit
            account_code = _cell(row, "account_code") or income_account_code
        elif withdrawal and withdrawal > ZERO:
            tx_type, value = TransactionType.EXPENSE, withdrawal
            account_code = _cell(row, "account_code") or expense_account_code
            if not account_code:
                raise ValidationError(f"{index}행: 지출 계정을 지정해야 합니다")
        else:
            # 금액 없는 행 (잔액 행 등)
            return None

        return Transaction(
            id=f"row-{index}",
            type=tx_type,
            account_code=str(account_code),
            amount=value,
            occurred_on=str(date).strip().replace("/", "-"),
            status=PaymentStatus.PAID,
            payment_account_code=bank_account_code,
            note=_cell(row, "description"),
        )

    @staticmethod
    def _result_dict(result: LedgerResult) -> dict[str, Any]:
        return {
            "success": result.success,
            "journalId": result.journal.id if result.journal else None,
            "journalNumber": result.journal.journal_number if result.journal else None,
            "errors": result.errors,
            "errorCode": result.error_code,
        }
