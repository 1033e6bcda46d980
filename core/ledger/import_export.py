"""
가져오기 / 내보내기

- JSON 가져오기: 구분소유자, 거래처, 기초잔액, 분개 (항목별 결과 반환)
- JSON 내보내기: 분개, 마스터, 시산표, 회계구분
- 스냅샷: 전체 상태 직렬화 / 새 상태로 복원
- CSV: 계정과목, 분개 (라인 단위 행)

페이로드 스키마 검증 실패는 ImportPayloadError로 전파.
"""

import csv
import io
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.config.loader import LedgerConfig
from core.ledger.errors import ConsistencyError, ImportPayloadError, LedgerError
from core.ledger.generator import JournalGenerator
from core.ledger.journal import JournalInput, JournalLine
from core.ledger.payloads import (
    AccountRecord,
    DivisionRecord,
    ExportPayload,
    ImportPayload,
    JournalImportRecord,
    JournalLineRecord,
    JournalRecord,
    OpeningBalances,
    RuleRecord,
    SnapshotPayload,
    UnitOwnerRecord,
    VendorRecord,
)
from core.ledger.results import LedgerResult
from core.ledger.state import LedgerState, build_state
from core.ledger.types import ZERO, DivisionCode, JournalStatus
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

OPENING_TAG = "opening"
IMPORT_CANCEL_REASON = "가져오기 (취소 상태)"

ACCOUNT_CSV_FIELDS = [
    "code",
    "name",
    "type",
    "normalBalance",
    "parentCode",
    "division",
    "isActive",
    "isPostable",
    "description",
    "displayOrder",
]

JOURNAL_CSV_FIELDS = [
    "number",
    "date",
    "description",
    "division",
    "status",
    "reference",
    "accountCode",
    "accountName",
    "debitAmount",
    "creditAmount",
    "auxiliaryCode",
    "serviceMonth",
    "payerId",
    "lineDescription",
]


def format_value(value: Any) -> str:
    """CSV 셀 값 포맷"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def _clean_row(row: dict[str, Any]) -> dict[str, Any]:
    """빈 셀 제거 (기본값 적용)"""
    return {k: v.strip() for k, v in row.items() if k and v is not None and v.strip() != ""}


def _validate(model: type, data: Any, label: str) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"[ImportExport] {label} 스키마 검증 실패: {e.error_count()}건")
        raise ImportPayloadError(
            f"{label} 형식이 올바르지 않습니다",
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        ) from e


class ImportExportService:
    """가져오기 / 내보내기 서비스

    Args:
        state: 대상 Ledger 상태
        actor: 가져온 분개의 작성/전기자
    """

    def __init__(self, state: LedgerState, actor: str = "import") -> None:
        self._state = state
        self._actor = actor

    # =========================================================================
    # JSON 가져오기
    # =========================================================================

    def import_json_data(self, data: dict[str, Any] | ImportPayload) -> dict[str, Any]:
        """JSON 가져오기

        순서: (clearExisting) → 구분소유자 → 거래처 → 기초잔액 → 분개.
        분개는 항목별로 성공/실패를 기록하고 실패해도 나머지를 계속 처리.

        Raises:
            ImportPayloadError: 페이로드 스키마 오류 (상태 변경 없음)
        """
        payload = data if isinstance(data, ImportPayload) else _validate(
            ImportPayload, data, "가져오기 데이터"
        )
        state = self._state

        if payload.clear_existing:
            state.journals.clear()
            state.auxiliary.clear()
            state.divisions.reset()
            logger.info("[ImportExport] 기존 데이터 삭제 완료")

        if payload.unit_owners is not None:
            state.auxiliary.register_unit_owners([o.to_domain() for o in payload.unit_owners])
        if payload.vendors is not None:
            state.auxiliary.register_vendors([v.to_domain() for v in payload.vendors])

        opening_results: list[dict[str, Any]] = []
        if payload.opening_balances is not None:
            opening_results = [
                self._item_result(i, r)
                for i, r in enumerate(self.create_opening_balance(payload.opening_balances))
            ]

        journal_results = self._import_journals(payload.journals, payload.auto_post)

        imported = sum(1 for r in journal_results if r["success"])
        failed = len(journal_results) - imported
        logger.info(f"[ImportExport] 가져오기 완료: 성공 {imported}건, 실패 {failed}건")
        return {
            "success": failed == 0 and all(r["success"] for r in opening_results),
            "imported": imported,
            "failed": failed,
            "journals": journal_results,
            "openingBalances": opening_results,
            "unitOwners": len(payload.unit_owners or []),
            "vendors": len(payload.vendors or []),
        }

    def create_opening_balance(self, opening: OpeningBalances) -> list[LedgerResult]:
        """기초잔액 분개 생성 및 전기

        회계구분별로 분개를 나누고 (COMMON 계정은 기본 구분),
        차대 차액은 기초잔액조정 계정으로 맞춘다.
        """
        state = self._state
        config = state.config
        grouped: "OrderedDict[str, list[JournalLine]]" = OrderedDict()

        for entry in opening.entries:
            if entry.debit_amount == ZERO and entry.credit_amount == ZERO:
                continue
            account = state.accounts.get(entry.account_code)
            division = config.default_division
            if account and account.division and account.division != DivisionCode.COMMON:
                division = account.division.value
            grouped.setdefault(division, []).append(
                JournalLine(
                    account_code=entry.account_code,
                    debit_amount=entry.debit_amount,
                    credit_amount=entry.credit_amount,
                    auxiliary_code=entry.auxiliary_code or None,
                    description="기초잔액",
                )
            )

        results = []
        for division, lines in grouped.items():
            difference = sum((l.debit_amount for l in lines), ZERO) - sum(
                (l.credit_amount for l in lines), ZERO
            )
            if difference > ZERO:
                lines.append(
                    JournalLine(
                        config.opening_adjustment_account,
                        credit_amount=difference,
                        description="기초잔액 차액 조정",
                    )
                )
            elif difference < ZERO:
                lines.append(
                    JournalLine(
                        config.opening_adjustment_account,
                        debit_amount=-difference,
                        description="기초잔액 차액 조정",
                    )
                )

            created = state.journals.create_journal(
                JournalInput(
                    date=opening.date,
                    description="기초잔액",
                    lines=lines,
                    division=division,
                    tags=[OPENING_TAG],
                ),
                meta={"opening_balance": True},
                actor=self._actor,
            )
            if created.success and created.journal is not None:
                created = state.journals.post_approved(created.journal.id, actor=self._actor)
            results.append(created)

        logger.info(f"[ImportExport] 기초잔액 분개 {len(results)}건 처리")
        return results

    # =========================================================================
    # JSON 내보내기
    # =========================================================================

    def export_json(self) -> dict[str, Any]:
        """JSON 내보내기 (시산표 정합성 오류 시 trialBalance는 null)"""
        state = self._state
        try:
            trial = state.reports.trial_balance()
            trial_balance: dict[str, Any] | None = {
                "totalDebit": str(trial.total_debit),
                "totalCredit": str(trial.total_credit),
                "isBalanced": trial.is_balanced,
                "rows": [
                    {
                        "code": r.code,
                        "name": r.name,
                        "debitTotal": str(r.debit_total),
                        "creditTotal": str(r.credit_total),
                        "balance": str(r.balance),
                    }
                    for r in trial.rows
                ],
            }
        except ConsistencyError:
            trial_balance = None

        payload = ExportPayload(
            export_date=now_utc(),
            journals=[JournalRecord.from_domain(j) for j in state.journals.all_journals()],
            unit_owners=[UnitOwnerRecord.from_domain(o) for o in state.auxiliary.unit_owners()],
            vendors=[VendorRecord.from_domain(v) for v in state.auxiliary.vendors()],
            trial_balance=trial_balance,
            divisions=self._division_records(with_balance=True),
        )
        return payload.dump()

    # =========================================================================
    # CSV
    # =========================================================================

    def export_accounts_csv(self) -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=ACCOUNT_CSV_FIELDS)
        writer.writeheader()
        for account in self._state.accounts.list():
            record = AccountRecord.from_domain(account).dump()
            writer.writerow({k: format_value(record.get(k)) for k in ACCOUNT_CSV_FIELDS})
        return output.getvalue()

    def import_accounts_csv(self, text: str) -> list[LedgerResult]:
        """계정과목 CSV 가져오기 (행 단위 등록/갱신)"""
        results = []
        for index, row in enumerate(csv.DictReader(io.StringIO(text)), start=1):
            try:
                record = _validate(AccountRecord, _clean_row(row), f"{index}행")
                account = self._state.accounts.upsert(record.to_domain())
            except LedgerError as e:
                results.append(LedgerResult.fail(e))
                continue
            results.append(LedgerResult.ok(data=account))
        return results

    def export_journals_csv(self) -> str:
        """분개 CSV (라인 단위 행, 분개 필드는 라인마다 반복)"""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=JOURNAL_CSV_FIELDS)
        writer.writeheader()
        for journal in self._state.journals.list_journals():
            for line in journal.lines:
                writer.writerow(
                    {
                        "number": journal.journal_number,
                        "date": journal.date,
                        "description": journal.description,
                        "division": format_value(journal.division),
                        "status": journal.status.value,
                        "reference": format_value(journal.reference),
                        "accountCode": line.account_code,
                        "accountName": format_value(line.account_name),
                        "debitAmount": format_value(line.debit_amount),
                        "creditAmount": format_value(line.credit_amount),
                        "auxiliaryCode": format_value(line.auxiliary_code),
                        "serviceMonth": format_value(line.service_month),
                        "payerId": format_value(line.payer_id),
                        "lineDescription": format_value(line.description),
                    }
                )
        return output.getvalue()

    def import_journals_csv(self, text: str, auto_post: bool = True) -> list[dict[str, Any]]:
        """분개 CSV 가져오기 (number 열로 라인을 묶어 분개 단위 처리)

        Raises:
            ImportPayloadError: 필수 열 누락 등 행 형식 오류
        """
        grouped: "OrderedDict[str, dict[str, Any]]" = OrderedDict()
        for index, raw in enumerate(csv.DictReader(io.StringIO(text)), start=1):
            row = _clean_row(raw)
            number = row.get("number") or f"row-{index}"
            journal = grouped.setdefault(
                number,
                {
                    "number": row.get("number"),
                    "date": row.get("date"),
                    "description": row.get("description", ""),
                    "division": row.get("division"),
                    "status": row.get("status"),
                    "reference": row.get("reference"),
                    "details": [],
                },
            )
            journal["details"].append(
                {
                    "accountCode": row.get("accountCode"),
                    "accountName": row.get("accountName"),
                    "debitAmount": row.get("debitAmount", "0"),
                    "creditAmount": row.get("creditAmount", "0"),
                    "auxiliaryCode": row.get("auxiliaryCode"),
                    "serviceMonth": row.get("serviceMonth"),
                    "payerId": row.get("payerId"),
                    "description": row.get("lineDescription"),
                }
            )

        records = [
            _validate(JournalImportRecord, data, f"분개 {key}") for key, data in grouped.items()
        ]
        return self._import_journals(records, auto_post)

    # =========================================================================
    # 스냅샷
    # =========================================================================

    def serialize(self) -> dict[str, Any]:
        """전체 상태 스냅샷"""
        state = self._state
        known = {(state.auxiliary.receivable_account, o.unit_number) for o in state.auxiliary.unit_owners()}
        known |= {(state.auxiliary.reserve_receivable_account, o.unit_number) for o in state.auxiliary.unit_owners()}
        known |= {(state.config.payable_account, v.code) for v in state.auxiliary.vendors()}
        extra_ledgers = [
            {
                "masterAccountCode": ledger.master_account_code,
                "auxiliaryCode": ledger.auxiliary_code,
                "name": ledger.name,
                "attributes": ledger.attributes,
            }
            for ledger in state.auxiliary.list()
            if ledger.key not in known
        ]

        payload = SnapshotPayload(
            created_at=now_utc(),
            next_sequence=state.journals.sequence.next_value,
            accounts=[AccountRecord.from_domain(a) for a in state.accounts.list()],
            divisions=self._division_records(with_balance=False),
            unit_owners=[UnitOwnerRecord.from_domain(o) for o in state.auxiliary.unit_owners()],
            vendors=[VendorRecord.from_domain(v) for v in state.auxiliary.vendors()],
            auxiliary_ledgers=extra_ledgers,
            rules=[RuleRecord.from_domain(r) for r in state.generator.get_rules()],
            journals=[JournalRecord.from_domain(j) for j in state.journals.all_journals()],
        )
        return payload.dump()

    @staticmethod
    def restore(data: dict[str, Any], config: LedgerConfig) -> LedgerState:
        """스냅샷으로 새 상태 생성 (기존 상태는 호출자가 교체)

        분개 ID/번호/상태를 그대로 유지하고, POSTED 분개만 구분/보조원장에 재기록.

        Raises:
            ImportPayloadError: 스냅샷 형식 오류 또는 내용 불일치
        """
        snapshot = _validate(SnapshotPayload, data, "스냅샷")
        state = build_state(config, seed_accounts=False)

        try:
            state.accounts.rebuild_from([a.to_domain() for a in snapshot.accounts])

            for record in snapshot.divisions:
                division = state.divisions.get(record.code)
                if division is None:
                    continue
                division.require_approval = record.require_approval
                division.transfer_limits = dict(record.transfer_limits)

            state.auxiliary.register_unit_owners([o.to_domain() for o in snapshot.unit_owners])
            state.auxiliary.register_vendors([v.to_domain() for v in snapshot.vendors])
            for ledger in snapshot.auxiliary_ledgers:
                state.auxiliary.register(
                    ledger["masterAccountCode"],
                    ledger["auxiliaryCode"],
                    ledger.get("name", ""),
                    ledger.get("attributes") or {},
                )

            if snapshot.rules is not None:
                state.generator = JournalGenerator(
                    state.accounts, config=config, rules=[r.to_domain() for r in snapshot.rules]
                )

            for record in snapshot.journals:
                state.journals.load_journal(record.to_domain(config.balance_tolerance))
        except LedgerError as e:
            logger.error(f"[ImportExport] 스냅샷 복원 실패: {e}")
            raise ImportPayloadError(f"스냅샷 내용이 올바르지 않습니다: {e}", e.errors) from e
        except KeyError as e:
            logger.error(f"[ImportExport] 스냅샷 복원 실패: {e}")
            raise ImportPayloadError(f"스냅샷 내용이 올바르지 않습니다: {e}") from e

        state.journals.sequence.restore(snapshot.next_sequence)
        logger.info(
            f"[ImportExport] 스냅샷 복원: 계정 {len(snapshot.accounts)}건, "
            f"분개 {len(snapshot.journals)}건"
        )
        return state

    # =========================================================================
    # 내부
    # =========================================================================

    def _import_journals(
        self, records: list[JournalImportRecord], auto_post: bool
    ) -> list[dict[str, Any]]:
        results = []
        for index, record in enumerate(records):
            result = self._import_journal(record, auto_post)
            results.append(self._item_result(index, result))
        return results

    def _import_journal(self, record: JournalImportRecord, auto_post: bool) -> LedgerResult:
        journals = self._state.journals
        created = journals.create_journal(
            JournalInput(
                date=record.date,
                description=record.description,
                lines=[line.to_domain() for line in record.details],
                division=record.division,
                reference=record.reference,
                tags=list(record.tags),
            ),
            actor=self._actor,
            journal_number=record.number,
        )
        if not created.success or created.journal is None:
            return created

        journal_id = created.journal.id
        if record.status == JournalStatus.CANCELLED:
            return journals.cancel_journal(journal_id, IMPORT_CANCEL_REASON, actor=self._actor)
        if record.status == JournalStatus.POSTED or (record.status is None and auto_post):
            return journals.post_approved(journal_id, actor=self._actor)
        return created

    @staticmethod
    def _item_result(index: int, result: LedgerResult) -> dict[str, Any]:
        return {
            "index": index,
            "success": result.success,
            "journalId": result.journal.id if result.journal else None,
            "journalNumber": result.journal.journal_number if result.journal else None,
            "status": result.journal.status.value if result.journal else None,
            "errors": result.errors,
            "errorCode": result.error_code,
        }

    def _division_records(self, with_balance: bool) -> list[DivisionRecord]:
        return [
            DivisionRecord(
                code=d.code,
                name=d.name,
                require_approval=d.require_approval,
                transfer_limits=dict(d.transfer_limits),
                balance=d.get_balance() if with_balance else None,
            )
            for d in self._state.divisions.list()
        ]


def journal_line_from_payload(data: dict[str, Any]) -> JournalLine:
    """단일 라인 딕셔너리 → JournalLine (camelCase / snake_case 모두 허용)"""
    return _validate(JournalLineRecord, data, "분개 라인").to_domain()


__all__ = [
    "ImportExportService",
    "journal_line_from_payload",
    "format_value",
]
