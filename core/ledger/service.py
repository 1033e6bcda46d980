"""
분개 서비스 (Journal Engine)

분개 생성/전기/승인/취소/삭제/수정 및 조회.
- 생성 시 계정 존재/활성/전기 가능 여부, 보조원장, 회계구분, 구분 간 이체 규칙 검증
- 전기 시 회계구분 거래 내역과 보조원장에 기록
- 전기된 분개 취소 시 역방향 기록
- 모든 공개 작업은 LedgerResult 반환 (도메인 예외를 변환)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import Any

from core.config.loader import LedgerConfig
from core.constants import Defaults
from core.ledger.accounts import AccountDirectory
from core.ledger.auxiliary import AuxiliaryLedgerService
from core.ledger.divisions import DivisionRegistry
from core.ledger.errors import (
    AccountNotFoundError,
    LedgerError,
    NotFoundError,
    StateError,
    ValidationError,
)
from core.ledger.journal import (
    Journal,
    JournalInput,
    JournalLine,
    JournalPatch,
    JournalSequence,
    validate_journal_fields,
)
from core.ledger.results import LedgerResult
from core.ledger.types import ZERO, ApprovalStatus, DivisionCode, JournalStatus

logger = logging.getLogger(__name__)


class JournalService:
    """분개 서비스

    Args:
        accounts: 계정과목 디렉토리
        divisions: 회계구분 레지스트리
        auxiliary: 보조원장 서비스
        sequence: 분개 번호 발급기 (None이면 설정값으로 생성)
        config: Ledger 설정
    """

    def __init__(
        self,
        accounts: AccountDirectory,
        divisions: DivisionRegistry,
        auxiliary: AuxiliaryLedgerService,
        sequence: JournalSequence | None = None,
        config: LedgerConfig | None = None,
    ) -> None:
        self._config = config or LedgerConfig()
        self._accounts = accounts
        self._divisions = divisions
        self._auxiliary = auxiliary
        self._sequence = sequence or JournalSequence(
            prefix=self._config.journal_number_prefix,
            width=self._config.journal_number_width,
            start=self._config.journal_number_start,
        )
        self._journals: dict[str, Journal] = {}

    @property
    def sequence(self) -> JournalSequence:
        return self._sequence

    def clear(self) -> None:
        """분개 전체 삭제 (번호 카운터는 유지)"""
        self._journals = {}

    # =========================================================================
    # 생성 / 전기
    # =========================================================================

    def create_journal(
        self,
        data: JournalInput,
        auto_post: bool = False,
        meta: dict[str, Any] | None = None,
        actor: str = Defaults.ACTOR,
        journal_number: str | None = None,
    ) -> LedgerResult:
        """분개 생성 (auto_post=True면 즉시 전기)

        전기 단계에서 실패하면 DRAFT 분개는 남기고 실패 결과 반환.
        journal_number는 가져오기 시 원래 번호 유지용 (중복 불가).
        """
        try:
            if journal_number and self.find_by_number(journal_number) is not None:
                raise ValidationError(f"이미 사용 중인 분개 번호입니다: {journal_number}")
            data = self._with_division(data)
            self._check(data.date, data.division, data.lines)
            lines = [self._with_account_name(line) for line in data.lines]
            journal = Journal.create(
                replace(data, lines=lines),
                self._sequence,
                actor=actor,
                tolerance=self._config.balance_tolerance,
                meta=meta,
                journal_number=journal_number,
            )
        except LedgerError as e:
            logger.warning(f"[Journal] 분개 생성 실패: {data.description} - {e.errors}")
            return LedgerResult.fail(e)

        self._journals[journal.id] = journal
        logger.info(
            f"[Journal] 분개 생성: {journal.journal_number} {journal.date} "
            f"{journal.description} ({journal.total_debit})"
        )

        if auto_post:
            result = self.post_journal_by_id(journal.id, actor=actor)
            if not result.success:
                result.journal = journal
            return result
        return LedgerResult.ok(journal)

    def post_journal_by_id(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        """분개 전기

        DRAFT이고 차대가 일치해야 하며, 승인 필요 구분은 APPROVED 상태여야 함.
        이미 전기된 분개는 상태 변경 없이 실패 결과 반환.
        """
        try:
            journal = self.require_journal(journal_id)
            division = self._divisions.get(journal.division) if journal.division else None
            if (
                journal.is_draft
                and division is not None
                and division.require_approval
                and journal.approval_status != ApprovalStatus.APPROVED
            ):
                raise StateError(
                    f"{division.name} 분개는 승인 후 전기할 수 있습니다: {journal.journal_number}"
                )
            posted = journal.post(actor)
        except LedgerError as e:
            logger.warning(f"[Journal] 전기 실패: {journal_id} - {e.message}")
            return LedgerResult.fail(e)

        self._apply_effects(posted)
        self._journals[posted.id] = posted
        logger.info(f"[Journal] 전기 완료: {posted.journal_number} (by {actor})")
        return LedgerResult.ok(posted)

    def post_approved(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        """승인 필요 구분이면 actor 명의로 승인 요청/승인 후 전기

        결산 마감, 가져오기처럼 시스템이 작성한 분개에 사용.
        """
        journal = self.get_journal(journal_id)
        division = self._divisions.get(journal.division) if journal and journal.division else None
        if journal is not None and journal.is_draft and division and division.require_approval:
            if journal.approval_status == ApprovalStatus.NONE:
                result = self.submit_journal(journal_id, actor=actor)
                if not result.success:
                    return result
            if self.require_journal(journal_id).approval_status == ApprovalStatus.SUBMITTED:
                result = self.approve_journal(journal_id, actor=actor)
                if not result.success:
                    return result
        return self.post_journal_by_id(journal_id, actor=actor)

    # =========================================================================
    # 승인 워크플로우
    # =========================================================================

    def submit_journal(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        """승인 요청"""
        try:
            journal = self.require_journal(journal_id).submit(actor)
        except LedgerError as e:
            return LedgerResult.fail(e)

        self._journals[journal.id] = journal
        logger.info(f"[Journal] 승인 요청: {journal.journal_number} (by {actor})")
        return LedgerResult.ok(journal)

    def approve_journal(self, journal_id: str, actor: str = Defaults.ACTOR) -> LedgerResult:
        """승인"""
        try:
            journal = self.require_journal(journal_id).approve(actor)
        except LedgerError as e:
            return LedgerResult.fail(e)

        self._journals[journal.id] = journal
        logger.info(f"[Journal] 승인: {journal.journal_number} (by {actor})")
        return LedgerResult.ok(journal)

    # =========================================================================
    # 취소 / 삭제 / 수정
    # =========================================================================

    def cancel_journal(
        self, journal_id: str, reason: str, actor: str = Defaults.ACTOR
    ) -> LedgerResult:
        """분개 취소 (전기된 분개는 구분/보조원장에 역기록)"""
        try:
            if not reason or not reason.strip():
                raise ValidationError("취소 사유를 입력해야 합니다")
            journal = self.require_journal(journal_id)
            cancelled = journal.cancel(reason, actor)
        except LedgerError as e:
            logger.warning(f"[Journal] 취소 실패: {journal_id} - {e.message}")
            return LedgerResult.fail(e)

        if journal.is_posted:
            self._apply_effects(cancelled, reverse=True)
        self._journals[cancelled.id] = cancelled
        logger.info(f"[Journal] 취소: {cancelled.journal_number} 사유={reason} (by {actor})")
        return LedgerResult.ok(cancelled)

    def delete_journal(self, journal_id: str) -> LedgerResult:
        """분개 삭제 (DRAFT만)"""
        try:
            journal = self.require_journal(journal_id)
            if not journal.is_draft:
                raise StateError(
                    f"{journal.status.value} 상태의 분개는 삭제할 수 없습니다: "
                    f"{journal.journal_number}"
                )
        except LedgerError as e:
            return LedgerResult.fail(e)

        del self._journals[journal_id]
        logger.info(f"[Journal] 삭제: {journal.journal_number}")
        return LedgerResult.ok(journal)

    def update_journal(self, journal_id: str, patch: JournalPatch) -> LedgerResult:
        """DRAFT 분개 수정 (재검증, 승인 상태 초기화)"""
        try:
            journal = self.require_journal(journal_id)
            lines = patch.lines
            if lines is not None:
                lines = [self._with_account_name(line) for line in lines]
            updated = journal.update(
                lines=lines,
                date=patch.date,
                description=patch.description,
                reference=patch.reference,
                division=patch.division,
                tags=patch.tags,
            )
            self._check(updated.date, updated.division, list(updated.lines))
        except LedgerError as e:
            return LedgerResult.fail(e)

        self._journals[updated.id] = updated
        logger.info(f"[Journal] 수정: {updated.journal_number}")
        return LedgerResult.ok(updated)

    # =========================================================================
    # 조회
    # =========================================================================

    def get_journal(self, journal_id: str) -> Journal | None:
        return self._journals.get(journal_id)

    def require_journal(self, journal_id: str) -> Journal:
        """분개 조회

        Raises:
            NotFoundError: 분개가 없는 경우
        """
        journal = self._journals.get(journal_id)
        if journal is None:
            raise NotFoundError(f"분개를 찾을 수 없습니다: {journal_id}")
        return journal

    def find_by_number(self, journal_number: str) -> Journal | None:
        for journal in self._journals.values():
            if journal.journal_number == journal_number:
                return journal
        return None

    def list_journals(
        self,
        status: JournalStatus | None = None,
        division: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        account_code: str | None = None,
        tag: str | None = None,
    ) -> list[Journal]:
        """분개 목록 (일자, 번호 순)"""
        result = []
        for journal in self._journals.values():
            if status is not None and journal.status != status:
                continue
            if division is not None and journal.division != division:
                continue
            if date_from is not None and journal.date < date_from:
                continue
            if date_to is not None and journal.date > date_to:
                continue
            if account_code is not None and not any(
                line.account_code == account_code for line in journal.lines
            ):
                continue
            if tag is not None and tag not in journal.tags:
                continue
            result.append(journal)
        return sorted(result, key=lambda j: (j.date, j.journal_number))

    def posted_journals(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        division: str | None = None,
    ) -> list[Journal]:
        return self.list_journals(
            status=JournalStatus.POSTED, division=division, date_from=date_from, date_to=date_to
        )

    def all_journals(self) -> list[Journal]:
        """전체 분개 (등록 순)"""
        return list(self._journals.values())

    def summary(self) -> dict[str, Any]:
        """상태별 건수 및 전기 분개 차대 합계"""
        counts = Counter(j.status.value for j in self._journals.values())
        posted = [j for j in self._journals.values() if j.is_posted]
        return {
            "total": len(self._journals),
            "draft": counts.get(JournalStatus.DRAFT.value, 0),
            "posted": counts.get(JournalStatus.POSTED.value, 0),
            "cancelled": counts.get(JournalStatus.CANCELLED.value, 0),
            "pending_approval": sum(
                1
                for j in self._journals.values()
                if j.is_draft and j.approval_status == ApprovalStatus.SUBMITTED
            ),
            "posted_debit_total": sum((j.total_debit for j in posted), ZERO),
            "posted_credit_total": sum((j.total_credit for j in posted), ZERO),
        }

    # =========================================================================
    # 스냅샷 / 가져오기 지원
    # =========================================================================

    def load_journal(self, journal: Journal) -> None:
        """기존 분개 적재 (ID/번호/상태 유지, 전기 분개는 구분/보조원장 재기록)

        구조 검증과 계정 존재 확인만 수행 (비활성 계정, 구분 간 이체 규칙은 재검사하지 않음).

        Raises:
            ValidationError: 중복 ID, 구조 오류 (차대 불일치 등)
            AccountNotFoundError: 계정과목 없음
        """
        if journal.id in self._journals:
            raise ValidationError(f"중복된 분개 ID입니다: {journal.id}")
        errors = validate_journal_fields(
            journal.date, journal.division, list(journal.lines), self._config.balance_tolerance
        )
        if errors:
            raise ValidationError(f"분개 검증 실패: {journal.journal_number}", errors)
        for line in journal.lines:
            if not self._accounts.exists(line.account_code):
                raise AccountNotFoundError(
                    line.account_code,
                    f"{journal.journal_number}: 계정과목을 찾을 수 없습니다: {line.account_code}",
                )
        self._sequence.observe(journal.journal_number)
        self._journals[journal.id] = journal
        if journal.is_posted:
            self._apply_effects(journal)

    # =========================================================================
    # 내부
    # =========================================================================

    def _with_division(self, data: JournalInput) -> JournalInput:
        """회계구분 미지정 시 라인 계정에서 추론 (단일 구분이 아니면 기본 구분)"""
        if data.division:
            return data
        found = set()
        for line in data.lines:
            account = self._accounts.get(line.account_code)
            if account and account.division and account.division != DivisionCode.COMMON:
                found.add(account.division.value)
        division = found.pop() if len(found) == 1 else self._config.default_division
        return replace(data, division=division)

    def _with_account_name(self, line: JournalLine) -> JournalLine:
        account = self._accounts.get(line.account_code)
        if account is None or line.account_name:
            return line
        return replace(line, account_name=account.name)

    def _check(self, date: str, division: str | None, lines: list[JournalLine]) -> None:
        """분개 검증 (구조, 참조, 구분 간 이체)

        Raises:
            ValidationError: 구조 오류, 비활성/집계 계정
            AccountNotFoundError: 계정 없음
            NotFoundError: 보조원장 / 회계구분 없음
            TransferLimitExceededError: 구분 간 이체 규칙 위반
        """
        errors = validate_journal_fields(date, division, lines, self._config.balance_tolerance)
        if errors:
            raise ValidationError("분개 검증 실패", errors)

        assert division is not None
        self._divisions.require(division)

        for index, line in enumerate(lines, start=1):
            account = self._accounts.get(line.account_code)
            if account is None:
                raise AccountNotFoundError(
                    line.account_code,
                    f"{index}행: 계정과목을 찾을 수 없습니다: {line.account_code}",
                )
            if not account.is_active:
                errors.append(f"{index}행: 비활성 계정입니다: {account.code} {account.name}")
            if not account.is_postable:
                errors.append(f"{index}행: 집계 계정에는 전기할 수 없습니다: {account.code} {account.name}")
            if line.auxiliary_code and not self._auxiliary.exists(
                line.account_code, line.auxiliary_code
            ):
                raise NotFoundError(
                    f"{index}행: 보조원장을 찾을 수 없습니다: "
                    f"{line.account_code}/{line.auxiliary_code}"
                )
        if errors:
            raise ValidationError("분개 검증 실패", errors)

        self._check_cross_division(lines)

    def _check_cross_division(self, lines: list[JournalLine]) -> None:
        """구분 간 이동 검증

        구분별 순액(차변 - 대변)을 구해 대변 순액 구분에서 차변 순액 구분으로의
        이체로 보고 각 쌍을 레지스트리 규칙으로 검사. COMMON 계정은 제외.
        """
        net: dict[str, Decimal] = {}
        for line in lines:
            account = self._accounts.get(line.account_code)
            if account is None or account.division in (None, DivisionCode.COMMON):
                continue
            code = account.division.value
            net[code] = net.get(code, ZERO) + line.debit_amount - line.credit_amount

        if len(net) < 2:
            return

        sources = [code for code, amount in net.items() if amount < ZERO]
        targets = [(code, amount) for code, amount in net.items() if amount > ZERO]
        for source in sources:
            for target, amount in targets:
                self._divisions.check_transfer(source, target, amount)

    def _apply_effects(self, journal: Journal, reverse: bool = False) -> None:
        """전기 부수 효과 (회계구분 거래 내역, 보조원장)"""
        description = f"[취소] {journal.description}" if reverse else journal.description
        for line in journal.lines:
            is_debit = line.is_debit != reverse
            account = self._accounts.get(line.account_code)
            if account is not None and account.division is not None:
                self._divisions.add_transaction(
                    account.division.value,
                    journal_id=journal.id,
                    date=journal.date,
                    description=description,
                    amount=line.amount,
                    is_debit=is_debit,
                    account_type=account.account_type,
                )
            if line.auxiliary_code and self._auxiliary.exists(
                line.account_code, line.auxiliary_code
            ):
                self._auxiliary.post(
                    line.account_code,
                    line.auxiliary_code,
                    amount=line.amount,
                    is_debit=is_debit,
                    journal_id=journal.id,
                    description=description,
                    date=journal.date,
                )
