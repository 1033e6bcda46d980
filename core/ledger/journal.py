"""
분개 (Journal)

분개 엔티티와 상태 전이.
- 분개는 불변 객체: 상태 전이는 새 인스턴스를 반환
- 전기(post)는 DRAFT이고 차대가 일치할 때만 허용
- 전기 후에는 취소(CANCELLED) 외 변경 불가
- 분개 번호는 엔진 인스턴스가 소유한 JournalSequence에서 발급
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from core.constants import Defaults
from core.domain.state_machines import (
    ApprovalStateMachine,
    JournalStateMachine,
    StateMachineError,
)
from core.ledger.errors import StateError
from core.ledger.types import ZERO, ApprovalStatus, JournalStatus
from core.utils.timezone import is_iso_date, now_utc


@dataclass(frozen=True)
class JournalLine:
    """분개 라인

    차변/대변 중 정확히 한쪽만 0보다 커야 함.
    """

    account_code: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    auxiliary_code: str | None = None
    service_month: str | None = None
    payer_id: str | None = None
    description: str | None = None
    account_name: str | None = None
    id: str = ""

    @property
    def is_debit(self) -> bool:
        return self.debit_amount > ZERO

    @property
    def amount(self) -> Decimal:
        return self.debit_amount if self.is_debit else self.credit_amount


@dataclass(frozen=True)
class JournalInput:
    """분개 생성 입력"""

    date: str
    description: str
    lines: list[JournalLine]
    division: str | None = None
    reference: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class JournalPatch:
    """DRAFT 분개 수정 입력 (None인 필드는 유지)"""

    date: str | None = None
    description: str | None = None
    lines: list[JournalLine] | None = None
    division: str | None = None
    reference: str | None = None
    tags: list[str] | None = None


class JournalSequence:
    """분개 번호 발급기

    단조 증가, 재사용 없음. 엔진 인스턴스마다 하나씩 주입.

    Args:
        prefix: 번호 접두어 (기본: "J")
        width: 0 채움 자릿수 (기본: 6)
        start: 첫 번호
    """

    def __init__(
        self,
        prefix: str = Defaults.JOURNAL_NUMBER_PREFIX,
        width: int = Defaults.JOURNAL_NUMBER_WIDTH,
        start: int = Defaults.JOURNAL_NUMBER_START,
    ) -> None:
        self._prefix = prefix
        self._width = width
        self._next = start

    @property
    def next_value(self) -> int:
        return self._next

    def next(self) -> str:
        """다음 분개 번호 발급 (예: J000001)"""
        number = self.format(self._next)
        self._next += 1
        return number

    def format(self, value: int) -> str:
        return f"{self._prefix}{value:0{self._width}d}"

    def observe(self, number: str) -> None:
        """외부에서 들어온 번호 반영 (발급 번호가 겹치지 않도록 카운터 전진)"""
        if not number.startswith(self._prefix):
            return
        digits = number[len(self._prefix):]
        if digits.isdigit():
            self._next = max(self._next, int(digits) + 1)

    def restore(self, next_value: int) -> None:
        """스냅샷 복원 시 카운터 설정 (감소 불가)"""
        self._next = max(self._next, next_value)


@dataclass(frozen=True)
class Journal:
    """분개

    상태 전이 메서드(post, cancel, update_lines, submit, approve)는
    검증 후 새 인스턴스를 반환한다.
    """

    id: str
    journal_number: str
    date: str
    description: str
    division: str | None
    lines: tuple[JournalLine, ...]
    status: JournalStatus = JournalStatus.DRAFT
    reference: str | None = None
    tags: tuple[str, ...] = ()
    meta: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    posted_at: datetime | None = None
    posted_by: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    approval_status: ApprovalStatus = ApprovalStatus.NONE
    submitted_at: datetime | None = None
    submitted_by: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    tolerance: Decimal = field(default=Defaults.BALANCE_TOLERANCE, compare=False)

    # =========================================================================
    # 생성
    # =========================================================================

    @classmethod
    def create(
        cls,
        data: JournalInput,
        sequence: JournalSequence,
        actor: str = Defaults.ACTOR,
        tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
        meta: dict[str, Any] | None = None,
        journal_number: str | None = None,
    ) -> Journal:
        """입력으로 DRAFT 분개 생성 (라인 ID 부여, 번호 발급)

        journal_number를 지정하면 그 번호를 사용하고 카운터를 그 뒤로 전진.
        """
        now = now_utc()
        if journal_number:
            sequence.observe(journal_number)
        else:
            journal_number = sequence.next()
        lines = tuple(
            replace(line, id=line.id or f"L{index}")
            for index, line in enumerate(data.lines, start=1)
        )
        return cls(
            id=str(uuid4()),
            journal_number=journal_number,
            date=data.date,
            description=data.description,
            division=data.division,
            lines=lines,
            reference=data.reference,
            tags=tuple(data.tags),
            meta=dict(meta or {}),
            created_at=now,
            updated_at=now,
            created_by=actor,
            tolerance=tolerance,
        )

    # =========================================================================
    # 파생 값
    # =========================================================================

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        """|차변 합계 - 대변 합계| < 허용 오차"""
        return abs(self.total_debit - self.total_credit) < self.tolerance

    @property
    def is_draft(self) -> bool:
        return self.status == JournalStatus.DRAFT

    @property
    def is_posted(self) -> bool:
        return self.status == JournalStatus.POSTED

    @property
    def is_cancelled(self) -> bool:
        return self.status == JournalStatus.CANCELLED

    # =========================================================================
    # 검증
    # =========================================================================

    def validate(self) -> list[str]:
        """구조 검증 (예외 없이 에러 메시지 목록 반환)"""
        return validate_journal_fields(
            self.date, self.division, list(self.lines), self.tolerance
        )

    # =========================================================================
    # 상태 전이
    # =========================================================================

    def post(self, actor: str = Defaults.ACTOR) -> Journal:
        """전기

        Raises:
            StateError: DRAFT가 아니거나 차대 불일치
        """
        if self.is_draft and not self.is_balanced:
            raise StateError(
                f"차변과 대변이 일치하지 않아 전기할 수 없습니다: {self.journal_number} "
                f"(차변 {self.total_debit}, 대변 {self.total_credit})"
            )
        self._transition(JournalStatus.POSTED, "전기")

        now = now_utc()
        return replace(
            self, status=JournalStatus.POSTED, posted_at=now, posted_by=actor, updated_at=now
        )

    def cancel(self, reason: str, actor: str = Defaults.ACTOR) -> Journal:
        """취소 (DRAFT, POSTED 모두 가능)

        Raises:
            StateError: 이미 취소된 분개
        """
        self._transition(JournalStatus.CANCELLED, "취소")

        now = now_utc()
        return replace(
            self,
            status=JournalStatus.CANCELLED,
            cancelled_at=now,
            cancelled_by=actor,
            cancellation_reason=reason,
            updated_at=now,
        )

    def update_lines(self, lines: list[JournalLine]) -> Journal:
        """라인 교체 (DRAFT만, 승인 상태 초기화)

        Raises:
            StateError: DRAFT가 아닌 분개
        """
        return self.update(lines=lines)

    def update(
        self,
        lines: list[JournalLine] | None = None,
        date: str | None = None,
        description: str | None = None,
        reference: str | None = None,
        division: str | None = None,
        tags: list[str] | None = None,
    ) -> Journal:
        """DRAFT 분개 수정 (지정한 필드만, 승인 상태 초기화)

        Raises:
            StateError: DRAFT가 아닌 분개
        """
        if not JournalStateMachine(self.status).is_editable:
            raise StateError(f"DRAFT 상태의 분개만 수정할 수 있습니다: {self.journal_number}")

        changes: dict[str, Any] = {"updated_at": now_utc()}
        if lines is not None:
            changes["lines"] = tuple(
                replace(line, id=line.id or f"L{index}")
                for index, line in enumerate(lines, start=1)
            )
        if date is not None:
            changes["date"] = date
        if description is not None:
            changes["description"] = description
        if reference is not None:
            changes["reference"] = reference
        if division is not None:
            changes["division"] = division
        if tags is not None:
            changes["tags"] = tuple(tags)

        return replace(
            self,
            approval_status=ApprovalStatus.NONE,
            submitted_at=None,
            submitted_by=None,
            approved_at=None,
            approved_by=None,
            **changes,
        )

    def submit(self, actor: str = Defaults.ACTOR) -> Journal:
        """승인 요청

        Raises:
            StateError: DRAFT가 아니거나 이미 요청/승인된 분개
        """
        self._require_draft("승인 요청")
        self._approval_transition(ApprovalStatus.SUBMITTED, "승인 요청")
        return replace(
            self,
            approval_status=ApprovalStatus.SUBMITTED,
            submitted_at=now_utc(),
            submitted_by=actor,
        )

    def approve(self, actor: str = Defaults.ACTOR) -> Journal:
        """승인

        Raises:
            StateError: 승인 요청되지 않은 분개
        """
        self._require_draft("승인")
        self._approval_transition(ApprovalStatus.APPROVED, "승인")
        return replace(
            self,
            approval_status=ApprovalStatus.APPROVED,
            approved_at=now_utc(),
            approved_by=actor,
        )

    def _require_draft(self, action: str) -> None:
        if not self.is_draft:
            raise StateError(f"DRAFT 상태의 분개만 {action}할 수 있습니다: {self.journal_number}")

    def _transition(self, target: JournalStatus, action: str) -> None:
        machine = JournalStateMachine(self.status)
        try:
            machine.transition(target)
        except StateMachineError as e:
            raise StateError(
                f"{self.status.value} 상태의 분개는 {action}할 수 없습니다: {self.journal_number}"
            ) from e

    def _approval_transition(self, target: ApprovalStatus, action: str) -> None:
        machine = ApprovalStateMachine(self.approval_status)
        try:
            machine.transition(target)
        except StateMachineError as e:
            raise StateError(
                f"승인 상태가 {self.approval_status.value}인 분개는 {action}할 수 없습니다: "
                f"{self.journal_number}"
            ) from e


def validate_journal_fields(
    date: str | None,
    division: str | None,
    lines: list[JournalLine],
    tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
) -> list[str]:
    """분개 구조 검증

    검사 항목: 일자 누락 및 형식, 회계구분 누락, 라인 2개 미만, 계정 코드 누락,
    음수 또는 0 금액, 차대 양쪽 금액, 차대 불일치.
    """
    errors: list[str] = []

    if not date:
        errors.append("일자가 입력되지 않았습니다")
    elif not is_iso_date(date):
        errors.append(f"일자 형식이 올바르지 않습니다 (YYYY-MM-DD): {date}")
    if not division:
        errors.append("회계구분이 입력되지 않았습니다")
    if len(lines) < 2:
        errors.append("분개 라인은 2개 이상이어야 합니다")

    total_debit = ZERO
    total_credit = ZERO
    for index, line in enumerate(lines, start=1):
        if not line.account_code:
            errors.append(f"{index}행: 계정 코드가 없습니다")
        debit = line.debit_amount
        credit = line.credit_amount
        if debit < ZERO or credit < ZERO:
            errors.append(f"{index}행: 금액은 음수일 수 없습니다")
        elif debit > ZERO and credit > ZERO:
            errors.append(f"{index}행: 차변과 대변 금액을 동시에 입력할 수 없습니다")
        elif debit == ZERO and credit == ZERO:
            errors.append(f"{index}행: 금액은 0보다 커야 합니다")
        total_debit += debit
        total_credit += credit

    if lines and abs(total_debit - total_credit) >= tolerance:
        errors.append(f"차변 합계({total_debit})와 대변 합계({total_credit})가 일치하지 않습니다")

    return errors
