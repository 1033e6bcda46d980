"""
State Machines

분개(Journal) 상태 및 승인 워크플로우 상태 전이 관리.
"""

import logging
from enum import Enum


logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class StateMachine:
    """상태 머신 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 정의 {from_state: [to_states]}
        name: 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인

        Args:
            to_state: 목표 상태

        Returns:
            전이 가능 여부
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise StateMachineError(
                f"{self._name}: {self._state}에서 {target}(으)로 전이할 수 없습니다. "
                f"허용: {allowed}"
            )

        old_state = self._state
        self._state = target
        self._history.append((old_state, target))

        logger.debug(
            f"{self._name}: {old_state} → {target}",
        )

        return target

    @property
    def history(self) -> list[tuple[str, str]]:
        """상태 전이 이력"""
        return self._history.copy()


class JournalStateMachine(StateMachine):
    """분개 상태 머신

    전이 규칙:
    - DRAFT → POSTED: 전기
    - DRAFT → CANCELLED: 전기 전 취소
    - POSTED → CANCELLED: 전기 후 취소
    """

    TRANSITIONS: dict[str, list[str]] = {
        "DRAFT": ["POSTED", "CANCELLED"],
        "POSTED": ["CANCELLED"],
    }

    def __init__(self, initial_state: str | Enum = "DRAFT"):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="JournalStateMachine",
        )

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부"""
        return self._state == "CANCELLED"

    @property
    def is_editable(self) -> bool:
        """수정/삭제 가능 여부 (DRAFT만)"""
        return self._state == "DRAFT"


class ApprovalStateMachine(StateMachine):
    """승인 워크플로우 상태 머신 (DRAFT 분개 전용)

    전이 규칙:
    - NONE → SUBMITTED: 승인 요청
    - SUBMITTED → APPROVED: 승인
    - SUBMITTED → NONE: 반려 (수정 시)
    """

    TRANSITIONS: dict[str, list[str]] = {
        "NONE": ["SUBMITTED"],
        "SUBMITTED": ["APPROVED", "NONE"],
    }

    def __init__(self, initial_state: str | Enum = "NONE"):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="ApprovalStateMachine",
        )

    @property
    def is_approved(self) -> bool:
        """승인 완료 여부"""
        return self._state == "APPROVED"
