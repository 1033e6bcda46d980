"""
pytest 공통 fixture 정의

설정 파일과 무관하게 내장 기본값(LedgerConfig())으로 Ledger를 구성한다.
"""

import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from core.config.loader import DivisionConfig, LedgerConfig, Settings
from core.ledger.auxiliary import UnitOwner, Vendor
from core.ledger.facade import Ledger
from core.ledger.generator import Transaction
from core.ledger.journal import JournalInput, JournalLine
from core.ledger.types import PaymentStatus, TransactionType


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_ledger_config_file(temp_dir: Path) -> Path:
    """테스트용 ledger.yaml 파일 생성"""
    content = """# 테스트용 ledger.yaml
journal_number:
  prefix: "JV"
  width: 4
  start: 100

balance_tolerance: "0.01"
fiscal_year_start_month: 4

divisions:
  RESERVE:
    require_approval: true
  MANAGEMENT:
    transfer_limits:
      PARKING: 500000

accounts:
  receivable: "1301"
  payable: "2101"
"""
    path = temp_dir / "ledger.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_ledger_config_file_invalid_division(temp_dir: Path) -> Path:
    """존재하지 않는 회계구분이 포함된 ledger.yaml 파일 생성"""
    content = """divisions:
  UNKNOWN:
    require_approval: true
"""
    path = temp_dir / "ledger_invalid.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_settings():
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def config() -> LedgerConfig:
    """기본 설정 (승인 필요 구분 없음)"""
    return LedgerConfig()


@pytest.fixture
def approval_config() -> LedgerConfig:
    """수선적립금회계 승인 필요 설정"""
    return LedgerConfig(
        divisions={"RESERVE": DivisionConfig(code="RESERVE", require_approval=True)}
    )


@pytest.fixture
def ledger(config: LedgerConfig) -> Ledger:
    """초기 계정과목표가 적재된 빈 장부"""
    return Ledger(config)


@pytest.fixture
def owners() -> list[UnitOwner]:
    return [
        UnitOwner("101", "김민수", Decimal("15000"), Decimal("12000"), Decimal("5000")),
        UnitOwner("102", "이영희", Decimal("15000"), Decimal("12000")),
        UnitOwner("201", "박지훈", Decimal("18000"), Decimal("14000"), is_active=False),
    ]


@pytest.fixture
def vendors() -> list[Vendor]:
    return [
        Vendor("V001", "한빛관리", "관리위탁"),
        Vendor("V002", "대한전력", "수도광열"),
    ]


@pytest.fixture
def ledger_with_masters(ledger: Ledger, owners: list[UnitOwner], vendors: list[Vendor]) -> Ledger:
    """구분소유자 / 거래처가 등록된 장부"""
    ledger.auxiliary.register_unit_owners(owners)
    ledger.auxiliary.register_vendors(vendors)
    return ledger


@pytest.fixture
def make_input() -> Callable[..., JournalInput]:
    """2라인 분개 입력 생성 헬퍼"""

    def _make(
        debit_code: str,
        credit_code: str,
        amount: str,
        date: str = "2026-04-10",
        description: str = "테스트 분개",
        division: str | None = None,
        debit_aux: str | None = None,
        credit_aux: str | None = None,
    ) -> JournalInput:
        return JournalInput(
            date=date,
            description=description,
            division=division,
            lines=[
                JournalLine(debit_code, debit_amount=Decimal(amount), auxiliary_code=debit_aux),
                JournalLine(credit_code, credit_amount=Decimal(amount), auxiliary_code=credit_aux),
            ],
        )

    return _make


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """거래 생성 헬퍼"""

    def _make(
        type: TransactionType,
        account_code: str,
        amount: str,
        status: PaymentStatus = PaymentStatus.UNPAID,
        occurred_on: str = "2026-04-01",
        payment_account_code: str | None = None,
        id: str = "tx-1",
        note: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=id,
            type=type,
            account_code=account_code,
            amount=Decimal(amount),
            occurred_on=occurred_on,
            status=status,
            payment_account_code=payment_account_code,
            note=note,
        )

    return _make
