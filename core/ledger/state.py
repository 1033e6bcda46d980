"""
Ledger 상태 구성

계정과목 / 회계구분 / 보조원장 / 분개 / 생성기 / 보고서 / 마감 서비스를
하나의 상태 단위로 묶는다. 스냅샷 복원은 새 상태를 만들어 적재한 뒤 교체한다.
"""

from dataclasses import dataclass

from core.config.loader import LedgerConfig
from core.ledger.accounts import AccountDirectory
from core.ledger.auxiliary import AuxiliaryLedgerService
from core.ledger.closing import ClosingService
from core.ledger.divisions import DivisionRegistry
from core.ledger.generator import JournalGenerator
from core.ledger.journal import JournalSequence
from core.ledger.reports import ReportService
from core.ledger.service import JournalService
from core.ledger.types import LedgerAccounts


@dataclass
class LedgerState:
    """Ledger 구성 요소 묶음"""

    config: LedgerConfig
    accounts: AccountDirectory
    divisions: DivisionRegistry
    auxiliary: AuxiliaryLedgerService
    journals: JournalService
    generator: JournalGenerator
    reports: ReportService
    closing: ClosingService


def build_state(config: LedgerConfig, seed_accounts: bool = True) -> LedgerState:
    """빈 Ledger 상태 생성

    Args:
        config: Ledger 설정
        seed_accounts: True면 초기 계정과목표 적재

    Returns:
        LedgerState (회계구분 초기화 완료)
    """
    accounts = AccountDirectory()
    if seed_accounts:
        accounts.initialize()

    divisions = DivisionRegistry(config)
    divisions.initialize()

    auxiliary = AuxiliaryLedgerService(
        accounts,
        receivable_account=config.receivable_account,
        reserve_receivable_account=LedgerAccounts.RECEIVABLE_RESERVE,
        payable_account=config.payable_account,
    )
    sequence = JournalSequence(
        prefix=config.journal_number_prefix,
        width=config.journal_number_width,
        start=config.journal_number_start,
    )
    journals = JournalService(accounts, divisions, auxiliary, sequence=sequence, config=config)
    generator = JournalGenerator(accounts, config=config)
    reports = ReportService(accounts, journals, divisions, auxiliary, config=config)
    closing = ClosingService(
        journals,
        divisions,
        reports,
        accounts,
        fiscal_year_start_month=config.fiscal_year_start_month,
        default_division=config.default_division,
    )

    return LedgerState(
        config=config,
        accounts=accounts,
        divisions=divisions,
        auxiliary=auxiliary,
        journals=journals,
        generator=generator,
        reports=reports,
        closing=closing,
    )
