"""
복식부기 (Double-Entry Bookkeeping) 장부

관리조합의 회계구분(관리/수선적립금/주차장)별 자금을 추적하는 복식부기 엔진.
분개 전기 시 회계구분 거래 내역과 보조원장(세대별 미수금, 거래처별 미지급금)에 기록.

사용 예시:
```python
from decimal import Decimal
from core.ledger import Ledger, Transaction, TransactionType, PaymentStatus

ledger = Ledger()

# 거래에서 분개 생성 및 전기 (D 1301 / C 5101)
tx = Transaction(
    id="tx-1",
    type=TransactionType.INCOME,
    account_code="5101",
    amount=Decimal("10000"),
    occurred_on="2026-04-01",
    status=PaymentStatus.UNPAID,
)
result = ledger.record_transaction(tx)

# 결제 처리 (D 1102 / C 1301)
ledger.settle_transaction(tx, "1102", payment_date="2026-04-10")

# 시산표 조회
trial = ledger.get_trial_balance("2026-04-01", "2026-04-30").data
```
"""

from core.ledger.accounts import Account, AccountDirectory
from core.ledger.auxiliary import AuxiliaryLedgerService, UnitOwner, Vendor
from core.ledger.errors import (
    AccountNotFoundError,
    ConsistencyError,
    ImportPayloadError,
    LedgerError,
    NotFoundError,
    RuleNotFoundError,
    StateError,
    TransferLimitExceededError,
    ValidationError,
)
from core.ledger.facade import JournalSuggestion, Ledger
from core.ledger.generator import (
    JournalGenerationRule,
    JournalGenerator,
    JournalPattern,
    RuleCondition,
    Transaction,
)
from core.ledger.journal import Journal, JournalInput, JournalLine, JournalPatch
from core.ledger.results import LedgerResult
from core.ledger.types import (
    INITIAL_ACCOUNTS,
    AccountType,
    ApprovalStatus,
    DivisionCode,
    JournalSide,
    JournalStatus,
    LedgerAccounts,
    NormalBalance,
    PaymentStatus,
    TransactionType,
)

__all__ = [
    # 핵심 클래스
    "Ledger",
    "LedgerResult",
    "Journal",
    "JournalInput",
    "JournalLine",
    "JournalPatch",
    "JournalSuggestion",
    "Account",
    "AccountDirectory",
    "AuxiliaryLedgerService",
    "UnitOwner",
    "Vendor",
    "Transaction",
    "JournalGenerator",
    "JournalGenerationRule",
    "RuleCondition",
    "JournalPattern",
    # 예외
    "LedgerError",
    "ValidationError",
    "StateError",
    "NotFoundError",
    "AccountNotFoundError",
    "RuleNotFoundError",
    "TransferLimitExceededError",
    "ConsistencyError",
    "ImportPayloadError",
    # Enum
    "AccountType",
    "NormalBalance",
    "JournalSide",
    "JournalStatus",
    "ApprovalStatus",
    "DivisionCode",
    "TransactionType",
    "PaymentStatus",
    # 상수
    "INITIAL_ACCOUNTS",
    "LedgerAccounts",
]
