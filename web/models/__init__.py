"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    ClosingRequest,
    CsvImportRequest,
    JournalCancelRequest,
    JournalCreateRequest,
    JournalLineRequest,
    JournalSuggestionRequest,
    JournalUpdateRequest,
    MonthlyBillingRequest,
    RecordTransactionRequest,
    SettleTransactionRequest,
    TransactionRequest,
    TransactionRowsRequest,
)
from web.models.responses import (
    AccountLedgerResponse,
    AccountListResponse,
    BalanceSheetResponse,
    DivisionResponse,
    ErrorResponse,
    HealthResponse,
    IncomeStatementResponse,
    JournalListResponse,
    JournalResultResponse,
    TrialBalanceResponse,
)

__all__ = [
    # Requests
    "ClosingRequest",
    "CsvImportRequest",
    "JournalCancelRequest",
    "JournalCreateRequest",
    "JournalLineRequest",
    "JournalSuggestionRequest",
    "JournalUpdateRequest",
    "MonthlyBillingRequest",
    "RecordTransactionRequest",
    "SettleTransactionRequest",
    "TransactionRequest",
    "TransactionRowsRequest",
    # Responses
    "AccountLedgerResponse",
    "AccountListResponse",
    "BalanceSheetResponse",
    "DivisionResponse",
    "ErrorResponse",
    "HealthResponse",
    "IncomeStatementResponse",
    "JournalListResponse",
    "JournalResultResponse",
    "TrialBalanceResponse",
]
