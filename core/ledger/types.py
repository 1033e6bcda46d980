"""
복식부기 타입 정의

계정 유형, 회계구분, 분개 상태 등 Ledger 시스템에서 사용하는 Enum과
초기 계정과목표 / 회계구분 마스터 정의.
"""

from decimal import Decimal
from enum import Enum


class AccountType(str, Enum):
    """계정 유형

    복식부기의 5대 계정 유형.
    str을 상속하여 JSON 직렬화 가능.
    """

    ASSET = "ASSET"  # 자산
    LIABILITY = "LIABILITY"  # 부채
    EQUITY = "EQUITY"  # 순자산 (이월금)
    REVENUE = "REVENUE"  # 수익
    EXPENSE = "EXPENSE"  # 비용


class NormalBalance(str, Enum):
    """정상 잔액 방향 (계정이 증가하는 쪽)"""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class JournalSide(str, Enum):
    """분개 방향 (차변/대변)"""

    DEBIT = "DEBIT"  # 차변 (자산 증가, 비용 증가)
    CREDIT = "CREDIT"  # 대변 (부채/순자산/수익 증가)


class DivisionCode(str, Enum):
    """회계구분

    RESERVE(수선적립금)는 제한 구분으로 자기 자신에게만 이체 가능.
    COMMON은 계정 태그 전용으로 모든 구분에서 사용 가능.
    """

    MANAGEMENT = "MANAGEMENT"  # 관리회계 (일반 운영)
    RESERVE = "RESERVE"  # 수선적립금회계
    PARKING = "PARKING"  # 주차장회계
    COMMON = "COMMON"  # 공통


class JournalStatus(str, Enum):
    """분개 상태

    전이 규칙:
    - DRAFT → POSTED: 전기
    - DRAFT → CANCELLED: 전기 전 취소
    - POSTED → CANCELLED: 전기 후 취소 (종료 상태)
    """

    DRAFT = "DRAFT"
    POSTED = "POSTED"
    CANCELLED = "CANCELLED"


class ApprovalStatus(str, Enum):
    """승인 워크플로우 상태 (DRAFT 분개에만 적용)"""

    NONE = "NONE"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"


class TransactionType(str, Enum):
    """거래 유형 (분개 생성기 입력)"""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class PaymentStatus(str, Enum):
    """결제 상태"""

    PAID = "paid"
    UNPAID = "unpaid"
    PARTIAL = "partial"


# 계정 유형별 정상 잔액 방향
NORMAL_BALANCE_BY_TYPE: dict[AccountType, NormalBalance] = {
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.REVENUE: NormalBalance.CREDIT,
}

ZERO = Decimal("0")


class LedgerAccounts:
    """엔진이 직접 참조하는 주요 계정 코드"""

    BANK_MANAGEMENT: str = "1102"  # 보통예금 (관리비 계좌)
    RECEIVABLE_MANAGEMENT: str = "1301"  # 관리비미수금
    RECEIVABLE_RESERVE: str = "1302"  # 수선적립금미수금
    RECEIVABLE_USAGE: str = "1303"  # 사용료미수금
    PAYABLE: str = "2101"  # 미지급금
    OPENING_ADJUSTMENT: str = "4201"  # 기초잔액조정
    INCOME_MANAGEMENT_FEE: str = "5101"  # 관리비수입
    INCOME_PARKING_USAGE: str = "5102"  # 주차장사용료수입
    INCOME_RESERVE_FUND: str = "5201"  # 수선적립금수입

    # 당기순이익 표시용 가상 코드 (대차대조표 전용, 계정과목표에 없음)
    NET_INCOME: str = "9999"


# 초기 계정과목표
INITIAL_ACCOUNTS: list[tuple[str, str, str, str | None, bool, str, str | None]] = [
    # (code, name, account_type, parent_code, is_postable, division, description)

    # 자산
    ("1000", "유동자산", "ASSET", None, False, "COMMON", None),
    ("1100", "현금예금", "ASSET", "1000", False, "COMMON", None),
    ("1101", "현금", "ASSET", "1100", True, "MANAGEMENT", "소액 현금"),
    ("1102", "보통예금", "ASSET", "1100", True, "MANAGEMENT", "관리비 계좌"),
    ("1103", "보통예금(수선)", "ASSET", "1100", True, "RESERVE", "수선적립금 계좌"),
    ("1104", "정기예금", "ASSET", "1100", True, "RESERVE", None),
    ("1105", "보통예금(주차장)", "ASSET", "1100", True, "PARKING", "주차장회계 계좌"),
    ("1200", "유가증권", "ASSET", "1000", False, "RESERVE", None),
    ("1201", "국채", "ASSET", "1200", True, "RESERVE", "국채, 지방채"),
    ("1300", "미수금", "ASSET", "1000", False, "COMMON", None),
    ("1301", "관리비미수금", "ASSET", "1300", True, "MANAGEMENT", None),
    ("1302", "수선적립금미수금", "ASSET", "1300", True, "RESERVE", None),
    ("1303", "사용료미수금", "ASSET", "1300", True, "MANAGEMENT", None),
    ("1400", "선급비용", "ASSET", "1000", False, "COMMON", None),
    ("1401", "선급보험료", "ASSET", "1400", True, "COMMON", "미경과 보험료"),
    ("1500", "가지급금", "ASSET", "1000", False, "COMMON", None),
    ("1501", "가지급금", "ASSET", "1500", True, "COMMON", "입체, 정산 대기"),
    ("1600", "선급금", "ASSET", "1000", False, "COMMON", None),
    ("1601", "공사선급금", "ASSET", "1600", True, "RESERVE", "공사 계약금"),
    ("1700", "비유동자산", "ASSET", None, False, "COMMON", None),
    ("1710", "투자기타자산", "ASSET", "1700", False, "COMMON", None),
    ("1711", "임차보증금", "ASSET", "1710", True, "COMMON", "주차장 보증금"),

    # 부채
    ("2000", "유동부채", "LIABILITY", None, False, "COMMON", None),
    ("2100", "미지급금", "LIABILITY", "2000", False, "COMMON", None),
    ("2101", "미지급금", "LIABILITY", "2100", True, "COMMON", "공사대금, 수도광열비 미지급"),
    ("2200", "미지급비용", "LIABILITY", "2000", False, "COMMON", None),
    ("2201", "미지급비용", "LIABILITY", "2200", True, "COMMON", None),
    ("2300", "선수금", "LIABILITY", "2000", False, "COMMON", None),
    ("2301", "관리비선수금", "LIABILITY", "2300", True, "MANAGEMENT", None),
    ("2302", "수선적립금선수금", "LIABILITY", "2300", True, "RESERVE", None),
    ("2303", "사용료선수금", "LIABILITY", "2300", True, "MANAGEMENT", None),
    ("2400", "가수금", "LIABILITY", "2000", False, "COMMON", None),
    ("2401", "가수금", "LIABILITY", "2400", True, "COMMON", "원인 불명 입금"),
    ("2500", "예수금", "LIABILITY", "2000", False, "COMMON", None),
    ("2501", "예수금", "LIABILITY", "2500", True, "COMMON", "보증금"),
    ("3000", "고정부채", "LIABILITY", None, False, "COMMON", None),
    ("3100", "장기차입금", "LIABILITY", "3000", False, "RESERVE", None),
    ("3101", "장기차입금", "LIABILITY", "3100", True, "RESERVE", "수선자금 차입"),

    # 순자산
    ("4000", "순자산", "EQUITY", None, False, "COMMON", None),
    ("4100", "이월금", "EQUITY", "4000", False, "COMMON", None),
    ("4101", "관리비이월금", "EQUITY", "4100", True, "MANAGEMENT", None),
    ("4102", "수선적립금이월금", "EQUITY", "4100", True, "RESERVE", None),
    ("4103", "주차장이월금", "EQUITY", "4100", True, "PARKING", None),
    ("4200", "기초잔액조정", "EQUITY", "4000", False, "COMMON", None),
    ("4201", "기초잔액조정", "EQUITY", "4200", True, "COMMON", "기초잔액 차액 조정"),

    # 수익
    ("5000", "수익", "REVENUE", None, False, "COMMON", None),
    ("5100", "관리수익", "REVENUE", "5000", False, "MANAGEMENT", None),
    ("5101", "관리비수입", "REVENUE", "5100", True, "MANAGEMENT", None),
    ("5102", "주차장사용료수입", "REVENUE", "5100", True, "MANAGEMENT", "월정 주차장"),
    ("5103", "자전거보관소사용료수입", "REVENUE", "5100", True, "MANAGEMENT", None),
    ("5104", "루프발코니사용료수입", "REVENUE", "5100", True, "MANAGEMENT", None),
    ("5105", "테라스사용료수입", "REVENUE", "5100", True, "MANAGEMENT", None),
    ("5106", "집회실사용료수입", "REVENUE", "5100", True, "MANAGEMENT", None),
    ("5107", "주차장수입", "REVENUE", "5100", True, "PARKING", "주차장회계 수입"),
    ("5200", "적립금수입", "REVENUE", "5000", False, "RESERVE", None),
    ("5201", "수선적립금수입", "REVENUE", "5200", True, "RESERVE", None),
    ("5300", "영업외수익", "REVENUE", "5000", False, "COMMON", None),
    ("5301", "수입이자", "REVENUE", "5300", True, "COMMON", "예금이자, 채권이자"),
    ("5302", "잡수입", "REVENUE", "5300", True, "COMMON", None),
    ("5303", "연체금수입", "REVENUE", "5300", True, "MANAGEMENT", None),
    ("5304", "보험금수입", "REVENUE", "5300", True, "COMMON", None),
    ("5305", "보조금수입", "REVENUE", "5300", True, "COMMON", None),
    ("5400", "특별수익", "REVENUE", "5000", False, "COMMON", None),
    ("5401", "특별징수금수입", "REVENUE", "5400", True, "RESERVE", None),
    ("5402", "전입금수입", "REVENUE", "5400", True, "RESERVE", None),

    # 비용
    ("6000", "비용", "EXPENSE", None, False, "COMMON", None),
    ("6100", "관리비", "EXPENSE", "6000", False, "MANAGEMENT", None),
    ("6101", "관리위탁비", "EXPENSE", "6100", True, "MANAGEMENT", "사무관리, 청소, 설비관리"),
    ("6102", "수도광열비", "EXPENSE", "6100", True, "MANAGEMENT", "전기요금, 수도요금"),
    ("6103", "통신비", "EXPENSE", "6100", True, "MANAGEMENT", None),
    ("6104", "보험료", "EXPENSE", "6100", True, "MANAGEMENT", "공용부 보험"),
    ("6200", "유지수선비", "EXPENSE", "6000", False, "COMMON", None),
    ("6201", "수선비", "EXPENSE", "6200", True, "MANAGEMENT", "경미한 수선"),
    ("6300", "일반관리비", "EXPENSE", "6000", False, "MANAGEMENT", None),
    ("6301", "소모품비", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6302", "지급수수료", "EXPENSE", "6300", True, "MANAGEMENT", "이체수수료"),
    ("6303", "회의비", "EXPENSE", "6300", True, "MANAGEMENT", "이사회, 총회"),
    ("6304", "임원수당", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6305", "전문가사례금", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6306", "인쇄비", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6307", "세금과공과", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6308", "잡비", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6309", "여비교통비", "EXPENSE", "6300", True, "MANAGEMENT", None),
    ("6310", "주차장관리비", "EXPENSE", "6300", True, "PARKING", "주차장 운영비"),
    ("6400", "장기수선비", "EXPENSE", "6000", False, "RESERVE", None),
    ("6401", "수선공사비", "EXPENSE", "6400", True, "RESERVE", "대규모 수선공사"),
    ("6402", "설계감리비", "EXPENSE", "6400", True, "RESERVE", None),
    ("6500", "특별손실", "EXPENSE", "6000", False, "COMMON", None),
    ("6501", "전출금", "EXPENSE", "6500", True, "MANAGEMENT", "수선회계 전출"),
    ("6502", "잡손실", "EXPENSE", "6500", True, "COMMON", None),
]


# 회계구분 마스터
DIVISION_MASTER: list[dict] = [
    {
        "code": "MANAGEMENT",
        "name": "관리회계",
        "description": "일상 관리 운영에 관한 회계",
        "is_required": True,
        "default_accounts": {
            "cash": "1101",
            "bank": "1102",
            "income": "5101",
            "expense": "6101",
            "surplus": "4101",
        },
    },
    {
        "code": "RESERVE",
        "name": "수선적립금회계",
        "description": "대규모 수선에 대비한 적립금 회계",
        "is_required": True,
        "default_accounts": {
            "bank": "1103",
            "income": "5201",
            "expense": "6401",
            "surplus": "4102",
        },
    },
    {
        "code": "PARKING",
        "name": "주차장회계",
        "description": "주차장 운영에 관한 특별회계",
        "is_required": True,
        "default_accounts": {
            "bank": "1105",
            "income": "5107",
            "expense": "6310",
            "surplus": "4103",
        },
    },
    {
        "code": "COMMON",
        "name": "공통",
        "description": "모든 회계구분에서 공통 사용",
        "is_required": False,
        "default_accounts": {},
    },
]


# 미결제 수입 계상 시 사용할 미수금 계정 (수입 계정 → 미수금 계정)
RECEIVABLE_BY_REVENUE: dict[str, str] = {
    "5201": LedgerAccounts.RECEIVABLE_RESERVE,
    "5102": LedgerAccounts.RECEIVABLE_USAGE,
    "5103": LedgerAccounts.RECEIVABLE_USAGE,
    "5104": LedgerAccounts.RECEIVABLE_USAGE,
    "5105": LedgerAccounts.RECEIVABLE_USAGE,
    "5106": LedgerAccounts.RECEIVABLE_USAGE,
}
