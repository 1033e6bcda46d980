"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    # 분개 번호 (J000001 형식)
    JOURNAL_NUMBER_PREFIX: str = "J"
    JOURNAL_NUMBER_WIDTH: int = 6
    JOURNAL_NUMBER_START: int = 1

    # 차대 일치 허용 오차 (통화 단위)
    BALANCE_TOLERANCE: Decimal = Decimal("0.01")

    # 회계연도 시작월 (4월)
    FISCAL_YEAR_START_MONTH: int = 4

    # 회계구분 / 주요 계정 기본값 (ledger.yaml 미지정 시)
    DIVISION_CODES: tuple[str, ...] = ("MANAGEMENT", "RESERVE", "PARKING", "COMMON")
    RESTRICTED_DIVISION: str = "RESERVE"
    DEFAULT_DIVISION: str = "MANAGEMENT"
    RECEIVABLE_ACCOUNT: str = "1301"
    PAYABLE_ACCOUNT: str = "2101"
    OPENING_ADJUSTMENT_ACCOUNT: str = "4201"

    # 분개 기본 행위자
    ACTOR: str = "system"

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    LEDGER_LOGS_DIR: Path = LOGS_DIR / "ledger"

    # 설정 파일
    LEDGER_CONFIG_FILE: Path = CONFIG_DIR / "ledger.yaml"

    # 스냅샷 파일 (외부 영속화 경계)
    SNAPSHOT_FILE: Path = DATA_DIR / "ledger_snapshot.json"
