"""
설정 로더

ledger.yaml 로드 및 Ledger 엔진 설정 생성
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths


@dataclass(frozen=True)
class DivisionConfig:
    """회계구분별 설정

    Attributes:
        code: 회계구분 코드
        transfer_limits: 이체 대상 구분별 최대 금액
        require_approval: 전기 전 승인 필요 여부
    """

    code: str
    transfer_limits: dict[str, Decimal] = field(default_factory=dict)
    require_approval: bool = False


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 엔진 설정 (ledger.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    journal_number_prefix: str = Defaults.JOURNAL_NUMBER_PREFIX
    journal_number_width: int = Defaults.JOURNAL_NUMBER_WIDTH
    journal_number_start: int = Defaults.JOURNAL_NUMBER_START
    balance_tolerance: Decimal = Defaults.BALANCE_TOLERANCE
    restricted_division: str = Defaults.RESTRICTED_DIVISION
    default_division: str = Defaults.DEFAULT_DIVISION
    fiscal_year_start_month: int = Defaults.FISCAL_YEAR_START_MONTH
    divisions: dict[str, DivisionConfig] = field(default_factory=dict)
    receivable_account: str = Defaults.RECEIVABLE_ACCOUNT
    payable_account: str = Defaults.PAYABLE_ACCOUNT
    opening_adjustment_account: str = Defaults.OPENING_ADJUSTMENT_ACCOUNT

    def division(self, code: str) -> DivisionConfig:
        """회계구분 설정 조회 (없으면 기본값)"""
        return self.divisions.get(code, DivisionConfig(code=code))


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _to_decimal(value: Any, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigLoadError(f"'{key}' 값이 숫자가 아닙니다: {value!r}") from e


def _parse_divisions(raw: Any) -> dict[str, DivisionConfig]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigLoadError("'divisions'는 매핑이어야 합니다")

    valid_codes = set(Defaults.DIVISION_CODES)
    divisions: dict[str, DivisionConfig] = {}
    for code, body in raw.items():
        if code not in valid_codes:
            raise ConfigLoadError(
                f"유효하지 않은 회계구분입니다: '{code}'. 유효한 값: {sorted(valid_codes)}"
            )
        body = body or {}
        limits_raw = body.get("transfer_limits") or {}
        if not isinstance(limits_raw, dict):
            raise ConfigLoadError(f"divisions.{code}.transfer_limits는 매핑이어야 합니다")

        limits = {
            str(target): _to_decimal(amount, f"divisions.{code}.transfer_limits.{target}")
            for target, amount in limits_raw.items()
        }
        divisions[code] = DivisionConfig(
            code=code,
            transfer_limits=limits,
            require_approval=bool(body.get("require_approval", False)),
        )
    return divisions


def parse_config(data: dict[str, Any]) -> LedgerConfig:
    """YAML 딕셔너리 → LedgerConfig 변환

    Args:
        data: yaml.safe_load 결과

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 값 형식이 잘못된 경우
    """
    numbering = data.get("journal_number") or {}
    accounts = data.get("accounts") or {}

    try:
        width = int(numbering.get("width", Defaults.JOURNAL_NUMBER_WIDTH))
        start = int(numbering.get("start", Defaults.JOURNAL_NUMBER_START))
        fiscal_month = int(
            data.get("fiscal_year_start_month", Defaults.FISCAL_YEAR_START_MONTH)
        )
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"정수 설정값 파싱 실패: {e}") from e

    if width < 1 or start < 1:
        raise ConfigLoadError("journal_number.width / start는 1 이상이어야 합니다")
    if not 1 <= fiscal_month <= 12:
        raise ConfigLoadError(f"fiscal_year_start_month 범위 오류: {fiscal_month}")

    tolerance = _to_decimal(
        data.get("balance_tolerance", Defaults.BALANCE_TOLERANCE), "balance_tolerance"
    )

    return LedgerConfig(
        journal_number_prefix=str(numbering.get("prefix", Defaults.JOURNAL_NUMBER_PREFIX)),
        journal_number_width=width,
        journal_number_start=start,
        balance_tolerance=tolerance,
        restricted_division=str(
            data.get("restricted_division", Defaults.RESTRICTED_DIVISION)
        ),
        default_division=str(data.get("default_division", Defaults.DEFAULT_DIVISION)),
        fiscal_year_start_month=fiscal_month,
        divisions=_parse_divisions(data.get("divisions")),
        receivable_account=str(
            accounts.get("receivable", Defaults.RECEIVABLE_ACCOUNT)
        ),
        payable_account=str(accounts.get("payable", Defaults.PAYABLE_ACCOUNT)),
        opening_adjustment_account=str(
            accounts.get("opening_adjustment", Defaults.OPENING_ADJUSTMENT_ACCOUNT)
        ),
    )


def load_config(path: Path | None = None) -> LedgerConfig:
    """ledger.yaml 파일 로드

    기본 경로에 파일이 없으면 내장 기본값 사용.
    명시한 경로에 파일이 없으면 에러.

    Args:
        path: ledger.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.LEDGER_CONFIG_FILE
        if not path.exists():
            return LedgerConfig()

    if not path.exists():
        raise ConfigLoadError(f"ledger.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"ledger.yaml 파싱 실패: {e}") from e

    if data is None:
        return LedgerConfig()
    if not isinstance(data, dict):
        raise ConfigLoadError("ledger.yaml 최상위는 매핑이어야 합니다")

    return parse_config(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    ledger.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: LedgerConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(config_path)

    @property
    def ledger(self) -> LedgerConfig:
        """Ledger 엔진 설정"""
        assert self._config is not None
        return self._config

    @property
    def snapshot_path(self) -> Path:
        """스냅샷 파일 경로"""
        return Paths.SNAPSHOT_FILE

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: ledger.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
