"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
프로세스당 Ledger 인스턴스 1개를 공유한다.
"""

import logging

from core.config.loader import Settings, get_settings
from core.ledger.facade import Ledger

logger = logging.getLogger(__name__)

# 전역 Ledger 인스턴스 (첫 요청 시 생성)
_ledger: Ledger | None = None


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


def get_ledger() -> Ledger:
    """Ledger 반환

    최초 호출 시 ledger.yaml 설정으로 생성하고,
    스냅샷 파일이 있으면 복원한다.
    """
    global _ledger
    if _ledger is None:
        settings = get_settings()
        ledger = Ledger(settings.ledger)
        if settings.snapshot_path.exists():
            ledger.load_snapshot(settings.snapshot_path)
            logger.info(f"Web: 스냅샷 로드 완료 ({settings.snapshot_path})")
        _ledger = ledger
    return _ledger


def set_ledger(ledger: Ledger | None) -> None:
    """Ledger 설정 (테스트에서 빈 인스턴스 주입, None이면 초기화)

    Args:
        ledger: Ledger 인스턴스
    """
    global _ledger
    _ledger = ledger
