"""
유틸리티 패키지

날짜/타임존 처리 등 공통 유틸리티
"""

from core.utils.timezone import (
    KST,
    fiscal_year_range,
    is_iso_date,
    now_utc,
    to_kst,
    today_kst,
)

__all__ = [
    "KST",
    "to_kst",
    "now_utc",
    "today_kst",
    "is_iso_date",
    "fiscal_year_range",
]
