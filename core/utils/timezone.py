"""
날짜/타임존 유틸리티

내부 저장: UTC | 외부 표시: KST 원칙 준수를 위한 헬퍼 함수.
분개 일자는 ISO 형식 문자열(YYYY-MM-DD)로 다루며 문자열 비교로 정렬 가능.
"""

from datetime import date, datetime, timedelta, timezone

# KST 타임존 (UTC+9)
KST = timezone(timedelta(hours=9))


def to_kst(dt: datetime) -> datetime:
    """UTC datetime을 KST로 변환

    Args:
        dt: datetime 객체 (UTC 권장, naive면 UTC로 간주)

    Returns:
        KST 타임존의 datetime
    """
    if dt.tzinfo is None:
        # naive datetime은 UTC로 간주
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(KST)


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def today_kst() -> str:
    """오늘 날짜 (KST 기준, YYYY-MM-DD)"""
    return to_kst(now_utc()).date().isoformat()


def is_iso_date(value: str | None) -> bool:
    """YYYY-MM-DD 형식의 유효한 날짜인지 확인"""
    if not value:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def fiscal_year_range(value: str, start_month: int) -> tuple[str, str]:
    """날짜가 속한 회계연도의 시작일/종료일

    Example:
        >>> fiscal_year_range("2026-02-10", 4)
        ('2025-04-01', '2026-03-31')
    """
    d = date.fromisoformat(value)
    start_year = d.year if d.month >= start_month else d.year - 1
    start = date(start_year, start_month, 1)
    if start_month == 1:
        end = date(start_year, 12, 31)
    else:
        end = date(start_year + 1, start_month, 1) - timedelta(days=1)
    return start.isoformat(), end.isoformat()
