"""
core/utils/timezone.py 테스트
"""

from datetime import datetime, timezone

import pytest

from core.utils.timezone import (
    KST,
    fiscal_year_range,
    is_iso_date,
    now_utc,
    to_kst,
    today_kst,
)


class TestKstConversion:
    """UTC → KST 변환 테스트"""

    def test_to_kst(self) -> None:
        """UTC 16시는 KST 다음날 1시"""
        result = to_kst(datetime(2026, 2, 20, 16, 0, tzinfo=timezone.utc))

        assert result.tzinfo == KST
        assert (result.day, result.hour) == (21, 1)

    def test_naive_is_utc(self) -> None:
        """naive datetime은 UTC로 간주"""
        assert to_kst(datetime(2026, 1, 1, 0, 0)).hour == 9

    def test_now_utc_is_aware(self) -> None:
        """now_utc는 타임존 포함"""
        assert now_utc().tzinfo == timezone.utc

    def test_today_kst_format(self) -> None:
        """today_kst는 ISO 날짜"""
        assert is_iso_date(today_kst())


class TestIsIsoDate:
    """is_iso_date 테스트"""

    @pytest.mark.parametrize("value", ["2026-04-01", "2024-02-29"])
    def test_valid(self, value: str) -> None:
        assert is_iso_date(value)

    @pytest.mark.parametrize("value", [None, "", "2026/04/01", "2026-4-1", "2025-02-29", "20260401"])
    def test_invalid(self, value: str | None) -> None:
        assert not is_iso_date(value)


class TestFiscalYearRange:
    """fiscal_year_range 테스트"""

    def test_before_start_month(self) -> None:
        """시작월 이전 날짜는 전년도 회계연도"""
        assert fiscal_year_range("2026-02-10", 4) == ("2025-04-01", "2026-03-31")

    def test_on_start_month(self) -> None:
        """시작월 당일"""
        assert fiscal_year_range("2026-04-01", 4) == ("2026-04-01", "2027-03-31")

    def test_calendar_year(self) -> None:
        """1월 시작은 역년"""
        assert fiscal_year_range("2026-07-15", 1) == ("2026-01-01", "2026-12-31")
