import pytest

from calchub.calculators.lunar import (
    LunarDate, leap_month, month_days, solar_to_lunar, year_days, zodiac,
)


class TestLunarCalendar:
    """Test cases for Gregorian to lunar conversion."""

    def test_epoch(self):
        """Test the first supported day is lunar new year 1900."""
        assert solar_to_lunar(1900, 1, 31) == LunarDate(1900, 1, 1, False)

    @pytest.mark.parametrize("solar, lunar_year", [
        ((2024, 2, 10), 2024),
        ((2025, 1, 29), 2025),
        ((2000, 2, 5), 2000),
    ])
    def test_lunar_new_year(self, solar, lunar_year):
        """Test known lunar new year dates start month 1 day 1."""
        assert solar_to_lunar(*solar) == LunarDate(lunar_year, 1, 1, False)

    def test_day_before_new_year_belongs_to_previous_year(self):
        """Test the last day of a lunar year."""
        lunar = solar_to_lunar(2024, 2, 9)
        assert (lunar.year, lunar.month) == (2023, 12)

    def test_leap_month(self):
        """Test dates inside a leap month are flagged."""
        assert leap_month(2023) == 2
        assert leap_month(2020) == 4
        assert leap_month(2024) == 0
        lunar = solar_to_lunar(2023, 4, 1)
        assert lunar.month == 2
        assert lunar.is_leap_month is True

    def test_mid_month(self):
        """Test a date in the middle of a regular month."""
        lunar = solar_to_lunar(2025, 6, 15)
        assert (lunar.year, lunar.month, lunar.is_leap_month) == (2025, 5, False)

    def test_year_lengths(self):
        """Test lunar years have 12 or 13 months of 29 or 30 days."""
        for year in (1900, 1950, 2000, 2023, 2050, 2100):
            assert 353 <= year_days(year) <= 385
        assert month_days(2024, 1) in (29, 30)

    def test_out_of_range(self):
        """Test dates outside 1900-2100 raise ValueError."""
        with pytest.raises(ValueError):
            solar_to_lunar(1899, 12, 31)
        with pytest.raises(ValueError):
            solar_to_lunar(1900, 1, 30)
        with pytest.raises(ValueError):
            solar_to_lunar(2101, 1, 1)

    def test_zodiac(self):
        """Test the twelve year animal cycle."""
        assert zodiac(2024) == ("dragon", zodiac(2036)[1])
        assert zodiac(2025)[0] == "snake"
        assert zodiac(2026)[0] == "horse"
        assert zodiac(2020)[0] == "rat"
