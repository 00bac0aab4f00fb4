# calchub/calculators/lunar.py
"""
Gregorian to Chinese lunisolar calendar conversion for 1900-2100.

Each entry of LUNAR_INFO encodes one lunar year:

- bits 0-3: leap month number, 0 when the year has none
- bits 4-15: month lengths for months 12..1, set bit means 30 days
- bit 16: leap month length, set bit means 30 days
"""
from datetime import date
from typing import NamedTuple

MIN_YEAR = 1900
MAX_YEAR = 2100
# Lunar new year 1900
EPOCH = date(1900, 1, 31)

LUNAR_INFO = [
    0x04bd8, 0x04ae0, 0x0a570, 0x054d5, 0x0d260, 0x0d950, 0x16554, 0x056a0, 0x09ad0, 0x055d2,
    0x04ae0, 0x0a5b6, 0x0a4d0, 0x0d250, 0x1d255, 0x0b540, 0x0d6a0, 0x0ada2, 0x095b0, 0x14977,
    0x04970, 0x0a4b0, 0x0b4b5, 0x06a50, 0x06d40, 0x1ab54, 0x02b60, 0x09570, 0x052f2, 0x04970,
    0x06566, 0x0d4a0, 0x0ea50, 0x06e95, 0x05ad0, 0x02b60, 0x186e3, 0x092e0, 0x1c8d7, 0x0c950,
    0x0d4a0, 0x1d8a6, 0x0b550, 0x056a0, 0x1a5b4, 0x025d0, 0x092d0, 0x0d2b2, 0x0a950, 0x0b557,
    0x06ca0, 0x0b550, 0x15355, 0x04da0, 0x0a5b0, 0x14573, 0x052b0, 0x0a9a8, 0x0e950, 0x06aa0,
    0x0aea6, 0x0ab50, 0x04b60, 0x0aae4, 0x0a570, 0x05260, 0x0f263, 0x0d950, 0x05b57, 0x056a0,
    0x096d0, 0x04dd5, 0x04ad0, 0x0a4d0, 0x0d4d4, 0x0d250, 0x0d558, 0x0b540, 0x0b6a0, 0x195a6,
    0x095b0, 0x049b0, 0x0a974, 0x0a4b0, 0x0b27a, 0x06a50, 0x06d40, 0x0af46, 0x0ab60, 0x09570,
    0x04af5, 0x04970, 0x064b0, 0x074a3, 0x0ea50, 0x06b58, 0x05ac0, 0x0ab60, 0x096d5, 0x092e0,
    0x0c960, 0x0d954, 0x0d4a0, 0x0da50, 0x07552, 0x056a0, 0x0abb7, 0x025d0, 0x092d0, 0x0cab5,
    0x0a950, 0x0b4a0, 0x0baa4, 0x0ad50, 0x055d9, 0x04ba0, 0x0a5b0, 0x15176, 0x052b0, 0x0a930,
    0x07954, 0x06aa0, 0x0ad50, 0x05b52, 0x04b60, 0x0a6e6, 0x0a4e0, 0x0d260, 0x0ea65, 0x0d530,
    0x05aa0, 0x076a3, 0x096d0, 0x04afb, 0x04ad0, 0x0a4d0, 0x1d0b6, 0x0d250, 0x0d520, 0x0dd45,
    0x0b5a0, 0x056d0, 0x055b2, 0x049b0, 0x0a577, 0x0a4b0, 0x0aa50, 0x1b255, 0x06d20, 0x0ada0,
    0x14b63, 0x09370, 0x049f8, 0x04970, 0x064b0, 0x168a6, 0x0ea50, 0x06aa0, 0x1a6c4, 0x0aae0,
    0x092e0, 0x0d2e3, 0x0c960, 0x0d557, 0x0d4a0, 0x0da50, 0x05d55, 0x056a0, 0x0a6d0, 0x055d4,
    0x052d0, 0x0a9b8, 0x0a950, 0x0b4a0, 0x0b6a6, 0x0ad50, 0x055a0, 0x0aba4, 0x0a5b0, 0x052b0,
    0x0b273, 0x06930, 0x07337, 0x06aa0, 0x0ad50, 0x14b55, 0x04b60, 0x0a570, 0x054e4, 0x0d160,
    0x0e968, 0x0d520, 0x0daa0, 0x16aa6, 0x056d0, 0x04ae0, 0x0a9d4, 0x0a4d0, 0x0d150, 0x0f252,
    0x0d520,
]

ZODIAC_ANIMALS = [
    "rat", "ox", "tiger", "rabbit", "dragon", "snake",
    "horse", "goat", "monkey", "rooster", "dog", "pig",
]
ZODIAC_ICONS = [
    "🐀", "🐂", "🐅", "🐇", "🐉", "🐍",
    "🐴", "🐐", "🐒", "🐓", "🐕", "🐷",
]


class LunarDate(NamedTuple):
    year: int
    month: int
    day: int
    is_leap_month: bool = False


def leap_month(year: int) -> int:
    return LUNAR_INFO[year - MIN_YEAR] & 0xF


def leap_month_days(year: int) -> int:
    if not leap_month(year):
        return 0
    return 30 if LUNAR_INFO[year - MIN_YEAR] & 0x10000 else 29


def month_days(year: int, month: int) -> int:
    return 30 if LUNAR_INFO[year - MIN_YEAR] & (0x10000 >> month) else 29


def year_days(year: int) -> int:
    """Total days in a lunar year, leap month included."""
    info = LUNAR_INFO[year - MIN_YEAR]
    total = 348
    bit = 0x8000
    while bit > 0x8:
        if info & bit:
            total += 1
        bit >>= 1
    return total + leap_month_days(year)


def solar_to_lunar(year: int, month: int, day: int) -> LunarDate:
    """
    Convert a Gregorian date to a lunar date.

    Raises:
        ValueError: for impossible dates or dates outside 1900-01-31..2100-12-31.
    """
    target = date(year, month, day)
    if target < EPOCH or target.year > MAX_YEAR:
        raise ValueError(f"Date {target.isoformat()} is outside the supported lunar range")
    offset = (target - EPOCH).days

    lunar_year = MIN_YEAR
    days_in_year = 0
    while lunar_year <= MAX_YEAR and offset > 0:
        days_in_year = year_days(lunar_year)
        offset -= days_in_year
        lunar_year += 1
    if offset < 0:
        offset += days_in_year
        lunar_year -= 1

    leap = leap_month(lunar_year)
    is_leap = False
    lunar_month = 1
    days_in_month = 0
    while lunar_month < 13 and offset > 0:
        if leap > 0 and lunar_month == leap + 1 and not is_leap:
            lunar_month -= 1
            is_leap = True
            days_in_month = leap_month_days(lunar_year)
        else:
            days_in_month = month_days(lunar_year, lunar_month)
        if is_leap and lunar_month == leap + 1:
            is_leap = False
        offset -= days_in_month
        lunar_month += 1

    if offset == 0 and leap > 0 and lunar_month == leap + 1:
        if is_leap:
            is_leap = False
        else:
            is_leap = True
            lunar_month -= 1

    if offset < 0:
        offset += days_in_month
        lunar_month -= 1

    return LunarDate(lunar_year, lunar_month, offset + 1, is_leap)


def zodiac(year: int):
    """Return (animal id, icon) for a Gregorian year."""
    index = (year - 4) % 12
    return ZODIAC_ANIMALS[index], ZODIAC_ICONS[index]
