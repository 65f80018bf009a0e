"""Partial date parsing, ages, anniversaries and zodiac signs."""

import calendar
from datetime import date
from enum import Enum
import re

from famgraph.models import PartialDate


FULL_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
YEAR_RE = re.compile(r"^(\d{4})$")


def parse_date(text: str | None) -> PartialDate:
    """
    Parse a date string into a PartialDate.

    Recognizes "DD.MM.YYYY" and "YYYY". Anything else, including impossible
    calendar dates such as "31.02.1950", yields an Unknown date; this never
    raises.
    """
    if not text:
        return PartialDate.unknown()

    s = text.strip()

    match = FULL_DATE_RE.match(s)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return PartialDate.full(year, month, day)
        except ValueError:
            return PartialDate.unknown()

    match = YEAR_RE.match(s)
    if match:
        try:
            return PartialDate.year_only(int(match.group(1)))
        except ValueError:
            return PartialDate.unknown()

    return PartialDate.unknown()


def age(birth: PartialDate | None, reference: PartialDate | date) -> int | None:
    """
    Whole years between birth and a reference point (today, or a death date).

    A birthday not yet reached in the reference year decrements the count.
    When either side is known only to the year, plain year subtraction is
    used. Returns None for an unknown birth or reference, or a negative span.
    """
    if birth is None or not birth.is_known:
        return None

    if isinstance(reference, PartialDate):
        if not reference.is_known:
            return None
        ref_year = reference.year
        ref_month_day = reference.month_day
    else:
        ref_year = reference.year
        ref_month_day = (reference.month, reference.day)

    years = ref_year - birth.year
    if birth.is_full and ref_month_day is not None and ref_month_day < birth.month_day:
        years -= 1

    return years if years >= 0 else None


def anchor_in_year(month: int, day: int, year: int) -> date:
    """Place a recurring month/day in a given year; 29 February falls back to the 28th."""
    if month == 2 and day == 29 and not calendar.isleap(year):
        return date(year, 2, 28)
    return date(year, month, day)


def next_occurrence(month_day: tuple[int, int], today: date) -> tuple[date, int]:
    """
    Next occurrence of a recurring (month, day) anchor on or after `today`.

    Returns the occurrence date and the number of days until it (0 when the
    anchor falls on `today`).
    """
    month, day = month_day
    occurrence = anchor_in_year(month, day, today.year)
    if occurrence < today:
        occurrence = anchor_in_year(month, day, today.year + 1)
    return occurrence, (occurrence - today).days


class ZodiacSign(Enum):
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"


# (sign, (from_month, from_day), (to_month, to_day)), inclusive on both ends
ZODIAC_TABLE = [
    (ZodiacSign.CAPRICORN, (12, 22), (1, 19)),
    (ZodiacSign.AQUARIUS, (1, 20), (2, 18)),
    (ZodiacSign.PISCES, (2, 19), (3, 20)),
    (ZodiacSign.ARIES, (3, 21), (4, 19)),
    (ZodiacSign.TAURUS, (4, 20), (5, 20)),
    (ZodiacSign.GEMINI, (5, 21), (6, 20)),
    (ZodiacSign.CANCER, (6, 21), (7, 22)),
    (ZodiacSign.LEO, (7, 23), (8, 22)),
    (ZodiacSign.VIRGO, (8, 23), (9, 22)),
    (ZodiacSign.LIBRA, (9, 23), (10, 22)),
    (ZodiacSign.SCORPIO, (10, 23), (11, 21)),
    (ZodiacSign.SAGITTARIUS, (11, 22), (12, 21)),
]


def zodiac_sign(value: PartialDate | None) -> ZodiacSign | None:
    """Zodiac sign for a full date; None for year-only or unknown dates."""
    if value is None or not value.is_full:
        return None

    month, day = value.month_day
    for sign, (from_m, from_d), (to_m, to_d) in ZODIAC_TABLE:
        if from_m == 12 and to_m == 1:
            # The only range that wraps past the end of the year
            if (month == 12 and day >= from_d) or (month == 1 and day <= to_d):
                return sign
        elif (month == from_m and day >= from_d) or (month == to_m and day <= to_d):
            return sign

    return None
