"""
Helpers de dates per als formats de codi de barres.

Totes les funcions de lectura retornen None quan la data és invàlida: mai
llencen excepció.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional
from dateutil import parser as date_parser

MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

MIN_YEAR = 1880

_DIGITS = re.compile(r"[0-9]+")


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_dd_mmm_yyyy(text: str, max_year: int, not_after: Optional[date] = None) -> Optional[date]:
    """
    "05 JAN 1990" → date(1990, 1, 5). None si el format o el rang és invàlid,
    o si la data és posterior a not_after.
    """
    parts = (text or "").split(" ")
    if len(parts) != 3:
        return None
    day_s, month_s, year_s = parts
    month = MONTHS.get(month_s.upper())
    if month is None or not _DIGITS.fullmatch(day_s) or not _DIGITS.fullmatch(year_s):
        return None
    day, year = int(day_s), int(year_s)
    if not (1 <= day <= 31 and MIN_YEAR <= year <= max_year):
        return None
    parsed = _build(year, month, day)
    if parsed and not_after and parsed > not_after:
        return None
    return parsed


def parse_expiry(text: str) -> Optional[date]:
    """
    Data de caducitat del disc. Ordre d'intents:
      1. YYYY-MM-DD
      2. YYYYMMDD (8 dígits)
      3. lectura genèrica (dateutil), només amb text ASCII
    """
    text = (text or "").strip()
    if not text:
        return None

    if "-" in text:
        parts = text.split("-")
        if len(parts) == 3 and all(_DIGITS.fullmatch(p) for p in parts):
            parsed = _build(int(parts[0]), int(parts[1]), int(parts[2]))
            if parsed:
                return parsed
    elif len(text) == 8 and _DIGITS.fullmatch(text):
        parsed = _build(int(text[:4]), int(text[4:6]), int(text[6:]))
        if parsed:
            return parsed

    if not text.isascii():
        return None
    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


def parse_display_date(text: Optional[str]) -> Optional[date]:
    """Accepta DD/MM/YYYY (format del servei SADL) o ISO YYYY-MM-DD."""
    if not text:
        return None
    m = re.fullmatch(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})", text.strip())
    if m:
        return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))
    m = re.fullmatch(r"([0-9]{4})-([0-9]{2})-([0-9]{2})", text.strip())
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return None


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def age_in_years(birth: date, today: date) -> int:
    """Anys sencers complerts."""
    return today.year - birth.year - ((today.month, today.day) < (birth.month, birth.day))


def month_difference(start: date, end: date) -> int:
    """Diferència de mesos naturals (sense tenir en compte el dia)."""
    return end.month - start.month + 12 * (end.year - start.year)
