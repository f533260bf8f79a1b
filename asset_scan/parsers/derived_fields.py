"""
Camps derivats: edat, gènere, caducitat i text bilingüe (anglès / afrikaans).

Els discs de vehicle porten el text en dues llengües, sovint enganxat
("TrucktractorVoorspanmotor", "WhiteWit"). Aquí es normalitza a una forma
llegible i estable.
"""
import math
import re
from datetime import date, datetime
from typing import Optional, Union
from asset_scan.models.person_response import Gender
from asset_scan.models.scan_response import ExpiryInfo
from asset_scan.utils.dates import parse_display_date, month_difference, today_utc

# ---------------------------------------------------------------------------
# Taules
# ---------------------------------------------------------------------------

# Bessons de color anglès → afrikaans
COLOUR_TWINS = {
    "White": "Wit",
    "Black": "Swart",
    "Red": "Rooi",
    "Blue": "Blou",
    "Green": "Groen",
    "Yellow": "Geel",
    "Silver": "Silwer",
    "Grey": "Grys",
    "Brown": "Bruin",
    "Orange": "Oranje",
    "Pink": "Pienk",
    "Purple": "Pers",
}
_AFRIKAANS_COLOURS = set(COLOUR_TWINS.values())

# Tipus de vehicle acceptats per a inducció (camions i remolcs)
ACCEPTED_VEHICLE_TYPES = [
    "truck", "trailer", "tipper", "wipbak", "truck tractor", "trucktractor",
    "voorspanmotor", "semi-trailer", "semi trailer", "heavy vehicle",
    "goods vehicle", "ldv", "mdv", "hdv", "light delivery vehicle",
    "medium delivery vehicle", "heavy delivery vehicle",
]

EXPIRY_CRITICAL_DAYS = 7
EXPIRY_SOON_DAYS = 30

_CAMEL = re.compile(r"([a-z])([A-Z])")


# ---------------------------------------------------------------------------
# Text bilingüe
# ---------------------------------------------------------------------------

def split_camel(text: str) -> str:
    """"HatchbackLuikrug" → "Hatchback Luikrug"."""
    return _CAMEL.sub(r"\1 \2", text or "")


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def title_case(text: str) -> str:
    """Separa paraules enganxades i posa majúscula inicial a cada paraula."""
    if not text:
        return text or ""
    words = re.split(r"[\s\-/]", split_camel(text).lower())
    return " ".join(_capitalize(w) for w in words if w)


def _split_twin_pair(token: str) -> list[str]:
    """"WHITEWIT" → ["White", "Wit"] si és una parella coneguda."""
    lowered = token.lower()
    for english, afrikaans in COLOUR_TWINS.items():
        if lowered == (english + afrikaans).lower():
            return [english, afrikaans]
        if lowered == (afrikaans + english).lower():
            return [afrikaans, english]
    return [token]


def normalize_colour(raw: str) -> str:
    """
    Color canònic. Si hi ha el bessó anglès, guanya l'anglès.
    "WhiteWit" → "White", "Rooi/Red" → "Red", "Wit" → "Wit".
    """
    raw = re.sub(r"\s+", " ", raw or "").strip()
    if not raw:
        return ""

    if "/" in raw:
        parts = [p.strip() for p in raw.split("/")]
    else:
        parts = split_camel(raw).split(" ")
        if len(parts) == 1:
            parts = _split_twin_pair(parts[0])

    parts = [title_case(p) for p in parts if p]
    colour = parts[0] if parts else ""
    for part in parts:
        twin = COLOUR_TWINS.get(colour)
        if twin and part == twin:
            continue
        if part in COLOUR_TWINS or part in _AFRIKAANS_COLOURS:
            colour = part

    return title_case(colour)


def normalize_description(raw: str) -> str:
    """
    Descripció bilingüe: primera meitat de paraules en anglès, segona en afrikaans.
    "TipperWipbak" → "Tipper / Wipbak"
    """
    if not raw:
        return raw or ""

    words = [w for w in re.split(r"[\s/]+", split_camel(raw)) if w]
    if len(words) < 2:
        return title_case(raw)

    processed = [" ".join(_capitalize(w) for w in split_camel(word).split()) for word in words]
    midpoint = math.ceil(len(processed) / 2)
    english = " ".join(processed[:midpoint])
    afrikaans = " ".join(processed[midpoint:])
    return f"{english} / {afrikaans}" if afrikaans else english


def detect_vehicle_type(description: str) -> Optional[str]:
    """Tipus d'actiu a partir de la descripció del disc: "truck", "trailer" o None."""
    desc = re.sub(r"\s+", "", (description or "").lower())
    if "trucktractor" in desc or "voorspanmotor" in desc:
        return "truck"
    if "tipper" in desc or "wipbak" in desc:
        return "trailer"
    return None


def is_accepted_vehicle_type(description: str) -> bool:
    desc = (description or "").lower()
    return any(t in desc for t in ACCEPTED_VEHICLE_TYPES)


# ---------------------------------------------------------------------------
# Persona
# ---------------------------------------------------------------------------

def gender_from_code(code: Optional[str]) -> Gender:
    """"M"/"MALE" → MALE, "F"/"FEMALE" → FEMALE, altrament UNKNOWN."""
    code = (code or "").strip().upper()
    if code in ("M", "MALE"):
        return Gender.MALE
    if code in ("F", "FEMALE"):
        return Gender.FEMALE
    return Gender.UNKNOWN


def gender_from_legacy_digits(digits: str) -> Gender:
    """Dígits 6-9 de l'ID de 13 dígits: < 5000 dona, altrament home."""
    return Gender.FEMALE if int(digits) < 5000 else Gender.MALE


def describe_person(gender: Gender, age: Optional[int]) -> str:
    if age is None:
        return f"{gender.value}, AGE UNKNOWN"
    return f"{gender.value}, {age} YEARS OLD"


def initials_from_names(names: str) -> str:
    """"JOHN PETER" → "J.P"."""
    return ".".join(n[0] for n in (names or "").split() if n)


# ---------------------------------------------------------------------------
# Caducitat
# ---------------------------------------------------------------------------

def vehicle_expire_status(expiry: Optional[date], today: date) -> tuple[str, str]:
    """(expire_status, expire_duration) del disc, en mesos naturals."""
    if expiry is None:
        return "Unknown", "N/A"
    expired = expiry < today
    months = month_difference(expiry, today) if expired else month_difference(today, expiry)
    return ("Expired" if expired else "Valid"), f"{months} months"


def expiry_info(value: Union[date, str, None], today: Optional[date] = None) -> ExpiryInfo:
    """
    Classificació de caducitat (comparació només de data):
      dies < 0   → expired (vermell)
      dies <= 7  → expiring-critical (taronja)
      dies <= 30 → expiring-soon (groc)
      altrament  → valid (verd)
    Data absent o il·legible → expired amb dies = -1.
    """
    today = today or today_utc()

    if not value or value == "N/A":
        return ExpiryInfo(status="expired", days_until_expiry=-1, message="Expiry date is required", color="red")

    if isinstance(value, datetime):
        expiry = value.date()
    elif isinstance(value, date):
        expiry = value
    else:
        expiry = parse_display_date(value)

    if expiry is None:
        return ExpiryInfo(
            status="expired",
            days_until_expiry=-1,
            message="Invalid date format. Expected DD/MM/YYYY",
            color="red",
        )

    days = (expiry - today).days
    iso_date = expiry.isoformat()

    if days < 0:
        return ExpiryInfo(status="expired", days_until_expiry=days, expiry_date=iso_date,
                          message=f"License/disk expired {abs(days)} days ago", color="red")
    if days <= EXPIRY_CRITICAL_DAYS:
        return ExpiryInfo(status="expiring-critical", days_until_expiry=days, expiry_date=iso_date,
                          message=f"Expires in {days} day(s)", color="orange")
    if days <= EXPIRY_SOON_DAYS:
        return ExpiryInfo(status="expiring-soon", days_until_expiry=days, expiry_date=iso_date,
                          message=f"Expires in {days} day(s)", color="yellow")
    return ExpiryInfo(status="valid", days_until_expiry=days, expiry_date=iso_date,
                      message=f"Valid for {days} day(s)", color="green")
