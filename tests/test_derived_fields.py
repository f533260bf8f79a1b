"""
Tests dels camps derivats (caducitat, color, descripció, gènere) i helpers de dates
"""
from datetime import date, timedelta
import pytest
from asset_scan.models.person_response import Gender
from asset_scan.parsers.derived_fields import (
    describe_person,
    detect_vehicle_type,
    expiry_info,
    gender_from_code,
    initials_from_names,
    is_accepted_vehicle_type,
    normalize_colour,
    normalize_description,
    title_case,
    vehicle_expire_status,
)
from asset_scan.utils.dates import month_difference, parse_display_date, parse_dd_mmm_yyyy, parse_expiry

TODAY = date(2025, 3, 15)


# ---------------------------------------------------------------------------
# expiry_info
# ---------------------------------------------------------------------------

class TestExpiryInfo:
    @pytest.mark.parametrize("days,status,color", [
        (-1, "expired", "red"),
        (0, "expiring-critical", "orange"),
        (7, "expiring-critical", "orange"),
        (8, "expiring-soon", "yellow"),
        (30, "expiring-soon", "yellow"),
        (31, "valid", "green"),
    ])
    def test_boundaries(self, days, status, color):
        info = expiry_info(TODAY + timedelta(days=days), TODAY)
        assert info.status == status
        assert info.color == color
        assert info.days_until_expiry == days

    def test_expired_message(self):
        info = expiry_info(TODAY - timedelta(days=10), TODAY)
        assert info.message == "License/disk expired 10 days ago"

    def test_valid_message(self):
        info = expiry_info(TODAY + timedelta(days=100), TODAY)
        assert info.message == "Valid for 100 day(s)"
        assert info.expiry_date == "2025-06-23"

    def test_display_format(self):
        info = expiry_info("20/03/2025", TODAY)
        assert info.status == "expiring-critical"
        assert info.days_until_expiry == 5

    def test_iso_format(self):
        assert expiry_info("2025-03-20", TODAY).days_until_expiry == 5

    def test_missing(self):
        for value in (None, "", "N/A"):
            info = expiry_info(value, TODAY)
            assert info.status == "expired"
            assert info.days_until_expiry == -1
            assert info.message == "Expiry date is required"

    def test_unparseable(self):
        info = expiry_info("31/02/2025", TODAY)
        assert info.status == "expired"
        assert info.days_until_expiry == -1
        assert info.message == "Invalid date format. Expected DD/MM/YYYY"


class TestVehicleExpireStatus:
    def test_unknown(self):
        assert vehicle_expire_status(None, TODAY) == ("Unknown", "N/A")

    def test_valid_same_month(self):
        assert vehicle_expire_status(date(2025, 3, 31), TODAY) == ("Valid", "0 months")

    def test_expired(self):
        assert vehicle_expire_status(date(2024, 1, 1), TODAY) == ("Expired", "14 months")


# ---------------------------------------------------------------------------
# Text bilingüe
# ---------------------------------------------------------------------------

class TestColour:
    @pytest.mark.parametrize("raw,expected", [
        ("WhiteWit", "White"),
        ("WHITEWIT", "White"),
        ("Rooi/Red", "Red"),
        ("Red / Rooi", "Red"),
        ("Wit", "Wit"),
        ("blue", "Blue"),
        ("", ""),
    ])
    def test_canonical(self, raw, expected):
        assert normalize_colour(raw) == expected


class TestDescription:
    def test_camel_pair(self):
        assert normalize_description("TipperWipbak") == "Tipper / Wipbak"

    def test_odd_word_count_ceil_split(self):
        assert normalize_description("Truck Tractor Voorspanmotor") == "Truck Tractor / Voorspanmotor"

    def test_single_word(self):
        assert normalize_description("TRAILER") == "Trailer"

    def test_title_case(self):
        assert title_case("HATCHBACK") == "Hatchback"


class TestVehicleType:
    def test_truck(self):
        assert detect_vehicle_type("Truck Tractor / Voorspanmotor") == "truck"

    def test_trailer(self):
        assert detect_vehicle_type("Tipper / Wipbak") == "trailer"

    def test_unknown(self):
        assert detect_vehicle_type("Hatchback / Luikrug") is None

    def test_accepted(self):
        assert is_accepted_vehicle_type("Semi-trailer / Sleepwa") is True
        assert is_accepted_vehicle_type("Hatchback / Luikrug") is False


# ---------------------------------------------------------------------------
# Persona
# ---------------------------------------------------------------------------

class TestPerson:
    def test_gender_codes(self):
        assert gender_from_code("M") == Gender.MALE
        assert gender_from_code("female") == Gender.FEMALE
        assert gender_from_code(None) == Gender.UNKNOWN

    def test_description(self):
        assert describe_person(Gender.FEMALE, 29) == "FEMALE, 29 YEARS OLD"
        assert describe_person(Gender.UNKNOWN, None) == "UNKNOWN, AGE UNKNOWN"

    def test_initials(self):
        assert initials_from_names("JOHN PETER") == "J.P"
        assert initials_from_names("") == ""


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

class TestDates:
    def test_dd_mmm_yyyy(self):
        assert parse_dd_mmm_yyyy("05 jan 1990", max_year=2025) == date(1990, 1, 5)

    def test_dd_mmm_yyyy_out_of_range(self):
        assert parse_dd_mmm_yyyy("05 JAN 1870", max_year=2025) is None
        assert parse_dd_mmm_yyyy("05 JAN 2030", max_year=2025) is None

    def test_parse_expiry_formats(self):
        assert parse_expiry("2025-06-30") == date(2025, 6, 30)
        assert parse_expiry("20250630") == date(2025, 6, 30)
        assert parse_expiry("30/06/2025") == date(2025, 6, 30)
        assert parse_expiry("") is None

    def test_non_ascii_digits_rejected(self):
        assert parse_dd_mmm_yyyy("²5 JAN 1985", max_year=2025) is None
        assert parse_dd_mmm_yyyy("05 JAN 19²5", max_year=2025) is None
        assert parse_expiry("2025-0²-01") is None
        assert parse_expiry("2025063²") is None

    def test_dd_mmm_yyyy_not_after(self):
        assert parse_dd_mmm_yyyy("16 MAR 2025", max_year=2025, not_after=date(2025, 3, 15)) is None
        assert parse_dd_mmm_yyyy("15 MAR 2025", max_year=2025, not_after=date(2025, 3, 15)) == date(2025, 3, 15)

    def test_parse_display_date(self):
        assert parse_display_date("01/02/2030") == date(2030, 2, 1)
        assert parse_display_date("garbage") is None

    def test_month_difference(self):
        assert month_difference(date(2024, 11, 30), date(2025, 2, 1)) == 3
