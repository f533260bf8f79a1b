"""
Tests unitaris del VehicleDiskParser
"""
from asset_scan.models.base_response import DocumentClass
from asset_scan.parsers.vehicle_disk_parser import VehicleDiskParser
from tests.samples import DISC_FIELDS as FIELDS, TODAY, disc as _disc


# ---------------------------------------------------------------------------
# Disc complet
# ---------------------------------------------------------------------------

class TestVehicleDiskComplete:
    def test_valid(self):
        result = VehicleDiskParser.parse(_disc(), TODAY)
        assert result.valid is True
        assert result.document_class == DocumentClass.VEHICLE_DISK
        assert result.errors == []
        assert result.alerts == []

    def test_identity_fields(self):
        vehicle = VehicleDiskParser.parse(_disc(), TODAY).vehicle
        assert vehicle.registration == "ND123456"
        assert vehicle.vehicle_disk_number == "4025048XFKM"
        assert vehicle.licence_number == "ABC123GP"
        assert vehicle.vin == "WDB9340321L123456"
        assert vehicle.engine_number == "54192000123456"

    def test_text_normalized(self):
        vehicle = VehicleDiskParser.parse(_disc(), TODAY).vehicle
        assert vehicle.make == "Mercedes Benz"
        assert vehicle.model == "Actros"
        assert vehicle.colour == "White"
        assert vehicle.description == "Trucktractor / Voorspanmotor"

    def test_expiry_valid(self):
        vehicle = VehicleDiskParser.parse(_disc(), TODAY).vehicle
        assert vehicle.expiry_date == "2025-06-30"
        assert vehicle.expire_status == "Valid"
        assert vehicle.expire_duration == "3 months"

    def test_expiry_expired(self):
        vehicle = VehicleDiskParser.parse(_disc(f14="2024-12-31"), TODAY).vehicle
        assert vehicle.expire_status == "Expired"
        assert vehicle.expire_duration == "3 months"

    def test_compact_expiry_format(self):
        vehicle = VehicleDiskParser.parse(_disc(f14="20250630"), TODAY).vehicle
        assert vehicle.expiry_date == "2025-06-30"

    def test_exactly_fifteen_fields(self):
        raw = "%".join(FIELDS[:15])
        assert VehicleDiskParser.parse(raw, TODAY).valid is True

    def test_afrikaans_first_colour(self):
        vehicle = VehicleDiskParser.parse(_disc(f11="Rooi/Red"), TODAY).vehicle
        assert vehicle.colour == "Red"


# ---------------------------------------------------------------------------
# Camps degradats
# ---------------------------------------------------------------------------

class TestVehicleDiskDegraded:
    def test_unparseable_expiry_keeps_identity(self):
        result = VehicleDiskParser.parse(_disc(f14="not a date"), TODAY)
        assert result.valid is True
        assert result.vehicle.registration == "ND123456"
        assert result.vehicle.expiry_date is None
        assert result.vehicle.expire_status == "Unknown"
        assert result.vehicle.expire_duration == "N/A"
        assert [a.code for a in result.alerts] == ["VEH_EXPIRY_UNKNOWN"]

    def test_superscript_digit_in_expiry(self):
        result = VehicleDiskParser.parse(_disc(f14="2025-0²-01"), TODAY)
        assert result.valid is True
        assert result.vehicle.registration == "ND123456"
        assert result.vehicle.expiry_date is None
        assert result.vehicle.expire_status == "Unknown"

    def test_empty_registration_alert(self):
        result = VehicleDiskParser.parse(_disc(f7=" "), TODAY)
        assert result.valid is True
        assert result.vehicle.registration == ""
        assert "VEH_MISSING_REGISTRATION" in [a.code for a in result.alerts]


# ---------------------------------------------------------------------------
# Errors estructurals
# ---------------------------------------------------------------------------

class TestVehicleDiskErrors:
    def test_fourteen_fields(self):
        result = VehicleDiskParser.parse("%".join(FIELDS[:14]), TODAY)
        assert result.valid is False
        assert result.vehicle is None
        assert result.errors[0].code == "VEH_INSUFFICIENT_DATA"
        assert result.errors[0].message.startswith("Insufficient data")

    def test_no_percent(self):
        result = VehicleDiskParser.parse("ND123456", TODAY)
        assert result.valid is False
        assert result.errors[0].code == "VEH_NOT_A_DISC"
        assert result.errors[0].kind == "structural"
