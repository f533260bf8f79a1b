"""
Tests del punt d'entrada de descodificació
"""
import asyncio
from asset_scan.models.base_response import DocumentClass
from asset_scan.models.sadl_payload import DecodedLicencePayload
from asset_scan.parsers.dispatcher import ASYNC_CLASSES, PLAIN_DECODERS, decode_plain, decode_scan
from tests.samples import DISC_FIELDS as FIELDS, SERVICE_JSON, TODAY, FakeDecryptService, smart_id


class TestDispatchTable:
    def test_every_class_has_a_decoder(self):
        assert set(PLAIN_DECODERS) | ASYNC_CLASSES == set(DocumentClass)


class TestDecodePlain:
    def test_vehicle_disk(self):
        result = decode_plain("%".join(FIELDS), TODAY)
        assert result.valid is True
        assert result.vehicle.registration == "ND123456"

    def test_vehicle_disk_superscript_expiry(self):
        fields = list(FIELDS)
        fields[14] = "2025-0²-01"
        result = decode_plain("%".join(fields), TODAY)
        assert result.valid is True
        assert result.vehicle.expire_status == "Unknown"

    def test_smart_id_superscript_birth_date(self):
        result = decode_plain(smart_id(f5="²5 JAN 1985"), TODAY)
        assert result.document_class == DocumentClass.SMART_ID
        assert result.valid is True
        assert result.person.birth_date is None

    def test_legacy_id_wrapped(self):
        result = decode_plain("*8501015800087*", TODAY)
        assert result.document_class == DocumentClass.LEGACY_NUMERIC_ID
        assert result.person.id_number == "8501015800087"

    def test_unrecognized(self):
        result = decode_plain("hello", TODAY)
        assert result.valid is False
        assert result.document_class == DocumentClass.UNRECOGNIZED
        assert result.errors[0].code == "SCAN_UNRECOGNIZED"

    def test_encrypted_requires_async(self):
        result = decode_plain("ab" * 500, TODAY)
        assert result.valid is False
        assert result.errors[0].code == "LIC_REQUIRES_DECRYPT"


class TestDecodeScan:
    def test_encrypted_through_service(self):
        service = FakeDecryptService(payload=DecodedLicencePayload.model_validate(SERVICE_JSON))
        result = asyncio.run(decode_scan("ab" * 500, service, TODAY))
        assert result.valid is True
        assert result.licence is not None
        assert service.calls == 1

    def test_plain_formats_skip_service(self):
        service = FakeDecryptService()
        result = asyncio.run(decode_scan("8501015800087", service, TODAY))
        assert result.valid is True
        assert service.calls == 0

    def test_encrypted_without_service(self):
        result = asyncio.run(decode_scan("ab" * 500, None, TODAY))
        assert result.errors[0].code == "LIC_SERVICE_UNAVAILABLE"
