"""
Tests unitaris del normalitzador i classificador de lectures
"""
import pytest
from asset_scan.models.base_response import DocumentClass
from asset_scan.parsers.normalizer import classify, normalize, strip_wrapper


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_removes_spaces_and_punctuation(self):
        assert normalize(" NT-123 ABC.\n") == "NT123ABC"

    def test_keeps_percent(self):
        assert normalize("NT123%ABC% ") == "NT123%ABC%"

    def test_empty(self):
        assert normalize("") == ""
        assert normalize(None) == ""

    @pytest.mark.parametrize("raw", ["  a-b c  ", "%%x y%", "*8501015800087*", "NT 12\t3"])
    def test_idempotent(self, raw):
        assert normalize(normalize(raw)) == normalize(raw)

    def test_non_ascii_removed(self):
        assert normalize("ÀBç1") == "B1"


# ---------------------------------------------------------------------------
# strip_wrapper
# ---------------------------------------------------------------------------

class TestStripWrapper:
    def test_wrapped(self):
        assert strip_wrapper("*8501015800087*") == "8501015800087"

    def test_only_leading_star(self):
        assert strip_wrapper("*8501015800087") == "*8501015800087"

    def test_single_star(self):
        assert strip_wrapper("*") == "*"


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

class TestClassify:
    def test_percent_is_vehicle_disk(self):
        assert classify("%MVL1CC46%0160%").document_class == DocumentClass.VEHICLE_DISK

    def test_percent_wins_over_pipes(self):
        raw = "|".join(["x"] * 12) + "%"
        assert classify(raw).document_class == DocumentClass.VEHICLE_DISK

    def test_smart_id_twelve_fields(self):
        raw = "|".join(["x"] * 12)
        scan = classify(raw)
        assert scan.document_class == DocumentClass.SMART_ID
        assert scan.error is None

    def test_smart_id_eleven_fields_is_not_an_id(self):
        scan = classify("|".join(["x"] * 11))
        assert scan.document_class == DocumentClass.UNRECOGNIZED
        assert scan.error.code == "SCAN_NOT_AN_ID"
        assert scan.error.message == "Not an ID"

    def test_legacy_id(self):
        scan = classify("8501015800087")
        assert scan.document_class == DocumentClass.LEGACY_NUMERIC_ID
        assert scan.payload == "8501015800087"

    def test_legacy_id_wrapped_and_padded(self):
        scan = classify("*8501015800087 *")
        assert scan.document_class == DocumentClass.LEGACY_NUMERIC_ID
        assert scan.payload == "8501015800087"

    def test_twelve_digits_unrecognized(self):
        assert classify("850101580008").document_class == DocumentClass.UNRECOGNIZED

    def test_encrypted_licence(self):
        scan = classify("ab" * 500)
        assert scan.document_class == DocumentClass.ENCRYPTED_DRIVER_LICENCE

    def test_short_hex_unrecognized(self):
        scan = classify("ab" * 499)
        assert scan.document_class == DocumentClass.UNRECOGNIZED
        assert scan.error.code == "SCAN_UNRECOGNIZED"

    def test_long_non_hex_unrecognized(self):
        assert classify("zz" * 600).document_class == DocumentClass.UNRECOGNIZED

    def test_empty(self):
        scan = classify("")
        assert scan.document_class == DocumentClass.UNRECOGNIZED
        assert scan.error.kind == "structural"
