"""
Normalitzador i classificador de lectures crues.

Tot és pur i total: cap funció d'aquest mòdul llença excepció. Una lectura
que no encaixa amb cap format torna com a DocumentClass.UNRECOGNIZED amb
l'error corresponent.
"""
import re
from asset_scan.models.base_response import DocumentClass, ErrorItem
from asset_scan.models.scan_response import ClassifiedScan

SMART_ID_MIN_FIELDS = 12           # > 11 camps separats per '|'
LEGACY_ID_LENGTH = 13
ENCRYPTED_MIN_LENGTH = 1000

_NOT_NORMALIZED = re.compile(r"[^a-zA-Z0-9%]")
_LEGACY_ID = re.compile(r"[0-9]{13}")
_HEX = re.compile(r"[0-9a-fA-F]+")


def strip_wrapper(raw: str) -> str:
    """Alguns lectors d'ID emboliquen la lectura amb '*...*'."""
    if len(raw) >= 2 and raw[0] == "*" and raw[-1] == "*":
        return raw[1:-1]
    return raw


def normalize(raw: str) -> str:
    """Elimina tot el que no sigui alfanumèric o '%' (soroll de l'escàner). Idempotent."""
    return _NOT_NORMALIZED.sub("", raw or "")


def classify(raw: str) -> ClassifiedScan:
    """Classifica una lectura només per la seva estructura."""
    payload = strip_wrapper(raw or "")

    if "%" in payload:
        return ClassifiedScan(document_class=DocumentClass.VEHICLE_DISK, payload=payload)

    if "|" in payload:
        if len(payload.split("|")) >= SMART_ID_MIN_FIELDS:
            return ClassifiedScan(document_class=DocumentClass.SMART_ID, payload=payload)
        return ClassifiedScan(
            document_class=DocumentClass.UNRECOGNIZED,
            payload=payload,
            error=ErrorItem(
                code="SCAN_NOT_AN_ID",
                kind="structural",
                message="Not an ID",
                evidence=f"{len(payload.split('|'))} fields",
                suggested_fix="Scan the barcode on the back of the Smart ID card.",
            ),
        )

    trimmed = payload.strip()
    if _LEGACY_ID.fullmatch(trimmed):
        return ClassifiedScan(document_class=DocumentClass.LEGACY_NUMERIC_ID, payload=trimmed)

    if len(trimmed) >= ENCRYPTED_MIN_LENGTH and _HEX.fullmatch(trimmed):
        return ClassifiedScan(document_class=DocumentClass.ENCRYPTED_DRIVER_LICENCE, payload=trimmed)

    return ClassifiedScan(
        document_class=DocumentClass.UNRECOGNIZED,
        payload=payload,
        error=ErrorItem(
            code="SCAN_UNRECOGNIZED",
            kind="structural",
            message="Barcode format not recognised",
            evidence=f"{len(payload)} chars",
            suggested_fix="Scan a vehicle licence disc, ID card or driver's licence.",
        ),
    )
