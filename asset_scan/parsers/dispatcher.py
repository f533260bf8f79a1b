"""
Punt d'entrada de descodificació: classifica la lectura i la passa al parser
del seu format.

Tots els formats són síncrons excepte el permís xifrat (SADL), que necessita
una crida asíncrona al servei extern.
"""
import logging
from datetime import date
from typing import Callable, Optional
from asset_scan.models.base_response import DocumentClass, ErrorItem
from asset_scan.models.scan_response import ClassifiedScan, DecodeResponse, failure_response
from asset_scan.parsers.id_parser import IdDocumentParser
from asset_scan.parsers.normalizer import classify
from asset_scan.parsers.sadl_parser import SadlLicenceParser
from asset_scan.parsers.vehicle_disk_parser import VehicleDiskParser
from asset_scan.services.sadl_service import DecryptService
from asset_scan.utils.redact import redact_scan

log = logging.getLogger("scan.parser")

PlainDecoder = Callable[[ClassifiedScan, Optional[date]], DecodeResponse]


def _unrecognized(scan: ClassifiedScan, today: Optional[date]) -> DecodeResponse:
    return failure_response(scan.document_class, scan.error)


PLAIN_DECODERS: dict[DocumentClass, PlainDecoder] = {
    DocumentClass.VEHICLE_DISK: lambda scan, today: VehicleDiskParser.parse(scan.payload, today),
    DocumentClass.SMART_ID: lambda scan, today: IdDocumentParser.parse_smart_id(scan.payload, today),
    DocumentClass.LEGACY_NUMERIC_ID: lambda scan, today: IdDocumentParser.parse_legacy_id(scan.payload, today),
    DocumentClass.UNRECOGNIZED: _unrecognized,
}
ASYNC_CLASSES = {DocumentClass.ENCRYPTED_DRIVER_LICENCE}

_missing = set(DocumentClass) - set(PLAIN_DECODERS) - ASYNC_CLASSES
if _missing:
    raise RuntimeError(f"Document classes without decoder: {sorted(c.value for c in _missing)}")


def decode_plain(raw: str, today: Optional[date] = None) -> DecodeResponse:
    """
    Descodificació síncrona. Un permís xifrat no es pot resoldre aquí: torna
    error estructural i cal fer servir decode_scan().
    """
    scan = classify(raw)
    if scan.document_class in ASYNC_CLASSES:
        return _needs_async(scan)
    result = PLAIN_DECODERS[scan.document_class](scan, today)
    _log_result(raw, result)
    return result


async def decode_scan(raw: str, sadl_service: Optional[DecryptService] = None,
                      today: Optional[date] = None) -> DecodeResponse:
    """Descodificació completa, inclòs el permís xifrat."""
    scan = classify(raw)
    if scan.document_class == DocumentClass.ENCRYPTED_DRIVER_LICENCE:
        result = await SadlLicenceParser.decode(scan.payload, sadl_service, today)
    else:
        result = PLAIN_DECODERS[scan.document_class](scan, today)
    _log_result(raw, result)
    return result


def _needs_async(scan: ClassifiedScan) -> DecodeResponse:
    return failure_response(scan.document_class, ErrorItem(
        code="LIC_REQUIRES_DECRYPT",
        kind="structural",
        message="Encrypted driver's licence must be decoded through the licence service.",
    ))


def _log_result(raw: str, result: DecodeResponse) -> None:
    log.info("scan_decoded", extra={
        "document_class": result.document_class.value,
        "valid": result.valid,
        "errors": [e.code for e in result.errors],
        "alerts": [a.code for a in result.alerts],
        "scan_redacted": redact_scan(raw),
    })
