"""
Parser del disc de llicència de vehicle (codi de barres separat per '%')

Camps posicionals fixos del format:
  [5]  número de disc          [10] model
  [6]  número de llicència     [11] color (bilingüe)
  [7]  matrícula               [12] VIN
  [8]  descripció (bilingüe)   [13] número de motor
  [9]  marca                   [14] data de caducitat

Una data de caducitat il·legible NO fa fallar el disc: els camps d'identitat
del vehicle no es perden mai per culpa d'una data.
"""
import logging
from datetime import date
from typing import Optional
from asset_scan.models.base_response import DocumentClass, ErrorItem, MetaInfo
from asset_scan.models.scan_response import DecodeResponse, failure_response
from asset_scan.models.vehicle_response import VehicleRecord
from asset_scan.parsers.derived_fields import (
    title_case,
    normalize_colour,
    normalize_description,
    vehicle_expire_status,
)
from asset_scan.utils.dates import parse_expiry, today_utc
from asset_scan.utils.redact import redact_scan

log = logging.getLogger("scan.parser")

MIN_FIELDS = 15


class VehicleDiskParser:
    """Descodificador sense estat: es pot cridar des de qualsevol lloc."""

    @staticmethod
    def parse(raw: str, today: Optional[date] = None) -> DecodeResponse:
        today = today or today_utc()

        if "%" not in (raw or ""):
            return failure_response(DocumentClass.VEHICLE_DISK, ErrorItem(
                code="VEH_NOT_A_DISC",
                kind="structural",
                severity="critical",
                message="Not a Vehicle Licence Disc!",
                evidence=redact_scan(raw),
            ))

        fields = raw.split("%")
        if len(fields) < MIN_FIELDS:
            log.info("vehicle_disk_insufficient_data", extra={"camps": len(fields)})
            return failure_response(DocumentClass.VEHICLE_DISK, ErrorItem(
                code="VEH_INSUFFICIENT_DATA",
                kind="structural",
                severity="critical",
                message="Insufficient data: barcode does not contain a complete vehicle licence disc.",
                evidence=f"{len(fields)} fields, expected {MIN_FIELDS}",
                suggested_fix="Rescan the disc; the read may have been truncated.",
            ))

        alerts: list[ErrorItem] = []

        raw_expiry = fields[14].strip()
        expiry = parse_expiry(raw_expiry)
        if expiry is None:
            log.warning("vehicle_disk_expiry_unparsed", extra={"evidence": raw_expiry[:20]})
            alerts.append(ErrorItem(
                code="VEH_EXPIRY_UNKNOWN",
                kind="field_format",
                severity="warning",
                field="expiry_date",
                message="Could not read the disc expiry date; expiry is unknown.",
                evidence=raw_expiry,
            ))
        expire_status, expire_duration = vehicle_expire_status(expiry, today)

        registration = fields[7].strip()
        if not registration:
            alerts.append(ErrorItem(
                code="VEH_MISSING_REGISTRATION",
                kind="field_format",
                severity="error",
                field="registration",
                message="Registration number is empty on the disc.",
            ))

        vehicle = VehicleRecord(
            registration=registration,
            vehicle_disk_number=fields[5].strip(),
            licence_number=fields[6].strip(),
            description=normalize_description(fields[8].strip()),
            make=title_case(fields[9].strip()),
            model=title_case(fields[10].strip()),
            colour=normalize_colour(fields[11]),
            vin=fields[12].strip(),
            engine_number=fields[13].strip(),
            expiry_date=expiry.isoformat() if expiry else None,
            expire_status=expire_status,
            expire_duration=expire_duration,
        )

        return DecodeResponse(
            valid=True,
            document_class=DocumentClass.VEHICLE_DISK,
            vehicle=vehicle,
            alerts=alerts,
            meta=MetaInfo(success=True, message="Vehicle licence disc decoded."),
        )
