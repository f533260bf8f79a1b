"""
Parser del permís de conduir xifrat (SADL)

Dues fases:
  Phase 1: desxifrat extern (servei SADL, asíncron, cancel·lable)
  Phase 2: mapatge a PersonRecord + LicenceRecord (Python pur)

Un error de la fase 1 es mostra tal qual a l'operador: el codi de barres pot
ser correcte però no desxifrable (lector, firmware...).
"""
import logging
from datetime import date
from typing import Optional
from asset_scan.models.base_response import DocumentClass, ErrorItem, MetaInfo
from asset_scan.models.person_response import PersonRecord, LicenceRecord
from asset_scan.models.sadl_payload import DecodedLicencePayload
from asset_scan.models.scan_response import DecodeResponse, failure_response
from asset_scan.parsers.derived_fields import gender_from_code, describe_person
from asset_scan.services.sadl_service import DecryptService, SadlDecryptError
from asset_scan.utils.dates import parse_display_date, age_in_years, iso, today_utc
from asset_scan.utils.redact import redact_id

log = logging.getLogger("scan.parser")

_DOC = DocumentClass.ENCRYPTED_DRIVER_LICENCE


class SadlLicenceParser:

    @staticmethod
    def map_payload(payload: DecodedLicencePayload, today: Optional[date] = None) -> DecodeResponse:
        """Phase 2: resultat del servei → registres comuns."""
        today = today or today_utc()

        if not payload.success or not payload.id_number:
            return failure_response(_DOC, ErrorItem(
                code="LIC_INVALID_PAYLOAD",
                kind="field_format",
                severity="critical",
                field="id_number",
                message=payload.error or "Invalid SADL data",
            ))

        if payload.expired:
            return failure_response(_DOC, ErrorItem(
                code="LIC_EXPIRED",
                kind="validation",
                severity="critical",
                field="expiry_date",
                message="Driver's license has expired",
                evidence=payload.expiry_date,
            ))

        alerts: list[ErrorItem] = []
        dates: dict[str, Optional[date]] = {}
        for field in ("birth_date", "issue_date", "expiry_date"):
            raw_value = getattr(payload, field)
            dates[field] = parse_display_date(raw_value)
            if raw_value and dates[field] is None:
                alerts.append(ErrorItem(
                    code="LIC_INVALID_DATE",
                    kind="field_format",
                    severity="warning",
                    field=field,
                    message=f"Invalid date from licence service ({field}).",
                    evidence=raw_value,
                ))

        birth = dates["birth_date"]
        gender = gender_from_code(payload.gender)
        age = age_in_years(birth, today) if birth else None

        person = PersonRecord(
            id_number=payload.id_number,
            document_type="SADL",
            name=payload.name or "",
            surname=payload.surname or "",
            initials=payload.initials or "",
            gender=gender,
            birth_date=iso(birth),
            nationality=payload.sadc_country,
            country_of_birth=payload.sadc_country,
            citizenship_status=payload.id_type,
            age=age,
            description=describe_person(gender, age),
        )
        licence = LicenceRecord(
            licence_number=payload.licence_number or payload.id_number,
            issue_date=iso(dates["issue_date"]),
            expiry_date=iso(dates["expiry_date"]),
            licence_type=payload.licence_type or "SADL",
            restrictions=payload.vehicle_codes or payload.restrictions or "",
        )

        return DecodeResponse(
            valid=True,
            document_class=_DOC,
            person=person,
            licence=licence,
            alerts=alerts,
            meta=MetaInfo(success=True, message="Driver's licence decoded."),
        )

    @staticmethod
    async def decode(hex_payload: str, service: Optional[DecryptService],
                     today: Optional[date] = None) -> DecodeResponse:
        """Phase 1 + Phase 2. No reintenta mai: l'operador decideix si torna a llegir."""
        if service is None:
            return failure_response(_DOC, ErrorItem(
                code="LIC_SERVICE_UNAVAILABLE",
                kind="decryption",
                severity="critical",
                message="Driver's licence decoding is not available on this station.",
                suggested_fix="Configure the SADL decrypt service.",
            ))

        try:
            payload = await service.decrypt(hex_payload)
        except SadlDecryptError as e:
            log.warning("sadl_decrypt_failed", extra={"error": str(e), "payload_len": len(hex_payload)})
            return failure_response(_DOC, ErrorItem(
                code="LIC_DECRYPT_FAILED",
                kind="decryption",
                severity="critical",
                message=f"Licence barcode could not be decrypted: {e}",
                evidence=str(e),
                suggested_fix="The barcode may be valid; check the scanner hardware/firmware and rescan.",
            ))

        result = SadlLicenceParser.map_payload(payload, today)
        if result.valid:
            log.info("sadl_decoded", extra={"id_redacted": redact_id(result.person.id_number)})
        return result
