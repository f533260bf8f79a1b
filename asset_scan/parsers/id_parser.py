"""
Parser de documents d'identitat

Dos formats independents:
  - Smart ID: > 11 camps separats per '|'
      [0] cognom   [1] noms        [2] gènere (M/F)  [3] nacionalitat
      [4] número   [5] naixement   [6] país naixement [7] estat
      [8] expedició [9] codi seguretat [10] número de targeta
    Dates en format "DD MON YYYY" (mes abreujat JAN..DEC).
  - ID antic ("green book"): exactament 13 dígits
      YYMMDD SSSS C ...
      SSSS < 5000 → dona, C == 0 → ciutadà

El número d'identitat és imprescindible: si falta, falla tot el document.
Una data invàlida només degrada aquell camp (None + alerta).
"""
import logging
from datetime import date
from typing import Optional
from asset_scan.models.base_response import DocumentClass, ErrorItem, MetaInfo
from asset_scan.models.person_response import PersonRecord
from asset_scan.models.scan_response import DecodeResponse, failure_response
from asset_scan.parsers.derived_fields import (
    gender_from_code,
    gender_from_legacy_digits,
    describe_person,
    initials_from_names,
)
from asset_scan.parsers.normalizer import SMART_ID_MIN_FIELDS, LEGACY_ID_LENGTH
from asset_scan.utils.dates import parse_dd_mmm_yyyy, age_in_years, iso, today_utc, MIN_YEAR
from asset_scan.utils.redact import redact_id

log = logging.getLogger("scan.parser")


def _invalid_date_alert(field: str, evidence: str) -> ErrorItem:
    return ErrorItem(
        code="ID_INVALID_DATE",
        kind="field_format",
        severity="warning",
        field=field,
        message=f"Invalid date on document ({field}).",
        evidence=evidence,
    )


def _missing_id_number(document_class: DocumentClass) -> DecodeResponse:
    return failure_response(document_class, ErrorItem(
        code="ID_MISSING_NUMBER",
        kind="field_format",
        severity="critical",
        field="id_number",
        message="ID number could not be read from the document.",
        suggested_fix="Rescan the ID card.",
    ))


def legacy_birth_date(id_number: str, today: date) -> Optional[date]:
    """
    Data de naixement des de YYMMDD. Segle: YY <= any actual (2 dígits) → 2000s,
    altrament 1900s. Una data posterior a avui és invàlida.
    """
    yy, mm, dd = int(id_number[0:2]), int(id_number[2:4]), int(id_number[4:6])
    year = 2000 + yy if yy <= today.year % 100 else 1900 + yy
    if not (1 <= mm <= 12 and 1 <= dd <= 31 and MIN_YEAR <= year <= today.year):
        return None
    try:
        birth = date(year, mm, dd)
    except ValueError:
        return None
    return birth if birth <= today else None


class IdDocumentParser:
    """Descodificador sense estat per a Smart ID i ID antic de 13 dígits."""

    @staticmethod
    def parse_smart_id(raw: str, today: Optional[date] = None) -> DecodeResponse:
        today = today or today_utc()
        fields = (raw or "").split("|")

        if len(fields) < SMART_ID_MIN_FIELDS:
            return failure_response(DocumentClass.SMART_ID, ErrorItem(
                code="SCAN_NOT_AN_ID",
                kind="structural",
                severity="critical",
                message="Not an ID",
                evidence=f"{len(fields)} fields",
            ))

        id_number = fields[4].strip()
        if not id_number:
            return _missing_id_number(DocumentClass.SMART_ID)

        alerts: list[ErrorItem] = []

        birth = parse_dd_mmm_yyyy(fields[5].strip(), max_year=today.year, not_after=today)
        if birth is None:
            log.warning("smart_id_birth_date_invalid", extra={"id_redacted": redact_id(id_number)})
            alerts.append(_invalid_date_alert("birth_date", fields[5]))

        issue = parse_dd_mmm_yyyy(fields[8].strip(), max_year=today.year + 5)
        if issue is None:
            alerts.append(_invalid_date_alert("issue_date", fields[8]))

        names = fields[1].strip()
        gender = gender_from_code(fields[2])
        age = age_in_years(birth, today) if birth else None

        person = PersonRecord(
            id_number=id_number,
            document_type="SMARTID",
            name=names,
            surname=fields[0].strip(),
            initials=initials_from_names(names),
            gender=gender,
            birth_date=iso(birth),
            nationality=fields[3].strip() or None,
            country_of_birth=fields[6].strip() or None,
            citizenship_status=fields[7].strip() or None,
            issue_date=iso(issue),
            security_code=fields[9].strip() or None,
            card_number=fields[10].strip() or None,
            age=age,
            description=describe_person(gender, age),
        )

        return DecodeResponse(
            valid=True,
            document_class=DocumentClass.SMART_ID,
            person=person,
            alerts=alerts,
            meta=MetaInfo(success=True, message="Smart ID decoded."),
        )

    @staticmethod
    def parse_legacy_id(raw: str, today: Optional[date] = None) -> DecodeResponse:
        today = today or today_utc()
        id_number = (raw or "").strip()

        if len(id_number) != LEGACY_ID_LENGTH or not id_number.isascii() or not id_number.isdigit():
            return failure_response(DocumentClass.LEGACY_NUMERIC_ID, ErrorItem(
                code="SCAN_NOT_AN_ID",
                kind="structural",
                severity="critical",
                message="Not an ID Card!",
                evidence=f"{len(id_number)} chars",
            ))

        alerts: list[ErrorItem] = []
        birth = legacy_birth_date(id_number, today)
        if birth is None:
            log.warning("legacy_id_birth_date_invalid", extra={"id_redacted": redact_id(id_number)})
            alerts.append(_invalid_date_alert("birth_date", id_number[:6]))

        gender = gender_from_legacy_digits(id_number[6:10])
        age = age_in_years(birth, today) if birth else None

        person = PersonRecord(
            id_number=id_number,
            document_type="GREENBOOKID",
            gender=gender,
            birth_date=iso(birth),
            citizenship_status="CITIZEN" if id_number[10] == "0" else "PERMANENT RESIDENT",
            age=age,
            description=describe_person(gender, age),
        )

        return DecodeResponse(
            valid=True,
            document_class=DocumentClass.LEGACY_NUMERIC_ID,
            person=person,
            alerts=alerts,
            meta=MetaInfo(success=True, message="Legacy ID decoded."),
        )
