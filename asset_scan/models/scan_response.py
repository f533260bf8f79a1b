"""
Model de resposta per lectures crues i descodificació: Contracte unificat v1
"""
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal
from asset_scan.models.base_response import DocumentClass, ErrorItem, MetaInfo
from asset_scan.models.person_response import PersonRecord, LicenceRecord
from asset_scan.models.vehicle_response import VehicleRecord


class RawScan(BaseModel):
    """Lectura tal com arriba de l'escàner. No es conserva després de descodificar."""
    model_config = ConfigDict(frozen=True)

    value: str
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ClassifiedScan(BaseModel):
    """Resultat de la classificació estructural d'una lectura."""
    model_config = ConfigDict(frozen=True)

    document_class: DocumentClass
    payload: str                       # lectura sense l'embolcall '*'
    error: Optional[ErrorItem] = None  # només si document_class == unrecognized


class DecodeResponse(BaseModel):
    """Resposta de descodificació (qualsevol format)."""
    valid: bool
    document_class: DocumentClass
    person: Optional[PersonRecord] = None
    licence: Optional[LicenceRecord] = None
    vehicle: Optional[VehicleRecord] = None
    errors: List[ErrorItem] = []
    alerts: List[ErrorItem] = []
    meta: Optional[MetaInfo] = None


class ExpiryInfo(BaseModel):
    """Estat de caducitat per a insígnies. Es recalcula sempre, mai es guarda."""
    model_config = ConfigDict(frozen=True)

    status: Literal["valid", "expiring-soon", "expiring-critical", "expired"]
    days_until_expiry: int             # negatiu = ja caducat
    expiry_date: Optional[str] = None
    message: str
    color: Literal["green", "yellow", "orange", "red"]


def failure_response(document_class: DocumentClass, error: ErrorItem) -> DecodeResponse:
    """Resposta de descodificació fallida: cap registre parcial."""
    return DecodeResponse(
        valid=False,
        document_class=document_class,
        errors=[error],
        meta=MetaInfo(success=False, message=error.message),
    )
