"""
Models del protocol d'inducció de doble lectura
"""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Literal
from asset_scan.models.base_response import ErrorItem
from asset_scan.models.person_response import PersonRecord, LicenceRecord
from asset_scan.models.vehicle_response import VehicleRecord


class ScanPhase(str, Enum):
    AWAITING_FIRST = "awaiting_first"
    VALIDATING = "validating"
    AWAITING_SECOND = "awaiting_second"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    MISMATCH = "mismatch"
    FAILED = "failed"


AssetType = Literal["truck", "trailer", "driver"]


class InductionRecord(BaseModel):
    """Registre confirmat que s'entrega a la capa de persistència."""
    model_config = ConfigDict(frozen=True)

    identifier: str                    # primera lectura normalitzada
    asset_type: Optional[AssetType] = None
    person: Optional[PersonRecord] = None
    licence: Optional[LicenceRecord] = None
    vehicle: Optional[VehicleRecord] = None
    verified_at: datetime


class SessionSnapshot(BaseModel):
    """Estat visible d'una sessió (resposta de l'API)."""
    session_id: str
    kind: Literal["qr", "vehicle", "driver"]
    phase: ScanPhase
    has_first_scan: bool
    record: Optional[InductionRecord] = None
    alerts: List[ErrorItem] = []
