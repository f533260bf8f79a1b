"""
Validadors de la primera lectura del protocol d'inducció.

Cada validador rep la lectura crua i decideix si pot ser l'identificador d'un
nou actiu. Si la rebutja, el missatge d'error és el que veu l'operador.
"""
import logging
from datetime import date
from typing import Iterable, Mapping, Optional, Protocol, Union
from pydantic import BaseModel, ConfigDict
from asset_scan.models.induction_response import AssetType
from asset_scan.models.person_response import PersonRecord, LicenceRecord
from asset_scan.models.vehicle_response import VehicleRecord
from asset_scan.parsers.derived_fields import detect_vehicle_type, expiry_info, is_accepted_vehicle_type
from asset_scan.parsers.dispatcher import decode_plain, decode_scan
from asset_scan.services.sadl_service import DecryptService
from asset_scan.utils.redact import redact_id

log = logging.getLogger("scan.induction")


class ValidationOutcome(BaseModel):
    """Resultat d'un validador. Si ok, porta els registres candidats."""
    model_config = ConfigDict(frozen=True)

    ok: bool
    title: str = "Invalid Scan"
    error: Optional[str] = None
    asset_type: Optional[AssetType] = None
    person: Optional[PersonRecord] = None
    licence: Optional[LicenceRecord] = None
    vehicle: Optional[VehicleRecord] = None


def _reject(title: str, error: str) -> ValidationOutcome:
    return ValidationOutcome(ok=False, title=title, error=error)


class ScanValidator(Protocol):
    async def validate(self, raw: str) -> ValidationOutcome:
        ...


class UniquenessOracle(Protocol):
    def is_identifier_taken(self, candidate: str, excluding_id: Optional[str] = None) -> bool:
        ...


class SetUniquenessOracle:
    """
    Oracle sobre els identificadors existents de l'empresa, entregats per la
    capa de persistència. Accepta {identificador: id_actiu} o una llista.
    """

    def __init__(self, taken: Union[Mapping[str, Optional[str]], Iterable[str]] = ()):
        if isinstance(taken, Mapping):
            self._taken = {k.strip(): v for k, v in taken.items()}
        else:
            self._taken = {k.strip(): None for k in taken}

    def is_identifier_taken(self, candidate: str, excluding_id: Optional[str] = None) -> bool:
        candidate = (candidate or "").strip()
        if not candidate or candidate not in self._taken:
            return False
        owner = self._taken[candidate]
        if excluding_id and owner == excluding_id:
            return False
        return True


# ---------------------------------------------------------------------------
# Validadors
# ---------------------------------------------------------------------------

class QrCodeValidator:
    """Codi QR de la instal·lació: prefix de dues lletres + únic a l'empresa."""

    def __init__(self, oracle: UniquenessOracle, prefix: str = "NT", excluding_id: Optional[str] = None):
        self.oracle = oracle
        self.prefix = prefix
        self.excluding_id = excluding_id

    async def validate(self, raw: str) -> ValidationOutcome:
        candidate = (raw or "").strip()
        if not candidate.upper().startswith(self.prefix.upper()):
            return _reject("Invalid QR Code", f"Please scan a Newton QR Code (must start with {self.prefix})")
        if self.oracle.is_identifier_taken(candidate, self.excluding_id):
            return _reject("Invalid QR Code", "This QR code is already assigned to another asset")
        return ValidationOutcome(ok=True)


class VehicleDiskValidator:
    """Disc de llicència d'un camió o remolc, vigent i no registrat."""

    def __init__(self, oracle: UniquenessOracle, excluding_id: Optional[str] = None,
                 today: Optional[date] = None):
        self.oracle = oracle
        self.excluding_id = excluding_id
        self.today = today

    async def validate(self, raw: str) -> ValidationOutcome:
        result = decode_plain((raw or "").strip(), self.today)
        if not result.valid or result.vehicle is None:
            return _reject(
                "Barcode Parsing Failed",
                "Could not parse barcode. Please ensure you're scanning a valid South African "
                "vehicle license disk for a truck or trailer.",
            )

        vehicle = result.vehicle
        if not is_accepted_vehicle_type(vehicle.description):
            return _reject(
                "Invalid Vehicle Type",
                f"This barcode is for a {vehicle.description or 'passenger vehicle'}. "
                "Please scan a barcode for a truck or trailer only.",
            )

        asset_type = detect_vehicle_type(vehicle.description)
        if asset_type is None:
            return _reject(
                "Invalid Vehicle Type",
                "Could not determine if this is a truck or trailer. "
                "Please scan a valid Truck Tractor or Tipper license disk.",
            )

        if vehicle.expiry_date:
            info = expiry_info(vehicle.expiry_date, self.today)
            if info.status == "expired":
                return _reject("Expired License Disk", info.message)

        if self.oracle.is_identifier_taken(vehicle.registration, self.excluding_id):
            return _reject("Duplicate Vehicle", "This registration number is already assigned to another vehicle")

        return ValidationOutcome(ok=True, asset_type=asset_type, vehicle=vehicle)


class DriverLicenceValidator:
    """Permís de conduir (SADL) o document d'identitat d'un conductor no registrat."""

    def __init__(self, oracle: UniquenessOracle, sadl_service: Optional[DecryptService] = None,
                 excluding_id: Optional[str] = None, today: Optional[date] = None):
        self.oracle = oracle
        self.sadl_service = sadl_service
        self.excluding_id = excluding_id
        self.today = today

    async def validate(self, raw: str) -> ValidationOutcome:
        result = await decode_scan((raw or "").strip(), self.sadl_service, self.today)
        if not result.valid or result.person is None:
            decryption = next((e for e in result.errors if e.kind == "decryption"), None)
            if decryption is not None:
                return _reject("Licence Not Decrypted", decryption.message)
            expired = next((e for e in result.errors if e.code == "LIC_EXPIRED"), None)
            if expired is not None:
                return _reject("Expired Licence", expired.message)
            return _reject(
                "Invalid Barcode",
                "Could not parse the barcode as a driver's licence or ID card. "
                "Please ensure you are scanning a valid South African licence.",
            )

        if result.licence and result.licence.expiry_date:
            info = expiry_info(result.licence.expiry_date, self.today)
            if info.status == "expired":
                return _reject("Expired Licence", info.message)

        if self.oracle.is_identifier_taken(result.person.id_number, self.excluding_id):
            log.info("driver_duplicate", extra={"id_redacted": redact_id(result.person.id_number)})
            return _reject("Duplicate Driver", "This ID number is already assigned to another driver")

        return ValidationOutcome(
            ok=True,
            asset_type="driver",
            person=result.person,
            licence=result.licence,
        )
