"""
Contracte unificat de resposta de lectura (v1)

Tots els descodificadors (disc de vehicle, Smart ID, ID antic, SADL) retornen
aquest format:
{
  "valid": bool,
  "document_class": "vehicle_disk|smart_id|...",
  "person" | "licence" | "vehicle": { <registre immutable> },
  "errors": [ ErrorItem, ... ],
  "alerts": [ ErrorItem, ... ],
  "meta": { "success": bool, "message": "..." }
}

Regles:
  valid = True si i només si:
    - el document s'ha descodificat sencer (tot o res)
    - cap ErrorItem a errors

Un camp no essencial que no es pot llegir (p.ex. data de caducitat) NO fa
fallar el document: queda a None i genera una alerta "field_format".
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional, Literal


class DocumentClass(str, Enum):
    """Variant tancada de document, decidida només per l'estructura del text."""
    VEHICLE_DISK = "vehicle_disk"
    SMART_ID = "smart_id"
    LEGACY_NUMERIC_ID = "legacy_numeric_id"
    ENCRYPTED_DRIVER_LICENCE = "encrypted_driver_licence"
    UNRECOGNIZED = "unrecognized"


ErrorKind = Literal["structural", "field_format", "decryption", "validation", "mismatch"]


class ErrorItem(BaseModel):
    """Ítem normalitzat d'error o alerta."""
    model_config = ConfigDict(frozen=True)

    code: str                                          # p.ex. "VEH_INSUFFICIENT_DATA"
    kind: ErrorKind
    severity: Literal["warning", "error", "critical"] = "error"
    field: Optional[str] = None                        # camp afectat
    message: str                                       # text llegible per l'operador
    evidence: Optional[str] = None                     # valor llegit (redactat si és PII)
    suggested_fix: Optional[str] = None                # recomanació


class MetaInfo(BaseModel):
    """Informació de transport."""
    success: bool
    message: Optional[str] = None
