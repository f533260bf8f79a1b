"""
Registres de persona i de permís de conduir: Contracte unificat v1
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional, Literal


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    UNKNOWN = "UNKNOWN"


class PersonRecord(BaseModel):
    """Dades d'una persona (Smart ID, ID antic o SADL). Dates en format ISO (YYYY-MM-DD)."""
    model_config = ConfigDict(frozen=True)

    # Identificació
    id_number: str
    document_type: Literal["SMARTID", "GREENBOOKID", "SADL"]

    # Persona
    name: str = ""                    # noms tal com surten al document
    surname: str = ""
    initials: str = ""                # "J.P"
    gender: Gender = Gender.UNKNOWN
    birth_date: Optional[str] = None  # None = data invàlida al document
    nationality: Optional[str] = None
    country_of_birth: Optional[str] = None
    citizenship_status: Optional[str] = None  # "CITIZEN" | "PERMANENT RESIDENT" | codi SADL

    # Targeta (només Smart ID)
    security_code: Optional[str] = None
    card_number: Optional[str] = None
    issue_date: Optional[str] = None

    # Derivats
    age: Optional[int] = None
    description: str = ""             # "MALE, 34 YEARS OLD"


class LicenceRecord(BaseModel):
    """Dades del permís de conduir (només via SADL)."""
    model_config = ConfigDict(frozen=True)

    licence_number: str
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    licence_type: str = "SADL"
    restrictions: str = ""            # codis de vehicle autoritzats
