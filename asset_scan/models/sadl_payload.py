"""
Resultat intermedi del servei extern de desxifrat SADL.

El servei retorna JSON en camelCase (idNumber, sadcCountry, ...). Dates en
format DD/MM/YYYY tal com les entrega el servei.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class DecodedLicencePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    success: bool = False
    error: Optional[str] = None

    id_number: Optional[str] = None
    id_type: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    initials: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    sadc_country: Optional[str] = None

    licence_number: Optional[str] = None
    licence_type: Optional[str] = None
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    vehicle_codes: Optional[str] = None
    restrictions: Optional[str] = None
    expired: bool = False
