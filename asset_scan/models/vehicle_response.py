"""
Registre de vehicle (disc de llicència): Contracte unificat v1
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, Literal


class VehicleRecord(BaseModel):
    """Dades del disc de llicència. Dates en format ISO (YYYY-MM-DD)."""
    model_config = ConfigDict(frozen=True)

    # Identificació
    registration: str                       # camp [7], identificador del vehicle
    vehicle_disk_number: str = ""           # camp [5]
    licence_number: str = ""                # camp [6]
    vin: str = ""                           # camp [12]
    engine_number: str = ""                 # camp [13]

    # Text normalitzat
    make: str = ""
    model: str = ""
    colour: str = ""                        # anglès si hi ha el bessó
    description: str = ""                   # "Truck Tractor / Voorspanmotor"

    # Caducitat
    expiry_date: Optional[str] = None       # None = data il·legible
    expire_status: Literal["Valid", "Expired", "Unknown"] = "Unknown"
    expire_duration: str = "N/A"            # "3 months"
