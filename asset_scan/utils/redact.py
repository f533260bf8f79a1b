"""
Utilitats de redacció de PII per a logs (POPIA)

Cap número d'identitat ni lectura crua ha d'aparèixer en clar als logs de producció.
"""
from typing import Optional


def redact_id(id_number: Optional[str]) -> str:
    """
    Redacta un número d'identitat o de llicència per a logs.
    "8501015800087" → "8501****7"
    """
    if not id_number or len(id_number) < 3:
        return "***"
    return id_number[:4] + "****" + id_number[-1]


def redact_scan(raw: Optional[str], keep: int = 6) -> str:
    """
    Redacta una lectura crua: primers caràcters + longitud.
    "NT123%ABC%..." → "NT123%…(16)"
    """
    if not raw:
        return "***"
    return f"{raw[:keep]}…({len(raw)})"
