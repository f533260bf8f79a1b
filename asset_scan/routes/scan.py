"""
Rutes de lectura: classificació, descodificació i caducitat
"""
from typing import Optional
from fastapi import APIRouter
from pydantic import BaseModel, Field
from asset_scan.models.scan_response import ClassifiedScan, DecodeResponse, ExpiryInfo
from asset_scan.parsers.derived_fields import expiry_info
from asset_scan.parsers.dispatcher import decode_scan
from asset_scan.parsers.normalizer import classify
from asset_scan.services.sadl_service import sadl_service

router = APIRouter()


class ScanRequest(BaseModel):
    """Lectura crua tal com l'envia l'escàner"""
    value: str = Field(..., description="Text llegit del codi de barres o QR")


class ExpiryRequest(BaseModel):
    value: Optional[str] = Field(default=None, description="Data DD/MM/YYYY o YYYY-MM-DD")


@router.post("/classify", response_model=ClassifiedScan)
async def classify_scan(request: ScanRequest):
    """Classifica una lectura només per l'estructura, sense descodificar-la."""
    return classify(request.value)


@router.post("/decode", response_model=DecodeResponse)
async def decode(request: ScanRequest):
    """
    Descodifica una lectura (disc de vehicle, Smart ID, ID antic o SADL).

    - **value**: text del codi de barres

    Un document que no es pot descodificar torna 200 amb valid=false i els
    errors; no és un error de transport.
    """
    service = sadl_service if sadl_service.is_available() else None
    return await decode_scan(request.value, service)


@router.post("/expiry", response_model=ExpiryInfo)
async def expiry(request: ExpiryRequest):
    """Estat de caducitat d'una data (insígnia verd/groc/taronja/vermell)."""
    return expiry_info(request.value)
