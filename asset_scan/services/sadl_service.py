"""
Servei extern de desxifrat SADL (permís de conduir xifrat en hexadecimal)

El desxifrat no es fa aquí: s'envia la lectura hex al servei configurat i
es rep el resultat estructurat. Una sola crida, sense reintents.
"""
import logging
from typing import Optional, Protocol
import httpx
from pydantic import ValidationError
from asset_scan.config import settings
from asset_scan.models.sadl_payload import DecodedLicencePayload

log = logging.getLogger("scan.sadl")


class SadlDecryptError(Exception):
    """El servei SADL ha rebutjat o no ha pogut processar la lectura."""


class DecryptService(Protocol):
    async def decrypt(self, hex_payload: str) -> DecodedLicencePayload:
        ...


class HttpSadlService:
    """Client HTTP del servei de desxifrat SADL."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None,
                 api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url if url is not None else settings.sadl_service_url
        self.timeout = timeout if timeout is not None else settings.sadl_timeout_seconds
        self.api_key = api_key if api_key is not None else settings.sadl_api_key
        self.transport = transport

    def is_available(self) -> bool:
        """Verifica si el servei està configurat"""
        return settings.sadl_enabled and bool(self.url)

    async def decrypt(self, hex_payload: str) -> DecodedLicencePayload:
        """
        Desxifra i descodifica un permís SADL.

        Args:
            hex_payload: lectura hexadecimal (>= 1000 caràcters)

        Returns:
            DecodedLicencePayload amb success=True

        Raises:
            SadlDecryptError: servei no disponible, resposta invàlida o rebuig del payload
        """
        if not self.is_available():
            raise SadlDecryptError("SADL decrypt service is not configured")

        headers = {"X-API-Key": self.api_key} if self.api_key else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json={"payload": hex_payload}, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            log.warning("sadl_http_error", extra={"status_code": e.response.status_code})
            raise SadlDecryptError(f"SADL service returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.warning("sadl_unreachable", extra={"error_type": type(e).__name__})
            raise SadlDecryptError(f"SADL service unreachable: {type(e).__name__}") from e
        except ValueError as e:
            raise SadlDecryptError("SADL service returned a non-JSON response") from e

        try:
            payload = DecodedLicencePayload.model_validate(data)
        except ValidationError as e:
            raise SadlDecryptError("SADL service returned an unexpected payload") from e

        if not payload.success:
            raise SadlDecryptError(payload.error or "SADL decryption failed")

        return payload


# Singleton
sadl_service = HttpSadlService()
