"""
Protocol d'inducció de doble lectura (màquina d'estats)

  awaiting_first ──scan──▶ validating ──ok──▶ awaiting_second ──scan──▶ verifying ──igual──▶ verified
        ▲                      │                                            │
        └──── failed ◀─────────┘ (error validador)                          │
        └──── mismatch ◀────────────────────────────────────────────────────┘ (no coincideix)

Els lectors de codis de barres a vegades trunquen o dupliquen caràcters, i
els formats no porten cap checksum fiable: per això l'operador ha de tornar a
llegir el mateix codi abans d'acceptar-lo.

Una sessió processa un sol esdeveniment alhora. Les lectures que arriben
mentre es valida o es verifica no s'encuen: es guarda només l'última.
"""
import asyncio
import inspect
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Protocol, Union
from asset_scan.models.base_response import ErrorItem
from asset_scan.models.induction_response import InductionRecord, ScanPhase
from asset_scan.models.scan_response import RawScan
from asset_scan.parsers.normalizer import normalize
from asset_scan.services.validators import ScanValidator, ValidationOutcome
from asset_scan.utils.redact import redact_scan

log = logging.getLogger("scan.induction")

ScanHandler = Callable[[RawScan], Awaitable[object]]
VerifiedCallback = Callable[[InductionRecord], Union[None, Awaitable[None]]]

_BUSY_PHASES = {ScanPhase.VALIDATING, ScanPhase.VERIFYING, ScanPhase.MISMATCH, ScanPhase.FAILED}


class ScanEventSource(Protocol):
    """Font de lectures (lector USB en mode teclat, càmera...). Retorna la funció per desubscriure's."""

    def subscribe(self, handler: ScanHandler) -> Callable[[], None]:
        ...


class AlertSink(Protocol):
    """Mostra un error a l'operador. La crida acaba quan l'operador l'accepta."""

    async def show_error(self, title: str, item: ErrorItem) -> None:
        ...


class RecordingAlertSink:
    """Accepta les alertes immediatament i les guarda (per a l'API)."""

    def __init__(self):
        self.alerts: list[ErrorItem] = []

    async def show_error(self, title: str, item: ErrorItem) -> None:
        self.alerts.append(item)

    def drain(self) -> list[ErrorItem]:
        alerts, self.alerts = self.alerts, []
        return alerts


class InductionSession:
    """
    Estat d'una inducció. Cada flux té la seva pròpia sessió; no hi ha cap
    estat compartit entre sessions.
    """

    def __init__(self, validator: ScanValidator, alert_sink: Optional[AlertSink] = None,
                 on_verified: Optional[VerifiedCallback] = None):
        self.validator = validator
        self.alert_sink = alert_sink
        self.on_verified = on_verified

        self.phase = ScanPhase.AWAITING_FIRST
        self.first_scan: Optional[str] = None
        self.second_scan: Optional[str] = None
        self.candidate: Optional[ValidationOutcome] = None
        self.record: Optional[InductionRecord] = None

        self._pending: Optional[RawScan] = None
        self._generation = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Font d'esdeveniments
    # ------------------------------------------------------------------

    def attach(self, source: ScanEventSource) -> None:
        self.detach()
        self._unsubscribe = source.subscribe(self.handle_scan)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def close(self) -> None:
        """Pantalla tancada o flux cancel·lat: es descarta tot el que no s'ha verificat."""
        self.detach()
        if self.phase != ScanPhase.VERIFIED:
            self._clear()

    # ------------------------------------------------------------------
    # Esdeveniments
    # ------------------------------------------------------------------

    async def handle_scan(self, event: Union[RawScan, str]) -> ScanPhase:
        if isinstance(event, str):
            event = RawScan(value=event)

        if self.phase == ScanPhase.VERIFIED:
            log.info("induction_scan_ignored", extra={"phase": self.phase.value})
            return self.phase

        if self.phase in _BUSY_PHASES:
            # l'última lectura substitueix l'anterior
            self._pending = event
            return self.phase

        generation = self._generation
        await self._process(event)

        # un reset durant el procés deixa la lectura pendent al flux nou
        if generation != self._generation:
            return self.phase

        if self._pending is not None and self.phase == ScanPhase.AWAITING_SECOND:
            pending, self._pending = self._pending, None
            await self._process(pending)
        if generation == self._generation:
            self._pending = None

        return self.phase

    def reset(self) -> ScanPhase:
        """Esborra totes les lectures. Segur des de qualsevol estat; no desfà una verificació."""
        if self.phase == ScanPhase.VERIFIED:
            log.info("induction_reset_ignored", extra={"phase": self.phase.value})
            return self.phase
        log.info("induction_reset", extra={"phase": self.phase.value})
        self._clear()
        return self.phase

    # ------------------------------------------------------------------
    # Transicions
    # ------------------------------------------------------------------

    async def _process(self, event: RawScan) -> None:
        if self.phase == ScanPhase.AWAITING_FIRST:
            await self._validate_first(event)
        elif self.phase == ScanPhase.AWAITING_SECOND:
            await self._verify_second(event)

    async def _validate_first(self, event: RawScan) -> None:
        generation = self._generation
        self.first_scan = event.value
        self.phase = ScanPhase.VALIDATING

        try:
            outcome = await self.validator.validate(event.value)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._clear()
            raise
        except Exception:
            log.exception("induction_validator_error")
            outcome = ValidationOutcome(
                ok=False,
                title="Validation Failed",
                error="Failed to validate scan. Please try again.",
            )

        if generation != self._generation:
            # reset durant la validació: el resultat ja no és d'aquesta sessió
            log.info("induction_stale_validation_dropped")
            return

        if not outcome.ok:
            log.info("induction_first_scan_rejected", extra={
                "motiu": outcome.error,
                "scan_redacted": redact_scan(event.value),
            })
            self.phase = ScanPhase.FAILED
            await self._alert_then_clear(generation, outcome.title, ErrorItem(
                code="IND_VALIDATION_FAILED",
                kind="validation",
                message=outcome.error or "Invalid scan",
                evidence=redact_scan(event.value),
            ))
            return

        self.candidate = outcome
        self.phase = ScanPhase.AWAITING_SECOND
        log.info("induction_first_scan_accepted", extra={"asset_type": outcome.asset_type})

    async def _verify_second(self, event: RawScan) -> None:
        generation = self._generation
        self.second_scan = event.value
        self.phase = ScanPhase.VERIFYING

        first = normalize(self.first_scan or "")
        second = normalize(event.value)

        if first and first == second:
            candidate = self.candidate or ValidationOutcome(ok=True)
            self.record = InductionRecord(
                identifier=first,
                asset_type=candidate.asset_type,
                person=candidate.person,
                licence=candidate.licence,
                vehicle=candidate.vehicle,
                verified_at=datetime.now(timezone.utc),
            )
            self.phase = ScanPhase.VERIFIED
            log.info("induction_verified", extra={
                "asset_type": candidate.asset_type,
                "identifier_redacted": redact_scan(first),
            })
            if self.on_verified is not None:
                try:
                    result = self.on_verified(self.record)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    # la verificació ja és definitiva
                    log.exception("induction_on_verified_error")
            return

        log.info("induction_mismatch", extra={"first_len": len(first), "second_len": len(second)})
        self.phase = ScanPhase.MISMATCH
        await self._alert_then_clear(generation, "Scan Mismatch", ErrorItem(
            code="IND_SCAN_MISMATCH",
            kind="mismatch",
            message="The scans do not match. Please scan again.",
        ))

    async def _alert_then_clear(self, generation: int, title: str, item: ErrorItem) -> None:
        try:
            if self.alert_sink is not None:
                await self.alert_sink.show_error(title, item)
        finally:
            if generation == self._generation:
                self._clear()

    def _clear(self) -> None:
        self._generation += 1
        self.phase = ScanPhase.AWAITING_FIRST
        self.first_scan = None
        self.second_scan = None
        self.candidate = None
        self._pending = None
