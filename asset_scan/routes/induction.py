"""
Rutes del protocol d'inducció de doble lectura

Cada sessió viu en memòria fins que es verifica, es tanca (DELETE) o passa
induction_session_ttl_seconds sense activitat. Les alertes s'accepten
automàticament i es retornen a la següent resposta.
"""
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from asset_scan.config import settings
from asset_scan.models.induction_response import ScanPhase, SessionSnapshot
from asset_scan.services.induction import InductionSession, RecordingAlertSink
from asset_scan.services.sadl_service import sadl_service
from asset_scan.services.validators import (
    DriverLicenceValidator,
    QrCodeValidator,
    ScanValidator,
    SetUniquenessOracle,
    VehicleDiskValidator,
)

log = logging.getLogger("scan.routes")

router = APIRouter()

SessionKind = Literal["qr", "vehicle", "driver"]


class CreateSessionRequest(BaseModel):
    kind: SessionKind
    taken_identifiers: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Identificadors ja assignats a l'empresa → id de l'actiu propietari",
    )
    excluding_id: Optional[str] = Field(default=None, description="Actiu en edició (no compta com a duplicat)")


class ScanEventRequest(BaseModel):
    value: str


@dataclass
class _Entry:
    kind: SessionKind
    session: InductionSession
    sink: RecordingAlertSink
    touched: float = field(default_factory=time.monotonic)


_sessions: Dict[str, _Entry] = {}


def _purge_expired() -> None:
    deadline = time.monotonic() - settings.induction_session_ttl_seconds
    for session_id in [sid for sid, entry in _sessions.items() if entry.touched < deadline]:
        entry = _sessions.pop(session_id)
        entry.session.close()
        log.info("induction_session_expired", extra={"session_id": session_id, "phase": entry.session.phase.value})


def _build_validator(request: CreateSessionRequest) -> ScanValidator:
    oracle = SetUniquenessOracle(request.taken_identifiers)
    if request.kind == "qr":
        return QrCodeValidator(oracle, prefix=settings.qr_code_prefix, excluding_id=request.excluding_id)
    if request.kind == "vehicle":
        return VehicleDiskValidator(oracle, excluding_id=request.excluding_id)
    service = sadl_service if sadl_service.is_available() else None
    return DriverLicenceValidator(oracle, sadl_service=service, excluding_id=request.excluding_id)


def _get(session_id: str) -> _Entry:
    entry = _sessions.get(session_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    entry.touched = time.monotonic()
    return entry


def _snapshot(session_id: str, entry: _Entry) -> SessionSnapshot:
    session = entry.session
    return SessionSnapshot(
        session_id=session_id,
        kind=entry.kind,
        phase=session.phase,
        has_first_scan=session.first_scan is not None,
        record=session.record,
        alerts=entry.sink.drain(),
    )


@router.post("/sessions", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def create_session(request: CreateSessionRequest):
    """
    Obre una sessió d'inducció.

    - **kind**: qr (codi de la instal·lació), vehicle (disc de camió/remolc) o driver (permís/ID)
    - **taken_identifiers**: identificadors existents per a la comprovació d'unicitat
    """
    _purge_expired()
    session_id = uuid.uuid4().hex
    sink = RecordingAlertSink()
    session = InductionSession(_build_validator(request), alert_sink=sink)
    _sessions[session_id] = _Entry(kind=request.kind, session=session, sink=sink)
    log.info("induction_session_created", extra={"session_id": session_id, "kind": request.kind})
    return _snapshot(session_id, _sessions[session_id])


@router.post("/sessions/{session_id}/scans", response_model=SessionSnapshot)
async def submit_scan(session_id: str, request: ScanEventRequest):
    """
    Envia una lectura a la sessió (primera o segona, segons la fase).

    Quan la sessió queda verificada es retorna el registre i se n'allibera:
    les consultes posteriors tornen 404.
    """
    entry = _get(session_id)
    await entry.session.handle_scan(request.value)
    snapshot = _snapshot(session_id, entry)
    if entry.session.phase == ScanPhase.VERIFIED and _sessions.get(session_id) is entry:
        del _sessions[session_id]
        entry.session.close()
        log.info("induction_session_completed", extra={"session_id": session_id, "kind": entry.kind})
    return snapshot


@router.post("/sessions/{session_id}/reset", response_model=SessionSnapshot)
async def reset_session(session_id: str):
    entry = _get(session_id)
    entry.session.reset()
    return _snapshot(session_id, entry)


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str):
    return _snapshot(session_id, _get(session_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str):
    entry = _sessions.pop(session_id, None)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    entry.session.close()
    log.info("induction_session_closed", extra={"session_id": session_id, "phase": entry.session.phase.value})


def active_sessions() -> List[str]:
    return list(_sessions)
