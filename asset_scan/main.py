"""
Asset Scan Engine - API FastAPI

Motor de lectura i verificació d'actius (disc de vehicle, Smart ID, ID antic,
permís SADL) i protocol d'inducció de doble lectura.
"""
import time
import logging
import json
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from asset_scan.config import settings
from asset_scan.routes import scan, induction


class _JsonFormatter(logging.Formatter):
    """Format JSON per logs estructurats (compatible amb Datadog, Loki, etc.)"""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Afegir camps extra (mètriques, context)
        for key, val in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                payload[key] = val
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger("scan")
    root.setLevel(settings.log_level.upper())
    if not root.handlers:
        root.addHandler(handler)
    root.propagate = False


_configure_logging()
log = logging.getLogger("scan.request")

# Crear app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Lectura de codis de barres d'actius i inducció de doble lectura",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # En producció, especificar origins concrets
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware de latència i logging de peticions
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Registra mètrica de latència per a cada petició."""
    t0 = time.monotonic()
    response = await call_next(request)
    durada_ms = round((time.monotonic() - t0) * 1000)
    log.info(
        "http_request",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "durada_ms": durada_ms,
        }
    )
    return response


# Middleware de validació d'API Key
@app.middleware("http")
async def validate_api_key(request: Request, call_next):
    """
    Valida l'API key en cada petició (excepte endpoints públics)
    """
    public_paths = ["/", "/health"]

    if request.url.path in public_paths or not settings.api_key_enabled:
        return await call_next(request)

    if not settings.api_keys:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "API key no configurada al servidor"}
        )

    api_key = request.headers.get("X-API-Key")

    if not api_key or api_key not in settings.api_keys:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "API key invàlida o no proporcionada"},
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return await call_next(request)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("unhandled_error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal error"},
    )


# Routes
app.include_router(scan.router, prefix="/scan", tags=["Lectura"])
app.include_router(induction.router, prefix="/induction", tags=["Inducció"])


@app.get("/")
async def root():
    """Root endpoint - retorna només estat bàsic"""
    return {"status": "ok"}


@app.get("/health")
async def health():
    """Endpoint de health check"""
    from asset_scan.services.sadl_service import sadl_service

    return {
        "status": "healthy",
        "services": {
            "sadl": sadl_service.is_available(),
        },
        "induction_sessions": len(induction.active_sessions()),
    }
