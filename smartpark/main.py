# smartpark/main.py
"""
FastAPI application entry point.
Includes API key middleware, error handlers mapping parking errors to HTTP
status codes, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from smartpark.routers import parking, transactions, reports, health
from smartpark.store import open_session
from smartpark.config import settings
from smartpark.exceptions import (
    DuplicateVehicle, LotFull, NotFound, ParkingError, PersistenceWarning, ValidationError,
)
from smartpark.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="SmartPark API",
    description="Multi-floor parking: entry, exit, billing and reports. Fully offline.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow dashboard on same LAN to call the API) ──────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard IP in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared-key check for the operator dashboard.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Parking Error Handler ────────────────────────────────────────────────────
ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateVehicle: status.HTTP_409_CONFLICT,
    LotFull: status.HTTP_503_SERVICE_UNAVAILABLE,
    NotFound: status.HTTP_404_NOT_FOUND,
    PersistenceWarning: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    code = next((c for cls, c in ERROR_STATUS.items() if isinstance(exc, cls)),
                status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=code, content={"detail": str(exc), "error": type(exc).__name__})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(parking.router,      prefix="/api/v1", tags=["🚗 Entry / Exit / Search"])
app.include_router(transactions.router, prefix="/api/v1", tags=["🧾 Transactions"])
app.include_router(reports.router,      prefix="/api/v1", tags=["📊 Reports"])
app.include_router(health.router,       prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 SmartPark backend starting up...")
    session = open_session()
    app.state.session = session
    logger.info(f"🅿️  Grid ready: {session.grid.occupied_count()}/{session.grid.capacity} occupied")
    logger.info(f"💾 Data directory: {settings.DATA_DIR}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 SmartPark backend shutting down...")
    session = getattr(app.state, "session", None)
    if session is not None:
        for warning in session.shutdown():
            logger.warning(f"Shutdown save failed: {warning}")


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn
    uvicorn.run("smartpark.main:app", host=settings.BACKEND_IP, port=settings.BACKEND_PORT)
