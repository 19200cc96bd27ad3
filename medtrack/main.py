import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from medtrack.api.routes import alerts, audit, auth, dashboard, medicines, orders, users
from medtrack.core.config import settings
from medtrack.core.observability import MetricsRegistry, ObservabilityMiddleware, configure_logging
from medtrack.db import session as db_session
from medtrack.db.init_db import init_db

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    logger.info("MedTrack API started")
    yield


app = FastAPI(title="MedTrack", lifespan=lifespan)
metrics_registry = MetricsRegistry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(
    ObservabilityMiddleware,
    registry=metrics_registry,
    exclude_paths={"/metrics", "/health"},
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(medicines.router)
app.include_router(orders.router)
app.include_router(alerts.router)
app.include_router(dashboard.router)
app.include_router(audit.router)


@app.get("/health")
def health():
    details = {"api": "ok"}
    failures: list[str] = []

    try:
        with db_session.SessionLocal() as db:
            db.execute(text("SELECT 1"))
        details["db"] = "ok"
    except Exception as exc:
        logger.warning("Health check: database unavailable: %s", exc)
        details["db"] = "error"
        details["db_error"] = str(exc)
        failures.append("db")

    status = "ok" if not failures else "degraded"
    return JSONResponse({"status": status, "checks": details}, status_code=200 if not failures else 503)


@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    return PlainTextResponse(
        metrics_registry.render_prometheus(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
