import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import DATABASE_URL, ENV, STATIC_DIR, WHATSAPP_READY_TIMEOUT_SECONDS
from app.core.database import Base, engine
from app.core.logging_setup import configure_logging
from app.core.startup_checks import ensure_migrations_applied, validate_database_environment
from app.middleware.observability import ObservabilityMiddleware
import app.models  # noqa: F401  registers the models before create_all

from app.routers.diagnostics import router as diagnostics_router
from app.routers.internal_metrics import router as internal_metrics_router
from app.routers.orders import error_response, router as orders_router
from app.services.errors import MissingFieldsError
from app.whatsapp.service import build_session

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)
STATIC_PATH = Path(STATIC_DIR)


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        else:
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        logger.info("%s database ready env=%s", STARTUP_PREFIX, ENV)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(application: FastAPI):
    _startup_tasks()
    session = build_session()
    application.state.whatsapp_session = session
    await session.start()
    if not await session.wait_until_ready(WHATSAPP_READY_TIMEOUT_SECONDS):
        logger.warning(
            "%s WhatsApp not ready after %ss state=%s; orders will fail to notify until it is",
            STARTUP_PREFIX,
            WHATSAPP_READY_TIMEOUT_SECONDS,
            session.state.value,
        )
    try:
        yield
    finally:
        await session.close()


app = FastAPI(
    title="WhatsApp Order Intake API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(RequestValidationError)
async def order_body_validation_handler(request: Request, exc: RequestValidationError):
    # unreadable order bodies are answered like missing fields
    if request.url.path == "/api/order":
        logger.info("Order rejected kind=missing_fields detail=unreadable body")
        return error_response(MissingFieldsError())
    return await request_validation_exception_handler(request, exc)


# Routers
app.include_router(orders_router)
app.include_router(diagnostics_router)
app.include_router(internal_metrics_router)


@app.get("/", include_in_schema=False)
def root():
    index = STATIC_PATH / "index.html"
    if index.is_file():
        return FileResponse(index)
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if STATIC_PATH.is_dir():
    app.mount("/", StaticFiles(directory=str(STATIC_PATH)), name="public")
