import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from crm.core.config import ENV, IS_TEST
from crm.core.database import SessionLocal, init_db
from crm.core.logging_setup import configure_logging
from crm.core.metrics import request_metrics
from crm.core.startup_checks import validate_database_environment
from crm.middleware.observability import ObservabilityMiddleware
from crm.routers.graphql import router as graphql_router
from crm.services.seed import initialize_database

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[API_STARTUP]"


def _seed_database() -> None:
    if IS_TEST:
        logger.info("%s seeding skipped in test environment", STARTUP_PREFIX)
        return

    db = SessionLocal()
    try:
        initialize_database(db)
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        logger.info("%s start env=%s", STARTUP_PREFIX, ENV)
        validate_database_environment()
        init_db()
        _seed_database()
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Customer CRM GraphQL API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(ObservabilityMiddleware)

app.include_router(graphql_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/internal/metrics")
def internal_metrics():
    return {"endpoints": request_metrics.snapshot()}
