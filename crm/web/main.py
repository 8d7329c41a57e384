import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from crm.core.config import (
    ENV,
    GRAPHQL_API_TIMEOUT_SECONDS,
    GRAPHQL_API_URL,
    GRAPHQL_API_VERIFY_TLS,
    WEB_SESSION_SECRET,
)
from crm.core.logging_setup import configure_logging
from crm.middleware.observability import ObservabilityMiddleware
from crm.middleware.web_session import WebSessionMiddleware
from crm.web.routers.account import router as account_router
from crm.web.routers.customers import router as customers_router
from crm.web.routers.home import router as home_router
from crm.web.routers.users import router as users_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[WEB_STARTUP]"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s start env=%s graphql_api=%s", STARTUP_PREFIX, ENV, GRAPHQL_API_URL)
    if not WEB_SESSION_SECRET:
        logger.warning("%s WEB_SESSION_SECRET is not set; sign-in will fail", STARTUP_PREFIX)

    app.state.graphql_endpoint = GRAPHQL_API_URL
    async with httpx.AsyncClient(
        timeout=GRAPHQL_API_TIMEOUT_SECONDS,
        verify=GRAPHQL_API_VERIFY_TLS,
    ) as http:
        app.state.graphql_http = http
        yield


app = FastAPI(
    title="Customer CRM Web",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.add_middleware(WebSessionMiddleware)
app.add_middleware(ObservabilityMiddleware)

app.include_router(home_router)
app.include_router(account_router)
app.include_router(customers_router)
app.include_router(users_router)


@app.get("/health")
def health():
    return {"status": "healthy"}
