"""ASGI application factory for the provisioning API."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from provision.config import LOCAL_FRONTEND_ORIGINS, Settings
from provision.interface.api.routes import health, invitations, users
from provision.interface.error import register_error_handlers
from provision.util.di.container import create_container, setup_di
from provision.util.observability import instrument_fastapi, instrument_httpx

ROUTERS = (health.router, invitations.router, users.router)

# Verbs and headers the admin UI sends along with the session cookie
CORS_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Accept", "Content-Type", "Origin"]


def create_app(
    container: AsyncContainer | None = None, instrument: bool = True
) -> FastAPI:
    """Build the provisioning API.

    Expects logfire to be configured already; scripts/start_app.py does so
    before uvicorn calls this factory.

    Args:
        container: DI container; the production container when omitted
        instrument: Attach Logfire instrumentation (off in tests)
    """
    settings = Settings()

    api = FastAPI(
        title="Provision API",
        summary="Invitations, accounts, roles and access",
        version="0.1.0",
        docs_url=None if settings.environment == "production" else "/docs",
    )

    if instrument:
        instrument_httpx()
        instrument_fastapi(api)

    api.add_middleware(
        CORSMiddleware,
        allow_origins=sorted({settings.frontend_url, *LOCAL_FRONTEND_ORIGINS}),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        max_age=600,
    )

    setup_di(api, container or create_container())
    register_error_handlers(api)
    for router in ROUTERS:
        api.include_router(router)

    return api
