"""Logfire setup for the API process and the maintenance scripts.

Application code logs through logfire directly::

    logfire.info("Invitation issued", invitation_id=str(invitation.id))

    with logfire.span("invitation_service.issue", email=email):
        ...

Third-party libraries (uvicorn, SQLAlchemy, httpx) still use stdlib
logging, which is routed to stdout at a matching level.
"""

import logging
import sys

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from provision.config import Settings

SERVICE_NAME = "provision-api"

# Loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def init_observability(settings: Settings) -> None:
    """Route stdlib logging and configure logfire. Call once per process."""
    _route_stdlib_logging(settings)
    _configure_logfire(settings)


def _route_stdlib_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )


def _configure_logfire(settings: Settings) -> None:
    """Configure logfire with the console always on and cloud export optional."""
    observability = settings.observability

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=settings.release,
        environment=settings.environment,
        token=observability.logfire_token,
        send_to_logfire=observability.exports,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        release=settings.release,
        exporting=observability.exports,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace each request by method and path.

    Headers are not captured since they carry the session cookie.
    """

    def request_attributes(request, attributes):
        return {
            **attributes,
            "method": getattr(request, "method", None),
            "path": request.url.path if hasattr(request, "url") else None,
        }

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace outbound notifier calls."""
    logfire.instrument_httpx()
