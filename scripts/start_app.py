#!/usr/bin/env python3
"""Serve the provisioning API with uvicorn.

Observability is set up before uvicorn starts so that a failure while
building the app (bad settings, unreachable database) is reported.
"""

import argparse
import sys

import logfire
import uvicorn

from provision.config import Settings
from provision.util.observability import init_observability

APP_FACTORY = "provision.interface.api.app:create_app"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, help="defaults to the PORT setting")
    parser.add_argument(
        "--reload", action="store_true", help="restart on code changes (local only)"
    )
    parser.add_argument("--workers", type=int, default=1)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Settings()
    init_observability(settings)

    if args.reload and not settings.is_local:
        logfire.warn("Ignoring --reload outside local environments")
        args.reload = False

    port = args.port or settings.port
    logfire.info(
        "Serving provisioning API",
        environment=settings.environment,
        port=port,
        workers=args.workers,
    )

    try:
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=args.host,
            port=port,
            reload=args.reload,
            workers=None if args.reload else args.workers,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "API server failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
