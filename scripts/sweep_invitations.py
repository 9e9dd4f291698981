#!/usr/bin/env python3
"""Mark pending invitations past their expiry as expired.

Meant to run periodically (cron or a scheduled job).
"""

import asyncio
import sys

import logfire

from provision.application.usecase.invitation import (
    ExpireInvitationsRequest,
    ExpireInvitationsUseCase,
)
from provision.config import Settings
from provision.util.di.container import create_container
from provision.util.observability import init_observability


async def sweep() -> int:
    container = create_container(with_fastapi=False)
    try:
        async with container() as request_container:
            use_case = await request_container.get(ExpireInvitationsUseCase)
            response = await use_case.execute(ExpireInvitationsRequest())
        return response.expired
    finally:
        await container.close()


def main() -> int:
    """Run one sweep and log the number of expired invitations."""
    settings = Settings()

    init_observability(settings)

    try:
        expired = asyncio.run(sweep())
        logfire.info("Invitation sweep completed", expired=expired)
        return 0

    except Exception as e:
        logfire.error(
            "Invitation sweep failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
