#!/usr/bin/env python3
"""Merge user accounts that share an email.

Usage:
    scripts/resolve_duplicates.py someone@example.com
    scripts/resolve_duplicates.py --all

Each email is merged in its own transaction. Emails that need manual review
are reported and skipped; the exit code is 1 if any were skipped.
"""

import argparse
import asyncio
import sys

import logfire

from provision.application.usecase.user import (
    ResolveDuplicatesRequest,
    ResolveDuplicatesUseCase,
)
from provision.config import Settings
from provision.domain.error import DomainError
from provision.domain.repository import UserRepository
from provision.util.di.container import create_container
from provision.util.observability import init_observability


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("email", nargs="?", help="Email whose accounts to merge")
    target.add_argument(
        "--all", action="store_true", help="Merge every email with several accounts"
    )
    return parser.parse_args(argv)


async def resolve(emails: list[str] | None) -> int:
    """Merge the given emails, or every duplicated email when None.

    Returns:
        Number of emails that could not be merged
    """
    container = create_container(with_fastapi=False)
    failures = 0
    try:
        if emails is None:
            async with container() as request_container:
                user_repository = await request_container.get(UserRepository)
                emails = [e.root for e in await user_repository.find_duplicate_emails()]
            logfire.info("Duplicate emails found", count=len(emails))

        for email in emails:
            try:
                async with container() as request_container:
                    use_case = await request_container.get(ResolveDuplicatesUseCase)
                    result = await use_case.execute(ResolveDuplicatesRequest(email=email))
            except DomainError as e:
                failures += 1
                logfire.warn("Duplicate merge skipped", email=email, code=e.code, reason=e.message)
                continue

            logfire.info(
                "Duplicate merge done",
                email=email,
                changed=result.changed,
                survivor_id=result.survivor.id,
                deleted=len(result.deleted_user_ids),
            )
    finally:
        await container.close()

    return failures


def main(argv: list[str] | None = None) -> int:
    """Run the merge and report skipped emails through the exit code."""
    args = parse_args(argv)
    settings = Settings()

    init_observability(settings)

    try:
        failures = asyncio.run(resolve(None if args.all else [args.email]))
        return 1 if failures else 0

    except Exception as e:
        logfire.error(
            "Duplicate resolution failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
