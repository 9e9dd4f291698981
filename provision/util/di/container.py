"""Production container."""

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from provision.util.di import select_providers


def create_container(with_fastapi: bool = True) -> AsyncContainer:
    """Container with every slot filled by its production implementation.

    Scripts pass ``with_fastapi=False`` since they open request scopes
    themselves rather than per HTTP request.
    """
    providers: list[Provider] = [*select_providers()]
    if with_fastapi:
        providers.append(FastapiProvider())
    return make_async_container(*providers)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    setup_dishka(container, app)
