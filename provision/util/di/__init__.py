"""Dependency injection wiring."""

from collections.abc import Collection

from provision.util.di.application import ApplicationProvider
from provision.util.di.base import COMPONENTS, Component, ProviderBase
from provision.util.di.core import ConfigProvider
from provision.util.di.domain import DomainProvider
from provision.util.di.infrastructure import (
    NotifierProvider,
    PersistenceProvider,
    HttpNotifierProvider,
    PostgresPersistenceProvider,
)

PROVIDERS: list[type[ProviderBase]] = [
    ConfigProvider,
    DomainProvider,
    ApplicationProvider,
    NotifierProvider,
    PersistenceProvider,
]


def select_providers(mocked: Collection[Component] = ()) -> list[ProviderBase]:
    """Instantiate every provider, swapping in mocks for ``mocked`` slots.

    Mock providers register themselves by subclassing a slot provider, so
    the module defining them must be imported first.

    Raises:
        ValueError: If ``mocked`` names an unknown component
        LookupError: If a slot has no implementation of the requested kind
    """
    unknown = set(mocked) - COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    return [
        provider.implementation(mock=provider.slot in mocked)()
        for provider in PROVIDERS
    ]


__all__ = [
    "COMPONENTS",
    "PROVIDERS",
    "ApplicationProvider",
    "Component",
    "ConfigProvider",
    "DomainProvider",
    "HttpNotifierProvider",
    "NotifierProvider",
    "PersistenceProvider",
    "PostgresPersistenceProvider",
    "ProviderBase",
    "select_providers",
]
