"""Slot providers for external systems, with their production implementations."""

from provision.util.di.infrastructure.notifier import (
    HttpNotifierProvider,
    NotifierProvider,
)
from provision.util.di.infrastructure.persistence import (
    PersistenceProvider,
    PostgresPersistenceProvider,
)

__all__ = [
    "HttpNotifierProvider",
    "NotifierProvider",
    "PersistenceProvider",
    "PostgresPersistenceProvider",
]
