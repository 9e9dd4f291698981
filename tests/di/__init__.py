"""Mock slot providers; importing this package registers them."""

from .container import build_test_container
from .notifier import MockNotifierProvider
from .persistence import MockPersistenceProvider

__all__ = [
    "MockNotifierProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
