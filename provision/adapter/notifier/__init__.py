"""Notifier adapters."""

from .client import HttpNotifier, MockNotifier, SentMessage

__all__ = ["HttpNotifier", "MockNotifier", "SentMessage"]
