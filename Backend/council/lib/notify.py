# council/lib/notify.py
"""
Notification sinks - fire-and-forget progress messages for the user.
"""
from typing import List, Protocol, runtime_checkable

from council.core.logging import log


@runtime_checkable
class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class LogNotifier:
    """Writes notifications to the COUNCIL log scope."""

    def notify(self, message: str) -> None:
        log("COUNCIL", f"📣 {message}")


class CollectingNotifier:
    """Keeps every notification in memory (API run summaries, tests)."""

    def __init__(self, echo: bool = False) -> None:
        self.messages: List[str] = []
        self.echo = echo

    def notify(self, message: str) -> None:
        self.messages.append(message)
        if self.echo:
            log("COUNCIL", f"📣 {message}")


def safe_notify(notifier: Notifier, message: str) -> None:
    """Deliver a notification; a failing sink never reaches the pipeline."""
    try:
        notifier.notify(message)
    except Exception as e:
        log("COUNCIL", f"⚠️ Notifier failed: {e}")
