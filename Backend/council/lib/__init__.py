# council/lib/__init__.py
from .file_system import ContentStore, FileSystemStore
from .notify import Notifier, LogNotifier, CollectingNotifier, safe_notify

__all__ = [
    "ContentStore", "FileSystemStore",
    "Notifier", "LogNotifier", "CollectingNotifier", "safe_notify",
]
