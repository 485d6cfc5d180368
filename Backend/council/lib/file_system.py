# council/lib/file_system.py
# LLM Council - Content store (hierarchical text blobs)

import aiofiles
from pathlib import Path
from typing import Protocol, runtime_checkable

from council.core.exceptions import PersistenceError
from council.core.logging import log


# ================================================================
# CONTRACT
# ================================================================

@runtime_checkable
class ContentStore(Protocol):
    """
    What the orchestrator needs from storage.

    Paths are "/"-separated and relative to the store root; the handle
    returned by create_blob is the normalized path itself.
    """

    async def create_blob(self, path: str, text: str) -> str: ...

    async def read_blob(self, handle: str) -> str: ...

    async def write_blob(self, handle: str, text: str) -> None: ...

    async def ensure_container(self, path: str) -> None: ...

    def exists(self, path: str) -> bool: ...


# ================================================================
# PATH SAFETY
# ================================================================

def normalize_path(path: str) -> str:
    """Store paths always use forward slashes and never start with one."""
    return path.replace("\\", "/").strip().lstrip("/")


def within_root(root: Path, candidate: Path) -> bool:
    try:
        candidate.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


# ================================================================
# FILE SYSTEM IMPLEMENTATION
# ================================================================

class FileSystemStore:
    """ContentStore backed by a directory on disk (the "vault")."""

    def __init__(self, root):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        rel = normalize_path(path)
        if not rel:
            raise PersistenceError(path, "empty path")
        target = self.root / rel
        if not within_root(self.root, target):
            raise PersistenceError(path, "path escapes the content root")
        return target

    def exists(self, path: str) -> bool:
        try:
            return self.resolve(path).exists()
        except PersistenceError:
            return False

    async def ensure_container(self, path: str) -> None:
        target = self.resolve(path)
        if target.exists() and not target.is_dir():
            raise PersistenceError(path, "a blob already exists at this path")
        target.mkdir(parents=True, exist_ok=True)
        log("STORE", f"Container ready: {normalize_path(path)}")

    async def create_blob(self, path: str, text: str) -> str:
        """Create a new blob. Refuses to overwrite an existing one."""
        target = self.resolve(path)
        if target.exists():
            raise PersistenceError(path, "blob already exists")
        await self._write(target, path, text)
        log("STORE", f"Created {normalize_path(path)} ({len(text)} chars)")
        return normalize_path(path)

    async def read_blob(self, handle: str) -> str:
        target = self.resolve(handle)
        if not target.is_file():
            raise PersistenceError(handle, "blob not found")
        try:
            async with aiofiles.open(target, "r", encoding="utf-8") as f:
                return await f.read()
        except OSError as e:
            raise PersistenceError(handle, str(e)) from e

    async def write_blob(self, handle: str, text: str) -> None:
        """Overwrite an existing blob (or create it)."""
        target = self.resolve(handle)
        await self._write(target, handle, text)
        log("STORE", f"Wrote {normalize_path(handle)} ({len(text)} chars)")

    async def _write(self, target: Path, path: str, text: str) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, "w", encoding="utf-8") as f:
                await f.write(text)
        except OSError as e:
            raise PersistenceError(path, str(e)) from e
