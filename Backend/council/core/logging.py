# council/core/logging.py
import sys
import os
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind DEBUG

INFO_SCOPES = {
    "COUNCIL",      # Run lifecycle
    "IDEATION",     # Ideator fan-out
    "EXECUTION",    # Executor fan-out
    "JUDGMENT",     # Judge
    "LLM",          # Provider boundary
    "OPENROUTER",   # Candidate chain
    "API",          # HTTP surface
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "PARSER",
    "STORE",
    "PROMPTS",
}


def _debug_mode() -> bool:
    return os.getenv("COUNCIL_DEBUG", "false").lower() == "true"


def log(scope: str, message: str, data: Any = None, run_id: Optional[str] = None) -> None:
    """
    Unified logging function for the council.

    Only INFO_SCOPES are shown by default.
    Set COUNCIL_DEBUG=true to see all scopes.
    """
    if not _debug_mode() and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if run_id:
        prefix += f" [{run_id}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str, run_id: Optional[str] = None) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    if run_id:
        print(f"[{timestamp}] [{scope}] [{run_id}] {title}")
    else:
        print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()


def log_preview(scope: str, label: str, text: str, run_id: Optional[str] = None, max_chars: int = 500) -> None:
    """
    Log the head of a raw model response (used when parsing fails).
    """
    preview = (text or "")[:max_chars]
    log(scope, f"{label} ({len(text or '')} chars):", run_id=run_id)
    if scope in INFO_SCOPES or _debug_mode():
        for line in preview.split("\n")[:10]:
            print(f"  {line}")
        sys.stdout.flush()
