# council/llm/http.py
"""
Thin aiohttp wrapper shared by the providers.

Returns status + parsed JSON for every HTTP response (2xx or not);
only transport failures raise, as LLMError. Bodies are decoded with
errors="replace", so bytes invalid in the declared charset become U+FFFD.
"""
import json
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from council.core.exceptions import LLMError


@dataclass
class HttpResponse:
    status: int
    data: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def error_message(self) -> str:
        """Best-effort error message from an error envelope."""
        if isinstance(self.data, dict):
            error = self.data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if self.data.get("message"):
                return str(self.data["message"])
        return f"HTTP {self.status}"


def _decode(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


async def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 300,
    provider: str = "http",
) -> HttpResponse:
    """POST a JSON body and return the status plus decoded JSON."""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                url,
                json=payload,
                headers=headers or {"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                text = await response.text(errors="replace")
                return HttpResponse(status=response.status, data=_decode(text), text=text)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise LLMError(provider, f"Request failed: {e or type(e).__name__}")


async def get_json(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 60,
    provider: str = "http",
) -> HttpResponse:
    """GET and return the status plus decoded JSON."""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=headers or {"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                text = await response.text(errors="replace")
                return HttpResponse(status=response.status, data=_decode(text), text=text)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise LLMError(provider, f"Request failed: {e or type(e).__name__}")
