"""HTTP client for the hosted agent API: chat inference and asset upload.

The API key stays server-side. Calls are skipped (is_configured() is False)
when LYZR_API_KEY is not set.
"""

from __future__ import annotations

import logging

import httpx

from src.config import AGENT_TIMEOUT_SECONDS, LYZR_API_KEY, LYZR_API_URL, LYZR_UPLOAD_URL

logger = logging.getLogger(__name__)


class AgentApiError(Exception):
    """The agent API answered with a non-2xx status."""

    def __init__(self, status_code: int, details: str = ""):
        super().__init__(f"Agent API returned status {status_code}")
        self.status_code = status_code
        self.details = details


def is_configured() -> bool:
    """Return True if an API key is available."""
    return bool(LYZR_API_KEY)


def _make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=AGENT_TIMEOUT_SECONDS)


async def send_chat(payload: dict) -> dict:
    """POST a chat payload and return the decoded JSON reply.

    Raises AgentApiError on non-2xx responses; transport errors propagate.
    """
    async with _make_client() as client:
        resp = await client.post(
            LYZR_API_URL,
            json=payload,
            headers={"x-api-key": LYZR_API_KEY},
        )
    if resp.is_error:
        logger.warning("Agent chat failed: %d %s", resp.status_code, resp.text[:200])
        raise AgentApiError(resp.status_code, resp.text)
    return resp.json()


async def upload_files(files: list[tuple[str, bytes, str]]) -> dict:
    """Forward (filename, content, content_type) tuples to asset storage."""
    multipart = [("files", (name, content, ctype)) for name, content, ctype in files]
    async with _make_client() as client:
        resp = await client.post(
            LYZR_UPLOAD_URL,
            files=multipart,
            headers={"x-api-key": LYZR_API_KEY},
        )
    if resp.is_error:
        logger.warning("Asset upload failed: %d %s", resp.status_code, resp.text[:200])
        raise AgentApiError(resp.status_code, resp.text)
    return resp.json()
