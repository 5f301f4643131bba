"""FastAPI application wrapping the hosted agent API.

Provides:
- Agent chat proxy with tolerant JSON recovery of the reply
- Asset upload proxy (returns asset ids usable in chat)
- Direct access to the recovery pipeline for arbitrary text
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from src.models.recovery import ParseOptions
from src.parsing.orchestrator import recover
from src.web import agent_client
from src.web.agent_client import AgentApiError
from src.web.envelope import build_agent_envelope, coerce_message

logger = logging.getLogger(__name__)

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(title="Agent JSON Recovery", version="0.1.0")


def _error(status_code: int, error: str, details: str = "") -> JSONResponse:
    content = {"success": False, "error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.get("/api/health")
async def health():
    """Health check endpoint for deployment verification."""
    return {"status": "ok"}


@app.options("/api/agent")
@app.options("/api/upload")
async def preflight():
    return Response(status_code=200, headers=_CORS_HEADERS)


# ── Agent chat ───────────────────────────────────────────────────

@app.post("/api/agent")
async def agent_chat(data: dict):
    """Send a message to an agent and return its reply with parsed JSON."""
    if not agent_client.is_configured():
        return _error(500, "LYZR_API_KEY not configured")

    message = coerce_message(data.get("message"))
    agent_id = data.get("agent_id")
    if not message or not agent_id:
        return _error(400, "Missing required fields: message and agent_id are required")

    now_ms = int(time.time() * 1000)
    payload = {
        "user_id": data.get("user_id") or f"user-{now_ms}",
        "agent_id": agent_id,
        "session_id": data.get("session_id") or f"session-{now_ms}",
        "message": message,
    }
    assets = data.get("assets")
    if isinstance(assets, list) and assets:
        payload["assets"] = assets

    try:
        reply = await agent_client.send_chat(payload)
    except AgentApiError as e:
        return _error(e.status_code, f"API returned status {e.status_code}", e.details)
    except Exception as e:
        logger.exception("Agent API call failed")
        return _error(500, "Internal server error", str(e))

    raw = reply.get("response") if isinstance(reply, dict) else reply
    return build_agent_envelope(
        raw,
        agent_id=agent_id,
        user_id=payload["user_id"],
        session_id=payload["session_id"],
    )


# ── Asset upload ─────────────────────────────────────────────────

@app.post("/api/upload")
async def upload(files: list[UploadFile] | None = File(default=None)):
    """Forward uploaded files to asset storage. Returns asset ids."""
    if not agent_client.is_configured():
        return _error(500, "LYZR_API_KEY not configured")
    if not files:
        return _error(400, 'No files provided. Send files using the "files" form field.')

    forwarded = []
    for f in files:
        content = await f.read()
        forwarded.append((f.filename or "upload", content, f.content_type or "application/octet-stream"))

    try:
        data = await agent_client.upload_files(forwarded)
    except AgentApiError as e:
        return _error(e.status_code, f"Upload failed with status {e.status_code}", e.details)
    except Exception as e:
        logger.exception("Asset upload failed")
        return _error(500, "Internal server error during file upload", str(e))

    results = data.get("results") or []
    asset_ids = [r["asset_id"] for r in results if r.get("success") and r.get("asset_id")]
    successful = data.get("successful_uploads")
    logger.info("Uploaded %d file(s), %d asset id(s)", len(files), len(asset_ids))

    return {
        "success": True,
        "asset_ids": asset_ids,
        "assets": results,
        "total_files": data.get("total_files"),
        "successful_uploads": successful,
        "failed_uploads": data.get("failed_uploads"),
        "message": f"Successfully uploaded {successful or len(files)} file(s)",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Direct recovery ──────────────────────────────────────────────

@app.post("/api/parse")
async def parse_text(data: dict):
    """Run the recovery pipeline on `text` with optional `options`."""
    text = data.get("text")
    if not isinstance(text, str):
        return _error(400, "Field 'text' must be a string")

    try:
        options = ParseOptions(**(data.get("options") or {}))
    except (ValidationError, TypeError) as e:
        return _error(422, "Invalid options", str(e))

    result = recover(text, options)
    return result.model_dump(mode="json")
