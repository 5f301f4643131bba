"""Shape agent replies into the JSON envelope returned by /api/agent.

The recovery core only reports what it could parse. The decisions here
(which results replace the raw text, when a reply "looks usable") are
policy of the HTTP layer.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from src.models.recovery import ParseOptions
from src.parsing.orchestrator import recover

logger = logging.getLogger(__name__)

# Agents routinely append a sentence after the JSON; accept it and keep the
# untouched text in raw_response.
REPLY_OPTIONS = ParseOptions(allow_partial=True)

_DATA_FIELDS = ("result", "answer", "message", "data")


def coerce_message(message: Any) -> str | None:
    """Turn whatever the front end sent as `message` into a string."""
    if message is None:
        return None
    if isinstance(message, str):
        return message
    if isinstance(message, (dict, list)):
        try:
            return json.dumps(message)
        except (TypeError, ValueError):
            return str(message)
    return str(message)


def parse_agent_response(raw: Any) -> Any:
    """Recover structured data from an agent reply.

    Strings that recover into an object or array are replaced by it; other
    strings are kept as plain text. Non-string replies pass through.
    """
    if not isinstance(raw, str):
        return raw

    result = recover(raw, REPLY_OPTIONS)
    if result.succeeded and isinstance(result.data, (dict, list)):
        return result.data

    logger.info("Agent reply kept as plain text (%d chars)", len(raw))
    return raw


def parse_succeeded(parsed: Any) -> bool:
    """False when the agent itself reported a JSON/parse failure."""
    if not isinstance(parsed, dict) or parsed.get("success") is not False:
        return True
    error = parsed.get("error")
    return not (isinstance(error, str) and ("JSON" in error or "parse" in error))


def has_valid_data(parsed: Any, raw: Any) -> bool:
    """Heuristic: does the reply carry something worth showing?"""
    if isinstance(parsed, dict) and any(parsed.get(f) for f in _DATA_FIELDS):
        return True
    return isinstance(raw, str) and len(raw) > 0


def build_agent_envelope(raw: Any, *, agent_id: str, user_id: str, session_id: str) -> dict:
    """Build the success envelope for one agent reply."""
    parsed = parse_agent_response(raw)
    succeeded = parse_succeeded(parsed)
    if not succeeded:
        parsed = {**parsed, "raw_response": raw}

    return {
        "success": True,
        "response": parsed,
        "raw_response": raw,
        "agent_id": agent_id,
        "user_id": user_id,
        "session_id": session_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "_parse_succeeded": succeeded,
        "_has_valid_data": has_valid_data(parsed, raw),
    }
