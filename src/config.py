"""Environment-driven settings.

Values are read once at import. A `.env` file in the working directory is
loaded first so local development does not need exported variables.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

LYZR_API_KEY = os.environ.get("LYZR_API_KEY", "")
LYZR_API_URL = os.environ.get("LYZR_API_URL", "https://agent-prod.studio.lyzr.ai/v3/inference/chat/")
LYZR_UPLOAD_URL = os.environ.get("LYZR_UPLOAD_URL", "https://agent-prod.studio.lyzr.ai/v3/assets/upload")
AGENT_TIMEOUT_SECONDS = float(os.environ.get("AGENT_TIMEOUT_SECONDS", "120"))

# Upper bound on text handed to the recovery pipeline. Every strategy is a
# linear scan, but extraction multiplies that by max_blocks.
MAX_INPUT_CHARS = int(os.environ.get("MAX_INPUT_CHARS", "1000000"))
