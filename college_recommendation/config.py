"""
Runtime configuration for the recommendation engine.

Values are read from the environment (a local .env file is loaded first).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# AI completion (OpenAI)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
AI_MODEL = os.getenv("AI_MODEL", "gpt-4o-mini")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "12"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "700"))
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.3"))

# College Scorecard
COLLEGE_SCORECARD_KEY = os.getenv("COLLEGE_SCORECARD_KEY", "")
COLLEGE_SCORECARD_BASE_URL = os.getenv(
    "COLLEGE_SCORECARD_BASE_URL", "https://api.data.gov/ed/collegescorecard/v1"
)
SCORECARD_TIMEOUT_SECONDS = float(os.getenv("SCORECARD_TIMEOUT_SECONDS", "8"))
SCORECARD_PAGE_SIZE = int(os.getenv("SCORECARD_PAGE_SIZE", "50"))
SCORECARD_CACHE_TTL_SECONDS = int(os.getenv("SCORECARD_CACHE_TTL_SECONDS", str(60 * 60 * 24)))
# Cached responses kept at most; least recently used entries are dropped first
SCORECARD_CACHE_MAX_ENTRIES = int(os.getenv("SCORECARD_CACHE_MAX_ENTRIES", "256"))

# Serve fixture colleges instead of calling Scorecard
USE_STUB_DATA = _env_bool("USE_STUB_DATA", default=False)

# State used for guests and for signed-in users with no state on file.
# An empty value disables the fallback.
DEFAULT_STATE = os.getenv("DEFAULT_STATE", "WA").strip()

DEFAULT_MAX_RESULTS = int(os.getenv("DEFAULT_MAX_RESULTS", "12"))
