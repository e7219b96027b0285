"""
Environment-driven settings.

All values are read once at import. A local .env file is honoured.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# ── Generation ─────────────────────────────────────────────────────────────────
CREDENTIAL_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

QUESTIFY_MODEL = os.getenv("QUESTIFY_MODEL", "gemini-2.5-flash")
QUESTIFY_LLM_BASE_URL = os.getenv(
    "QUESTIFY_LLM_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta/openai/",
)


def get_generation_api_key() -> Optional[str]:
    """Return the first non-empty credential, read at call time so tests can unset it."""
    for name in CREDENTIAL_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


# ── Database ───────────────────────────────────────────────────────────────────
POSTGRES_USER = os.getenv("POSTGRES_USER", "questify_user")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "questify_pass")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "questify")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# ── Auth ───────────────────────────────────────────────────────────────────────
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "questify-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# ── HTTP ───────────────────────────────────────────────────────────────────────
CORS_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

# ── Client ─────────────────────────────────────────────────────────────────────
QUESTIFY_API_URL = os.getenv("QUESTIFY_API_URL", "http://localhost:8000")
