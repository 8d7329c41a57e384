import os

from dotenv import load_dotenv

# Load .env from the project root
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.strip().lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_TEST = ENV_NORMALIZED == "test"
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# The test environment always runs against a private in-memory database.
if IS_TEST:
    DATABASE_URL = "sqlite://"
else:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./crm.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# scripts/bootstrap_admin.py refuses to run unless this is set (or --force is passed)
DEV_BOOTSTRAP_ALLOW = _env_flag("DEV_BOOTSTRAP_ALLOW", "0")

# GraphQL API
GRAPHQL_INCLUDE_EXCEPTION_DETAILS = _env_flag(
    "GRAPHQL_INCLUDE_EXCEPTION_DETAILS",
    "0" if IS_PROD else "1",
)

# Web front-end -> GraphQL API
GRAPHQL_API_URL = os.getenv("GRAPHQL_API_URL", "http://localhost:8000/graphql").strip()
GRAPHQL_API_TIMEOUT_SECONDS = float(os.getenv("GRAPHQL_API_TIMEOUT_SECONDS", "20"))
GRAPHQL_API_VERIFY_TLS = _env_flag("GRAPHQL_API_VERIFY_TLS", "0" if IS_DEV else "1")

# Web session (cookie)
WEB_SESSION_SECRET = os.getenv("WEB_SESSION_SECRET", "")
WEB_SESSION_MAX_AGE_SECONDS = int(os.getenv("WEB_SESSION_MAX_AGE_SECONDS", str(8 * 60 * 60)))
WEB_SESSION_COOKIE_SECURE = _env_flag("WEB_SESSION_COOKIE_SECURE", "0" if (IS_DEV or IS_TEST) else "1")

# Passwords: "sha256" keeps the legacy unsalted digest format, "pbkdf2_sha256" uses passlib.
PASSWORD_HASH_SCHEME = os.getenv("PASSWORD_HASH_SCHEME", "sha256").strip().lower()
