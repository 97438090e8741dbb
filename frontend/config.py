# frontend/config.py
# Dashboard settings, read once from the environment at import time

import os
from typing import Literal, Tuple

Env = Literal["local", "staging", "production"]

KNOWN_ENVS: Tuple[str, ...] = ("local", "staging", "production")
LOCAL_BACKEND_URL = "http://127.0.0.1:8000"

# Checked in order; the first non-empty one wins
BACKEND_URL_VARS: Tuple[str, ...] = ("BACKEND_URL", "API_BASE_URL")


def _read_env() -> Env:
    raw = os.environ.get("ENV", "local").strip().lower()
    return raw if raw in KNOWN_ENVS else "local"  # type: ignore[return-value]


ENV: Env = _read_env()
IS_LOCAL = (ENV == "local")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "production")

IS_DEV = IS_LOCAL


def check_backend_url(url: str, env: str) -> None:
    """
    Reject backend URLs that are unsafe for the environment.

    Outside local runs the dashboard must reach the backend over HTTPS and
    never through a loopback host.

    Raises:
        ValueError: empty URL, plain HTTP or loopback host outside local
    """
    if not url:
        raise ValueError("Backend URL cannot be empty")
    if env == "local":
        return
    if not url.startswith("https://"):
        raise ValueError(f"{env} must use HTTPS. Got: {url}")
    if "127.0.0.1" in url or "localhost" in url:
        raise ValueError(f"{env} cannot use a localhost backend. Got: {url}")


def get_backend_url() -> str:
    """
    Base URL of the projects backend, without a trailing slash.

    BACKEND_URL, then API_BASE_URL; a local run falls back to
    http://127.0.0.1:8000.

    Raises:
        RuntimeError: staging/production with nothing configured
        ValueError: configured URL fails check_backend_url
    """
    for var in BACKEND_URL_VARS:
        configured = os.environ.get(var, "").strip().rstrip("/")
        if configured:
            check_backend_url(configured, ENV)
            return configured

    if ENV == "local":
        return LOCAL_BACKEND_URL

    raise RuntimeError(f"No backend URL configured for {ENV}. Set BACKEND_URL (HTTPS, not localhost).")


# Projects collection endpoint (single path, method selects the operation)
PROJECTS_PATH = "/api/projects"

# Seconds before a request gives up, so a fetch never hangs in Loading
REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "20"))

ENABLE_DEBUG_UI = IS_DEV
ENABLE_VERBOSE_LOGGING = IS_DEV or IS_STAGING

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Debug UI: {'enabled' if ENABLE_DEBUG_UI else 'disabled'}")
