# backend/config.py
# Environment-aware configuration for the Property Manager backend

import os
from pathlib import Path
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Storage configuration
# The project collection lives in a single JSON file under DATA_DIR.
# Relative paths resolve against the process working directory.
DATA_DIR = Path(os.environ.get("DATA_DIR", "data").strip() or "data")
PROJECTS_FILENAME = "projects.json"
PROJECTS_FILE = DATA_DIR / PROJECTS_FILENAME

# CORS origins (the projects endpoint is public: any origin by default)
_raw_origins = os.environ.get("CORS_ORIGINS", "").strip()
CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()] if _raw_origins else ["*"]

# Methods advertised on every /api/projects response
ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE"]

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Projects file: {PROJECTS_FILE}")
print(f"[CONFIG] CORS origins: {', '.join(CORS_ORIGINS)}")
