"""
STEMI Detector - Configuration
==============================
Service-level settings read from the environment (and a project-level
.env file when present). Model coefficients and risk thresholds are code
constants in ``stemi.core.inference`` and are deliberately not configurable
here.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent                 # stemi/
PROJECT_ROOT = PACKAGE_DIR.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

APP_NAME = "STEMI Detector API"
APP_VERSION = "1.0.0"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("STEMI_LOG_LEVEL", "INFO")
LOG_FILE: str = os.getenv("STEMI_LOG_FILE", "")               # empty = console only

# ── HTTP ────────────────────────────────────────────────────────────────
CORS_ORIGINS: List[str] = _env_list("STEMI_CORS_ORIGINS", "*")
HOST: str = os.getenv("STEMI_HOST", "0.0.0.0")
PORT: int = int(os.getenv("STEMI_PORT", "8000"))

# ── Validation ──────────────────────────────────────────────────────────
REJECT_UNKNOWN_FIELDS: bool = _env_bool("STEMI_REJECT_UNKNOWN_FIELDS", False)
