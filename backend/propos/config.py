# backend/propos/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "propos-secret-key-change-in-production")

    # SQLite DB stored in backend/instance/propos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///propos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie carrying the plaintext session token
    SESSION_TOKEN_COOKIE = os.environ.get("SESSION_TOKEN_COOKIE", "propos_session")
    SESSION_ABSOLUTE_HOURS = int(os.environ.get("SESSION_ABSOLUTE_HOURS", "24"))
    SESSION_COOKIE_SECURE_FLAG = _env_bool("SESSION_COOKIE_SECURE_FLAG", False)

    # Tax policy applied when a sale is submitted without a precomputed tax
    TAX_ENABLED = _env_bool("TAX_ENABLED", True)
    TAX_RATE_PERCENT = os.environ.get("TAX_RATE_PERCENT", "10")

    # Sunday-first day-of-week labels for the weekly sales chart
    REPORT_DAY_LABELS = os.environ.get("REPORT_DAY_LABELS", "Min,Sen,Sel,Rab,Kam,Jum,Sab").split(",")
