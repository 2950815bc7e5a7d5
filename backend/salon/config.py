# backend/salon/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/salon.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///salon.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Business-day boundaries for report presets ("today", "this week", ...)
    SALON_TIMEZONE = os.environ.get("SALON_TIMEZONE", "Asia/Seoul")

    # Loyalty card: stamps needed before the benefit is unlocked
    STAMP_GOAL = int(os.environ.get("STAMP_GOAL", "10"))

    # When True, completing a seat also closes the reservation it came from.
    COMPLETE_LINKED_RESERVATION = _env_bool("COMPLETE_LINKED_RESERVATION", False)

    SESSION_ABSOLUTE_TIMEOUT_HOURS = int(os.environ.get("SESSION_ABSOLUTE_TIMEOUT_HOURS", "24"))
    SESSION_IDLE_TIMEOUT_HOURS = int(os.environ.get("SESSION_IDLE_TIMEOUT_HOURS", "12"))

    # Front-end dev server and the desktop shell webview
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,tauri://localhost,http://tauri.localhost",
        ).split(",")
        if origin.strip()
    ]
