from __future__ import annotations

import logging
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()
load_dotenv("hack.env")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./greenquest.db")
    SESSION_LIFETIME_HOURS = int(os.getenv("SESSION_LIFETIME_HOURS", "24"))
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_token")
    COOKIE_SECURE = _env_bool("COOKIE_SECURE")
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "groq/compound")
    GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
    LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
    CORS_ORIGINS = _env_list("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    PORT = int(os.getenv("PORT", "3000"))


def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
