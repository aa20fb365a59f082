"""
Pramanta - Centralized Configuration
=====================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GEMINI_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  and the server refuses to start.  The raw value is never exposed in
  repr, logs, or tracebacks.

Paths
-----
All filesystem paths are ``Path.resolve()``-d at class level so they
work identically on Windows, WSL, and Linux.

Resilience
----------
``GENERATION_*`` fields shape the retry schedule for transient Gemini
overloads (3 attempts, 1s → 2s by default).  ``REQUEST_TIMEOUT_SECONDS``
bounds a whole chat request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required** — the app will refuse
    to start until they are provided.

    Attributes
    ----------
    GEMINI_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    LLM_MODEL : str
        Model identifier for the response-generation LLM.
    DATA_DIR : Path
        Directory holding ``<category>.csv`` and ``<category>.txt``.
    CACHE_TTL_SECONDS : float
        Lifetime of a cached category record set.
    MAX_QUERY_LENGTH : int
        Longest accepted user query, in characters.
    GENERATION_MAX_ATTEMPTS : int
        Total Gemini attempts per request (first call included).
    REQUEST_TIMEOUT_SECONDS : float
        Outer bound on a single chat request.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"

    # ── API Keys (REQUIRED, no default) ───────────────────────────────
    GEMINI_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 0.7

    # ── Category Data ──────────────────────────────────────────────────
    CSV_DELIMITER: str = ";"
    CACHE_TTL_SECONDS: float = 300.0
    MAX_QUERY_LENGTH: int = 1500

    # ── Generation Retry Policy ────────────────────────────────────────
    GENERATION_MAX_ATTEMPTS: int = 3
    GENERATION_INITIAL_DELAY: float = 1.0
    GENERATION_BACKOFF_FACTOR: float = 2.0
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    # ── HTTP Server ────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0.0–2.0, got {v}")
        return v


    @field_validator("CACHE_TTL_SECONDS", "REQUEST_TIMEOUT_SECONDS")
    @classmethod
    def _positive_seconds(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Durations must be > 0, got {v}")
        return v


    @field_validator("GENERATION_MAX_ATTEMPTS")
    @classmethod
    def _attempts_range(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError(f"GENERATION_MAX_ATTEMPTS must be 1–10, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from pramanta.config.settings import settings
settings = Settings()
