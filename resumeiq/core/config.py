from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_MODELS = {
    "groq": "llama-3.3-70b-versatile",
    "openai": "gpt-4o-mini",
}

_DEFAULT_BASE_URLS = {
    "groq": "https://api.groq.com/openai/v1",
    "openai": None,
}

QUOTA_SCOPES = {"global", "owner"}


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    rate_limit_enabled: bool
    rate_limit: str
    ai_rate_limit: str
    database_path: str
    storage_root: str
    jwt_secret: str | None
    jwt_algorithm: str
    jwt_audience: str | None
    ai_provider: str
    ai_model: str
    ai_api_key: str | None
    ai_base_url: str | None
    ai_temperature: float
    ai_timeout_s: float
    daily_report_limit: int
    quota_scope: str
    max_upload_bytes: int
    min_extracted_chars: int


def _ai_api_key(provider: str) -> str | None:
    explicit = _get_env("AI_API_KEY")
    if explicit:
        return explicit.strip()
    fallback = "GROQ_API_KEY" if provider == "groq" else "OPENAI_API_KEY"
    value = _get_env(fallback)
    return value.strip() if value else None


def load_settings() -> Settings:
    provider = (_get_env("AI_PROVIDER", "groq") or "groq").strip().lower()
    return Settings(
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        rate_limit=_get_env("RATE_LIMIT", "100/15 minutes") or "100/15 minutes",
        ai_rate_limit=_get_env("AI_RATE_LIMIT", "20/hour") or "20/hour",
        database_path=_get_env("DATABASE_PATH", "data/resumeiq.db") or "data/resumeiq.db",
        storage_root=_get_env("STORAGE_ROOT", "data/storage") or "data/storage",
        jwt_secret=_get_env("JWT_SECRET"),
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256") or "HS256",
        jwt_audience=_get_env("JWT_AUDIENCE", "authenticated"),
        ai_provider=provider,
        ai_model=(_get_env("AI_MODEL") or _DEFAULT_MODELS.get(provider, "gpt-4o-mini")).strip(),
        ai_api_key=_ai_api_key(provider),
        ai_base_url=_get_env("AI_BASE_URL") or _DEFAULT_BASE_URLS.get(provider),
        ai_temperature=_get_env_float("AI_TEMPERATURE", 0.2),
        ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 30.0),
        daily_report_limit=_get_env_int("DAILY_REPORT_LIMIT", 10),
        quota_scope=(_get_env("QUOTA_SCOPE", "global") or "global").strip().lower(),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
        min_extracted_chars=_get_env_int("MIN_EXTRACTED_CHARS", 80),
    )


def validate_settings(config: Settings) -> None:
    """Fail fast on startup instead of on the first request that needs a missing value."""
    problems: list[str] = []
    if not config.jwt_secret:
        problems.append("JWT_SECRET")
    if config.ai_provider not in _DEFAULT_MODELS:
        problems.append(f"AI_PROVIDER (unsupported value '{config.ai_provider}')")
    elif not config.ai_api_key:
        problems.append("AI_API_KEY")
    if config.quota_scope not in QUOTA_SCOPES:
        problems.append(f"QUOTA_SCOPE (must be one of: {', '.join(sorted(QUOTA_SCOPES))})")
    if problems:
        raise RuntimeError(
            "Missing or invalid environment variables:\n  " + "\n  ".join(problems)
        )


settings = load_settings()
