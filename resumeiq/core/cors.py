from __future__ import annotations

from resumeiq.core.config import Settings


def cors_allowed_origins(config: Settings) -> list[str]:
    return list(config.cors_allowed_origins)


def cors_allow_origin_regex(config: Settings) -> str | None:
    regex = (config.cors_allow_origin_regex or "").strip()
    return regex or None
