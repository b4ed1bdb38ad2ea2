from __future__ import annotations

import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def _is_production() -> bool:
    env = (settings.environment or "").strip().lower()
    return env in {"prod", "production"}


def _append_if(problems: list[str], *, condition: bool, message: str) -> None:
    if condition:
        problems.append(message)


def _validate_database_settings(problems: list[str]) -> None:
    url = (settings.database_url or "").strip().lower()
    _append_if(
        problems,
        condition=not url or url.startswith("sqlite"),
        message="DATABASE_URL must point at a server database (not SQLite) in production.",
    )
    _append_if(
        problems,
        condition=bool(settings.auto_create_tables),
        message="AUTO_CREATE_TABLES must be disabled in production; run the Alembic migrations instead.",
    )


def _validate_http_settings(problems: list[str]) -> None:
    origins = [str(origin).strip() for origin in settings.cors_origins or []]
    _append_if(
        problems,
        condition="*" in origins,
        message="CORS_ORIGINS must list explicit origins (no '*') in production.",
    )


def _validate_observability_settings(problems: list[str]) -> None:
    _append_if(
        problems,
        condition=not (settings.sentry_dsn or "").strip(),
        message="SENTRY_DSN must be configured in production.",
    )


def validate_production_settings() -> None:
    """
    Fail fast on development defaults when running in production.

    Local runs are never checked.
    """
    if not _is_production():
        return

    problems: list[str] = []
    _validate_database_settings(problems)
    _validate_http_settings(problems)
    _validate_observability_settings(problems)

    if problems:
        raise RuntimeError("Production configuration checks failed:\n- " + "\n- ".join(problems))
    logger.info("Production configuration checks passed")
