import logging
import sys

from pydantic_settings import BaseSettings

_LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class Settings(BaseSettings):
    # ─── App ──────────────────────────────────────
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_log_level: str = "info"

    # ─── Domain ───────────────────────────────────
    domain: str = "localhost"

    # ─── Rate limiting ────────────────────────────
    rate_limit_default: str = "120/minute"
    rate_limit_storage_uri: str = "memory://"

    # ─── Reports ──────────────────────────────────
    report_preview_limit: int = 100
    dashboard_due_limit: int = 5
    expiring_lease_window_days: int = 90

    # Look for .env in current dir (Docker) or parent dir (local dev)
    model_config = {"env_file": [".env", "../.env"], "extra": "ignore"}


def _validate_settings(s: Settings) -> None:
    """Abort startup if the configuration cannot produce sane reports."""
    errors: list[str] = []

    if s.api_log_level.lower() not in _LOG_LEVELS:
        errors.append(f"API_LOG_LEVEL '{s.api_log_level}' is not one of {', '.join(_LOG_LEVELS)}")

    if s.report_preview_limit < 1:
        errors.append("REPORT_PREVIEW_LIMIT must be at least 1")

    if s.dashboard_due_limit < 1:
        errors.append("DASHBOARD_DUE_LIMIT must be at least 1")

    if s.expiring_lease_window_days < 1:
        errors.append("EXPIRING_LEASE_WINDOW_DAYS must be at least 1")

    if errors:
        if s.environment == "production":
            print("FATAL: Invalid configuration:", file=sys.stderr)
            for e in errors:
                print(f"  - {e}", file=sys.stderr)
            sys.exit(1)
        else:
            log = logging.getLogger("properly.config")
            for e in errors:
                log.warning("CONFIG VALIDATION WARNING: %s", e)


settings = Settings()
_validate_settings(settings)
