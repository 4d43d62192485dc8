"""
Command-line entry point for running the compliance API service.

Usage:
    python -m regcheck.api.server

Environment variables (a ``.env`` file is honoured):
    REGCHECK_API_HOST    Host interface to bind (default: 127.0.0.1).
    REGCHECK_API_PORT    Port for the service (default: 8000).
    REGCHECK_API_RELOAD  Set to "1" to enable autoreload (development only).

Engine options are read from the variables documented in
`regcheck.config.settings`.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import uvicorn
from dotenv import load_dotenv

logger = logging.getLogger("regcheck.api.server")


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def resolve_server_options() -> dict:
    """Host, port and reload flag for uvicorn, read from the environment."""

    port_raw = os.getenv("REGCHECK_API_PORT", "8000")
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ValueError(f"REGCHECK_API_PORT must be an integer, got {port_raw!r}") from exc
    return {
        "host": os.getenv("REGCHECK_API_HOST", "127.0.0.1"),
        "port": port,
        "reload": _env_bool(os.getenv("REGCHECK_API_RELOAD"), default=False),
    }


def main() -> None:
    """Boot the FastAPI application with configurable host/port."""

    load_dotenv()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=os.getenv("REGCHECK_LOG_LEVEL", "INFO").upper())

    options = resolve_server_options()
    logger.info(
        "Starting compliance API",
        extra={
            **options,
            "enabled_modules": os.getenv("REGCHECK_ENABLED_MODULES") or "all",
            "max_workers": os.getenv("REGCHECK_MAX_WORKERS", "1"),
            "audit_log": os.getenv("REGCHECK_AUDIT_LOG"),
        },
    )

    uvicorn.run(
        "regcheck.api.app:app",
        factory=False,
        **options,
    )


if __name__ == "__main__":
    main()
