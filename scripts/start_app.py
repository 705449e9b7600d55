#!/usr/bin/env python3
"""Serve the Rally API under uvicorn.

Logfire is configured before the app module is imported so that startup
failures (bad settings, unreachable providers) are reported too.
"""

import sys

import logfire
import uvicorn

from rally.config import Settings
from rally.util.logging import setup_logging
from rally.util.observability import configure_logfire


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)
    settings.check_deployable()

    logfire.info(
        "Starting Rally API",
        environment=settings.environment,
        git_sha=settings.git_sha,
        port=settings.port,
    )
    try:
        uvicorn.run(
            "rally.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,
        )
    except Exception as e:
        logfire.error(
            "Rally API failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Fail the container instead of idling without a server
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
