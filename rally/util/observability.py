"""Tracing and structured logs via Logfire.

Spans come from three places: incoming FastAPI requests, SQL statements
and the outbound httpx calls to MapTiler and Supabase Storage. Services add
their own spans around multi-step writes::

    with logfire.span("activity_service.join", activity_id=str(activity_id)):
        ...
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from rally.config import Settings

SERVICE_NAME = "rally-backend"

# MapTiler takes its key as a query parameter and Supabase its service key
# as a header; neither may end up in exported spans.
_SECRET_PATTERNS = ["service_key", "apikey", "maptiler_key", "auth_token"]


def _should_send(settings: Settings) -> bool:
    # Explicit flag wins, otherwise a configured token opts in
    explicit = settings.observability.send_to_logfire
    if explicit is not None:
        return explicit
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once per process.

    Local runs print spans to the console only. Cloud export is enabled
    through OBSERVABILITY__LOGFIRE_TOKEN or OBSERVABILITY__SEND_TO_LOGFIRE.

    Args:
        settings: Application settings
    """
    send = _should_send(settings)
    logfire.configure(
        service_name=SERVICE_NAME,
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=_SECRET_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def _request_attributes(request, attributes):
    # Path parameters carry the activity, invitation or user being acted on
    mapped = {**attributes, "path": request.url.path}
    path_params = getattr(request, "path_params", None)
    if path_params:
        mapped["path_params"] = dict(path_params)
    return mapped


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every API request, tagged with its path parameters.

    Headers are never captured since they carry the bearer token.
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL statements issued through the async engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace outbound geocoding and storage requests."""
    logfire.instrument_httpx()
