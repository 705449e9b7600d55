"""Mapping of domain and adapter errors to HTTP responses.

Routes let domain errors propagate; the handlers here turn them into JSON
error bodies with a stable shape::

    {"detail": "...", "errors": ["..."]}
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rally.adapter.error import ProviderError
from rally.domain.error import (
    BusinessRuleViolationError,
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from rally.interface.error import AuthenticationError


def _error_response(status_code: int, detail: str, errors: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"detail": detail, "errors": errors}
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logfire.info("Validation failed", path=request.url.path, errors=exc.errors)
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", exc.errors
    )


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc), [str(exc)])


async def handle_not_authorized(
    request: Request, exc: NotAuthorizedError
) -> JSONResponse:
    logfire.warn(
        "Forbidden action",
        path=request.url.path,
        resource=exc.resource,
        resource_id=exc.resource_id,
        user_id=exc.user_id,
    )
    return _error_response(
        status.HTTP_403_FORBIDDEN, "You are not allowed to do that", [str(exc)]
    )


async def handle_business_rule(
    request: Request, exc: BusinessRuleViolationError
) -> JSONResponse:
    # Covers InvalidTransitionError too
    return _error_response(status.HTTP_409_CONFLICT, str(exc), exc.reasons)


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    logfire.warn("Unhandled domain error", path=request.url.path, error=str(exc))
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), [str(exc)])


async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logfire.error(
        "Upstream provider failed",
        path=request.url.path,
        provider=exc.provider,
        error=str(exc),
    )
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        f"{exc.provider} is unavailable, please try again",
        [str(exc)],
    )


async def handle_authentication_error(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc), [str(exc)])


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    logfire.warn("Bad request", path=request.url.path, error=str(exc))
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), [str(exc)])


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on the app.

    Starlette picks the handler registered for the closest class in the
    exception's MRO, so subclasses override their bases.
    """
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(NotAuthorizedError, handle_not_authorized)
    app.add_exception_handler(BusinessRuleViolationError, handle_business_rule)
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.add_exception_handler(ValueError, handle_value_error)
