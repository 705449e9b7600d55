"""Notification routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request

from rally.application.usecase.notification import (
    ListNotificationsUseCase,
    MarkReadUseCase,
)
from rally.application.usecase.notification.list_notifications import (
    ListNotificationsRequest,
    ListNotificationsResponse,
)
from rally.application.usecase.notification.mark_read import (
    MarkReadRequest,
    MarkReadResponse,
)
from rally.domain.service import JWTService
from rally.domain.value import NotificationId
from rally.interface.api.security import authenticate

router = APIRouter(
    prefix="/notifications", tags=["notifications"], route_class=DishkaRoute
)


@router.get("", response_model=ListNotificationsResponse)
async def list_notifications(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    list_notifications_use_case: FromDishka[ListNotificationsUseCase],
    limit: int | None = Query(default=None, ge=1, le=100),
) -> ListNotificationsResponse:
    """Latest notifications and the unread count."""
    token = authenticate(http_request, jwt_service)
    return await list_notifications_use_case.execute(
        ListNotificationsRequest(user_id=token.user_id, limit=limit)
    )


@router.post("/read-all", response_model=MarkReadResponse)
async def mark_all_read(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    mark_read_use_case: FromDishka[MarkReadUseCase],
) -> MarkReadResponse:
    """Mark every notification read."""
    token = authenticate(http_request, jwt_service)
    return await mark_read_use_case.execute(MarkReadRequest(user_id=token.user_id))


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_read(
    notification_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    mark_read_use_case: FromDishka[MarkReadUseCase],
) -> MarkReadResponse:
    """Mark one notification read."""
    token = authenticate(http_request, jwt_service)
    return await mark_read_use_case.execute(
        MarkReadRequest(
            user_id=token.user_id, notification_id=NotificationId(notification_id)
        )
    )
