from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from application.library import NotificationService
from server.api.rest.dependencies import get_notification_service
from server.models.schemas import NotificationSyncRequest, NotificationSyncResponse

router = APIRouter(prefix="/api/v1", tags=["notifications-v1"])


@router.get("/notifications")
async def list_notifications(
    service: NotificationService = Depends(get_notification_service),
) -> List[Dict[str, Any]]:
    return [n.to_record() for n in await service.get_notifications()]


@router.get("/notifications/unread-count")
async def unread_count(
    service: NotificationService = Depends(get_notification_service),
) -> Dict[str, int]:
    return {"unread_count": await service.get_unread_count()}


@router.post("/notifications/read")
async def mark_all_read(
    service: NotificationService = Depends(get_notification_service),
) -> List[Dict[str, Any]]:
    return [n.to_record() for n in await service.mark_all_read()]


@router.post("/notifications/sync", response_model=NotificationSyncResponse)
async def sync_notifications(
    request: NotificationSyncRequest,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationSyncResponse:
    """Feed a batch of catalog movies through the new-release synchronizer."""
    created = await service.sync_new_movie_notifications(request.movies)
    return NotificationSyncResponse(
        created=[n.to_record() for n in created],
        unread_count=await service.get_unread_count(),
    )


@router.delete("/notifications", status_code=204, response_class=Response)
async def clear_notifications(
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    # The seen-id set is kept, so cleared movies are not notified again.
    await service.clear_notifications()
    return Response(status_code=204)
