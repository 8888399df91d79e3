"""
Event APIs.

POST /events: create an event for a set of invitees.
GET /events/{id}, DELETE /events/{id}: read or remove one event.
POST /events/merge-all/{user_id}: merge all overlapping events the user attends.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from beanie import PydanticObjectId

from app.api.deps import event_to_dict, get_event_store
from app.models.event import EventCreate
from app.services.event_service import (
    EventValidationError,
    InviteeNotFoundError,
    MergeCommitError,
    create_event,
    merge_all_overlapping_events,
)
from app.services.event_store import EventStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=dict,
    summary="Create an event",
)
async def create_event_route(
    payload: EventCreate,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    """
    Create an event. Rejects events that do not end after they start (400)
    and invitee ids that do not match a user (404).
    """
    try:
        event = await create_event(payload, store)
    except EventValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InviteeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return event_to_dict(event)


@router.get(
    "/{event_id}",
    response_model=dict,
    summary="Get an event",
)
async def get_event(
    event_id: PydanticObjectId,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    event = await store.get_event(event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event with ID {event_id} not found",
        )
    return event_to_dict(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an event",
)
async def delete_event(
    event_id: PydanticObjectId,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> Response:
    if not await store.delete_event(event_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event with ID {event_id} not found",
        )
    logger.info("Deleted event %s", event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/merge-all/{user_id}",
    response_model=dict,
    summary="Merge a user's overlapping events",
)
async def merge_all(
    user_id: PydanticObjectId,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    """
    Replace every run of overlapping events the user attends with one merged event.
    Returns the user's events after merging, ordered by start time.
    """
    user = await store.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    try:
        events = await merge_all_overlapping_events(user_id, store)
    except MergeCommitError as e:
        logger.exception("Merge for user %s not fully committed", user_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{e}. Delete these events to finish: {', '.join(str(i) for i in e.leftover_ids)}",
        )
    return {
        "user_id": str(user_id),
        "events": [event_to_dict(e) for e in events],
    }
