"""
User APIs: create, list, read (with the events the user attends) and delete.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from beanie import PydanticObjectId

from app.api.deps import event_to_dict, get_event_store, user_to_dict
from app.models.user import UserCreate
from app.services.event_store import EventStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=dict,
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    user = await store.create_user(payload.name)
    logger.info("Created user %s", user.id)
    return user_to_dict(user)


@router.get(
    "",
    response_model=dict,
    summary="List users",
)
async def list_users(
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    users = await store.list_users()
    return {"users": [user_to_dict(u) for u in users]}


@router.get(
    "/{user_id}",
    response_model=dict,
    summary="Get a user and their events",
)
async def get_user(
    user_id: PydanticObjectId,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> dict:
    user = await store.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    events = await store.list_events_for_owner(user_id)
    return {
        **user_to_dict(user),
        "events": [event_to_dict(e) for e in events],
    }


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
)
async def delete_user(
    user_id: PydanticObjectId,
    store: Annotated[EventStore, Depends(get_event_store)],
) -> Response:
    if not await store.delete_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    logger.info("Deleted user %s", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
