"""
Event creation and consolidation.

merge_all_overlapping_events is the only place that commits a MergeResult:
it saves the new merged events first, then deletes the events they replace.
Consolidations of the same user are serialized with a per-user asyncio.Lock.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Sequence, Tuple

from beanie import PydanticObjectId

from app.config import get_settings
from app.models.event import Event, EventCreate
from app.services.consolidator import consolidate
from app.services.event_store import EventStore

logger = logging.getLogger(__name__)


class EventValidationError(ValueError):
    """Request data is inconsistent (e.g. an event that ends before it starts)."""


class InviteeNotFoundError(LookupError):
    """One or more invitee ids do not belong to an existing user."""

    def __init__(self, missing_ids: Sequence[PydanticObjectId]):
        self.missing_ids = list(missing_ids)
        super().__init__(f"Invitees not found: {', '.join(str(i) for i in self.missing_ids)}")


class MergeCommitError(RuntimeError):
    """
    Merged events were saved but the events they replace could not be deleted.
    leftover_ids must be deleted before the user's events are consolidated again.
    """

    def __init__(self, user_id: PydanticObjectId, leftover_ids: Sequence[PydanticObjectId]):
        self.user_id = user_id
        self.leftover_ids = list(leftover_ids)
        super().__init__(f"Could not delete {len(self.leftover_ids)} superseded events for user {user_id}")


# user id -> (lock, number of tasks holding or waiting for it)
_owner_locks: Dict[PydanticObjectId, Tuple[asyncio.Lock, int]] = {}


@asynccontextmanager
async def _owner_lock(user_id: PydanticObjectId):
    """
    Hold the user's lock for the duration of the block.
    The entry is dropped once nobody holds or waits for it.
    """
    lock, users = _owner_locks.get(user_id, (asyncio.Lock(), 0))
    _owner_locks[user_id] = (lock, users + 1)
    try:
        async with lock:
            yield
    finally:
        lock, users = _owner_locks[user_id]
        if users == 1:
            del _owner_locks[user_id]
        else:
            _owner_locks[user_id] = (lock, users - 1)


async def create_event(payload: EventCreate, store: EventStore) -> Event:
    """Validate the request against existing users and store a new event."""
    if (payload.start_time.tzinfo is None) != (payload.end_time.tzinfo is None):
        raise EventValidationError("Start and end time must both include a timezone or both omit it")
    if payload.start_time >= payload.end_time:
        raise EventValidationError("Start time must be before end time")

    # Duplicate ids in the request mean the same invitee
    invitee_ids = list(dict.fromkeys(payload.invitee_ids))
    found = await store.find_users(invitee_ids)
    found_ids = {u.id for u in found}
    missing = [i for i in invitee_ids if i not in found_ids]
    if missing:
        raise InviteeNotFoundError(missing)

    event = Event(
        id=PydanticObjectId(),
        title=payload.title,
        description=payload.description,
        status=payload.status,
        start_time=payload.start_time,
        end_time=payload.end_time,
        invitee_ids=invitee_ids,
    )
    saved = await store.persist(event)
    logger.info("Created event %s with %d invitees", saved.id, len(invitee_ids))
    return saved


async def _delete_superseded(user_id: PydanticObjectId, superseded: List[Event], store: EventStore) -> None:
    attempts = get_settings().merge_delete_attempts
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            await store.delete_many(superseded)
            return
        except Exception as e:
            logger.warning(
                "Deleting superseded events for user %s failed (attempt %d/%d): %s",
                user_id,
                attempt,
                attempts,
                e,
            )
            last_error = e
    leftover = [e.id for e in superseded]
    logger.error("Superseded events left behind for user %s: %s", user_id, leftover)
    raise MergeCommitError(user_id, leftover) from last_error


async def merge_all_overlapping_events(user_id: PydanticObjectId, store: EventStore) -> List[Event]:
    """
    Consolidate the user's overlapping events and commit the result.
    Returns the user's events after consolidation, in chronological order.
    """
    async with _owner_lock(user_id):
        events = await store.list_events_for_owner(user_id)
        result = consolidate(events)
        if not result.merged:
            logger.info("No overlapping events for user %s (%d events)", user_id, len(events))
            return result.output

        existing_ids = {e.id for e in events}
        committed: List[Event] = []
        created = 0
        for event in result.output:
            if event.id in existing_ids:
                committed.append(event)
            else:
                committed.append(await store.persist(event))
                created += 1

        await _delete_superseded(user_id, result.superseded, store)
        logger.info("User %s: merged %d events into %d", user_id, len(result.superseded), created)
        return committed
