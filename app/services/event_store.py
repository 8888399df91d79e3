"""
Event and user persistence.

EventStore is what the services and routes depend on. BeanieEventStore is the
MongoDB implementation; it converts between documents and the plain Event/User
values so nothing above this layer sees Beanie documents.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from beanie import PydanticObjectId
from beanie.operators import In

from app.models.event import Event, EventDocument
from app.models.user import User, UserDocument

logger = logging.getLogger(__name__)


class EventStore(Protocol):
    async def list_events_for_owner(self, owner_id: PydanticObjectId) -> List[Event]: ...

    async def persist(self, event: Event) -> Event: ...

    async def delete_many(self, events: Sequence[Event]) -> None: ...

    async def get_event(self, event_id: PydanticObjectId) -> Optional[Event]: ...

    async def delete_event(self, event_id: PydanticObjectId) -> bool: ...

    async def create_user(self, name: str) -> User: ...

    async def get_user(self, user_id: PydanticObjectId) -> Optional[User]: ...

    async def list_users(self) -> List[User]: ...

    async def find_users(self, user_ids: Sequence[PydanticObjectId]) -> List[User]: ...

    async def delete_user(self, user_id: PydanticObjectId) -> bool: ...


class BeanieEventStore:
    """EventStore backed by MongoDB through Beanie. Requires init_beanie to have run."""

    async def list_events_for_owner(self, owner_id: PydanticObjectId) -> List[Event]:
        """All events the user attends, oldest start first; equal starts ordered by id."""
        docs = (
            await EventDocument.find({"invitee_ids": owner_id})
            .sort(+EventDocument.start_time, +EventDocument.id)
            .to_list()
        )
        return [d.to_event() for d in docs]

    async def persist(self, event: Event) -> Event:
        """Insert the event, keeping its id if one was already assigned."""
        doc = EventDocument.from_event(event)
        await doc.insert()
        logger.debug("Inserted event %s", doc.id)
        return doc.to_event()

    async def delete_many(self, events: Sequence[Event]) -> None:
        ids = [e.id for e in events if e.id is not None]
        if not ids:
            return
        await EventDocument.find(In(EventDocument.id, ids)).delete()
        logger.debug("Deleted %d events", len(ids))

    async def get_event(self, event_id: PydanticObjectId) -> Optional[Event]:
        doc = await EventDocument.get(event_id)
        return doc.to_event() if doc else None

    async def delete_event(self, event_id: PydanticObjectId) -> bool:
        doc = await EventDocument.get(event_id)
        if not doc:
            return False
        await doc.delete()
        return True

    async def create_user(self, name: str) -> User:
        doc = UserDocument(name=name)
        await doc.insert()
        return doc.to_user()

    async def get_user(self, user_id: PydanticObjectId) -> Optional[User]:
        doc = await UserDocument.get(user_id)
        return doc.to_user() if doc else None

    async def list_users(self) -> List[User]:
        docs = await UserDocument.find_all().sort(+UserDocument.created_at).to_list()
        return [d.to_user() for d in docs]

    async def find_users(self, user_ids: Sequence[PydanticObjectId]) -> List[User]:
        if not user_ids:
            return []
        docs = await UserDocument.find(In(UserDocument.id, list(user_ids))).to_list()
        return [d.to_user() for d in docs]

    async def delete_user(self, user_id: PydanticObjectId) -> bool:
        """Delete the user and drop them from every event they were invited to."""
        doc = await UserDocument.get(user_id)
        if not doc:
            return False
        await EventDocument.find({"invitee_ids": user_id}).update({"$pull": {"invitee_ids": user_id}})
        await doc.delete()
        return True
