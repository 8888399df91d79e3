"""Shared test fixtures for the event scheduler tests.

Provides:
- InMemoryEventStore: an EventStore kept in dicts, no MongoDB needed
- make_event: builds events on a fixed day from "HH:MM" strings
- client: a TestClient wired to the in-memory store

Usage:
    def test_something(store, make_event):
        event = make_event("E1", "10:00", "11:00")
        ...
"""

from collections.abc import Callable, Generator, Sequence
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from beanie import PydanticObjectId
from fastapi.testclient import TestClient

from app.api.deps import get_event_store
from app.config import get_settings
from app.models.event import Event, EventStatus
from app.models.user import User


DAY = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(hhmm: str) -> datetime:
    """2024-01-01 at the given UTC wall-clock time."""
    hours, minutes = hhmm.split(":")
    return DAY.replace(hour=int(hours), minute=int(minutes))


class InMemoryEventStore:
    """EventStore with the same contract as BeanieEventStore, kept in memory."""

    def __init__(self) -> None:
        self.events: Dict[PydanticObjectId, Event] = {}
        self.users: Dict[PydanticObjectId, User] = {}
        self.persist_calls: List[Event] = []
        self.delete_many_calls: List[List[Event]] = []

    async def list_events_for_owner(self, owner_id: PydanticObjectId) -> List[Event]:
        owned = [e for e in self.events.values() if owner_id in e.invitee_ids]
        return sorted(owned, key=lambda e: (e.start_time, e.id))

    async def persist(self, event: Event) -> Event:
        self.persist_calls.append(event)
        stored = event.model_copy(update={"id": event.id or PydanticObjectId()})
        self.events[stored.id] = stored
        return stored

    async def delete_many(self, events: Sequence[Event]) -> None:
        self.delete_many_calls.append(list(events))
        for event in events:
            self.events.pop(event.id, None)

    async def get_event(self, event_id: PydanticObjectId) -> Optional[Event]:
        return self.events.get(event_id)

    async def delete_event(self, event_id: PydanticObjectId) -> bool:
        return self.events.pop(event_id, None) is not None

    async def create_user(self, name: str) -> User:
        user = User(id=PydanticObjectId(), name=name)
        self.users[user.id] = user
        return user

    async def get_user(self, user_id: PydanticObjectId) -> Optional[User]:
        return self.users.get(user_id)

    async def list_users(self) -> List[User]:
        return list(self.users.values())

    async def find_users(self, user_ids: Sequence[PydanticObjectId]) -> List[User]:
        return [self.users[i] for i in user_ids if i in self.users]

    async def delete_user(self, user_id: PydanticObjectId) -> bool:
        if self.users.pop(user_id, None) is None:
            return False
        for event_id, event in list(self.events.items()):
            if user_id in event.invitee_ids:
                remaining = [i for i in event.invitee_ids if i != user_id]
                self.events[event_id] = event.model_copy(update={"invitee_ids": remaining})
        return True

    def add(self, event: Event) -> Event:
        """Seed an event directly, bypassing the persist call log."""
        self.events[event.id] = event
        return event


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for events on 2024-01-01; times are "HH:MM" in UTC."""

    def _make(
        title: str,
        start: str,
        end: str,
        status: EventStatus = EventStatus.TODO,
        description: Optional[str] = None,
        invitees: Sequence[PydanticObjectId] = (),
    ) -> Event:
        return Event(
            id=PydanticObjectId(),
            title=title,
            description=description,
            status=status,
            start_time=at(start),
            end_time=at(end),
            invitee_ids=list(invitees),
        )

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Settings are cached; tests that patch the environment need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client(store: InMemoryEventStore) -> Generator[TestClient, None, None]:
    """TestClient without the lifespan, so no MongoDB connection is attempted."""
    from app.main import create_application

    app = create_application()
    app.dependency_overrides[get_event_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
