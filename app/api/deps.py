"""
Shared route dependencies and response helpers.
"""

from app.models.event import Event
from app.models.user import User
from app.services.event_store import BeanieEventStore, EventStore

_store = BeanieEventStore()


def get_event_store() -> EventStore:
    """Dependency: the store used by all routes. Overridden in tests."""
    return _store


def event_to_dict(event: Event) -> dict:
    return {
        "id": str(event.id),
        "title": event.title,
        "description": event.description,
        "status": event.status.value,
        "start_time": event.start_time.isoformat(),
        "end_time": event.end_time.isoformat(),
        "invitee_ids": [str(i) for i in event.invitee_ids],
    }


def user_to_dict(user: User) -> dict:
    return {"id": str(user.id), "name": user.name}
