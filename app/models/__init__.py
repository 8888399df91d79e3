"""Beanie document models and Pydantic schemas."""

from app.models.event import Event, EventCreate, EventDocument, EventStatus
from app.models.user import User, UserCreate, UserDocument

__all__ = [
    "Event",
    "EventCreate",
    "EventDocument",
    "EventStatus",
    "User",
    "UserCreate",
    "UserDocument",
]
