"""
Event models.

Event is the plain value the consolidator and services work with.
EventDocument is its MongoDB representation (Beanie ODM); only the store touches it.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field


class EventStatus(str, Enum):
    """Progress states of a calendar event."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Event(BaseModel):
    """
    A calendar event attended by one or more users.
    id is None until the event has been assigned an identity.
    """

    id: Optional[PydanticObjectId] = None
    title: str
    description: Optional[str] = None
    status: EventStatus = EventStatus.TODO
    start_time: datetime
    end_time: datetime
    invitee_ids: List[PydanticObjectId] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Design review",
                "description": "Walk through the new calendar view.",
                "status": "TODO",
                "start_time": "2024-01-01T10:00:00Z",
                "end_time": "2024-01-01T11:00:00Z",
                "invitee_ids": ["65a1f0c2e4b0a1b2c3d4e5f6"],
            }
        }


class EventCreate(BaseModel):
    """Request body for creating an event. start < end is checked by the service."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: EventStatus = EventStatus.TODO
    start_time: datetime
    end_time: datetime
    invitee_ids: List[PydanticObjectId] = Field(default_factory=list)


class EventDocument(Document):
    """
    Stored event. invitee_ids is indexed so a user's events can be listed
    without scanning the collection.
    """

    title: str
    description: Optional[str] = None
    status: EventStatus = EventStatus.TODO
    start_time: datetime
    end_time: datetime
    invitee_ids: List[PydanticObjectId] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "events"
        use_state_management = True
        indexes = ["invitee_ids", "start_time"]

    @classmethod
    def from_event(cls, event: Event) -> "EventDocument":
        return cls(**event.model_dump())

    def to_event(self) -> Event:
        return Event(
            id=self.id,
            title=self.title,
            description=self.description,
            status=self.status,
            start_time=self.start_time,
            end_time=self.end_time,
            invitee_ids=list(self.invitee_ids),
        )
