"""
User models.

A user only stores a display name. The events a user attends are derived by
querying events whose invitee_ids contain the user's id.
"""

from datetime import datetime
from typing import Optional

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field


class User(BaseModel):
    """Plain user value returned by the store."""

    id: Optional[PydanticObjectId] = None
    name: str


class UserCreate(BaseModel):
    """Request body for creating a user."""

    name: str = Field(min_length=1)


class UserDocument(Document):
    """
    User document. id is MongoDB ObjectId.
    """

    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ada Lovelace",
                "created_at": "2025-01-01T00:00:00Z",
            }
        }

    def to_user(self) -> User:
        return User(id=self.id, name=self.name)
