from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SessionMode(str, Enum):
    online = "online"
    offline = "offline"


class SessionStatus(str, Enum):
    draft = "draft"
    published = "published"


class SessionFields(BaseModel):
    title: str = Field(..., min_length=1)
    description: str | None = None
    duration: str | None = None
    date: str | None = None
    time: str | None = None
    mentor: str | None = None
    mode: SessionMode | None = SessionMode.offline
    meeting_link: str | None = None
    location: str | None = None


class SessionUpdate(SessionFields):
    status: SessionStatus | None = None


class SessionResponse(BaseModel):
    id: int
    title: str
    description: str | None
    duration: str | None
    date: str | None
    time: str | None
    mentor: str | None
    mode: SessionMode
    meeting_link: str | None
    location: str | None
    status: SessionStatus
    owner_id: int
    registered_users: list[int]
    registered_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
