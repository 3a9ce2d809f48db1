from datetime import date

from pydantic import BaseModel

from solarwatch.schemas.common import Success


class EventFields(BaseModel):
    """Writable event columns. Only event_date and title are enforced server-side."""

    event_date: date | None = None
    event_type: str | None = None
    location: str | None = None
    title: str | None = None
    short_description: str | None = None
    summary: str | None = None
    impact_on_communication: str | None = None


class EventRow(BaseModel):
    id: int
    event_date: date
    event_type: str | None = None
    location: str | None = None
    title: str
    short_description: str | None = None
    summary: str | None = None
    impact_on_communication: str | None = None

    model_config = {"from_attributes": True}


class MediaRow(BaseModel):
    id: int
    event_id: int
    url: str
    caption: str | None = None

    model_config = {"from_attributes": True}


class MediaLink(BaseModel):
    """JSON body for attaching an already hosted image."""

    url: str | None = None
    caption: str | None = None


class CaptionUpdate(BaseModel):
    caption: str | None = None


class MediaCreated(Success):
    id: int
    event_id: int
    url: str
    caption: str | None = None


class CaptionUpdated(Success):
    id: int
    caption: str | None = None


class YearCount(BaseModel):
    year: int
    count: int
