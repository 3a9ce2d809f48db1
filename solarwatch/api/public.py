"""Public read-only API: events, media, about page and team."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from solarwatch.database import get_session
from solarwatch.models import AboutSection, Event, MediaAsset, TeamMember
from solarwatch.schemas.content import AboutSectionRow, TeamMemberRow
from solarwatch.schemas.event import EventRow, MediaRow, YearCount
from solarwatch.services.storage import MediaStorage, get_media_storage

router = APIRouter(tags=["public"])


@router.get("/api/events", response_model=list[EventRow])
async def list_events(session: AsyncSession = Depends(get_session)):
    """List every event, oldest first."""
    result = await session.execute(select(Event).order_by(Event.event_date.asc(), Event.id.asc()))
    return result.scalars().all()


@router.get("/api/events/{event_id}/media", response_model=list[MediaRow])
async def list_event_media(event_id: int, session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(MediaAsset).where(MediaAsset.event_id == event_id).order_by(MediaAsset.id.asc())
    )
    return result.scalars().all()


@router.get("/api/timeline/years", response_model=list[YearCount])
async def get_years(session: AsyncSession = Depends(get_session)):
    """Years that have events, with counts, ascending."""
    year = extract("year", Event.event_date)
    result = await session.execute(
        select(year.label("year"), func.count(Event.id).label("count"))
        .group_by(year)
        .order_by(year.asc())
    )
    return [YearCount(year=int(row.year), count=row.count) for row in result]


@router.get("/api/about", response_model=list[AboutSectionRow])
async def list_about(session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(AboutSection).order_by(AboutSection.display_order.asc(), AboutSection.id.asc())
    )
    return result.scalars().all()


@router.get("/api/team", response_model=list[TeamMemberRow])
async def list_team(session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(TeamMember).order_by(TeamMember.id.asc()))
    return result.scalars().all()


@router.get("/media/{key:path}")
async def get_media_object(key: str, storage: MediaStorage = Depends(get_media_storage)):
    """Serve a stored image."""
    path = storage.path_for_key(key)
    if not path or not path.is_file():
        raise HTTPException(status_code=404, detail="Media not found")
    return FileResponse(path)
