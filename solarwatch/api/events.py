"""Admin event and media endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from solarwatch.api.deps import get_current_admin
from solarwatch.config import settings
from solarwatch.database import get_session
from solarwatch.models import Event, MediaAsset
from solarwatch.schemas.common import Created, Success
from solarwatch.schemas.event import (
    CaptionUpdate,
    CaptionUpdated,
    EventFields,
    EventRow,
    MediaCreated,
    MediaLink,
    MediaRow,
)
from solarwatch.services.storage import MediaStorage, get_media_storage, sniff_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-events"], dependencies=[Depends(get_current_admin)])


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def _apply_fields(event: Event, fields: EventFields) -> None:
    if not fields.event_date or not _clean(fields.title):
        raise HTTPException(status_code=400, detail="event_date and title are required.")

    event.event_date = fields.event_date
    event.event_type = _clean(fields.event_type)
    event.location = _clean(fields.location)
    event.title = _clean(fields.title)
    event.short_description = _clean(fields.short_description)
    event.summary = _clean(fields.summary)
    event.impact_on_communication = _clean(fields.impact_on_communication)


async def _get_event(session: AsyncSession, event_id: int) -> Event:
    event = await session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found.")
    return event


async def _get_event_media(session: AsyncSession, event_id: int, media_id: int) -> MediaAsset:
    media = await session.get(MediaAsset, media_id)
    if not media or media.event_id != event_id:
        raise HTTPException(status_code=404, detail="Media asset not found.")
    return media


# ---- Events ----


@router.get("/events", response_model=list[EventRow])
async def list_events(session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(Event).order_by(Event.event_date.asc(), Event.id.asc()))
    return result.scalars().all()


@router.post("/events", status_code=201, response_model=Created)
async def create_event(fields: EventFields, session: AsyncSession = Depends(get_session)):
    event = Event()
    _apply_fields(event, fields)
    session.add(event)
    await session.commit()

    logger.info("Created event %d (%s)", event.id, event.title)
    return Created(id=event.id)


@router.put("/events/{event_id}", response_model=Success)
async def update_event(event_id: int, fields: EventFields, session: AsyncSession = Depends(get_session)):
    event = await _get_event(session, event_id)
    _apply_fields(event, fields)
    await session.commit()
    return Success()


@router.delete("/events/{event_id}", response_model=Success)
async def delete_event(
    event_id: int,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Delete an event; its media rows go with it and stored images are removed best-effort."""
    event = await _get_event(session, event_id)
    urls = (
        await session.execute(select(MediaAsset.url).where(MediaAsset.event_id == event_id))
    ).scalars().all()

    await session.delete(event)
    await session.commit()

    for url in urls:
        await storage.delete_url(url)

    logger.info("Deleted event %d with %d media", event_id, len(urls))
    return Success()


# ---- Media ----


@router.get("/events/{event_id}/media", response_model=list[MediaRow])
async def list_media(event_id: int, session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(MediaAsset).where(MediaAsset.event_id == event_id).order_by(MediaAsset.id.asc())
    )
    return result.scalars().all()


async def _store_upload(storage: MediaStorage, event_id: int, upload: UploadFile) -> str:
    data = await upload.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    if len(data) > settings.media_max_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large.")

    mime = sniff_image(data)
    if mime is None:
        raise HTTPException(status_code=400, detail="Uploaded file is not a supported image.")

    return await storage.put(storage.event_media_key(event_id, mime), data)


@router.post("/events/{event_id}/media", status_code=201, response_model=MediaCreated)
async def create_media(
    event_id: int,
    request: Request,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Attach an image: multipart ``file`` + ``caption``, or JSON ``{url, caption}``."""
    await _get_event(session, event_id)

    stored_url = None
    if request.headers.get("content-type", "").startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise HTTPException(status_code=400, detail="file is required.")
        stored_url = await _store_upload(storage, event_id, upload)
        url = stored_url
        caption = _clean(form.get("caption"))
    else:
        try:
            link = MediaLink.model_validate(await request.json())
        except (ValueError, ValidationError):
            raise HTTPException(status_code=400, detail="url is required.")
        url = _clean(link.url)
        if not url:
            raise HTTPException(status_code=400, detail="url is required.")
        caption = _clean(link.caption)

    media = MediaAsset(event_id=event_id, url=url, caption=caption)
    session.add(media)
    try:
        await session.commit()
    except SQLAlchemyError:
        if stored_url:
            await storage.delete_url(stored_url)
        raise

    logger.info("Attached media %d to event %d", media.id, event_id)
    return MediaCreated(id=media.id, event_id=event_id, url=media.url, caption=media.caption)


@router.patch("/events/{event_id}/media/{media_id}", response_model=CaptionUpdated)
async def update_media_caption(
    event_id: int,
    media_id: int,
    body: CaptionUpdate,
    session: AsyncSession = Depends(get_session),
):
    media = await _get_event_media(session, event_id, media_id)
    media.caption = _clean(body.caption)
    await session.commit()
    return CaptionUpdated(id=media.id, caption=media.caption)


@router.delete("/events/{event_id}/media/{media_id}", response_model=Success)
async def delete_event_media(
    event_id: int,
    media_id: int,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    media = await _get_event_media(session, event_id, media_id)
    url = media.url
    await session.delete(media)
    await session.commit()
    await storage.delete_url(url)
    return Success()


@router.put("/media/{media_id}", response_model=Success)
async def replace_media(media_id: int, body: MediaLink, session: AsyncSession = Depends(get_session)):
    media = await session.get(MediaAsset, media_id)
    if not media:
        raise HTTPException(status_code=404, detail="Media asset not found.")

    url = _clean(body.url)
    if not url:
        raise HTTPException(status_code=400, detail="url is required.")

    media.url = url
    media.caption = _clean(body.caption)
    await session.commit()
    return Success()


@router.delete("/media/{media_id}", response_model=Success)
async def delete_media(
    media_id: int,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    media = await session.get(MediaAsset, media_id)
    if not media:
        raise HTTPException(status_code=404, detail="Media asset not found.")

    url = media.url
    await session.delete(media)
    await session.commit()
    await storage.delete_url(url)
    return Success()
