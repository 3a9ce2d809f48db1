"""Admin endpoints for the About page and the team roster."""

import base64
import binascii
import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solarwatch.api.deps import get_current_admin
from solarwatch.config import settings
from solarwatch.database import get_session
from solarwatch.models import AboutSection, TeamMember
from solarwatch.schemas.common import Created, Success
from solarwatch.schemas.content import (
    AboutSectionIn,
    AboutSectionRow,
    TeamMemberIn,
    TeamMemberRow,
    TeamPhotoResult,
    TeamPhotoUpload,
)
from solarwatch.services.storage import MediaStorage, get_media_storage, sniff_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-content"], dependencies=[Depends(get_current_admin)])

_DATA_URL = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,(.+)$", re.DOTALL)


# ---- About sections ----


def _apply_section(section: AboutSection, body: AboutSectionIn) -> None:
    if body.display_order is None or not (body.title or "").strip() or not (body.text or "").strip():
        raise HTTPException(status_code=400, detail="display_order, title, and text are required.")
    section.display_order = body.display_order
    section.title = body.title.strip()
    section.text = body.text.strip()


async def _get_section(session: AsyncSession, section_id: int) -> AboutSection:
    section = await session.get(AboutSection, section_id)
    if not section:
        raise HTTPException(status_code=404, detail="About section not found.")
    return section


@router.get("/about", response_model=list[AboutSectionRow])
async def list_about(session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(AboutSection).order_by(AboutSection.display_order.asc(), AboutSection.id.asc())
    )
    return result.scalars().all()


@router.post("/about", status_code=201, response_model=Created)
async def create_about(body: AboutSectionIn, session: AsyncSession = Depends(get_session)):
    section = AboutSection()
    _apply_section(section, body)
    session.add(section)
    await session.commit()
    return Created(id=section.id)


@router.put("/about/{section_id}", response_model=Success)
async def update_about(section_id: int, body: AboutSectionIn, session: AsyncSession = Depends(get_session)):
    section = await _get_section(session, section_id)
    _apply_section(section, body)
    await session.commit()
    return Success()


@router.delete("/about/{section_id}", response_model=Success)
async def delete_about(section_id: int, session: AsyncSession = Depends(get_session)):
    section = await _get_section(session, section_id)
    await session.delete(section)
    await session.commit()
    return Success()


# ---- Team members ----


def _apply_member(member: TeamMember, body: TeamMemberIn) -> None:
    if not (body.name or "").strip() or not (body.role or "").strip():
        raise HTTPException(status_code=400, detail="name and role are required.")
    member.name = body.name.strip()
    member.role = body.role.strip()
    if "image_url" in body.model_fields_set:
        member.image_url = (body.image_url or "").strip() or None


async def _get_member(session: AsyncSession, member_id: int) -> TeamMember:
    member = await session.get(TeamMember, member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Team member not found.")
    return member


@router.get("/team", response_model=list[TeamMemberRow])
async def list_team(session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(TeamMember).order_by(TeamMember.id.asc()))
    return result.scalars().all()


@router.post("/team", status_code=201, response_model=Created)
async def create_member(body: TeamMemberIn, session: AsyncSession = Depends(get_session)):
    member = TeamMember()
    _apply_member(member, body)
    session.add(member)
    await session.commit()
    return Created(id=member.id)


@router.put("/team/{member_id}", response_model=Success)
async def update_member(member_id: int, body: TeamMemberIn, session: AsyncSession = Depends(get_session)):
    member = await _get_member(session, member_id)
    _apply_member(member, body)
    await session.commit()
    return Success()


@router.delete("/team/{member_id}", response_model=Success)
async def delete_member(
    member_id: int,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    member = await _get_member(session, member_id)
    image_url = member.image_url
    await session.delete(member)
    await session.commit()
    await storage.delete_url(image_url)
    return Success()


@router.post("/team/{member_id}/photo", response_model=TeamPhotoResult)
async def upload_member_photo(
    member_id: int,
    body: TeamPhotoUpload,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Replace a member's photo with a base64 data URL (the cropped avatar)."""
    if not body.image_data:
        raise HTTPException(status_code=400, detail="imageData is required.")

    match = _DATA_URL.match(body.image_data)
    if not match:
        raise HTTPException(status_code=400, detail="Invalid imageData format.")

    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Invalid imageData format.")

    if len(data) > settings.media_max_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large.")
    mime = sniff_image(data)
    if mime is None:
        raise HTTPException(status_code=400, detail="Uploaded file is not a supported image.")

    member = await _get_member(session, member_id)
    previous_url = member.image_url

    url = await storage.put(storage.team_photo_key(member_id, mime), data)
    member.image_url = url
    await session.commit()

    await storage.delete_url(previous_url)
    logger.info("Updated photo for team member %d", member_id)
    return TeamPhotoResult(image_url=url)


@router.delete("/team/{member_id}/photo", response_model=Success)
async def remove_member_photo(
    member_id: int,
    session: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    member = await _get_member(session, member_id)
    previous_url = member.image_url
    member.image_url = None
    await session.commit()

    await storage.delete_url(previous_url)
    return Success()
