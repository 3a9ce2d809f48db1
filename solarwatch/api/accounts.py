"""Admin authentication, account management and profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from solarwatch.api.deps import get_current_admin, require_superadmin
from solarwatch.database import get_session
from solarwatch.models import AdminUser, SecurityQuestion
from solarwatch.schemas.admin import (
    AccountChanges,
    AdminUserCreate,
    AdminUserRow,
    LoginRequest,
    LoginSuccess,
    SecurityChallenge,
    SecurityQuestionRow,
    SessionUser,
)
from solarwatch.schemas.common import Created, Success
from solarwatch.services.auth import (
    ANSWER_REQUIRED,
    LoginChallenge,
    LoginDenied,
    authenticate,
    clear_session_cookie,
    hash_password,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-accounts"])


def _session_user(user: AdminUser) -> SessionUser:
    return SessionUser(
        id=user.id,
        username=user.username,
        is_protected=user.is_protected,
        security_question_id=user.security_question_id,
    )


async def _apply_changes(session: AsyncSession, user: AdminUser, changes: AccountChanges) -> bool:
    """Apply password / security question changes. Returns False when nothing changed."""
    changed = False

    if changes.password and changes.password.strip():
        user.password_hash = hash_password(changes.password.strip())
        changed = True

    answer = (changes.security_answer or "").strip()

    if "security_question_id" in changes.model_fields_set:
        question_id = changes.security_question_id or None
        if question_id is None:
            user.security_question_id = None
            user.security_answer_hash = None
        else:
            if not await session.get(SecurityQuestion, question_id):
                raise HTTPException(status_code=400, detail="Unknown security question.")
            if question_id != user.security_question_id and not answer:
                raise HTTPException(
                    status_code=400, detail="A security answer is required with a security question."
                )
            user.security_question_id = question_id
        changed = True

    if answer:
        if user.security_question_id is None:
            raise HTTPException(status_code=400, detail="Choose a security question before setting an answer.")
        user.security_answer_hash = hash_password(answer)
        changed = True

    return changed


async def _get_mutable_user(session: AsyncSession, user_id: int, verb: str) -> AdminUser:
    user = await session.get(AdminUser, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Admin user not found.")
    if user.is_protected:
        raise HTTPException(status_code=403, detail=f"This account is protected and cannot be {verb}.")
    return user


@router.get("/health")
async def admin_health():
    return {"status": "ok", "message": "Admin API running"}


@router.post("/login", response_model=LoginSuccess)
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    """Check credentials, asking for the security answer when the account has one."""
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required.")

    outcome = await authenticate(session, body.username, body.password, body.security_answer)

    if isinstance(outcome, LoginDenied):
        raise HTTPException(status_code=401, detail=outcome.message)

    if isinstance(outcome, LoginChallenge):
        challenge = SecurityChallenge(
            error=ANSWER_REQUIRED,
            security_question_id=outcome.question_id,
            security_question_text=outcome.question_text,
        )
        return JSONResponse(status_code=400, content=challenge.model_dump(by_alias=True))

    set_session_cookie(response, outcome.user.id)
    logger.info("Admin %r logged in", outcome.user.username)
    return LoginSuccess(user=_session_user(outcome.user))


@router.post("/logout", response_model=Success)
async def logout(response: Response):
    clear_session_cookie(response)
    return Success()


@router.get("/me", response_model=SessionUser)
async def me(admin: AdminUser = Depends(get_current_admin)):
    return _session_user(admin)


@router.get("/security-questions", response_model=list[SecurityQuestionRow])
async def list_security_questions(session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(SecurityQuestion).order_by(SecurityQuestion.id.asc()))
    return result.scalars().all()


@router.get("/users", response_model=list[AdminUserRow], dependencies=[Depends(require_superadmin)])
async def list_users(session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(AdminUser).order_by(AdminUser.username.asc()))
    return result.scalars().all()


@router.post(
    "/users", status_code=201, response_model=Created, dependencies=[Depends(require_superadmin)]
)
async def create_user(body: AdminUserCreate, session: AsyncSession = Depends(get_session)):
    username = body.username.strip()
    if not username or not (body.password or "").strip():
        raise HTTPException(status_code=400, detail="Username and password are required.")

    taken = await session.execute(select(AdminUser.id).where(AdminUser.username == username))
    if taken.first():
        raise HTTPException(status_code=409, detail="Username already exists.")

    user = AdminUser(username=username, password_hash=hash_password(body.password.strip()), is_protected=False)
    session.add(user)
    changes = AccountChanges(
        security_question_id=body.security_question_id, security_answer=body.security_answer
    )
    if body.security_question_id:
        await _apply_changes(session, user, changes)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Username already exists.")

    logger.info("Created admin account %r", username)
    return Created(id=user.id)


@router.put("/users/{user_id}", response_model=Success, dependencies=[Depends(require_superadmin)])
async def update_user(user_id: int, body: AccountChanges, session: AsyncSession = Depends(get_session)):
    user = await _get_mutable_user(session, user_id, "edited")

    if not await _apply_changes(session, user, body):
        raise HTTPException(status_code=400, detail="No changes provided to update this user.")

    await session.commit()
    return Success()


@router.delete("/users/{user_id}", response_model=Success, dependencies=[Depends(require_superadmin)])
async def delete_user(user_id: int, session: AsyncSession = Depends(get_session)):
    user = await _get_mutable_user(session, user_id, "deleted")

    await session.delete(user)
    await session.commit()
    logger.info("Deleted admin account %d", user_id)
    return Success()


@router.put("/profile", response_model=Success)
async def update_profile(
    body: AccountChanges,
    admin: AdminUser = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
):
    """Change the signed-in admin's own password or security question."""
    if not await _apply_changes(session, admin, body):
        raise HTTPException(status_code=400, detail="No profile changes provided.")

    await session.commit()
    return Success()
