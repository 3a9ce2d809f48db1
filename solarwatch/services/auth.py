"""Password hashing, session cookies and the login decision.

Passwords and security answers are hashed with Argon2id. Sessions are
signed, timestamped cookies holding only the admin id.
"""

import logging
import warnings
from dataclasses import dataclass

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Response
from itsdangerous import BadSignature, URLSafeTimedSerializer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solarwatch.config import settings
from solarwatch.models import AdminUser

logger = logging.getLogger(__name__)

SESSION_COOKIE = "sw_session"

INVALID_CREDENTIALS = "Invalid username or password."
ANSWER_REQUIRED = "Security answer required."
WRONG_ANSWER = "Incorrect security answer."

_DEV_SECRET = "solarwatch-dev-insecure-secret-change-me"

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


# ============================================================
# SESSION COOKIES
# ============================================================

def _serializer() -> URLSafeTimedSerializer:
    secret = settings.session_secret
    if len(secret) < 16:
        if settings.production:
            raise RuntimeError("SOLARWATCH_SESSION_SECRET must be set (16+ chars) in production.")
        warnings.warn("SOLARWATCH_SESSION_SECRET not set. Using insecure default.", stacklevel=2)
        secret = _DEV_SECRET
    return URLSafeTimedSerializer(secret_key=secret, salt="solarwatch-session-v1")


def create_session_token(user_id: int) -> str:
    return _serializer().dumps({"uid": user_id})


def read_session_token(token: str | None) -> int | None:
    if not token:
        return None
    try:
        data = _serializer().loads(token, max_age=settings.session_max_age)
        return int(data["uid"])
    except (BadSignature, KeyError, TypeError, ValueError):
        return None


def set_session_cookie(response: Response, user_id: int) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(user_id),
        httponly=True,
        samesite="strict" if settings.production else "lax",
        secure=settings.production,
        path="/",
        max_age=settings.session_max_age,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/")


# ============================================================
# LOGIN
# ============================================================

@dataclass(frozen=True)
class LoginDenied:
    message: str


@dataclass(frozen=True)
class LoginChallenge:
    question_id: int
    question_text: str | None


@dataclass(frozen=True)
class LoginGranted:
    user: AdminUser


LoginOutcome = LoginDenied | LoginChallenge | LoginGranted


def requires_security_answer(user: AdminUser) -> bool:
    """Protected accounts are never challenged."""
    return not user.is_protected and user.security_question_id is not None


async def authenticate(
    session: AsyncSession, username: str, password: str, security_answer: str | None
) -> LoginOutcome:
    user = (
        await session.execute(select(AdminUser).where(AdminUser.username == username).limit(1))
    ).scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Rejected login for %r", username)
        return LoginDenied(INVALID_CREDENTIALS)

    if requires_security_answer(user):
        if not security_answer:
            question = user.security_question
            return LoginChallenge(
                question_id=user.security_question_id,
                question_text=question.question_text if question else None,
            )
        if not verify_password(security_answer.strip(), user.security_answer_hash):
            logger.info("Wrong security answer for %r", username)
            return LoginDenied(WRONG_ANSWER)

    return LoginGranted(user)
