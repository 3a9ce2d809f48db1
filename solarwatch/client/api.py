"""Async HTTP client for the SolarWatch admin and public API."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from solarwatch.client.errors import ApiError, NetworkError, NotFoundError, PermissionDeniedError
from solarwatch.schemas.admin import SessionUser
from solarwatch.schemas.event import EventRow, MediaRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePayload:
    """Raw bytes of a picked file, not yet sent anywhere."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


# ---- Login outcomes ----


@dataclass(frozen=True)
class LoginSucceeded:
    user: SessionUser


@dataclass(frozen=True)
class SecurityAnswerRequired:
    question_text: str
    message: str


@dataclass(frozen=True)
class LoginFailed:
    message: str


LoginResult = LoginSucceeded | SecurityAnswerRequired | LoginFailed

DEFAULT_QUESTION_PROMPT = "Please answer your security question."


def _body(response: httpx.Response) -> Any:
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            return None
    return response.text


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, dict):
        message = body.get("error") or body.get("details")
        if message:
            return str(message)
    if isinstance(body, str) and body.strip():
        return body.strip()
    return f"HTTP {status}"


def _raise_for_status(response: httpx.Response) -> Any:
    """Return the parsed body of a 2xx response, raise otherwise (whatever the body shape)."""
    body = _body(response)
    if response.is_success:
        return body

    message = _error_message(body, response.status_code)
    if response.status_code == 404:
        raise NotFoundError(message, response.status_code, body)
    if response.status_code == 403:
        raise PermissionDeniedError(message, response.status_code, body)
    raise ApiError(message, response.status_code, body)


class AdminApiClient:
    """Thin wrapper over ``httpx.AsyncClient``; cookies carry the admin session."""

    def __init__(self, base_url: str = "", *, client: httpx.AsyncClient | None = None, timeout: float = 30.0):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

    async def _call(self, method: str, url: str, **kwargs) -> Any:
        return _raise_for_status(await self._request(method, url, **kwargs))

    # ---- Auth ----

    async def login(self, username: str, password: str, security_answer: str | None = None) -> LoginResult:
        payload = {"username": username, "password": password}
        if security_answer:
            payload["securityAnswer"] = security_answer

        response = await self._request("POST", "/api/admin/login", json=payload)
        body = _body(response)
        if response.is_success:
            return LoginSucceeded(SessionUser.model_validate(body["user"]))

        if isinstance(body, dict) and body.get("requiresSecurityAnswer"):
            return SecurityAnswerRequired(
                question_text=body.get("securityQuestionText") or DEFAULT_QUESTION_PROMPT,
                message=_error_message(body, response.status_code),
            )
        return LoginFailed(_error_message(body, response.status_code))

    async def logout(self) -> None:
        await self._call("POST", "/api/admin/logout")

    # ---- Events ----

    async def list_events(self) -> list[EventRow]:
        rows = await self._call("GET", "/api/admin/events")
        return [EventRow.model_validate(row) for row in rows or []]

    async def list_public_events(self) -> list[EventRow]:
        rows = await self._call("GET", "/api/events")
        return [EventRow.model_validate(row) for row in rows or []]

    async def create_event(self, fields: dict[str, Any]) -> int:
        body = await self._call("POST", "/api/admin/events", json=fields)
        return int(body["id"])

    async def update_event(self, event_id: int, fields: dict[str, Any]) -> None:
        await self._call("PUT", f"/api/admin/events/{event_id}", json=fields)

    async def delete_event(self, event_id: int) -> None:
        await self._call("DELETE", f"/api/admin/events/{event_id}")

    # ---- Media ----

    async def list_media(self, event_id: int) -> list[MediaRow]:
        rows = await self._call("GET", f"/api/admin/events/{event_id}/media")
        return [MediaRow.model_validate(row) for row in rows or []]

    async def upload_media(self, event_id: int, file: FilePayload, caption: str) -> MediaRow | None:
        """Upload one image. Returns the new row when the server echoes it, else None."""
        body = await self._call(
            "POST",
            f"/api/admin/events/{event_id}/media",
            files={"file": (file.filename, file.content, file.content_type)},
            data={"caption": caption.strip()},
        )
        if isinstance(body, dict) and body.get("url") and body.get("id") is not None:
            return MediaRow(
                id=body["id"],
                event_id=body.get("event_id", event_id),
                url=body["url"],
                caption=body.get("caption"),
            )
        return None

    async def update_media_caption(self, event_id: int, media_id: int, caption: str) -> str | None:
        """Returns the caption as stored by the server."""
        caption = caption.strip()
        body = await self._call(
            "PATCH",
            f"/api/admin/events/{event_id}/media/{media_id}",
            json={"caption": caption or None},
        )
        if isinstance(body, dict) and "caption" in body:
            return body["caption"]
        return caption or None

    async def delete_media(self, event_id: int, media_id: int) -> None:
        await self._call("DELETE", f"/api/admin/events/{event_id}/media/{media_id}")
