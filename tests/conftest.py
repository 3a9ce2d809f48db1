import asyncio
import itertools
import os
import tempfile
from io import BytesIO

os.environ["SOLARWATCH_DATA_DIR"] = tempfile.mkdtemp(prefix="solarwatch-tests-")
os.environ["SOLARWATCH_SESSION_SECRET"] = "test-session-secret-0123456789"
os.environ["SOLARWATCH_BOOTSTRAP_ADMIN_USERNAME"] = "admin"
os.environ["SOLARWATCH_BOOTSTRAP_ADMIN_PASSWORD"] = "root-pass-123"

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from solarwatch.client.errors import NotFoundError
from solarwatch.config import settings
from solarwatch.database import engine, init_db
from solarwatch.main import app
from solarwatch.models import Base
from solarwatch.schemas.event import EventRow, MediaRow

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "root-pass-123"

SAMPLE_EVENT = {
    "event_date": "1859-09-01",
    "event_type": "Geomagnetic storm",
    "location": "Worldwide",
    "title": "Carrington Event",
    "short_description": "Largest recorded geomagnetic storm.",
    "summary": "A coronal mass ejection hit Earth's magnetosphere.",
    "impact_on_communication": "Telegraph systems failed across Europe and North America.",
}


def image_bytes(color=(200, 120, 0), fmt="PNG") -> bytes:
    buf = BytesIO()
    Image.new("RGB", (8, 8), color).save(buf, format=fmt)
    return buf.getvalue()


async def _reset_db():
    (settings.data_dir / "db").mkdir(parents=True, exist_ok=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db()
    await engine.dispose()


@pytest.fixture
def fresh_db():
    asyncio.run(_reset_db())
    yield
    asyncio.run(engine.dispose())


@pytest.fixture
def client(fresh_db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture
def png():
    return image_bytes()


class FakeAdminApi:
    """In-memory stand-in for ``AdminApiClient`` that records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.events: dict[int, dict] = {}
        self.media: dict[int, MediaRow] = {}
        self.echo_uploads = True
        self.login_results: list = []
        self._ids = itertools.count(1)
        self._failures: dict[str, list] = {}
        self._gates: dict[str, asyncio.Event] = {}

    def fail(self, name, exc, after=0):
        """Raise ``exc`` from ``name`` once ``after`` calls have succeeded."""
        self._failures[name] = [after, exc]

    def gate(self, name):
        """Hold the next ``name`` call until the returned event is set."""
        self._gates[name] = asyncio.Event()
        return self._gates[name]

    async def _pass_gate(self, name):
        gate = self._gates.pop(name, None)
        if gate is not None:
            await gate.wait()

    def _record(self, name, *args):
        self.calls.append((name, *args))
        plan = self._failures.get(name)
        if plan:
            if plan[0] == 0:
                del self._failures[name]
                raise plan[1]
            plan[0] -= 1

    def names(self):
        return [c[0] for c in self.calls]

    def add_event(self, **overrides) -> EventRow:
        event_id = next(self._ids)
        self.events[event_id] = {**SAMPLE_EVENT, **overrides}
        return EventRow(id=event_id, **self.events[event_id])

    def add_media(self, event_id, caption=None) -> MediaRow:
        media_id = next(self._ids)
        row = MediaRow(id=media_id, event_id=event_id, url=f"/media/event-media/{event_id}/{media_id}.png", caption=caption)
        self.media[media_id] = row
        return row

    async def list_events(self):
        self._record("list_events")
        return [EventRow(id=i, **fields) for i, fields in self.events.items()]

    async def create_event(self, fields):
        self._record("create_event", dict(fields))
        event_id = next(self._ids)
        self.events[event_id] = dict(fields)
        return event_id

    async def update_event(self, event_id, fields):
        self._record("update_event", event_id, dict(fields))
        if event_id not in self.events:
            raise NotFoundError("Event not found.", 404)
        self.events[event_id] = dict(fields)

    async def delete_event(self, event_id):
        self._record("delete_event", event_id)
        if self.events.pop(event_id, None) is None:
            raise NotFoundError("Event not found.", 404)

    async def list_media(self, event_id):
        self._record("list_media", event_id)
        await self._pass_gate("list_media")
        return [m.model_copy() for m in self.media.values() if m.event_id == event_id]

    async def upload_media(self, event_id, file, caption):
        self._record("upload_media", event_id, file.filename, caption)
        row = self.add_media(event_id, caption=caption or None)
        return row.model_copy() if self.echo_uploads else None

    async def update_media_caption(self, event_id, media_id, caption):
        self._record("update_media_caption", event_id, media_id, caption)
        await self._pass_gate("update_media_caption")
        if media_id not in self.media:
            raise NotFoundError("Media asset not found.", 404)
        self.media[media_id].caption = caption.strip() or None
        return self.media[media_id].caption

    async def delete_media(self, event_id, media_id):
        self._record("delete_media", event_id, media_id)
        if self.media.pop(media_id, None) is None:
            raise NotFoundError("Media asset not found.", 404)

    async def login(self, username, password, security_answer=None):
        self._record("login", username, security_answer)
        return self.login_results.pop(0)

    async def logout(self):
        self._record("logout")


@pytest.fixture
def fake_api():
    return FakeAdminApi()


@pytest.fixture
def sample_event():
    return dict(SAMPLE_EVENT)


@pytest.fixture
def make_image():
    return image_bytes
