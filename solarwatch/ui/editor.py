"""Admin event editor: the create/edit modal and the events list around it.

The editor keeps one ``EditorSession`` alive for the lifetime of the admin
screen and resets it in place on open/close. In create mode picked images are
queued locally (with previews) until the event exists; in edit mode every media
change goes straight to the server.
"""

import dataclasses
import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from solarwatch.client.api import FilePayload
from solarwatch.client.errors import ApiError, NotFoundError, ValidationError
from solarwatch.schemas.event import EventRow
from solarwatch.ui.blocking import BlockingOp, BlockingTracker
from solarwatch.ui.date_input import display_to_storage, shape_date_input, storage_to_display
from solarwatch.ui.media import MediaItem, PersistedMedia, PreviewStore, QueuedMedia, confirmed_caption
from solarwatch.ui.validation import EVENT_FIELDS, REQUIRED_MESSAGE, check_event_field, validate_event_fields

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[None] | None]


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class MediaPanelState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def _blank_fields() -> dict[str, str]:
    return {name: "" for name in EVENT_FIELDS}


def event_to_fields(event: EventRow) -> dict[str, str]:
    return {
        "date": storage_to_display(event.event_date),
        "event_type": event.event_type or "",
        "location": event.location or "",
        "title": event.title or "",
        "short_description": event.short_description or "",
        "summary": event.summary or "",
        "impact_on_communication": event.impact_on_communication or "",
    }


def build_event_payload(form: dict[str, str]) -> dict[str, str | None]:
    """Trimmed API body for the form; raises ValidationError if any field fails."""
    errors = validate_event_fields(form)
    if errors:
        raise ValidationError(errors)

    payload = {"event_date": display_to_storage(form.get("date"))}
    for name in EVENT_FIELDS[1:]:
        payload[name] = (form.get(name) or "").strip()
    return payload


@dataclass
class EditorSession:
    mode: EditorMode | None = None
    target_event: EventRow | None = None
    fields: dict[str, str] = field(default_factory=_blank_fields)
    media: list[MediaItem] = field(default_factory=list)
    active_index: int = 0

    # Form validation, shown only after the first save attempt
    submit_attempted: bool = False
    validation_errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    # Create mode: id of an event already created by a save that then failed
    created_event_id: int | None = None

    media_state: MediaPanelState = MediaPanelState.IDLE
    media_error: str | None = None

    # Add-article sub-form
    article_open: bool = False
    article_file: FilePayload | None = None
    article_caption: str = ""
    article_attempted: bool = False
    article_errors: dict[str, str] = field(default_factory=dict)
    article_error: str | None = None

    # Caption editor for the active item
    caption_editing: bool = False
    caption_draft: str = ""
    caption_error: str | None = None

    # Pending media delete confirmation (edit mode)
    delete_target: PersistedMedia | None = None
    delete_error: str | None = None

    saving: bool = False
    uploading: bool = False

    def reset(self) -> None:
        """Return every field to its initial value."""
        for f in dataclasses.fields(self):
            if f.default_factory is not dataclasses.MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)

    @property
    def is_open(self) -> bool:
        return self.mode is not None

    @property
    def busy(self) -> bool:
        return self.saving or self.uploading

    @property
    def active_media(self) -> MediaItem | None:
        if not self.media:
            return None
        return self.media[self.active_index]

    def queued_media(self) -> list[QueuedMedia]:
        return [m for m in self.media if isinstance(m, QueuedMedia)]


class EventEditor:
    """Drives one ``EditorSession`` against the admin API."""

    def __init__(
        self,
        api,
        tracker: BlockingTracker | None = None,
        previews: PreviewStore | None = None,
        on_refresh: RefreshCallback | None = None,
    ):
        self.api = api
        self.tracker = tracker or BlockingTracker()
        self.previews = previews or PreviewStore()
        self.on_refresh = on_refresh
        self.session = EditorSession()
        self._generation = 0

    # ---- helpers ----

    async def _refresh(self) -> None:
        if self.on_refresh is None:
            return
        result = self.on_refresh()
        if inspect.isawaitable(result):
            await result

    def _start_session(self) -> None:
        self._release_queued()
        self.session.reset()
        self._generation += 1

    def _release_queued(self) -> None:
        for item in self.session.queued_media():
            item.preview.release()

    def _set_active(self, index: int) -> None:
        s = self.session
        if not s.media:
            s.active_index = 0
        else:
            s.active_index = min(max(index, 0), len(s.media) - 1)
        s.caption_editing = False
        s.caption_draft = confirmed_caption(s.active_media)
        s.caption_error = None

    def _remove_media(self, item: MediaItem) -> None:
        s = self.session
        s.media = [m for m in s.media if m is not item]
        self._set_active(s.active_index)

    # ---- open / close ----

    def open_create(self) -> bool:
        if self.session.busy:
            return False
        self._start_session()
        self.session.mode = EditorMode.CREATE
        return True

    async def open_edit(self, event: EventRow) -> bool:
        if self.session.busy:
            return False
        self._start_session()
        self.session.mode = EditorMode.EDIT
        self.session.target_event = event
        self.session.fields = event_to_fields(event)
        await self.load_media()
        return True

    async def load_media(self) -> None:
        s = self.session
        if s.mode is not EditorMode.EDIT or s.target_event is None:
            return

        event_id = s.target_event.id
        generation = self._generation
        s.media_state = MediaPanelState.LOADING
        s.media_error = None
        try:
            rows = await self.api.list_media(event_id)
        except ApiError as exc:
            logger.warning("Could not load media for event %s: %s", event_id, exc.message)
            if generation != self._generation:
                return
            s.media_state = MediaPanelState.ERROR
            s.media_error = exc.message
            if isinstance(exc, NotFoundError):
                await self._refresh()
            return

        if generation != self._generation:
            logger.debug("Dropping media for event %s, editor session changed", event_id)
            return

        s.media = [PersistedMedia.from_row(row) for row in rows]
        s.media_state = MediaPanelState.READY
        self._set_active(0)

    def close(self) -> bool:
        """Drop the session. Refused while a save or upload is running."""
        if self.session.busy:
            return False
        self._start_session()
        return True

    # ---- form fields ----

    def set_field(self, name: str, value: str) -> None:
        if name not in EVENT_FIELDS:
            raise KeyError(name)
        s = self.session
        s.fields[name] = value
        if s.submit_attempted:
            message = check_event_field(name, value)
            if message:
                s.validation_errors[name] = message
            else:
                s.validation_errors.pop(name, None)

    def input_date(self, raw: str) -> str:
        shaped = shape_date_input(self.session.fields.get("date", ""), raw)
        self.set_field("date", shaped)
        return shaped

    # ---- add article ----

    def open_add_article(self) -> None:
        s = self.session
        s.article_open = True
        s.article_file = None
        s.article_caption = ""
        s.article_attempted = False
        s.article_errors = {}
        s.article_error = None

    def close_add_article(self) -> bool:
        s = self.session
        if s.uploading:
            return False
        s.article_open = False
        s.article_file = None
        s.article_caption = ""
        s.article_attempted = False
        s.article_errors = {}
        s.article_error = None
        return True

    def _check_article(self) -> dict[str, str]:
        s = self.session
        errors = {}
        if s.article_file is None:
            errors["file"] = REQUIRED_MESSAGE
        if not s.article_caption.strip():
            errors["caption"] = REQUIRED_MESSAGE
        return errors

    def set_article_file(self, file: FilePayload | None) -> None:
        self.session.article_file = file
        if self.session.article_attempted:
            self.session.article_errors = self._check_article()

    def set_article_caption(self, caption: str) -> None:
        self.session.article_caption = caption
        if self.session.article_attempted:
            self.session.article_errors = self._check_article()

    async def submit_add_article(self) -> bool:
        s = self.session
        if not s.article_open or s.busy:
            return False

        s.article_attempted = True
        s.article_errors = self._check_article()
        if s.article_errors:
            return False

        caption = s.article_caption.strip()
        file = s.article_file

        if s.mode is EditorMode.CREATE:
            s.media.append(QueuedMedia(
                local_id=uuid.uuid4().hex,
                file=file,
                preview=self.previews.create(file),
                caption=caption,
            ))
            self._set_active(len(s.media) - 1)
            self.close_add_article()
            return True

        if self.tracker.blocking:
            return False

        event_id = s.target_event.id
        s.article_error = None
        s.uploading = True
        try:
            with self.tracker.hold(BlockingOp.UPLOAD_MEDIA):
                row = await self.api.upload_media(event_id, file, caption)
        except ApiError as exc:
            logger.warning("Upload to event %s failed: %s", event_id, exc.message)
            s.article_error = exc.message
            if isinstance(exc, NotFoundError):
                await self._refresh()
            return False
        finally:
            s.uploading = False

        if row is not None:
            s.media.append(PersistedMedia.from_row(row))
            self._set_active(len(s.media) - 1)
        else:
            await self.load_media()
            self._set_active(0)

        self.close_add_article()
        return True

    # ---- media navigation ----

    def select_media(self, index: int) -> None:
        self._set_active(index)

    def next_media(self) -> None:
        s = self.session
        if s.media:
            self._set_active((s.active_index + 1) % len(s.media))

    def previous_media(self) -> None:
        s = self.session
        if s.media:
            self._set_active((s.active_index - 1) % len(s.media))

    # ---- caption edit ----

    def begin_caption_edit(self) -> bool:
        s = self.session
        if s.active_media is None:
            return False
        s.caption_editing = True
        s.caption_draft = confirmed_caption(s.active_media)
        s.caption_error = None
        return True

    def set_caption_draft(self, text: str) -> None:
        self.session.caption_draft = text

    def cancel_caption_edit(self) -> None:
        s = self.session
        s.caption_editing = False
        s.caption_draft = confirmed_caption(s.active_media)
        s.caption_error = None

    async def save_caption(self) -> bool:
        s = self.session
        item = s.active_media
        if item is None or not s.caption_editing:
            return False

        caption = s.caption_draft.strip()

        if isinstance(item, QueuedMedia):
            item.caption = caption
        else:
            if self.tracker.blocking:
                return False
            try:
                with self.tracker.hold(BlockingOp.SAVE_CAPTION):
                    stored = await self.api.update_media_caption(item.event_id, item.id, caption)
            except ApiError as exc:
                logger.warning("Caption update for media %s failed: %s", item.id, exc.message)
                if s.active_media is item:
                    s.caption_error = exc.message
                if isinstance(exc, NotFoundError):
                    await self._refresh()
                return False
            item.caption = stored

        if s.active_media is item:
            s.caption_editing = False
            s.caption_draft = confirmed_caption(item)
            s.caption_error = None
        return True

    # ---- delete media ----

    def request_delete_media(self) -> bool:
        """Queued items go at once; persisted ones need ``confirm_delete_media``."""
        s = self.session
        item = s.active_media
        if item is None:
            return False

        if isinstance(item, QueuedMedia):
            item.preview.release()
            self._remove_media(item)
            return True

        s.delete_target = item
        s.delete_error = None
        return True

    def cancel_delete_media(self) -> None:
        self.session.delete_target = None
        self.session.delete_error = None

    async def confirm_delete_media(self) -> bool:
        s = self.session
        target = s.delete_target
        if target is None or self.tracker.blocking:
            return False

        try:
            with self.tracker.hold(BlockingOp.DELETE_MEDIA):
                await self.api.delete_media(target.event_id, target.id)
        except ApiError as exc:
            logger.warning("Delete of media %s failed: %s", target.id, exc.message)
            s.delete_error = exc.message
            if isinstance(exc, NotFoundError):
                await self._refresh()
            return False

        s.delete_target = None
        s.delete_error = None
        self._remove_media(target)
        return True

    # ---- save ----

    async def save(self) -> bool:
        s = self.session
        if not s.is_open or s.busy or self.tracker.blocking:
            return False

        s.submit_attempted = True
        try:
            payload = build_event_payload(s.fields)
        except ValidationError as exc:
            s.validation_errors = exc.errors
            return False
        s.validation_errors = {}

        s.error = None
        s.saving = True
        try:
            with self.tracker.hold(BlockingOp.SAVE_EVENT):
                if s.mode is EditorMode.CREATE:
                    await self._save_create(payload)
                else:
                    await self.api.update_event(s.target_event.id, payload)
        except ApiError as exc:
            logger.warning("Saving event failed: %s", exc.message)
            s.error = exc.message
            if isinstance(exc, NotFoundError):
                await self._refresh()
            return False
        finally:
            s.saving = False

        self.close()
        await self._refresh()
        return True

    async def _save_create(self, payload: dict) -> None:
        s = self.session
        if s.created_event_id is None:
            s.created_event_id = await self.api.create_event(payload)
            logger.info("Created event %s", s.created_event_id)
        else:
            await self.api.update_event(s.created_event_id, payload)

        queued = s.queued_media()
        if not queued:
            return

        total = len(queued)
        with self.tracker.hold(BlockingOp.UPLOAD_QUEUED_MEDIA) as token:
            for n, item in enumerate(queued, start=1):
                token.text = f"Uploading article image {n} of {total}…"
                try:
                    await self.api.upload_media(s.created_event_id, item.file, item.caption)
                except ApiError as exc:
                    raise type(exc)(
                        f"Event saved, but article image {n} of {total} failed to upload: {exc.message}",
                        exc.status,
                        exc.body,
                    ) from exc
                item.preview.release()
                self._remove_media(item)


class EventListController:
    """The admin events table: load, and delete with confirmation."""

    def __init__(self, api, tracker: BlockingTracker | None = None):
        self.api = api
        self.tracker = tracker or BlockingTracker()
        self.events: list[EventRow] = []
        self.loading = False
        self.error: str | None = None
        self.delete_target: EventRow | None = None
        self.delete_error: str | None = None

    async def refresh(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.events = await self.api.list_events()
        except ApiError as exc:
            logger.warning("Could not load events: %s", exc.message)
            self.error = exc.message
        finally:
            self.loading = False

    def request_delete(self, event: EventRow) -> bool:
        if self.tracker.blocking:
            return False
        self.delete_target = event
        self.delete_error = None
        return True

    def cancel_delete(self) -> None:
        self.delete_target = None
        self.delete_error = None

    async def confirm_delete(self) -> bool:
        target = self.delete_target
        if target is None or self.tracker.blocking:
            return False

        try:
            with self.tracker.hold(BlockingOp.DELETE_EVENT):
                await self.api.delete_event(target.id)
        except NotFoundError as exc:
            self.delete_error = exc.message
            await self.refresh()
            return False
        except ApiError as exc:
            logger.warning("Delete of event %s failed: %s", target.id, exc.message)
            self.delete_error = exc.message
            return False

        self.delete_target = None
        self.delete_error = None
        await self.refresh()
        return True
