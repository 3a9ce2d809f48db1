"""The single "something is in flight" indicator shared by every admin screen."""

import itertools
from contextlib import contextmanager
from enum import Enum


class BlockingOp(Enum):
    """Tracked long-running mutations. Lower priority value wins the overlay text."""

    DELETE_EVENT = (1, "Deleting event…")
    DELETE_MEDIA = (2, "Deleting article…")
    UPLOAD_MEDIA = (3, "Uploading article…")
    UPLOAD_QUEUED_MEDIA = (4, "Uploading article image…")
    SAVE_EVENT = (5, "Saving event…")
    TEAM_UPDATE = (6, "Working on team updates…")
    DELETE_ACCOUNT = (7, "Deleting Account")
    SAVE_ACCOUNT = (8, "Saving account changes…")
    LOAD_PHOTO_EDITOR = (9, "Loading photo editor...")
    SAVE_PROFILE = (10, "Updating your profile…")
    SAVE_ABOUT = (11, "Saving About page…")
    SAVE_CAPTION = (12, "Saving caption…")
    OTHER = (99, "")

    def __init__(self, priority: int, text: str):
        self.priority = priority
        self.text = text


FALLBACK_TEXT = "Working…"


class BlockingToken:
    """One held operation. ``text`` may be updated while held, e.g. for progress."""

    def __init__(self, op: BlockingOp, text: str | None, seq: int):
        self.op = op
        self.text = text
        self.seq = seq

    @property
    def display_text(self) -> str:
        return self.text or self.op.text or FALLBACK_TEXT


class BlockingTracker:
    """Set of named in-flight operation tokens; blocking while any is held."""

    def __init__(self):
        self._tokens: dict[int, BlockingToken] = {}
        self._seq = itertools.count()

    @property
    def blocking(self) -> bool:
        return bool(self._tokens)

    @property
    def text(self) -> str | None:
        """Text of the highest priority held token, None when idle."""
        tokens = list(self._tokens.values())
        if not tokens:
            return None
        top = min(tokens, key=lambda t: (t.op.priority, t.seq))
        return top.display_text

    def held(self) -> list[BlockingOp]:
        return [t.op for t in sorted(self._tokens.values(), key=lambda t: t.seq)]

    def acquire(self, op: BlockingOp, text: str | None = None) -> BlockingToken:
        token = BlockingToken(op, text, next(self._seq))
        self._tokens[token.seq] = token
        return token

    def release(self, token: BlockingToken) -> None:
        self._tokens.pop(token.seq, None)

    @contextmanager
    def hold(self, op: BlockingOp, text: str | None = None):
        token = self.acquire(op, text)
        try:
            yield token
        finally:
            self.release(token)
