"""Public timeline: events grouped by year, one year expanded at a time."""

import logging
from dataclasses import dataclass
from datetime import date

from solarwatch.schemas.event import EventRow

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
MONTH_ORDER = {name: i for i, name in enumerate(MONTH_NAMES, start=1)}

# Sticky header height the scroll target is shifted by
HEADER_OFFSET = 120


def parse_event_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def month_day_label(value: date | None) -> str:
    if value is None:
        return ""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}"


def full_date_label(value: date | None) -> str:
    if value is None:
        return ""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def month_day_key(label: str) -> tuple[int, int]:
    """Sort key for a ``"September 1"`` label; unparseable labels sort last."""
    parts = (label or "").split(" ")
    month = MONTH_ORDER.get(parts[0], 13)
    try:
        day = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        day = 0
    return month, day


@dataclass(frozen=True)
class TimelineEvent:
    id: int
    year: int | None
    date: str
    full_date: str
    title: str
    type: str
    short_description: str
    summary: str
    impact: str
    location: str = ""

    @classmethod
    def from_row(cls, row: EventRow | dict) -> "TimelineEvent":
        if isinstance(row, EventRow):
            row = row.model_dump()
        when = parse_event_date(row.get("event_date"))
        return cls(
            id=row["id"],
            year=when.year if when else None,
            date=month_day_label(when),
            full_date=full_date_label(when),
            title=row.get("title") or "",
            type=row.get("event_type") or "",
            short_description=row.get("short_description") or "",
            summary=row.get("summary") or "",
            impact=row.get("impact_on_communication") or "",
            location=row.get("location") or "",
        )


def group_by_year(events: list[TimelineEvent]) -> dict[int, list[TimelineEvent]]:
    """Years ascending, events inside a year by month and day."""
    groups: dict[int, list[TimelineEvent]] = {}
    for event in events:
        if event.year is None:
            continue
        groups.setdefault(event.year, []).append(event)
    return {
        year: sorted(groups[year], key=lambda e: month_day_key(e.date))
        for year in sorted(groups)
    }


class TimelineView:
    """Expansion and scroll state of the timeline.

    The rendering layer reports where each year's anchor sits through
    ``register_anchor``; scroll requests for a year that has not been laid out
    yet wait one ``tick`` and are then dropped.
    """

    def __init__(self, rows=()):
        self.groups: dict[int, list[TimelineEvent]] = {}
        self.expanded_year: int | None = None
        self.scroll_y: float = 0.0
        self.anchors: dict[int, float] = {}
        self.pending_scroll: int | None = None
        self.set_events(rows)

    def set_events(self, rows) -> None:
        events = [r if isinstance(r, TimelineEvent) else TimelineEvent.from_row(r) for r in rows]
        self.groups = group_by_year(events)
        if self.expanded_year not in self.groups:
            self.expanded_year = None

    @property
    def years(self) -> list[int]:
        return list(self.groups)

    def events_for(self, year: int) -> list[TimelineEvent]:
        return self.groups.get(year, [])

    def toggle_year(self, year: int) -> None:
        self.expanded_year = None if self.expanded_year == year else year

    def register_anchor(self, year: int, top: float) -> None:
        self.anchors[year] = top

    def remove_anchor(self, year: int) -> None:
        self.anchors.pop(year, None)

    def _scroll_to(self, year: int) -> None:
        self.scroll_y = max(self.anchors[year] - HEADER_OFFSET, 0.0)
        self.expanded_year = year

    def request_scroll_to_year(self, year: int) -> bool:
        """Scroll now if the anchor exists, else retry on the next tick."""
        if year in self.anchors:
            self.pending_scroll = None
            self._scroll_to(year)
            return True
        self.pending_scroll = year
        return False

    def tick(self) -> bool:
        year = self.pending_scroll
        if year is None:
            return False
        self.pending_scroll = None
        if year in self.anchors:
            self._scroll_to(year)
            return True
        logger.debug("No anchor for year %s, dropping scroll request", year)
        return False
