"""Year search box and the decade browser."""

import re
import time
from collections.abc import Callable, Iterable

from solarwatch.ui.timeline import TimelineView

NOTICE_SECONDS = 5.0

INVALID_YEAR = "Please enter a 4-digit year (for example, 1989)."
STILL_LOADING = "Events are still loading. Please try again in a moment."

_FOUR_DIGITS = re.compile(r"^\d{4}$")


def closest_year(years: list[int], target: int) -> int:
    """Nearest year to ``target``; on ties the earlier year in ascending order wins."""
    best = years[0]
    for year in years:
        if abs(year - target) < abs(best - target):
            best = year
    return best


def decade_of(year: int) -> int:
    return year // 10 * 10


class YearSearch:
    def __init__(
        self,
        years: Iterable[int] = (),
        timeline: TimelineView | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeline = timeline
        self.clock = clock
        self.query = ""
        self.target_year: int | None = None
        self.picker_open = False
        self.picker_decade: int | None = None
        self._error: str | None = None
        self._info: str | None = None
        self._notice_at: float | None = None
        self.years: list[int] = []
        self.set_years(years)

    def set_years(self, years: Iterable[int]) -> None:
        self.years = sorted({int(y) for y in years})
        if self.picker_decade is None and self.years:
            self.picker_decade = self.decades[0]

    # ---- notices ----

    def _notify(self, error: str | None = None, info: str | None = None) -> None:
        self._error = error
        self._info = info
        self._notice_at = self.clock() if (error or info) else None

    def _expire(self) -> None:
        if self._notice_at is not None and self.clock() - self._notice_at >= NOTICE_SECONDS:
            self._notify()

    @property
    def error(self) -> str | None:
        self._expire()
        return self._error

    @property
    def info(self) -> str | None:
        self._expire()
        return self._info

    # ---- search ----

    def _navigate(self, year: int) -> None:
        self.target_year = year
        if self.timeline is not None:
            self.timeline.request_scroll_to_year(year)

    def submit(self, query: str | None = None) -> int | None:
        """Resolve the typed year; returns the year navigated to, if any."""
        if query is not None:
            self.query = query
        trimmed = (self.query or "").strip()

        if not _FOUR_DIGITS.match(trimmed):
            self._notify(error=INVALID_YEAR)
            return None

        if not self.years:
            self._notify(error=STILL_LOADING)
            return None

        target = int(trimmed)
        if target in self.years:
            self._notify()
            year = target
        else:
            year = closest_year(self.years, target)
            self._notify(info=f"No events for {target}. Showing closest year: {year}.")

        self._navigate(year)
        return year

    # ---- decade browser ----

    @property
    def decades(self) -> list[int]:
        return sorted({decade_of(y) for y in self.years})

    def years_in_decade(self, decade: int) -> list[int]:
        return [y for y in self.years if decade_of(y) == decade]

    def toggle_picker(self) -> None:
        self.picker_open = not self.picker_open

    def select_decade(self, decade: int) -> None:
        self.picker_decade = decade

    def select_year(self, year: int) -> None:
        self.query = str(year)
        self._notify()
        self.picker_open = False
        self._navigate(year)
