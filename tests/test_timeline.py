from datetime import date

from solarwatch.schemas.event import EventRow
from solarwatch.ui.timeline import (
    HEADER_OFFSET,
    TimelineEvent,
    TimelineView,
    group_by_year,
    month_day_key,
)


def _row(event_id, when, title="t"):
    return {"id": event_id, "event_date": when, "title": title, "event_type": "Storm"}


def test_from_row_labels():
    event = TimelineEvent.from_row(EventRow(id=1, event_date=date(1859, 9, 1), title="Carrington"))
    assert event.year == 1859
    assert event.date == "September 1"
    assert event.full_date == "September 1, 1859"


def test_years_sort_numerically():
    view = TimelineView([_row(1, "0010-01-01"), _row(2, "0002-01-01"), _row(3, "1989-03-13")])
    assert view.years == [2, 10, 1989]


def test_events_within_year_sort_by_month_and_day():
    view = TimelineView([
        _row(1, "1859-09-02", "b"),
        _row(2, "1859-08-28", "a"),
        _row(3, "1859-09-01", "c"),
    ])
    assert [e.id for e in view.events_for(1859)] == [2, 3, 1]


def test_unparseable_labels_sort_last():
    assert month_day_key("") == (13, 0)
    assert month_day_key("Smarch 3") == (13, 3)
    assert month_day_key("March 3") < month_day_key("")


def test_rows_without_dates_are_not_grouped():
    events = [TimelineEvent.from_row(_row(1, None)), TimelineEvent.from_row(_row(2, "1921-05-13"))]
    assert list(group_by_year(events)) == [1921]


def test_only_one_year_expanded():
    view = TimelineView([_row(1, "1859-09-01"), _row(2, "1989-03-13")])
    view.toggle_year(1859)
    assert view.expanded_year == 1859
    view.toggle_year(1989)
    assert view.expanded_year == 1989
    view.toggle_year(1989)
    assert view.expanded_year is None


def test_scroll_to_year_with_anchor():
    view = TimelineView([_row(1, "1989-03-13")])
    view.register_anchor(1989, 900)

    assert view.request_scroll_to_year(1989)
    assert view.scroll_y == 900 - HEADER_OFFSET
    assert view.expanded_year == 1989


def test_scroll_waits_one_tick_for_anchor():
    view = TimelineView([_row(1, "1989-03-13")])

    assert view.request_scroll_to_year(1989) is False
    assert view.pending_scroll == 1989
    view.register_anchor(1989, 500)

    assert view.tick()
    assert view.scroll_y == 500 - HEADER_OFFSET
    assert view.expanded_year == 1989
    assert view.pending_scroll is None


def test_scroll_request_dropped_after_tick():
    view = TimelineView([_row(1, "1989-03-13")])
    view.request_scroll_to_year(1989)

    assert view.tick() is False
    assert view.pending_scroll is None
    assert view.expanded_year is None
    assert view.tick() is False
