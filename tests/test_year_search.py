from solarwatch.ui.timeline import TimelineView
from solarwatch.ui.year_search import INVALID_YEAR, NOTICE_SECONDS, STILL_LOADING, YearSearch, closest_year


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_exact_match_navigates_without_note():
    search = YearSearch([1859, 1921, 1989])
    assert search.submit("1989") == 1989
    assert search.target_year == 1989
    assert search.info is None
    assert search.error is None


def test_closest_year_with_note():
    search = YearSearch([1859, 1921, 1989])
    assert search.submit("1900") == 1921
    assert search.info == "No events for 1900. Showing closest year: 1921."


def test_ties_pick_the_earlier_year():
    assert closest_year([1900, 1910], 1905) == 1900


def test_invalid_query():
    search = YearSearch([1859])
    for query in ("89", "19890", "abcd", ""):
        assert search.submit(query) is None
        assert search.error == INVALID_YEAR
    assert search.target_year is None


def test_still_loading():
    search = YearSearch()
    assert search.submit("1989") is None
    assert search.error == STILL_LOADING


def test_notices_auto_dismiss():
    clock = FakeClock()
    search = YearSearch([1859, 1921], clock=clock)
    search.submit("1900")
    assert search.info

    clock.now += NOTICE_SECONDS - 0.1
    assert search.info
    clock.now += 0.2
    assert search.info is None


def test_search_scrolls_timeline():
    timeline = TimelineView([{"id": 1, "event_date": "1921-05-13", "title": "Railroad storm"}])
    timeline.register_anchor(1921, 400)
    search = YearSearch(timeline.years, timeline=timeline)

    search.submit("1930")
    assert timeline.expanded_year == 1921


def test_decades():
    search = YearSearch([1989, 1859, 1921, 1859, 1851])
    assert search.decades == [1850, 1920, 1980]
    assert search.picker_decade == 1850
    assert search.years_in_decade(1850) == [1851, 1859]
    assert search.years_in_decade(1990) == []


def test_select_year_from_picker():
    search = YearSearch([1859, 1921])
    search.toggle_picker()
    search.submit("12")
    search.select_year(1921)

    assert search.query == "1921"
    assert search.error is None
    assert search.picker_open is False
    assert search.target_year == 1921
