import pytest

from solarwatch.ui.blocking import FALLBACK_TEXT, BlockingOp, BlockingTracker


def test_idle_tracker():
    tracker = BlockingTracker()
    assert not tracker.blocking
    assert tracker.text is None


def test_highest_priority_text_wins():
    tracker = BlockingTracker()
    with tracker.hold(BlockingOp.SAVE_EVENT):
        assert tracker.text == "Saving event…"
        with tracker.hold(BlockingOp.DELETE_EVENT):
            assert tracker.text == "Deleting event…"
        assert tracker.text == "Saving event…"
    assert not tracker.blocking


def test_progress_text():
    tracker = BlockingTracker()
    with tracker.hold(BlockingOp.UPLOAD_QUEUED_MEDIA) as token:
        token.text = "Uploading article image 1 of 2…"
        assert tracker.text == "Uploading article image 1 of 2…"


def test_released_on_error():
    tracker = BlockingTracker()
    with pytest.raises(RuntimeError):
        with tracker.hold(BlockingOp.SAVE_ABOUT):
            raise RuntimeError("boom")
    assert not tracker.blocking


def test_fallback_text():
    tracker = BlockingTracker()
    with tracker.hold(BlockingOp.OTHER):
        assert tracker.text == FALLBACK_TEXT


def test_held_ops_in_acquire_order():
    tracker = BlockingTracker()
    first = tracker.acquire(BlockingOp.SAVE_ACCOUNT)
    tracker.acquire(BlockingOp.SAVE_PROFILE)
    assert tracker.held() == [BlockingOp.SAVE_ACCOUNT, BlockingOp.SAVE_PROFILE]
    tracker.release(first)
    tracker.release(first)
    assert tracker.held() == [BlockingOp.SAVE_PROFILE]
