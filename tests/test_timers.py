"""Tests for starting, listing and stopping timers."""

import os
import sys
from itertools import count
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.core.errors import ConflictError, ForbiddenError, ValidationError
from app.db.store import RecordStore
from app.services.timers import TimerService


@pytest.fixture()
def service(tmp_path):
    # Deterministic clock: 1000, 2500, 4000, ...
    ticks = count(start=1000, step=1500)
    return TimerService(RecordStore(tmp_path, "timers", []), clock=lambda: next(ticks))


def test_start_creates_active_timer(service):
    timer = service.start("u1", "draft proposal")

    assert timer.is_active is True
    assert timer.user_id == "u1"
    assert timer.description == "draft proposal"
    assert timer.start == 1000
    assert timer.progress == 0
    assert timer.end is None and timer.duration is None
    assert service.store.read() == [
        {
            "id": timer.id,
            "userId": "u1",
            "description": "draft proposal",
            "start": 1000,
            "isActive": True,
            "progress": 0,
        }
    ]


@pytest.mark.parametrize("description", ["", None])
def test_start_requires_description(service, description):
    with pytest.raises(ValidationError):
        service.start("u1", description)
    assert service.store.read() == []


def test_list_filters_by_user_and_active_flag(service):
    first = service.start("u1", "first")
    service.start("u2", "someone else")
    second = service.start("u1", "second")
    service.stop("u1", first.id)

    active = service.list("u1", True)
    stopped = service.list("u1", False)

    assert [t.id for t in active] == [second.id]
    assert [t.id for t in stopped] == [first.id]
    assert [t.description for t in service.list("u2", True)] == ["someone else"]


def test_list_preserves_insertion_order(service):
    ids = [service.start("u1", f"timer {i}").id for i in range(4)]

    assert [t.id for t in service.list("u1", True)] == ids


def test_stop_sets_end_and_duration(service):
    timer = service.start("u1", "draft proposal")

    stopped = service.stop("u1", timer.id)

    assert stopped.is_active is False
    assert stopped.end == 2500
    assert stopped.duration == 1500
    assert service.get("u1", timer.id) == stopped


def test_stop_foreign_timer_is_forbidden_and_untouched(service):
    timer = service.start("u1", "mine")
    before = service.store.read()

    with pytest.raises(ForbiddenError):
        service.stop("u2", timer.id)

    assert service.store.read() == before


def test_stop_unknown_timer_is_forbidden(service):
    with pytest.raises(ForbiddenError):
        service.stop("u1", "missing")


def test_second_stop_is_rejected_and_keeps_first_result(service):
    timer = service.start("u1", "once")
    stopped = service.stop("u1", timer.id)

    with pytest.raises(ConflictError):
        service.stop("u1", timer.id)

    assert service.get("u1", timer.id) == stopped


def test_get_hides_foreign_timers(service):
    timer = service.start("u1", "mine")

    with pytest.raises(ForbiddenError):
        service.get("u2", timer.id)
