from __future__ import annotations

import random
from datetime import datetime

import pytest

from voice_attendance.attendance.model import Session
from voice_attendance.core.exceptions import AmbiguousSessionError, NoSessionsError, NotFoundError
from voice_attendance.sessions import manager


def _session(name, code, *, start="2024-01-01", end="2024-06-30", created="2024-01-01T00:00:00", selected=False):
    return Session(name=name, code=code, start_date=start, end_date=end, created_at=created, is_selected=selected)


def test_generate_session_code_uses_name_prefix_and_random_suffix():
    code = manager.generate_session_code("Summer 2024 Semester!", rng=random.Random(1))

    assert code.startswith("summer20")
    assert len(code) == 12
    assert code[8:].isalnum()


def test_set_preset_twice_leaves_exactly_one_selected():
    sessions = [_session("Fall", "fall0001", selected=True), _session("Spring", "spring0001")]

    once, _ = manager.set_preset(sessions, "Spring")
    twice, selected = manager.set_preset(once, "spring")

    assert [s.code for s in twice if s.is_selected] == ["spring0001"]
    assert selected.code == "spring0001"
    assert selected.is_selected


def test_set_preset_errors():
    with pytest.raises(NoSessionsError):
        manager.set_preset([], "Fall")

    with pytest.raises(NotFoundError):
        manager.set_preset([_session("Fall", "fall0001")], "Winter")


def test_two_sessions_with_same_name_are_ambiguous_by_name_only():
    a = _session("Fall", "fall0001", start="2023-09-01", end="2023-12-20")
    b = _session("Fall", "fall0002", start="2024-09-01", end="2024-12-20")

    by_name = manager.resolve([a, b], "fall")
    assert by_name.is_ambiguous
    assert {s.code for s in by_name.matches} == {"fall0001", "fall0002"}
    assert by_name.session is None

    for code in ("fall0001", "fall0002"):
        by_code = manager.resolve([a, b], code)
        assert not by_code.is_ambiguous
        assert by_code.by_code
        assert by_code.session.code == code

    with pytest.raises(AmbiguousSessionError) as exc:
        manager.set_preset([a, b], "Fall")
    assert exc.value.matches == (a, b)


def test_upsert_replaces_session_with_same_name():
    existing = [_session("Fall", "fall0001", created="2024-01-01T00:00:00"), _session("Spring", "spring0001")]

    updated, saved = manager.upsert(
        existing,
        name="fall",
        start_date="2024-09-01",
        end_date="2024-12-20",
        set_as_preset=False,
        now=datetime(2024, 3, 11, 9, 0),
        rng=random.Random(3),
    )

    assert len(updated) == 2
    assert saved.code == "fall0001"
    assert saved.start_date == "2024-09-01"
    assert saved.end_date == "2024-12-20"
    assert updated[0] == saved


def test_upsert_as_preset_clears_other_presets():
    existing = [_session("Fall", "fall0001", selected=True)]

    updated, saved = manager.upsert(
        existing,
        name="Summer",
        start_date="2024-06-01",
        end_date=None,
        set_as_preset=True,
        now=datetime(2024, 3, 11, 9, 0),
    )

    assert [s.name for s in updated if s.is_selected] == ["Summer"]
    assert saved.end_date is None


def test_sessions_sorted_newest_first():
    old = _session("Old", "old0001", created="2023-01-01T00:00:00")
    new = _session("New", "new0001", created="2024-01-01T00:00:00")

    assert manager.sort_newest_first([old, new]) == [new, old]


def test_clear_preset_deselects_everything():
    cleared = manager.clear_preset([_session("Fall", "fall0001", selected=True), _session("Spring", "spring0001")])

    assert not any(s.is_selected for s in cleared)
