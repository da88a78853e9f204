from __future__ import annotations

import random
from datetime import datetime

import pytest

from voice_attendance.attendance.memory_repository import InMemoryAttendanceRepository
from voice_attendance.attendance.service import AttendanceService
from voice_attendance.dialogue.machine import DialogueMachine
from voice_attendance.sessions.service import SessionService

# Monday
FIXED_NOW = datetime(2024, 3, 11, 9, 30, 0)


class FakeProfileClient:
    def __init__(self, profile=None):
        self.profile = profile
        self.calls = []

    def fetch(self, access_token):
        self.calls.append(access_token)
        return self.profile


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepository()


@pytest.fixture
def attendance_service(attendance_repo, clock):
    return AttendanceService(attendance_repo, clock=clock)


@pytest.fixture
def session_service(attendance_repo, clock):
    return SessionService(attendance_repo, clock=clock, rng=random.Random(7))


@pytest.fixture
def machine(attendance_service, session_service):
    return DialogueMachine(attendance_service, session_service)
