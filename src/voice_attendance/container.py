from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from types import ModuleType
from typing import Callable, Optional

from .attendance.memory_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .database.bootstrap import SCHEMA_PATH
from .database.connection import DBConfig, DatabaseConnection
from .dialogue.machine import DialogueMachine
from .reports.service import AttendanceReportService
from .sessions.service import SessionService
from .users.memory_credential_repository import InMemoryCredentialRepository
from .users.mysql_credential_repository import MySQLCredentialRepository
from .users.profile_client import DEFAULT_PROFILE_URL, ProfileClient
from .users.repository import CredentialRepository
from .users.service import IdentityService
from .voice.router import IntentRouter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    credentials_repo: CredentialRepository
    attendance_repo: AttendanceRepository

    identity_service: IdentityService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    session_service: SessionService
    dialogue: DialogueMachine
    router: IntentRouter


def build_container(
    *,
    settings: ModuleType,
    credentials_repo: Optional[CredentialRepository] = None,
    attendance_repo: Optional[AttendanceRepository] = None,
    profiles: Optional[ProfileClient] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire repositories and services from a settings module.

    Repositories passed in explicitly win over the configured backend.
    """

    conn: Optional[DatabaseConnection] = None
    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()

    if credentials_repo is None or attendance_repo is None:
        if backend == "mysql":
            schema_path = SCHEMA_PATH if getattr(settings, "AUTO_INIT_DB", False) else None
            conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")), schema_path=schema_path)
            credentials_repo = credentials_repo or MySQLCredentialRepository(conn)
            attendance_repo = attendance_repo or MySQLAttendanceRepository(conn)
        else:
            credentials_repo = credentials_repo or InMemoryCredentialRepository()
            attendance_repo = attendance_repo or InMemoryAttendanceRepository()
    logger.info("Using %s store backend", backend)

    if profiles is None:
        profiles = ProfileClient(
            getattr(settings, "PROFILE_API_URL", DEFAULT_PROFILE_URL),
            timeout=float(getattr(settings, "PROFILE_TIMEOUT_SECONDS", 5.0)),
        )

    identity_service = IdentityService(credentials_repo, profiles, clock=clock)
    attendance_service = AttendanceService(attendance_repo, clock=clock)
    report_service = AttendanceReportService(attendance_repo, clock=clock)
    session_service = SessionService(attendance_repo, clock=clock)
    dialogue = DialogueMachine(attendance_service, session_service)
    router = IntentRouter(
        identity=identity_service,
        reports=report_service,
        sessions=session_service,
        dialogue=dialogue,
        clock=clock,
    )

    return Container(
        conn=conn,
        credentials_repo=credentials_repo,
        attendance_repo=attendance_repo,
        identity_service=identity_service,
        attendance_service=attendance_service,
        report_service=report_service,
        session_service=session_service,
        dialogue=dialogue,
        router=router,
    )
