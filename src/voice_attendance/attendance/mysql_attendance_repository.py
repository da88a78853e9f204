from __future__ import annotations

from typing import Any, Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_column, fetchone, load_json_column
from .model import AttendanceDocument
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> AttendanceDocument:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body FROM attendance_documents WHERE attendance_key=%s",
                (key,),
            )
            r = fetchone(cur)
            return AttendanceDocument.from_dict(load_json_column(r["body"]) if r else None)

    def merge(self, key: str, partial: Mapping[str, Any]) -> None:
        # Row lock keeps a single merge atomic; it does not protect the caller's
        # earlier read.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body FROM attendance_documents WHERE attendance_key=%s FOR UPDATE",
                (key,),
            )
            r = fetchone(cur)
            body = load_json_column(r["body"]) if r else {}
            body.update(dict(partial))

            cur.execute(
                """
                INSERT INTO attendance_documents(attendance_key, body)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (key, dump_json_column(body)),
            )
