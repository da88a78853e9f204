from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_column, fetchone, load_json_column
from .model import Credential
from .repository import CredentialRepository


class MySQLCredentialRepository(CredentialRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, doc_id: str) -> Optional[Credential]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT doc_id, body FROM credentials WHERE doc_id=%s", (doc_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Credential.from_dict(str(r["doc_id"]), load_json_column(r["body"]))

    def find_by_email(self, email: str) -> Optional[Credential]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT doc_id, body FROM credentials WHERE email=%s ORDER BY created_at LIMIT 1",
                (email,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Credential.from_dict(str(r["doc_id"]), load_json_column(r["body"]))

    def create(self, credential: Credential) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO credentials(doc_id, email, body)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE email=VALUES(email), body=VALUES(body)
                """,
                (credential.doc_id, credential.email, dump_json_column(credential.to_dict())),
            )
