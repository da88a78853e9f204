from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "voice_attendance")),
        )

    def as_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }


class DatabaseConnection:
    """Connection factory handed to every MySQL repository.

    One instance is built by the container and injected; ``initialize`` runs the
    schema at most once per instance.
    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    def __init__(self, config: DBConfig, *, schema_path: Optional[Path] = None):
        self._config = config
        self._schema_path = schema_path
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        if self._initialized:
            return

        if self._schema_path is not None:
            from .bootstrap import apply_schema

            apply_schema(self._config.as_dict(), schema_path=self._schema_path)
            logger.info("Schema applied to %s@%s/%s", self._config.user, self._config.host, self._config.database)
        self._initialized = True

    def connect(self):
        self.initialize()
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
