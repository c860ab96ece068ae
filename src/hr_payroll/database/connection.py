from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol

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
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )


class TransactionManager(Protocol):
    def transaction(self) -> Any:
        """Context manager; every repository call inside it is all-or-nothing."""

        raise NotImplementedError


class DatabaseConnection(TransactionManager):
    """DB connection factory.

    Outside a transaction we create short-lived connections per operation.
    Inside `transaction()` the current thread reuses one connection until the
    block exits, then commits (or rolls back on any exception).
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def active_connection(self) -> Optional[Any]:
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        current = self.active_connection()
        if current is not None:
            # Nested: join the outer transaction.
            yield current
            return

        conn = self.connect()
        try:
            conn.start_transaction()
            self._local.conn = conn
            try:
                yield conn
                conn.commit()
            except Exception:
                logger.warning("Rolling back transaction on %s", self._config.database)
                conn.rollback()
                raise
        finally:
            self._local.conn = None
            conn.close()
