from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5


class DatabaseConnection:
    """Process-wide database handle.

    The connection pool is created lazily on the first ``connect()`` and reused
    for the lifetime of the process. ``shutdown()`` drops it; call it when the
    process stops (``create_app`` registers it with ``atexit``).
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.shutdown()
            cls._instance = None

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            with self._pool_lock:
                if self._pool is None:
                    logger.info(
                        "Opening MySQL pool %s@%s:%s/%s (size=%s)",
                        self._config.user,
                        self._config.host,
                        self._config.port,
                        self._config.database,
                        self._config.pool_size,
                    )
                    self._pool = pooling.MySQLConnectionPool(
                        pool_name="ojt_tracker",
                        pool_size=int(self._config.pool_size),
                        pool_reset_session=True,
                        host=self._config.host,
                        port=int(self._config.port),
                        user=self._config.user,
                        password=self._config.password,
                        database=self._config.database,
                        # rowcount of an UPDATE counts matched rows, not changed ones.
                        client_flags=[ClientFlag.FOUND_ROWS],
                    )
        return self._pool

    def connect(self):
        """Borrow a pooled connection; ``close()`` on it returns it to the pool."""
        return self._get_pool().get_connection()

    def shutdown(self) -> None:
        """Close the idle pooled connections and drop the pool."""
        with self._pool_lock:
            if self._pool is None:
                return
            closed = self._pool._remove_connections()
            logger.info("Closed MySQL pool (%s idle connections)", closed)
            self._pool = None
