from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector import pooling


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(data.get("host", "localhost")),
            port=int(data.get("port", 3306)),
            user=str(data.get("user", "root")),
            password=str(data.get("password", "")),
            database=str(data.get("database", "geo_attendance")),
            pool_size=int(data.get("pool_size", 5)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs = dict(host=self.host, port=self.port, user=self.user, password=self.password)
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Connection factory backed by a small mysql-connector pool.

    One instance per DBConfig. Check-ins for different students run in
    parallel request threads, so each repository call borrows a pooled
    connection and ``close()`` hands it back.
    """

    _instances: dict[DBConfig, "DatabaseConnection"] = {}
    _instances_lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instances_lock:
            if config not in cls._instances:
                cls._instances[config] = DatabaseConnection(config)
            return cls._instances[config]

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        # Created lazily so building the app never needs a reachable server.
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=f"geo_attendance_{self._config.database}",
                    pool_size=self._config.pool_size,
                    **self._config.connect_kwargs(),
                )
            return self._pool

    def connect(self):
        try:
            return self._get_pool().get_connection()
        except mysql.connector.errors.PoolError:
            # Pool exhausted: fall back to a dedicated connection.
            return mysql.connector.connect(**self._config.connect_kwargs())
