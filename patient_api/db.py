import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import pooling

from . import config

logger = logging.getLogger("patient_api.db")

CREATE_PATIENT_TABLE = """
CREATE TABLE IF NOT EXISTS patient (
    patientid INT AUTO_INCREMENT PRIMARY KEY,
    name VARCHAR(100),
    dateOfBirth DATE
) ENGINE=InnoDB
"""


class DatabaseError(Exception):
    """Any failure while talking to MySQL."""


class Database:
    """
    Execution collaborator backed by a MySQL connection pool.

    mysql.connector pools raise instead of blocking when exhausted, so callers
    wait on a semaphore sized like the pool before borrowing a connection.
    """

    def __init__(self, pool, pool_size: int):
        self.pool = pool
        self._slots = threading.BoundedSemaphore(pool_size)

    @classmethod
    def from_config(
        cls,
        settings: Optional[Dict[str, Any]] = None,
        pool_size: Optional[int] = None,
    ) -> "Database":
        settings = settings or config.database_settings()
        pool_size = pool_size or config.DB_POOL_SIZE

        logger.info(
            "Creating MySQL pool host=%s port=%s database=%s size=%d",
            settings.get("host"),
            settings.get("port"),
            settings.get("database"),
            pool_size,
        )
        try:
            pool = pooling.MySQLConnectionPool(
                pool_name="patient_api",
                pool_size=pool_size,
                **settings,
            )
        except mysql.connector.Error as e:
            raise DatabaseError(f"Could not create connection pool: {e}") from e

        return cls(pool, pool_size)

    def ensure_table(self) -> None:
        self._run(None, None)

    def execute(
        self,
        statement: str,
        params: Optional[Sequence[Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Run one statement after making sure the patient table exists.
        Returns rows as dicts (empty list when there is no result set).
        """
        return self._run(statement, params)

    def _run(self, statement, params) -> List[Dict[str, Any]]:
        with self._slots:
            try:
                conn = self.pool.get_connection()
            except mysql.connector.Error as e:
                raise DatabaseError(f"MySQL connection error: {e}") from e

            cursor = None
            try:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(CREATE_PATIENT_TABLE)

                rows: List[Dict[str, Any]] = []
                if statement is not None:
                    cursor.execute(statement, params)
                    if cursor.with_rows:
                        rows = cursor.fetchall()
                        logger.debug("Statement returned %d rows", len(rows))
                    else:
                        logger.debug("Statement affected %d rows", cursor.rowcount)

                conn.commit()
                return rows
            except mysql.connector.Error as e:
                raise DatabaseError(f"MySQL query error: {e}") from e
            finally:
                if cursor:
                    cursor.close()
                # returns the connection to the pool
                conn.close()
