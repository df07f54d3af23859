"""Postgres-backed competency store.

Uses psycopg3. Every create runs in its own transaction and commits
immediately, so frameworks imported earlier in a run survive a failure in a
later file.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator

import psycopg
from psycopg.rows import dict_row

from .config import DBConfig
from .models import (
    CompetencyRecord,
    CreatedCompetency,
    CreatedFramework,
    FrameworkRecord,
)
from .store import StoreValidationError

logger = logging.getLogger(__name__)

TOP_LEVEL_PATH = "/0/"

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS competency_frameworks (
        id BIGSERIAL PRIMARY KEY,
        shortname VARCHAR(100) NOT NULL,
        idnumber VARCHAR(100) NOT NULL UNIQUE,
        description TEXT,
        descriptionformat SMALLINT NOT NULL DEFAULT 1,
        scaleid BIGINT NOT NULL,
        scaleconfiguration TEXT NOT NULL,
        contextid BIGINT NOT NULL,
        timecreated TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS competencies (
        id BIGSERIAL PRIMARY KEY,
        competencyframeworkid BIGINT NOT NULL REFERENCES competency_frameworks (id),
        parentid BIGINT NOT NULL DEFAULT 0,
        path VARCHAR(255) NOT NULL,
        sortorder INTEGER NOT NULL DEFAULT 0,
        shortname VARCHAR(100) NOT NULL,
        idnumber VARCHAR(100) NOT NULL,
        description TEXT,
        descriptionformat SMALLINT NOT NULL DEFAULT 1,
        timecreated TIMESTAMPTZ NOT NULL DEFAULT now(),
        UNIQUE (competencyframeworkid, idnumber)
    )
    """,
)


class DBCompetencyStore:
    """Competency store writing to the competency_frameworks/competencies tables."""

    def __init__(self, conn: psycopg.Connection):
        """Wrap an open autocommit connection using dict rows."""
        self.conn = conn

    @classmethod
    @contextmanager
    def connect(cls, config: DBConfig) -> Generator[DBCompetencyStore, None, None]:
        """Open a connection, ensure the schema exists and yield a store.

        Yields:
            Store bound to the open connection; closed on exit.
        """
        conn = psycopg.connect(config.connection_string, row_factory=dict_row, autocommit=True)
        try:
            store = cls(conn)
            store.ensure_schema()
            yield store
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Schema management
    # -------------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create the framework and competency tables if they are missing."""
        with self.conn.transaction():
            with self.conn.cursor() as cur:
                for statement in SCHEMA_STATEMENTS:
                    cur.execute(statement)

    # -------------------------------------------------------------------------
    # Create operations
    # -------------------------------------------------------------------------

    def create_framework(self, record: FrameworkRecord) -> CreatedFramework:
        row = self._insert(
            """
            INSERT INTO competency_frameworks (
                shortname, idnumber, description, descriptionformat,
                scaleid, scaleconfiguration, contextid
            )
            VALUES (
                %(shortname)s, %(idnumber)s, %(description)s, %(descriptionformat)s,
                %(scaleid)s, %(scaleconfiguration)s, %(contextid)s
            )
            RETURNING id, idnumber
            """,
            record.model_dump(),
        )
        return CreatedFramework(id=row["id"], idnumber=row["idnumber"])

    def create_competency(self, record: CompetencyRecord) -> CreatedCompetency:
        data = record.model_dump()
        data["path"] = self._path_for(record)
        data["sortorder"] = self._next_sortorder(record)

        row = self._insert(
            """
            INSERT INTO competencies (
                competencyframeworkid, parentid, path, sortorder,
                shortname, idnumber, description, descriptionformat
            )
            VALUES (
                %(competencyframeworkid)s, %(parentid)s, %(path)s, %(sortorder)s,
                %(shortname)s, %(idnumber)s, %(description)s, %(descriptionformat)s
            )
            RETURNING id, idnumber
            """,
            data,
        )
        return CreatedCompetency(id=row["id"], idnumber=row["idnumber"])

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _insert(self, query: str, data: dict[str, Any]) -> dict[str, Any]:
        """Run an INSERT ... RETURNING in its own transaction."""
        try:
            with self.conn.transaction():
                with self.conn.cursor() as cur:
                    cur.execute(query, data)
                    row = cur.fetchone()
        except psycopg.IntegrityError as e:
            logger.debug("Insert rejected: %s", e)
            msg = f"Record '{data.get('idnumber')}' rejected: {e.diag.message_primary or e}"
            raise StoreValidationError(msg) from e
        if row is None:
            msg = f"Insert of '{data.get('idnumber')}' returned no row"
            raise StoreValidationError(msg)
        return row

    def _path_for(self, record: CompetencyRecord) -> str:
        """Materialized path: /0/ for top level, else parent path + parent id."""
        if not record.parentid:
            return TOP_LEVEL_PATH

        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT path FROM competencies WHERE id = %s AND competencyframeworkid = %s",
                (record.parentid, record.competencyframeworkid),
            )
            parent = cur.fetchone()
        if parent is None:
            msg = f"Parent competency {record.parentid} does not exist in this framework"
            raise StoreValidationError(msg)
        return f"{parent['path']}{record.parentid}/"

    def _next_sortorder(self, record: CompetencyRecord) -> int:
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT COUNT(*) AS siblings FROM competencies "
                "WHERE competencyframeworkid = %s AND parentid = %s",
                (record.competencyframeworkid, record.parentid),
            )
            row = cur.fetchone()
        return row["siblings"] if row else 0
