"""
Tests for ccss_import.importer.db_client module, against a scripted connection.
"""

from contextlib import contextmanager

import psycopg
import pytest

from ccss_import.importer.db_client import SCHEMA_STATEMENTS, DBCompetencyStore
from ccss_import.importer.models import CompetencyRecord, FrameworkRecord
from ccss_import.importer.store import StoreValidationError
from tests.helpers import MATH_CONTENT, MATH_K, MATH_ROOT, SCALE_CONFIGURATION, SCALE_ID


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.conn.executed.append((" ".join(query.split()), params))
        if self.conn.errors:
            error = self.conn.errors.pop(0)
            if error is not None:
                raise error

    def fetchone(self):
        return self.conn.rows.pop(0)


class FakeConnection:
    """Returns queued rows from fetchone() and records every statement."""

    def __init__(self, rows=(), errors=()):
        self.rows = list(rows)
        self.errors = list(errors)
        self.executed: list[tuple[str, object]] = []
        self.transactions = 0

    def cursor(self):
        return FakeCursor(self)

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield


def _competency(idnumber: str, parent_id: int = 0) -> CompetencyRecord:
    return CompetencyRecord(shortname=idnumber, idnumber=idnumber, competencyframeworkid=1, parentid=parent_id)


def test_ensure_schema_creates_both_tables():
    conn = FakeConnection()

    DBCompetencyStore(conn).ensure_schema()

    assert len(conn.executed) == len(SCHEMA_STATEMENTS)
    assert "competency_frameworks" in conn.executed[0][0]
    assert "competencies" in conn.executed[1][0]


def test_create_framework_returns_assigned_id():
    conn = FakeConnection(rows=[{"id": 7, "idnumber": MATH_ROOT}])
    record = FrameworkRecord(
        shortname="CCSS.Math",
        idnumber=MATH_ROOT,
        scaleid=SCALE_ID,
        scaleconfiguration=SCALE_CONFIGURATION,
    )

    created = DBCompetencyStore(conn).create_framework(record)

    assert (created.id, created.idnumber) == (7, MATH_ROOT)
    query, params = conn.executed[0]
    assert query.startswith("INSERT INTO competency_frameworks")
    assert params["scaleconfiguration"] == SCALE_CONFIGURATION
    assert conn.transactions == 1


def test_top_level_competency_path():
    conn = FakeConnection(rows=[{"siblings": 2}, {"id": 11, "idnumber": MATH_CONTENT}])

    created = DBCompetencyStore(conn).create_competency(_competency(MATH_CONTENT))

    assert created.id == 11
    params = conn.executed[-1][1]
    assert params["path"] == "/0/"
    assert params["sortorder"] == 2
    assert params["parentid"] == 0


def test_child_competency_path_extends_parent():
    conn = FakeConnection(
        rows=[{"path": "/0/"}, {"siblings": 0}, {"id": 12, "idnumber": MATH_K}]
    )

    DBCompetencyStore(conn).create_competency(_competency(MATH_K, parent_id=11))

    params = conn.executed[-1][1]
    assert params["path"] == "/0/11/"
    assert params["sortorder"] == 0


def test_missing_parent_is_rejected():
    conn = FakeConnection(rows=[None])

    with pytest.raises(StoreValidationError, match="Parent competency 99"):
        DBCompetencyStore(conn).create_competency(_competency(MATH_K, parent_id=99))


def test_integrity_error_becomes_store_validation_error():
    conn = FakeConnection(
        rows=[{"siblings": 0}],
        errors=[None, psycopg.errors.UniqueViolation("duplicate key value")],
    )

    with pytest.raises(StoreValidationError, match="rejected"):
        DBCompetencyStore(conn).create_competency(_competency(MATH_CONTENT))
