"""Ordered tree importer for Common Core competency frameworks.

Usage:
    from ccss_import.importer import ImportConfig, InMemoryStore, import_frameworks

    outcome = import_frameworks(2, scale_configuration, store=InMemoryStore())

CLI:
    python -m ccss_import.importer.scripts.import_frameworks --help

Note:
    DBCompetencyStore (ccss_import.importer.db_client) requires psycopg[binary]>=3.1.0
    and is not imported here.
"""

from __future__ import annotations

from .config import DBConfig, ImportConfig, StandardsSource, default_sources
from .models import (
    CompetencyRecord,
    CreatedCompetency,
    CreatedFramework,
    FrameworkRecord,
    to_competency_record,
    to_framework_record,
)
from .pipeline import (
    FileImportResult,
    FileStage,
    ImportOutcome,
    import_frameworks,
    run_file_import,
    run_import,
)
from .progress import LoggingProgress, NullProgress, ProgressSink
from .store import CompetencyStore, InMemoryStore, StoreValidationError

__all__ = [
    "CompetencyRecord",
    "CompetencyStore",
    "CreatedCompetency",
    "CreatedFramework",
    "DBConfig",
    "FileImportResult",
    "FileStage",
    "FrameworkRecord",
    "ImportConfig",
    "ImportOutcome",
    "InMemoryStore",
    "LoggingProgress",
    "NullProgress",
    "ProgressSink",
    "StandardsSource",
    "StoreValidationError",
    "default_sources",
    "import_frameworks",
    "run_file_import",
    "run_import",
    "to_competency_record",
    "to_framework_record",
]
