"""Framework import router.

Provides the admin endpoint that imports the Common Core standards as
competency frameworks with the selected grading scale.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Generator

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, HTTPException

from api.config import get_import_config, get_settings
from api.schemas.framework_models import (
    FileImportSummary,
    FrameworkImportRequest,
    FrameworkImportResponse,
)
from ccss_import.hierarchy.ancestors import Fetcher, WebFetcher
from ccss_import.importer.config import DBConfig, ImportConfig
from ccss_import.importer.pipeline import FRAMEWORKS_CREATED, ImportOutcome, import_frameworks
from ccss_import.importer.progress import LoggingProgress
from ccss_import.importer.store import CompetencyStore, InMemoryStore

# Load environment variables for database config
REPO_ROOT = Path(__file__).parent.parent.parent
load_dotenv(REPO_ROOT / ".env")

logger = logging.getLogger(__name__)

router = APIRouter()


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_store() -> Generator[CompetencyStore, None, None]:
    """Yield the store the import writes to, closing it afterwards."""
    if get_settings().dry_run:
        yield InMemoryStore()
        return

    if not DBConfig.is_configured():
        raise HTTPException(
            status_code=503,
            detail="Database configuration not found. Set DATABASE_URL or HOST, DB_NAME, DB_USER, DB_PASSWORD.",
        )

    # Lazy import so the API starts without psycopg in dry-run setups
    import psycopg

    from ccss_import.importer.db_client import DBCompetencyStore

    stack = ExitStack()
    try:
        store = stack.enter_context(DBCompetencyStore.connect(DBConfig.from_env()))
    except psycopg.Error as e:
        logger.exception("Failed to connect to the competency database")
        raise HTTPException(status_code=503, detail=f"Database unavailable: {e}") from e

    with stack:
        yield store


def get_fetcher(config: ImportConfig = Depends(get_import_config)) -> Generator[Fetcher, None, None]:
    """Fetcher used to synthesize missing ancestors, closed after the request."""
    with WebFetcher(timeout=config.fetch_timeout) as fetcher:
        yield fetcher


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


def _to_response(outcome: ImportOutcome) -> FrameworkImportResponse:
    files = [
        FileImportSummary(
            source=f.source,
            stage=f.stage.value,
            failed_stage=f.failed_stage.value if f.failed_stage else None,
            framework_id=f.framework_id,
            competencies_created=f.created_count,
            ancestors_synthesized=len(f.synthesized),
            ancestors_skipped=f.skipped_ancestors,
            error=f.error,
        )
        for f in outcome.files
    ]
    if outcome.success:
        return FrameworkImportResponse(success=True, message=FRAMEWORKS_CREATED, files=files)
    return FrameworkImportResponse(
        success=False,
        error=outcome.to_dict()["error"],
        files=files,
    )


@router.post("/import", response_model=FrameworkImportResponse)
def import_standards(
    request: FrameworkImportRequest,
    store: CompetencyStore = Depends(get_store),
    fetcher: Fetcher = Depends(get_fetcher),
    config: ImportConfig = Depends(get_import_config),
) -> FrameworkImportResponse:
    """Import the configured standards documents as competency frameworks.

    Per-file failures are reported in the response body rather than as HTTP
    errors; earlier files that succeeded are kept.
    """
    try:
        outcome = import_frameworks(
            request.scale_id,
            request.scale_configuration,
            store=store,
            fetcher=fetcher,
            progress=LoggingProgress(logger),
            config=config,
        )
    except Exception as e:
        logger.exception("Error during framework import")
        raise HTTPException(status_code=500, detail=f"Import failed: {e!s}") from e

    return _to_response(outcome)
