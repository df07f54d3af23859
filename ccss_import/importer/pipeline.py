"""Ordered tree importer.

Builds one competency framework per standards document:

1. Extract the flat competency map from the XML document
2. Synthesize missing ancestors until every parent identifier is present
3. Promote the shortest identifier to a framework
4. Create the remaining competencies shortest-identifier first, so each
   parent exists in the store before its children

Each file is imported independently; its progress goes through four ticks
and its outcome is a FileImportResult. Nothing raises out of
import_frameworks(): failures come back in the ImportOutcome.

Usage:
    from ccss_import.importer import InMemoryStore, import_frameworks

    outcome = import_frameworks(2, scale_configuration, store=InMemoryStore())
    if not outcome.success:
        print(outcome.error)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from pydantic import ValidationError

from ccss_import.hierarchy.ancestors import Fetcher, WebFetcher, resolve_missing_ancestors
from ccss_import.hierarchy.errors import AncestorSynthesisError, DocumentError
from ccss_import.hierarchy.extractors import extract_competencies_from_file
from ccss_import.hierarchy.helpers import order_for_creation
from ccss_import.hierarchy.models import FlatTree, ResolutionRecord
from ccss_import.importer.config import ImportConfig, StandardsSource
from ccss_import.importer.models import (
    CreatedFramework,
    format_validation_error,
    to_competency_record,
    to_framework_record,
)
from ccss_import.importer.progress import NullProgress, ProgressSink
from ccss_import.importer.store import CompetencyStore, StoreValidationError
from ccss_import.models.constants import PROGRESS_TICKS_PER_FILE

logger = logging.getLogger(__name__)

FRAMEWORKS_CREATED = "Frameworks created"


# -----------------------------------------------------------------------------
# Data classes
# -----------------------------------------------------------------------------


class FileStage(str, Enum):
    """Where a file's import got to."""

    PENDING = "pending"
    EXTRACTED = "extracted"
    RESOLVED = "resolved"
    FRAMEWORK_CREATED = "framework_created"
    COMPLETED = "completed"
    FAILED = "failed"


_NEXT_STAGE = {
    FileStage.PENDING: FileStage.EXTRACTED,
    FileStage.EXTRACTED: FileStage.RESOLVED,
    FileStage.RESOLVED: FileStage.FRAMEWORK_CREATED,
    FileStage.FRAMEWORK_CREATED: FileStage.COMPLETED,
}


@dataclass
class FileImportResult:
    """Result of importing one standards document."""

    source: str
    stage: FileStage = FileStage.PENDING
    failed_stage: FileStage | None = None
    error: str | None = None
    framework_id: int | None = None
    # idnumber -> store id of every competency created from this file
    parents: dict[str, int] = field(default_factory=dict)
    created_count: int = 0
    synthesized: list[str] = field(default_factory=list)
    skipped_ancestors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.stage is FileStage.COMPLETED

    def fail(self, message: str) -> None:
        """Mark the file failed while moving to the stage after its current one."""
        self.failed_stage = _NEXT_STAGE[self.stage]
        self.stage = FileStage.FAILED
        self.error = f"{self.source}: {message}"
        logger.error("Import failed at stage '%s': %s", self.failed_stage.value, self.error)


@dataclass
class ImportOutcome:
    """Result of a full import run across all sources."""

    files: list[FileImportResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.files) and all(f.success for f in self.files)

    @property
    def errors(self) -> list[str]:
        return [f.error for f in self.files if f.error]

    @property
    def error(self) -> str:
        """All file errors joined for display; empty on success."""
        return "\n".join(self.errors)

    def to_dict(self) -> dict[str, object]:
        """`{"success": True}` or `{"error": message}` for callers."""
        if self.success:
            return {"success": True}
        return {"error": self.error or "No standards sources were imported"}


# -----------------------------------------------------------------------------
# Pipeline steps
# -----------------------------------------------------------------------------


def _extract_safe(source: StandardsSource, result: FileImportResult) -> FlatTree | None:
    """Extract the flat map, recording a failure on a bad document."""
    try:
        flat = extract_competencies_from_file(source.path)
    except DocumentError as e:
        result.fail(str(e))
        return None

    result.stage = FileStage.EXTRACTED
    logger.info("✓ %s: %d items extracted", source.name, len(flat))
    return flat


def _resolve_safe(
    flat: FlatTree,
    fetch: Fetcher,
    config: ImportConfig,
    result: FileImportResult,
) -> FlatTree | None:
    """Close the flat map over missing ancestors, recording a failure."""
    try:
        resolution = resolve_missing_ancestors(
            flat,
            fetch,
            policy=config.ancestor_failure_policy,
            max_fetches=config.max_ancestor_fetches,
        )
    except AncestorSynthesisError as e:
        result.fail(str(e))
        return None
    except Exception as e:
        logger.exception("Unexpected error resolving ancestors for %s", result.source)
        result.fail(f"Failed to resolve missing ancestors: {e}")
        return None

    result.synthesized = resolution.synthesized
    result.skipped_ancestors = resolution.skipped
    result.stage = FileStage.RESOLVED
    logger.info(
        "✓ %s: %d ancestors synthesized, %d skipped",
        result.source,
        len(resolution.synthesized),
        len(resolution.skipped),
    )
    return resolution.records


def _create_framework_safe(
    root: ResolutionRecord,
    scale_id: int,
    scale_configuration: str,
    store: CompetencyStore,
    config: ImportConfig,
    result: FileImportResult,
) -> CreatedFramework | None:
    """Create the framework from the root record, recording a failure."""
    try:
        record = to_framework_record(root, scale_id, scale_configuration, config.context_id)
        framework = store.create_framework(record)
    except ValidationError as e:
        result.fail(format_validation_error(e))
        return None
    except StoreValidationError as e:
        result.fail(str(e))
        return None
    except Exception as e:
        logger.exception("Unexpected store error creating framework %s", root.idnumber)
        result.fail(f"Failed to create framework: {e}")
        return None

    result.framework_id = framework.id
    result.stage = FileStage.FRAMEWORK_CREATED
    logger.info("✓ %s: framework %s created (id %d)", result.source, root.shortname, framework.id)
    return framework


def _create_competencies(
    records: Sequence[ResolutionRecord],
    framework: CreatedFramework,
    store: CompetencyStore,
    result: FileImportResult,
) -> None:
    """Create competencies in order, stopping at the first failure.

    A record whose parent identifier has no created competency (the
    framework root, or a skipped ancestor) is created at the top level.
    """
    for record in records:
        parent_id = result.parents.get(record.parentidnumber)
        try:
            competency = store.create_competency(
                to_competency_record(record, framework.id, parent_id)
            )
        except ValidationError as e:
            result.fail(f"{record.idnumber}: {format_validation_error(e)}")
            return
        except StoreValidationError as e:
            result.fail(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected store error creating competency %s", record.idnumber)
            result.fail(f"Failed to create competency {record.idnumber}: {e}")
            return

        result.parents[competency.idnumber] = competency.id
        result.created_count += 1

    result.stage = FileStage.COMPLETED
    logger.info("✓ %s: %d competencies created", result.source, result.created_count)


# -----------------------------------------------------------------------------
# Main pipeline
# -----------------------------------------------------------------------------


def run_file_import(
    source: StandardsSource,
    scale_id: int,
    scale_configuration: str,
    store: CompetencyStore,
    fetch: Fetcher,
    progress: ProgressSink,
    config: ImportConfig,
) -> FileImportResult:
    """Import one standards document as one framework.

    Reports PROGRESS_TICKS_PER_FILE ticks on success: after extraction,
    resolution, framework creation and competency creation. A failure ends
    the file's progress early.
    """
    result = FileImportResult(source=source.name)
    logger.info("=" * 60)
    logger.info("IMPORTING %s: %s", source.name, source.path)
    logger.info("=" * 60)

    progress.start(source.name, PROGRESS_TICKS_PER_FILE)
    try:
        flat = _extract_safe(source, result)
        if flat is None:
            return result
        progress.tick()

        resolved = _resolve_safe(flat, fetch, config, result)
        if resolved is None:
            return result
        progress.tick()

        ordered = order_for_creation(resolved)
        framework = _create_framework_safe(
            ordered[0], scale_id, scale_configuration, store, config, result
        )
        if framework is None:
            return result
        progress.tick()

        _create_competencies(ordered[1:], framework, store, result)
        if result.success:
            progress.tick()
        return result
    finally:
        progress.end()


def run_import(
    scale_id: int,
    scale_configuration: str,
    store: CompetencyStore,
    fetch: Fetcher,
    progress: ProgressSink,
    config: ImportConfig,
) -> ImportOutcome:
    """Import every configured source in order.

    Each file starts with an empty flat map and parents map. A failed file is
    not rolled back; later files still run unless config.stop_on_file_failure
    is set.
    """
    outcome = ImportOutcome()
    for source in config.sources:
        file_result = run_file_import(
            source, scale_id, scale_configuration, store, fetch, progress, config
        )
        outcome.files.append(file_result)
        if not file_result.success and config.stop_on_file_failure:
            logger.warning("Stopping import after failure in %s", source.name)
            break
    return outcome


def import_frameworks(
    scale_id: int,
    scale_configuration: str,
    *,
    store: CompetencyStore,
    fetcher: Fetcher | None = None,
    progress: ProgressSink | None = None,
    config: ImportConfig | None = None,
) -> ImportOutcome:
    """Import all Common Core frameworks into `store`.

    Args:
        scale_id: Grading scale attached to each framework.
        scale_configuration: Opaque scale configuration (JSON) for the scale.
        store: Competency store that creates the records.
        fetcher: Returns markup for an ancestor URI. Defaults to a WebFetcher
            that is closed when the run ends.
        progress: Progress sink. Defaults to NullProgress.
        config: Sources and policies. Defaults to ImportConfig().

    Returns:
        ImportOutcome with one FileImportResult per attempted source.
    """
    config = config or ImportConfig()
    progress = progress or NullProgress()
    if fetcher is None:
        with WebFetcher(timeout=config.fetch_timeout) as web_fetcher:
            outcome = run_import(scale_id, scale_configuration, store, web_fetcher, progress, config)
    else:
        outcome = run_import(scale_id, scale_configuration, store, fetcher, progress, config)
    if outcome.success:
        logger.info("%s: %d", FRAMEWORKS_CREATED, len(outcome.files))
    return outcome
