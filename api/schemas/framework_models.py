"""Pydantic models for the framework import endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FrameworkImportRequest(BaseModel):
    """Scale selection submitted by the admin import form."""

    scale_id: int = Field(..., gt=0, description="Grading scale attached to each framework")
    scale_configuration: str = Field(
        ..., description="Scale configuration JSON, passed through unchanged"
    )


class FileImportSummary(BaseModel):
    """Outcome of importing one standards document."""

    source: str
    stage: str = Field(description="pending | extracted | resolved | framework_created | completed | failed")
    failed_stage: str | None = None
    framework_id: int | None = None
    competencies_created: int = 0
    ancestors_synthesized: int = 0
    ancestors_skipped: list[str] = Field(default_factory=list)
    error: str | None = None


class FrameworkImportResponse(BaseModel):
    """Response for POST /api/frameworks/import."""

    success: bool
    message: str | None = Field(None, description="Confirmation notice on success")
    error: str | None = Field(None, description="Accumulated error messages on failure")
    files: list[FileImportSummary] = Field(default_factory=list)
