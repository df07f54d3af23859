"""API schemas package - Pydantic models for request/response."""

from api.schemas.framework_models import (
    FileImportSummary,
    FrameworkImportRequest,
    FrameworkImportResponse,
)

__all__ = [
    "FileImportSummary",
    "FrameworkImportRequest",
    "FrameworkImportResponse",
]
