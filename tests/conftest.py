"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccss_import.importer.config import ImportConfig, StandardsSource
from tests.helpers import (
    MATH_PAGES,
    FakeFetcher,
    RecordingProgress,
    RecordingStore,
    math_document,
)


@pytest.fixture
def math_file(tmp_path: Path) -> Path:
    path = tmp_path / "math.xml"
    path.write_text(math_document(), encoding="utf-8")
    return path


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(MATH_PAGES)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def math_config(math_file: Path) -> ImportConfig:
    return ImportConfig(sources=[StandardsSource(name="Math", path=math_file)])
