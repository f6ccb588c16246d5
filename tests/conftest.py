from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.crate_builder import CrateBuilder


@pytest.fixture
def crate_builder(tmp_path: Path) -> CrateBuilder:
    """Provide a throwaway cargo crate (with Cargo.toml) under tmp_path."""
    return CrateBuilder(tmp_path)


@pytest.fixture
def inside_crate(crate_builder: CrateBuilder, monkeypatch: pytest.MonkeyPatch) -> CrateBuilder:
    """Run the test from the crate root so project-root discovery finds it."""
    monkeypatch.chdir(crate_builder.path())
    return crate_builder


@pytest.fixture(autouse=True)
def _reset_snipgen_logging() -> Iterator[None]:
    """Drop handlers the CLI installs so later tests start from a clean logger."""
    yield
    logger = logging.getLogger("snipgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
