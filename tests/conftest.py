import json
from pathlib import Path

import pytest
from loguru import logger

FIXTURES_PATH = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def load_fixture():
    """Load a JSON fixture by file stem (e.g. 'flat_resume')."""

    def _load(stem: str):
        return json.loads((FIXTURES_PATH / f"{stem}.json").read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def session_logger():
    """Drop the sinks a session logger setup adds once the test is done."""
    yield
    logger.remove()
