"""pytest configuration for propstrip tests."""
import logging
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def _reset_project_logger() -> None:
    logger = logging.getLogger("propstrip")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep user-level config and logging setup out of the tests."""
    for name in ("PROPSTRIP_CONFIG", "PROPSTRIP_DRYRUN", "PROPSTRIP_LOG_LEVEL", "PROPSTRIP_LOG_FILE", "PROPSTRIP_LOG_FORCE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROPSTRIP_LOG_COLOR", "0")
    _reset_project_logger()
    yield
    _reset_project_logger()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def component_jsx() -> str:
    return (FIXTURES / "component.jsx").read_text(encoding="utf-8")


@pytest.fixture
def component_tsx() -> str:
    return (FIXTURES / "component.tsx").read_text(encoding="utf-8")
