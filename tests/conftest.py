"""
logfacade - Pytest Configuration
Fixtures partagées pour tous les tests.
"""

import pytest
from pathlib import Path

from logfacade import Config, Logger, Recorder, new_with_writer


@pytest.fixture
def fixtures_path() -> Path:
    """Chemin vers le dossier fixtures."""
    return Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def recorder() -> Recorder:
    """Recorder vide."""
    return Recorder()


@pytest.fixture
def recorded_logger(recorder: Recorder) -> Logger:
    """Logger niveau debug écrivant dans le recorder."""
    return new_with_writer(Config(), recorder)
