"""Shared pytest fixtures for statex tests."""

import tempfile
import os
from pathlib import Path
import pytest

from statex.database.factories import create_sqlite_database
from statex.domain.extraction import ExtractionService
from statex.domain.security import SecurityService
from statex.extractors.score_priority import ScorePriorityExtractor


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def security_service(temp_db):
    """Create a SecurityService with a temporary database."""
    return SecurityService(temp_db)


@pytest.fixture
def score_priority(security_service):
    """Create the Score Priority extractor."""
    return ScorePriorityExtractor(security_service)


@pytest.fixture
def extraction_service(score_priority):
    """Create an ExtractionService with the Score Priority extractor."""
    return ExtractionService([score_priority])


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def statement_text(fixtures_dir):
    """Return the text of the sample Score Priority statement."""
    return (fixtures_dir / "score_priority_statement.txt").read_text(encoding="utf-8")
