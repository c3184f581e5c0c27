"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError

from mentorapp.database import SkillRecord, init_database, get_session
from mentorapp.logger import StructuredLogger, reset_logger
from mentorapp.skill_service import SkillService


@pytest.fixture
def quiet_logger(tmp_path) -> StructuredLogger:
    """Logger that only writes to a temporary log file."""
    return StructuredLogger(
        name="test",
        level="DEBUG",
        log_dir=tmp_path / "logs",
        enable_console=False,
    )


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Create an empty skill database."""
    path = tmp_path / "skills.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Session on the temporary database."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def service(db_session, quiet_logger) -> SkillService:
    return SkillService(db_session, logger=quiet_logger)


@pytest.fixture
def seeded_session(db_session):
    """Session whose database holds five skills with ids 0000000001..0000000005."""
    names = ["Go", "Python", "Django", "Rust", "golang tooling"]
    for i, name in enumerate(names, start=1):
        db_session.add(
            SkillRecord(
                id=f"{i:010d}",
                name=name,
                authorized=1 if i % 2 else 0,
                added=datetime(2024, 1, i, 12, 0, 0),
            )
        )
    db_session.commit()
    return db_session


@pytest.fixture
def seeded_service(seeded_session, quiet_logger) -> SkillService:
    return SkillService(seeded_session, logger=quiet_logger)


@pytest.fixture
def failing_session():
    """Session whose every statement fails like a locked database."""
    session = MagicMock()
    session.execute.side_effect = OperationalError(
        "SELECT", {}, Exception("database is locked")
    )
    return session


@pytest.fixture
def failing_service(failing_session, quiet_logger) -> SkillService:
    return SkillService(failing_session, logger=quiet_logger)


@pytest.fixture
def fresh_global_logger():
    reset_logger()
    yield
    reset_logger()
