"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for skill storage.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, Integer, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class SkillRecord(Base):
    """Skill row as stored. authorized is kept as 0/1."""

    __tablename__ = "skill"

    id = Column(String(10), primary_key=True)  # 10 lowercase hex chars
    name = Column(String, nullable=False)
    authorized = Column(Integer, nullable=False, default=0)
    added = Column(DateTime, nullable=False, default=datetime.now)


skill_table = SkillRecord.__table__


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
