"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for job descriptions, resumes and scored results.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


class JobDescription(Base):
    __tablename__ = "job_descriptions"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    file_name = Column(String, nullable=False)
    jd_text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    results = relationship("Result", back_populates="job_description")


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    candidate_id = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    resume_text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class Result(Base):
    """One scored candidate for one job description."""

    __tablename__ = "results"

    id = Column(Integer, primary_key=True)
    resume_id = Column(Integer, ForeignKey("resumes.id"), nullable=False)
    jd_id = Column(Integer, ForeignKey("job_descriptions.id"), nullable=False)
    full_name = Column(String)
    university = Column(String)
    university_type = Column(String)
    experience = Column(String)
    summary = Column(Text)
    base_similarity = Column(Float, nullable=False)
    matched_skill_count = Column(Integer, nullable=False, default=0)
    similarity = Column(Float, nullable=False)
    technical_skills = Column(JSON)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    resume = relationship("Resume")
    job_description = relationship("JobDescription", back_populates="results")


def _engine(db_path: Path):
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(_engine(db_path))


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    Session = sessionmaker(bind=_engine(db_path))
    return Session()
