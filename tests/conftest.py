"""Test configuration and fixtures."""

import os
import sys
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from blogsync.core.db import Base, get_db_session  # noqa: E402
from blogsync.core.settings import Settings  # noqa: E402
from blogsync.models import schema  # noqa: E402,F401


@pytest.fixture
def test_db():
    """Create a test database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(test_db):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_db)


@pytest.fixture
def db_session(session_factory):
    """Create a test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def db_factory(session_factory):
    """Context-manager session factory shaped like ``get_db``."""

    @contextmanager
    def _factory():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    return _factory


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and the real media directory."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        logs_dir=tmp_path / "logs",
        media_dir=tmp_path / "uploads",
        blog_base_url="https://blog.example.com",
        site_url="https://fallback.example.com",
        linkedin_access_token="token-123",
        linkedin_person_urn="abc123",
        http_max_retries=2,
    )


@pytest.fixture
def client(db_session):
    """Create a test client with database override."""
    from blogsync.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db_session] = override_get_db

    # No context manager: startup would initialize the configured database
    yield TestClient(app)

    app.dependency_overrides.clear()
