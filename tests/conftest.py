"""
conftest.py
-----------
Shared pytest fixtures for the symptom log tests.

Provides fixtures for:
- Temporary SQLite database per test (foreign keys enabled)
- Sessions and repositories bound to that database
- Export sinks that record writes into a temporary directory
"""
from pathlib import Path

import pytest
import pytest_asyncio

import storage.models  # noqa: F401
from routers.utils.export_sinks import DirectoryShareSink, LocalFileSink
from storage.database import Base, build_engine, build_session_factory
from storage.repositories import DayTagRepository, EntryRepository


class RecordingFileSink(LocalFileSink):
    """LocalFileSink that remembers every write."""

    def __init__(self, export_dir):
        super().__init__(export_dir)
        self.writes = []

    async def write(self, filename, content):
        self.writes.append((filename, content))
        return await super().write(filename, content)


class FailingFileSink(LocalFileSink):
    """Sink whose writes always fail, as on a full or read-only disk."""

    async def write(self, filename, content):
        raise PermissionError(f"read-only export dir: {filename}")


# ----- Database Fixtures -----

@pytest_asyncio.fixture
async def engine(tmp_path):
    """Async engine on a fresh SQLite file with all tables created."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test engine."""
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    """A single session; tests that need committed state commit explicitly."""
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def tag_repo(session):
    return DayTagRepository(session)


@pytest.fixture
def entry_repo(session):
    return EntryRepository(session)


# ----- Export Fixtures -----

@pytest.fixture
def export_dir(tmp_path) -> Path:
    return tmp_path / "exports"


@pytest.fixture
def share_dir(tmp_path) -> Path:
    return tmp_path / "shared"


@pytest.fixture
def file_sink(export_dir):
    return RecordingFileSink(export_dir)


@pytest.fixture
def failing_sink(export_dir):
    return FailingFileSink(export_dir)


@pytest.fixture
def share_sink(share_dir):
    return DirectoryShareSink(share_dir)
