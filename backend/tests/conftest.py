import os
import tempfile
from datetime import date

import pytest

# Point the app engine at a throwaway file before app.main is imported.
_RUNTIME_DB = os.path.join(tempfile.mkdtemp(prefix="class-scheduling-"), "runtime.db")
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_RUNTIME_DB}")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models.class_session import ClassSession  # noqa: E402
from app.models.exam import Exam  # noqa: E402
from app.repositories.schedule_store import ScheduleStore  # noqa: E402
from app.services.conflict_detector import ConflictDetector  # noqa: E402

MONDAY = date(2026, 11, 2)


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def db():
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def store(db):
    return ScheduleStore(db)


@pytest.fixture()
def detector(store):
    return ConflictDetector(store)


@pytest.fixture()
def make_class_session(db):
    def _make(**overrides) -> ClassSession:
        values = {
            "title": "Mathematics - 10",
            "subject": "Mathematics",
            "class_name": "10",
            "section": "A",
            "instructor_id": "instructor-1",
            "date": MONDAY,
            "start_time": "09:00",
            "end_time": "10:00",
            "duration": 60,
            "room": "R101",
            "created_by": "admin-1",
        }
        values.update(overrides)
        record = ClassSession(**values)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture()
def make_exam(db):
    def _make(**overrides) -> Exam:
        values = {
            "name": "Mid-term Physics",
            "subject": "Physics",
            "class_name": "10",
            "section": "A",
            "date": MONDAY,
            "start_time": "09:00",
            "end_time": "11:00",
            "room": "Hall-1",
        }
        values.update(overrides)
        record = Exam(**values)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture()
def client():
    engine = _memory_engine()
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    engine.dispose()


def auth_headers(actor_id: str = "admin-1", role: str = "scheduler") -> dict[str, str]:
    token = create_access_token(actor_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def scheduler_headers():
    return auth_headers("admin-1", "scheduler")


@pytest.fixture()
def student_headers():
    return auth_headers("student-1", "student")
