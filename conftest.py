import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tutor_scheduler.auth import create_token_for_user
from tutor_scheduler.database import Base, get_db
from tutor_scheduler.main import app
from tutor_scheduler.models import Client, Lesson, LessonStatus, User, UserRole

# Monday 2030-01-07; the whole suite works inside this week
MONDAY = datetime(2030, 1, 7)


def at(day_offset: int, hour: int, minute: int = 0) -> datetime:
    """Wall-clock time in the test week, day_offset 0 = Monday."""
    return MONDAY + timedelta(days=day_offset, hours=hour, minutes=minute)


def slot_json(start: datetime, minutes: int = 60) -> dict:
    return {"from": start.isoformat(), "to": (start + timedelta(minutes=minutes)).isoformat()}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, username: str, role: UserRole = UserRole.TEACHER) -> User:
    user = User(username=username, email=f"{username}@example.com", full_name=username.title(), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def teacher(db):
    return _make_user(db, "teacher")


@pytest.fixture
def other_teacher(db):
    return _make_user(db, "other_teacher")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin", UserRole.ADMIN)


@pytest.fixture
def make_client(db):
    def _make(owner: User, full_name: str = "Anna Petrova", vip: bool = False) -> Client:
        client = Client(user_id=owner.id, full_name=full_name, vip=vip)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client
    return _make


@pytest.fixture
def student(teacher, make_client):
    return make_client(teacher)


@pytest.fixture
def vip_student(teacher, make_client):
    return make_client(teacher, "Boris Ivanov", vip=True)


@pytest.fixture
def make_lesson(db):
    def _make(owner: User, client: Client, start: datetime, duration_min: int = 60,
              status: LessonStatus = LessonStatus.PLANNED) -> Lesson:
        lesson = Lesson(
            user_id=owner.id,
            client_id=client.id,
            start_time=start,
            duration_min=duration_min,
            type="individual",
            status=status,
        )
        db.add(lesson)
        db.commit()
        db.refresh(lesson)
        return lesson
    return _make


@pytest.fixture
def auth_headers(teacher):
    return {"Authorization": f"Bearer {create_token_for_user(teacher)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_token_for_user(admin)}"}
