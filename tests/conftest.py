import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["CACHE_ENABLED"] = "false"
os.environ["ADMIN_SECRET"] = "test-admin-secret"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RATE_LIMIT_PER_HOUR"] = "100000"
os.environ["QUIZ_STARTS_PER_MINUTE"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import Iterator
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import Material, MaterialType
from app.services.quiz_session_service import QuizSessionService
from tests.helpers import FakeGenerator, words


@pytest.fixture
def db_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_material(db_session: Session):
    def _make(
        word_count: int = 2000,
        material_type: MaterialType = MaterialType.VIDEO,
        reward_minutes: Optional[int] = None,
        title: str = "Photosynthesis basics",
    ) -> Material:
        material = Material(
            title=title,
            type=material_type,
            content_text=words(word_count),
            source_url="https://www.youtube.com/watch?v=abc123" if material_type == MaterialType.VIDEO else None,
            start_offset=0,
            reward_minutes=reward_minutes,
        )
        db_session.add(material)
        db_session.commit()
        db_session.refresh(material)
        return material

    return _make


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def session_service(generator: FakeGenerator) -> QuizSessionService:
    return QuizSessionService(generator=generator)


@pytest.fixture
def client(db_session: Session, session_service: QuizSessionService):
    from fastapi.testclient import TestClient

    from app.api.quizzes import get_quiz_session_service
    from app.database import get_db
    from app.main import app
    from app.utils.rate_limiter import rate_limiter

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_quiz_session_service] = lambda: session_service
    rate_limiter._hits.clear()  # noqa: SLF001
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
