# tests/conftest.py
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.events.domain_events import DomainEvents
from core.interfaces import ImageSearchClient
from core.models import TaskImage
from core.services.critical_path import CriticalPathService
from core.services.image import InlineExecutor, TaskImageService
from core.services.task import TaskService
from infra.db.base import Base
from infra.db.repositories import SqlAlchemyDependencyRepository, SqlAlchemyTaskRepository
from infra.services import shared_session_scope


class FakeImageClient(ImageSearchClient):
    def __init__(self, image: Optional[TaskImage] = None):
        self.image = image
        self.queries: list[str] = []

    def search_image(self, text: str) -> Optional[TaskImage]:
        self.queries.append(text)
        return self.image


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def events():
    # fresh signals per test so services from earlier tests never receive events
    return DomainEvents()


@pytest.fixture
def image_client():
    return FakeImageClient(TaskImage(url="https://images.example/medium.jpg", alt="A photo"))


@pytest.fixture
def services(session, events, image_client):
    # Recreate what build_service_graph() does without a session factory: everything inline
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)

    critical_path_service = CriticalPathService(session, task_repo, events=events)
    image_service = TaskImageService(
        shared_session_scope(session, task_repo),
        image_client,
        executor=InlineExecutor(),
    )
    task_service = TaskService(
        session,
        task_repo,
        dependency_repo,
        image_service=image_service,
        schedule_trigger=critical_path_service.recalculate_and_update,
        events=events,
    )

    return {
        "session": session,
        "events": events,
        "task_repo": task_repo,
        "dependency_repo": dependency_repo,
        "task_service": task_service,
        "critical_path_service": critical_path_service,
        "image_service": image_service,
        "image_client": image_client,
    }
