"""
Общие фикстуры тестов каталога курсов.
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from course_catalog.catalog import (
    CourseRepository,
    InMemoryKeyValueStore,
    LocalStorageBackend,
    RemoteApiBackend,
)
from course_catalog.learners import (
    InMemoryProgressTracker,
    InMemoryUserDirectory,
    Learner,
)

API_BASE_URL = "http://testserver/api"


class FakeCourseApi:
    """Поддельный REST API курсов для httpx.MockTransport."""

    def __init__(self, courses: Optional[List[Dict[str, Any]]] = None):
        self.courses: List[Dict[str, Any]] = list(courses or [])
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[int] = None
        self.offline = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": "server error"})

        path = request.url.path
        if request.method == "GET" and path == "/api/courses":
            return httpx.Response(200, json=self.courses)
        if request.method == "POST" and path == "/api/courses/add":
            self.courses.append(json.loads(request.content))
            return httpx.Response(201, json={"ok": True})
        if request.method == "DELETE" and path == "/api/courses/delete":
            course_id = json.loads(request.content)["id"]
            self.courses = [c for c in self.courses if c["id"] != course_id]
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404)

    def calls(self, method: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """Фикстура пустого хранилища ключ-значение."""
    return InMemoryKeyValueStore()


@pytest.fixture
def local_backend(store: InMemoryKeyValueStore) -> LocalStorageBackend:
    return LocalStorageBackend(store)


@pytest.fixture
def user_directory() -> InMemoryUserDirectory:
    """Фикстура каталога пользователей: два студента и преподаватель."""
    return InMemoryUserDirectory(
        [
            Learner(id=1, name="Alice", role="student", enrolled_courses=[1, 2]),
            Learner(id=2, name="Bob", role="student", enrolled_courses=["1"]),
            Learner(id=3, name="Carol", role="instructor", enrolled_courses=[1]),
        ]
    )


@pytest.fixture
def progress_tracker() -> InMemoryProgressTracker:
    return InMemoryProgressTracker()


@pytest.fixture
async def repo(
    local_backend: LocalStorageBackend,
    user_directory: InMemoryUserDirectory,
    progress_tracker: InMemoryProgressTracker,
) -> CourseRepository:
    """Фикстура открытого репозитория с пустым локальным каталогом."""
    repository = CourseRepository(
        local_backend,
        user_directory=user_directory,
        progress_tracker=progress_tracker,
        seed=(),
    )
    return await repository.open()


@pytest.fixture
def api() -> FakeCourseApi:
    return FakeCourseApi(
        [
            {"id": 1, "title": "Python Basics", "categories": ["programming"]},
            {"id": 2, "title": "Data Science", "categories": ["data"], "visits": 4},
        ]
    )


@pytest.fixture
async def http_client(api: FakeCourseApi):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(api.handler), base_url=API_BASE_URL
    )
    yield client
    await client.aclose()


@pytest.fixture
def remote_backend(http_client: httpx.AsyncClient) -> RemoteApiBackend:
    return RemoteApiBackend(API_BASE_URL, client=http_client)


@pytest.fixture
def remote_repo(remote_backend: RemoteApiBackend) -> CourseRepository:
    """Фикстура репозитория поверх поддельного API (еще не загружен)."""
    return CourseRepository(remote_backend)
