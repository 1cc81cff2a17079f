"""
Тесты локального хранилища каталога (JSON-файл и хранилище в памяти).
"""

import json
from pathlib import Path

from course_catalog.catalog import (
    Course,
    CourseRepository,
    InMemoryKeyValueStore,
    JsonKeyValueStore,
    LocalStorageBackend,
)
from course_catalog.shared_kernel import StorageErrorKind


class TestJsonKeyValueStore:
    """Тесты хранилища ключ-значение в JSON-файле."""

    def test_missing_file_reads_as_empty(self, tmp_path: Path):
        store = JsonKeyValueStore(tmp_path / "missing.json")

        assert store.get_item("anything") is None

    def test_set_get_remove(self, tmp_path: Path):
        path = tmp_path / "nested" / "storage.json"
        store = JsonKeyValueStore(path)

        store.set_item("a", "1")
        store.set_item("b", "2")
        store.remove_item("a")
        store.remove_item("not-there")

        assert store.get_item("a") is None
        assert store.get_item("b") == "2"
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_values_survive_new_instance(self, tmp_path: Path):
        path = tmp_path / "storage.json"
        JsonKeyValueStore(path).set_item("key", "значение")

        assert JsonKeyValueStore(path).get_item("key") == "значение"


class TestLocalStorageBackend:
    """Тесты локального хранилища каталога."""

    async def test_absent_key_means_nothing_persisted(self):
        result = await LocalStorageBackend(InMemoryKeyValueStore()).load()

        assert result.ok
        assert result.value is None

    async def test_save_and_load(self):
        store = InMemoryKeyValueStore()
        backend = LocalStorageBackend(store, namespace="test")
        courses = [Course(id=1, title="A"), Course(id=2, title="B", visits=3)]

        assert (await backend.save_catalog(courses)).ok
        result = await backend.load()

        assert store.keys() == ["test:courses"]
        assert [c.to_record() for c in result.value] == [c.to_record() for c in courses]

    async def test_corrupt_payload_is_reported(self):
        store = InMemoryKeyValueStore()
        store.set_item("course_catalog:courses", "{not json")

        result = await LocalStorageBackend(store).load()

        assert result.is_failure
        assert result.error_kind == StorageErrorKind.CORRUPT

    async def test_non_list_payload_is_reported(self):
        store = InMemoryKeyValueStore()
        store.set_item("course_catalog:courses", '{"id": 1}')

        result = await LocalStorageBackend(store).load()

        assert result.error_kind == StorageErrorKind.CORRUPT

    async def test_invalid_records_are_skipped(self):
        store = InMemoryKeyValueStore()
        store.set_item(
            "course_catalog:courses",
            json.dumps([{"id": 1, "title": "Valid"}, {"id": 2}, "garbage"]),
        )

        result = await LocalStorageBackend(store).load()

        assert [c.title for c in result.value] == ["Valid"]

    async def test_non_string_value_in_file_is_corrupt(self, tmp_path: Path):
        """Тест: курсы, записанные в файл объектом, а не строкой."""
        path = tmp_path / "storage.json"
        path.write_text(
            json.dumps({"course_catalog:courses": [{"id": 1, "title": "A"}]}),
            encoding="utf-8",
        )
        repository = CourseRepository(LocalStorageBackend(JsonKeyValueStore(path)))

        assert await repository.list_courses() == []
        assert repository.last_load_error.error_kind == StorageErrorKind.CORRUPT

    async def test_corrupt_file_degrades_to_empty_catalog(self, tmp_path: Path):
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        repository = CourseRepository(LocalStorageBackend(JsonKeyValueStore(path)))

        assert await repository.list_courses() == []
        assert repository.last_load_error.error_kind == StorageErrorKind.CORRUPT

    async def test_repository_over_json_file_round_trip(self, tmp_path: Path):
        path = tmp_path / "storage.json"
        async with CourseRepository(
            LocalStorageBackend(JsonKeyValueStore(path)), seed=()
        ) as repository:
            course = await repository.create_course({"title": "Persisted"})
            await repository.enroll_user(1, course.id)

        reopened = CourseRepository(LocalStorageBackend(JsonKeyValueStore(path)))
        courses = await reopened.list_courses()

        assert [c.title for c in courses] == ["Persisted"]
        assert courses[0].is_enrolled(1)
