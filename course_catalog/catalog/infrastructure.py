"""
Инфраструктурный слой контекста каталога курсов.

Содержит реализации хранилищ (локальное ключ-значение и удаленный API),
а также логгер поверх стандартного модуля logging.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx
from pydantic import ValidationError

from ..shared_kernel import StorageErrorKind, StorageResult
from . import interfaces as ports
from .domain import Course

DEFAULT_NAMESPACE = "course_catalog"


class LoggingAdapter(ports.ILogger):
    """Логгер, передающий сообщения и контекст в стандартный logging."""

    def __init__(self, name: str = "course_catalog"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if kwargs:
            context = json.dumps(kwargs, default=str, ensure_ascii=False)
            message = f"{message} | {context}"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)


class InMemoryKeyValueStore(ports.IKeyValueStore):
    """Хранилище ключ-значение в памяти с необязательной квотой."""

    def __init__(self, max_bytes: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self._max_bytes = max_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._max_bytes is not None:
            others = sum(len(v) for k, v in self._items.items() if k != key)
            if others + len(value) > self._max_bytes:
                raise OSError(f"Storage quota of {self._max_bytes} bytes exceeded")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonKeyValueStore(ports.IKeyValueStore):
    """Хранилище ключ-значение в JSON-файле.

    Файл содержит один объект, значения которого - строки.
    Ошибки чтения и разбора файла пробрасываются вызывающему.
    """

    def __init__(self, file_path: Union[str, Path]):
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _read(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}

        with open(self._file_path, "r", encoding="utf-8") as f:
            raw_data = f.read()

        if not raw_data.strip():
            return {}

        data = json.loads(raw_data)
        if not isinstance(data, dict):
            raise ValueError(f"{self._file_path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        # Создаем директорию, если она не существует
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def parse_catalog(records: Iterable[Any], logger: ports.ILogger) -> List[Course]:
    """Преобразует сырые записи в курсы, пропуская некорректные."""
    courses = []
    for record in records:
        try:
            courses.append(Course.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping invalid course record", error=str(e))
    return courses


class LocalStorageBackend(ports.IPersistenceBackend):
    """Хранилище каталога под одним ключом в хранилище ключ-значение."""

    name = "local"

    def __init__(
        self,
        store: ports.IKeyValueStore,
        namespace: str = DEFAULT_NAMESPACE,
        logger: Optional[ports.ILogger] = None,
    ):
        self._store = store
        self._key = f"{namespace}:courses"
        self._logger = logger or LoggingAdapter(__name__)

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> StorageResult[Optional[List[Course]]]:
        try:
            raw = self._store.get_item(self._key)
        except OSError as e:
            return StorageResult.failure(StorageErrorKind.UNAVAILABLE, str(e))
        except ValueError as e:
            return StorageResult.failure(StorageErrorKind.CORRUPT, str(e))

        if raw is None:
            return StorageResult.success(None)

        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as e:
            return StorageResult.failure(StorageErrorKind.CORRUPT, str(e))
        if not isinstance(records, list):
            return StorageResult.failure(
                StorageErrorKind.CORRUPT, "Persisted catalog is not a list"
            )
        return StorageResult.success(parse_catalog(records, self._logger))

    async def create(self, course: Course) -> StorageResult[None]:
        # Запись происходит целиком через save_catalog
        return StorageResult.success()

    async def delete(self, course_id: int) -> StorageResult[None]:
        return StorageResult.success()

    async def update(self, course: Course) -> StorageResult[None]:
        return StorageResult.success()

    async def save_catalog(self, courses: List[Course]) -> StorageResult[None]:
        payload = json.dumps([c.to_record() for c in courses], ensure_ascii=False)
        try:
            self._store.set_item(self._key, payload)
        except (OSError, ValueError) as e:
            self._logger.warning("Failed to persist catalog", key=self._key, error=str(e))
            return StorageResult.failure(StorageErrorKind.UNAVAILABLE, str(e))
        return StorageResult.success()

    async def clear(self) -> StorageResult[None]:
        try:
            self._store.remove_item(self._key)
        except (OSError, ValueError) as e:
            self._logger.warning("Failed to erase catalog", key=self._key, error=str(e))
            return StorageResult.failure(StorageErrorKind.UNAVAILABLE, str(e))
        return StorageResult.success()

    async def aclose(self) -> None:
        return None


class RemoteApiBackend(ports.IPersistenceBackend):
    """Хранилище каталога на удаленном REST API.

    Эндпоинты: ``GET /courses``, ``POST /courses/add``, ``DELETE /courses/delete``.
    Для редактирования эндпоинта нет, поэтому ``update`` всегда сообщает
    UNSUPPORTED.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        logger: Optional[ports.ILogger] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._logger = logger or LoggingAdapter(__name__)

    async def _send(self, method: str, url: str, **kwargs: Any):
        """Выполняет запрос, возвращая (ответ, отказ)."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self._logger.error(f"{method} {url} failed", error=str(e))
            return None, StorageResult.failure(StorageErrorKind.UNAVAILABLE, str(e))

        if not response.is_success:
            self._logger.error(f"{method} {url} rejected", status=response.status_code)
            return None, StorageResult.failure(
                StorageErrorKind.REJECTED, f"HTTP {response.status_code}"
            )
        return response, None

    async def load(self) -> StorageResult[Optional[List[Course]]]:
        response, failure = await self._send("GET", "/courses")
        if failure is not None:
            return failure

        try:
            records = response.json()
        except ValueError as e:
            return StorageResult.failure(StorageErrorKind.CORRUPT, str(e))
        if not isinstance(records, list):
            return StorageResult.failure(
                StorageErrorKind.CORRUPT, "Response body is not a list"
            )
        return StorageResult.success(parse_catalog(records, self._logger))

    async def create(self, course: Course) -> StorageResult[None]:
        _, failure = await self._send("POST", "/courses/add", json=course.to_record())
        return failure or StorageResult.success()

    async def delete(self, course_id: int) -> StorageResult[None]:
        _, failure = await self._send(
            "DELETE", "/courses/delete", json={"id": course_id}
        )
        return failure or StorageResult.success()

    async def update(self, course: Course) -> StorageResult[None]:
        return StorageResult.failure(
            StorageErrorKind.UNSUPPORTED, "Remote API has no endpoint for course updates"
        )

    async def save_catalog(self, courses: List[Course]) -> StorageResult[None]:
        # Сервер - источник истины, локальный кэш не выгружается целиком
        return StorageResult.success()

    async def clear(self) -> StorageResult[None]:
        return StorageResult.success()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
