"""
Интерфейсы (порты) для контекста каталога курсов.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
)

from ..shared_kernel import StorageResult
from .domain import Course

if TYPE_CHECKING:
    from ..learners.domain import Learner


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IKeyValueStore(Protocol):
    """Интерфейс долговременного хранилища ключ-значение (аналог localStorage)."""

    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class IPersistenceBackend(Protocol):
    """Интерфейс хранилища каталога курсов.

    Все методы возвращают StorageResult и не выбрасывают исключений.
    ``load`` возвращает None в значении, если сохраненных данных нет.
    """

    name: str

    async def load(self) -> StorageResult[Optional[List[Course]]]: ...
    async def create(self, course: Course) -> StorageResult[None]: ...
    async def delete(self, course_id: int) -> StorageResult[None]: ...
    async def update(self, course: Course) -> StorageResult[None]: ...
    async def save_catalog(self, courses: List[Course]) -> StorageResult[None]: ...
    async def clear(self) -> StorageResult[None]: ...
    async def aclose(self) -> None: ...


class IUserDirectory(Protocol):
    """Интерфейс каталога пользователей (синхронный или асинхронный)."""

    def list_users(
        self,
    ) -> Union[Iterable[Learner], Awaitable[Iterable[Learner]]]: ...
    def update_user(self, user: Learner, patch: Mapping[str, Any]) -> Any: ...


class IProgressTracker(Protocol):
    """Интерфейс учета прогресса и сертификатов."""

    def cleanup_course_data(self, course_id: int) -> Any: ...
