"""
Контекст каталога курсов: сущность курса, репозиторий и хранилища.
"""

from .application import CourseRepository
from .domain import (
    DEFAULT_SEED,
    CascadeReport,
    Course,
    CourseAnalytics,
    union_categories,
)
from .infrastructure import (
    InMemoryKeyValueStore,
    JsonKeyValueStore,
    LocalStorageBackend,
    LoggingAdapter,
    RemoteApiBackend,
)

__all__ = [
    "CourseRepository",
    "Course",
    "CourseAnalytics",
    "CascadeReport",
    "DEFAULT_SEED",
    "union_categories",
    "InMemoryKeyValueStore",
    "JsonKeyValueStore",
    "LocalStorageBackend",
    "LoggingAdapter",
    "RemoteApiBackend",
]
