"""
Основные доменные типы и утилиты общего ядра.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class ConfigurationError(DomainException):
    """Исключение для некорректной конфигурации приложения."""

    pass


class StorageErrorKind(str, Enum):
    """Виды отказов хранилища."""

    UNAVAILABLE = "unavailable"  # Сеть или диск недоступны
    REJECTED = "rejected"  # Сервер ответил неуспешным статусом
    CORRUPT = "corrupt"  # Данные не удалось разобрать
    UNSUPPORTED = "unsupported"  # Операция не поддерживается хранилищем


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    """Результат операции хранилища: значение либо типизированный отказ."""

    ok: bool
    value: Optional[T] = None
    error_kind: Optional[StorageErrorKind] = None
    message: str = ""

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StorageResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: StorageErrorKind, message: str) -> "StorageResult[T]":
        return cls(ok=False, error_kind=kind, message=message)

    @property
    def is_failure(self) -> bool:
        return not self.ok


def now() -> datetime:
    """Текущее время в UTC."""
    return datetime.now(timezone.utc)


def iso_now() -> str:
    """Текущее время в UTC в формате ISO 8601."""
    return now().isoformat()
