"""
Общее ядро (Shared Kernel) каталога курсов.

Содержит общие типы данных и утилиты, используемые в различных ограниченных контекстах.
"""

from .domain import (
    ConfigurationError,
    # Исключения
    DomainException,
    StorageErrorKind,
    # Результаты хранилища
    StorageResult,
    iso_now,
    # Утилиты
    now,
)

__all__ = [
    # Исключения
    "DomainException",
    "ConfigurationError",
    # Результаты хранилища
    "StorageErrorKind",
    "StorageResult",
    # Утилиты
    "now",
    "iso_now",
]
