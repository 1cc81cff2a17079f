import logging
from typing import Any, Dict, Optional

import httpx

from .catalog import interfaces as ports
from .catalog.application import CourseRepository
from .catalog.infrastructure import (
    JsonKeyValueStore,
    LocalStorageBackend,
    LoggingAdapter,
    RemoteApiBackend,
)
from .config import CatalogSettings
from .engagement.application import NotificationInbox, ProfileProgressService
from .learners.infrastructure import InMemoryProgressTracker, InMemoryUserDirectory

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Настраивает логирование приложения."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_backend(
    settings: CatalogSettings,
    store: Optional[ports.IKeyValueStore] = None,
    client: Optional[httpx.AsyncClient] = None,
    logger: Optional[ports.ILogger] = None,
) -> ports.IPersistenceBackend:
    """Создает хранилище каталога по настройкам."""
    if settings.backend == "remote":
        return RemoteApiBackend(
            base_url=settings.api_base_url,
            client=client,
            timeout=settings.api_timeout,
            logger=logger,
        )
    return LocalStorageBackend(
        store or JsonKeyValueStore(settings.storage_path),
        namespace=settings.namespace,
        logger=logger,
    )


def bootstrap_app(
    settings: Optional[CatalogSettings] = None,
    store: Optional[ports.IKeyValueStore] = None,
    client: Optional[httpx.AsyncClient] = None,
    user_directory: Optional[ports.IUserDirectory] = None,
    progress_tracker: Optional[ports.IProgressTracker] = None,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    # 1. Настройки и логирование
    settings = settings or CatalogSettings.from_env()
    configure_logging(settings.log_level)
    logger = LoggingAdapter("course_catalog")

    # 2. Общее хранилище ключ-значение для каталога и профиля
    store = store or JsonKeyValueStore(settings.storage_path)

    # 3. Коллабораторы каскадного удаления
    user_directory = user_directory or InMemoryUserDirectory(logger=logger)
    progress_tracker = progress_tracker or InMemoryProgressTracker(logger=logger)

    # 4. Репозиторий загружается при открытии: `async with repo: ...`
    course_repository = CourseRepository(
        backend=build_backend(settings, store=store, client=client, logger=logger),
        user_directory=user_directory,
        progress_tracker=progress_tracker,
        logger=logger,
    )

    return {
        "settings": settings,
        "course_repository": course_repository,
        "user_directory": user_directory,
        "progress_tracker": progress_tracker,
        "profile_service": ProfileProgressService(
            store, namespace=settings.namespace, logger=logger
        ),
        "notifications": NotificationInbox(logger=logger),
    }
