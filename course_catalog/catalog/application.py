"""
Прикладной слой контекста каталога курсов.

Содержит репозиторий каталога: единственного владельца списка курсов
в памяти, который синхронизирует изменения с выбранным хранилищем
и координирует каскадное удаление со смежными контекстами.
"""

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError

from ..shared_kernel import StorageErrorKind, StorageResult, iso_now
from . import interfaces as ports
from .domain import (
    DEFAULT_SEED,
    CascadeReport,
    Course,
    CourseAnalytics,
    UserId,
    build_seed,
    union_categories,
)
from .infrastructure import LoggingAdapter

ALL = "all"


async def _resolve(value: Any) -> Any:
    """Дожидается результата, если коллаборатор асинхронный."""
    if inspect.isawaitable(value):
        return await value
    return value


class CourseRepository:
    """Репозиторий каталога курсов.

    Каталог загружается из хранилища один раз за время жизни объекта.
    Ошибки валидации возвращаются как None/False, ошибки хранилища
    логируются и не пробрасываются. Все изменения выполняются
    последовательно под одной блокировкой.
    """

    def __init__(
        self,
        backend: ports.IPersistenceBackend,
        user_directory: Optional[ports.IUserDirectory] = None,
        progress_tracker: Optional[ports.IProgressTracker] = None,
        logger: Optional[ports.ILogger] = None,
        seed: Optional[Iterable[Mapping]] = None,
    ):
        self._backend = backend
        self._users = user_directory
        self._progress = progress_tracker
        self._logger = logger or LoggingAdapter(__name__)
        self._seed = tuple(seed) if seed is not None else DEFAULT_SEED
        self._courses: List[Course] = []
        self._loaded = False
        self._last_issued_id = 0
        self._load_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()
        self.last_load_error: Optional[StorageResult] = None

    # --- Жизненный цикл ---

    async def open(self) -> "CourseRepository":
        """Загружает каталог, если он еще не загружен."""
        await self._ensure_loaded()
        return self

    async def close(self) -> None:
        """Выгружает каталог в хранилище и освобождает ресурсы хранилища."""
        if self._loaded:
            await self._persist()
        await self._backend.aclose()

    async def __aenter__(self) -> "CourseRepository":
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def courses(self) -> List[Course]:
        """Снимок каталога без загрузки из хранилища."""
        return list(self._courses)

    # --- Внутренние операции ---

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        async with self._load_lock:
            if self._loaded:
                return
            result = await self._backend.load()
            self._loaded = True

            if result.is_failure:
                # Недоступное хранилище и пустые данные дают одинаково пустой
                # каталог, различие сохраняется в last_load_error
                self.last_load_error = result
                self._courses = []
                self._logger.error(
                    "Failed to load course catalog",
                    backend=self._backend.name,
                    kind=result.error_kind,
                    error=result.message,
                )
                return

            self.last_load_error = None
            if result.value is None:
                self._courses = build_seed(self._seed)
                self._remember_ids(self._courses)
                if self._courses:
                    self._logger.info(
                        "Seeded empty catalog", courses=len(self._courses)
                    )
                    await self._persist()
                return

            self._courses = list(result.value)
            self._remember_ids(self._courses)
            self._logger.debug(
                "Course catalog loaded",
                backend=self._backend.name,
                courses=len(self._courses),
            )

    def _remember_ids(self, courses: Iterable[Course]) -> None:
        for course in courses:
            self._last_issued_id = max(self._last_issued_id, course.id)

    def _generate_course_id(self) -> int:
        """Следующий идентификатор; удаленные идентификаторы не переиспользуются."""
        current_max = max((c.id for c in self._courses), default=0)
        return max(current_max, self._last_issued_id) + 1

    def _find_index(self, course_id: Any) -> Optional[int]:
        for index, course in enumerate(self._courses):
            if course.id == course_id:
                return index
        return None

    async def _persist(self) -> StorageResult:
        result = await self._backend.save_catalog(self._courses)
        if result.is_failure:
            self._logger.warning(
                "Catalog change kept in memory only",
                backend=self._backend.name,
                error=result.message,
            )
        return result

    async def _sync_update(self, course: Course) -> None:
        result = await self._backend.update(course)
        if result.error_kind == StorageErrorKind.UNSUPPORTED:
            self._logger.warning(
                "Change saved locally but not persisted to backend",
                course_id=course.id,
                reason=result.message,
            )
        elif result.is_failure:
            self._logger.error(
                "Failed to persist course change",
                course_id=course.id,
                error=result.message,
            )
        await self._persist()

    async def _delete_unlocked(self, course_id: int) -> bool:
        index = self._find_index(course_id)
        if index is None:
            return False

        result = await self._backend.delete(course_id)
        if result.is_failure:
            self._logger.error(
                "Backend refused course deletion",
                course_id=course_id,
                error=result.message,
            )
            return False

        del self._courses[index]
        await self._persist()
        return True

    # --- CRUD ---

    async def create_course(self, partial: Optional[Mapping]) -> Optional[Course]:
        """Создает курс. Без названия возвращает None и каталог не меняет."""
        if not isinstance(partial, Mapping) or not partial.get("title"):
            return None

        async with self._write_lock:
            await self._ensure_loaded()

            record = dict(partial)
            record.update(
                id=self._generate_course_id(),
                students=record.get("students") or [],
                categories=record.get("categories") or [],
                visits=record.get("visits") or 0,
                price=record.get("price") or 0,
                duration=record.get("duration") or "N/A",
            )
            try:
                course = Course.model_validate(record)
            except ValidationError as e:
                self._logger.warning("Rejected invalid course", error=str(e))
                return None

            # Локальное добавление только после подтверждения хранилищем
            result = await self._backend.create(course)
            if result.is_failure:
                self._logger.error(
                    "Failed to create course on backend",
                    title=course.title,
                    error=result.message,
                )
                return None

            self._courses.append(course)
            self._last_issued_id = max(self._last_issued_id, course.id)
            await self._persist()
            return course

    async def edit_course(
        self, course_id: int, patch: Optional[Mapping]
    ) -> Optional[Course]:
        """Поверхностно обновляет поля курса; категории объединяются."""
        if not isinstance(patch, Mapping):
            return None

        async with self._write_lock:
            index = self._find_index(course_id)
            if index is None:
                return None

            current = self._courses[index]
            changes = dict(patch)
            changes.pop("id", None)
            if "categories" in changes:
                incoming = changes["categories"]
                if not isinstance(incoming, (list, tuple)):
                    incoming = []
                if not all(isinstance(c, str) for c in incoming):
                    self._logger.warning(
                        "Rejected invalid course patch",
                        course_id=course_id,
                        error="categories must be strings",
                    )
                    return None
                changes["categories"] = union_categories(current.categories, incoming)

            try:
                updated = current.merged_with(changes)
            except ValidationError as e:
                self._logger.warning(
                    "Rejected invalid course patch", course_id=course_id, error=str(e)
                )
                return None

            self._courses[index] = updated
            await self._sync_update(updated)
            return updated

    async def delete_course(self, course_id: int) -> bool:
        """Удаляет курс после подтверждения хранилищем."""
        async with self._write_lock:
            return await self._delete_unlocked(course_id)

    def get_course(self, course_id: int) -> Optional[Course]:
        """Ищет курс в загруженном каталоге, не обращаясь к хранилищу."""
        index = self._find_index(course_id)
        return self._courses[index] if index is not None else None

    async def list_courses(self) -> List[Course]:
        await self._ensure_loaded()
        return list(self._courses)

    # --- Поиск и аналитика ---

    def search_courses_by_category(self, category: Any) -> List[Course]:
        if not isinstance(category, str) or not category:
            return []
        return [c for c in self._courses if c.has_category(category)]

    def filter_courses(
        self,
        category: str = ALL,
        price: Union[str, float] = ALL,
        duration: str = ALL,
    ) -> List[Course]:
        """Фильтр каталога; значение "all" отключает критерий."""
        wanted_price = None
        if price != ALL:
            try:
                wanted_price = float(price)
            except (TypeError, ValueError):
                return []

        result = []
        for course in self._courses:
            if category != ALL and not course.has_category(category):
                continue
            if wanted_price is not None and course.price != wanted_price:
                continue
            if duration != ALL and course.duration != duration:
                continue
            result.append(course)
        return result

    def get_analytics(self) -> CourseAnalytics:
        return CourseAnalytics.from_courses(self._courses)

    # --- Посещения и запись ---

    async def increment_visits(self, course_id: int) -> Optional[int]:
        async with self._write_lock:
            course = self.get_course(course_id)
            if course is None:
                return None
            visits = course.register_visit()
            await self._sync_update(course)
            return visits

    async def enroll_user(self, user_id: UserId, course_id: int) -> bool:
        """Записывает пользователя на курс. Существование пользователя не проверяется."""
        async with self._write_lock:
            course = self.get_course(course_id)
            if course is None:
                return False
            if not course.enroll(user_id, iso_now()):
                return False
            await self._sync_update(course)
            return True

    # --- Сброс и каскадное удаление ---

    async def reset_all_courses(self) -> None:
        """Очищает каталог и стирает сохраненную копию без повторного заполнения."""
        async with self._write_lock:
            self._courses = []
            self._loaded = True
            self._last_issued_id = 0
            result = await self._backend.clear()
            if result.is_failure:
                self._logger.warning(
                    "Failed to erase persisted catalog", error=result.message
                )

    async def course_deletion(self, course_id: int) -> CascadeReport:
        """Удаляет курс вместе с прогрессом, сертификатами и записями студентов.

        Удаление курса не откатывается, если очистка связанных данных
        завершилась ошибкой; такие ошибки попадают в отчет.
        """
        async with self._write_lock:
            deleted = await self._delete_unlocked(course_id)

        report = CascadeReport(course_id=course_id, deleted=deleted)
        if not deleted:
            return report

        if self._progress is not None:
            try:
                await _resolve(self._progress.cleanup_course_data(course_id))
            except Exception as e:
                report.failures.append(f"progress cleanup: {e}")

        if self._users is not None:
            await self._detach_students(course_id, report)

        if report.failures:
            self._logger.warning(
                "Course deleted with incomplete cleanup",
                course_id=course_id,
                failures=report.failures,
            )
        else:
            self._logger.info("Course deleted with all related data", course_id=course_id)
        return report

    async def _detach_students(self, course_id: int, report: CascadeReport) -> None:
        try:
            users = await _resolve(self._users.list_users())
        except Exception as e:
            report.failures.append(f"list users: {e}")
            return

        for user in users:
            if user.role != "student":
                continue
            remaining = [c for c in user.enrolled_courses if str(c) != str(course_id)]
            try:
                await _resolve(
                    self._users.update_user(user, {"enrolled_courses": remaining})
                )
            except Exception as e:
                report.failures.append(f"update user {user.id}: {e}")
