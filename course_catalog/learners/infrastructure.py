"""
Инфраструктурный слой контекста учащихся.

Реализации каталога пользователей и учета прогресса в памяти.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..catalog import interfaces as ports
from ..catalog.infrastructure import LoggingAdapter
from .domain import CourseRef, Learner, ProgressRecord, UserId


class InMemoryUserDirectory(ports.IUserDirectory):
    """Реализация каталога пользователей в памяти."""

    def __init__(
        self,
        users: Optional[Iterable[Learner]] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._users: Dict[UserId, Learner] = {}
        self._logger = logger or LoggingAdapter(__name__)
        for user in users or []:
            self.add(user)

    def add(self, user: Learner) -> None:
        if user.id in self._users:
            raise ValueError(f"User with id {user.id} already exists")
        self._users[user.id] = user

    def get_by_id(self, user_id: UserId) -> Optional[Learner]:
        return self._users.get(user_id)

    def list_users(self) -> List[Learner]:
        return list(self._users.values())

    def update_user(self, user: Learner, patch: Mapping[str, Any]) -> Learner:
        """Сохраняет поверхностное обновление пользователя."""
        if user.id not in self._users:
            raise KeyError(f"User with id {user.id} not found")
        updated = self._users[user.id].model_copy(update=dict(patch))
        self._users[user.id] = updated
        self._logger.debug("User updated", user_id=user.id, fields=list(patch))
        return updated


class InMemoryProgressTracker(ports.IProgressTracker):
    """Учет прогресса и сертификатов в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._records: List[ProgressRecord] = []
        self._logger = logger or LoggingAdapter(__name__)

    def _find(self, user_id: UserId, course_id: CourseRef) -> Optional[ProgressRecord]:
        for record in self._records:
            if record.user_id == user_id and record.belongs_to(course_id):
                return record
        return None

    def record_lesson(self, user_id: UserId, course_id: CourseRef) -> ProgressRecord:
        record = self._find(user_id, course_id)
        if record is None:
            record = ProgressRecord(user_id=user_id, course_id=course_id)
            self._records.append(record)
        record.completed_lessons += 1
        return record

    def issue_certificate(self, user_id: UserId, course_id: CourseRef) -> ProgressRecord:
        record = self._find(user_id, course_id) or self.record_lesson(user_id, course_id)
        record.certificate_issued = True
        return record

    def records_for_course(self, course_id: CourseRef) -> List[ProgressRecord]:
        return [r for r in self._records if r.belongs_to(course_id)]

    def cleanup_course_data(self, course_id: CourseRef) -> None:
        """Удаляет весь прогресс и сертификаты по курсу. Идемпотентна."""
        before = len(self._records)
        self._records = [r for r in self._records if not r.belongs_to(course_id)]
        self._logger.debug(
            "Progress cleaned up",
            course_id=course_id,
            removed=before - len(self._records),
        )
