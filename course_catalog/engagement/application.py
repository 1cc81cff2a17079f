"""
Прикладной слой контекста вовлеченности.
"""

from datetime import date
from typing import Iterable, List, Optional

from ..catalog import interfaces as ports
from ..catalog.application import CourseRepository
from ..catalog.domain import Course
from ..catalog.infrastructure import DEFAULT_NAMESPACE, LoggingAdapter
from ..learners.domain import Learner
from .domain import DEFAULT_NOTIFICATIONS, Notification, ProfileStats

VISIBLE_NOTIFICATIONS = 5


class ProfileProgressService:
    """Сервис опыта и серии посещений профиля.

    Значения хранятся в хранилище ключ-значение под ключами
    ``<namespace>:expPoints``, ``<namespace>:streakDays`` и
    ``<namespace>:lastVisitDate``. Ошибки хранилища логируются
    и не пробрасываются.
    """

    def __init__(
        self,
        store: ports.IKeyValueStore,
        namespace: str = DEFAULT_NAMESPACE,
        logger: Optional[ports.ILogger] = None,
    ):
        self._store = store
        self._exp_key = f"{namespace}:expPoints"
        self._streak_key = f"{namespace}:streakDays"
        self._last_visit_key = f"{namespace}:lastVisitDate"
        self._logger = logger or LoggingAdapter(__name__)

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._store.get_item(key)
        except (OSError, ValueError) as e:
            self._logger.warning("Failed to read profile value", key=key, error=str(e))
            return None

    def _read_int(self, key: str) -> int:
        try:
            return max(int(self._read(key)), 0)
        except (TypeError, ValueError):
            return 0

    def _read_date(self, key: str) -> Optional[date]:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return None

    def stats(self) -> ProfileStats:
        return ProfileStats(
            exp_points=self._read_int(self._exp_key),
            streak_days=self._read_int(self._streak_key),
            last_visit=self._read_date(self._last_visit_key),
        )

    def record_visit(self, today: Optional[date] = None) -> ProfileStats:
        """Начисляет опыт за посещение и обновляет серию."""
        stats = self.stats().after_visit(today or date.today())
        try:
            self._store.set_item(self._exp_key, str(stats.exp_points))
            self._store.set_item(self._streak_key, str(stats.streak_days))
            self._store.set_item(self._last_visit_key, stats.last_visit.isoformat())
        except (OSError, ValueError) as e:
            self._logger.warning("Failed to persist profile stats", error=str(e))
        return stats


def my_courses(learner: Learner, repository: CourseRepository) -> List[Course]:
    """Курсы, на которые записан пользователь, в порядке каталога."""
    wanted = {str(course_id) for course_id in learner.enrolled_courses}
    return [c for c in repository.courses if str(c.id) in wanted]


class NotificationInbox:
    """Список уведомлений с отметками о прочтении."""

    def __init__(
        self,
        notifications: Optional[Iterable[Notification]] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        if notifications is None:
            notifications = [Notification(text=t) for t in DEFAULT_NOTIFICATIONS]
        self._notifications: List[Notification] = list(notifications)
        self._logger = logger or LoggingAdapter(__name__)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if n.unread)

    def visible(self, limit: int = VISIBLE_NOTIFICATIONS) -> List[Notification]:
        return self._notifications[:limit]

    def first(self) -> Optional[Notification]:
        return self._notifications[0] if self._notifications else None

    def push(self, text: str) -> Notification:
        notification = Notification(text=text)
        self._notifications.append(notification)
        return notification

    def mark_read(self, index: int) -> bool:
        """Отмечает уведомление прочитанным. Повторный вызов ничего не меняет."""
        if not 0 <= index < len(self._notifications):
            return False
        notification = self._notifications[index]
        if notification.unread:
            notification.unread = False
            self._logger.debug("Notification read", index=index, unread=self.unread_count)
        return True
