"""
Доменная модель контекста каталога курсов.

Содержит сущность курса, результаты аналитики и каскадного удаления,
а также стартовый набор курсов для пустого хранилища.
"""

from dataclasses import dataclass, field
from itertools import chain
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Идентификатор пользователя не проверяется каталогом: число или строка
UserId = Union[int, str]

# Пара (идентификатор пользователя, время записи в ISO 8601)
StudentEntry = Tuple[UserId, str]

TOP_LIMIT = 3


def union_categories(*groups: Iterable[str]) -> List[str]:
    """Объединяет категории, сохраняя порядок первого появления."""
    return list(dict.fromkeys(chain.from_iterable(groups)))


class Course(BaseModel):
    """Сущность 'Курс'."""

    # Неизвестные поля сохраняются как есть
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1)
    description: str = ""
    instructor: str = ""
    students: List[StudentEntry] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    visits: int = Field(0, ge=0)
    price: float = Field(0, ge=0)
    duration: str = "N/A"

    @field_validator(
        "description",
        "instructor",
        "students",
        "categories",
        "visits",
        "price",
        "duration",
        mode="before",
    )
    @classmethod
    def none_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        # null в сохраненной записи означает значение по умолчанию
        if v is None:
            return cls.model_fields[info.field_name].get_default(
                call_default_factory=True
            )
        return v

    @field_validator("categories")
    @classmethod
    def deduplicate_categories(cls, v: List[str]) -> List[str]:
        return union_categories(v)

    @field_validator("students")
    @classmethod
    def unique_students(cls, v: List[StudentEntry]) -> List[StudentEntry]:
        seen = set()
        result = []
        for user_id, enrolled_at in v:
            if user_id in seen:
                continue
            seen.add(user_id)
            result.append((user_id, enrolled_at))
        return result

    def is_enrolled(self, user_id: UserId) -> bool:
        return any(entry[0] == user_id for entry in self.students)

    def enroll(self, user_id: UserId, enrolled_at: str) -> bool:
        """Записывает пользователя на курс. Повторная запись отклоняется."""
        if self.is_enrolled(user_id):
            return False
        self.students.append((user_id, enrolled_at))
        return True

    def register_visit(self) -> int:
        self.visits += 1
        return self.visits

    def has_category(self, category: str) -> bool:
        return category in self.categories

    def merged_with(self, patch: Mapping[str, Any]) -> "Course":
        """Возвращает новый курс с поверхностно наложенными полями."""
        return Course.model_validate({**self.model_dump(), **patch})

    def to_record(self) -> Dict[str, Any]:
        """JSON-совместимое представление курса."""
        return self.model_dump(mode="json")


class CourseAnalytics(BaseModel):
    """Сводная аналитика по каталогу."""

    total_courses: int
    total_enrollments: int
    top_courses: List[Course]
    top_visited: List[Course]

    @classmethod
    def from_courses(cls, courses: List[Course]) -> "CourseAnalytics":
        # sorted стабилен и с reverse=True, равные значения остаются в порядке каталога
        by_students = sorted(courses, key=lambda c: len(c.students), reverse=True)
        by_visits = sorted(courses, key=lambda c: c.visits, reverse=True)
        return cls(
            total_courses=len(courses),
            total_enrollments=sum(len(c.students) for c in courses),
            top_courses=by_students[:TOP_LIMIT],
            top_visited=by_visits[:TOP_LIMIT],
        )


@dataclass
class CascadeReport:
    """Итог каскадного удаления курса.

    Приводится к bool по признаку удаления самого курса; сбои очистки
    связанных данных собираются в ``failures``.
    """

    course_id: int
    deleted: bool
    failures: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.deleted and not self.failures

    def __bool__(self) -> bool:
        return self.deleted


DEFAULT_SEED: Tuple[Dict[str, Any], ...] = (
    {
        "id": 1,
        "title": "Introduction to Web Development",
        "description": "HTML, CSS and the basics of building web pages.",
        "instructor": "Sarah Johnson",
        "categories": ["web", "frontend"],
        "price": 0,
        "duration": "4 weeks",
    },
    {
        "id": 2,
        "title": "JavaScript Fundamentals",
        "description": "Variables, functions, the DOM and asynchronous code.",
        "instructor": "Michael Chen",
        "categories": ["programming", "frontend"],
        "price": 49,
        "duration": "6 weeks",
    },
)


def build_seed(records: Iterable[Mapping[str, Any]]) -> List[Course]:
    """Создает свежие экземпляры стартовых курсов."""
    return [Course.model_validate(dict(record)) for record in records]
