"""
Доменная модель контекста учащихся.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

UserId = Union[int, str]
CourseRef = Union[int, str]


class Learner(BaseModel):
    """Пользователь платформы."""

    id: UserId
    name: str = ""
    email: Optional[str] = None
    role: str = "student"
    enrolled_courses: List[CourseRef] = Field(default_factory=list)

    @property
    def is_student(self) -> bool:
        return self.role == "student"


class ProgressRecord(BaseModel):
    """Прогресс пользователя по курсу и выданный сертификат."""

    user_id: UserId
    course_id: CourseRef
    completed_lessons: int = Field(0, ge=0)
    certificate_issued: bool = False

    def belongs_to(self, course_id: CourseRef) -> bool:
        return str(self.course_id) == str(course_id)
