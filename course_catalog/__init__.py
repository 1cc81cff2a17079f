"""
Каталог курсов: репозиторий курсов с локальным или удаленным хранилищем,
каскадное удаление и игровая статистика профиля.
"""

from .bootstrap import bootstrap_app
from .catalog import Course, CourseRepository
from .config import CatalogSettings

__all__ = ["bootstrap_app", "Course", "CourseRepository", "CatalogSettings"]
