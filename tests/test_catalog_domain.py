"""
Тесты доменной модели каталога курсов.
"""

import pytest
from pydantic import ValidationError

from course_catalog.catalog.domain import (
    DEFAULT_SEED,
    CascadeReport,
    Course,
    CourseAnalytics,
    build_seed,
    union_categories,
)


def make_course(course_id: int, students: int = 0, visits: int = 0) -> Course:
    return Course(
        id=course_id,
        title=f"Course {course_id}",
        students=[(f"u{i}", "2024-01-01T00:00:00+00:00") for i in range(students)],
        visits=visits,
    )


def test_union_categories_keeps_first_seen_order():
    assert union_categories(["y", "x"], ["x", "z", "y"]) == ["y", "x", "z"]
    assert union_categories([]) == []


def test_course_defaults():
    """Тест значений по умолчанию для необязательных полей."""
    course = Course(id=1, title="Intro")

    assert course.students == []
    assert course.categories == []
    assert course.visits == 0
    assert course.price == 0
    assert course.duration == "N/A"


def test_null_optional_fields_become_defaults():
    course = Course.model_validate(
        {
            "id": 1,
            "title": "Intro",
            "description": None,
            "instructor": None,
            "students": None,
            "categories": None,
            "visits": None,
            "price": None,
            "duration": None,
        }
    )

    assert course.description == ""
    assert course.instructor == ""
    assert course.students == []
    assert course.categories == []
    assert course.visits == 0
    assert course.price == 0
    assert course.duration == "N/A"


def test_course_requires_title_and_positive_id():
    with pytest.raises(ValidationError):
        Course(id=1, title="")
    with pytest.raises(ValidationError):
        Course(id=0, title="Intro")


def test_course_rejects_negative_price_and_visits():
    with pytest.raises(ValidationError):
        Course(id=1, title="Intro", price=-1)
    with pytest.raises(ValidationError):
        Course(id=1, title="Intro", visits=-1)


def test_course_deduplicates_categories_and_students():
    course = Course.model_validate(
        {
            "id": 1,
            "title": "Intro",
            "categories": ["web", "web", "css"],
            "students": [[7, "2024-01-01"], [7, "2024-02-01"], [8, "2024-03-01"]],
        }
    )

    assert course.categories == ["web", "css"]
    assert course.students == [(7, "2024-01-01"), (8, "2024-03-01")]


def test_enroll_is_rejected_for_same_user():
    """Тест: повторная запись того же пользователя отклоняется."""
    course = Course(id=1, title="Intro")

    assert course.enroll(42, "2024-01-01T00:00:00+00:00") is True
    assert course.enroll(42, "2024-01-02T00:00:00+00:00") is False
    assert len(course.students) == 1
    # Строковый и числовой идентификаторы различаются
    assert course.enroll("42", "2024-01-03T00:00:00+00:00") is True


def test_merged_with_overwrites_fields_and_keeps_extras():
    course = Course.model_validate({"id": 1, "title": "Intro", "level": "beginner"})

    updated = course.merged_with({"title": "Intro 2", "price": 10})

    assert updated.title == "Intro 2"
    assert updated.price == 10
    assert updated.to_record()["level"] == "beginner"
    assert course.title == "Intro"


def test_to_record_is_json_shaped():
    course = Course(id=1, title="Intro", students=[(5, "2024-01-01")])

    record = course.to_record()

    assert record["students"] == [[5, "2024-01-01"]]
    assert record["id"] == 1


def test_analytics_on_empty_catalog():
    analytics = CourseAnalytics.from_courses([])

    assert analytics.model_dump() == {
        "total_courses": 0,
        "total_enrollments": 0,
        "top_courses": [],
        "top_visited": [],
    }


def test_analytics_ties_keep_catalog_order():
    """Тест: при равенстве значений сохраняется порядок каталога."""
    courses = [
        make_course(1, students=1, visits=2),
        make_course(2, students=2, visits=2),
        make_course(3, students=1, visits=5),
        make_course(4, students=0, visits=2),
    ]

    analytics = CourseAnalytics.from_courses(courses)

    assert [c.id for c in analytics.top_courses] == [2, 1, 3]
    assert [c.id for c in analytics.top_visited] == [3, 1, 2]
    assert analytics.total_enrollments == 4


def test_cascade_report_truthiness():
    assert not CascadeReport(course_id=1, deleted=False)
    report = CascadeReport(course_id=1, deleted=True, failures=["progress cleanup: x"])
    assert report
    assert not report.complete
    assert CascadeReport(course_id=1, deleted=True).complete


def test_build_seed_returns_fresh_courses():
    first = build_seed(DEFAULT_SEED)
    second = build_seed(DEFAULT_SEED)

    assert [c.id for c in first] == [1, 2]
    first[0].visits = 10
    assert second[0].visits == 0
