"""Static interactive-course registry."""

from __future__ import annotations

import pytest

from tutow.content import registry
from tutow.content.registry import CourseEntry


class TestRegistry:
    def test_lookup_by_key(self):
        entry = registry.get_course_entry("course1_1_bilangan")
        assert entry is not None
        assert entry.title == "Menghitung & Menulis Angka"
        assert entry.grade_level == 1

    def test_lookup_by_title_and_alias(self):
        by_key = registry.get_course_entry("course1_4_place_value")
        assert registry.get_course_entry("Nilai Tempat") is by_key
        assert registry.get_course_entry("Place Value") is by_key

    def test_unknown(self):
        assert registry.get_course_entry("course9_9_calculus") is None
        assert registry.is_course_registered("course9_9_calculus") is False

    def test_all_courses_unique(self):
        courses = registry.all_courses()
        assert len(courses) == 6
        assert len({c.key for c in courses}) == 6

    def test_filters(self):
        assert {c.key for c in registry.courses_by_material("math-operations")} == {
            "course1_2_number_bonds",
            "course2_2_addition_strategies",
        }
        assert len(registry.courses_by_grade(1)) == 6
        assert registry.courses_by_grade(3) == []

    def test_resolve_prefers_registry_key(self):
        entry = registry.resolve_course("course1_2_number_bonds", "Nilai Tempat")
        assert entry is not None and entry.key == "course1_2_number_bonds"

    def test_resolve_falls_back_to_title(self):
        entry = registry.resolve_course(None, "Strategi Penjumlahan")
        assert entry is not None and entry.key == "course2_2_addition_strategies"
        assert registry.resolve_course("missing", "No Such Course") is None

    def test_duplicate_names_rejected(self):
        a = registry.all_courses()[0]
        clash = CourseEntry(
            key="other",
            renderer=a.renderer,
            title=a.title,
            description=a.description,
            estimated_time=a.estimated_time,
            difficulty=a.difficulty,
            topics=a.topics,
            grade_level=a.grade_level,
            material_type=a.material_type,
        )
        with pytest.raises(ValueError, match="Duplicate"):
            registry._build_index((a, clash))
