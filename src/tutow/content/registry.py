"""Static registry of interactive courses.

Maps a course key to the client-side renderer and its display metadata. The
table is built once at import time; a course row links to it through
``Course.registry_key`` or, for older rows, its title.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CourseEntry:
    key: str
    renderer: str
    title: str
    description: str
    estimated_time: str
    difficulty: str
    topics: tuple[str, ...]
    grade_level: int
    material_type: str
    aliases: tuple[str, ...] = field(default=())


_ENTRIES: tuple[CourseEntry, ...] = (
    CourseEntry(
        key="course1_1_bilangan",
        renderer="Course1_1_Bilangan",
        title="Menghitung & Menulis Angka",
        description="Belajar menghitung objek dan menulis angka dalam bentuk angka dan kata",
        estimated_time="15-25 menit",
        difficulty="easy",
        topics=("counting", "number-writing", "number-words", "basic-math"),
        grade_level=1,
        material_type="bilangan",
    ),
    CourseEntry(
        key="course1_2_ganjil_genap_urutan",
        renderer="Course1_2_GanjilGenapUrutan",
        title="Bilangan Ganjil, Genap & Urutan",
        description=(
            "Belajar tentang urutan bilangan (pertama, kedua, dst) dan membedakan "
            "bilangan ganjil dengan genap"
        ),
        estimated_time="20-30 menit",
        difficulty="easy",
        topics=("ordinal-numbers", "odd-even", "number-patterns", "basic-math"),
        grade_level=1,
        material_type="bilangan",
    ),
    CourseEntry(
        key="course1_3_pola_perbandingan",
        renderer="Course1_3_PolaPerbandingan",
        title="Pola Bilangan & Perbandingan",
        description=(
            "Belajar mengenali pola angka dan membandingkan angka untuk menentukan "
            "mana yang lebih besar atau lebih kecil"
        ),
        estimated_time="20-30 menit",
        difficulty="easy",
        topics=("number-patterns", "comparison", "ordering", "basic-math"),
        grade_level=1,
        material_type="bilangan",
    ),
    CourseEntry(
        key="course1_4_place_value",
        renderer="Course1_4_PlaceValue",
        title="Nilai Tempat",
        description=(
            "Belajar tentang nilai tempat puluhan dan satuan dengan cara yang "
            "menyenangkan menggunakan bola-bola interaktif"
        ),
        estimated_time="25-35 menit",
        difficulty="easy",
        topics=("place-value", "tens-ones", "counting", "number-composition"),
        grade_level=1,
        material_type="place-value",
        aliases=("Place Value", "Place Value (Tens and Ones)"),
    ),
    CourseEntry(
        key="course1_2_number_bonds",
        renderer="Course1_2_NumberBonds",
        title="Ikatan Bilangan & Penjumlahan Dasar",
        description=(
            "Belajar tentang ikatan bilangan dan penjumlahan dasar dengan cara "
            "yang interaktif dan menyenangkan"
        ),
        estimated_time="30-40 menit",
        difficulty="easy",
        topics=("number-bonds", "addition", "basic-math", "visual-math"),
        grade_level=1,
        material_type="math-operations",
        aliases=("Number Bonds & Basic Addition", "Number Bonds"),
    ),
    CourseEntry(
        key="course2_2_addition_strategies",
        renderer="Course1_2_AdditionStrategies",
        title="Strategi Penjumlahan",
        description=(
            "Belajar strategi penjumlahan lanjutan: penjumlahan hingga 20, 3 penjumlah, "
            "garis bilangan, dan penjumlah yang hilang"
        ),
        estimated_time="35-45 menit",
        difficulty="easy",
        topics=("addition-strategies", "number-lines", "missing-addends", "three-addends"),
        grade_level=1,
        material_type="math-operations",
        aliases=("Addition Strategies", "Addition Sums up to 20"),
    ),
)


def _build_index(entries: tuple[CourseEntry, ...]) -> dict[str, CourseEntry]:
    index: dict[str, CourseEntry] = {}
    for entry in entries:
        for name in (entry.key, entry.title, *entry.aliases):
            if name in index:
                msg = f"Duplicate course registry name: {name!r}"
                raise ValueError(msg)
            index[name] = entry
    return index


COURSE_REGISTRY: dict[str, CourseEntry] = _build_index(_ENTRIES)


def get_course_entry(name: str) -> CourseEntry | None:
    """Look up by key, title or alias."""
    return COURSE_REGISTRY.get(name)


def is_course_registered(name: str) -> bool:
    return name in COURSE_REGISTRY


def all_courses() -> list[CourseEntry]:
    """Every registered course once, in registration order."""
    return list(_ENTRIES)


def courses_by_grade(grade_level: int) -> list[CourseEntry]:
    return [e for e in _ENTRIES if e.grade_level == grade_level]


def courses_by_material(material_type: str) -> list[CourseEntry]:
    return [e for e in _ENTRIES if e.material_type == material_type]


def resolve_course(registry_key: str | None, title: str) -> CourseEntry | None:
    """Find the interactive renderer for a stored course row."""
    if registry_key:
        entry = get_course_entry(registry_key)
        if entry is not None:
            return entry
    return get_course_entry(title)
