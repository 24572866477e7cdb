"""Course content seed: grades 1-6 with the grade 1 curriculum and practice exercises."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import Course, Exercise, Grade, Material

logger = logging.getLogger(__name__)

GRADE_SEED_DATA: list[dict[str, Any]] = [
    {"name": str(n), "display_name": f"Kelas {n}", "order": n} for n in range(1, 7)
]


def _course(
    title: str,
    description: str,
    level: int,
    order: int,
    xp_reward: int,
    lessons: list[str] | None = None,
    registry_key: str | None = None,
) -> dict[str, Any]:
    return {
        "title": title,
        "description": description,
        "level": level,
        "order": order,
        "xp_reward": xp_reward,
        "content": {"type": "interactive", "lessons": lessons or []},
        "registry_key": registry_key,
    }


# Materials for grade "1", each with its courses in (level, order) order.
MATERIAL_SEED_DATA: list[dict[str, Any]] = [
    {
        "name": "counting-and-numbers",
        "display_name": "Menghitung dan Bilangan",
        "description": "Belajar menghitung, menulis angka, dan memahami konsep bilangan dasar",
        "order": 1,
        "image_url": "/images/materials/counting.png",
        "courses": [
            _course(
                "Menghitung & Menulis Angka",
                "Belajar menghitung hingga 20 & 100, menulis angka hingga 20 & 100",
                1, 1, 15,
                ["counting-up-to-20", "counting-up-to-100", "writing-numbers"],
                "course1_1_bilangan",
            ),
            _course(
                "Bilangan Ganjil, Genap & Urutan",
                "Memahami bilangan ganjil & genap, serta bilangan urutan",
                1, 2, 15,
                ["odd-even-numbers", "ordinal-numbers"],
                "course1_2_ganjil_genap_urutan",
            ),
            _course(
                "Pola Bilangan & Perbandingan",
                "Mengenali pola bilangan, membandingkan & mengurutkan hingga 20 & 100",
                2, 3, 20,
                ["number-patterns", "compare-order-20", "compare-order-100"],
                "course1_3_pola_perbandingan",
            ),
            _course(
                "Nilai Tempat",
                "Memahami nilai tempat (puluhan dan satuan)",
                2, 4, 20,
                ["place-value-tens-ones"],
                "course1_4_place_value",
            ),
            _course(
                "Menghitung Loncat",
                "Belajar menghitung loncat dengan 2, 5, 10, 3, 4, 6, 7, 8, 9",
                3, 5, 25,
                ["skip-count-2", "skip-count-5", "skip-count-10", "skip-count-others"],
            ),
        ],
    },
    {
        "name": "math-operations",
        "display_name": "Operasi Matematika",
        "description": "Belajar penjumlahan, pengurangan, dan pengenalan perkalian & pembagian",
        "order": 2,
        "image_url": "/images/materials/operations.png",
        "courses": [
            _course(
                "Ikatan Bilangan & Penjumlahan Dasar",
                "Ikatan bilangan hingga 10 & 20, penjumlahan 1 digit, penjumlahan dengan gambar",
                1, 1, 15, registry_key="course1_2_number_bonds",
            ),
            _course(
                "Strategi Penjumlahan",
                "Penjumlahan hingga 20, ikatan bilangan 3 penjumlah, garis bilangan, penjumlah yang hilang",
                1, 2, 15, registry_key="course2_2_addition_strategies",
            ),
            _course(
                "Penjumlahan hingga 100",
                "Ikatan bilangan hingga 100, penjumlahan hingga 100 (dengan & tanpa regrouping)",
                2, 3, 20,
            ),
            _course(
                "Strategi Pengurangan",
                "Pengurangan dengan gambar, garis pengurangan, pengurangan dalam 20, pengurang yang hilang",
                2, 4, 20,
            ),
            _course(
                "Pengurangan hingga 100",
                "Pengurangan dalam 100 (dengan & tanpa meminjam)",
                2, 5, 20,
            ),
            _course("Operasi Campuran", "Campuran penjumlahan & pengurangan hingga 20 & hingga 100", 3, 6, 25),
            _course(
                "Pengenalan Perkalian & Pembagian",
                "Perkalian dengan gambar, susunan, pengelompokan (pembagian)",
                3, 7, 25,
            ),
        ],
    },
    {
        "name": "shapes-and-geometry",
        "display_name": "Bentuk & Geometri",
        "description": "Mengenal bentuk-bentuk dasar, simetri, dan pola geometri",
        "order": 3,
        "image_url": "/images/materials/shapes.png",
        "courses": [
            _course("Bentuk Dasar & Menggambar", "Mengenal bentuk dasar dan belajar menggambar bentuk", 1, 1, 15),
            _course("Simetri & Pola", "Memahami simetri & bentuk, pola dengan bentuk", 2, 2, 20),
        ],
    },
    {
        "name": "measurement",
        "display_name": "Panjang, Massa, Waktu dan Uang",
        "description": "Belajar mengukur panjang, massa, memahami waktu dan kalender",
        "order": 4,
        "image_url": "/images/materials/measurement.png",
        "courses": [
            _course(
                "Mengukur Panjang & Massa",
                "Mengukur & membandingkan panjang, tinggi, berat, massa, timbangan seimbang",
                1, 1, 15,
            ),
            _course(
                "Waktu & Kalender",
                "Membaca waktu (setengah jam), menggambar jarum jam, hari dalam seminggu, bulan",
                2, 2, 20,
            ),
        ],
    },
    {
        "name": "money",
        "display_name": "Uang (USD, EUR, IDR)",
        "description": "Mengenal mata uang, berbelanja, dan membuat grafik uang",
        "order": 5,
        "image_url": "/images/materials/money.png",
        "courses": [
            _course("Uang Amerika & Berbelanja", "Koin dolar, uang kertas hingga $100, berbelanja ($)", 1, 1, 15),
            _course("Uang Euro & Berbelanja", "Koin euro, uang kertas hingga €100, berbelanja (EUR)", 2, 2, 20),
            _course(
                "Uang Rupiah & Berbelanja",
                "Koin rupiah, uang kertas hingga Rp100.000, berbelanja (IDR)",
                2, 3, 20,
            ),
        ],
    },
    {
        "name": "data-and-graphs",
        "display_name": "Grafik Gambar & Tabel Turus",
        "description": "Menggunakan tabel data, menggambar & membaca pictograph, tabel turus",
        "order": 6,
        "image_url": "/images/materials/graphs.png",
        "courses": [
            _course(
                "Data & Grafik",
                "Menggunakan tabel data, menggambar & membaca pictograph, tabel turus",
                1, 1, 15,
            ),
        ],
    },
]

# (material name) -> [(question, options, answer)]
EXERCISE_SEED_DATA: dict[str, list[tuple[str, list[str], str]]] = {
    "counting-and-numbers": [
        ("Angka setelah 7 adalah ...", ["6", "8", "9", "5"], "8"),
        ("Angka sebelum 15 adalah ...", ["14", "16", "13", "15"], "14"),
        ("Manakah bilangan genap?", ["3", "7", "10", "11"], "10"),
        ("Manakah bilangan ganjil?", ["2", "4", "8", "9"], "9"),
        ("Dua puluh tiga ditulis ...", ["32", "23", "203", "22"], "23"),
        ("Lanjutkan pola: 2, 4, 6, ...", ["7", "8", "9", "10"], "8"),
        ("Mana yang lebih besar?", ["45", "54", "44", "50"], "54"),
        ("Nilai tempat angka 3 pada 37 adalah ...", ["3", "30", "7", "70"], "30"),
        ("Hitung loncat 5: 5, 10, 15, ...", ["16", "20", "25", "18"], "20"),
        ("Berapa puluhan dalam 60?", ["6", "60", "0", "16"], "6"),
        ("Urutan ke-3 disebut ...", ["pertama", "kedua", "ketiga", "keempat"], "ketiga"),
        ("Angka terkecil adalah ...", ["12", "21", "9", "19"], "9"),
    ],
    "math-operations": [
        ("3 + 4 = ...", ["6", "7", "8", "5"], "7"),
        ("9 - 5 = ...", ["3", "4", "5", "14"], "4"),
        ("6 + 6 = ...", ["10", "11", "12", "13"], "12"),
        ("15 - 7 = ...", ["7", "8", "9", "22"], "8"),
        ("20 + 30 = ...", ["40", "50", "60", "23"], "50"),
        ("8 + ... = 10", ["1", "2", "3", "18"], "2"),
        ("45 + 12 = ...", ["57", "56", "67", "33"], "57"),
        ("70 - 25 = ...", ["55", "45", "35", "50"], "45"),
        ("2 + 3 + 4 = ...", ["8", "9", "10", "7"], "9"),
        ("3 kelompok berisi 2 apel ada ... apel", ["5", "6", "8", "32"], "6"),
        ("12 permen dibagi 3 anak, tiap anak dapat ...", ["3", "4", "6", "9"], "4"),
        ("18 - 9 + 4 = ...", ["13", "11", "14", "5"], "13"),
    ],
    "shapes-and-geometry": [
        ("Bentuk yang memiliki 3 sisi adalah ...", ["persegi", "segitiga", "lingkaran", "persegi panjang"], "segitiga"),
        ("Bentuk yang tidak memiliki sudut adalah ...", ["segitiga", "persegi", "lingkaran", "segi lima"], "lingkaran"),
        ("Persegi memiliki ... sisi", ["3", "4", "5", "6"], "4"),
        ("Bola berbentuk ...", ["kubus", "tabung", "bola", "kerucut"], "bola"),
        ("Lanjutkan pola: segitiga, lingkaran, segitiga, ...", ["segitiga", "lingkaran", "persegi", "bintang"], "lingkaran"),
        ("Kotak kado biasanya berbentuk ...", ["kubus", "bola", "kerucut", "lingkaran"], "kubus"),
    ],
}


async def _get_or_create_grade(db: AsyncSession, data: dict[str, Any]) -> Grade:
    grade = (await db.execute(select(Grade).where(Grade.name == data["name"]))).scalar_one_or_none()
    if grade is None:
        grade = Grade(**data)
        db.add(grade)
        await db.flush()
    return grade


async def _get_or_create_material(db: AsyncSession, grade: Grade, data: dict[str, Any]) -> Material:
    result = await db.execute(
        select(Material).where(Material.grade_id == grade.id, Material.name == data["name"])
    )
    material = result.scalar_one_or_none()
    if material is None:
        material = Material(grade_id=grade.id, **data)
        db.add(material)
        await db.flush()
    return material


async def seed_content(db: AsyncSession) -> int:
    """Insert grades, grade 1 materials, courses and exercises that are missing.

    Existing rows are matched on their natural keys and left untouched.
    Returns the number of rows inserted.
    """
    inserted = 0
    grades = {}
    for grade_data in GRADE_SEED_DATA:
        grades[grade_data["name"]] = await _get_or_create_grade(db, grade_data)
    grade1 = grades["1"]

    for material_data in MATERIAL_SEED_DATA:
        course_rows = material_data["courses"]
        fields = {k: v for k, v in material_data.items() if k != "courses"}
        material = await _get_or_create_material(db, grade1, fields)

        existing_courses = {
            (c.level, c.order)
            for c in (await db.execute(select(Course).where(Course.material_id == material.id))).scalars()
        }
        for course_data in course_rows:
            if (course_data["level"], course_data["order"]) in existing_courses:
                continue
            db.add(Course(material_id=material.id, **course_data))
            inserted += 1

        existing_questions = set(
            (await db.execute(select(Exercise.question).where(Exercise.material_id == material.id))).scalars()
        )
        for question, options, answer in EXERCISE_SEED_DATA.get(material.name, []):
            if question in existing_questions:
                continue
            db.add(Exercise(
                grade_id=grade1.id,
                material_id=material.id,
                question=question,
                options=options,
                answer=answer,
                difficulty="easy",
            ))
            inserted += 1

    await db.commit()
    logger.info("Seeded course content (%d new rows)", inserted)
    return inserted
