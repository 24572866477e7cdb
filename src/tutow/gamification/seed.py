"""Badge seed data: 21 badges across grade, exercise, material and milestone categories."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import Badge

logger = logging.getLogger(__name__)


def _grade_master(grade: int) -> dict:
    return {
        "name": f"grade_{grade}_master",
        "display_name": f"Master Kelas {grade}",
        "description": f"Menyelesaikan semua materi interaktif di Kelas {grade}",
        "category": "grade",
        "requirement": {"type": "grade_completion", "grade": grade, "completion_percentage": 100},
        "image_url": "\U0001f393",
        "sort_order": grade,
    }


_CORRECT_ANSWER_LADDER = [
    ("first_steps", "Langkah Pertama", 10, "\U0001f476"),
    ("getting_started", "Mulai Berjalan", 20, "\U0001f6b6"),
    ("half_century", "Setengah Abad", 50, "\U0001f3c3"),
    ("century_club", "Klub Seratus", 100, "\U0001f4af"),
    ("double_century", "Dua Ratus Hebat", 200, "\U0001f525"),
    ("five_hundred_strong", "Lima Ratus Kuat", 500, "⭐"),
    ("thousand_master", "Master Seribu", 1000, "\U0001f451"),
]

BADGE_SEED_DATA: list[dict] = [
    # Grade masters
    *(_grade_master(grade) for grade in range(1, 7)),
    # Correct-answer ladder
    *(
        {
            "name": name,
            "display_name": display_name,
            "description": f"Menjawab {count} soal latihan dengan benar",
            "category": "exercise",
            "requirement": {"type": "correct_answers", "count": count},
            "image_url": icon,
            "sort_order": 10 + i,
        }
        for i, (name, display_name, count, icon) in enumerate(_CORRECT_ANSWER_LADDER)
    ),
    # Material experts
    {
        "name": "bilangan_expert",
        "display_name": "Ahli Bilangan",
        "description": "Menyelesaikan semua materi Bilangan",
        "category": "material",
        "requirement": {"type": "material_completion", "material_names": ["counting-and-numbers", "bilangan"]},
        "image_url": "\U0001f522",
        "sort_order": 20,
    },
    {
        "name": "operasi_expert",
        "display_name": "Ahli Operasi",
        "description": "Menyelesaikan semua materi Operasi Matematika",
        "category": "material",
        "requirement": {"type": "material_completion", "material_names": ["math-operations", "operasi"]},
        "image_url": "➕",
        "sort_order": 21,
    },
    {
        "name": "geometry_expert",
        "display_name": "Ahli Geometri",
        "description": "Menyelesaikan semua materi Bentuk & Geometri",
        "category": "material",
        "requirement": {"type": "material_completion", "material_names": ["shapes-and-geometry", "geometri"]},
        "image_url": "\U0001f4d0",
        "sort_order": 22,
    },
    # Milestones
    {
        "name": "perfect_score",
        "display_name": "Nilai Sempurna",
        "description": "Mendapat skor 100% dalam satu sesi latihan",
        "category": "milestone",
        "requirement": {"type": "perfect_session", "accuracy": 100},
        "image_url": "\U0001f3af",
        "sort_order": 30,
    },
    {
        "name": "speed_demon",
        "display_name": "Kilat Matematika",
        "description": "Menyelesaikan 10 soal dalam waktu kurang dari 2 menit",
        "category": "milestone",
        "requirement": {"type": "speed_completion", "questions": 10, "max_time": 120},
        "image_url": "⚡",
        "sort_order": 31,
    },
    {
        "name": "consistent_learner",
        "display_name": "Pelajar Konsisten",
        "description": "Belajar selama 7 hari berturut-turut",
        "category": "milestone",
        "requirement": {"type": "daily_streak", "days": 7},
        "image_url": "\U0001f4da",
        "sort_order": 32,
    },
    {
        "name": "exercise_enthusiast",
        "display_name": "Pecinta Latihan",
        "description": "Menyelesaikan 10 sesi latihan",
        "category": "exercise",
        "requirement": {"type": "session_count", "count": 10},
        "image_url": "\U0001f3cb️",
        "sort_order": 17,
    },
    {
        "name": "gold_collector",
        "display_name": "Kolektor Emas",
        "description": "Mengumpulkan 1000 gold dari latihan",
        "category": "milestone",
        "requirement": {"type": "gold_earned", "amount": 1000},
        "image_url": "\U0001fa99",
        "sort_order": 33,
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert all badge definitions by name. Returns number of badges seeded."""
    existing = {b.name: b for b in (await db.execute(select(Badge))).scalars()}
    for badge_data in BADGE_SEED_DATA:
        badge = existing.get(badge_data["name"])
        if badge is None:
            db.add(Badge(**badge_data))
        else:
            for key, value in badge_data.items():
                setattr(badge, key, value)

    await db.commit()
    logger.info("Seeded %d badge definitions", len(BADGE_SEED_DATA))
    return len(BADGE_SEED_DATA)
