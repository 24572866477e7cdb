"""Plant catalog seed data: 10 plants across the bronze, silver and gold tiers."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import PlantType

logger = logging.getLogger(__name__)

_TIER_ECONOMY = {
    "bronze": {"seed_price": 20, "water_cost": 2, "xp_reward": 2},
    "silver": {"seed_price": 30, "water_cost": 3, "xp_reward": 3},
    "gold": {"seed_price": 50, "water_cost": 5, "xp_reward": 5},
}

_PLANTS: list[tuple[str, str, str, str]] = [
    # (name, tier, display name, description)
    ("sunflower_bronze", "bronze", "Bunga Matahari Perunggu", "Bunga matahari cantik berwarna kuning cerah"),
    ("carrot_bronze", "bronze", "Wortel Perunggu", "Wortel segar dan bergizi tinggi"),
    ("rose_silver", "silver", "Mawar Perak", "Mawar merah yang harum dan indah"),
    ("tomato_silver", "silver", "Tomat Perak", "Tomat merah segar dan lezat"),
    ("lavender_silver", "silver", "Lavender Perak", "Lavender ungu yang menenangkan"),
    ("orchid_gold", "gold", "Anggrek Emas", "Anggrek eksotis yang langka dan berharga"),
    ("bonsai_gold", "gold", "Bonsai Emas", "Pohon bonsai mini yang anggun"),
    ("dragon_fruit_gold", "gold", "Buah Naga Emas", "Buah naga eksotis yang manis"),
    ("cherry_blossom_gold", "gold", "Sakura Emas", "Bunga sakura merah muda yang mempesona"),
    ("golden_lotus_gold", "gold", "Teratai Emas", "Teratai emas yang langka dan suci"),
]

PLANT_SEED_DATA: list[dict] = [
    {
        "name": name,
        "display_name": display_name,
        "description": description,
        "grade": tier,
        "growth_stages": 5,
        "image_url": f"/plants/{name}.png",
        **_TIER_ECONOMY[tier],
    }
    for name, tier, display_name, description in _PLANTS
]


async def seed_plant_types(db: AsyncSession) -> int:
    """Insert or update every catalog plant by name. Returns the number of plants seeded."""
    existing = {p.name: p for p in (await db.execute(select(PlantType))).scalars()}
    for data in PLANT_SEED_DATA:
        plant = existing.get(data["name"])
        if plant is None:
            db.add(PlantType(**data))
        else:
            for key, value in data.items():
                setattr(plant, key, value)

    await db.commit()
    logger.info("Seeded %d plant types", len(PLANT_SEED_DATA))
    return len(PLANT_SEED_DATA)
