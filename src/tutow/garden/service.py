"""Garden persistence: lazily created gardens and atomic plant/water/harvest."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from tutow.config import get_settings
from tutow.db.models import CollectionBookEntry, Garden, GardenPot, PlantType, User
from tutow.garden import engine
from tutow.garden.engine import (
    GardenAction,
    GardenConflictError,
    GardenError,
    GardenNotFoundError,
    InsufficientGoldError,
    PlantTypeNotFoundError,
)
from tutow.gamification.xp_service import grant_xp

logger = structlog.get_logger()

# bronze < silver < gold
TIER_ORDER = {"bronze": 0, "silver": 1, "gold": 2}


@dataclass
class GardenView:
    garden: Garden
    collection_book: list[CollectionBookEntry]
    plant_types: list[PlantType]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_garden(db: AsyncSession, user_id: int) -> Garden | None:
    result = await db.execute(select(Garden).where(Garden.user_id == user_id))
    return result.scalar_one_or_none()


async def create_garden(db: AsyncSession, user_id: int) -> Garden:
    """Create a garden with ``garden_pot_count`` empty pots."""
    pot_count = get_settings().garden_pot_count
    garden = Garden(
        user_id=user_id,
        created_at=datetime.now(timezone.utc),
        pots=[
            GardenPot(slot=slot, plant_type=None, current_stage=0, is_ready_to_harvest=False)
            for slot in range(pot_count)
        ],
    )
    db.add(garden)
    await db.flush()
    logger.info("garden_created", user_id=user_id, pots=pot_count)
    return garden


async def get_or_create_garden(db: AsyncSession, user_id: int) -> Garden:
    garden = await get_garden(db, user_id)
    if garden is None:
        garden = await create_garden(db, user_id)
    return garden


async def list_plant_types(db: AsyncSession) -> list[PlantType]:
    """Plant catalog ordered by tier (bronze, silver, gold) then name."""
    result = await db.execute(select(PlantType))
    plants = list(result.scalars().all())
    plants.sort(key=lambda p: (TIER_ORDER.get(p.grade, len(TIER_ORDER)), p.name))
    return plants


async def get_collection_book(db: AsyncSession, user_id: int) -> list[CollectionBookEntry]:
    result = await db.execute(
        select(CollectionBookEntry)
        .where(CollectionBookEntry.user_id == user_id)
        .order_by(CollectionBookEntry.plant_type_id)
    )
    return list(result.scalars().all())


async def get_garden_view(db: AsyncSession, user_id: int) -> GardenView:
    """Garden (created on first visit), collection book and plant catalog."""
    garden = await get_or_create_garden(db, user_id)
    return GardenView(
        garden=garden,
        collection_book=await get_collection_book(db, user_id),
        plant_types=await list_plant_types(db),
    )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


async def _debit_gold(db: AsyncSession, user: User, amount: int) -> None:
    """Spend gold with a conditional UPDATE so concurrent spends cannot overdraw."""
    result = await db.execute(
        update(User)
        .where(User.id == user.id, User.gold >= amount)
        .values(gold=User.gold - amount)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        msg = "Insufficient gold"
        raise InsufficientGoldError(msg)


async def _unlock_collection_entry(
    db: AsyncSession, user_id: int, plant_type_id: int, now: datetime
) -> CollectionBookEntry:
    result = await db.execute(
        select(CollectionBookEntry).where(
            CollectionBookEntry.user_id == user_id,
            CollectionBookEntry.plant_type_id == plant_type_id,
        )
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        entry = CollectionBookEntry(
            user_id=user_id,
            plant_type_id=plant_type_id,
            unlocked=False,
            times_harvested=0,
        )
        db.add(entry)
    if not entry.unlocked:
        entry.unlocked = True
        entry.unlocked_at = now
    entry.times_harvested += 1
    return entry


async def _is_unlocked(db: AsyncSession, user_id: int, plant_type_id: int) -> bool:
    result = await db.execute(
        select(CollectionBookEntry.unlocked).where(
            CollectionBookEntry.user_id == user_id,
            CollectionBookEntry.plant_type_id == plant_type_id,
        )
    )
    return bool(result.scalar_one_or_none())


async def perform_action(
    db: AsyncSession,
    user: User,
    action: str,
    pot_index: int,
    plant_type_id: int | None = None,
) -> dict[str, Any]:
    """Run one garden action for ``user``.

    The pot update, the gold debit and the XP grant are flushed together; any
    rule violation or concurrent modification rolls the whole action back.
    The caller commits on success.

    Raises:
        GardenError: Any rule violation, with ``status_code`` set for the HTTP layer.
    """
    # rollback expires ``user``; keep the id for logging
    user_id = user.id
    garden = await get_garden(db, user_id)
    if garden is None:
        msg = "Garden not found"
        raise GardenNotFoundError(msg)

    engine.check_pot_index(pot_index, len(garden.pots))
    kind = engine.parse_action(action)
    pot = garden.pots[pot_index]
    now = datetime.now(timezone.utc)

    try:
        if kind is GardenAction.PLANT:
            result = await _plant(db, user, pot, plant_type_id, now)
        elif kind is GardenAction.WATER:
            result = await _water(db, user, pot, now)
        else:
            result = await _harvest(db, user, pot, now)
        await db.flush()
    except StaleDataError as e:
        await db.rollback()
        logger.warning("garden_conflict", user_id=user_id, pot_index=pot_index, action=kind.value)
        msg = "This pot was changed by another request. Please try again."
        raise GardenConflictError(msg) from e
    except GardenError:
        await db.rollback()
        raise

    await db.refresh(user, ["gold", "xp"])
    result["gold"] = user.gold
    result["xp"] = user.xp
    logger.info("garden_action", user_id=user_id, pot_index=pot_index, action=kind.value)
    return result


async def _plant(
    db: AsyncSession, user: User, pot: GardenPot, plant_type_id: int | None, now: datetime
) -> dict[str, Any]:
    plant_type = await db.get(PlantType, plant_type_id) if plant_type_id is not None else None
    if plant_type is None:
        msg = "Plant type not found"
        raise PlantTypeNotFoundError(msg)

    outcome = engine.plant(pot, plant_type, user.gold, now)
    pot.plant_type = plant_type
    await _debit_gold(db, user, outcome.gold_spent)
    return {
        "success": True,
        "message": f"{plant_type.display_name} planted",
        "gold_spent": outcome.gold_spent,
    }


async def _water(db: AsyncSession, user: User, pot: GardenPot, now: datetime) -> dict[str, Any]:
    outcome = engine.water(pot, pot.plant_type, user.gold, now)
    await _debit_gold(db, user, outcome.gold_spent)
    return {
        "success": True,
        "message": "Plant watered",
        "gold_spent": outcome.gold_spent,
        "new_stage": outcome.new_stage,
        "is_ready_to_harvest": outcome.is_ready_to_harvest,
    }


async def _harvest(db: AsyncSession, user: User, pot: GardenPot, now: datetime) -> dict[str, Any]:
    engine.require_planted(pot)
    plant_type = pot.plant_type

    # Captured before the flush bumps it; unique per harvest of this pot.
    harvest_key = f"harvest:{pot.id}:{pot.version}"
    already_unlocked = await _is_unlocked(db, user.id, plant_type.id)
    outcome = engine.harvest(pot, plant_type, already_unlocked=already_unlocked)
    pot.plant_type = None

    await _unlock_collection_entry(db, user.id, plant_type.id, now)
    await grant_xp(
        db,
        user_id=user.id,
        amount=outcome.xp_gained,
        source="harvest",
        source_id=plant_type.name,
        description=f"Harvested {plant_type.display_name}",
        idempotency_key=harvest_key,
    )
    return {
        "success": True,
        "message": f"{plant_type.display_name} harvested",
        "xp_gained": outcome.xp_gained,
        "is_first_time": outcome.is_first_time,
    }
