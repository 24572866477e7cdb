"""Pot lifecycle state machine.

A pot moves empty -> planted (stage 1) -> growing -> ready -> empty again.
The functions here only validate and mutate a pot in memory; persistence,
gold debits and XP grants are done by :mod:`tutow.garden.service`.

Pot invariants kept by every transition:

* an empty pot (``plant_type_id is None``) has ``current_stage == 0`` and is
  not ready to harvest;
* ``is_ready_to_harvest`` is true iff ``current_stage >= growth_stages``;
* ``current_stage`` never exceeds ``growth_stages``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class GardenAction(str, enum.Enum):
    PLANT = "plant"
    WATER = "water"
    HARVEST = "harvest"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GardenError(Exception):
    """Base class for garden rule violations. ``status_code`` is the HTTP mapping."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GardenNotFoundError(GardenError):
    status_code = 404


class PlantTypeNotFoundError(GardenError):
    status_code = 404


class InvalidPotIndexError(GardenError):
    pass


class InvalidActionError(GardenError):
    pass


class PotOccupiedError(GardenError):
    pass


class EmptyPotError(GardenError):
    pass


class AlreadyReadyError(GardenError):
    pass


class NotReadyError(GardenError):
    pass


class InsufficientGoldError(GardenError):
    pass


class GardenConflictError(GardenError):
    """The pot or balance changed under a concurrent request."""

    status_code = 409


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


class Pot(Protocol):
    plant_type_id: int | None
    planted_at: datetime | None
    last_watered: datetime | None
    current_stage: int
    is_ready_to_harvest: bool


class Plant(Protocol):
    id: int
    seed_price: int
    water_cost: int
    growth_stages: int
    xp_reward: int


@dataclass(frozen=True)
class PlantOutcome:
    gold_spent: int


@dataclass(frozen=True)
class WaterOutcome:
    gold_spent: int
    new_stage: int
    is_ready_to_harvest: bool


@dataclass(frozen=True)
class HarvestOutcome:
    plant_type_id: int
    xp_gained: int
    is_first_time: bool


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def parse_action(action: str) -> GardenAction:
    """Map the request's action string to a :class:`GardenAction`."""
    try:
        return GardenAction(action)
    except ValueError:
        msg = "Invalid action"
        raise InvalidActionError(msg) from None


def check_pot_index(pot_index: int, pot_count: int) -> None:
    if pot_index < 0 or pot_index >= pot_count:
        msg = "Invalid pot index"
        raise InvalidPotIndexError(msg)


def is_empty(pot: Pot) -> bool:
    return pot.plant_type_id is None


def require_planted(pot: Pot) -> None:
    if is_empty(pot):
        msg = "No plant in this pot"
        raise EmptyPotError(msg)


def reset_pot(pot: Pot) -> None:
    """Return a pot to the empty state."""
    pot.plant_type_id = None
    pot.planted_at = None
    pot.last_watered = None
    pot.current_stage = 0
    pot.is_ready_to_harvest = False


def plant(pot: Pot, plant_type: Plant, gold: int, now: datetime) -> PlantOutcome:
    """Put a seed into an empty pot.

    Raises:
        PotOccupiedError: The pot already holds a plant.
        InsufficientGoldError: ``gold`` does not cover the seed price.
    """
    if not is_empty(pot):
        msg = "Pot already has a plant"
        raise PotOccupiedError(msg)
    if gold < plant_type.seed_price:
        msg = "Insufficient gold"
        raise InsufficientGoldError(msg)

    pot.plant_type_id = plant_type.id
    pot.planted_at = now
    pot.last_watered = now
    pot.current_stage = 1
    pot.is_ready_to_harvest = False
    return PlantOutcome(gold_spent=plant_type.seed_price)


def water(pot: Pot, plant_type: Plant, gold: int, now: datetime) -> WaterOutcome:
    """Advance a growing plant by one stage, capped at ``growth_stages``.

    Raises:
        EmptyPotError: Nothing is planted.
        AlreadyReadyError: The plant is fully grown.
        InsufficientGoldError: ``gold`` does not cover the water cost.
    """
    require_planted(pot)
    if pot.is_ready_to_harvest:
        msg = "Plant is ready to harvest"
        raise AlreadyReadyError(msg)
    if gold < plant_type.water_cost:
        msg = "Insufficient gold"
        raise InsufficientGoldError(msg)

    new_stage = min(pot.current_stage + 1, plant_type.growth_stages)
    pot.current_stage = new_stage
    pot.last_watered = now
    pot.is_ready_to_harvest = new_stage >= plant_type.growth_stages
    return WaterOutcome(
        gold_spent=plant_type.water_cost,
        new_stage=new_stage,
        is_ready_to_harvest=pot.is_ready_to_harvest,
    )


def harvest(pot: Pot, plant_type: Plant, *, already_unlocked: bool) -> HarvestOutcome:
    """Pick a ripe plant and empty the pot.

    The first harvest of a plant type (``already_unlocked`` false) is worth
    double XP.

    Raises:
        EmptyPotError: Nothing is planted.
        NotReadyError: The plant is still growing.
    """
    require_planted(pot)
    if not pot.is_ready_to_harvest:
        msg = "Plant is not ready to harvest"
        raise NotReadyError(msg)

    is_first_time = not already_unlocked
    xp = plant_type.xp_reward * 2 if is_first_time else plant_type.xp_reward
    reset_pot(pot)
    return HarvestOutcome(plant_type_id=plant_type.id, xp_gained=xp, is_first_time=is_first_time)
