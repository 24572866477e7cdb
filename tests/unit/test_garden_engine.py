"""Pot state machine unit tests: plant, water, harvest transitions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from tutow.garden import engine
from tutow.garden.engine import (
    AlreadyReadyError,
    EmptyPotError,
    GardenAction,
    InsufficientGoldError,
    InvalidActionError,
    InvalidPotIndexError,
    NotReadyError,
    PotOccupiedError,
)

NOW = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


@dataclass
class FakePot:
    plant_type_id: int | None = None
    planted_at: datetime | None = None
    last_watered: datetime | None = None
    current_stage: int = 0
    is_ready_to_harvest: bool = False


@dataclass
class FakePlant:
    id: int = 7
    seed_price: int = 20
    water_cost: int = 2
    growth_stages: int = 5
    xp_reward: int = 2


def _grown(plant: FakePlant) -> FakePot:
    pot = FakePot()
    engine.plant(pot, plant, gold=100, now=NOW)
    while not pot.is_ready_to_harvest:
        engine.water(pot, plant, gold=100, now=NOW)
    return pot


class TestParsing:
    @pytest.mark.parametrize("raw", ["plant", "water", "harvest"])
    def test_known_actions(self, raw):
        assert engine.parse_action(raw) is GardenAction(raw)

    @pytest.mark.parametrize("raw", ["", "dig", "PLANT"])
    def test_unknown_action(self, raw):
        with pytest.raises(InvalidActionError, match="Invalid action"):
            engine.parse_action(raw)

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_pot_index_out_of_range(self, index):
        with pytest.raises(InvalidPotIndexError):
            engine.check_pot_index(index, 3)

    def test_pot_index_in_range(self):
        for index in range(3):
            engine.check_pot_index(index, 3)


class TestPlant:
    def test_plant_empty_pot(self):
        pot, plant = FakePot(), FakePlant()
        outcome = engine.plant(pot, plant, gold=100, now=NOW)
        assert outcome.gold_spent == 20
        assert pot.plant_type_id == 7
        assert pot.current_stage == 1
        assert pot.planted_at == NOW
        assert pot.last_watered == NOW
        assert pot.is_ready_to_harvest is False

    def test_occupied_pot_unchanged(self):
        pot, plant = FakePot(), FakePlant()
        engine.plant(pot, plant, gold=100, now=NOW)
        engine.water(pot, plant, gold=100, now=NOW)
        before = FakePot(**vars(pot))
        with pytest.raises(PotOccupiedError, match="Pot already has a plant"):
            engine.plant(pot, FakePlant(id=8), gold=100, now=NOW)
        assert pot == before

    def test_insufficient_gold(self):
        pot = FakePot()
        with pytest.raises(InsufficientGoldError):
            engine.plant(pot, FakePlant(seed_price=50), gold=49, now=NOW)
        assert pot.plant_type_id is None

    def test_exact_gold_is_enough(self):
        outcome = engine.plant(FakePot(), FakePlant(seed_price=50), gold=50, now=NOW)
        assert outcome.gold_spent == 50

    def test_single_stage_plant_needs_one_watering(self):
        pot, plant = FakePot(), FakePlant(growth_stages=1)
        engine.plant(pot, plant, gold=100, now=NOW)
        assert pot.is_ready_to_harvest is False
        outcome = engine.water(pot, plant, gold=100, now=NOW)
        assert outcome.new_stage == 1
        assert outcome.is_ready_to_harvest is True


class TestWater:
    def test_advances_one_stage(self):
        pot, plant = FakePot(), FakePlant()
        engine.plant(pot, plant, gold=100, now=NOW)
        outcome = engine.water(pot, plant, gold=100, now=NOW)
        assert outcome.new_stage == 2
        assert outcome.gold_spent == 2
        assert outcome.is_ready_to_harvest is False

    def test_ready_when_final_stage_reached(self):
        pot, plant = FakePot(), FakePlant()
        engine.plant(pot, plant, gold=100, now=NOW)
        stages = [engine.water(pot, plant, gold=100, now=NOW).new_stage for _ in range(4)]
        assert stages == [2, 3, 4, 5]
        assert pot.is_ready_to_harvest is True

    def test_stage_never_exceeds_growth_stages(self):
        plant = FakePlant()
        pot = _grown(plant)
        with pytest.raises(AlreadyReadyError):
            engine.water(pot, plant, gold=100, now=NOW)
        assert pot.current_stage == plant.growth_stages

    def test_empty_pot(self):
        with pytest.raises(EmptyPotError, match="No plant in this pot"):
            engine.water(FakePot(), FakePlant(), gold=100, now=NOW)

    def test_insufficient_gold_leaves_stage(self):
        pot, plant = FakePot(), FakePlant()
        engine.plant(pot, plant, gold=100, now=NOW)
        with pytest.raises(InsufficientGoldError):
            engine.water(pot, plant, gold=1, now=NOW)
        assert pot.current_stage == 1


class TestHarvest:
    def test_first_harvest_double_xp(self):
        plant = FakePlant(xp_reward=3)
        outcome = engine.harvest(_grown(plant), plant, already_unlocked=False)
        assert outcome.is_first_time is True
        assert outcome.xp_gained == 6

    def test_repeat_harvest_single_xp(self):
        plant = FakePlant(xp_reward=3)
        outcome = engine.harvest(_grown(plant), plant, already_unlocked=True)
        assert outcome.is_first_time is False
        assert outcome.xp_gained == 3

    def test_harvest_resets_pot(self):
        plant = FakePlant()
        pot = _grown(plant)
        engine.harvest(pot, plant, already_unlocked=False)
        assert pot == FakePot()

    def test_not_ready(self):
        pot, plant = FakePot(), FakePlant()
        engine.plant(pot, plant, gold=100, now=NOW)
        with pytest.raises(NotReadyError, match="not ready"):
            engine.harvest(pot, plant, already_unlocked=False)
        assert pot.current_stage == 1

    def test_empty_pot(self):
        with pytest.raises(EmptyPotError):
            engine.require_planted(FakePot())


class TestErrorStatus:
    def test_status_codes(self):
        assert engine.GardenError("x").status_code == 400
        assert engine.GardenNotFoundError("x").status_code == 404
        assert engine.PlantTypeNotFoundError("x").status_code == 404
        assert engine.GardenConflictError("x").status_code == 409
        assert InsufficientGoldError("Insufficient gold").message == "Insufficient gold"
