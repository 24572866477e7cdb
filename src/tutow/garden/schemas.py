"""Garden request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PlantTypeResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    display_name: str
    description: str | None = None
    grade: str
    seed_price: int
    water_cost: int
    growth_stages: int
    xp_reward: int
    image_url: str | None = None


class PotResponse(BaseModel):
    model_config = {"from_attributes": True}

    slot: int
    plant_type_id: int | None = None
    planted_at: datetime | None = None
    last_watered: datetime | None = None
    current_stage: int
    is_ready_to_harvest: bool
    plant_type: PlantTypeResponse | None = None


class GardenResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    user_id: int
    pots: list[PotResponse]


class CollectionBookEntryResponse(BaseModel):
    model_config = {"from_attributes": True}

    plant_type_id: int
    unlocked: bool
    unlocked_at: datetime | None = None
    times_harvested: int
    plant_type: PlantTypeResponse


class GardenStateResponse(BaseModel):
    garden: GardenResponse
    collection_book: list[CollectionBookEntryResponse]
    plant_types: list[PlantTypeResponse]
    gold: int


class GardenActionRequest(BaseModel):
    """``plant_type_id`` is required for ``plant`` and ignored otherwise."""

    action: str
    pot_index: int
    plant_type_id: int | None = None


class GardenActionResponse(BaseModel):
    success: bool
    message: str
    gold: int
    xp: int
    gold_spent: int = Field(0, ge=0)
    new_stage: int | None = None
    is_ready_to_harvest: bool | None = None
    xp_gained: int | None = None
    is_first_time: bool | None = None
