"""Garden endpoints: GET /api/v1/garden and POST /api/v1/garden."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.dependencies import get_current_user
from tutow.database import get_session
from tutow.db.models import User
from tutow.garden.engine import GardenError
from tutow.garden.schemas import (
    CollectionBookEntryResponse,
    GardenActionRequest,
    GardenActionResponse,
    GardenResponse,
    GardenStateResponse,
    PlantTypeResponse,
)
from tutow.garden.service import get_garden_view, perform_action

router = APIRouter(prefix="/api/v1/garden", tags=["Garden"])


@router.get("", response_model=GardenStateResponse)
async def get_my_garden(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> GardenStateResponse:
    """The user's pots, collection book and the plant catalog. Creates the garden on first visit."""
    view = await get_garden_view(db, user.id)
    await db.commit()
    return GardenStateResponse(
        garden=GardenResponse.model_validate(view.garden),
        collection_book=[CollectionBookEntryResponse.model_validate(e) for e in view.collection_book],
        plant_types=[PlantTypeResponse.model_validate(p) for p in view.plant_types],
        gold=user.gold,
    )


@router.post("", response_model=GardenActionResponse)
async def garden_action(
    body: GardenActionRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> GardenActionResponse:
    """Plant, water or harvest one pot."""
    try:
        result = await perform_action(
            db,
            user,
            action=body.action,
            pot_index=body.pot_index,
            plant_type_id=body.plant_type_id,
        )
    except GardenError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    await db.commit()
    return GardenActionResponse(**result)
