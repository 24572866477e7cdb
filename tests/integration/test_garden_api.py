"""Garden API: planting, watering, harvesting and the collection book."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.service import get_user_by_id
from tutow.database import get_session
from tutow.db.models import User
from tutow.garden.engine import GardenConflictError, InsufficientGoldError
from tutow.garden.service import get_garden, perform_action


async def _carrot(client: AsyncClient) -> dict:
    garden = (await client.get("/api/v1/garden")).json()
    carrot = garden["plant_types"][0]
    assert carrot["name"] == "carrot_bronze"
    return carrot


async def _act(client: AsyncClient, action: str, pot_index: int = 0, plant_type_id: int | None = None):
    body = {"action": action, "pot_index": pot_index}
    if plant_type_id is not None:
        body["plant_type_id"] = plant_type_id
    return await client.post("/api/v1/garden", json=body)


class TestGardenState:
    async def test_initial_garden(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/garden")
        assert response.status_code == 200
        data = response.json()
        assert data["gold"] == 100
        assert len(data["garden"]["pots"]) == 3
        assert all(p["plant_type_id"] is None for p in data["garden"]["pots"])
        assert data["collection_book"] == []
        assert len(data["plant_types"]) == 10

    async def test_catalog_ordered_by_tier(self, authed_client: AsyncClient):
        data = (await authed_client.get("/api/v1/garden")).json()
        tiers = [p["grade"] for p in data["plant_types"]]
        order = {"bronze": 0, "silver": 1, "gold": 2}
        assert tiers == sorted(tiers, key=order.__getitem__)

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/garden")
        assert response.status_code == 401


class TestGrowCycle:
    async def test_plant_water_harvest(self, authed_client: AsyncClient):
        carrot = await _carrot(authed_client)

        planted = await _act(authed_client, "plant", 0, carrot["id"])
        assert planted.status_code == 200, planted.text
        assert planted.json()["gold"] == 100 - carrot["seed_price"]
        assert planted.json()["gold_spent"] == carrot["seed_price"]

        for stage in range(2, 6):
            watered = (await _act(authed_client, "water")).json()
            assert watered["new_stage"] == stage
            assert watered["is_ready_to_harvest"] is (stage == 5)

        harvested = await _act(authed_client, "harvest")
        assert harvested.status_code == 200
        data = harvested.json()
        assert data["is_first_time"] is True
        assert data["xp_gained"] == carrot["xp_reward"] * 2
        assert data["xp"] == carrot["xp_reward"] * 2
        assert data["gold"] == 100 - carrot["seed_price"] - 4 * carrot["water_cost"]

        state = (await authed_client.get("/api/v1/garden")).json()
        assert state["garden"]["pots"][0]["plant_type_id"] is None
        assert state["garden"]["pots"][0]["current_stage"] == 0
        book = state["collection_book"]
        assert len(book) == 1
        assert book[0]["unlocked"] is True
        assert book[0]["times_harvested"] == 1

    async def test_second_harvest_single_xp(self, authed_client: AsyncClient):
        carrot = await _carrot(authed_client)
        for _ in range(2):
            await _act(authed_client, "plant", 1, carrot["id"])
            for _ in range(4):
                await _act(authed_client, "water", 1)
            last = (await _act(authed_client, "harvest", 1)).json()
        assert last["is_first_time"] is False
        assert last["xp_gained"] == carrot["xp_reward"]

        history = (await authed_client.get("/api/v1/users/me/xp/history")).json()
        assert history["total_xp"] == carrot["xp_reward"] * 3
        assert [e["source"] for e in history["entries"]] == ["harvest", "harvest"]

        book = (await authed_client.get("/api/v1/garden")).json()["collection_book"]
        assert book[0]["times_harvested"] == 2


class TestGardenErrors:
    async def test_occupied_pot(self, authed_client: AsyncClient):
        carrot = await _carrot(authed_client)
        await _act(authed_client, "plant", 0, carrot["id"])
        response = await _act(authed_client, "plant", 0, carrot["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Pot already has a plant"

    async def test_harvest_too_early(self, authed_client: AsyncClient):
        carrot = await _carrot(authed_client)
        await _act(authed_client, "plant", 0, carrot["id"])
        response = await _act(authed_client, "harvest")
        assert response.status_code == 400
        assert response.json()["detail"] == "Plant is not ready to harvest"

    async def test_water_ready_plant(self, authed_client: AsyncClient):
        carrot = await _carrot(authed_client)
        await _act(authed_client, "plant", 0, carrot["id"])
        for _ in range(4):
            await _act(authed_client, "water")
        response = await _act(authed_client, "water")
        assert response.status_code == 400
        assert response.json()["detail"] == "Plant is ready to harvest"

    async def test_empty_pot(self, authed_client: AsyncClient):
        for action in ("water", "harvest"):
            response = await _act(authed_client, action, 2)
            assert response.status_code == 400
            assert response.json()["detail"] == "No plant in this pot"

    async def test_insufficient_gold_changes_nothing(
        self, authed_client: AsyncClient, registered_user: dict, db_session: AsyncSession
    ):
        await db_session.execute(update(User).where(User.id == registered_user["user_id"]).values(gold=5))
        await db_session.commit()
        carrot = await _carrot(authed_client)

        response = await _act(authed_client, "plant", 0, carrot["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient gold"

        state = (await authed_client.get("/api/v1/garden")).json()
        assert state["gold"] == 5
        assert state["garden"]["pots"][0]["plant_type_id"] is None

    @pytest.mark.parametrize("pot_index", [-1, 3, 99])
    async def test_invalid_pot_index(self, authed_client: AsyncClient, pot_index: int):
        response = await _act(authed_client, "water", pot_index)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid pot index"

    async def test_invalid_action(self, authed_client: AsyncClient):
        response = await _act(authed_client, "fertilize")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid action"

    async def test_unknown_plant_type(self, authed_client: AsyncClient):
        await authed_client.get("/api/v1/garden")
        response = await _act(authed_client, "plant", 0, 9999)
        assert response.status_code == 404
        assert response.json()["detail"] == "Plant type not found"


@asynccontextmanager
async def _open_session() -> AsyncIterator[AsyncSession]:
    async with aclosing(get_session()) as sessions:
        yield await anext(sessions)


class TestConcurrentSpending:
    async def test_racing_water_charges_once(self, authed_client: AsyncClient, registered_user: dict):
        carrot = await _carrot(authed_client)
        assert (await _act(authed_client, "plant", 0, carrot["id"])).status_code == 200
        user_id = registered_user["user_id"]

        async with _open_session() as first, _open_session() as second:
            first_user = await get_user_by_id(first, user_id)
            second_user = await get_user_by_id(second, user_id)
            # both sessions hold the pot at stage 1 before either writes
            first_garden = await get_garden(first, user_id)  # noqa: F841 - keep identity map entries alive
            second_garden = await get_garden(second, user_id)  # noqa: F841 - keep identity map entries alive

            result = await perform_action(first, first_user, "water", 0)
            await first.commit()
            assert result["new_stage"] == 2

            with pytest.raises(GardenConflictError) as exc_info:
                await perform_action(second, second_user, "water", 0)
            assert exc_info.value.status_code == 409

        state = (await authed_client.get("/api/v1/garden")).json()
        assert state["gold"] == 100 - carrot["seed_price"] - carrot["water_cost"]
        assert state["garden"]["pots"][0]["current_stage"] == 2

    async def test_gold_spent_between_load_and_debit(
        self, authed_client: AsyncClient, registered_user: dict, db_session: AsyncSession
    ):
        carrot = await _carrot(authed_client)
        assert (await _act(authed_client, "plant", 0, carrot["id"])).status_code == 200
        user_id = registered_user["user_id"]

        async with _open_session() as session:
            user = await get_user_by_id(session, user_id)
            assert user.gold >= carrot["water_cost"]

            await db_session.execute(update(User).where(User.id == user_id).values(gold=1))
            await db_session.commit()

            with pytest.raises(InsufficientGoldError) as exc_info:
                await perform_action(session, user, "water", 0)
            assert exc_info.value.status_code == 400

        state = (await authed_client.get("/api/v1/garden")).json()
        assert state["gold"] == 1
        pot = state["garden"]["pots"][0]
        assert pot["plant_type_id"] == carrot["id"]
        assert pot["current_stage"] == 1
