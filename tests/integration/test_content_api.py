"""Grades, materials, courses, the interactive registry and course progress."""

from __future__ import annotations

from httpx import AsyncClient


async def _grade_one_id(client: AsyncClient) -> int:
    grades = (await client.get("/api/v1/grades")).json()["grades"]
    return next(g["id"] for g in grades if g["name"] == "1")


class TestCatalog:
    async def test_grades(self, client: AsyncClient):
        response = await client.get("/api/v1/grades")
        assert response.status_code == 200
        grades = response.json()["grades"]
        assert [g["name"] for g in grades] == ["1", "2", "3", "4", "5", "6"]
        assert grades[0]["display_name"] == "Kelas 1"

    async def test_materials_require_grade(self, client: AsyncClient):
        response = await client.get("/api/v1/materials")
        assert response.status_code == 400

    async def test_materials_of_grade_one(self, client: AsyncClient):
        grade_id = await _grade_one_id(client)
        materials = (await client.get("/api/v1/materials", params={"grade_id": grade_id})).json()["materials"]
        assert [m["name"] for m in materials] == [
            "counting-and-numbers",
            "math-operations",
            "shapes-and-geometry",
            "measurement",
            "money",
            "data-and-graphs",
        ]
        for material in materials:
            assert material["course_count"] == len(material["courses"])
            levels = [(c["level"], c["order"]) for c in material["courses"]]
            assert levels == sorted(levels)

    async def test_courses_link_to_registry(self, client: AsyncClient):
        grade_id = await _grade_one_id(client)
        materials = (await client.get("/api/v1/materials", params={"grade_id": grade_id})).json()["materials"]
        counting = materials[0]

        response = await client.get("/api/v1/courses", params={"material_id": counting["id"]})
        assert response.status_code == 200
        data = response.json()
        assert data["grade"]["name"] == "1"
        assert data["material"]["name"] == "counting-and-numbers"
        first = data["courses"][0]
        assert first["interactive"]["key"] == "course1_1_bilangan"

    async def test_courses_unknown_material(self, client: AsyncClient):
        response = await client.get("/api/v1/courses", params={"material_id": 999_999})
        assert response.status_code == 404

    async def test_registry_listing(self, client: AsyncClient):
        courses = (await client.get("/api/v1/courses/registry")).json()["courses"]
        assert len(courses) == 6
        filtered = (
            await client.get("/api/v1/courses/registry", params={"material_type": "bilangan"})
        ).json()["courses"]
        assert len(filtered) == 3

    async def test_registry_lookup(self, client: AsyncClient):
        response = await client.get("/api/v1/courses/registry/Place Value")
        assert response.status_code == 200
        assert response.json()["key"] == "course1_4_place_value"
        missing = await client.get("/api/v1/courses/registry/course9_1_algebra")
        assert missing.status_code == 404


class TestCourseProgress:
    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.get("/api/v1/progress")).status_code == 401

    async def test_xp_granted_on_first_completion_only(self, authed_client: AsyncClient):
        grade_id = await _grade_one_id(authed_client)
        materials = (
            await authed_client.get("/api/v1/materials", params={"grade_id": grade_id})
        ).json()["materials"]
        course = materials[1]["courses"][0]

        started = (
            await authed_client.post("/api/v1/progress", json={"course_id": course["id"], "completed": False})
        ).json()
        assert started["xp_earned"] == 0
        assert started["progress"]["completed"] is False

        done = (
            await authed_client.post(
                "/api/v1/progress", json={"course_id": course["id"], "completed": True, "score": 90}
            )
        ).json()
        assert done["xp_earned"] == course["xp_reward"]
        assert done["progress"]["completed_at"] is not None

        repeat = (
            await authed_client.post(
                "/api/v1/progress", json={"course_id": course["id"], "completed": True, "score": 100}
            )
        ).json()
        assert repeat["xp_earned"] == 0
        assert repeat["progress"]["score"] == 100

        me = (await authed_client.get("/api/v1/users/me")).json()
        assert me["xp"] == course["xp_reward"]

        listing = (
            await authed_client.get("/api/v1/progress", params={"material_id": materials[1]["id"]})
        ).json()["progress"]
        assert len(listing) == 1
        assert listing[0]["course_id"] == course["id"]

    async def test_unknown_course(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/progress", json={"course_id": 999_999, "completed": True})
        assert response.status_code == 404

    async def test_score_out_of_range(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/progress", json={"course_id": 1, "completed": True, "score": 101})
        assert response.status_code == 400
