"""Tests for card API endpoints."""

import pytest
from httpx import AsyncClient

CALLER = {"X-User-Id": "1"}

BLUE_EYES = {
    "name": "Blue-Eyes White Dragon",
    "type": "Monster",
    "race": "Dragon",
    "archetype": "Blue-Eyes",
    "image": "/a.jpg",
}


async def _create(client: AsyncClient, **overrides) -> dict:
    body = {**BLUE_EYES, **overrides}
    response = await client.post("/cards", json=body, headers=CALLER)
    assert response.status_code == 201
    return response.json()


class TestCreateCard:
    async def test_create_card(self, client: AsyncClient) -> None:
        """Creating a card returns 201 with an assigned id."""
        response = await client.post("/cards", json=BLUE_EYES, headers=CALLER)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] is not None
        assert data["name"] == "Blue-Eyes White Dragon"
        assert data["archetype"] == "Blue-Eyes"

    async def test_missing_required_field(self, client: AsyncClient) -> None:
        body = {k: v for k, v in BLUE_EYES.items() if k != "race"}

        response = await client.post("/cards", json=body, headers=CALLER)

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "missing_required"
        assert failure["field"] == "race"

    async def test_requires_caller(self, client: AsyncClient) -> None:
        response = await client.post("/cards", json=BLUE_EYES)

        assert response.status_code == 401
        assert response.json()["failure"]["kind"] == "unidentified"


class TestGetCard:
    async def test_get_card(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.get(f"/cards/{created['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Blue-Eyes White Dragon"

    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/cards/999")

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    async def test_get_all(self, client: AsyncClient) -> None:
        await _create(client)
        await _create(client, name="Blue-Eyes Alternative White Dragon")

        response = await client.get("/cards/all")

        assert response.status_code == 200
        assert len(response.json()) == 2


class TestUpdateCard:
    async def test_partial_update(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.patch(
            f"/cards/{created['id']}", json={"description": "Legendary"}, headers=CALLER
        )

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Legendary"
        assert data["name"] == "Blue-Eyes White Dragon"

    async def test_null_clears_archetype(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.patch(
            f"/cards/{created['id']}", json={"archetype": None}, headers=CALLER
        )

        assert response.json()["archetype"] is None

    async def test_empty_body_rejected(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.patch(f"/cards/{created['id']}", json={}, headers=CALLER)

        assert response.status_code == 400

    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.patch("/cards/999", json={"name": "X"}, headers=CALLER)

        assert response.status_code == 404


class TestDeleteCard:
    async def test_delete(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.delete(f"/cards/{created['id']}", headers=CALLER)

        assert response.status_code == 204
        assert (await client.get(f"/cards/{created['id']}")).status_code == 404

    async def test_delete_not_found(self, client: AsyncClient) -> None:
        response = await client.delete("/cards/999", headers=CALLER)

        assert response.status_code == 404


class TestPagination:
    async def test_page_shape(self, client: AsyncClient) -> None:
        for i in range(12):
            await _create(client, name=f"Card {i}")

        response = await client.get("/cards", params={"page": 2, "limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 5
        assert data["totalCount"] == 12
        assert data["totalPages"] == 3
        assert data["page"] == 2
        assert data["limit"] == 5

    async def test_non_numeric_params_default(self, client: AsyncClient) -> None:
        for i in range(12):
            await _create(client, name=f"Card {i}")

        response = await client.get("/cards", params={"page": "first", "limit": "many"})

        data = response.json()
        assert response.status_code == 200
        assert data["page"] == 1
        assert data["limit"] == 10
        assert len(data["items"]) == 10

    async def test_zero_page_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"page": 0})

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "out_of_range"
        assert failure["field"] == "page"


class TestSearch:
    async def test_search_by_name_ignores_accents(self, client: AsyncClient) -> None:
        await _create(client, name="Ángel Caído", archetype=None)
        await _create(client)

        response = await client.get("/cards/search", params={"name": "angel"})

        data = response.json()
        assert data["totalCount"] == 1
        assert data["items"][0]["name"] == "Ángel Caído"

    async def test_search_no_match(self, client: AsyncClient) -> None:
        await _create(client)

        response = await client.get("/cards/search", params={"type": "trap"})

        assert response.status_code == 200
        assert response.json()["items"] == []


class TestRandom:
    async def test_random_with_fallback(self, client: AsyncClient) -> None:
        """2 Blue-Eyes and 10 others: 5 cards, Blue-Eyes first, no duplicates."""
        for i in range(2):
            await _create(client, name=f"Blue-Eyes {i}")
        for i in range(10):
            await _create(client, name=f"Magician {i}", archetype="Dark Magician")

        response = await client.get("/cards/random", params={"count": 5, "archetype": "Blue-Eyes"})

        assert response.status_code == 200
        cards = response.json()
        assert len(cards) == 5
        assert [c["archetype"] for c in cards[:2]] == ["Blue-Eyes", "Blue-Eyes"]
        assert all(c["archetype"] == "Dark Magician" for c in cards[2:])
        assert len({c["id"] for c in cards}) == 5

    @pytest.mark.parametrize(
        "params",
        [{"archetype": "Blue-Eyes"}, {"count": 3}, {"count": 0, "archetype": "Blue-Eyes"}],
    )
    async def test_invalid_params(self, client: AsyncClient, params: dict) -> None:
        response = await client.get("/cards/random", params=params)

        assert response.status_code == 400
        assert "failure" in response.json()


class TestMalformedInput:
    async def test_huge_page_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"page": str(10**25)})

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "out_of_range"
        assert failure["field"] == "page"

    async def test_huge_count_rejected(self, client: AsyncClient) -> None:
        response = await client.get(
            "/cards/random", params={"count": str(10**25), "archetype": "Blue-Eyes"}
        )

        assert response.status_code == 400
        assert response.json()["failure"]["field"] == "count"

    async def test_huge_card_id_rejected(self, client: AsyncClient) -> None:
        response = await client.get(f"/cards/{10**25}")

        assert response.status_code == 400
        assert response.json()["failure"]["field"] == "card_id"

    async def test_non_numeric_count(self, client: AsyncClient) -> None:
        """Malformed query values get the same failure body as service validation."""
        response = await client.get(
            "/cards/random", params={"count": "several", "archetype": "Blue-Eyes"}
        )

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "invalid_input"
        assert failure["field"] == "count"

    async def test_non_numeric_caller(self, client: AsyncClient) -> None:
        response = await client.post("/cards", json=BLUE_EYES, headers={"X-User-Id": "kaiba"})

        assert response.status_code == 400
        assert response.json()["failure"]["field"] == "x-user-id"
