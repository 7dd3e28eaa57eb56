# tests/test_api_tiers.py
from __future__ import annotations

import pytest

from app.auth.permissions import PERM
from app.core.providers import StructurePrefab
from app.core.security import create_access_token
from app.core.tier import DefaultTier

from tests.constants import FURNACE, SLEEPING_BAG

DEFAULT = DefaultTier.DEFAULT.value
VIP = DefaultTier.VIP.value


def headers_for(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


# =========================================================
# Auth
# =========================================================
@pytest.mark.asyncio
async def test_requires_token(client):
    r = await client.get("/api/v1/tiers")
    assert r.status_code in (401, 403)


@pytest.mark.asyncio
async def test_rejects_bad_token(client):
    r = await client.get("/api/v1/tiers", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_forbidden_without_permission(client):
    r = await client.get("/api/v1/tiers", headers=headers_for(555))

    assert r.status_code == 403
    detail = r.json()["detail"]
    assert detail["code"] == "action_forbidden"
    assert detail["message"] == "You cant use this command"
    assert PERM.UI in detail["required"]


@pytest.mark.asyncio
async def test_ui_permission_does_not_allow_edits(client, authorizer):
    authorizer.grant(555, PERM.UI)
    headers = headers_for(555)

    assert (await client.get("/api/v1/tiers", headers=headers)).status_code == 200

    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": FURNACE, "limit": 1},
        headers=headers,
    )
    assert r.status_code == 403


# =========================================================
# Read
# =========================================================
@pytest.mark.asyncio
async def test_list_tiers_by_priority(client, operator_headers):
    r = await client.get("/api/v1/tiers", headers=operator_headers)

    assert r.status_code == 200
    body = r.json()
    assert [t["name"] for t in body] == [DEFAULT, VIP, DefaultTier.ADMIN.value]
    assert [t["priority"] for t in body] == [0, 1, 2]
    assert all(t["category_count"] == 4 for t in body)


@pytest.mark.asyncio
async def test_list_categories(client, operator_headers):
    r = await client.get(f"/api/v1/tiers/{DEFAULT}/categories", headers=operator_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["tier"] == DEFAULT
    assert body["total"] == 4
    assert body["limit"] == 27
    assert body["has_more"] is False

    furnace = next(c for c in body["items"] if c["category"] == FURNACE)
    assert furnace == {"category": FURNACE, "icon": "-1999722522", "limit": 50, "enabled": True}


@pytest.mark.asyncio
async def test_list_categories_paging_and_search(client, operator_headers):
    r = await client.get(
        f"/api/v1/tiers/{DEFAULT}/categories",
        params={"offset": 0, "limit": 3},
        headers=operator_headers,
    )
    body = r.json()
    assert len(body["items"]) == 3
    assert body["has_more"] is True

    r = await client.get(
        f"/api/v1/tiers/{DEFAULT}/categories",
        params={"search": "FURNACE"},
        headers=operator_headers,
    )
    body = r.json()
    assert [c["category"] for c in body["items"]] == [FURNACE]
    assert body["total"] == 1


@pytest.mark.asyncio
async def test_list_categories_unknown_tier(client, operator_headers):
    r = await client.get("/api/v1/tiers/advancedentitylimit.nope/categories", headers=operator_headers)

    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "tier_not_found"


# =========================================================
# Create
# =========================================================
@pytest.mark.asyncio
async def test_create_tier(client, operator_headers, repository):
    r = await client.post(
        "/api/v1/tiers",
        json={"name": "advancedentitylimit.builder"},
        headers=operator_headers,
    )

    assert r.status_code == 201
    assert r.json() == {"name": "advancedentitylimit.builder", "priority": 3, "category_count": 4}

    saved = repository.document["advancedentitylimit.builder"]
    assert all(e.limit == 10 for e in saved.categories.values())


@pytest.mark.asyncio
async def test_create_tier_copying_another(client, operator_headers):
    await client.patch(
        f"/api/v1/tiers/{VIP}/categories/limit",
        json={"category": FURNACE, "limit": 7},
        headers=operator_headers,
    )

    r = await client.post(
        "/api/v1/tiers",
        json={"name": "advancedentitylimit.vip2", "copy_from": VIP},
        headers=operator_headers,
    )
    assert r.status_code == 201
    assert r.json()["priority"] == 2

    r = await client.get(
        "/api/v1/tiers/advancedentitylimit.vip2/categories",
        params={"search": "furnace"},
        headers=operator_headers,
    )
    assert r.json()["items"][0]["limit"] == 7


@pytest.mark.asyncio
async def test_create_duplicate_tier(client, operator_headers):
    r = await client.post("/api/v1/tiers", json={"name": VIP}, headers=operator_headers)

    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "tier_exists"


@pytest.mark.asyncio
async def test_create_tier_bad_prefix(client, operator_headers):
    r = await client.post("/api/v1/tiers", json={"name": "vip.plus"}, headers=operator_headers)

    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "tier_name_invalid"


@pytest.mark.asyncio
async def test_create_tier_unknown_source(client, operator_headers):
    r = await client.post(
        "/api/v1/tiers",
        json={"name": "advancedentitylimit.x", "copy_from": "advancedentitylimit.nope"},
        headers=operator_headers,
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_create_requires_create_permission(client, authorizer):
    authorizer.grant(555, PERM.SET_LIMIT)
    r = await client.post("/api/v1/tiers", json={"name": "advancedentitylimit.x"}, headers=headers_for(555))
    assert r.status_code == 403

    authorizer.grant(555, PERM.CREATE_PERMISSION)
    r = await client.post("/api/v1/tiers", json={"name": "advancedentitylimit.x"}, headers=headers_for(555))
    assert r.status_code == 201


# =========================================================
# Edit
# =========================================================
@pytest.mark.asyncio
async def test_set_limit_applies_to_next_placement(client, operator_headers, world, player):
    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": FURNACE, "limit": 1},
        headers=operator_headers,
    )
    assert r.status_code == 200
    assert r.json()["limit"] == 1

    world.place(player, FURNACE)
    r = await client.post("/api/v1/limits/evaluate", json={"user_id": player, "category": FURNACE})
    assert r.json()["allowed"] is False


@pytest.mark.asyncio
async def test_disable_category(client, operator_headers, world, player):
    await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": SLEEPING_BAG, "limit": 0},
        headers=operator_headers,
    )
    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/enabled",
        json={"category": SLEEPING_BAG, "enabled": False},
        headers=operator_headers,
    )
    assert r.status_code == 200
    assert r.json()["enabled"] is False

    r = await client.post("/api/v1/limits/evaluate", json={"user_id": player, "category": SLEEPING_BAG})
    assert r.json()["allowed"] is True
    assert r.json()["reason"] == "unlimited"


@pytest.mark.asyncio
async def test_edit_errors(client, operator_headers):
    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": FURNACE, "limit": -1},
        headers=operator_headers,
    )
    assert r.status_code == 422

    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": "assets/prefabs/unknown.prefab", "limit": 1},
        headers=operator_headers,
    )
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "category_not_found"

    r = await client.patch(
        "/api/v1/tiers/advancedentitylimit.nope/categories/enabled",
        json={"category": FURNACE, "enabled": False},
        headers=operator_headers,
    )
    assert r.status_code == 404


# =========================================================
# Refresh / save
# =========================================================
@pytest.mark.asyncio
async def test_refresh_merges_new_entities(client, operator_headers, registry):
    r = await client.post("/api/v1/tiers/refresh", headers=operator_headers)
    assert r.status_code == 200
    assert r.json() == {"changed": False}

    new_prefab = "assets/prefabs/building core/roof/roof.prefab"
    registry.prefabs.append(StructurePrefab(prefab_name=new_prefab, is_building_block=True))

    r = await client.post("/api/v1/tiers/refresh", headers=operator_headers)
    assert r.json() == {"changed": True}

    r = await client.get(
        f"/api/v1/tiers/{DEFAULT}/categories",
        params={"search": "roof"},
        headers=operator_headers,
    )
    items = r.json()["items"]
    assert [(c["category"], c["limit"]) for c in items] == [(new_prefab, 10)]


@pytest.mark.asyncio
async def test_save(client, operator_headers, repository):
    before = repository.saves
    r = await client.post("/api/v1/tiers/save", headers=operator_headers)

    assert r.status_code == 204
    assert repository.saves == before + 1



@pytest.mark.asyncio
async def test_failed_save_keeps_previous_limit(client, operator_headers, repository, monkeypatch):
    def _disk_full(tiers):
        raise OSError("disk full")

    monkeypatch.setattr(repository, "save", _disk_full)

    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/limit",
        json={"category": FURNACE, "limit": 1},
        headers=operator_headers,
    )
    assert r.status_code == 503
    assert r.json()["detail"]["code"] == "persistence_failed"

    r = await client.post("/api/v1/tiers", json={"name": "advancedentitylimit.x"}, headers=operator_headers)
    assert r.status_code == 503

    monkeypatch.undo()

    r = await client.get(
        f"/api/v1/tiers/{DEFAULT}/categories",
        params={"search": "furnace"},
        headers=operator_headers,
    )
    assert r.json()["items"][0]["limit"] == 50

    r = await client.post("/api/v1/tiers", json={"name": "advancedentitylimit.x"}, headers=operator_headers)
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_console_token_may_edit(client, host_headers):
    r = await client.patch(
        f"/api/v1/tiers/{DEFAULT}/categories/enabled",
        json={"category": FURNACE, "enabled": False},
        headers=host_headers,
    )
    assert r.status_code == 200
