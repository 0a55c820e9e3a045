from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import jwt


async def _create(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "A", "description": "d", "price": 1.0, **overrides}
    resp = await client.post("/products", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"][0]


@pytest.mark.asyncio
async def test_create_then_fetch_round_trip(client: AsyncClient):
    created = await _create(client)
    assert created["id"]

    resp = await client.get(f"/products/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == 200
    assert body["data"] == [{"id": created["id"], "name": "A", "description": "d", "price": 1.0}]
    assert "errors" not in body
    assert "pagination" not in body


@pytest.mark.asyncio
async def test_create_reports_every_violation(client: AsyncClient):
    resp = await client.post("/products", json={"name": "", "price": -5})
    assert resp.status_code == 400
    assert resp.json() == {
        "status": 400,
        "errors": [{"message": "name is required"}, {"message": "price must be greater than 0"}],
    }


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_id(client: AsyncClient):
    created = await _create(client, id="client-chosen")
    assert created["id"] != "client-chosen"


@pytest.mark.asyncio
async def test_malformed_body_is_a_400_message_list(client: AsyncClient):
    resp = await client.post("/products", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"status": 400, "errors": [{"message": "request body is not valid JSON"}]}

    resp = await client.post("/products", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"message": "request body must be a JSON object"}]

    resp = await client.patch("/products/any", content=b"", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"message": "request body is not valid JSON"}]


@pytest.mark.asyncio
async def test_list_products_with_pagination(client: AsyncClient):
    for index in range(3):
        await _create(client, name=f"P{index}")

    resp = await client.get("/products", params={"limit": 2, "offset": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"] == {"limit": 2, "offset": 1, "total": 3, "count": 2}
    assert len(body["data"]) == 2


@pytest.mark.asyncio
async def test_list_defaults(client: AsyncClient):
    resp = await client.get("/products")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": 200,
        "data": [],
        "pagination": {"limit": 10, "offset": 0, "total": 0, "count": 0},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", ["0", "-1", "101"])
async def test_list_rejects_out_of_range_limit(client: AsyncClient, limit: str):
    resp = await client.get("/products", params={"limit": limit})
    assert resp.status_code == 400
    body = resp.json()
    assert body["errors"][0]["message"].startswith("invalid limit parameter")
    assert "data" not in body
    assert "pagination" not in body


@pytest.mark.asyncio
async def test_list_rejects_negative_offset(client: AsyncClient):
    resp = await client.get("/products", params={"offset": "-3"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["message"].startswith("invalid offset parameter")


@pytest.mark.asyncio
async def test_replace_product(client: AsyncClient):
    created = await _create(client)
    resp = await client.put(f"/products/{created['id']}", json={"name": "B", "description": "e", "price": 2})
    assert resp.status_code == 200
    assert resp.json()["data"] == [{"id": created["id"], "name": "B", "description": "e", "price": 2.0}]


@pytest.mark.asyncio
async def test_replace_validates_before_lookup(client: AsyncClient):
    resp = await client.put("/products/missing", json={"description": "d", "price": 10})
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"message": "name is required"}]


@pytest.mark.asyncio
async def test_replace_unknown_product(client: AsyncClient):
    resp = await client.put("/products/missing", json={"name": "B", "price": 2})
    assert resp.status_code == 404
    assert resp.json() == {"status": 404, "errors": [{"message": "product not found"}]}


@pytest.mark.asyncio
async def test_patch_product(client: AsyncClient):
    created = await _create(client)
    resp = await client.patch(f"/products/{created['id']}", json={"price": 9.5})
    assert resp.status_code == 200
    assert resp.json()["data"][0] == {"id": created["id"], "name": "A", "description": "d", "price": 9.5}

    resp = await client.patch(f"/products/{created['id']}", json={})
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"message": "no fields to update"}]


@pytest.mark.asyncio
async def test_delete_product(client: AsyncClient):
    created = await _create(client)
    resp = await client.delete(f"/products/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await client.get(f"/products/{created['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_product(client: AsyncClient):
    resp = await client.delete("/products/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"status": 404, "errors": [{"message": "product not found"}]}


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client: AsyncClient):
    resp = await client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json()["status"] == 404
    assert resp.json()["errors"]


@pytest.mark.asyncio
async def test_security_headers_are_set(client: AsyncClient):
    resp = await client.get("/products")
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_auth_missing_header(auth_client: AsyncClient):
    resp = await auth_client.get("/products")
    assert resp.status_code == 401
    assert resp.json() == {"status": 401, "errors": [{"message": "authorization header is missing"}]}


@pytest.mark.asyncio
async def test_auth_runs_before_body_decoding(auth_client: AsyncClient):
    resp = await auth_client.post("/products", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 401
    assert resp.json() == {"status": 401, "errors": [{"message": "authorization header is missing"}]}

    resp = await auth_client.put("/products/any", json=["not", "an", "object"])
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_auth_malformed_header(auth_client: AsyncClient):
    resp = await auth_client.post("/products", json={"name": "A", "price": 1}, headers={"Authorization": "Token x"})
    assert resp.status_code == 401
    assert resp.json()["errors"] == [{"message": "invalid Authorization header format"}]


@pytest.mark.asyncio
async def test_auth_invalid_token_skips_store(auth_client: AsyncClient, other_private_key_pem: str):
    token = jwt.encode({"sub": "u"}, other_private_key_pem, algorithm="RS256")
    resp = await auth_client.post("/products", json={"name": "A", "price": 1}, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["errors"] == [{"message": "invalid token"}]


@pytest.mark.asyncio
async def test_auth_valid_token(auth_client: AsyncClient, private_key_pem: str):
    token = jwt.encode(
        {"sub": "u", "exp": datetime.now(tz=timezone.utc) + timedelta(hours=1)},
        private_key_pem,
        algorithm="RS256",
    )
    headers = {"Authorization": f"Bearer {token}"}
    resp = await auth_client.post("/products", json={"name": "A", "price": 1}, headers=headers)
    assert resp.status_code == 201

    resp = await auth_client.get("/products", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_health_is_not_gated(auth_client: AsyncClient):
    resp = await auth_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
