"""Health and collection discovery endpoints."""

from httpx import AsyncClient


async def test_health_returns_200(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_collections_anonymous_sees_public_readable(client: AsyncClient) -> None:
    response = await client.get("/api/v1/collections")
    assert response.status_code == 200
    slugs = [c["slug"] for c in response.json()["collections"]]
    assert slugs == ["posts", "settings"]


async def test_collections_admin_sees_all(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/v1/collections", headers=admin_headers)
    collections = {c["slug"]: c for c in response.json()["collections"]}
    assert set(collections) == {"posts", "secrets", "settings", "notes"}
    assert collections["settings"]["unique"] is True
    assert collections["posts"]["version"] == 2
