"""
Tests for the liveness endpoints and the global error format.
"""
import pytest
from httpx import AsyncClient

from jobboard import __version__


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "Job Board API",
        "version": __version__,
    }


@pytest.mark.asyncio
async def test_root_points_at_docs(async_client: AsyncClient):
    response = await async_client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_malformed_body_is_400_with_field_list(async_client: AsyncClient):
    response = await async_client.post("/api/auth/signin", json={"email": "not-an-email"})

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Missing or invalid fields"
    assert {tuple(error["loc"]) for error in data["errors"]} >= {("body", "password")}
