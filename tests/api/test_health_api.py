"""Tests for health endpoints."""

import pytest


@pytest.mark.api
@pytest.mark.asyncio
async def test_healthz(client):
    response = await client.get("/api/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "version": "1.0"}


@pytest.mark.api
@pytest.mark.asyncio
async def test_readiness(client):
    response = await client.get("/api/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["ready"] is True
    assert body["components"] == {"api": True, "database": True}
