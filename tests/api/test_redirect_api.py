"""Tests for short code redirection over HTTP."""

import asyncio

import pytest


@pytest.mark.api
class TestRedirect:

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, client):
        created = await client.post("/api/links", json={"target_url": "https://example.com"})
        assert created.status_code == 201
        code = created.json()["code"]

        response = await client.get(f"/{code}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com"

        stats = (await client.get(f"/api/links/{code}")).json()
        assert stats["clicks"] == 1
        assert stats["last_clicked"] is not None

        assert (await client.delete(f"/api/links/{code}")).status_code == 204
        assert (await client.get(f"/{code}", follow_redirects=False)).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_code_is_404(self, client):
        response = await client.get("/missing1", follow_redirects=False)

        assert response.status_code == 404
        assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test_target_with_query_is_preserved(self, client):
        target = "https://example.com/path?a=1&b=two#frag"
        await client.post("/api/links", json={"target_url": target, "code": "query12"})

        response = await client.get("/query12", follow_redirects=False)

        assert response.headers["location"] == target

    @pytest.mark.asyncio
    async def test_concurrent_redirects_are_counted(self, client):
        await client.post("/api/links", json={"target_url": "https://example.com", "code": "busy123"})
        visits = 20

        responses = await asyncio.gather(
            *(client.get("/busy123", follow_redirects=False) for _ in range(visits))
        )

        assert all(r.status_code == 302 for r in responses)
        stats = (await client.get("/api/links/busy123")).json()
        assert stats["clicks"] == visits

    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        response = await client.get("/api/healthz", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

        generated = await client.get("/api/healthz")
        assert generated.headers["X-Request-ID"]
