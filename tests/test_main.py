"""
Tests for the main application endpoints.
"""
import asyncio
import time

import httpx

from clinic_api.auth import service as auth_service
from clinic_api.core.security import hash_password
from clinic_api.main import app


def test_root_endpoint(client):
    """
    Test the root endpoint returns a welcome message.
    """
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data


def test_health_check(client):
    """
    Test the health check endpoint returns a healthy status.
    """
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_responses_carry_request_id(client):
    response = client.get("/health")
    assert response.headers.get("X-Request-ID")
    assert "X-Process-Time" in response.headers


def test_unknown_route_uses_msg_body(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "msg" in response.json()


def test_health_answers_while_password_is_hashed(client, monkeypatch):
    """
    Slow work of one request must not hold up the others.
    """
    def slow_hash(password):
        time.sleep(1)
        return hash_password(password)

    monkeypatch.setattr(auth_service, "hash_password", slow_hash)

    async def run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
            async def timed_health():
                await asyncio.sleep(0.1)
                start = time.perf_counter()
                response = await async_client.get("/health")
                return response, time.perf_counter() - start

            return await asyncio.gather(
                async_client.post(
                    "/api/auth/register",
                    json={"email": "slow@clinic.com", "password": "longenough1", "name": "Slow"}
                ),
                timed_health()
            )

    register_response, (health_response, elapsed) = asyncio.run(run())
    assert register_response.status_code == 201
    assert health_response.status_code == 200
    assert elapsed < 0.5
