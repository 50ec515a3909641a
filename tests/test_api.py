"""
HTTP API tests (httpx against the ASGI app, no server)
"""

import asyncio

import httpx
import pytest

from conftest import DEBOUNCE_MS, NOW_SEC

from market_timers.api import create_app, set_provider
from market_timers.services import MarketTimerProvider

LAUNCH_BODY = {
    "state": 0,
    "launchPeriod": NOW_SEC + 90,
    "nexRaffleTime": NOW_SEC + 3_700,
    "nextIntervalDepositTime": NOW_SEC - 259_200 + 600,
    "totalParticipantsCount": 4,
}


@pytest.fixture
def app():
    yield create_app(docs_enabled=False)
    set_provider(None)


def client_for(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health(app):
    async with client_for(app) as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_timers_unavailable_without_provider(app):
    set_provider(None)
    async with client_for(app) as client:
        response = await client.get("/api/v1/timers")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_lifecycle_update_flow(app, clock, fast_config):
    async with MarketTimerProvider(fast_config, clock=clock) as provider:
        set_provider(provider)
        async with client_for(app) as client:
            response = await client.get("/api/v1/timers/snapshot")
            assert response.status_code == 200
            assert response.json() is None

            response = await client.put("/api/v1/timers/lifecycle", json=LAUNCH_BODY)
            assert response.status_code == 200
            body = response.json()
            assert body["changed"] is True
            assert body["snapshot"]["phase"] == "LAUNCH"
            assert body["snapshot"]["launchDeadline"] == (NOW_SEC + 90) * 1000

            response = await client.put("/api/v1/timers/lifecycle", json=LAUNCH_BODY)
            assert response.json()["changed"] is False

            response = await client.get("/api/v1/timers/raw")
            assert response.json() == {"timeLeft": "0d 0h 1m 30s", "raffleTimeLeft": "", "depositTimeLeft": ""}

            await asyncio.sleep(DEBOUNCE_MS * 3 / 1000)
            response = await client.get("/api/v1/timers")
            assert response.json()["timeLeft"] == "0d 0h 1m 30s"

            response = await client.get("/api/v1/timers/phase")
            assert response.json()["phase"] == "raffle"
            assert response.json()["showCountdown"] is True


@pytest.mark.asyncio
async def test_invalid_lifecycle_body(app, clock, fast_config):
    async with MarketTimerProvider(fast_config, clock=clock) as provider:
        set_provider(provider)
        async with client_for(app) as client:
            response = await client.put("/api/v1/timers/lifecycle", json={"state": 0})

    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    fields = {e["field"] for e in body["validation_errors"]}
    assert "launchPeriod" in fields


@pytest.mark.asyncio
async def test_disposed_provider_is_unavailable(app, clock, fast_config):
    provider = MarketTimerProvider(fast_config, clock=clock)
    async with provider:
        set_provider(provider)

    async with client_for(app) as client:
        response = await client.get("/api/v1/timers")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_task_summary(app, clock, fast_config):
    async with MarketTimerProvider(fast_config, clock=clock) as provider:
        set_provider(provider)
        async with client_for(app) as client:
            await client.put("/api/v1/timers/lifecycle", json=LAUNCH_BODY)
            response = await client.get("/api/v1/system/tasks/summary")

    assert response.status_code == 200
    assert response.json()["active"] >= 1
    assert response.json()["summary"].startswith("Tasks:")
