import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from routers import rate_limit


def _quota_app() -> FastAPI:
    quota_app = FastAPI()

    @quota_app.get("/ping")
    async def ping(_rate_limit: None = Depends(rate_limit.rate_limit("ping", limit=2, window_seconds=60))):
        return {"ok": True}

    return quota_app


async def _redis_down(key, limit, window_seconds):
    raise ConnectionError("redis unavailable")


@pytest.mark.asyncio
async def test_forwarded_header_does_not_reset_quota(monkeypatch):
    monkeypatch.setattr(rate_limit, "_consume_redis_quota", _redis_down)

    async with AsyncClient(transport=ASGITransport(app=_quota_app()), base_url="http://test") as client:
        statuses = [
            (await client.get("/ping", headers={"x-forwarded-for": f"10.0.0.{i}"})).status_code
            for i in range(4)
        ]

    assert statuses[:2] == [200, 200]
    assert statuses[2:] == [429, 429]
    assert list(rate_limit._local_counters) == ["trendzo:rate:ping:127.0.0.1"]


@pytest.mark.asyncio
async def test_disabled_rate_limits_skip_quota(monkeypatch):
    quota_app = _quota_app()
    quota_app.state.disable_rate_limits = True
    monkeypatch.setattr(rate_limit, "_consume_redis_quota", _redis_down)

    async with AsyncClient(transport=ASGITransport(app=quota_app), base_url="http://test") as client:
        statuses = [(await client.get("/ping")).status_code for _ in range(4)]

    assert statuses == [200, 200, 200, 200]
    assert rate_limit._local_counters == {}
