"""Tests for the YouTube Data/Analytics clients."""
import httpx
import pytest

from autoshorts.services import youtube_service
from autoshorts.services.youtube_service import (
    YouTubeAnalyticsClient,
    YouTubeApiError,
    YouTubeDataClient,
)


class _FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON payload")
        return self._payload


class _FakeClient:
    requests = []

    def __init__(self, response=None, error=None, **kwargs):
        self._response = response
        self._error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None, headers=None):
        _FakeClient.requests.append((url, params, headers))
        if self._error:
            raise self._error
        return self._response


@pytest.fixture
def fake_http(monkeypatch):
    _FakeClient.requests = []

    def install(response=None, error=None):
        monkeypatch.setattr(
            youtube_service.httpx,
            "AsyncClient",
            lambda **kwargs: _FakeClient(response=response, error=error, **kwargs),
        )
        return _FakeClient.requests

    return install


@pytest.mark.asyncio
async def test_list_comment_bodies(fake_http):
    requests = fake_http(_FakeResponse(200, {
        "items": [
            {"snippet": {"topLevelComment": {"snippet": {"textDisplay": "1:30 lol"}}}},
            {"snippet": {"topLevelComment": {"snippet": {"textDisplay": ""}}}},
            {"snippet": {}},
        ]
    }))

    bodies = await YouTubeDataClient("key").list_comment_bodies("dQw4w9WgXcQ", max_results=100)

    assert bodies == ["1:30 lol"]
    url, params, _ = requests[0]
    assert url.endswith("/commentThreads")
    assert params["videoId"] == "dQw4w9WgXcQ"
    assert params["textFormat"] == "plainText"
    assert params["key"] == "key"


@pytest.mark.asyncio
async def test_get_duration_seconds(fake_http):
    fake_http(_FakeResponse(200, {"items": [{"contentDetails": {"duration": "PT4M13S"}}]}))
    assert await YouTubeDataClient("key").get_duration_seconds("dQw4w9WgXcQ") == 253


@pytest.mark.asyncio
async def test_get_duration_missing_video(fake_http):
    fake_http(_FakeResponse(200, {"items": []}))
    assert await YouTubeDataClient("key").get_duration_seconds("dQw4w9WgXcQ") is None


@pytest.mark.asyncio
async def test_get_latest_video_id(fake_http):
    fake_http(_FakeResponse(200, {"items": [{"id": {"kind": "youtube#video", "videoId": "abcdefghijk"}}]}))
    assert await YouTubeDataClient("key").get_latest_video_id("UC123") == "abcdefghijk"


@pytest.mark.asyncio
async def test_latest_video_none_when_empty(fake_http):
    fake_http(_FakeResponse(200, {"items": []}))
    assert await YouTubeDataClient("key").get_latest_video_id("UC123") is None


@pytest.mark.asyncio
async def test_http_error_detail(fake_http):
    fake_http(_FakeResponse(403, {"error": {"code": 403, "message": "Comments are disabled"}}))

    with pytest.raises(YouTubeApiError) as exc_info:
        await YouTubeDataClient("key").list_comment_bodies("dQw4w9WgXcQ")

    assert exc_info.value.status_code == 403
    assert "Comments are disabled" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout(fake_http):
    fake_http(error=httpx.ReadTimeout("timed out"))
    with pytest.raises(YouTubeApiError, match="timed out"):
        await YouTubeDataClient("key").get_duration_seconds("dQw4w9WgXcQ")


@pytest.mark.asyncio
async def test_missing_api_key():
    with pytest.raises(YouTubeApiError, match="not configured"):
        await YouTubeDataClient(None).get_duration_seconds("dQw4w9WgXcQ")


@pytest.mark.asyncio
async def test_retention_samples(fake_http):
    requests = fake_http(_FakeResponse(200, {
        "rows": [[0.0, 1.5], [0.5, 0.8], ["bad"]],
    }))

    samples = await YouTubeAnalyticsClient().get_retention_samples(
        "dQw4w9WgXcQ", "token", start_date="2020-01-01", end_date="2026-10-18"
    )

    assert samples == [(0.0, 1.5), (0.5, 0.8)]
    _, params, headers = requests[0]
    assert params["filters"] == "video==dQw4w9WgXcQ"
    assert params["dimensions"] == "elapsedVideoTimeRatio"
    assert headers == {"Authorization": "Bearer token"}


@pytest.mark.asyncio
async def test_retention_without_rows(fake_http):
    fake_http(_FakeResponse(200, {"columnHeaders": []}))
    samples = await YouTubeAnalyticsClient().get_retention_samples(
        "dQw4w9WgXcQ", "token", start_date="2020-01-01", end_date="2026-10-18"
    )
    assert samples == []
