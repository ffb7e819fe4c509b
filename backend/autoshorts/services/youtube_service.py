"""YouTube Data and Analytics API clients."""
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from autoshorts.pipeline.duration import parse_duration

logger = logging.getLogger(__name__)

YOUTUBE_DATA_API = "https://www.googleapis.com/youtube/v3"
YOUTUBE_ANALYTICS_API = "https://youtubeanalytics.googleapis.com/v2/reports"
API_HTTP_TIMEOUT_SECONDS = 15.0


class YouTubeApiError(RuntimeError):
    """Raised when a YouTube API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _extract_error_detail(response: httpx.Response) -> str:
    """Extract a concise error message from a Google API error body."""
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text or f"HTTP {response.status_code}"

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error

    return f"HTTP {response.status_code}"


async def _get_json(
    url: str,
    params: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: float = API_HTTP_TIMEOUT_SECONDS,
) -> Dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, params=params, headers=headers or {})
    except httpx.TimeoutException as exc:
        raise YouTubeApiError("YouTube API request timed out") from exc
    except httpx.RequestError as exc:
        raise YouTubeApiError("Unable to reach YouTube API") from exc

    if response.status_code != 200:
        detail = _extract_error_detail(response)
        raise YouTubeApiError(f"YouTube API error: {detail}", status_code=response.status_code)

    try:
        return response.json()
    except ValueError as exc:
        raise YouTubeApiError("YouTube API returned an invalid response") from exc


class YouTubeDataClient:
    """Video metadata lookups with an API key."""

    def __init__(self, api_key: Optional[str], timeout: float = API_HTTP_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.timeout = timeout

    async def _get(self, resource: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise YouTubeApiError("YouTube API key is not configured")
        return await _get_json(
            f"{YOUTUBE_DATA_API}/{resource}",
            {**params, "key": self.api_key},
            timeout=self.timeout,
        )

    async def get_latest_video_id(self, channel_id: str) -> Optional[str]:
        """Most recent upload of a channel, or None if it has none."""
        payload = await self._get("search", {
            "part": "id",
            "channelId": channel_id,
            "order": "date",
            "type": "video",
            "maxResults": 1,
        })
        for item in payload.get("items", []):
            video_id = (item.get("id") or {}).get("videoId")
            if video_id:
                return video_id
        return None

    async def get_duration_seconds(self, video_id: str) -> Optional[int]:
        """Duration of a video in seconds, or None if the video does not exist."""
        payload = await self._get("videos", {"part": "contentDetails", "id": video_id})
        items = payload.get("items", [])
        if not items:
            return None
        return parse_duration((items[0].get("contentDetails") or {}).get("duration"))

    async def list_comment_bodies(self, video_id: str, max_results: int = 100) -> List[str]:
        """Plain-text bodies of the top-level comments on a video."""
        payload = await self._get("commentThreads", {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": max_results,
            "textFormat": "plainText",
        })
        bodies: List[str] = []
        for item in payload.get("items", []):
            snippet = (
                ((item.get("snippet") or {}).get("topLevelComment") or {}).get("snippet") or {}
            )
            text = snippet.get("textDisplay") or snippet.get("textOriginal")
            if text:
                bodies.append(text)
        logger.debug(f"Loaded {len(bodies)} comments for {video_id}")
        return bodies


class YouTubeAnalyticsClient:
    """Audience retention reports for the authorized channel."""

    def __init__(self, timeout: float = API_HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def get_retention_samples(
        self,
        video_id: str,
        access_token: str,
        start_date: str,
        end_date: str,
        max_results: int = 200,
    ) -> List[Tuple[float, float]]:
        """
        (elapsedVideoTimeRatio, relativeRetentionPerformance) rows for a video.

        Raises:
            YouTubeApiError: On HTTP errors, including an unauthorized token
        """
        payload = await _get_json(
            YOUTUBE_ANALYTICS_API,
            {
                "ids": "channel==MINE",
                "startDate": start_date,
                "endDate": end_date,
                "metrics": "relativeRetentionPerformance",
                "dimensions": "elapsedVideoTimeRatio",
                "filters": f"video=={video_id}",
                "maxResults": max_results,
            },
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self.timeout,
        )
        samples: List[Tuple[float, float]] = []
        for row in payload.get("rows") or []:
            try:
                samples.append((float(row[0]), float(row[1])))
            except (IndexError, TypeError, ValueError):
                logger.warning(f"Skipping malformed retention row: {row}")
        return samples
