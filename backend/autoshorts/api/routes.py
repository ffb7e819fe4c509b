"""API routes."""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from autoshorts.config import settings
from autoshorts.pipeline.errors import ResolutionError
from autoshorts.pipeline.models import CompositionSpec
from autoshorts.services.clip_service import ClipRequest, ClipService, MissingCredentialsError
from autoshorts.services.speech_service import OpenAISpeechClient, SpeechToTextError
from autoshorts.services.youtube_service import YouTubeApiError
from autoshorts.utils.ffmpeg import check_ffmpeg_available, check_ffprobe_available
from autoshorts.utils.ytdlp import check_ytdlp_available
from autoshorts.api.schemas import ClipsResponse, HealthResponse, LatestVideoResponse, SpeechCheckResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def get_clip_service() -> ClipService:
    return ClipService.from_settings(settings)


def get_speech_client() -> Optional[OpenAISpeechClient]:
    if not settings.openai_api_key:
        return None
    return OpenAISpeechClient(
        api_key=settings.openai_api_key,
        model=settings.transcription_model,
        timeout=settings.transcription_timeout_seconds,
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _upstream_error(e: YouTubeApiError) -> HTTPException:
    if e.status_code in (401, 403):
        return HTTPException(status_code=e.status_code, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


# =============================================================================
# Health & System
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Check API health and dependencies."""
    ffmpeg_ok = check_ffmpeg_available()
    ffprobe_ok = check_ffprobe_available()
    ytdlp_ok = check_ytdlp_available()

    all_ok = ffmpeg_ok and ffprobe_ok and ytdlp_ok

    message = None
    if not all_ok:
        missing = []
        if not ffmpeg_ok:
            missing.append("ffmpeg")
        if not ffprobe_ok:
            missing.append("ffprobe")
        if not ytdlp_ok:
            missing.append("yt-dlp")
        message = f"Missing dependencies: {', '.join(missing)}"

    return HealthResponse(
        status="healthy" if all_ok else "degraded",
        ffmpeg_available=ffmpeg_ok,
        ffprobe_available=ffprobe_ok,
        ytdlp_available=ytdlp_ok,
        message=message
    )


@router.get("/speech-check", response_model=SpeechCheckResponse)
async def speech_check(speech_client: Optional[OpenAISpeechClient] = Depends(get_speech_client)):
    """Check that the speech-to-text service accepts our API key."""
    if speech_client is None:
        raise HTTPException(status_code=503, detail="OPENAI_API_KEY is not configured")

    try:
        models = await speech_client.list_models()
    except SpeechToTextError as e:
        logger.error(f"Speech service check failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return SpeechCheckResponse(ok=True, models=models)


# =============================================================================
# Videos & Clips
# =============================================================================

@router.get("/videos", response_model=LatestVideoResponse)
async def latest_video(
    channelId: Optional[str] = Query(None),
    service: ClipService = Depends(get_clip_service),
):
    """Latest upload of a channel."""
    if not channelId:
        raise HTTPException(status_code=400, detail="channelId is required")

    try:
        video_id = await service.latest_video_id(channelId)
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except YouTubeApiError as e:
        raise _upstream_error(e)

    return LatestVideoResponse(videoId=video_id)


@router.get("/clips", response_model=ClipsResponse)
async def generate_clips(
    videoUrl: Optional[str] = Query(None),
    channelId: Optional[str] = Query(None),
    source: Literal["comments", "retention"] = Query("comments"),
    captionText: Optional[str] = Query(None),
    fontFamily: str = Query("Arial"),
    fontSize: Optional[str] = Query(None),
    color: str = Query("white"),
    outline: Optional[str] = Query(None),
    position: Literal["top", "center", "bottom"] = Query("bottom"),
    background: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
    service: ClipService = Depends(get_clip_service),
):
    """Find highlights in a video and render them as vertical clips."""
    if not videoUrl and not channelId:
        raise HTTPException(status_code=400, detail="videoUrl or channelId is required")

    try:
        font_size = int(fontSize) if fontSize else 24
    except ValueError:
        font_size = 24

    request = ClipRequest(
        video_url=videoUrl,
        channel_id=channelId,
        source=source,
        access_token=_bearer_token(authorization),
        spec=CompositionSpec(
            caption_text=captionText or None,
            font_family=fontFamily,
            font_size=font_size if font_size > 0 else 24,
            color=color,
            outline=(outline or "").lower() == "true",
            position=position,
            background=background or None,
        ),
    )

    try:
        result = await service.generate_clips(request)
    except MissingCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ResolutionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except YouTubeApiError as e:
        raise _upstream_error(e)

    return ClipsResponse(clips=result.to_manifest())
