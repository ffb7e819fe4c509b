"""Clip generation service - resolves a request and runs the pipeline."""
import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

from autoshorts.pipeline.config import PipelineConfig
from autoshorts.pipeline.errors import ResolutionError
from autoshorts.pipeline.models import CompositionSpec, VideoReference, resolve_video_reference
from autoshorts.pipeline.runner import ClipPipeline, PipelineResult
from autoshorts.pipeline.selector import select_windows
from autoshorts.pipeline.sources import (
    CommentTimestampSource,
    HighlightSource,
    RetentionRangeSource,
)
from autoshorts.pipeline.transcribe import Transcriber
from autoshorts.services.speech_service import OpenAISpeechClient
from autoshorts.services.youtube_service import YouTubeAnalyticsClient, YouTubeDataClient

logger = logging.getLogger(__name__)

SignalSource = Literal["comments", "retention"]


class MissingCredentialsError(ValueError):
    """Raised when a request needs credentials it did not supply."""


@dataclass
class ClipRequest:
    """Everything a clip request carries."""
    video_url: Optional[str] = None
    channel_id: Optional[str] = None
    source: SignalSource = "comments"
    access_token: Optional[str] = None
    spec: CompositionSpec = field(default_factory=CompositionSpec)


class ClipService:
    """Service for turning a clip request into a manifest."""

    def __init__(
        self,
        config: PipelineConfig,
        data_client: YouTubeDataClient,
        analytics_client: Optional[YouTubeAnalyticsClient] = None,
        pipeline: Optional[ClipPipeline] = None,
        comment_page_size: int = 100,
        analytics_start_date: str = "2020-01-01",
        analytics_max_rows: int = 200,
    ):
        self.config = config
        self.data_client = data_client
        self.analytics_client = analytics_client or YouTubeAnalyticsClient()
        self.pipeline = pipeline or ClipPipeline(config)
        self.comment_page_size = comment_page_size
        self.analytics_start_date = analytics_start_date
        self.analytics_max_rows = analytics_max_rows

    @classmethod
    def from_settings(cls, settings) -> "ClipService":
        """Wire up real clients from application settings."""
        config = PipelineConfig.from_settings(settings)
        speech_client = None
        if settings.openai_api_key:
            speech_client = OpenAISpeechClient(
                api_key=settings.openai_api_key,
                model=settings.transcription_model,
                timeout=settings.transcription_timeout_seconds,
            )
        pipeline = ClipPipeline(config, transcriber=Transcriber(config, speech_client))
        return cls(
            config,
            data_client=YouTubeDataClient(settings.youtube_api_key),
            pipeline=pipeline,
            comment_page_size=settings.comment_page_size,
            analytics_start_date=settings.analytics_start_date,
            analytics_max_rows=settings.analytics_max_rows,
        )

    async def latest_video_id(self, channel_id: str) -> str:
        """
        Resolve a channel to its latest upload.

        Raises:
            ResolutionError: If the channel has no videos
        """
        video_id = await self.data_client.get_latest_video_id(channel_id)
        if not video_id:
            raise ResolutionError(f"No videos found for channel {channel_id}")
        return video_id

    async def resolve_reference(
        self,
        video_url: Optional[str],
        channel_id: Optional[str],
    ) -> VideoReference:
        if video_url:
            return resolve_video_reference(video_url)
        if channel_id:
            return resolve_video_reference(await self.latest_video_id(channel_id))
        raise ResolutionError("videoUrl or channelId is required")

    def build_source(self, request: ClipRequest) -> HighlightSource:
        if request.source == "retention":
            if not request.access_token:
                raise MissingCredentialsError("Retention analytics require an authorized access token")
            return RetentionRangeSource(
                self.analytics_client,
                request.access_token,
                start_date=self.analytics_start_date,
                max_rows=self.analytics_max_rows,
            )
        return CommentTimestampSource(self.data_client, max_comments=self.comment_page_size)

    async def generate_clips(self, request: ClipRequest) -> PipelineResult:
        """
        Resolve the video, pick highlight windows and run the pipeline.

        Raises:
            ResolutionError: If the video or channel cannot be resolved
            MissingCredentialsError: If retention is requested without a token
            YouTubeApiError: If the signal source cannot be loaded
        """
        source = self.build_source(request)
        reference = await self.resolve_reference(request.video_url, request.channel_id)

        duration = await self.data_client.get_duration_seconds(reference.video_id)
        if duration is None:
            raise ResolutionError(f"Video {reference.video_id} not found")

        candidates = await source.fetch_candidates(reference, duration)
        windows = select_windows(candidates, self.config, duration)
        logger.info(
            f"{reference.video_id}: {len(windows)} windows from {source.name} "
            f"(duration {duration}s)"
        )

        return await self.pipeline.run(reference, windows, request.spec)
