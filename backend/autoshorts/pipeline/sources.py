"""Highlight sources: where candidate signals come from."""
import abc
import logging
from datetime import date
from typing import List, Optional

from .models import VideoReference
from .signals import CandidateSignal, extract_retention_ranges, mine_comment_timestamps

logger = logging.getLogger(__name__)


class HighlightSource(abc.ABC):
    """Produces candidates for one video, ranked strongest first."""

    name: str = "base"

    @abc.abstractmethod
    async def fetch_candidates(
        self,
        reference: VideoReference,
        duration_sec: int,
    ) -> List[CandidateSignal]:
        ...


class CommentTimestampSource(HighlightSource):
    """Timestamps viewers mention in comments."""

    name = "comments"

    def __init__(self, data_client, max_comments: int = 100):
        self.data_client = data_client
        self.max_comments = max_comments

    async def fetch_candidates(self, reference, duration_sec):
        comments = await self.data_client.list_comment_bodies(
            reference.video_id, max_results=self.max_comments
        )
        candidates = mine_comment_timestamps(comments)
        logger.info(f"{len(candidates)} timestamp candidates from {len(comments)} comments")
        return candidates


class RetentionRangeSource(HighlightSource):
    """Stretches of above-baseline audience retention (owner access only)."""

    name = "retention"

    def __init__(
        self,
        analytics_client,
        access_token: str,
        start_date: str = "2020-01-01",
        end_date: Optional[str] = None,
        max_rows: int = 200,
    ):
        self.analytics_client = analytics_client
        self.access_token = access_token
        self.start_date = start_date
        self.end_date = end_date
        self.max_rows = max_rows

    async def fetch_candidates(self, reference, duration_sec):
        samples = await self.analytics_client.get_retention_samples(
            reference.video_id,
            self.access_token,
            start_date=self.start_date,
            end_date=self.end_date or date.today().isoformat(),
            max_results=self.max_rows,
        )
        candidates = extract_retention_ranges(duration_sec, samples)
        logger.info(f"{len(candidates)} retention candidates from {len(samples)} samples")
        return candidates
