"""Pydantic schemas for API requests and responses."""
from typing import List, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Clip Schemas
# =============================================================================

class ClipResponse(BaseModel):
    """A finalized clip."""
    url: str = Field(..., description="URL of the clip under the static clips mount")
    start: int = Field(..., description="Start of the highlight window in seconds")
    end: int = Field(..., description="End of the highlight window in seconds")


class ClipsResponse(BaseModel):
    """Manifest of finalized clips, in highlight order."""
    clips: List[ClipResponse]


class LatestVideoResponse(BaseModel):
    """Latest upload of a channel."""
    videoId: str


# =============================================================================
# Health Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    ffmpeg_available: bool
    ffprobe_available: bool
    ytdlp_available: bool
    message: Optional[str] = None


class SpeechCheckResponse(BaseModel):
    """Speech-to-text service connectivity."""
    ok: bool
    models: List[str] = Field(default_factory=list)
