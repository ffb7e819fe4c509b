"""Value types shared by the clip pipeline stages."""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional
from urllib.parse import parse_qs, unquote, urlparse

from .errors import ResolutionError

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

CaptionPosition = Literal["top", "center", "bottom"]


@dataclass(frozen=True)
class VideoReference:
    """A resolved YouTube video: id plus the locator handed to yt-dlp."""
    video_id: str
    url: str


def _video_id_from_url(url: str) -> Optional[str]:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host.startswith("www.") or host.startswith("m."):
        host = host.split(".", 1)[1]

    candidate = None
    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host in ("youtube.com", "music.youtube.com"):
        if parsed.path == "/watch":
            candidate = (parse_qs(parsed.query).get("v") or [None])[0]
        else:
            parts = [p for p in parsed.path.split("/") if p]
            if len(parts) >= 2 and parts[0] in ("shorts", "embed", "live", "v"):
                candidate = parts[1]

    if candidate and VIDEO_ID_PATTERN.match(candidate):
        return candidate
    return None


def resolve_video_reference(raw: str) -> VideoReference:
    """
    Normalize user input into a VideoReference.

    Accepts a bare 11-character id or a YouTube watch/short/embed URL,
    optionally URL-encoded or wrapped in angle brackets.

    Raises:
        ResolutionError: If no video id can be extracted
    """
    if raw is None:
        raise ResolutionError("videoUrl is required")

    value = unquote(raw).strip().replace("<", "").replace(">", "")
    if not value:
        raise ResolutionError("videoUrl is required")

    if VIDEO_ID_PATTERN.match(value):
        return VideoReference(video_id=value, url=f"https://youtu.be/{value}")

    video_id = _video_id_from_url(value)
    if video_id is None:
        raise ResolutionError(f"Invalid videoUrl: {value}")

    return VideoReference(video_id=video_id, url=value)


@dataclass(frozen=True)
class HighlightWindow:
    """A (start, end) range in whole seconds selected for extraction."""
    start: int
    end: int

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"Window end {self.end} must be after start {self.start}")

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class MediaSegment:
    """A downloaded audio+video slice of a source video."""
    video_id: str
    start: int
    end: int
    path: Path


@dataclass(frozen=True)
class TranscriptCue:
    """One timed line of a transcript, offsets relative to the segment."""
    start: float
    end: float
    text: str


@dataclass
class Transcript:
    """Subtitle cues for a segment plus the file they were written to."""
    subtitle_path: Path
    source: Literal["speech", "auto_captions"]
    cues: List[TranscriptCue] = field(default_factory=list)


@dataclass(frozen=True)
class CompositionSpec:
    """Styling for the final clip."""
    caption_text: Optional[str] = None
    font_family: str = "Arial"
    font_size: int = 24
    color: str = "white"
    outline: bool = False
    position: CaptionPosition = "bottom"
    background: Optional[str] = None


@dataclass(frozen=True)
class ClipResult:
    """A finalized clip as listed in the response manifest."""
    url: str
    start: int
    end: int
    path: Path

    def to_dict(self) -> dict:
        return {"url": self.url, "start": self.start, "end": self.end}
