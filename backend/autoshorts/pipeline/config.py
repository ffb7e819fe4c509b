"""Clip pipeline configuration."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class PipelineConfig:
    """Configuration passed to the clip pipeline at construction."""

    clips_dir: Path = Path("./clips")
    clips_url_prefix: str = "/clips"

    # Highlight selection
    top_k: int = 3
    pad_seconds: int = 5
    clip_seconds: int = 30

    # Transcription
    subtitle_language: str = "en"
    transcription_model: str = "whisper-1"
    transcription_timeout_seconds: float = 120.0

    # Background compositing
    background_sources: Dict[str, str] = field(default_factory=dict)
    background_max_offset: int = 300
    background_clip_seconds: int = 30

    # Concurrency
    max_concurrent_windows: int = 2

    def background_url(self, theme: Optional[str]) -> Optional[str]:
        """Resolve a background theme key to its locator, if known."""
        if not theme:
            return None
        return self.background_sources.get(theme)

    @classmethod
    def from_settings(cls, settings) -> "PipelineConfig":
        """Build a pipeline config from application settings."""
        return cls(
            clips_dir=Path(settings.clips_dir),
            top_k=settings.top_k,
            pad_seconds=settings.pad_seconds,
            clip_seconds=settings.clip_seconds,
            subtitle_language=settings.subtitle_language,
            transcription_model=settings.transcription_model,
            transcription_timeout_seconds=settings.transcription_timeout_seconds,
            background_sources=dict(settings.background_sources),
            background_max_offset=settings.background_max_offset,
            background_clip_seconds=settings.background_clip_seconds,
            max_concurrent_windows=settings.max_concurrent_windows,
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary for logging."""
        return {
            "clips_dir": str(self.clips_dir),
            "top_k": self.top_k,
            "pad_seconds": self.pad_seconds,
            "clip_seconds": self.clip_seconds,
            "subtitle_language": self.subtitle_language,
            "transcription_model": self.transcription_model,
            "transcription_timeout_seconds": self.transcription_timeout_seconds,
            "background_themes": sorted(self.background_sources),
            "background_max_offset": self.background_max_offset,
            "background_clip_seconds": self.background_clip_seconds,
            "max_concurrent_windows": self.max_concurrent_windows,
        }
