"""Application configuration."""
from pathlib import Path
from typing import Dict, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )

    # App settings
    app_name: str = "AutoShorts"
    debug: bool = True

    # Server settings
    host: str = "0.0.0.0"
    port: int = 5000

    # Generated clips are served from here
    clips_dir: Path = Path("./clips")

    # Credentials
    youtube_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    # FFmpeg settings
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    # yt-dlp settings
    ytdlp_path: str = "yt-dlp"

    # Transcription
    transcription_model: str = "whisper-1"
    transcription_timeout_seconds: float = 120.0
    subtitle_language: str = "en"

    # Highlight selection
    top_k: int = 3
    pad_seconds: int = 5
    clip_seconds: int = 30
    comment_page_size: int = 100

    # Retention analytics
    analytics_start_date: str = "2020-01-01"
    analytics_max_rows: int = 200

    # Gameplay backgrounds
    background_max_offset: int = 300
    background_clip_seconds: int = 30
    background_sources: Dict[str, str] = Field(default_factory=lambda: {
        "minecraft": "https://www.youtube.com/watch?v=85z7jqGAGcc",
        "gta5": "https://www.youtube.com/watch?v=EUNw8oY3W7g",
        "rocketleague": "https://www.youtube.com/watch?v=QAgFo5y91ME",
    })

    # Export settings
    export_video_codec: str = "libx264"
    export_audio_codec: str = "aac"
    export_audio_bitrate: str = "128k"
    export_threads: int = 0  # 0 lets ffmpeg decide

    # Windows processed at the same time per request
    max_concurrent_windows: int = 2

    # Frontend
    frontend_url: str = "http://localhost:3000"


settings = Settings()

# Ensure directories exist
settings.clips_dir.mkdir(parents=True, exist_ok=True)
