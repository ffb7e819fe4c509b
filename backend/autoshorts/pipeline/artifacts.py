"""Deterministic artifact filenames in the clips directory.

Every file a window produces is named <videoId>_<start>[_<stage>].<ext>,
so re-running a window overwrites its previous files.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class WindowArtifacts:
    """Paths of every file one window may write."""
    clips_dir: Path
    video_id: str
    start: int

    @property
    def stem(self) -> str:
        return f"{self.video_id}_{self.start}"

    def _path(self, suffix: str) -> Path:
        return Path(self.clips_dir) / f"{self.stem}{suffix}"

    @property
    def segment(self) -> Path:
        return self._path(".mp4")

    @property
    def audio(self) -> Path:
        return self._path(".wav")

    @property
    def transcript(self) -> Path:
        return self._path(".srt")

    @property
    def auto_caption_stem(self) -> str:
        return f"{self.stem}_yt"

    @property
    def background(self) -> Path:
        return self._path("_bg.mp4")

    @property
    def overlay(self) -> Path:
        return self._path("_overlay.mp4")

    @property
    def final(self) -> Path:
        return self._path("_final.mp4")

    def existing_files(self) -> List[Path]:
        """Files currently on disk for this window, including auto captions."""
        paths = [
            self.segment,
            self.audio,
            self.transcript,
            self.background,
            self.overlay,
            self.final,
        ]
        paths.extend(Path(self.clips_dir).glob(f"{self.auto_caption_stem}.*"))
        return [p for p in paths if p.exists()]

    def discard(self) -> None:
        """Remove everything this window wrote."""
        for path in self.existing_files():
            path.unlink(missing_ok=True)
