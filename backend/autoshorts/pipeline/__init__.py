# Highlight clip pipeline
"""
Highlight Clip Pipeline

Turns a YouTube video plus a highlight signal into short vertical clips.

Pipeline stages:
1. Signals: timestamps mentioned in comments, or audience retention ranges
2. Window Selection: fixed-length or range-derived windows, top-K
3. Acquisition: section download of each window
4. Transcription: speech-to-text, falling back to automatic captions
5. Compositing: optional gameplay background on a 1080x1920 canvas
6. Finalize: burned-in subtitles and caption text

Windows are processed independently; only a failed download or a failed
final render drops a window from the manifest.
"""

__version__ = "1.0.0"

from .runner import ClipPipeline, PipelineResult, WindowOutcome, WindowState

__all__ = ["ClipPipeline", "PipelineResult", "WindowOutcome", "WindowState", "__version__"]
