"""Error taxonomy for the highlight clip pipeline.

Only ResolutionError aborts a whole request. AcquisitionError and
BurnError fail a single window. TranscriptionError and CompositionError
are absorbed inside their stage and only ever logged.
"""


class ClipPipelineError(Exception):
    """Base class for pipeline errors."""
    pass


class ResolutionError(ClipPipelineError):
    """Video reference or channel could not be resolved."""
    pass


class AcquisitionError(ClipPipelineError):
    """Segment download failed."""
    pass


class TranscriptionError(ClipPipelineError):
    """Both primary and fallback transcription failed."""
    pass


class CompositionError(ClipPipelineError):
    """Background overlay failed."""
    pass


class BurnError(ClipPipelineError):
    """Final subtitle/caption render failed."""
    pass
