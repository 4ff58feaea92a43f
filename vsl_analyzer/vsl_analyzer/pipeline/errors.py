"""
Pipeline-specific exceptions.

Provides a clear hierarchy for different error types:
- PipelineError: Base exception for all pipeline errors
- StageError: Error during stage execution (names the stage and the video)
- One subclass per fatal condition a stage can report

Every error is fatal: the pipeline aborts at the first one and never retries.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        stage_name: Optional[str] = None,
        video_id: Optional[str] = None,
    ):
        self.message = message
        self.stage_name = stage_name
        self.video_id = video_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.stage_name and self.video_id:
            return f"{self.stage_name} failed for video {self.video_id}: {self.message}"
        if self.stage_name:
            return f"{self.stage_name} failed: {self.message}"
        return self.message


class StageError(PipelineError):
    """Error during stage execution."""

    def __init__(
        self,
        message: str,
        stage_name: str,
        video_id: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.cause = cause
        super().__init__(message, stage_name, video_id)


class NoAudioAvailable(StageError):
    """The video offers no audio-only encoding."""
    pass


class AcquisitionFailed(StageError):
    """
    Network, provider or write error while downloading audio.

    Examples:
    - Metadata lookup rejected by the streaming provider
    - Connection dropped mid-stream
    - Disk full while writing the audio file
    """
    pass


class MissingInputFile(StageError):
    """Fresh transcription requested without a downloaded audio file."""
    pass


class TranscriptionProviderError(StageError):
    """Speech-recognition provider failed or returned no usable alternative."""
    pass


class EmptyTranscript(StageError):
    """Transcript is empty or whitespace-only."""
    pass


class SchemaValidationError(StageError):
    """Generative model output does not conform to the VSL script schema."""

    def __init__(
        self,
        message: str,
        stage_name: str,
        video_id: Optional[str] = None,
        cause: Optional[Exception] = None,
        errors: Optional[list] = None,
    ):
        self.errors = list(errors or [])
        super().__init__(message, stage_name, video_id, cause)


class ExtractionError(StageError):
    """Generative provider call failed before returning any output."""
    pass
