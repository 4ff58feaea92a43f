"""
Pipeline module for VSL processing.

Provides a composable, stage-based architecture: acquisition, transcription,
structured extraction and persistence run in order over a single envelope.
Each stage is independently testable.
"""

from .base import Stage, VSLPipeline, PipelineConfig, ProcessingResult, StageTracker
from .context import Cached, Fresh, PipelineEnvelope
from .errors import (
    PipelineError,
    StageError,
    NoAudioAvailable,
    AcquisitionFailed,
    MissingInputFile,
    TranscriptionProviderError,
    EmptyTranscript,
    SchemaValidationError,
    ExtractionError,
)

__all__ = [
    # Core classes
    "Stage",
    "VSLPipeline",
    "PipelineConfig",
    "ProcessingResult",
    "StageTracker",
    "PipelineEnvelope",
    "Fresh",
    "Cached",
    # Exceptions
    "PipelineError",
    "StageError",
    "NoAudioAvailable",
    "AcquisitionFailed",
    "MissingInputFile",
    "TranscriptionProviderError",
    "EmptyTranscript",
    "SchemaValidationError",
    "ExtractionError",
]
