"""
Pipeline stages for VSL processing.

Each stage is responsible for a specific part of the processing pipeline.
Stages are executed in order, each one receiving the envelope produced by
its predecessor.
"""

from .acquisition import AcquisitionStage
from .transcription import TranscriptionStage
from .extraction import ExtractionStage
from .persistence import PersistenceStage

__all__ = [
    "AcquisitionStage",
    "TranscriptionStage",
    "ExtractionStage",
    "PersistenceStage",
]
