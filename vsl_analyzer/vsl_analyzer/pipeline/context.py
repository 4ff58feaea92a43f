"""
Envelope passed through pipeline stages.

The PipelineEnvelope is the single record threaded through all stages. It is
immutable: each stage returns an evolved copy, so fields only accumulate.
Whether the video already exists is decided once, at entry, as either
``Fresh`` or ``Cached``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from ..records import VideoRecord
from ..schema import ScriptAnalysis
from ..types import AnalysisSummary, PipelineOutput


@dataclass(frozen=True)
class Fresh:
    """No prior record: download and transcribe from scratch."""


@dataclass(frozen=True)
class Cached:
    """A prior record exists: reuse its transcript."""

    transcript: str
    transcript_path: Optional[str] = None


EntryState = Union[Fresh, Cached]

_ENTRY_FIELDS = frozenset({"video_id", "entry", "start_time"})


@dataclass(frozen=True)
class PipelineEnvelope:
    """
    Accumulating record shared by all stages.

    Attributes:
        video_id: Stable key of the video
        entry: Fresh or Cached, decided by the existence check
        keywords: Optional vocabulary hints for the speech provider

        video_file_path: Downloaded audio (set by AcquisitionStage, None when skipped)
        transcript: Non-empty transcript text (set by TranscriptionStage)
        transcript_file_path: Where the transcript is stored (set by TranscriptionStage)
        video_file_deleted: True once the audio file is gone (set by TranscriptionStage)
        analysis: Validated script (set by ExtractionStage)
        artifact_path: Written artifact (set by PersistenceStage)
        summary: Derived summary (set by PersistenceStage)

        start_time: Pipeline start timestamp
    """

    video_id: str
    entry: EntryState = field(default_factory=Fresh)
    keywords: Tuple[str, ...] = ()

    # Acquisition outputs
    video_file_path: Optional[Path] = None

    # Transcription outputs
    transcript: Optional[str] = None
    transcript_file_path: Optional[str] = None
    video_file_deleted: bool = False

    # Extraction outputs
    analysis: Optional[ScriptAnalysis] = None

    # Persistence outputs
    artifact_path: Optional[Path] = None
    summary: Optional[AnalysisSummary] = None

    start_time: float = field(default_factory=time.time, compare=False)

    @classmethod
    def open(
        cls,
        video_id: str,
        record: Optional[VideoRecord] = None,
        keywords: Optional[Sequence[str]] = None,
    ) -> "PipelineEnvelope":
        """Create the entry envelope from the existence-check result."""
        entry: EntryState = (
            Cached(transcript=record.transcript, transcript_path=record.transcript_path)
            if record is not None
            else Fresh()
        )
        return cls(video_id=video_id, entry=entry, keywords=tuple(keywords or ()))

    @property
    def exists(self) -> bool:
        return isinstance(self.entry, Cached)

    def evolve(self, **changes: Any) -> "PipelineEnvelope":
        """Return a copy with stage outputs added."""
        frozen = _ENTRY_FIELDS.intersection(changes)
        if frozen:
            raise ValueError(f"Envelope fields are fixed at entry: {sorted(frozen)}")
        return replace(self, **changes)

    def elapsed_time(self) -> float:
        """Get elapsed time since processing started."""
        return time.time() - self.start_time

    def to_output(self) -> PipelineOutput:
        """Final pipeline output; only valid after the persistence stage."""
        if self.analysis is None or self.artifact_path is None or self.summary is None:
            raise ValueError(f"Pipeline for {self.video_id} has not completed")
        return {
            "transcript": self.transcript or "",
            "vslScript": self.analysis.to_wire(),
            "vslFileName": str(self.artifact_path),
            "summary": self.summary,
        }

    def describe(self) -> Dict[str, Any]:
        """Generate a short description of the envelope for logging."""
        return {
            "video_id": self.video_id,
            "exists": self.exists,
            "elapsed_time": round(self.elapsed_time(), 2),
            "video_file_path": str(self.video_file_path) if self.video_file_path else None,
            "video_file_deleted": self.video_file_deleted,
            "transcript_chars": len(self.transcript or ""),
            "sections": len(self.analysis.sections) if self.analysis else 0,
            "artifact_path": str(self.artifact_path) if self.artifact_path else None,
        }
