"""
Base classes for pipeline architecture.

Provides the Stage base class and the VSLPipeline orchestrator.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..records import VideoRecord, VideoRecordStore
from ..storage import Workspace
from ..types import PipelineOutput
from .context import PipelineEnvelope
from .errors import PipelineError, StageError

logger = logging.getLogger("vsl_analyzer.pipeline")

EXISTENCE_CHECK = "ExistenceCheck"


@dataclass
class PipelineConfig:
    """
    Configuration for the VSL analysis pipeline.

    Attributes:
        workspace: Scoped output directories for audio, transcripts and artifacts
        punctuate: Ask the speech provider for punctuated output
    """
    workspace: Workspace
    punctuate: bool = True

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create config from environment variables."""
        return cls(workspace=Workspace.from_config())


@dataclass
class StageTracker:
    """Bookkeeping for one pipeline run."""
    envelope: Optional[PipelineEnvelope] = None
    completed_stages: List[str] = field(default_factory=list)
    skipped_stages: List[str] = field(default_factory=list)
    failed_stages: List[str] = field(default_factory=list)
    processing_notes: Dict[str, Any] = field(default_factory=dict)

    def mark_stage_complete(self, stage_name: str) -> None:
        if stage_name not in self.completed_stages:
            self.completed_stages.append(stage_name)

    def mark_stage_skipped(self, stage_name: str) -> None:
        if stage_name not in self.skipped_stages:
            self.skipped_stages.append(stage_name)

    def mark_stage_failed(self, stage_name: str) -> None:
        if stage_name not in self.failed_stages:
            self.failed_stages.append(stage_name)


@dataclass
class ProcessingResult:
    """
    Result of processing a video through the pipeline.

    Attributes:
        success: Whether processing completed successfully
        video_id: Identifier of the processed video
        elapsed_time: Total processing time in seconds
        completed_stages: Stages that completed successfully
        skipped_stages: Stages that were skipped
        failed_stages: Stages that failed
        error: Error message if processing failed
        failed_stage: Name of the stage that failed
        processing_notes: Notes about processing issues
        envelope: Last envelope produced before the run ended
    """
    success: bool
    video_id: str
    elapsed_time: float
    completed_stages: List[str] = field(default_factory=list)
    skipped_stages: List[str] = field(default_factory=list)
    failed_stages: List[str] = field(default_factory=list)
    error: Optional[str] = None
    failed_stage: Optional[str] = None
    processing_notes: Dict[str, Any] = field(default_factory=dict)
    envelope: Optional[PipelineEnvelope] = None

    @classmethod
    def from_tracker(
        cls,
        video_id: str,
        tracker: StageTracker,
        started: float,
        error: Optional[PipelineError] = None,
    ) -> "ProcessingResult":
        """Create a result from the run's bookkeeping."""
        return cls(
            success=error is None and not tracker.failed_stages,
            video_id=video_id,
            elapsed_time=time.time() - started,
            completed_stages=list(tracker.completed_stages),
            skipped_stages=list(tracker.skipped_stages),
            failed_stages=list(tracker.failed_stages),
            error=str(error) if error else None,
            failed_stage=error.stage_name if error else None,
            processing_notes=dict(tracker.processing_notes),
            envelope=tracker.envelope,
        )

    @property
    def output(self) -> PipelineOutput:
        if not self.success or self.envelope is None:
            raise ValueError(f"No output for failed run of {self.video_id}: {self.error}")
        return self.envelope.to_output()


class Stage(ABC):
    """
    Base class for pipeline stages.

    Each stage is a function from envelope to envelope: it reads its inputs
    from the envelope and returns an evolved copy carrying its outputs.

    Subclasses must implement:
    - name: Unique identifier for the stage
    - should_run(): Determine if stage should execute
    - execute(): Perform stage logic

    Optionally override:
    - on_error(): Describe stage-specific errors
    - validate_inputs(): Validate required inputs exist
    """

    name: str = "BaseStage"

    @abstractmethod
    def should_run(self, envelope: PipelineEnvelope, config: PipelineConfig) -> bool:
        """
        Determine if this stage should execute.

        Returns:
            True if stage should run, False to skip
        """
        pass

    @abstractmethod
    def execute(self, envelope: PipelineEnvelope, config: PipelineConfig) -> PipelineEnvelope:
        """
        Execute the stage logic.

        Returns:
            Evolved envelope

        Raises:
            StageError: If stage execution fails
        """
        pass

    def on_error(
        self,
        envelope: PipelineEnvelope,
        error: Exception,
        config: PipelineConfig,
    ) -> Dict[str, Any]:
        """
        Return a processing note describing a stage failure.

        Override to add stage-specific context.
        """
        return {
            "type": type(error).__name__,
            "message": str(error)[:500],
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        }

    def validate_inputs(self, envelope: PipelineEnvelope) -> None:
        """
        Validate that required inputs exist in the envelope.

        Raises:
            StageError: If required inputs are missing
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class VSLPipeline:
    """
    Runs a video through an ordered list of stages.

    The existence check happens once, before the first stage, and its outcome
    travels in the envelope. Stages run strictly one after another; the first
    error aborts the run. There are no retries.

    Usage:
        pipeline = VSLPipeline(
            stages=[AcquisitionStage(), TranscriptionStage(), ...],
            config=PipelineConfig(workspace=Workspace.under("./out")),
            record_store=TranscriptDirectoryStore(workspace.transcripts),
        )
        result = pipeline.process("abc123")
    """

    def __init__(
        self,
        stages: Sequence[Stage],
        config: Optional[PipelineConfig] = None,
        record_store: Optional[VideoRecordStore] = None,
    ):
        self.stages = list(stages)
        self.config = config or PipelineConfig.from_env()
        self.record_store = record_store

        names = [s.name for s in self.stages]
        if len(names) != len(set(names)):
            raise ValueError("Stage names must be unique")

    def open_envelope(
        self,
        video_id: str,
        keywords: Optional[Sequence[str]] = None,
        record: Optional[VideoRecord] = None,
    ) -> PipelineEnvelope:
        """Run the existence check and build the entry envelope."""
        if record is None and self.record_store is not None:
            try:
                record = self.record_store.lookup(video_id)
            except Exception as e:
                raise PipelineError(
                    f"Record lookup failed: {e}", EXISTENCE_CHECK, video_id
                ) from e
        if record is not None:
            logger.info("[%s] Video already exists, reusing stored transcript", video_id)
        return PipelineEnvelope.open(video_id, record=record, keywords=keywords)

    def run(
        self,
        video_id: str,
        keywords: Optional[Sequence[str]] = None,
        record: Optional[VideoRecord] = None,
    ) -> PipelineEnvelope:
        """
        Run all stages and return the final envelope.

        Raises:
            PipelineError: On the first failing stage
        """
        envelope = self.open_envelope(video_id, keywords, record)
        return self._run_stages(envelope, StageTracker(envelope=envelope))

    def process(
        self,
        video_id: str,
        keywords: Optional[Sequence[str]] = None,
        record: Optional[VideoRecord] = None,
    ) -> ProcessingResult:
        """
        Run all stages and report the outcome as a ProcessingResult.

        Pipeline errors are logged and reported in the result; anything else
        propagates.
        """
        started = time.time()
        tracker = StageTracker()

        try:
            tracker.envelope = self.open_envelope(video_id, keywords, record)
            self._run_stages(tracker.envelope, tracker)
        except PipelineError as e:
            logger.error("[%s] Pipeline failed at %s: %s", video_id, e.stage_name, e.message)
            return ProcessingResult.from_tracker(video_id, tracker, started, error=e)

        result = ProcessingResult.from_tracker(video_id, tracker, started)
        logger.info(
            "[%s] Processed successfully in %.1fs - stages=%d, skipped=%d",
            video_id, result.elapsed_time, len(result.completed_stages), len(result.skipped_stages),
        )
        return result

    def _run_stages(self, envelope: PipelineEnvelope, tracker: StageTracker) -> PipelineEnvelope:
        for stage in self.stages:
            envelope = self._run_stage(stage, envelope, tracker)
            tracker.envelope = envelope
        return envelope

    def _run_stage(
        self,
        stage: Stage,
        envelope: PipelineEnvelope,
        tracker: StageTracker,
    ) -> PipelineEnvelope:
        """
        Run a single stage.

        Raises:
            StageError: If the stage fails
        """
        if not stage.should_run(envelope, self.config):
            tracker.mark_stage_skipped(stage.name)
            logger.info("[%s] Skipping stage: %s", envelope.video_id, stage.name)
            return envelope

        try:
            stage.validate_inputs(envelope)
            logger.debug("[%s] Running stage: %s", envelope.video_id, stage.name)
            updated = stage.execute(envelope, self.config)

        except StageError as e:
            if e.video_id is None:
                e.video_id = envelope.video_id
            tracker.processing_notes[f"{stage.name}_error"] = stage.on_error(envelope, e, self.config)
            tracker.mark_stage_failed(stage.name)
            raise

        except Exception as e:
            tracker.processing_notes[f"{stage.name}_error"] = stage.on_error(envelope, e, self.config)
            tracker.mark_stage_failed(stage.name)
            raise StageError(
                f"Unexpected error: {e}", stage.name, envelope.video_id, cause=e
            ) from e

        tracker.mark_stage_complete(stage.name)
        return updated
