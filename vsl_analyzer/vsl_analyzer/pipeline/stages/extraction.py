"""
Stage 3: Structured Extraction

Sends the transcript to the generative model under the strict VSL script
schema and attaches the validated ScriptAnalysis.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...analysis import ModelCall, analyse_vsl_transcript
from ...schema import ScriptValidationError
from ..base import Stage, PipelineConfig
from ..context import PipelineEnvelope
from ..errors import EmptyTranscript, ExtractionError, SchemaValidationError

logger = logging.getLogger("vsl_analyzer.pipeline.extraction")


class ExtractionStage(Stage):
    """
    Stage 3: Extract a structured VSL script from the transcript.

    Responsibilities:
    - Build the prompt and schema contract and call the model
    - Reject any reply that does not conform to the schema
    - Set envelope.analysis (the transcript passes through unchanged)

    Raises:
        SchemaValidationError: If the reply violates the schema
        ExtractionError: If the provider call itself fails
    """

    name = "ExtractionStage"

    def __init__(self, model_call: Optional[ModelCall] = None):
        self.model_call = model_call

    def should_run(self, envelope: PipelineEnvelope, config: PipelineConfig) -> bool:
        """Run if a transcript exists but has not been analysed yet."""
        return envelope.analysis is None

    def execute(self, envelope: PipelineEnvelope, config: PipelineConfig) -> PipelineEnvelope:
        logger.info("[%s] Extracting VSL script structure from transcript...", envelope.video_id)

        try:
            analysis = analyse_vsl_transcript(
                envelope.transcript or "",
                video_id=envelope.video_id,
                model_call=self.model_call,
            )
        except ScriptValidationError as e:
            raise SchemaValidationError(
                str(e), self.name, envelope.video_id, cause=e, errors=e.errors
            ) from e
        except Exception as e:
            raise ExtractionError(
                f"VSL extraction call failed: {e}", self.name, envelope.video_id, cause=e
            ) from e

        return envelope.evolve(analysis=analysis)

    def validate_inputs(self, envelope: PipelineEnvelope) -> None:
        """Never send an empty transcript to the model."""
        if not envelope.transcript or not envelope.transcript.strip():
            raise EmptyTranscript(
                "transcript is required (run TranscriptionStage first)",
                self.name,
                envelope.video_id,
            )
