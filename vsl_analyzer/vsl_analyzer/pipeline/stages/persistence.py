"""
Stage 4: Persistence & Summary

Writes the analysis artifact and derives the summary read-model.
"""

from __future__ import annotations

import logging

from ...artifacts import build_artifact, summarize_artifact, write_artifact
from ..base import Stage, PipelineConfig
from ..context import PipelineEnvelope
from ..errors import StageError

logger = logging.getLogger("vsl_analyzer.pipeline.persistence")


class PersistenceStage(Stage):
    """
    Stage 4: Save the VSL analysis.

    Responsibilities:
    - Build the artifact (metadata, script, purpose/tone statistics)
    - Write ``<video_id>_vsl_analysis.json``, replacing an earlier file
    - Set envelope.artifact_path and envelope.summary
    """

    name = "PersistenceStage"

    def should_run(self, envelope: PipelineEnvelope, config: PipelineConfig) -> bool:
        return envelope.artifact_path is None

    def execute(self, envelope: PipelineEnvelope, config: PipelineConfig) -> PipelineEnvelope:
        analysis = envelope.analysis
        if analysis is None:
            raise StageError("analysis is required", self.name, envelope.video_id)

        logger.info("[%s] Saving VSL analysis to file...", envelope.video_id)

        artifact = build_artifact(envelope.video_id, analysis, envelope.transcript_file_path)
        path = write_artifact(artifact, config.workspace.analyses)
        summary = summarize_artifact(artifact)

        logger.info(
            "[%s] VSL Analysis Summary: sections=%d | purposes=%s | tones=%s | rating=%d/10",
            envelope.video_id,
            summary["totalSections"],
            ", ".join(summary["mainPurposes"]),
            ", ".join(summary["dominantTones"]),
            summary["effectivenessRating"],
        )

        return envelope.evolve(artifact_path=path, summary=summary)

    def validate_inputs(self, envelope: PipelineEnvelope) -> None:
        if envelope.analysis is None:
            raise StageError(
                "analysis is required (run ExtractionStage first)",
                self.name,
                envelope.video_id,
            )
