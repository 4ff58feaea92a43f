"""
Stage 2: Transcription

Transcribes the downloaded audio with ASR (Automatic Speech Recognition), or
reuses the stored transcript of an existing video.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ...asr import NoTranscriptResult, transcribe_audio
from ...records import TRANSCRIPT_SUFFIX
from ..base import Stage, PipelineConfig
from ..context import Cached, PipelineEnvelope
from ..errors import EmptyTranscript, MissingInputFile, TranscriptionProviderError

logger = logging.getLogger("vsl_analyzer.pipeline.transcription")

Transcriber = Callable[..., str]


class TranscriptionStage(Stage):
    """
    Stage 2: Turn audio into a validated transcript.

    Responsibilities:
    - Cached videos: reuse the stored transcript and its path verbatim
    - Fresh videos: call the ASR provider with punctuation enabled, write
      ``<audio base name>_transcript.txt`` and delete the audio file (also on failure)
    - Guarantee a non-empty transcript on both paths
    - Set envelope.transcript, transcript_file_path and video_file_deleted

    Raises:
        MissingInputFile: If a fresh video has no downloaded audio
        TranscriptionProviderError: If the provider fails or has no usable result
        EmptyTranscript: If the transcript is empty or whitespace-only
    """

    name = "TranscriptionStage"

    def __init__(self, transcriber: Optional[Transcriber] = None):
        self.transcriber = transcriber or transcribe_audio

    def should_run(self, envelope: PipelineEnvelope, config: PipelineConfig) -> bool:
        """Run unless a transcript is already present."""
        return envelope.transcript is None

    def execute(self, envelope: PipelineEnvelope, config: PipelineConfig) -> PipelineEnvelope:
        if isinstance(envelope.entry, Cached):
            logger.info("[%s] Video already exists, using existing transcript", envelope.video_id)
            transcript = envelope.entry.transcript
            self._check_not_empty(envelope, transcript)
            return envelope.evolve(
                transcript=transcript,
                transcript_file_path=envelope.entry.transcript_path,
                video_file_deleted=True,
            )

        audio_path = envelope.video_file_path
        if audio_path is None:
            raise MissingInputFile(
                "Video file path is required for transcription", self.name, envelope.video_id
            )

        logger.info("[%s] Starting transcription for: %s", envelope.video_id, audio_path)
        try:
            transcript = self._transcribe(envelope, audio_path, config)

            # Checked before writing so an empty transcript never becomes a stored record.
            self._check_not_empty(envelope, transcript)

            transcript_path = config.workspace.transcripts.write_text(
                f"{audio_path.stem}{TRANSCRIPT_SUFFIX}", transcript
            )
            logger.info("[%s] Transcript saved to: %s", envelope.video_id, transcript_path)
        finally:
            # Removed on failure too.
            audio_path.unlink(missing_ok=True)
            logger.debug("[%s] Deleted audio file: %s", envelope.video_id, audio_path)

        return envelope.evolve(
            transcript=transcript,
            transcript_file_path=str(transcript_path),
            video_file_deleted=True,
        )

    def _transcribe(
        self, envelope: PipelineEnvelope, audio_path: Path, config: PipelineConfig
    ) -> str:
        try:
            return self.transcriber(
                str(audio_path),
                punctuate=config.punctuate,
                keywords=envelope.keywords,
            )
        except NoTranscriptResult as e:
            raise TranscriptionProviderError(str(e), self.name, envelope.video_id, cause=e) from e
        except Exception as e:
            raise TranscriptionProviderError(
                f"Transcription failed: {e}", self.name, envelope.video_id, cause=e
            ) from e

    def _check_not_empty(self, envelope: PipelineEnvelope, transcript: Optional[str]) -> None:
        if not transcript or not transcript.strip():
            raise EmptyTranscript(
                "Transcription failed or returned an empty transcript. "
                "Cannot proceed with VSL analysis.",
                self.name,
                envelope.video_id,
            )
        logger.info("[%s] Transcript validated: %d characters", envelope.video_id, len(transcript))

    def validate_inputs(self, envelope: PipelineEnvelope) -> None:
        """Fresh videos need a downloaded audio file on disk."""
        if envelope.exists:
            return
        if envelope.video_file_path is None:
            raise MissingInputFile(
                "video_file_path is required (run AcquisitionStage first)",
                self.name,
                envelope.video_id,
            )
        if not envelope.video_file_path.exists():
            raise MissingInputFile(
                f"Audio file does not exist: {envelope.video_file_path}",
                self.name,
                envelope.video_id,
            )
