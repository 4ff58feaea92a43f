"""
Stage 1: Acquisition

Downloads the best audio-only stream of a video. Skipped for videos that
already exist, which makes re-runs safe.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...media import AudioStreamProvider, NoAudioFormatsError, YtDlpStreamProvider, download_audio
from ..base import Stage, PipelineConfig
from ..context import PipelineEnvelope
from ..errors import AcquisitionFailed, NoAudioAvailable

logger = logging.getLogger("vsl_analyzer.pipeline.acquisition")


class AcquisitionStage(Stage):
    """
    Stage 1: Download the audio track.

    Responsibilities:
    - Skip existing videos without any network I/O (video_file_path stays None)
    - Resolve stream metadata and pick the highest-bitrate audio-only encoding
    - Stream it into the audio directory
    - Set envelope.video_file_path

    Raises:
        NoAudioAvailable: If the video has no audio-only encoding
        AcquisitionFailed: On network, provider or write errors
    """

    name = "AcquisitionStage"

    def __init__(self, provider: Optional[AudioStreamProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> AudioStreamProvider:
        if self._provider is None:
            from ...config import get_pipeline_config

            cfg = get_pipeline_config()
            self._provider = YtDlpStreamProvider(
                timeout=cfg.http_timeout_seconds,
                chunk_size=cfg.download_chunk_size,
            )
        return self._provider

    def should_run(self, envelope: PipelineEnvelope, config: PipelineConfig) -> bool:
        """Run unless the video exists or audio was already downloaded."""
        return not envelope.exists and envelope.video_file_path is None

    def execute(self, envelope: PipelineEnvelope, config: PipelineConfig) -> PipelineEnvelope:
        logger.info("[%s] Downloading audio", envelope.video_id)

        try:
            path = download_audio(envelope.video_id, self.provider, config.workspace.audio)
        except NoAudioFormatsError as e:
            raise NoAudioAvailable(str(e), self.name, envelope.video_id, cause=e) from e
        except Exception as e:
            raise AcquisitionFailed(
                f"Audio download failed: {e}", self.name, envelope.video_id, cause=e
            ) from e

        return envelope.evolve(video_file_path=path)
