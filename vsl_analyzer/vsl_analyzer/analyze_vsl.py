"""
CLI entry point for analysing VSL videos.

This module provides the command-line interface for the VSL pipeline.
The actual processing is delegated to the pipeline module. Videos are
processed one after another, never concurrently.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from .config import describe_active_models, get_pipeline_config, get_storage_config
from .pipeline import PipelineConfig, ProcessingResult, VSLPipeline
from .pipeline.stages import (
    AcquisitionStage,
    ExtractionStage,
    PersistenceStage,
    TranscriptionStage,
)
from .records import TranscriptDirectoryStore
from .storage import OutputDirectory, Workspace

logger = logging.getLogger("vsl_analyzer.analyze_vsl")

# ---------------------------------------------------------------------------
# Pipeline Factory
# ---------------------------------------------------------------------------

def create_pipeline(
    config: Optional[PipelineConfig] = None,
    use_cache: bool = True,
) -> VSLPipeline:
    """
    Create the VSL pipeline with all stages.

    Args:
        config: Optional pipeline configuration. If None, loads from environment.
        use_cache: Reuse transcripts written by earlier runs.

    Returns:
        Configured VSLPipeline instance
    """
    config = config or PipelineConfig.from_env()
    stages = [
        AcquisitionStage(),
        TranscriptionStage(),
        ExtractionStage(),
        PersistenceStage(),
    ]
    record_store = TranscriptDirectoryStore(config.workspace.transcripts) if use_cache else None
    return VSLPipeline(stages=stages, config=config, record_store=record_store)

# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Download, transcribe and analyse YouTube VSL videos."
    )
    parser.add_argument("video_ids", nargs="+", help="YouTube video IDs to analyse.")
    parser.add_argument(
        "--keywords",
        nargs="*",
        default=None,
        help="Vocabulary hints passed to the speech-recognition provider.",
    )
    parser.add_argument("--audio-dir", help="Directory for downloaded audio (default: AUDIO_DIR).")
    parser.add_argument("--transcript-dir", help="Directory for transcripts (default: TRANSCRIPT_DIR).")
    parser.add_argument("--output-dir", help="Directory for analysis files (default: ANALYSIS_DIR).")
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore transcripts from earlier runs and process every video from scratch.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the pipeline output of each successful video as JSON.",
    )
    return parser.parse_args(argv)


def _build_workspace(args: argparse.Namespace) -> Workspace:
    defaults = Workspace.from_config(get_storage_config())
    return Workspace(
        audio=OutputDirectory.at(args.audio_dir) if args.audio_dir else defaults.audio,
        transcripts=(
            OutputDirectory.at(args.transcript_dir) if args.transcript_dir else defaults.transcripts
        ),
        analyses=OutputDirectory.at(args.output_dir) if args.output_dir else defaults.analyses,
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("pipeline.log", mode="a", encoding="utf-8"),
        ],
    )


def _report(result: ProcessingResult, as_json: bool) -> None:
    if not result.success:
        print(f"VSL analysis failed: {result.error}", file=sys.stderr)
        return
    if as_json:
        print(json.dumps(result.output, indent=2, ensure_ascii=False))
        return
    summary = result.output["summary"]
    print(
        f"{result.video_id}: {summary['totalSections']} sections, "
        f"purposes={', '.join(summary['mainPurposes'])}, "
        f"tones={', '.join(summary['dominantTones'])}, "
        f"rating={summary['effectivenessRating']}/10 -> {result.output['vslFileName']}"
    )

# ---------------------------------------------------------------------------
# Main Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = _parse_args(argv)
    _configure_logging(get_pipeline_config().log_level)

    model_summary = describe_active_models()
    logger.info(
        "Active models • text=%s | asr=%s(%s)",
        model_summary["text_llm"],
        model_summary["asr_provider"],
        model_summary["asr_model"],
    )

    pipeline = create_pipeline(
        PipelineConfig(workspace=_build_workspace(args)),
        use_cache=not args.no_cache,
    )

    failed: List[str] = []
    for video_id in args.video_ids:
        result = pipeline.process(video_id, keywords=args.keywords)
        _report(result, args.json)
        if not result.success:
            failed.append(video_id)

    total = len(args.video_ids)
    logger.info("Completed VSL analysis: %d/%d succeeded", total - len(failed), total)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
