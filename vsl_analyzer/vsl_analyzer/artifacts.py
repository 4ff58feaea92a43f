"""
Persisted VSL analysis artifacts and the summary derived from them.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

from .schema import ScriptAnalysis
from .storage import OutputDirectory
from .types import AnalysisArtifact, AnalysisSummary

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = "_vsl_analysis.json"
DOMINANT_TONE_COUNT = 3


def artifact_file_name(video_id: str) -> str:
    return f"{video_id}{ARTIFACT_SUFFIX}"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def section_breakdowns(analysis: ScriptAnalysis) -> Tuple[Dict[str, int], Dict[str, int]]:
    """
    Count purposes and tones in one pass over the sections.

    Keys keep the order in which each value first appears.
    """
    purposes: Dict[str, int] = {}
    tones: Dict[str, int] = {}
    for section in analysis.sections:
        purposes[section.purpose.value] = purposes.get(section.purpose.value, 0) + 1
        tones[section.tone.value] = tones.get(section.tone.value, 0) + 1
    return purposes, tones


def build_artifact(
    video_id: str,
    analysis: ScriptAnalysis,
    transcript_source: Optional[str],
    *,
    analysis_date: Optional[str] = None,
) -> AnalysisArtifact:
    purposes, tones = section_breakdowns(analysis)
    return {
        "metadata": {
            "videoId": video_id,
            "analysisDate": analysis_date or _utc_timestamp(),
            "transcriptSource": transcript_source,
        },
        "vslScript": analysis.to_wire(),
        "statistics": {
            "totalSections": len(analysis.sections),
            "purposeBreakdown": purposes,
            "toneBreakdown": tones,
        },
    }


def summarize_artifact(artifact: AnalysisArtifact) -> AnalysisSummary:
    """Derive the compact summary read-model from an artifact."""
    stats = artifact["statistics"]
    # sorted() is stable, so equal counts keep first-occurrence order
    ranked_tones = sorted(stats["toneBreakdown"].items(), key=lambda item: item[1], reverse=True)
    return {
        "totalSections": len(artifact["vslScript"]["sections"]),
        "mainPurposes": list(stats["purposeBreakdown"]),
        "dominantTones": [tone for tone, _ in ranked_tones[:DOMINANT_TONE_COUNT]],
        "effectivenessRating": artifact["vslScript"]["effectiveness"]["overallRating"],
    }


def write_artifact(artifact: AnalysisArtifact, destination: OutputDirectory) -> Path:
    """Write the artifact as pretty-printed JSON, replacing any earlier file for the video."""
    video_id = artifact["metadata"]["videoId"]
    path = destination.write_text(
        artifact_file_name(video_id),
        json.dumps(artifact, indent=2, ensure_ascii=False),
    )
    logger.info("[%s] VSL analysis saved to: %s", video_id, path)
    return path


def load_artifact(path: Path) -> AnalysisArtifact:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


__all__ = [
    "artifact_file_name",
    "section_breakdowns",
    "build_artifact",
    "summarize_artifact",
    "write_artifact",
    "load_artifact",
]
