"""
Type definitions for the VSL analysis pipeline.

Provides TypedDict definitions for the persisted artifact and the summary
read-model. Keys mirror the JSON written to disk, hence camelCase.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict


# ---------------------------------------------------------------------------
# Persisted Artifact Types
# ---------------------------------------------------------------------------

class ArtifactMetadata(TypedDict):
    """Provenance of an analysis artifact."""
    videoId: str
    analysisDate: str
    transcriptSource: Optional[str]


class ArtifactStatistics(TypedDict):
    """Frequency tables derived from the script sections."""
    totalSections: int
    purposeBreakdown: Dict[str, int]
    toneBreakdown: Dict[str, int]


class AnalysisArtifact(TypedDict):
    """Document written to ``<videoId>_vsl_analysis.json``."""
    metadata: ArtifactMetadata
    vslScript: Dict[str, Any]
    statistics: ArtifactStatistics


# ---------------------------------------------------------------------------
# Read Models
# ---------------------------------------------------------------------------

class AnalysisSummary(TypedDict):
    """Compact view of an artifact, derived and never persisted."""
    totalSections: int
    mainPurposes: List[str]
    dominantTones: List[str]
    effectivenessRating: int


class PipelineOutput(TypedDict):
    """Final output of a successful pipeline run."""
    transcript: str
    vslScript: Dict[str, Any]
    vslFileName: str
    summary: AnalysisSummary


__all__ = [
    "ArtifactMetadata",
    "ArtifactStatistics",
    "AnalysisArtifact",
    "AnalysisSummary",
    "PipelineOutput",
]
