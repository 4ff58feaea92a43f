"""
Tests for artifact building, persistence and summary derivation.
"""

import json

from vsl_analyzer import artifacts
from vsl_analyzer.schema import parse_script_analysis
from vsl_analyzer.storage import OutputDirectory


def _analysis(script_payload, sections, rating=8):
    return parse_script_analysis(json.dumps(script_payload(sections, rating=rating)))


def test_breakdowns_and_summary_for_repeated_values(script_payload):
    analysis = _analysis(
        script_payload,
        [("hook", "urgent"), ("hook", "urgent"), ("call_to_action", "reassuring")],
        rating=6,
    )

    artifact = artifacts.build_artifact("abc123", analysis, "transcription/x_transcript.txt")
    summary = artifacts.summarize_artifact(artifact)

    assert artifact["statistics"]["purposeBreakdown"] == {"hook": 2, "call_to_action": 1}
    assert artifact["statistics"]["toneBreakdown"] == {"urgent": 2, "reassuring": 1}
    assert summary == {
        "totalSections": 3,
        "mainPurposes": ["hook", "call_to_action"],
        "dominantTones": ["urgent", "reassuring"],
        "effectivenessRating": 6,
    }


def test_dominant_tones_break_ties_by_first_occurrence(script_payload):
    analysis = _analysis(
        script_payload,
        [
            ("hook", "emotional"),
            ("social_proof", "testimonial"),
            ("guarantee", "reassuring"),
            ("call_to_action", "urgent"),
            ("urgency_scarcity", "urgent"),
            ("bonus_offer", "testimonial"),
        ],
    )

    summary = artifacts.summarize_artifact(artifacts.build_artifact("v1", analysis, None))

    assert summary["dominantTones"] == ["testimonial", "urgent", "emotional"]


def test_artifact_shape(script_payload):
    analysis = _analysis(script_payload, None)

    artifact = artifacts.build_artifact(
        "abc123", analysis, "t.txt", analysis_date="2024-05-01T10:00:00.000Z"
    )

    assert set(artifact) == {"metadata", "vslScript", "statistics"}
    assert artifact["metadata"] == {
        "videoId": "abc123",
        "analysisDate": "2024-05-01T10:00:00.000Z",
        "transcriptSource": "t.txt",
    }
    assert artifact["vslScript"]["sections"][0]["keyPoints"] == ["Point about hook"]
    assert artifact["statistics"]["totalSections"] == 4


def test_default_analysis_date_is_iso_utc(script_payload):
    artifact = artifacts.build_artifact("abc123", _analysis(script_payload, None), None)
    assert artifact["metadata"]["analysisDate"].endswith("Z")
    assert "T" in artifact["metadata"]["analysisDate"]


def test_write_artifact_overwrites_same_video(tmp_path, script_payload):
    destination = OutputDirectory(tmp_path / "vsl-analysis")
    first = artifacts.build_artifact("abc123", _analysis(script_payload, None, rating=3), None)
    second = artifacts.build_artifact("abc123", _analysis(script_payload, None, rating=9), None)

    artifacts.write_artifact(first, destination)
    path = artifacts.write_artifact(second, destination)

    assert [p.name for p in (tmp_path / "vsl-analysis").iterdir()] == ["abc123_vsl_analysis.json"]
    assert artifacts.load_artifact(path)["vslScript"]["effectiveness"]["overallRating"] == 9
