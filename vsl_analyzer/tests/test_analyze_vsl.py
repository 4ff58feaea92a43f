import json
from unittest.mock import MagicMock

import pytest

from vsl_analyzer import analyze_vsl
from vsl_analyzer.pipeline import ProcessingResult


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch):
    monkeypatch.setenv("USE_DUMMY_ASR", "true")
    monkeypatch.delenv("ASR_PROVIDER", raising=False)
    monkeypatch.setattr(analyze_vsl, "_configure_logging", lambda level: None)


def test_parse_args():
    args = analyze_vsl._parse_args(["abc123", "xyz789", "--keywords", "gutter", "guard", "--no-cache"])

    assert args.video_ids == ["abc123", "xyz789"]
    assert args.keywords == ["gutter", "guard"]
    assert args.no_cache is True
    assert args.json is False


def test_build_workspace_prefers_cli_dirs(tmp_path, monkeypatch):
    monkeypatch.setenv("AUDIO_DIR", str(tmp_path / "env-audio"))
    args = analyze_vsl._parse_args(["abc123", "--output-dir", str(tmp_path / "out")])

    workspace = analyze_vsl._build_workspace(args)

    assert workspace.audio.root == tmp_path / "env-audio"
    assert workspace.analyses.root == tmp_path / "out"


def test_create_pipeline_without_cache_has_no_record_store(tmp_path):
    from vsl_analyzer.pipeline import PipelineConfig
    from vsl_analyzer.storage import Workspace

    pipeline = analyze_vsl.create_pipeline(PipelineConfig(workspace=Workspace.under(tmp_path)), use_cache=False)

    assert pipeline.record_store is None
    assert [s.name for s in pipeline.stages] == [
        "AcquisitionStage", "TranscriptionStage", "ExtractionStage", "PersistenceStage",
    ]


def test_main_returns_nonzero_when_any_video_fails(monkeypatch, capsys):
    ok = MagicMock(spec=ProcessingResult, success=True, video_id="abc123")
    ok.output = {
        "transcript": "Buy now",
        "vslScript": {},
        "vslFileName": "vsl-analysis/abc123_vsl_analysis.json",
        "summary": {
            "totalSections": 4,
            "mainPurposes": ["hook"],
            "dominantTones": ["urgent"],
            "effectivenessRating": 8,
        },
    }
    failed = MagicMock(spec=ProcessingResult, success=False, video_id="bad1",
                       error="AcquisitionStage failed for video bad1: boom")
    pipeline = MagicMock()
    pipeline.process.side_effect = [ok, failed]
    monkeypatch.setattr(analyze_vsl, "create_pipeline", lambda config, use_cache: pipeline)

    exit_code = analyze_vsl.main(["abc123", "bad1", "--keywords", "gutter"])

    assert exit_code == 1
    assert pipeline.process.call_args_list[0].kwargs == {"keywords": ["gutter"]}
    captured = capsys.readouterr()
    assert "abc123: 4 sections" in captured.out
    assert "AcquisitionStage failed for video bad1" in captured.err


def test_main_json_output(monkeypatch, capsys):
    output = {"transcript": "Buy now", "vslScript": {}, "vslFileName": "x.json", "summary": {}}
    ok = MagicMock(spec=ProcessingResult, success=True, video_id="abc123", output=output)
    pipeline = MagicMock()
    pipeline.process.return_value = ok
    monkeypatch.setattr(analyze_vsl, "create_pipeline", lambda config, use_cache: pipeline)

    assert analyze_vsl.main(["abc123", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == output
