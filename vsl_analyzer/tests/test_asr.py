from unittest.mock import MagicMock

import pytest

from vsl_analyzer import asr


def _deepgram_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def deepgram_env(monkeypatch):
    monkeypatch.setenv("DEEPGRAM_API_KEY", "dg-test")
    monkeypatch.delenv("DEEPGRAM_MODEL", raising=False)
    monkeypatch.delenv("DEEPGRAM_API_BASE", raising=False)
    monkeypatch.delenv("USE_DUMMY_ASR", raising=False)
    monkeypatch.setenv("ASR_PROVIDER", "deepgram")


def test_deepgram_request_asks_for_punctuation(tmp_path, monkeypatch, deepgram_env):
    audio = tmp_path / "clip_abc123.webm"
    audio.write_bytes(b"audio")
    post = MagicMock(return_value=_deepgram_response({
        "results": {"channels": [{"alternatives": [{"transcript": "Hello, world."}]}]}
    }))
    monkeypatch.setattr(asr.requests, "post", post)

    text = asr.transcribe_audio(str(audio), keywords=["gutter", "guard"])

    assert text == "Hello, world."
    _, kwargs = post.call_args
    assert post.call_args.args[0] == "https://api.deepgram.com/v1/listen"
    assert ("punctuate", "true") in kwargs["params"]
    assert ("keywords", "gutter") in kwargs["params"]
    assert kwargs["headers"]["Authorization"] == "Token dg-test"


def test_legacy_dg_api_key_is_accepted(tmp_path, monkeypatch, deepgram_env):
    monkeypatch.delenv("DEEPGRAM_API_KEY")
    monkeypatch.setenv("DG_API_KEY", "dg-legacy")
    audio = tmp_path / "clip.webm"
    audio.write_bytes(b"audio")
    post = MagicMock(return_value=_deepgram_response({
        "results": {"channels": [{"alternatives": [{"transcript": "ok"}]}]}
    }))
    monkeypatch.setattr(asr.requests, "post", post)

    asr.transcribe_audio(str(audio))

    assert post.call_args.kwargs["headers"]["Authorization"] == "Token dg-legacy"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"results": {"channels": []}},
        {"results": {"channels": [{"alternatives": []}]}},
        {"results": {"channels": [{"alternatives": [{"confidence": 0.1}]}]}},
    ],
)
def test_deepgram_without_alternatives_raises(tmp_path, monkeypatch, deepgram_env, payload):
    audio = tmp_path / "clip.webm"
    audio.write_bytes(b"audio")
    monkeypatch.setattr(asr.requests, "post", MagicMock(return_value=_deepgram_response(payload)))

    with pytest.raises(asr.NoTranscriptResult):
        asr.transcribe_audio(str(audio))


def test_stub_transcript_skips_providers(monkeypatch):
    monkeypatch.setenv("USE_DUMMY_ASR", "true")
    monkeypatch.delenv("ASR_PROVIDER", raising=False)
    post = MagicMock()
    monkeypatch.setattr(asr.requests, "post", post)

    text = asr.transcribe_audio("/tmp/My_VSL_abc123.webm")

    assert text == "Transcription stub for My_VSL_abc123.webm"
    post.assert_not_called()


def test_whisper_provider_uses_openai_client(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("ASR_MODEL_NAME", raising=False)
    monkeypatch.delenv("ASR_PROVIDER", raising=False)
    monkeypatch.delenv("USE_DUMMY_ASR", raising=False)
    audio = tmp_path / "clip.m4a"
    audio.write_bytes(b"audio")
    client = MagicMock()
    client.audio.transcriptions.create.return_value = MagicMock(text="Whisper text.")
    monkeypatch.setattr(asr, "_get_openai_client", lambda: client)

    text = asr.transcribe_audio(str(audio), provider="openai", keywords=["Acme"])

    assert text == "Whisper text."
    kwargs = client.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["prompt"] == "Acme"
