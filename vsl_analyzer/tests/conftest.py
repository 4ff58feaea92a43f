"""
Shared fixtures: provider fakes and schema-valid VSL payloads.
"""

import json
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from vsl_analyzer import config
from vsl_analyzer.media import AudioFormat, VideoInfo


DEFAULT_SECTIONS: List[Tuple[str, str]] = [
    ("hook", "urgent"),
    ("problem_identification", "empathetic"),
    ("solution_introduction", "persuasive"),
    ("call_to_action", "urgent"),
]


def _section(purpose: str, tone: str, index: int) -> Dict:
    return {
        "title": f"Section {index + 1}",
        "content": f"Script line for {purpose}.",
        "purpose": purpose,
        "tone": tone,
        "keyPoints": [f"Point about {purpose}"],
        "timestamps": {"start": f"0:{index * 7:02d}", "end": f"0:{index * 7 + 7:02d}"},
    }


def build_script_payload(
    sections: Optional[Sequence[Tuple[str, str]]] = None,
    rating=8,
) -> Dict:
    pairs = DEFAULT_SECTIONS if sections is None else sections
    return {
        "overallStrategy": "Pain-agitate-solve compressed into 30 seconds",
        "targetAudience": "Busy homeowners",
        "mainOffer": "Self-cleaning gutter guards",
        "sections": [_section(p, t, i) for i, (p, t) in enumerate(pairs)],
        "effectiveness": {
            "strengths": ["Fast hook"],
            "improvements": ["Add social proof"],
            "overallRating": rating,
        },
    }


@pytest.fixture
def script_payload() -> Callable[..., Dict]:
    """Factory for schema-valid VSL script dicts (camelCase, as the model returns them)."""
    return build_script_payload


@pytest.fixture
def script_json(script_payload) -> Callable[..., str]:
    def _make(*args, **kwargs) -> str:
        return json.dumps(script_payload(*args, **kwargs))
    return _make


class FakeStreamProvider:
    """In-memory streaming provider recording every call."""

    def __init__(
        self,
        title: str = "Stop Wasting Money: Gutter Guards!",
        formats: Optional[Sequence[AudioFormat]] = None,
        chunks: Sequence[bytes] = (b"RIFF", b"audio-bytes"),
        fail_after_first_chunk: Optional[Exception] = None,
        resolve_error: Optional[Exception] = None,
    ):
        self.title = title
        self.formats = list(formats) if formats is not None else [
            AudioFormat("18", has_audio=True, has_video=True, audio_bitrate=96, container="mp4"),
            AudioFormat("140", has_audio=True, has_video=False, audio_bitrate=128, container="m4a",
                        content_length=15),
            AudioFormat("251", has_audio=True, has_video=False, audio_bitrate=160, container="webm",
                        content_length=15),
        ]
        self.chunks = list(chunks)
        self.fail_after_first_chunk = fail_after_first_chunk
        self.resolve_error = resolve_error
        self.calls: List[Tuple[str, str]] = []
        self.stream_closed = False

    def resolve_formats(self, video_id: str) -> VideoInfo:
        self.calls.append(("resolve_formats", video_id))
        if self.resolve_error:
            raise self.resolve_error
        return VideoInfo(video_id=video_id, title=self.title, formats=self.formats)

    def open_audio_stream(self, video_id: str, fmt: AudioFormat):
        self.calls.append(("open_audio_stream", fmt.format_id))
        try:
            for index, chunk in enumerate(self.chunks):
                if index == 1 and self.fail_after_first_chunk:
                    raise self.fail_after_first_chunk
                yield chunk
        finally:
            self.stream_closed = True


class FakeTranscriber:
    def __init__(self, text: str = "Tired of clogged gutters? Order today."):
        self.text = text
        self.calls: List[Dict] = []

    def __call__(self, audio_path: str, *, punctuate: bool = True, keywords=()):
        self.calls.append({"audio_path": audio_path, "punctuate": punctuate, "keywords": keywords})
        return self.text


class FakeModel:
    def __init__(self, response: str):
        self.response = response
        self.calls: List[str] = []

    def __call__(self, transcript: str) -> str:
        self.calls.append(transcript)
        return self.response


@pytest.fixture
def fake_provider() -> Callable[..., FakeStreamProvider]:
    return FakeStreamProvider


@pytest.fixture
def fake_transcriber() -> Callable[..., FakeTranscriber]:
    return FakeTranscriber


@pytest.fixture
def fake_model() -> Callable[..., FakeModel]:
    return FakeModel


@pytest.fixture(autouse=True)
def _reset_config_caches():
    def _clear():
        config.get_openai_config.cache_clear()
        config.get_deepgram_config.cache_clear()
        config.get_storage_config.cache_clear()
        config.get_pipeline_config.cache_clear()

    _clear()
    yield
    _clear()
