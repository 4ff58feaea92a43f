"""
ASR wrapper turning a local audio file into punctuated transcript text.

Defaults to Deepgram's pre-recorded REST endpoint; the OpenAI Whisper API is
available via ASR_PROVIDER=openai. A lightweight stub for offline runs is
enabled by the USE_DUMMY_ASR env var or the force_stub argument.
"""

from __future__ import annotations

import logging
import mimetypes
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests
from openai import OpenAI

from .config import get_deepgram_config, get_openai_config, get_pipeline_config

logger = logging.getLogger(__name__)


class NoTranscriptResult(RuntimeError):
    """Raised when the provider answers without a usable transcript alternative."""
    pass


@lru_cache(maxsize=1)
def _get_openai_client() -> OpenAI:
    cfg = get_openai_config()
    return OpenAI(api_key=cfg.api_key, base_url=cfg.api_base)


def _call_whisper(audio_path: str, keywords: Sequence[str] = ()) -> str:
    """Invoke the OpenAI Whisper transcription API (output is always punctuated)."""
    client = _get_openai_client()
    cfg = get_openai_config()
    kwargs: Dict[str, Any] = {}
    if keywords:
        # Whisper has no keyword boosting; a prompt biases its vocabulary instead.
        kwargs["prompt"] = ", ".join(keywords)
    with open(audio_path, "rb") as audio_file:
        response = client.audio.transcriptions.create(
            model=cfg.asr_model_name,
            file=audio_file,
            response_format="json",
            temperature=0,
            **kwargs,
        )
    if response.text is None:
        raise NoTranscriptResult("Whisper returned no transcript text")
    return response.text


def _deepgram_params(
    punctuate: bool, keywords: Sequence[str], model: Optional[str]
) -> List[Tuple[str, str]]:
    params = [("punctuate", "true" if punctuate else "false")]
    if model:
        params.append(("model", model))
    params.extend(("keywords", keyword) for keyword in keywords)
    return params


def _extract_deepgram_transcript(payload: Dict[str, Any]) -> str:
    """Return the first alternative of the first channel of a Deepgram response."""
    channels = (payload.get("results") or {}).get("channels") or []
    alternatives = (channels[0].get("alternatives") if channels else None) or []
    if not alternatives or alternatives[0].get("transcript") is None:
        raise NoTranscriptResult("Deepgram returned no transcription results")
    return alternatives[0]["transcript"]


def _call_deepgram(
    audio_path: str,
    *,
    punctuate: bool = True,
    keywords: Sequence[str] = (),
) -> str:
    """POST the audio file to Deepgram's pre-recorded transcription endpoint."""
    cfg = get_deepgram_config()
    timeout = get_pipeline_config().http_timeout_seconds
    content_type = mimetypes.guess_type(audio_path)[0] or "application/octet-stream"
    with open(audio_path, "rb") as audio_file:
        response = requests.post(
            f"{cfg.api_base}/listen",
            params=_deepgram_params(punctuate, keywords, cfg.model_name),
            headers={
                "Authorization": f"Token {cfg.api_key}",
                "Content-Type": content_type,
            },
            data=audio_file,
            timeout=timeout,
        )
    response.raise_for_status()
    return _extract_deepgram_transcript(response.json())


def _stub_transcript(audio_path: str) -> str:
    """Return a placeholder transcript useful for smoke tests."""
    basename = os.path.basename(audio_path)
    return f"Transcription stub for {basename}"


def transcribe_audio(
    audio_path: str,
    *,
    punctuate: bool = True,
    keywords: Optional[Sequence[str]] = None,
    provider: Optional[str] = None,
    force_stub: Optional[bool] = None,
) -> str:
    """
    Transcribe an audio file into plain text.

    Args:
        audio_path: Path to the downloaded audio file.
        punctuate: Ask the provider for punctuation-normalised output.
        keywords: Optional vocabulary hints forwarded to the provider.
        provider: "deepgram" or "openai"; defaults to ASR_PROVIDER.
        force_stub: Optional override to force the stub transcript.

    Raises:
        NoTranscriptResult: If the provider returned no usable alternative.
    """
    pipeline_cfg = get_pipeline_config()
    if force_stub is True or (force_stub is None and pipeline_cfg.use_dummy_asr):
        return _stub_transcript(audio_path)

    selected = (provider or pipeline_cfg.asr_provider).lower()
    keyword_list = tuple(keywords or ())
    logger.debug("Transcribing %s with %s", audio_path, selected)
    if selected == "openai":
        return _call_whisper(audio_path, keyword_list)
    if selected == "deepgram":
        return _call_deepgram(audio_path, punctuate=punctuate, keywords=keyword_list)
    raise ValueError(f"Unknown ASR provider: {selected}")


__all__ = ["transcribe_audio", "NoTranscriptResult"]
