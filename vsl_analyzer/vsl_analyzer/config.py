"""
Configuration helpers for the VSL analysis pipeline.

Centralises environment variable loading/validation so the rest of the codebase
can depend on typed config objects instead of sprinkling os.getenv calls.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

ASR_PROVIDER_CHOICES = {"deepgram", "openai"}
DEFAULT_TEXT_LLM_MODEL = "o3-mini"
DEFAULT_ASR_MODEL = "whisper-1"
DEFAULT_DEEPGRAM_API_BASE = "https://api.deepgram.com/v1"


@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI-compatible API credentials and model names."""

    api_key: str
    api_base: str
    llm_model_name: str
    asr_model_name: str


@dataclass(frozen=True)
class DeepgramConfig:
    """Deepgram pre-recorded transcription credentials."""

    api_key: str
    api_base: str
    model_name: Optional[str]


@dataclass(frozen=True)
class StorageConfig:
    """Local directories for audio, transcripts and analysis artifacts."""

    audio_dir: str
    transcript_dir: str
    analysis_dir: str


@dataclass(frozen=True)
class PipelineConfig:
    """Misc pipeline knobs."""

    log_level: str
    asr_provider: str
    use_dummy_asr: bool
    download_chunk_size: int
    http_timeout_seconds: float


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Wrapper around os.getenv that trims whitespace."""
    value = os.getenv(name, default)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or default


def _require_env(name: str, *aliases: str) -> str:
    """Fetch an environment variable (or one of its aliases) or raise a helpful error."""
    for candidate in (name, *aliases):
        value = _get_env(candidate)
        if value:
            return value
    raise RuntimeError(f"Expected environment variable '{name}' to be set.")


def _get_bool_env(name: str, default: bool = False) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes"}


def _get_int_env(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _get_float_env(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _normalize_asr_provider(value: Optional[str]) -> str:
    normalized = (value or "deepgram").lower()
    if normalized not in ASR_PROVIDER_CHOICES:
        raise ValueError(
            f"ASR_PROVIDER must be one of {sorted(ASR_PROVIDER_CHOICES)}, got '{value}'."
        )
    return normalized


@lru_cache(maxsize=1)
def get_openai_config() -> OpenAIConfig:
    """Return OpenAI-compatible API configuration."""
    return OpenAIConfig(
        api_key=_require_env("OPENAI_API_KEY"),
        api_base=_get_env("OPENAI_API_BASE") or "https://api.openai.com/v1",
        llm_model_name=_get_env("TEXT_LLM_MODEL") or DEFAULT_TEXT_LLM_MODEL,
        asr_model_name=_get_env("ASR_MODEL_NAME") or DEFAULT_ASR_MODEL,
    )


@lru_cache(maxsize=1)
def get_deepgram_config() -> DeepgramConfig:
    """Return Deepgram configuration (DG_API_KEY is accepted as a legacy alias)."""
    return DeepgramConfig(
        api_key=_require_env("DEEPGRAM_API_KEY", "DG_API_KEY"),
        api_base=(_get_env("DEEPGRAM_API_BASE") or DEFAULT_DEEPGRAM_API_BASE).rstrip("/"),
        model_name=_get_env("DEEPGRAM_MODEL"),
    )


@lru_cache(maxsize=1)
def get_storage_config() -> StorageConfig:
    """Return the local output directories."""
    return StorageConfig(
        audio_dir=_get_env("AUDIO_DIR") or "./video",
        transcript_dir=_get_env("TRANSCRIPT_DIR") or "./transcription",
        analysis_dir=_get_env("ANALYSIS_DIR") or "./vsl-analysis",
    )


@lru_cache(maxsize=1)
def get_pipeline_config() -> PipelineConfig:
    """Return misc pipeline toggles."""
    return PipelineConfig(
        log_level=_get_env("LOG_LEVEL") or "INFO",
        asr_provider=_normalize_asr_provider(_get_env("ASR_PROVIDER")),
        use_dummy_asr=_get_bool_env("USE_DUMMY_ASR"),
        download_chunk_size=_get_int_env("DOWNLOAD_CHUNK_SIZE", 64 * 1024),
        http_timeout_seconds=_get_float_env("HTTP_TIMEOUT_SECONDS", 300.0),
    )


def describe_active_models() -> dict:
    """Return a summary of the currently selected providers/models."""
    pipeline_cfg = get_pipeline_config()
    summary = {
        "text_llm": _get_env("TEXT_LLM_MODEL") or DEFAULT_TEXT_LLM_MODEL,
        "asr_provider": "stub" if pipeline_cfg.use_dummy_asr else pipeline_cfg.asr_provider,
    }
    if pipeline_cfg.asr_provider == "openai":
        summary["asr_model"] = _get_env("ASR_MODEL_NAME") or DEFAULT_ASR_MODEL
    else:
        summary["asr_model"] = _get_env("DEEPGRAM_MODEL") or "default"
    return summary


__all__ = [
    "OpenAIConfig",
    "DeepgramConfig",
    "StorageConfig",
    "PipelineConfig",
    "get_openai_config",
    "get_deepgram_config",
    "get_storage_config",
    "get_pipeline_config",
    "describe_active_models",
]
