"""
Media utilities for resolving and downloading the audio track of a VSL video.

Stream metadata comes from yt-dlp (no download through yt-dlp itself); the
selected audio-only encoding is then streamed to disk with requests.
"""

from __future__ import annotations

import logging
import re
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence

import requests
import yt_dlp

from .storage import OutputDirectory

logger = logging.getLogger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
DEFAULT_CONTAINER = "webm"
DEFAULT_CHUNK_SIZE = 64 * 1024

_UNSAFE_TITLE_CHARS = re.compile(r"[^A-Za-z0-9_\- ]")
_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class AudioFormat:
    """One encoding offered by the streaming provider."""

    format_id: str
    has_audio: bool
    has_video: bool
    audio_bitrate: Optional[float] = None
    container: Optional[str] = None
    content_length: Optional[int] = None
    url: Optional[str] = None
    http_headers: Dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class VideoInfo:
    """Title and available encodings of a video."""

    video_id: str
    title: str
    formats: Sequence[AudioFormat]


class NoAudioFormatsError(ValueError):
    """Raised when a video offers no audio-only encoding."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(f"No audio-only formats available for video {video_id}")


class AudioStreamProvider(Protocol):
    """Narrow interface to a video streaming service."""

    def resolve_formats(self, video_id: str) -> VideoInfo:
        ...

    def open_audio_stream(self, video_id: str, fmt: AudioFormat) -> Iterator[bytes]:
        """Yield audio chunks; the iterator must support close()."""
        ...


def sanitize_title(title: str) -> str:
    """Make a video title safe for use in a file name."""
    stripped = _UNSAFE_TITLE_CHARS.sub("", title)
    return _WHITESPACE_RUN.sub("_", stripped)


def video_id_tag(video_id: str) -> str:
    """Bracketed id suffix; sanitized titles never contain brackets."""
    return f"_[{video_id}]"


def audio_file_name(title: str, video_id: str, container: Optional[str]) -> str:
    return f"{sanitize_title(title)}{video_id_tag(video_id)}.{container or DEFAULT_CONTAINER}"


def audio_only_formats(formats: Iterable[AudioFormat]) -> List[AudioFormat]:
    return [fmt for fmt in formats if fmt.has_audio and not fmt.has_video]


def select_best_audio(video_id: str, formats: Iterable[AudioFormat]) -> AudioFormat:
    """
    Pick the audio-only encoding with the highest bitrate.

    A missing bitrate counts as 0; on ties the first candidate wins.

    Raises:
        NoAudioFormatsError: If no audio-only encoding exists.
    """
    candidates = audio_only_formats(formats)
    if not candidates:
        raise NoAudioFormatsError(video_id)
    # max() keeps the first of equal elements
    return max(candidates, key=lambda fmt: fmt.audio_bitrate or 0)


def _format_from_ytdlp(raw: Dict[str, Any]) -> AudioFormat:
    """Convert a yt-dlp format dict into an AudioFormat."""
    acodec = raw.get("acodec")
    vcodec = raw.get("vcodec")
    return AudioFormat(
        format_id=str(raw.get("format_id") or ""),
        has_audio=acodec not in (None, "none"),
        has_video=vcodec not in (None, "none"),
        audio_bitrate=raw.get("abr"),
        container=raw.get("ext"),
        content_length=raw.get("filesize") or raw.get("filesize_approx"),
        url=raw.get("url"),
        http_headers=dict(raw.get("http_headers") or {}),
    )


class YtDlpStreamProvider:
    """
    Streaming provider backed by yt-dlp metadata extraction.

    Usage:
        provider = YtDlpStreamProvider()
        info = provider.resolve_formats("dQw4w9WgXcQ")
        for chunk in provider.open_audio_stream(info.video_id, info.formats[0]):
            ...
    """

    def __init__(
        self,
        *,
        timeout: float = 300.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._session = session or requests.Session()

    def resolve_formats(self, video_id: str) -> VideoInfo:
        opts = {"quiet": True, "no_warnings": True, "skip_download": True}
        with yt_dlp.YoutubeDL(opts) as ydl:
            info = ydl.extract_info(YOUTUBE_WATCH_URL.format(video_id=video_id), download=False)
        formats = [_format_from_ytdlp(raw) for raw in info.get("formats") or []]
        return VideoInfo(video_id=video_id, title=info.get("title") or video_id, formats=formats)

    def open_audio_stream(self, video_id: str, fmt: AudioFormat) -> Iterator[bytes]:
        if not fmt.url:
            raise ValueError(f"Format {fmt.format_id} of video {video_id} has no stream URL")
        with self._session.get(
            fmt.url, headers=fmt.http_headers, stream=True, timeout=self.timeout
        ) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk


def download_audio(
    video_id: str,
    provider: AudioStreamProvider,
    destination: OutputDirectory,
) -> Path:
    """
    Download the best audio-only stream of a video into ``destination``.

    A partially written file is removed if the stream or the write fails.

    Returns:
        Path of the written audio file.
    """
    info = provider.resolve_formats(video_id)
    best = select_best_audio(video_id, info.formats)
    container = best.container or DEFAULT_CONTAINER
    path = destination.path_for(audio_file_name(info.title, video_id, container))

    logger.info(
        "[%s] Downloading audio (%skbps %s): %s",
        video_id, best.audio_bitrate, container, info.title,
    )

    downloaded = 0
    next_report = 10
    try:
        stream = provider.open_audio_stream(video_id, best)
        with closing(stream), path.open("wb") as handle:
            for chunk in stream:
                handle.write(chunk)
                downloaded += len(chunk)
                if best.content_length:
                    percent = downloaded * 100 / best.content_length
                    if percent >= next_report:
                        logger.info("[%s] %.1f%% downloaded", video_id, percent)
                        next_report = (int(percent) // 10 + 1) * 10
    except Exception:
        path.unlink(missing_ok=True)
        raise

    logger.info("[%s] Downloaded %s (%d bytes)", video_id, path.name, downloaded)
    return path


__all__ = [
    "AudioFormat",
    "VideoInfo",
    "AudioStreamProvider",
    "NoAudioFormatsError",
    "YtDlpStreamProvider",
    "sanitize_title",
    "video_id_tag",
    "audio_file_name",
    "audio_only_formats",
    "select_best_audio",
    "download_audio",
]
