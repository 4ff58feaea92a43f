"""
Video record stores used for the pipeline's existence check.

A record means the video was transcribed before; the pipeline then reuses its
transcript instead of downloading and transcribing again.
"""

from __future__ import annotations

import glob
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

from .media import video_id_tag
from .storage import OutputDirectory

logger = logging.getLogger(__name__)

TRANSCRIPT_SUFFIX = "_transcript.txt"

_SANITIZED_TITLE = re.compile(r"[A-Za-z0-9_\-]*")


@dataclass(frozen=True)
class VideoRecord:
    """A previously processed video (read-only to the pipeline)."""

    video_id: str
    transcript: str
    transcript_path: Optional[str] = None


class VideoRecordStore(Protocol):
    def lookup(self, video_id: str) -> Optional[VideoRecord]:
        ...


class InMemoryRecordStore:
    """Dict-backed store, handy for callers that track records themselves."""

    def __init__(self, records: Optional[Dict[str, VideoRecord]] = None):
        self._records: Dict[str, VideoRecord] = dict(records or {})

    def add(self, record: VideoRecord) -> None:
        self._records[record.video_id] = record

    def lookup(self, video_id: str) -> Optional[VideoRecord]:
        return self._records.get(video_id)


class TranscriptDirectoryStore:
    """
    Treats a transcript file written by an earlier run as the video's record.

    Transcript files are named ``<title>_[<video_id>]_transcript.txt``. The
    title part is a sanitized title, so it never contains brackets and the id
    is matched exactly without knowing the title.
    """

    def __init__(self, directory: OutputDirectory):
        self.directory = directory

    def _find(self, video_id: str) -> Optional[Path]:
        root = self.directory.root
        if not root.is_dir():
            return None
        suffix = f"{video_id_tag(video_id)}{TRANSCRIPT_SUFFIX}"
        matches = sorted(
            path
            for path in root.glob("*" + glob.escape(suffix))
            if _SANITIZED_TITLE.fullmatch(path.name[: -len(suffix)])
        )
        return matches[0] if matches else None

    def lookup(self, video_id: str) -> Optional[VideoRecord]:
        path = self._find(video_id)
        if path is None:
            return None
        logger.debug("[%s] Found existing transcript: %s", video_id, path)
        return VideoRecord(
            video_id=video_id,
            transcript=path.read_text(encoding="utf-8"),
            transcript_path=str(path),
        )


__all__ = [
    "VideoRecord",
    "VideoRecordStore",
    "InMemoryRecordStore",
    "TranscriptDirectoryStore",
    "TRANSCRIPT_SUFFIX",
]
