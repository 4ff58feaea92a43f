"""
Local output directories for pipeline artifacts.

Every stage that writes to disk receives an ``OutputDirectory`` instead of
creating folders itself. ``ensure()`` is create-if-absent, so there is nothing
to release afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .config import StorageConfig, get_storage_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputDirectory:
    """A directory-scoped write target, created on first use."""

    root: Path

    @classmethod
    def at(cls, path: Union[str, Path]) -> "OutputDirectory":
        return cls(Path(path).expanduser())

    def ensure(self) -> Path:
        """Create the directory if needed and return it."""
        if not self.root.is_dir():
            self.root.mkdir(parents=True, exist_ok=True)
            logger.debug("Created output directory: %s", self.root)
        return self.root

    def path_for(self, filename: str) -> Path:
        """Return the path of ``filename`` inside the (ensured) directory."""
        return self.ensure() / filename

    def write_text(self, filename: str, content: str) -> Path:
        """Write UTF-8 text, replacing any existing file of the same name."""
        path = self.path_for(filename)
        path.write_text(content, encoding="utf-8")
        return path


@dataclass(frozen=True)
class Workspace:
    """The three scoped directories used by a pipeline run."""

    audio: OutputDirectory
    transcripts: OutputDirectory
    analyses: OutputDirectory

    @classmethod
    def from_config(cls, cfg: StorageConfig | None = None) -> "Workspace":
        cfg = cfg or get_storage_config()
        return cls(
            audio=OutputDirectory.at(cfg.audio_dir),
            transcripts=OutputDirectory.at(cfg.transcript_dir),
            analyses=OutputDirectory.at(cfg.analysis_dir),
        )

    @classmethod
    def under(cls, base: Union[str, Path]) -> "Workspace":
        """Lay out all three directories below a single base path."""
        base_path = Path(base)
        return cls(
            audio=OutputDirectory(base_path / "video"),
            transcripts=OutputDirectory(base_path / "transcription"),
            analyses=OutputDirectory(base_path / "vsl-analysis"),
        )


__all__ = ["OutputDirectory", "Workspace"]
