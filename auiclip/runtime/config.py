from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from auiclip.api.audio_types import AudioType

DEFAULT_CLEANUP_DELAY = 5.0


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir())


@dataclass(frozen=True)
class LoaderConfig:
    """
    Laufzeit-Parameter des Loaders.

    Überschreibbar via Env:
      - AUI_CLIP_CLEANUP_DELAY  Sekunden bis zum Löschen der Scratch-Datei (Default: 5)
      - AUI_CLIP_TMPDIR         Verzeichnis für Scratch-Dateien (Default: System-Temp)
      - AUI_CLIP_AUDIO_TYPE     'mpeg' (Default) | 'wav'
    """
    cleanup_delay: float = DEFAULT_CLEANUP_DELAY
    temp_dir: Path = field(default_factory=_default_temp_dir)
    audio_type: AudioType = AudioType.MPEG

    @property
    def extension(self) -> str:
        return self.audio_type.extension

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "LoaderConfig":
        env = os.environ if env is None else env

        delay = env.get("AUI_CLIP_CLEANUP_DELAY", "").strip()
        tmp = env.get("AUI_CLIP_TMPDIR", "").strip()
        atype = env.get("AUI_CLIP_AUDIO_TYPE", "").strip()

        try:
            cleanup_delay = float(delay) if delay else DEFAULT_CLEANUP_DELAY
        except ValueError:
            raise ValueError(f"AUI_CLIP_CLEANUP_DELAY must be a number, got '{delay}'")
        if cleanup_delay < 0:
            raise ValueError(f"AUI_CLIP_CLEANUP_DELAY must not be negative, got {cleanup_delay}")

        return cls(
            cleanup_delay=cleanup_delay,
            temp_dir=Path(tmp) if tmp else _default_temp_dir(),
            audio_type=AudioType.parse(atype) if atype else AudioType.MPEG,
        )
