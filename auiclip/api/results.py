from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from auiclip.api.audio_types import PcmAudio


@dataclass(frozen=True)
class DecodeResult:
    """Ergebnis des Media-Decoders: entweder ein Clip oder ein Fehlergrund."""
    status: Literal["ok", "failed"]
    clip: Optional[PcmAudio] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, clip: Optional[PcmAudio]) -> "DecodeResult":
        return cls(status="ok", clip=clip)

    @classmethod
    def failed(cls, reason: Optional[str]) -> "DecodeResult":
        return cls(status="failed", reason=reason)

    @property
    def success(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class PlaybackOutcome:
    """
    Nicht-fatales Ergebnis eines Aufrufs:
      - "played":      Clip an die Senke übergeben, Wiedergabe gestartet
      - "unavailable": Decoder meldete einen Transportfehler (geloggt, kein raise)
    Fatale Fehler laufen dagegen als AudioLoadError zum Aufrufer.
    """
    status: Literal["played", "unavailable"]
    identifier: str
    scratch_path: Optional[Path] = None
    duration: float = 0.0
    reason: Optional[str] = None

    @classmethod
    def make_played(cls, identifier: str, scratch_path: Path, duration: float) -> "PlaybackOutcome":
        return cls(status="played", identifier=identifier,
                   scratch_path=scratch_path, duration=duration)

    @classmethod
    def make_unavailable(cls, identifier: str, scratch_path: Optional[Path],
                         reason: str) -> "PlaybackOutcome":
        return cls(status="unavailable", identifier=identifier,
                   scratch_path=scratch_path, reason=reason)

    @property
    def played(self) -> bool:
        return self.status == "played"

    @property
    def unavailable(self) -> bool:
        return self.status == "unavailable"
