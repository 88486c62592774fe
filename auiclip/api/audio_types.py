from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class AudioType(str, Enum):
    """Vom Decoder unterstützte Containerformate (Wert = Dateiendung ohne Punkt)."""
    MPEG = "mp3"
    WAV = "wav"

    @property
    def extension(self) -> str:
        return "." + self.value

    @classmethod
    def parse(cls, name: str) -> "AudioType":
        key = (name or "").strip().lower()
        for t in cls:
            if key in (t.name.lower(), t.value):
                return t
        raise ValueError(f"Unknown audio type '{name}'")


@dataclass
class PcmAudio:
    data: bytes
    rate: int
    channels: int = 1
    width: int = 2

    @property
    def frames(self) -> int:
        frame_size = self.channels * self.width
        if frame_size <= 0:
            return 0
        return len(self.data) // frame_size

    @property
    def duration(self) -> float:
        """Länge in Sekunden; 0.0 bei leeren oder kaputten Metadaten."""
        if self.rate <= 0:
            return 0.0
        return self.frames / float(self.rate)
