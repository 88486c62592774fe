from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from auiclip.api.audio_types import AudioType, PcmAudio
from auiclip.api.results import DecodeResult


@runtime_checkable
class PlaybackSink(Protocol):
    """
    Extern verwaltete Audio-Ausgabe. Der Loader schreibt nur hinein
    (Clip setzen, Wiedergabe starten), er erzeugt oder schließt sie nie.
    """

    @property
    def clip(self) -> Optional[PcmAudio]: ...

    def set_clip(self, clip: PcmAudio) -> None: ...

    def play(self) -> None: ...


class MediaDecoder(Protocol):
    async def decode(self, path: Path, audio_type: AudioType) -> DecodeResult:
        """Decodes a local file of the given type into a playable clip (or a failure reason)."""
        ...
