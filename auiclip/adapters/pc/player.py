# auiclip/adapters/pc/player.py
from __future__ import annotations
import asyncio
import logging
import threading
from typing import Any, Optional

from auiclip.api.audio_types import PcmAudio

log = logging.getLogger("auiclip.player")


class PcPlayerAdapter:
    """
    PCM-Player für den PC (Soundkarte via simpleaudio):
      - set_clip() hängt einen Clip an (laufende Wiedergabe wird gestoppt)
      - play() startet die Wiedergabe und kehrt sofort zurück
      - wait_until_done() wartet asynchron auf das Ende
    """

    def __init__(self) -> None:
        # Lazy import, damit Tests/Headless-Betrieb ohne Audio-Backend laufen
        try:
            import simpleaudio as sa  # type: ignore
        except Exception as e:
            raise RuntimeError(f"PcPlayerAdapter: simpleaudio nicht installiert? pip install simpleaudio ({e})")
        self._sa = sa

        self._lock = threading.Lock()
        self._clip: Optional[PcmAudio] = None
        self._play_obj: Optional[Any] = None

    @property
    def clip(self) -> Optional[PcmAudio]:
        return self._clip

    def set_clip(self, clip: PcmAudio) -> None:
        self._stop_current()
        self._clip = clip

    def play(self) -> None:
        """
        Startet den aktuellen Clip von vorn. Ohne Clip passiert nichts.
        """
        clip = self._clip
        if clip is None:
            return

        self._stop_current()

        # simpleaudio erwartet: (bytes, num_channels, bytes_per_sample, sample_rate)
        play_obj = self._sa.play_buffer(
            clip.data,
            num_channels=max(1, int(clip.channels)),
            bytes_per_sample=max(1, int(clip.width)),
            sample_rate=int(clip.rate),
        )
        with self._lock:
            self._play_obj = play_obj

    @property
    def is_playing(self) -> bool:
        with self._lock:
            po = self._play_obj
        return po is not None and po.is_playing()

    async def wait_until_done(self) -> None:
        """
        Wartet bis die aktuell laufende Wiedergabe fertig ist (oder gestoppt wurde).
        """
        with self._lock:
            po = self._play_obj
        if po is None:
            return
        await asyncio.to_thread(po.wait_done)

    async def stop(self) -> None:
        self._stop_current()

    def _stop_current(self) -> None:
        with self._lock:
            po = self._play_obj
            self._play_obj = None
        if po is not None:
            try:
                po.stop()
            except Exception:
                log.exception("Stopping playback failed")
