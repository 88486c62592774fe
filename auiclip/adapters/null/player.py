from __future__ import annotations

import logging
from typing import Optional

from auiclip.api.audio_types import PcmAudio

log = logging.getLogger("auiclip.player")


class NullPlayerAdapter:
    """
    Stumme Senke (headless / --sink null): merkt sich Clip und play()-Aufrufe,
    gibt aber nichts aus.
    """

    def __init__(self) -> None:
        self._clip: Optional[PcmAudio] = None
        self.play_count = 0

    @property
    def clip(self) -> Optional[PcmAudio]:
        return self._clip

    def set_clip(self, clip: PcmAudio) -> None:
        self._clip = clip

    def play(self) -> None:
        if self._clip is None:
            return
        self.play_count += 1
        log.info("Null sink: would play %.2fs (%d Hz, %d ch)",
                 self._clip.duration, self._clip.rate, self._clip.channels)

    @property
    def is_playing(self) -> bool:
        return False

    async def wait_until_done(self) -> None:
        return

    async def stop(self) -> None:
        return
