from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict

import miniaudio

from auiclip.api.audio_types import AudioType, PcmAudio
from auiclip.api.results import DecodeResult

log = logging.getLogger("auiclip.decoder")


class MiniaudioDecoder:
    """
    Media-Decoder auf Basis von miniaudio:
      - liest MP3/WAV-Dateien als s16-PCM (Kanäle/Samplerate wie in der Datei)
      - blockierendes Lesen läuft im Worker-Thread, der Aufrufer wartet per await
      - Lese-/Dekodierfehler werden als DecodeResult.failed gemeldet, nicht geworfen

    Nicht dekodierbare Inhalte (z. B. Müll-Bytes als .mp3) meldet miniaudio als
    DecodeError; sie landen daher im nicht-fatalen "unavailable"-Pfad des Loaders,
    nicht im InvalidClipError-Pfad (der greift nur bei leerem Clip).
    """

    def __init__(self) -> None:
        self._readers: Dict[AudioType, Callable[[str], miniaudio.DecodedSoundFile]] = {
            AudioType.MPEG: miniaudio.mp3_read_file_s16,
            AudioType.WAV: miniaudio.wav_read_file_s16,
        }

    async def decode(self, path: Path, audio_type: AudioType) -> DecodeResult:
        return await asyncio.to_thread(self._decode_blocking, Path(path), audio_type)

    def _decode_blocking(self, path: Path, audio_type: AudioType) -> DecodeResult:
        reader = self._readers.get(audio_type)
        if reader is None:
            return DecodeResult.failed(f"Unsupported audio type: {audio_type.name}")

        try:
            decoded = reader(str(path))
        except (miniaudio.MiniaudioError, OSError) as e:
            log.debug("miniaudio failed on %s: %s", path, e)
            return DecodeResult.failed(f"{type(e).__name__}: {e}")

        clip = PcmAudio(
            data=decoded.samples.tobytes(),
            rate=int(decoded.sample_rate),
            channels=int(decoded.nchannels),
            width=int(decoded.sample_width),
        )
        log.debug("Decoded %s: rate=%d ch=%d frames=%d",
                  path.name, clip.rate, clip.channels, clip.frames)
        return DecodeResult.ok(clip)
