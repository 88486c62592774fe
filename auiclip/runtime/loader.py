# auiclip/runtime/loader.py
"""
Data-URL-Audio-Loader.

Ablauf pro Aufruf (ein kooperativer asyncio-Fluss, zwei await-Punkte):
  validieren → base64 dekodieren → Scratch-Datei schreiben
  → await Media-Decoder → Clip prüfen → Senke setzen + play()
  → Löschen der Scratch-Datei nach fester Verzögerung (eigener Task)

Fatale Fehler (Eingabe, Base64, I/O, ungültiger Clip) werden als
AudioLoadError geworfen. Transportfehler des Decoders werden nur geloggt
und als PlaybackOutcome "unavailable" zurückgegeben.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Optional, Set

from auiclip.api.errors import (
    AudioLoadError,
    ClipMissingError,
    InvalidClipError,
    ScratchFileError,
)
from auiclip.api.player import MediaDecoder, PlaybackSink
from auiclip.api.results import PlaybackOutcome
from auiclip.runtime.config import LoaderConfig
from auiclip.services.dataurl import decode_data_url

log = logging.getLogger("auiclip.loader")


class DataUrlAudioLoader:
    def __init__(self, decoder: Optional[MediaDecoder] = None,
                 config: Optional[LoaderConfig] = None) -> None:
        if decoder is None:
            from auiclip.services.decoder.miniaudio_decoder import MiniaudioDecoder
            decoder = MiniaudioDecoder()
        self._decoder = decoder
        self._cfg = config or LoaderConfig.from_env()
        self._cleanups: Set["asyncio.Task[None]"] = set()

    @property
    def config(self) -> LoaderConfig:
        return self._cfg

    @property
    def pending_cleanups(self) -> int:
        return sum(1 for t in self._cleanups if not t.done())

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    async def play_from_data_url(self, data_url: Optional[str], sink: PlaybackSink,
                                 identifier: str) -> PlaybackOutcome:
        """
        Spielt den Base64-Payload einer data:-URL über ``sink`` ab.

        Raises:
            AudioLoadError: Eingabe-, Dekodier- oder I/O-Fehler bzw. ungültiger Clip.
                            Die Senke bleibt in diesen Fällen unverändert.
        """
        try:
            audio_bytes = decode_data_url(data_url)
        except AudioLoadError as e:
            raise self._fail(e, identifier)

        path = self._scratch_path()
        try:
            path.write_bytes(audio_bytes)
        except OSError as e:
            err = ScratchFileError(f"Failed to write audio data to temp file: {e}")
            raise self._fail(err, identifier) from e

        result = await self._decoder.decode(path, self._cfg.audio_type)

        if not result.success:
            reason = result.reason or "Unknown decoder error"
            log.error("Cannot play audio for %s: failed to load audio file - %s", identifier, reason)
            self.schedule_cleanup(path, identifier)
            return PlaybackOutcome.make_unavailable(identifier, path, reason)

        clip = result.clip
        if clip is None:
            self._warn_left_behind(path, identifier)
            raise self._fail(ClipMissingError("AudioClip is null after download"), identifier)

        # Manche Decoder scheitern still und liefern einen leeren Clip
        if clip.duration <= 0:
            self._warn_left_behind(path, identifier)
            err = InvalidClipError(
                f"Invalid audio clip (duration: {clip.duration}s). "
                f"The decoder may have failed to decode the audio format."
            )
            raise self._fail(err, identifier)

        try:
            sink.set_clip(clip)
            sink.play()
        finally:
            # auch wenn die Senke beim Start scheitert
            self.schedule_cleanup(path, identifier)
        log.info("Playing audio for %s (duration: %ss)", identifier, clip.duration)
        return PlaybackOutcome.make_played(identifier, path, clip.duration)

    def schedule_cleanup(self, path: Path, identifier: str) -> "asyncio.Task[None]":
        """Löscht ``path`` nach cleanup_delay Sekunden, ohne den Aufrufer zu blockieren."""
        task = asyncio.get_running_loop().create_task(self._cleanup_later(path, identifier))
        self._cleanups.add(task)
        task.add_done_callback(self._cleanups.discard)
        return task

    async def wait_for_cleanups(self) -> None:
        """Wartet auf alle noch ausstehenden Aufräum-Tasks."""
        while self._cleanups:
            await asyncio.gather(*list(self._cleanups))

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------
    def _scratch_path(self) -> Path:
        return Path(self._cfg.temp_dir) / f"audio_{uuid.uuid4().hex}{self._cfg.extension}"

    async def _cleanup_later(self, path: Path, identifier: str) -> None:
        try:
            await asyncio.sleep(self._cfg.cleanup_delay)
        except asyncio.CancelledError:
            # Loop endet vor Ablauf der Wartezeit (z. B. asyncio.run): sofort löschen
            self._delete_scratch(path, identifier)
            raise
        self._delete_scratch(path, identifier)

    @staticmethod
    def _delete_scratch(path: Path, identifier: str) -> None:
        try:
            if path.exists():
                path.unlink()
                log.info("Cleaned up temporary audio file for %s", identifier)
        except OSError as e:
            log.warning("Failed to cleanup temporary audio file for %s: %s", identifier, e)

    @staticmethod
    def _fail(err: AudioLoadError, identifier: str) -> AudioLoadError:
        err.identifier = identifier
        log.error("Cannot play audio for %s: %s", identifier, err.message)
        return err

    @staticmethod
    def _warn_left_behind(path: Path, identifier: str) -> None:
        # TODO: klären, ob die Datei hier bewusst als Debug-Hilfe liegen bleibt
        log.warning("Scratch file for %s is not cleaned up after decode error: %s", identifier, path)
