import asyncio
import base64
import logging
from pathlib import Path

import pytest

from auiclip.adapters.null.player import NullPlayerAdapter
from auiclip.api.audio_types import AudioType, PcmAudio
from auiclip.api.errors import (
    Base64DecodeError,
    ClipMissingError,
    InvalidBase64Error,
    InvalidClipError,
    InvalidDataUrlError,
    ScratchFileError,
)
from auiclip.api.results import DecodeResult
from auiclip.runtime.config import LoaderConfig
from auiclip.runtime.loader import DataUrlAudioLoader


def _url(raw: bytes) -> str:
    return "data:audio/mpeg;base64," + base64.b64encode(raw).decode("ascii")


class DummyDecoder:
    """Liest die Scratch-Datei zurück und liefert ihren Inhalt als 8-bit-PCM."""

    def __init__(self) -> None:
        self.calls = []

    async def decode(self, path: Path, audio_type: AudioType) -> DecodeResult:
        assert path.exists()
        self.calls.append((path, audio_type))
        await asyncio.sleep(0)
        return DecodeResult.ok(PcmAudio(data=path.read_bytes(), rate=8000, channels=1, width=1))


class FixedDecoder:
    def __init__(self, result: DecodeResult) -> None:
        self.result = result
        self.paths = []

    async def decode(self, path: Path, audio_type: AudioType) -> DecodeResult:
        self.paths.append(path)
        return self.result


def _loader(tmp_path, decoder=None, delay=0.01) -> DataUrlAudioLoader:
    cfg = LoaderConfig(cleanup_delay=delay, temp_dir=tmp_path)
    return DataUrlAudioLoader(decoder=decoder or DummyDecoder(), config=cfg)


def test_invalid_prefix_writes_no_file(tmp_path):
    loader = _loader(tmp_path)
    sink = NullPlayerAdapter()
    with pytest.raises(InvalidDataUrlError) as ei:
        asyncio.run(loader.play_from_data_url("audio/mpeg;base64,QUJD", sink, "npc-1"))
    assert ei.value.identifier == "npc-1"
    assert list(tmp_path.iterdir()) == []
    assert sink.clip is None


def test_bad_base64_writes_no_file(tmp_path):
    loader = _loader(tmp_path)
    with pytest.raises(InvalidBase64Error):
        asyncio.run(loader.play_from_data_url("data:audio/mpeg;base64,QQ===", NullPlayerAdapter(), "x"))
    assert list(tmp_path.iterdir()) == []


def test_validation_error_is_logged(tmp_path, caplog):
    loader = _loader(tmp_path)
    with caplog.at_level(logging.ERROR, logger="auiclip.loader"):
        with pytest.raises(InvalidDataUrlError):
            asyncio.run(loader.play_from_data_url("data:audio/mpeg", NullPlayerAdapter(), "npc-7"))
    assert "Cannot play audio for npc-7" in caplog.text


def test_success_plays_and_cleans_up(tmp_path):
    raw = b"\x01\x02\x03\x04" * 100
    decoder = DummyDecoder()
    loader = _loader(tmp_path, decoder, delay=0.05)
    sink = NullPlayerAdapter()

    async def scenario():
        outcome = await loader.play_from_data_url(_url(raw), sink, "npc-1")
        # direkt nach dem Start existiert die Scratch-Datei noch
        assert outcome.scratch_path.exists()
        assert loader.pending_cleanups == 1
        await loader.wait_for_cleanups()
        return outcome

    outcome = asyncio.run(scenario())
    assert outcome.played
    assert outcome.duration == pytest.approx(len(raw) / 8000)
    assert sink.play_count == 1
    assert sink.clip.data == raw
    path = decoder.calls[0][0]
    assert path.parent == tmp_path
    assert path.name.startswith("audio_") and path.suffix == ".mp3"
    assert decoder.calls[0][1] is AudioType.MPEG
    assert not path.exists()
    assert loader.pending_cleanups == 0


def test_zero_duration_clip_raises(tmp_path):
    decoder = FixedDecoder(DecodeResult.ok(PcmAudio(data=b"", rate=44100)))
    loader = _loader(tmp_path, decoder)
    sink = NullPlayerAdapter()
    with pytest.raises(InvalidClipError, match="duration: 0.0s"):
        asyncio.run(loader.play_from_data_url(_url(b"abc"), sink, "npc-2"))
    assert sink.clip is None and sink.play_count == 0
    # bekannte Lücke: Datei bleibt liegen
    assert decoder.paths[0].exists()


def test_missing_clip_raises(tmp_path):
    loader = _loader(tmp_path, FixedDecoder(DecodeResult.ok(None)))
    sink = NullPlayerAdapter()
    with pytest.raises(ClipMissingError, match="null after download"):
        asyncio.run(loader.play_from_data_url(_url(b"abc"), sink, "npc-3"))
    assert sink.clip is None


def test_transport_failure_is_logged_not_raised(tmp_path, caplog):
    decoder = FixedDecoder(DecodeResult.failed("file not found"))
    loader = _loader(tmp_path, decoder)
    sink = NullPlayerAdapter()

    async def scenario():
        outcome = await loader.play_from_data_url(_url(b"abc"), sink, "npc-4")
        await loader.wait_for_cleanups()
        return outcome

    with caplog.at_level(logging.ERROR, logger="auiclip.loader"):
        outcome = asyncio.run(scenario())

    assert outcome.unavailable and not outcome.played
    assert outcome.reason == "file not found"
    assert sink.clip is None and sink.play_count == 0
    assert "failed to load audio file - file not found" in caplog.text
    assert not decoder.paths[0].exists()


def test_write_failure_raises_scratch_file_error(tmp_path):
    loader = _loader(tmp_path / "does-not-exist")
    sink = NullPlayerAdapter()
    with pytest.raises(ScratchFileError, match="Failed to write audio data"):
        asyncio.run(loader.play_from_data_url(_url(b"abc"), sink, "npc-5"))
    assert sink.clip is None


def test_cleanup_tolerates_already_deleted_file(tmp_path, caplog):
    loader = _loader(tmp_path, delay=0.05)

    async def scenario():
        outcome = await loader.play_from_data_url(_url(b"abcd"), NullPlayerAdapter(), "npc-6")
        outcome.scratch_path.unlink()
        await loader.wait_for_cleanups()

    with caplog.at_level(logging.INFO, logger="auiclip.loader"):
        asyncio.run(scenario())
    assert "Failed to cleanup" not in caplog.text
    assert "Cleaned up" not in caplog.text


def test_cleanup_errors_are_only_warnings(tmp_path, caplog, monkeypatch):
    loader = _loader(tmp_path)

    def _boom(self, *args, **kwargs):
        raise PermissionError("locked")

    async def scenario():
        outcome = await loader.play_from_data_url(_url(b"abcd"), NullPlayerAdapter(), "npc-8")
        monkeypatch.setattr(Path, "unlink", _boom)
        await loader.wait_for_cleanups()
        return outcome

    with caplog.at_level(logging.WARNING, logger="auiclip.loader"):
        outcome = asyncio.run(scenario())
    assert outcome.played
    assert "Failed to cleanup temporary audio file for npc-8: locked" in caplog.text


def test_concurrent_calls_do_not_interfere(tmp_path):
    decoder = DummyDecoder()
    loader = _loader(tmp_path, decoder)
    payloads = {f"npc-{i}": bytes([i]) * (50 + i) for i in range(5)}
    sinks = {ident: NullPlayerAdapter() for ident in payloads}

    async def scenario():
        outcomes = await asyncio.gather(*(
            loader.play_from_data_url(_url(raw), sinks[ident], ident)
            for ident, raw in payloads.items()
        ))
        await loader.wait_for_cleanups()
        return outcomes

    outcomes = asyncio.run(scenario())
    names = {o.scratch_path.name for o in outcomes}
    assert len(names) == len(payloads)
    for ident, raw in payloads.items():
        assert sinks[ident].clip.data == raw
        assert sinks[ident].play_count == 1
    assert list(tmp_path.iterdir()) == []


class BoomSink(NullPlayerAdapter):
    def play(self) -> None:
        raise RuntimeError("device busy")


def test_scratch_file_removed_when_loop_ends_before_delay(tmp_path):
    loader = _loader(tmp_path, delay=5.0)
    outcome = asyncio.run(loader.play_from_data_url(_url(b"abcd"), NullPlayerAdapter(), "npc-9"))
    assert outcome.played
    assert list(tmp_path.iterdir()) == []


def test_sink_failure_still_cleans_up(tmp_path):
    loader = _loader(tmp_path)

    async def scenario():
        try:
            await loader.play_from_data_url(_url(b"abcd"), BoomSink(), "npc-10")
        finally:
            await loader.wait_for_cleanups()

    with pytest.raises(RuntimeError, match="device busy"):
        asyncio.run(scenario())
    assert list(tmp_path.iterdir()) == []


def test_undecodable_base64_through_loader(tmp_path, caplog):
    loader = _loader(tmp_path)
    sink = NullPlayerAdapter()
    with caplog.at_level(logging.ERROR, logger="auiclip.loader"):
        with pytest.raises(Base64DecodeError) as ei:
            asyncio.run(loader.play_from_data_url("data:,A", sink, "npc-11"))
    assert ei.value.identifier == "npc-11"
    assert "Cannot play audio for npc-11: Base64 decoding failed" in caplog.text
    assert list(tmp_path.iterdir()) == []
    assert sink.clip is None
