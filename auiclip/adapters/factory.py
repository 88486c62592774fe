import os
from typing import Callable, Dict, Optional

from auiclip.api.player import PlaybackSink


def _make_pc() -> PlaybackSink:
    from auiclip.adapters.pc.player import PcPlayerAdapter
    return PcPlayerAdapter()


def _make_null() -> PlaybackSink:
    from auiclip.adapters.null.player import NullPlayerAdapter
    return NullPlayerAdapter()


SINKS: Dict[str, Callable[[], PlaybackSink]] = {
    "pc": _make_pc,
    "null": _make_null,
}


def make_sink(name: Optional[str] = None) -> PlaybackSink:
    """
    Wählt die Audio-Senke.
      - AUI_SINK = 'pc' (Default, Soundkarte via simpleaudio) | 'null' (stumm)
    """
    target = (name or os.getenv("AUI_SINK", "pc")).lower()
    factory = SINKS.get(target)
    if factory is None:
        available = ", ".join(sorted(SINKS))
        raise RuntimeError(f"Audio sink '{target}' not found. Available: {available or 'none'}")
    return factory()
