"""
AUI-Clip: spielt Audio aus ``data:``-URLs (base64) über eine Ausgabe-Senke ab.
"""
from auiclip.api.audio_types import AudioType, PcmAudio
from auiclip.api.errors import AudioLoadError
from auiclip.api.results import PlaybackOutcome
from auiclip.runtime.loader import DataUrlAudioLoader

__all__ = [
    "AudioLoadError",
    "AudioType",
    "DataUrlAudioLoader",
    "PcmAudio",
    "PlaybackOutcome",
]

__version__ = "0.1.0"
