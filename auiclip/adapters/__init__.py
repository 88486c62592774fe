# Re-export public API for playback sinks.
from .factory import make_sink, SINKS

__all__ = [
    "make_sink",
    "SINKS",
]
