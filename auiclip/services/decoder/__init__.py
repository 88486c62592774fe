from .miniaudio_decoder import MiniaudioDecoder

__all__ = ["MiniaudioDecoder"]
