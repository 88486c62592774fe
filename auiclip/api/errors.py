# SPDX-License-Identifier: MIT
from __future__ import annotations

from typing import Optional


class AudioLoadError(Exception):
    """
    Base class for every fatal condition of a data-URL playback call.

    Transport failures of the media decoder are *not* AudioLoadErrors; they
    are reported through PlaybackOutcome.unavailable instead.
    """

    def __init__(self, message: str, identifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class InvalidDataUrlError(AudioLoadError):
    """Missing prefix, missing/misplaced separator or empty payload."""


class InvalidBase64Error(AudioLoadError):
    """Payload has characters outside the base64 alphabet or too much padding."""


class Base64DecodeError(AudioLoadError):
    """Payload passed the alphabet check but could not be decoded."""


class ScratchFileError(AudioLoadError):
    """Decoded bytes could not be written to the scratch file."""


class ClipMissingError(AudioLoadError):
    """Decoder reported success but produced no clip."""


class InvalidClipError(AudioLoadError):
    """Decoder produced a clip with a non-positive duration."""
