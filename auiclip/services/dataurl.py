"""
Zerlegung und Dekodierung von ``data:``-URLs.

Reihenfolge der Prüfungen (jede mit eigener Fehlermeldung):
  1. leer / None
  2. Präfix ``data:`` fehlt
  3. Komma fehlt oder steht am Ende
  4. Payload hinter dem Komma leer
  5. Zeichen außerhalb des Base64-Alphabets bzw. mehr als zwei ``=``
Erst danach wird fehlendes Padding ergänzt und dekodiert.
"""

from __future__ import annotations

import base64
import binascii
import logging
import string
from typing import Optional

from auiclip.api.errors import Base64DecodeError, InvalidBase64Error, InvalidDataUrlError

log = logging.getLogger("auiclip.dataurl")

DATA_URL_PREFIX = "data:"
PREVIEW_LENGTH = 50

_B64_ALPHABET = frozenset(string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/")


def extract_payload(data_url: Optional[str]) -> str:
    """Liefert den Teil hinter dem ersten Komma; Metadaten davor werden ignoriert."""
    if not data_url:
        raise InvalidDataUrlError("dataUrl is null or empty")

    if not data_url.startswith(DATA_URL_PREFIX):
        raise InvalidDataUrlError("Invalid data URL format (missing 'data:' prefix)")

    comma = data_url.find(",")
    if comma == -1 or comma == len(data_url) - 1:
        raise InvalidDataUrlError("Invalid data URL format (missing comma or no data after comma)")

    payload = data_url[comma + 1:]
    if not payload:
        raise InvalidDataUrlError("No base64 data found in data URL")
    return payload


def is_valid_base64(s: Optional[str]) -> bool:
    if not s:
        return False

    trimmed = s.rstrip("=")
    if any(c not in _B64_ALPHABET for c in trimmed):
        return False

    # Padding darf nur 0, 1 oder 2 Zeichen lang sein
    return len(s) - len(trimmed) <= 2


def fix_base64_padding(s: str) -> str:
    """Ergänzt fehlende ``=`` bis die Länge durch 4 teilbar ist."""
    if not s:
        return s

    missing = -len(s) % 4
    if missing:
        s = s + "=" * missing
        log.debug("Fixed Base64 padding by adding %d character(s)", missing)
    return s


def preview(s: str, limit: int = PREVIEW_LENGTH) -> str:
    return s[:limit] + "..." if len(s) > limit else s


def decode_payload(payload: str) -> bytes:
    padded = fix_base64_padding(payload)
    try:
        return base64.b64decode(padded, validate=True)
    except binascii.Error as e:
        raise Base64DecodeError(
            f"Base64 decoding failed: {e}. "
            f"Base64 data length: {len(payload)}, Preview: {preview(payload)}"
        ) from e


def decode_data_url(data_url: Optional[str]) -> bytes:
    payload = extract_payload(data_url)
    if not is_valid_base64(payload):
        raise InvalidBase64Error("Extracted string is not valid Base64")
    return decode_payload(payload)
