"""
AUI-Clip entry point.

Reads a data: URL (argument, '@file' or stdin) and plays it through the
selected sink.
- AUI_SINK=pc    (default, sound card)
- AUI_SINK=null  (silent)
"""
from __future__ import annotations
import sys

from auiclip.runtime.core import main

if __name__ == "__main__":
    sys.exit(main())
