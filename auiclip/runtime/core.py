# auiclip/runtime/core.py
from __future__ import annotations
import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, TextIO

from auiclip.adapters.factory import SINKS, make_sink
from auiclip.api.errors import AudioLoadError
from auiclip.runtime.config import LoaderConfig
from auiclip.runtime.loader import DataUrlAudioLoader

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_UNAVAILABLE = 3
EXIT_INTERRUPTED = 130


# ---------------------------
# Logging (OO)
# ---------------------------
@dataclass(frozen=True)
class LogConfig:
    level: int = logging.INFO
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: Optional[str] = None

    @classmethod
    def from_name(cls, name: Optional[str]) -> "LogConfig":
        level = logging.getLevelName((name or "INFO").upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level '{name}'")
        return cls(level=level)


class LoggerFactory:
    def __init__(self, cfg: LogConfig) -> None:
        self._cfg = cfg

    def configure_root(self) -> None:
        logging.basicConfig(level=self._cfg.level,
                            format=self._cfg.fmt,
                            datefmt=self._cfg.datefmt)

    def get(self, name: str) -> logging.Logger:
        return logging.getLogger(name)


# ---------------------------
# Runtime-Konfiguration (OO)
# ---------------------------
@dataclass(frozen=True)
class CoreConfig:
    source: str = "-"
    identifier: str = "cli"
    sink: str = "pc"
    log_level: str = "INFO"
    wait: bool = True

    @classmethod
    def from_argv(cls, argv: Optional[Sequence[str]] = None) -> "CoreConfig":
        parser = argparse.ArgumentParser(prog="auiclip",
                                         description="Play base64 audio from a data: URL")
        parser.add_argument("source", nargs="?", default=cls.__dataclass_fields__["source"].default,
                            help="data: URL, '@path' to read it from a file, or '-' for stdin (default)")
        parser.add_argument("--identifier", default=cls.__dataclass_fields__["identifier"].default,
                            help="Label used in log messages (default: cli)")
        parser.add_argument("--sink", default=os.getenv("AUI_SINK", cls.__dataclass_fields__["sink"].default),
                            choices=sorted(SINKS), help="Audio sink (default: pc)")
        parser.add_argument("--log-level", default=os.getenv("AUI_LOG_LEVEL", cls.__dataclass_fields__["log_level"].default),
                            help="Logging level (default: INFO)")
        parser.add_argument("--no-wait", dest="wait", action="store_false",
                            help="Do not wait for playback to finish")
        ns = parser.parse_args(argv)
        return cls(source=ns.source, identifier=ns.identifier, sink=ns.sink,
                   log_level=ns.log_level, wait=ns.wait)


def read_source(source: str, stdin: Optional[TextIO] = None) -> str:
    """data:-URL direkt, aus Datei ('@pfad') oder von stdin ('-') lesen."""
    if source == "-":
        return (stdin or sys.stdin).read().strip()
    if source.startswith("@"):
        return Path(source[1:]).read_text(encoding="utf-8").strip()
    return source.strip()


# ---------------------------
# Core-Anwendung (OO)
# ---------------------------
class CoreApp:
    def __init__(self, cfg: CoreConfig, logger_factory: LoggerFactory,
                 loader: Optional[DataUrlAudioLoader] = None) -> None:
        self._cfg = cfg
        self._log = logger_factory.get("auiclip")
        self._loader = loader

    def run(self) -> int:
        try:
            return asyncio.run(self._amain())
        except KeyboardInterrupt:
            return EXIT_INTERRUPTED
        except AudioLoadError:
            # bereits vom Loader geloggt
            return EXIT_FAILED
        except Exception:
            self._log.exception("Fatal in CoreApp")
            return EXIT_FAILED

    async def _amain(self) -> int:
        self._log.debug("Config: source=%s identifier=%s sink=%s",
                        "<stdin>" if self._cfg.source == "-" else self._cfg.source[:32],
                        self._cfg.identifier, self._cfg.sink)

        data_url = read_source(self._cfg.source)
        loader = self._loader or DataUrlAudioLoader(config=LoaderConfig.from_env())
        sink = make_sink(self._cfg.sink)

        try:
            outcome = await loader.play_from_data_url(data_url, sink, self._cfg.identifier)
            if outcome.played and self._cfg.wait and hasattr(sink, "wait_until_done"):
                await sink.wait_until_done()
        finally:
            # Scratch-Dateien nicht liegen lassen, wenn der Prozess endet
            await loader.wait_for_cleanups()

        return EXIT_OK if outcome.played else EXIT_UNAVAILABLE


# ---------------------------
# main
# ---------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    cfg = CoreConfig.from_argv(argv)
    try:
        log_cfg = LogConfig.from_name(cfg.log_level)
    except ValueError as e:
        sys.stderr.write(f"[AUI-Clip] {e}\n")
        return EXIT_USAGE
    logger_factory = LoggerFactory(log_cfg)
    logger_factory.configure_root()

    app = CoreApp(cfg, logger_factory)
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
