"""Handlers that split log output into per-module files.

First-party records (``core.*``, ``testing.*``) are written by
``ModuleDispatchHandler`` to one file per MODULE_TO_LOG entry; everything
else (httpx, langsmith, pypdf, ...) lands in ``run-3p.log`` via
``ThirdPartyHandler``. Both rotate on the first write of each run.
"""

import logging
from pathlib import Path
from typing import TextIO

from core.logging.run_manager import is_first_party, module_to_log_name, should_rotate


def _rotate_log_file(log_dir: Path, log_name: str, stream: TextIO | None) -> TextIO:
    """Move ``name.log`` to ``name.previous.log`` and open a fresh file."""
    current = log_dir / f"{log_name}.log"
    previous = log_dir / f"{log_name}.previous.log"

    if stream:
        stream.close()
    if previous.exists():
        previous.unlink()
    if current.exists():
        current.rename(previous)

    return current.open("a", encoding="utf-8")


class ModuleDispatchHandler(logging.Handler):
    """One handler routing first-party records to per-module files.

    File handles are cached and opened lazily, so a single handler serves
    every module without one FileHandler per log name. Third-party records
    are ignored.
    """

    def __init__(self, log_dir: Path):
        super().__init__()
        self.log_dir = log_dir
        self._file_cache: dict[str, TextIO] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        return is_first_party(record.name) and super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            log_name = module_to_log_name(record.name)
            if should_rotate(log_name):
                stream = self._file_cache.pop(log_name, None)
                self._file_cache[log_name] = _rotate_log_file(self.log_dir, log_name, stream)

            file = self._get_or_open_file(log_name)
            file.write(self.format(record) + "\n")
            file.flush()
        except Exception:
            self.handleError(record)

    def _get_or_open_file(self, log_name: str) -> TextIO:
        if log_name not in self._file_cache:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            path = self.log_dir / f"{log_name}.log"
            self._file_cache[log_name] = path.open("a", encoding="utf-8")
        return self._file_cache[log_name]

    def close(self) -> None:
        self.acquire()
        try:
            for file in self._file_cache.values():
                file.close()
            self._file_cache.clear()
        finally:
            self.release()
        super().close()


class ThirdPartyHandler(logging.FileHandler):
    """Collects third-party library records in ``run-3p.log``."""

    LOG_NAME = "run-3p"

    def __init__(self, log_dir: Path, **kwargs):
        self.log_dir = log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        super().__init__(log_dir / f"{self.LOG_NAME}.log", mode="a", encoding="utf-8", **kwargs)

    def filter(self, record: logging.LogRecord) -> bool:
        return not is_first_party(record.name) and super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if should_rotate(self.LOG_NAME):
                self.stream = _rotate_log_file(self.log_dir, self.LOG_NAME, self.stream)
            super().emit(record)
        except Exception:
            self.handleError(record)
