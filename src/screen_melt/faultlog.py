"""faulthandler integration for crash diagnostics."""

from __future__ import annotations

import faulthandler
import threading
import time
from pathlib import Path
from typing import Optional, TextIO

_DUMP_FILE: Optional[TextIO] = None
_DUMP_PATH: Optional[Path] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Enable faulthandler and return the crash dump path."""
    dump_path = log_path.parent / "crashdump.log"
    try:
        dump_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(dump_path, "a", encoding="utf-8")
    except OSError:
        return dump_path
    with _LOCK:
        global _DUMP_FILE, _DUMP_PATH
        _DUMP_FILE = handle
        _DUMP_PATH = dump_path
    try:
        faulthandler.enable(file=handle, all_threads=True)
    except (RuntimeError, ValueError):
        pass
    return dump_path


def _write_header(label: str) -> None:
    handle = _DUMP_FILE
    if not handle:
        return
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
    try:
        handle.write(f"\n[{stamp}] {label}\n")
        handle.flush()
    except (OSError, ValueError):
        pass


def dump_threads(label: str) -> None:
    """Write a labelled stack dump of all threads to the crash dump file."""
    _write_header(label)
    handle = _DUMP_FILE
    if not handle:
        return
    try:
        faulthandler.dump_traceback(file=handle, all_threads=True)
        handle.flush()
    except (OSError, ValueError, RuntimeError):
        pass
