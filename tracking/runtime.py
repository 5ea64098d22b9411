"""Runtime helpers for counting how often domain functions execute.

Counts live in memory. ``configure(persist=True)`` turns on flushing to a JSON
file (``function_call_counts.json`` beside this module unless another path is
given) after every recorded call; the service entry point wires this to
``AppSettings.tracking_persist``.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict, Optional, Union

_LOCK = threading.RLock()
_DEFAULT_COUNTS_FILE = Path(__file__).resolve().parent / "function_call_counts.json"
_COUNTS: Dict[str, int] = {}
_counts_file: Path = _DEFAULT_COUNTS_FILE
_persist = False


def configure(persist: bool, counts_file: Optional[Union[str, Path]] = None) -> None:
    """Enable or disable persistence.

    Enabling merges any counts already on disk so a restarted run keeps adding
    to the same profile.
    """
    global _counts_file, _persist

    with _LOCK:
        _counts_file = Path(counts_file) if counts_file is not None else _DEFAULT_COUNTS_FILE
        _persist = bool(persist)
        if _persist:
            _merge_from_disk_locked()


def is_persisting() -> bool:
    with _LOCK:
        return _persist


def counts_file() -> Path:
    with _LOCK:
        return _counts_file


def _merge_from_disk_locked() -> None:
    if not _counts_file.exists():
        return

    try:
        data = json.loads(_counts_file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return

    if not isinstance(data, dict):
        return

    for name, raw_count in data.items():
        try:
            count = int(raw_count)
        except (TypeError, ValueError):
            continue
        if name and count > 0:
            _COUNTS[str(name)] = max(_COUNTS.get(str(name), 0), count)


def _flush_locked() -> None:
    """Replace the counts file atomically. Caller holds ``_LOCK``."""
    _counts_file.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(
        "w", encoding="utf-8", dir=_counts_file.parent, delete=False
    ) as handle:
        json.dump(_COUNTS, handle, sort_keys=True)
        handle.write("\n")
        tmp_path = Path(handle.name)

    try:
        tmp_path.replace(_counts_file)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def t(func_name: str) -> None:
    """Record the provided function name each time it runs."""
    if not func_name:
        return

    with _LOCK:
        _COUNTS[func_name] = _COUNTS.get(func_name, 0) + 1
        if _persist:
            try:
                _flush_locked()
            except OSError:
                # a failed write turns persistence off for the rest of the run
                _disable_after_write_failure_locked()


def _disable_after_write_failure_locked() -> None:
    global _persist
    _persist = False


def snapshot() -> Dict[str, int]:
    """Return a copy of the current call counts."""
    with _LOCK:
        return dict(_COUNTS)


def reset() -> None:
    """Forget every recorded call."""
    with _LOCK:
        _COUNTS.clear()
