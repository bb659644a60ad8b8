"""
app_log.py
Status messages for whatever front end is showing the packer.

A front end registers a log function with set_app_log(); packer code calls
app_log(msg) and the message ends up in that front end. With nothing
registered app_log() is a no-op (the CLI relies on the logging module).

Thread safety: messages from a worker thread are queued and drained on the
thread that registered the log function via a periodic after() callback.
"""

from __future__ import annotations

import queue
import threading
from typing import Callable

_log_fn: Callable[[str], None] | None = None
_after_fn: Callable | None = None
_main_thread_id: int | None = None
_log_queue: queue.Queue[str] = queue.Queue()

_DRAIN_INTERVAL_MS = 50


def drain_log_queue() -> None:
    """Deliver queued messages on the UI thread, then reschedule."""
    if _log_fn is None:
        return
    try:
        while True:
            try:
                msg = _log_queue.get_nowait()
            except queue.Empty:
                break
            _log_fn(msg)
    finally:
        if _after_fn is not None:
            _after_fn(_DRAIN_INTERVAL_MS, drain_log_queue)


def set_app_log(log_fn: Callable[[str], None], after_fn: Callable | None = None) -> None:
    """Register the front end's log function and its main-thread scheduler.

    after_fn(ms, callback) is e.g. a Tk widget's after(); without it queued
    messages are only delivered by calling drain_log_queue() directly.
    """
    global _log_fn, _after_fn, _main_thread_id
    _log_fn = log_fn
    _after_fn = after_fn
    _main_thread_id = threading.current_thread().ident
    if after_fn is not None:
        after_fn(0, drain_log_queue)


def clear_app_log() -> None:
    global _log_fn, _after_fn, _main_thread_id
    _log_fn = None
    _after_fn = None
    _main_thread_id = None


def app_log(message: str) -> None:
    """Send a message to the registered front end (thread-safe)."""
    if _log_fn is None:
        return
    if threading.current_thread().ident == _main_thread_id:
        _log_fn(message)
    else:
        _log_queue.put_nowait(message)
