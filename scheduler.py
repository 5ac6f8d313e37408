# scheduler.py
"""
A minimal request-frame scheduler.

Callbacks are queued with request_frame() and run once, with the frame
timestamp, the next time the host loop calls run_frame(). A callback that
requests another frame while running is queued for the following frame,
so a self-rescheduling callback runs exactly once per frame.
"""
import logging
from typing import Callable, Dict

FrameCallback = Callable[[float], None]


class FrameScheduler:
    def __init__(self):
        self._callbacks: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        if self._callbacks.pop(handle, None) is not None:
            logging.debug(f"Frame request {handle} cancelled.")

    def run_frame(self, timestamp_ms: float) -> int:
        """Runs every callback queued before this frame. Returns the count."""
        due = self._callbacks
        self._callbacks = {}
        for callback in due.values():
            callback(timestamp_ms)
        return len(due)
