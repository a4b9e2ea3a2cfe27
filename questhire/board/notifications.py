"""
Transient user notifications (toasts)
"""
import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol

DEFAULT_DISPLAY_SECONDS = 3.0


class Notifier(Protocol):
    """Fire-and-forget notification sink"""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass(frozen=True)
class Toast:
    kind: str
    message: str


class ToastNotifier:
    """
    Shows one toast at a time and clears it after a fixed duration.

    A new toast replaces the current one and restarts the timer. Must be used
    from a running event loop.
    """

    def __init__(self, duration: float = DEFAULT_DISPLAY_SECONDS):
        self.duration = duration
        self.current: Optional[Toast] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    def success(self, message: str) -> None:
        self._show(Toast("success", message))

    def error(self, message: str) -> None:
        self._show(Toast("error", message))

    def clear(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.current = None

    def _show(self, toast: Toast) -> None:
        self.clear()
        self.current = toast
        self._timer = asyncio.get_running_loop().call_later(self.duration, self.clear)
