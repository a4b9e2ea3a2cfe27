"""
Toast notifier tests
"""
import asyncio

import pytest

from questhire.board.notifications import Toast, ToastNotifier


@pytest.mark.asyncio
async def test_toast_clears_after_duration():
    notifier = ToastNotifier(duration=0.01)

    notifier.error("Could not update the status. Please try again.")
    assert notifier.current == Toast("error", "Could not update the status. Please try again.")

    await asyncio.sleep(0.05)
    assert notifier.current is None


@pytest.mark.asyncio
async def test_new_toast_replaces_current():
    notifier = ToastNotifier(duration=0.2)

    notifier.error("first")
    await asyncio.sleep(0.12)
    notifier.success("second")
    await asyncio.sleep(0.12)

    # the timer restarted with the second toast
    assert notifier.current == Toast("success", "second")

    notifier.clear()
    assert notifier.current is None


def test_default_duration():
    assert ToastNotifier().duration == 3.0
