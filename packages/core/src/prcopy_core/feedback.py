"""UI feedback for a copy button: idle -> pending -> success|error -> idle.

The terminal states always revert on a timer; the control is disabled from
the moment the effect starts until it is back to idle, so at most one effect
runs per controller.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from prcopy_core.diagnostics import Diagnostics

SUCCESS_LABEL = "Copied!"
ERROR_LABEL = "Copy failed"
SUCCESS_DELAY = 1.5
ERROR_DELAY = 2.0

Effect = Callable[[], Awaitable[object]]


class CopyState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class CopyControl:
    """The label/disabled pair of one button. *on_change* fires after every update."""

    label: str
    disabled: bool = False
    on_change: Optional[Callable[["CopyControl"], None]] = None

    def update(self, label: str, disabled: bool) -> None:
        self.label = label
        self.disabled = disabled
        if self.on_change is not None:
            self.on_change(self)


class CopyFeedbackController:
    def __init__(
        self,
        control: CopyControl,
        *,
        success_label: str = SUCCESS_LABEL,
        error_label: str = ERROR_LABEL,
        pending_label: str | None = None,
        success_delay: float = SUCCESS_DELAY,
        error_delay: float = ERROR_DELAY,
        diagnostics: Diagnostics | None = None,
    ):
        self.control = control
        self.success_label = success_label
        self.error_label = error_label
        self.pending_label = pending_label
        self.success_delay = success_delay
        self.error_delay = error_delay
        self._diagnostics = diagnostics or Diagnostics()
        self._state = CopyState.IDLE
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> CopyState:
        return self._state

    def trigger(self, effect: Effect) -> asyncio.Task | None:
        """Start one copy cycle on the running loop.

        Returns the cycle's task, or None when a cycle is already in flight
        and the trigger was ignored. Must be called from within a running
        event loop.
        """
        if self._state is not CopyState.IDLE:
            return None
        resting_label = self.control.label
        self._state = CopyState.PENDING
        self.control.update(self.pending_label or resting_label, disabled=True)
        self._task = asyncio.get_running_loop().create_task(self._run(effect, resting_label))
        return self._task

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _run(self, effect: Effect, resting_label: str) -> None:
        try:
            try:
                await effect()
            except Exception as e:
                self._diagnostics.error("Failed to copy", error=repr(e))
                self._state = CopyState.ERROR
                self.control.update(self.error_label, disabled=True)
                await asyncio.sleep(self.error_delay)
            else:
                self._state = CopyState.SUCCESS
                self.control.update(self.success_label, disabled=True)
                await asyncio.sleep(self.success_delay)
        finally:
            self._state = CopyState.IDLE
            self.control.update(resting_label, disabled=False)
