# postgen/progress.py
"""
Simulated progress for calls whose real duration is unknown.

    idle -> generatingText -> generatingCover -> done
    (any active phase) -> failed
    (template mode skips generatingCover)

An asyncio task ticks every `interval` seconds and moves the percentage
toward a soft ceiling in shrinking steps. It never reflects real network
progress. The percentage only goes down on entering idle or failed and only
reaches 100 on entering done.
"""
import asyncio
from typing import Callable, Optional

from postgen.config import Config, config
from postgen.logger import get_logger
from postgen.schemas import Phase, ProgressState

log = get_logger(__name__)

MAX_CEILING = 95
START_PERCENT = 5
COVER_STAGE_FLOOR = 60
STEP_DIVISOR = 6

Listener = Callable[[ProgressState], None]


def next_percent(percent: int, ceiling: int) -> int:
    """One tick: big steps early, 1-point steps near the ceiling, never past it."""
    if percent >= ceiling:
        return percent
    step = max(1, (ceiling - percent) // STEP_DIVISOR)
    return min(ceiling, percent + step)


class ProgressSimulator:
    def __init__(
        self,
        *,
        interval: Optional[float] = None,
        ceiling: Optional[int] = None,
        done_hold: Optional[float] = None,
        on_change: Optional[Listener] = None,
        cfg: Config = config,
    ):
        self._interval = interval if interval is not None else cfg.progress_tick_seconds
        self._ceiling = max(START_PERCENT, min(MAX_CEILING, ceiling if ceiling is not None else cfg.progress_ceiling))
        self._done_hold = done_hold if done_hold is not None else cfg.progress_done_hold_seconds
        self._on_change = on_change
        self._percent = 0
        self._phase = Phase.IDLE
        self._timer: Optional[asyncio.Task] = None
        self._reset_handle: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> ProgressState:
        return ProgressState(percent=self._percent, phase=self._phase)

    @property
    def percent(self) -> int:
        return self._percent

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def ceiling(self) -> int:
        return self._ceiling

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def _set(self, percent: int, phase: Phase) -> None:
        if percent == self._percent and phase == self._phase:
            return
        self._percent = percent
        self._phase = phase
        if self._on_change is not None:
            try:
                self._on_change(self.state)
            except Exception:
                log.exception("progress listener failed")

    # -------- transitions --------

    def start(self) -> None:
        """Enter generatingText (via idle) and start ticking. Needs a running loop."""
        self.close()
        self._set(0, Phase.IDLE)
        self._set(START_PERCENT, Phase.GENERATING_TEXT)
        self._timer = asyncio.get_running_loop().create_task(self._run())

    def enter_cover_stage(self) -> None:
        if self._phase is not Phase.GENERATING_TEXT:
            return
        self._set(max(self._percent, min(COVER_STAGE_FLOOR, self._ceiling)), Phase.GENERATING_COVER)

    def tick(self) -> None:
        if self._phase.active:
            self._set(next_percent(self._percent, self._ceiling), self._phase)

    def complete(self) -> None:
        """Force 100, hold it for `done_hold` seconds, then go back to idle."""
        self.close()
        self._set(100, Phase.DONE)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._reset_handle = loop.call_later(max(0.0, self._done_hold), self._reset_after_done)

    def fail(self) -> None:
        self.close()
        self._set(0, Phase.FAILED)

    def reset(self) -> None:
        self.close()
        self._set(0, Phase.IDLE)

    # -------- timer lifecycle --------

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def close(self) -> None:
        """Cancel the tick task and any pending return to idle."""
        self.cancel_timer()
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def _reset_after_done(self) -> None:
        self._reset_handle = None
        if self._phase is Phase.DONE:
            self._set(0, Phase.IDLE)

    async def _run(self) -> None:
        while self._phase.active:
            await asyncio.sleep(self._interval)
            self.tick()
