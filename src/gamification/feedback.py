"""
Award Feedback

Turns award outcomes into short-lived, purely cosmetic state:
- "+N XP" popups, each expiring POPUP_DURATION_MS after it appears
- a progress-bar flash while XP is coming in (GAINING_XP_FLASH_MS)
- a "leveling up" celebration after any level-up (LEVEL_UP_DURATION_MS)
- an achievement tone, louder for big awards

Nothing here touches the persisted profile. Timers run through a Scheduler
so tests can drive time by hand with ManualScheduler.
"""

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from src.config import (
    POPUP_DURATION_MS,
    GAINING_XP_FLASH_MS,
    LEVEL_UP_DURATION_MS,
    MAJOR_AWARD_THRESHOLD,
    POPUP_DEFAULT_X,
    POPUP_DEFAULT_Y,
)
from src.gamification.sound import TonePlayer
from src.models.profile import XpAward

logger = logging.getLogger(__name__)


# ============================================================================
# Schedulers
# ============================================================================

class Scheduler(Protocol):
    """Clock plus one-shot timers"""

    def now(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Run callback after delay seconds; returns a handle with cancel()"""
        ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class ManualTimer:
    """Handle returned by ManualScheduler.call_later"""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler; time only moves when advance() is called

    Example:
        scheduler = ManualScheduler()
        emitter = FeedbackEmitter(scheduler=scheduler)
        emitter.emit(15, 0)
        scheduler.advance(1.2)  # popup expires
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[tuple] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order; returns how many fired"""
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self._now = due
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


# ============================================================================
# Feedback emitter
# ============================================================================

@dataclass
class FeedbackEvent:
    """Notification sent to feedback listeners (e.g. a UI layer)"""
    kind: str  # popup_shown, popup_expired, gaining_xp_started/ended, level_up_started/ended
    popup: Optional[XpAward] = None
    levels_gained: int = 0


FeedbackListener = Callable[[FeedbackEvent], None]


class FeedbackEmitter:
    """
    Owns the ephemeral award feedback state

    Popups are keyed by their own id, so two awards in quick succession
    produce two popups that expire on their own schedules.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        tone_player: Optional[TonePlayer] = None,
        popup_duration_ms: int = POPUP_DURATION_MS,
        gaining_flash_ms: int = GAINING_XP_FLASH_MS,
        level_up_duration_ms: int = LEVEL_UP_DURATION_MS,
        major_threshold: int = MAJOR_AWARD_THRESHOLD,
    ):
        self.scheduler = scheduler or AsyncioScheduler()
        self.tone_player = tone_player or TonePlayer()
        self.popup_duration = popup_duration_ms / 1000
        self.gaining_flash = gaining_flash_ms / 1000
        self.level_up_duration = level_up_duration_ms / 1000
        self.major_threshold = major_threshold

        self.popups: Dict[str, XpAward] = {}
        self.gaining_xp = False
        self.leveling_up = False

        self._listeners: List[FeedbackListener] = []
        self._timers: List[Any] = []
        self._sequence = itertools.count(1)
        # Latest window owner; an older timer firing must not clear a newer window
        self._gaining_token = 0
        self._level_up_token = 0

    def subscribe(self, listener: FeedbackListener) -> None:
        self._listeners.append(listener)

    def emit(
        self,
        amount: Union[int, float],
        levels_gained: int = 0,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Optional[XpAward]:
        """
        Show feedback for one award

        A zero-XP award shows nothing at all.

        Returns:
            The popup that was queued, or None
        """
        if amount <= 0:
            return None

        popup = XpAward(
            id=self._new_popup_id(),
            amount=amount,
            x=POPUP_DEFAULT_X if x is None else x,
            y=POPUP_DEFAULT_Y if y is None else y,
            created_at=self.scheduler.now(),
        )
        self.popups[popup.id] = popup
        self._schedule(self.popup_duration, lambda: self._expire_popup(popup.id))
        self._notify(FeedbackEvent("popup_shown", popup=popup))

        self._start_gaining_flash()
        self.tone_player.play(major=amount >= self.major_threshold)

        if levels_gained > 0:
            self._start_level_up(levels_gained)

        return popup

    def active_popups(self) -> List[XpAward]:
        return list(self.popups.values())

    def close(self) -> None:
        """Drop pending timers (shutdown); visible state is left as-is"""
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_popup_id(self) -> str:
        millis = int(self.scheduler.now() * 1000)
        return f"{millis}-{next(self._sequence)}"

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        holder: List[Any] = []

        def fire() -> None:
            if holder and holder[0] in self._timers:
                self._timers.remove(holder[0])
            callback()

        timer = self.scheduler.call_later(delay, fire)
        holder.append(timer)
        self._timers.append(timer)

    def _expire_popup(self, popup_id: str) -> None:
        popup = self.popups.pop(popup_id, None)
        if popup is not None:
            self._notify(FeedbackEvent("popup_expired", popup=popup))

    def _start_gaining_flash(self) -> None:
        self._gaining_token += 1
        token = self._gaining_token
        if not self.gaining_xp:
            self.gaining_xp = True
            self._notify(FeedbackEvent("gaining_xp_started"))

        def end() -> None:
            if token == self._gaining_token:
                self.gaining_xp = False
                self._notify(FeedbackEvent("gaining_xp_ended"))

        self._schedule(self.gaining_flash, end)

    def _start_level_up(self, levels_gained: int) -> None:
        self._level_up_token += 1
        token = self._level_up_token
        self.leveling_up = True
        logger.info(f"[FEEDBACK] Level-up celebration ({levels_gained} level(s))")
        self._notify(FeedbackEvent("level_up_started", levels_gained=levels_gained))

        def end() -> None:
            if token == self._level_up_token:
                self.leveling_up = False
                self._notify(FeedbackEvent("level_up_ended"))

        self._schedule(self.level_up_duration, end)

    def _notify(self, event: FeedbackEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"[FEEDBACK] Listener failed on {event.kind}: {type(e).__name__}: {e}")
