"""Eligibility clock: one GM per UTC calendar day.

Days are numbered by integer-dividing the timestamp in milliseconds by
86,400,000, so the reset happens at UTC midnight whatever the viewer's
timezone. A ``last_gm`` of ``None`` or ``0`` means "never greeted".
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

MS_PER_DAY = 86_400_000
SECONDS_PER_DAY = 86_400


def utc_day(ts: float) -> int:
    """UTC day number of a unix timestamp in seconds."""
    return int(ts * 1000) // MS_PER_DAY


def can_gm(last_gm: int | None, now: float | None = None) -> bool:
    """True if a GM is allowed at *now* given the last one at *last_gm*."""
    if not last_gm:
        return True
    current = time.time() if now is None else now
    return utc_day(current) > utc_day(last_gm)


def next_reset(last_gm: int) -> int:
    """The UTC midnight strictly after *last_gm*, in unix seconds."""
    return (utc_day(last_gm) + 1) * SECONDS_PER_DAY


@dataclass(frozen=True, slots=True)
class Countdown:
    """Whole-second time left until the next reset."""

    total_seconds: int

    @property
    def eligible(self) -> bool:
        return self.total_seconds <= 0

    @property
    def hours(self) -> int:
        return max(self.total_seconds, 0) // 3600

    @property
    def minutes(self) -> int:
        return (max(self.total_seconds, 0) % 3600) // 60

    @property
    def seconds(self) -> int:
        return max(self.total_seconds, 0) % 60

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def time_until_reset(last_gm: int | None, now: float | None = None) -> Countdown:
    """Countdown to the reset following *last_gm*; eligible if never greeted."""
    if not last_gm:
        return Countdown(total_seconds=0)
    current = int(time.time() if now is None else now)
    return Countdown(total_seconds=next_reset(last_gm) - current)


async def watch_countdown(
    last_gm: int | None,
    *,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    interval: float = 1.0,
) -> AsyncIterator[Countdown]:
    """Yield a fresh countdown every *interval* seconds.

    The final item is always an eligible countdown; iteration stops there.
    """
    while True:
        countdown = time_until_reset(last_gm, clock())
        yield countdown
        if countdown.eligible:
            return
        await sleep(interval)
