"""Tests for the UTC-day eligibility clock."""

from __future__ import annotations

from daily_gm.gm.eligibility import (
    Countdown,
    can_gm,
    next_reset,
    time_until_reset,
    utc_day,
    watch_countdown,
)

MIDNIGHT = 1_704_067_200  # 2024-01-01T00:00:00Z


# ---------------------------------------------------------------------------
# can_gm
# ---------------------------------------------------------------------------


class TestCanGM:
    def test_never_greeted(self) -> None:
        assert can_gm(None, now=MIDNIGHT)
        assert can_gm(0, now=MIDNIGHT)

    def test_same_utc_day(self) -> None:
        assert not can_gm(MIDNIGHT + 60, now=MIDNIGHT + 86_399)

    def test_one_second_after_midnight(self) -> None:
        assert can_gm(MIDNIGHT - 1, now=MIDNIGHT)

    def test_days_later(self) -> None:
        assert can_gm(MIDNIGHT, now=MIDNIGHT + 3 * 86_400)

    def test_utc_day_numbering(self) -> None:
        assert utc_day(MIDNIGHT) == 19_723
        assert utc_day(MIDNIGHT - 1) == 19_722


# ---------------------------------------------------------------------------
# Countdown
# ---------------------------------------------------------------------------


class TestCountdown:
    def test_next_reset_is_following_midnight(self) -> None:
        assert next_reset(MIDNIGHT + 12 * 3600) == MIDNIGHT + 86_400
        assert next_reset(MIDNIGHT) == MIDNIGHT + 86_400

    def test_time_until_reset(self) -> None:
        countdown = time_until_reset(MIDNIGHT + 10, now=MIDNIGHT + 86_400 - 3_661)
        assert (countdown.hours, countdown.minutes, countdown.seconds) == (1, 1, 1)
        assert str(countdown) == "01:01:01"
        assert not countdown.eligible

    def test_eligible_when_never_greeted(self) -> None:
        assert time_until_reset(None, now=MIDNIGHT).eligible

    def test_past_reset_clamps_to_zero(self) -> None:
        countdown = time_until_reset(MIDNIGHT, now=MIDNIGHT + 2 * 86_400)
        assert countdown.eligible
        assert str(countdown) == "00:00:00"

    def test_full_day_format(self) -> None:
        assert str(Countdown(total_seconds=86_400)) == "24:00:00"


# ---------------------------------------------------------------------------
# watch_countdown
# ---------------------------------------------------------------------------


class TestWatchCountdown:
    async def test_ticks_until_eligible(self) -> None:
        now = [float(MIDNIGHT + 86_400 - 3)]
        sleeps: list[float] = []

        async def sleep(seconds: float) -> None:
            sleeps.append(seconds)
            now[0] += seconds

        ticks = [
            str(c)
            async for c in watch_countdown(MIDNIGHT + 5, clock=lambda: now[0], sleep=sleep)
        ]

        assert ticks == ["00:00:03", "00:00:02", "00:00:01", "00:00:00"]
        assert sleeps == [1.0, 1.0, 1.0]

    async def test_already_eligible_yields_once(self) -> None:
        ticks = [c async for c in watch_countdown(0, clock=lambda: float(MIDNIGHT))]
        assert len(ticks) == 1
        assert ticks[0].eligible
