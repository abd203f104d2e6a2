#!/usr/bin/env python3
"""Daily GM Tool: streaks, countdowns and GMs from the terminal.

Settings come from ``DAILYGM_*`` environment variables (or the YAML file
named by ``DAILYGM_CONFIG_PATH``); sending needs ``DAILYGM_WALLET__PRIVATE_KEY``.

    # Streak, eligibility and GMs received (defaults to the wallet account)
    python -m daily_gm.tools.gm_tool stats [address]

    # Say GM for today
    python -m daily_gm.tools.gm_tool gm

    # Say GM to a friend (0x address, name.eth or name.base.eth)
    python -m daily_gm.tools.gm_tool gm-to <recipient>

    # Live countdown to the next UTC-midnight reset
    python -m daily_gm.tools.gm_tool countdown [address]

    # Resolve a name the way gm-to would
    python -m daily_gm.tools.gm_tool resolve <recipient>
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from daily_gm.config.settings import AppConfig
from daily_gm.engine.client import DailyGMEngine
from daily_gm.errors.gm_errors import GMError
from daily_gm.gm.eligibility import watch_countdown

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from daily_gm.tx.submitter import SubmitOutcome


@asynccontextmanager
async def _engine() -> AsyncIterator[DailyGMEngine]:
    engine = DailyGMEngine(AppConfig())
    await engine.initialize()
    try:
        yield engine
    finally:
        await engine.close()


def _account_or_exit(engine: DailyGMEngine, address: str | None) -> str:
    account = address or engine.wallet.account
    if account is None:
        print("No address given and no wallet configured (DAILYGM_WALLET__PRIVATE_KEY)")
        sys.exit(1)
    return account


def _report(outcome: SubmitOutcome) -> None:
    if outcome.ok:
        print(f"{outcome.message}  tx: {outcome.tx_hash}")
        return
    print(outcome.message)
    sys.exit(1)


def _cmd_stats(address: str | None) -> None:
    """Print streak, eligibility and received count."""

    async def _run() -> None:
        async with _engine() as engine:
            account = _account_or_exit(engine, address)
            stats = await engine.stats(account)
            print(f"Address:       {stats.address}")
            print(f"Network:       {engine.config.chain.name}")
            print(f"Streak:        {stats.streak} day(s)")
            if stats.can_gm:
                print("Status:        ready to GM")
            else:
                print(f"Status:        GM'd today, next GM in {stats.countdown}")
            received = stats.received
            if received.ok:
                print(f"GMs received:  {received.count}  (via {received.source})")
            else:
                assert received.error is not None
                print(f"GMs received:  unavailable ({received.error.message})")

    asyncio.run(_run())


def _cmd_gm() -> None:
    async def _run() -> None:
        async with _engine() as engine:
            _report(await engine.send_gm())

    asyncio.run(_run())


def _cmd_gm_to(recipient: str) -> None:
    async def _run() -> None:
        async with _engine() as engine:
            _report(await engine.send_gm_to(recipient))

    asyncio.run(_run())


def _cmd_countdown(address: str | None) -> None:
    """Tick once a second until the account may GM again."""

    async def _run() -> None:
        async with _engine() as engine:
            account = _account_or_exit(engine, address)
            last_gm = await engine.reader.last_gm(account)
            async for countdown in watch_countdown(last_gm):
                if countdown.eligible:
                    print("\rReady to GM!        ")
                else:
                    print(f"\rNext GM in {countdown}", end="", flush=True)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        print()


def _cmd_resolve(recipient: str) -> None:
    async def _run() -> None:
        async with _engine() as engine:
            resolution = await engine.resolve(recipient)
            print(f"Input:    {recipient}")
            print(f"Kind:     {type(resolution.query).__name__}")
            print(f"Status:   {resolution.status}")
            if resolution.address:
                print(f"Address:  {resolution.address}")
            else:
                sys.exit(1)

    asyncio.run(_run())


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cmd = sys.argv[1].lower()
    arg = sys.argv[2] if len(sys.argv) > 2 else None
    try:
        _dispatch(cmd, arg)
    except GMError as exc:
        print(f"Error: {exc.message}")
        sys.exit(1)


def _dispatch(cmd: str, arg: str | None) -> None:
    if cmd == "stats":
        _cmd_stats(arg)
    elif cmd == "gm":
        _cmd_gm()
    elif cmd == "gm-to":
        if arg is None:
            print("Usage: gm_tool gm-to <recipient>")
            sys.exit(1)
        _cmd_gm_to(arg)
    elif cmd == "countdown":
        _cmd_countdown(arg)
    elif cmd == "resolve":
        if arg is None:
            print("Usage: gm_tool resolve <recipient>")
            sys.exit(1)
        _cmd_resolve(arg)
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
