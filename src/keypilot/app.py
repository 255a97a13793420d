# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import argparse
import functools
import logging
import pathlib
import sys
import typing

import trio
import trio_util

from .commontypes import ConnectionState
from .eventtypes import Paste
from .history import CardStatus, ErrorNotice, KeyHistory
from .settings import Settings
from .transport import KeyboardClient

logger = logging.getLogger(__name__)


class PasteOutcome(typing.NamedTuple):
    history: KeyHistory
    unacknowledged: int
    error: typing.Optional[ErrorNotice]


async def paste_text(settings: Settings, text: str, timeout: float) -> PasteOutcome:
    # unbounded, so every pasted character gets reported
    history = KeyHistory(limit=None)
    client = KeyboardClient(settings, history)
    session = client.session
    async with trio.open_nursery() as nursery:
        await nursery.start(client.run)
        session.dispatch(Paste(text))
        with trio.move_on_after(timeout):
            await trio_util.wait_any(
                functools.partial(session.correlator.pending_count.wait_value, 0),
                functools.partial(session.connection_state.wait_value, ConnectionState.DISCONNECTED),
            )
        outcome = PasteOutcome(history=history, unacknowledged=len(session.correlator), error=history.error)
        nursery.cancel_scope.cancel()
    return outcome


parser = argparse.ArgumentParser(prog="keypilot", description="Type text on a remote keyboard service.")
parser.add_argument("settings", type=pathlib.Path)
parser.add_argument("text", nargs="?", help="text to type; read from stdin when omitted")
parser.add_argument("--timeout", type=float, default=10.0, help="seconds to wait for acknowledgments")
parser.add_argument("--verbose", action="store_true")


def main(argv=sys.argv):
    """
    Args:
        argv (list): List of arguments

    Returns:
        int: A return code

    Pastes the text, then reports the delivery status of every keystroke.
    """
    parsed = parser.parse_args(argv[1:])
    logging.basicConfig(level=logging.DEBUG if parsed.verbose else logging.INFO)
    settings = Settings.load(parsed.settings)
    text = parsed.text if parsed.text is not None else sys.stdin.read()
    outcome = trio.run(paste_text, settings, text, parsed.timeout)

    for card in outcome.history.cards:
        print(f"{card.sequence_id}\t{card.label}\t{card.status.name}")
    if outcome.error is not None:
        print(f"{outcome.error.kind}: {outcome.error.message}", file=sys.stderr)
        return 1
    if outcome.unacknowledged:
        logger.warning("%d keystrokes were never acknowledged", outcome.unacknowledged)
        return 1
    if any(card.status is not CardStatus.PROCESSED for card in outcome.history.cards):
        return 1
    return 0
