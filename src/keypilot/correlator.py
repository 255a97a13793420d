# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import trio_util

from .commontypes import ExhaustedQueueError

if typing.TYPE_CHECKING:
    from .history import HistoryView

logger = logging.getLogger(__name__)


class AcknowledgmentCorrelator:
    """Pairs each tracked keystroke with the acknowledgment the keyboard service sends back for it.

    Sequence ids start at 0 and increase by one per registered keystroke; they are never reused.
    Acknowledgments that carry an id resolve that exact keystroke. Acknowledgments without an id
    resolve the oldest pending keystroke, which is only correct because the transport delivers
    replies in send order, one per request.

    An acknowledgment that arrives with nothing pending is logged and otherwise ignored, so that a
    stray reply can never stop later keystrokes from being processed.
    """

    pending_count: trio_util.AsyncValue[int]

    def __init__(self, history: HistoryView):
        self.history = history
        self.next_id = 0
        # dicts preserve insertion order, which is registration order
        self._pending: dict[int, None] = {}
        self.pending_count = trio_util.AsyncValue(0)

    def __len__(self):
        return len(self._pending)

    @property
    def pending(self) -> tuple[int, ...]:
        return tuple(self._pending)

    def register(self) -> int:
        sequence_id = self.next_id
        self.next_id += 1
        self._pending[sequence_id] = None
        self.pending_count.value = len(self._pending)
        return sequence_id

    def pop_oldest(self) -> int:
        if not self._pending:
            raise ExhaustedQueueError()
        sequence_id = next(iter(self._pending))
        del self._pending[sequence_id]
        self.pending_count.value = len(self._pending)
        return sequence_id

    def pop(self, sequence_id: int) -> int:
        if not self._pending:
            raise ExhaustedQueueError()
        # KeyError for ids that were never registered or were already resolved
        del self._pending[sequence_id]
        self.pending_count.value = len(self._pending)
        return sequence_id

    def on_acknowledgment(self, success: bool, sequence_id: typing.Optional[int] = None) -> typing.Optional[tuple[int, bool]]:
        try:
            if sequence_id is None:
                resolved = self.pop_oldest()
            else:
                resolved = self.pop(sequence_id)
        except ExhaustedQueueError:
            logger.warning("Ignoring acknowledgment (success=%r): no keystroke is pending", success)
            return None
        except KeyError:
            logger.warning("Ignoring acknowledgment for unknown keystroke %r (success=%r)", sequence_id, success)
            return None
        self.history.resolve_pending(resolved, success)
        return resolved, success
