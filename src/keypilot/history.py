# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections
import enum
import typing

import msgspec

from .commontypes import ManualModifiers

CONNECTION_ERROR = "Keyboard Connection Error"
DEFAULT_HISTORY_LIMIT = 10


def display_label(key: str) -> str:
    if key == " ":
        return "Space"
    return key


class HistoryView(typing.Protocol):
    def register_pending(self, sequence_id: int, label: str) -> None:
        ...

    def resolve_pending(self, sequence_id: int, success: bool) -> None:
        ...

    def show_connection_status(self, connected: bool) -> None:
        ...

    def show_error(self, kind: str, message: str) -> None:
        ...

    def hide_error(self, kind: str) -> None:
        ...

    def show_manual_modifiers(self, modifiers: ManualModifiers) -> None:
        ...


class CardStatus(enum.Enum):
    PENDING = enum.auto()
    PROCESSED = enum.auto()
    UNSUPPORTED = enum.auto()


class KeyCard(msgspec.Struct, frozen=True):
    sequence_id: int
    label: str
    status: CardStatus = CardStatus.PENDING


class ErrorNotice(msgspec.Struct, frozen=True):
    kind: str
    message: str


class KeyHistory:
    """The most recent keystrokes and their delivery status, plus connection and error state."""

    cards: collections.deque[KeyCard]
    error: typing.Optional[ErrorNotice]

    def __init__(self, limit: typing.Optional[int] = DEFAULT_HISTORY_LIMIT, visible: bool = True):
        self.limit = limit
        self.cards = collections.deque(maxlen=limit)
        self._visible = visible
        self.connected = False
        self.error = None
        self.manual_modifiers = ManualModifiers()

    @property
    def visible(self):
        return self._visible

    @visible.setter
    def visible(self, value: bool):
        self._visible = value
        if not value:
            self.cards.clear()

    def register_pending(self, sequence_id: int, label: str):
        if not self._visible:
            return
        self.cards.append(KeyCard(sequence_id=sequence_id, label=display_label(label)))

    def resolve_pending(self, sequence_id: int, success: bool):
        if not self._visible:
            return
        status = CardStatus.PROCESSED if success else CardStatus.UNSUPPORTED
        for index, card in enumerate(self.cards):
            if card.sequence_id == sequence_id:
                self.cards[index] = msgspec.structs.replace(card, status=status)
                return

    def show_connection_status(self, connected: bool):
        self.connected = connected

    def show_error(self, kind: str, message: str):
        self.error = ErrorNotice(kind=kind, message=message)

    def hide_error(self, kind: str):
        if self.error is not None and self.error.kind == kind:
            self.error = None

    def show_manual_modifiers(self, modifiers: ManualModifiers):
        self.manual_modifiers = modifiers


class NullHistory:
    def register_pending(self, sequence_id: int, label: str):
        pass

    def resolve_pending(self, sequence_id: int, success: bool):
        pass

    def show_connection_status(self, connected: bool):
        pass

    def show_error(self, kind: str, message: str):
        pass

    def hide_error(self, kind: str):
        pass

    def show_manual_modifiers(self, modifiers: ManualModifiers):
        pass
