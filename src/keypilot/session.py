# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import trio_util

from .commontypes import ConnectionState, Modifier
from .correlator import AcknowledgmentCorrelator
from .eventtypes import Connected, Disconnected, KeyDown, KeyUp, Paste, SessionEvent, ToggleModifier
from .history import CONNECTION_ERROR, HistoryView, NullHistory
from .keystreams import KeyEventNormalizer
from .modifiers import ModifierState
from .paste import PasteDecomposer
from .rpctypes import KeystrokeReceived

if typing.TYPE_CHECKING:
    from .rpctypes import ClientMessages
    from .settings import Settings
    from .transport import Transport

logger = logging.getLogger(__name__)


class KeyboardSession:
    """Everything one client needs to talk to one keyboard service.

    All state lives here rather than at module level, so independent sessions never share
    pressed keys, manual modifiers, or pending keystrokes. Every handler runs to completion
    synchronously; the transport is the only place anything waits.
    """

    connection_state: trio_util.AsyncValue[ConnectionState]

    def __init__(self, settings: Settings, transport: Transport, history: typing.Optional[HistoryView] = None):
        self.settings = settings
        self.transport = transport
        self.history = history if history is not None else NullHistory()
        self.modifiers = ModifierState()
        self.correlator = AcknowledgmentCorrelator(self.history)
        self.connection_state = trio_util.AsyncValue(ConnectionState.DISCONNECTED)
        self.powering_down = False
        self.normalizer = KeyEventNormalizer(self)
        self.decomposer = PasteDecomposer(self)

    @property
    def connection(self) -> ConnectionState:
        return self.connection_state.value

    @property
    def is_connected(self) -> bool:
        return self.connection is ConnectionState.CONNECTED

    def send(self, message: ClientMessages):
        self.transport.send(message)

    def track(self, label: str) -> int:
        sequence_id = self.correlator.register()
        self.history.register_pending(sequence_id, label)
        return sequence_id

    def outbound_id(self, sequence_id: typing.Optional[int]) -> typing.Optional[int]:
        if self.settings.attach_sequence_ids:
            return sequence_id
        return None

    def toggle_manual_modifier(self, modifier: Modifier):
        self.modifiers.toggle(modifier)
        self.history.show_manual_modifiers(self.modifiers.manual)

    def mark_powering_down(self):
        "Call before an intentional shutdown or restart, so the resulting disconnect is not reported as an error."
        self.powering_down = True

    def on_connect(self):
        logger.info("Connected to keyboard service")
        self.connection_state.value = ConnectionState.CONNECTED
        self.history.show_connection_status(True)
        self.history.hide_error(CONNECTION_ERROR)

    def on_disconnect(self, reason: str, requested: bool = False):
        logger.info("Disconnected from keyboard service: %s", reason)
        self.connection_state.value = ConnectionState.DISCONNECTED
        self.history.show_connection_status(False)
        if self.powering_down or requested:
            return
        self.history.show_error(CONNECTION_ERROR, reason)

    def dispatch(self, event: SessionEvent):
        match event:
            case KeyDown():
                return self.normalizer.key_down(event)
            case KeyUp():
                return self.normalizer.key_up(event)
            case Paste():
                return self.decomposer.paste(event.text, event.update_cards)
            case ToggleModifier():
                return self.toggle_manual_modifier(event.modifier)
            case KeystrokeReceived():
                return self.correlator.on_acknowledgment(event.success, event.id)
            case Connected():
                return self.on_connect()
            case Disconnected():
                return self.on_disconnect(event.reason, event.requested)
            case _:
                raise NotImplementedError(f"Don't know how to handle {type(event)}.")
