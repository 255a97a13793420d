# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import msgspec

from .commontypes import MetaChordPolicy
from .eventtypes import KeyDown, KeyUp
from .keycodes import KeyCode, is_modifier_keycode, location_wire_name
from .rpctypes import KeyRelease, Keystroke

if typing.TYPE_CHECKING:
    from .session import KeyboardSession

logger = logging.getLogger(__name__)


class NormalizedKeystroke(msgspec.Struct, frozen=True):
    message: Keystroke
    sequence_id: typing.Optional[int]
    # whether the local default action for this key should be suppressed
    consume_default: bool


class KeyEventNormalizer:
    def __init__(self, session: KeyboardSession):
        self.session = session

    def is_ignored_keystroke(self, key_code: int) -> bool:
        # a held modifier autorepeats; only the first press is forwarded
        return is_modifier_keycode(key_code) and self.session.modifiers.is_already_pressed(key_code)

    def key_down(self, event: KeyDown) -> typing.Optional[NormalizedKeystroke]:
        session = self.session
        if not session.is_connected:
            return None
        if self.is_ignored_keystroke(event.key_code):
            return None
        session.modifiers.mark_pressed(event.key_code, True)

        consume_default = not event.meta_key
        track = consume_default
        if event.meta_key:
            match session.settings.meta_chord_policy:
                case MetaChordPolicy.DROP:
                    logger.debug("Keeping native meta chord %r local", event.key)
                    return None
                case MetaChordPolicy.TRACK:
                    track = True
                case MetaChordPolicy.UNTRACKED:
                    track = False

        sequence_id = session.track(event.key) if track else None
        manual = session.modifiers.consume()
        message = Keystroke(
            meta_key=event.meta_key or manual.meta,
            alt_key=event.alt_key or manual.alt,
            shift_key=event.shift_key or manual.shift,
            ctrl_key=event.ctrl_key or manual.ctrl,
            key=event.key,
            key_code=event.key_code,
            location=location_wire_name(event.location),
            id=session.outbound_id(sequence_id),
        )
        session.send(message)
        if manual.any():
            session.history.show_manual_modifiers(session.modifiers.manual)
        return NormalizedKeystroke(message=message, sequence_id=sequence_id, consume_default=consume_default)

    def key_up(self, event: KeyUp) -> typing.Optional[KeyRelease]:
        session = self.session
        # key state stays accurate even while disconnected
        session.modifiers.mark_pressed(event.key_code, False)
        if not session.is_connected:
            return None
        if not is_modifier_keycode(event.key_code):
            return None
        message = KeyRelease()
        session.send(message)
        return message


def is_paste_shortcut(event: KeyDown) -> bool:
    """Whether a key-down in paste mode is part of the paste gesture itself.

    Ctrl on its own, or Ctrl+V, must not cancel paste mode or the paste event never arrives. Any
    other key cancels it.
    """
    return event.ctrl_key and event.key_code in (KeyCode.KEY_CTRL, KeyCode.KEY_V)
