# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import string
import typing

from .commontypes import ManualModifiers, Modifier
from .keycodes import KeyCode
from .rpctypes import Keystroke

if typing.TYPE_CHECKING:
    from .session import KeyboardSession

logger = logging.getLogger(__name__)


class PasteDecomposer:
    """Turns pasted text into the keystrokes needed to type it.

    Characters that need Shift on the target layout are preceded by a synthetic Shift keystroke
    and sent with shiftKey set. Characters missing from the keycode table are still sent, with a
    null keyCode, so every character gets exactly one keystroke and one acknowledgment.
    """

    def __init__(self, session: KeyboardSession):
        self.session = session

    def needs_shift(self, character: str) -> bool:
        return character in string.ascii_uppercase or character in self.session.settings.shifted_symbols

    def _keystroke(self, manual: ManualModifiers, key: str, key_code: typing.Optional[int], update_cards: bool):
        sequence_id = self.session.track(key) if update_cards else None
        message = Keystroke(
            meta_key=manual.meta,
            alt_key=manual.alt,
            shift_key=manual.shift,
            ctrl_key=manual.ctrl,
            key=key,
            key_code=key_code,
            location=None,
            id=self.session.outbound_id(sequence_id),
        )
        self.session.send(message)
        return message

    def paste(self, text: str, update_cards: bool = True) -> list[Keystroke]:
        session = self.session
        if not session.is_connected:
            logger.debug("Dropping paste of %d characters while disconnected", len(text))
            return []
        keycodes = session.settings.keycodes
        emitted = []
        for character in text:
            needs_shift = self.needs_shift(character)
            if needs_shift:
                session.modifiers.set_manual(Modifier.SHIFT, True)
                emitted.append(self._keystroke(session.modifiers.manual, "Shift", int(KeyCode.KEY_SHIFT), update_cards))
            key_code = keycodes.get(character.lower())
            if key_code is None:
                logger.debug("No keycode for pasted character %r", character)
            emitted.append(self._keystroke(session.modifiers.manual, character, key_code, update_cards))
            if needs_shift:
                # only now, after the shifted character has gone out
                session.modifiers.consume()
        session.history.show_manual_modifiers(session.modifiers.manual)
        return emitted
