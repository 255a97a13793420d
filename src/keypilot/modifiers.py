# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

from .commontypes import ManualModifiers, Modifier


class ModifierState:
    """Manual modifier overrides plus the pressed/released state of physical keys.

    The OS and browser capture some key combinations involving modifiers before they
    ever reach the client, so the user can assert a modifier by hand. Manual modifiers
    are one-shot: they apply to the next emitted keystroke and are then cleared.
    """

    key_state: dict[int, bool]

    def __init__(self):
        self.manual_state = {
            Modifier.META: False,
            Modifier.ALT: False,
            Modifier.SHIFT: False,
            Modifier.CTRL: False,
        }
        self.key_state = {}

    @property
    def manual(self) -> ManualModifiers:
        return ManualModifiers(
            meta=self.manual_state[Modifier.META],
            alt=self.manual_state[Modifier.ALT],
            shift=self.manual_state[Modifier.SHIFT],
            ctrl=self.manual_state[Modifier.CTRL],
        )

    def toggle(self, modifier: Modifier):
        self.manual_state[modifier] = not self.manual_state[modifier]

    def set_manual(self, modifier: Modifier, value: bool):
        self.manual_state[modifier] = value

    def clear_all(self):
        for modifier in self.manual_state:
            self.manual_state[modifier] = False

    def consume(self) -> ManualModifiers:
        "Return the manual modifiers as they were, and reset them."
        snapshot = self.manual
        self.clear_all()
        return snapshot

    def mark_pressed(self, key_code: int, pressed: bool):
        self.key_state[key_code] = pressed

    def is_already_pressed(self, key_code: int) -> bool:
        return self.key_state.get(key_code, False)
