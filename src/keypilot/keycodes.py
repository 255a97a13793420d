# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import typing

# These are the legacy KeyboardEvent.keyCode values reported by browsers. They are
# layout-dependent for punctuation, so the character table lives in settings rather
# than being derived from this enum.


class KeyCode(enum.IntEnum):
    KEY_BACKSPACE = 8
    KEY_TAB = 9
    KEY_ENTER = 13
    KEY_SHIFT = 16
    KEY_CTRL = 17
    KEY_ALT = 18
    KEY_PAUSE = 19
    KEY_CAPSLOCK = 20
    KEY_ESC = 27
    KEY_SPACE = 32
    KEY_PAGEUP = 33
    KEY_PAGEDOWN = 34
    KEY_END = 35
    KEY_HOME = 36
    KEY_LEFT = 37
    KEY_UP = 38
    KEY_RIGHT = 39
    KEY_DOWN = 40
    KEY_INSERT = 45
    KEY_DELETE = 46
    KEY_0 = 48
    KEY_1 = 49
    KEY_2 = 50
    KEY_3 = 51
    KEY_4 = 52
    KEY_5 = 53
    KEY_6 = 54
    KEY_7 = 55
    KEY_8 = 56
    KEY_9 = 57
    KEY_A = 65
    KEY_B = 66
    KEY_C = 67
    KEY_D = 68
    KEY_E = 69
    KEY_F = 70
    KEY_G = 71
    KEY_H = 72
    KEY_I = 73
    KEY_J = 74
    KEY_K = 75
    KEY_L = 76
    KEY_M = 77
    KEY_N = 78
    KEY_O = 79
    KEY_P = 80
    KEY_Q = 81
    KEY_R = 82
    KEY_S = 83
    KEY_T = 84
    KEY_U = 85
    KEY_V = 86
    KEY_W = 87
    KEY_X = 88
    KEY_Y = 89
    KEY_Z = 90
    # Also reported for the Windows key and, in most browsers, the left Command key.
    KEY_META = 91
    KEY_CONTEXTMENU = 93
    KEY_F1 = 112
    KEY_F2 = 113
    KEY_F3 = 114
    KEY_F4 = 115
    KEY_F5 = 116
    KEY_F6 = 117
    KEY_F7 = 118
    KEY_F8 = 119
    KEY_F9 = 120
    KEY_F10 = 121
    KEY_F11 = 122
    KEY_F12 = 123
    KEY_SEMICOLON = 186
    KEY_EQUAL = 187
    KEY_COMMA = 188
    KEY_MINUS = 189
    KEY_DOT = 190
    KEY_SLASH = 191
    KEY_GRAVE = 192
    KEY_LEFTBRACE = 219
    KEY_BACKSLASH = 220
    KEY_RIGHTBRACE = 221
    KEY_APOSTROPHE = 222


# KeyboardEvent.location
class KeyLocation(enum.IntEnum):
    STANDARD = 0
    LEFT = 1
    RIGHT = 2
    NUMPAD = 3


_LOCATION_WIRE_NAMES = {KeyLocation.LEFT: "left", KeyLocation.RIGHT: "right"}


def location_wire_name(location: int) -> typing.Optional[str]:
    "Only left and right duplicated keys carry a location on the wire; any other hint is null."
    return _LOCATION_WIRE_NAMES.get(location)


MODIFIER_KEYCODES = frozenset(
    {
        KeyCode.KEY_SHIFT,
        KeyCode.KEY_CTRL,
        KeyCode.KEY_ALT,
        KeyCode.KEY_META,
    }
)


def is_modifier_keycode(key_code: int) -> bool:
    return key_code in MODIFIER_KEYCODES
