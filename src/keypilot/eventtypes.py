# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import typing

import msgspec

from .commontypes import Modifier
from .keycodes import KeyCode, KeyLocation
from .rpctypes import KeystrokeReceived


class KeyDown(msgspec.Struct, frozen=True, kw_only=True, tag=True):
    key_code: int
    key: str
    meta_key: bool = False
    alt_key: bool = False
    shift_key: bool = False
    ctrl_key: bool = False
    location: KeyLocation = KeyLocation.STANDARD
    repeat: bool = False

    @classmethod
    def of(cls, key_code: KeyCode, key: str, **kwargs):
        return cls(key_code=key_code, key=key, **kwargs)


class KeyUp(msgspec.Struct, frozen=True, kw_only=True, tag=True):
    key_code: int
    key: str = ""
    location: KeyLocation = KeyLocation.STANDARD


class Paste(msgspec.Struct, frozen=True, tag=True):
    text: str
    update_cards: bool = True


class ToggleModifier(msgspec.Struct, frozen=True, tag=True):
    modifier: Modifier


class Connected(msgspec.Struct, frozen=True, tag=True):
    pass


class Disconnected(msgspec.Struct, frozen=True, tag=True):
    reason: str
    # the client asked for this disconnect itself
    requested: bool = False


SessionEvent = typing.Union[KeyDown, KeyUp, Paste, ToggleModifier, Connected, Disconnected, KeystrokeReceived]
