# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum

import msgspec


class Modifier(enum.Enum):
    META = "meta"
    ALT = "alt"
    SHIFT = "shift"
    CTRL = "ctrl"


class ManualModifiers(msgspec.Struct, frozen=True):
    meta: bool = False
    alt: bool = False
    shift: bool = False
    ctrl: bool = False

    def any(self):
        return self.meta or self.alt or self.shift or self.ctrl


class MetaChordPolicy(enum.Enum):
    # forward and track native meta chords, but leave the local default action alone
    TRACK = enum.auto()
    # forward native meta chords without registering them for acknowledgment
    UNTRACKED = enum.auto()
    # keep native meta chords local
    DROP = enum.auto()


class ConnectionState(enum.Enum):
    DISCONNECTED = enum.auto()
    CONNECTED = enum.auto()


class KeyPilotError(Exception):
    pass


class ExhaustedQueueError(KeyPilotError):
    def __init__(self):
        return super().__init__("Acknowledgment received with no keystroke pending")


class TransportError(KeyPilotError):
    pass
