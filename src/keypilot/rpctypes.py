# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import typing

import msgspec

### Client to keyboard service


class Keystroke(msgspec.Struct, frozen=True, kw_only=True, rename="camel", omit_defaults=True, tag_field="event", tag="keystroke"):
    meta_key: bool
    alt_key: bool
    shift_key: bool
    ctrl_key: bool
    key: str
    # omit_defaults would drop a null keyCode or location, so those two are not defaulted
    key_code: typing.Optional[int]
    location: typing.Optional[typing.Literal["left", "right"]]
    id: typing.Optional[int] = None


class KeyRelease(msgspec.Struct, frozen=True, tag_field="event", tag="keyRelease"):
    pass


ClientMessages = Keystroke | KeyRelease

### Keyboard service to client


class KeystrokeReceived(msgspec.Struct, frozen=True, omit_defaults=True, tag_field="event", tag="keystroke-received"):
    success: bool
    id: typing.Optional[int] = None


ServiceMessages = KeystrokeReceived
