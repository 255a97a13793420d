# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import pytest

from keypilot.commontypes import ManualModifiers, MetaChordPolicy, Modifier
from keypilot.eventtypes import Disconnected, KeyDown, KeyUp, ToggleModifier
from keypilot.keycodes import KeyCode, KeyLocation
from keypilot.keystreams import is_paste_shortcut
from keypilot.rpctypes import KeyRelease, Keystroke
from keypilot.session import KeyboardSession
from keypilot.settings import Settings


def test_each_key_down_emits_one_keystroke(session, transport):
    for key, key_code in (("h", KeyCode.KEY_H), ("i", KeyCode.KEY_I), ("h", KeyCode.KEY_H)):
        result = session.dispatch(KeyDown(key_code=key_code, key=key))
        assert result is not None
        assert session.modifiers.manual == ManualModifiers()
    assert transport.sent == [
        Keystroke(meta_key=False, alt_key=False, shift_key=False, ctrl_key=False, key="h", key_code=72, location=None, id=0),
        Keystroke(meta_key=False, alt_key=False, shift_key=False, ctrl_key=False, key="i", key_code=73, location=None, id=1),
        Keystroke(meta_key=False, alt_key=False, shift_key=False, ctrl_key=False, key="h", key_code=72, location=None, id=2),
    ]
    assert session.correlator.pending == (0, 1, 2)


def test_manual_modifiers_apply_once(session, transport, history):
    session.dispatch(ToggleModifier(Modifier.CTRL))
    session.dispatch(ToggleModifier(Modifier.ALT))
    assert history.manual_modifiers == ManualModifiers(ctrl=True, alt=True)
    session.dispatch(KeyDown(key_code=KeyCode.KEY_DELETE, key="Delete"))
    session.dispatch(KeyDown(key_code=KeyCode.KEY_DELETE, key="Delete"))
    first, second = transport.sent
    assert first.ctrl_key and first.alt_key
    assert not (second.ctrl_key or second.alt_key)
    assert session.modifiers.manual == ManualModifiers()
    assert history.manual_modifiers == ManualModifiers()


def test_native_modifiers_are_merged(session, transport):
    session.modifiers.toggle(Modifier.SHIFT)
    session.dispatch(KeyDown(key_code=KeyCode.KEY_T, key="t", ctrl_key=True))
    (message,) = transport.sent
    assert message.ctrl_key
    assert message.shift_key
    assert not message.alt_key
    assert not message.meta_key


def test_held_modifier_is_forwarded_once(session, transport):
    session.dispatch(KeyDown(key_code=KeyCode.KEY_SHIFT, key="Shift", shift_key=True, location=KeyLocation.LEFT))
    assert len(transport.sent) == 1
    for _ in range(5):
        result = session.dispatch(KeyDown(key_code=KeyCode.KEY_SHIFT, key="Shift", shift_key=True, repeat=True))
        assert result is None
    assert len(transport.sent) == 1
    assert session.modifiers.is_already_pressed(KeyCode.KEY_SHIFT)


def test_shift_down_while_already_pressed(session, transport):
    session.modifiers.mark_pressed(KeyCode.KEY_SHIFT, True)
    assert session.dispatch(KeyDown(key_code=KeyCode.KEY_SHIFT, key="Shift", shift_key=True)) is None
    assert transport.sent == []
    assert session.modifiers.key_state == {KeyCode.KEY_SHIFT: True}


def test_held_letter_repeats(session, transport):
    for _ in range(3):
        session.dispatch(KeyDown(key_code=KeyCode.KEY_A, key="a", repeat=True))
    assert len(transport.sent) == 3


@pytest.mark.parametrize(
    "location,expected",
    (
        (KeyLocation.LEFT, "left"),
        (KeyLocation.RIGHT, "right"),
        (KeyLocation.STANDARD, None),
        (KeyLocation.NUMPAD, None),
    ),
)
def test_location(session, transport, location, expected):
    session.dispatch(KeyDown(key_code=KeyCode.KEY_CTRL, key="Control", ctrl_key=True, location=location))
    assert transport.sent[0].location == expected


def test_unrecognized_location_is_sent_without_one(session, transport):
    result = session.dispatch(KeyDown(key_code=KeyCode.KEY_A, key="a", location=7))
    assert result is not None
    assert transport.sent[0].location is None
    assert transport.sent[0].key == "a"


def test_key_up(session, transport):
    session.dispatch(KeyDown(key_code=KeyCode.KEY_ALT, key="Alt", alt_key=True))
    session.dispatch(KeyDown(key_code=KeyCode.KEY_F4, key="F4", alt_key=True))
    assert session.dispatch(KeyUp(key_code=KeyCode.KEY_F4)) is None
    assert session.dispatch(KeyUp(key_code=KeyCode.KEY_ALT)) == KeyRelease()
    assert transport.sent[2:] == [KeyRelease()]
    assert not session.modifiers.is_already_pressed(KeyCode.KEY_ALT)
    assert not session.modifiers.is_already_pressed(KeyCode.KEY_F4)


def test_modifier_can_be_pressed_again_after_release(session, transport):
    session.dispatch(KeyDown(key_code=KeyCode.KEY_META, key="Meta", meta_key=True))
    session.dispatch(KeyUp(key_code=KeyCode.KEY_META))
    session.dispatch(KeyDown(key_code=KeyCode.KEY_META, key="Meta", meta_key=True))
    assert [type(m) for m in transport.sent] == [Keystroke, KeyRelease, Keystroke]
    assert (transport.sent[0].id, transport.sent[2].id) == (0, 1)


def test_disconnected_key_down_is_ignored(session, transport):
    session.dispatch(Disconnected("transport closed"))
    assert session.dispatch(KeyDown(key_code=KeyCode.KEY_SHIFT, key="Shift")) is None
    assert transport.sent == []
    assert session.modifiers.key_state == {}


def test_disconnected_key_up_still_tracks_state(session, transport):
    session.dispatch(KeyDown(key_code=KeyCode.KEY_SHIFT, key="Shift", shift_key=True))
    session.dispatch(Disconnected("transport closed"))
    assert session.dispatch(KeyUp(key_code=KeyCode.KEY_SHIFT)) is None
    assert not session.modifiers.is_already_pressed(KeyCode.KEY_SHIFT)
    assert transport.sent[1:] == []


def test_plain_keystrokes_consume_default(session):
    result = session.dispatch(KeyDown(key_code=KeyCode.KEY_TAB, key="Tab"))
    assert result.consume_default
    assert result.sequence_id == 0


def make_session(transport, **settings_overrides):
    session = KeyboardSession(Settings.for_test(**settings_overrides), transport)
    session.on_connect()
    return session


def test_meta_chord_tracked_by_default(transport):
    session = make_session(transport)
    result = session.dispatch(KeyDown(key_code=KeyCode.KEY_L, key="l", meta_key=True))
    assert not result.consume_default
    assert result.sequence_id == 0
    assert result.message.meta_key
    assert session.correlator.pending == (0,)


def test_meta_chord_untracked(transport):
    session = make_session(transport, meta_chord_policy=MetaChordPolicy.UNTRACKED)
    result = session.dispatch(KeyDown(key_code=KeyCode.KEY_L, key="l", meta_key=True))
    assert not result.consume_default
    assert result.sequence_id is None
    assert transport.sent[0].id is None
    assert session.correlator.pending == ()


def test_meta_chord_dropped(transport):
    session = make_session(transport, meta_chord_policy=MetaChordPolicy.DROP)
    session.modifiers.toggle(Modifier.ALT)
    assert session.dispatch(KeyDown(key_code=KeyCode.KEY_L, key="l", meta_key=True)) is None
    assert transport.sent == []
    # not consumed, so it applies to the next forwarded keystroke
    assert session.modifiers.manual == ManualModifiers(alt=True)
    session.dispatch(KeyDown(key_code=KeyCode.KEY_L, key="l"))
    assert transport.sent[0].alt_key


def test_sequence_ids_can_be_left_off_the_wire(transport):
    session = make_session(transport, attach_sequence_ids=False)
    result = session.dispatch(KeyDown(key_code=KeyCode.KEY_A, key="a"))
    assert result.sequence_id == 0
    assert transport.sent[0].id is None


@pytest.mark.parametrize(
    "event,expected",
    (
        (KeyDown(key_code=KeyCode.KEY_CTRL, key="Control", ctrl_key=True), True),
        (KeyDown(key_code=KeyCode.KEY_V, key="v", ctrl_key=True), True),
        (KeyDown(key_code=KeyCode.KEY_V, key="v"), False),
        (KeyDown(key_code=KeyCode.KEY_C, key="c", ctrl_key=True), False),
        (KeyDown(key_code=KeyCode.KEY_ESC, key="Escape"), False),
    ),
)
def test_is_paste_shortcut(event, expected):
    assert is_paste_shortcut(event) is expected
