# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Keystroke pipeline
# input level:
# stage 0: browser-style key events, paste text, or manual modifier toggles from the UI

# session level:
# stage 1: track pressed keys and suppress repeats of held modifiers
# stage 2: merge native modifiers with one-shot manual modifiers into a keystroke message
# stage 3: send keystrokes in order and correlate acknowledgments back to history cards
