# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import dataclasses
import json
import operator
import pathlib
import typing

import cattrs
from cattrs.gen import make_dict_structure_fn

from .commontypes import MetaChordPolicy

# Characters are looked up by their lowercase form, so shifted symbols need entries of their own.
KEYCODES = {
    **{chr(c): c - 32 for c in range(ord("a"), ord("z") + 1)},
    **{str(d): 48 + d for d in range(10)},
    " ": 32,
    "\n": 13,
    "\t": 9,
    ")": 48,
    "!": 49,
    "@": 50,
    "#": 51,
    "£": 51,
    "$": 52,
    "%": 53,
    "^": 54,
    "&": 55,
    "*": 56,
    "(": 57,
    ";": 186,
    ":": 186,
    "=": 187,
    "+": 187,
    ",": 188,
    "<": 188,
    "-": 189,
    "_": 189,
    ".": 190,
    ">": 190,
    "/": 191,
    "?": 191,
    "`": 192,
    "~": 192,
    "¬": 192,
    "[": 219,
    "{": 219,
    "\\": 220,
    "|": 220,
    "]": 221,
    "}": 221,
    "'": 222,
    '"': 222,
}

SHIFTED_SYMBOLS = '¬!"£$%^&*()_+{}|<>?:@~'

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8001


def structure_meta_chord_policy(v: typing.Union[str, MetaChordPolicy], typ: type[MetaChordPolicy]):
    if isinstance(v, MetaChordPolicy):
        return v
    if v not in MetaChordPolicy.__members__:
        raise ValueError(f"Unexpected meta chord policy {v!r}")
    return MetaChordPolicy[v]


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(MetaChordPolicy, operator.attrgetter("name"))
settings_converter.register_structure_hook(MetaChordPolicy, structure_meta_chord_policy)
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: pathlib.Path
    host: str
    port: int
    keycodes: dict[str, int]
    shifted_symbols: str
    meta_chord_policy: MetaChordPolicy
    attach_sequence_ids: bool

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        raw["_path"] = src
        # anything missing from the file falls back to the defaults
        return settings_converter.structure(_defaults() | raw, cls)

    @classmethod
    def for_test(cls, **overrides):
        return settings_converter.structure(_defaults() | {"_path": "test.settings.json"} | overrides, cls)


def _defaults():
    return {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "keycodes": KEYCODES,
        "shifted_symbols": SHIFTED_SYMBOLS,
        "meta_chord_policy": "TRACK",
        "attach_sequence_ids": True,
    }


settings_converter.register_structure_hook(Settings, make_dict_structure_fn(Settings, settings_converter))
