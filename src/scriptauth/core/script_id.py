# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: see REFERENCES.md
from __future__ import annotations

import struct
from typing import NamedTuple

from ..utils import config as CFG
from ..utils.helpers import to_bytes

# height (u32) | tx index (u32) | script index (u16), big-endian so ids sort by position
_SCRIPT_ID = struct.Struct(">IIH")


def _check_layout(size: int) -> None:
    if _SCRIPT_ID.size != size:
        raise RuntimeError(f"script id layout packs {_SCRIPT_ID.size} bytes, config says {size}")

_check_layout(CFG.SCRIPT_ID_SIZE)


class ScriptRef(NamedTuple):
    height: int
    tx_index: int
    script_index: int


def script_id(height: int, tx_index: int, script_index: int) -> bytes:
    """
    Build the 10-byte id of a script occurrence. This is the message every
    unlock proof signs, so the layout must never change.

    Values wider than their field are truncated like an unsigned cast;
    callers are expected to range-check upstream.
    """
    return _SCRIPT_ID.pack(
        int(height) & 0xFFFFFFFF,
        int(tx_index) & 0xFFFFFFFF,
        int(script_index) & 0xFFFF,
    )


def parse_script_id(raw: bytes) -> ScriptRef:
    raw = to_bytes(raw, "script id")
    if len(raw) != CFG.SCRIPT_ID_SIZE:
        raise ValueError(f"script id must be {CFG.SCRIPT_ID_SIZE} bytes, got {len(raw)}")
    return ScriptRef(*_SCRIPT_ID.unpack(raw))
