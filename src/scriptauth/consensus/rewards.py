# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: see REFERENCES.md

from __future__ import annotations

from typing import NamedTuple, Optional

# ---------------- Local Project ----------------
from ..utils import config as CFG


class AwardYear(NamedTuple):
    year: int
    per_block: int
    year_total: int
    cumulative: int


def award_schedule(base: int, rate: int, *, blocks_per_year: Optional[int] = None,
                   end_line: Optional[int] = None, unit: Optional[int] = None) -> list[AwardYear]:
    """
    Yearly minting table.

    base is the starting award per block in coins, rate the per-mille share
    of the award kept from one year to the next (900 keeps 90%). Minting
    stops once the award per block drops below end_line atomic units.
    """
    if rate >= 1000:
        raise ValueError(f"rate must be below 1000 per-mille, got {rate}")
    blocks_per_year = CFG.BLOCKS_PER_YEAR if blocks_per_year is None else int(blocks_per_year)
    end_line = CFG.MINT_END_LINE if end_line is None else int(end_line)
    unit = CFG.UNIT if unit is None else int(unit)
    if end_line <= 0:
        raise ValueError("end_line must be positive or the table never ends")

    rows: list[AwardYear] = []
    per_block = int(base) * unit
    total = 0
    while per_block >= end_line:
        year_total = per_block * blocks_per_year
        total += year_total
        rows.append(AwardYear(len(rows) + 1, per_block, year_total, total))
        per_block = per_block * int(rate) // 1000
    return rows


def award_total(base: int, rate: int, **kwargs) -> int:
    rows = award_schedule(base, rate, **kwargs)
    return rows[-1].cumulative if rows else 0
