# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md

"""
ScriptAuth - Emission Report

Prints the yearly minting table for a starting block award and a yearly
decay rate, plus the cumulative total in atomic units.

    python apps/emission_report.py --base 40 --rate 900
"""

import argparse, sys
import colorama

# ---------- Local Project ----------
from scriptauth.consensus.rewards import AwardYear, award_schedule
from scriptauth.utils import config as CFG
from scriptauth.utils.script_logging import get_ctx_logger, setup_logging

log = get_ctx_logger("scriptauth.apps.emission_report")

RESET = colorama.Style.RESET_ALL
CYAN  = colorama.Fore.CYAN
GREEN = colorama.Fore.GREEN


def format_rows(rows: list[AwardYear], color: bool = False) -> list[str]:
    head = "Year\tCumulative\t\t(Year)\t\t\tPer block"
    rule = "-" * 70
    lines = [f"{CYAN}{head}{RESET}" if color else head, rule]
    for r in rows:
        lines.append(f"{r.year}\t{r.cumulative} \t({r.year_total})\t{r.per_block}")
    total = rows[-1].cumulative if rows else 0
    lines.append(rule)
    lines.append(f"{GREEN}Total: {total}{RESET}" if color else f"Total: {total}")
    return lines


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="ScriptAuth emission schedule report")
    parser.add_argument("--base", type=int, default=CFG.DEFAULT_BASE, help="Initial award per block (coins)")
    parser.add_argument("--rate", type=int, default=CFG.DEFAULT_RATE, help="Yearly keep ratio in per-mille (900 = 90%%)")
    parser.add_argument("--blocks-per-year", type=int, default=CFG.BLOCKS_PER_YEAR, help="Blocks minted per year")
    parser.add_argument("--end-line", type=int, default=CFG.MINT_END_LINE, help="Stop once award per block drops below this (atomic units)")
    parser.add_argument("--no-color", action="store_true", help="Plain output")
    parser.add_argument("--log-level", default="WARNING", type=str.upper,
                        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"], help="Console log level")
    parser.add_argument("--log-file", default=None, help="Also write logs to this rotating file")
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log_file, level=args.log_level, to_console=True, force=True)

    try:
        rows = award_schedule(args.base, args.rate, blocks_per_year=args.blocks_per_year, end_line=args.end_line)
    except ValueError as e:
        log.warning("[emission_report] %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    color = not args.no_color and sys.stdout.isatty()
    if color:
        colorama.init()
    print("\n".join(format_rows(rows, color=color)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
