#!/usr/bin/env python3
from __future__ import annotations

import argparse
import curses
import logging
import sys
from typing import List, Optional

from .app import Garapon
from .config import Settings
from .display import CursesDisplay
from .errors import GaraponError
from .keyboard import CursesKeyboard
from .rules import Variant

logger = logging.getLogger(__name__)

VARIANT_NAMES = {v.name.lower().replace("_", "-"): v for v in Variant if v.playable}


def configure_logging(settings: Settings) -> None:
    """Log to a file when one is configured; never to the curses screen."""
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if settings.log_file:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            filename=settings.log_file,
        )
    else:
        logging.getLogger("garapon").addHandler(logging.NullHandler())
        logging.getLogger("garapon").setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="garapon",
        description="Spin a lottery drum in the terminal and stop it to draw the numbers.",
    )
    ap.add_argument("--variant", choices=sorted(VARIANT_NAMES),
                    help="Start this game directly instead of showing the menu")
    ap.add_argument("--seed", type=int, default=None, help="Optional RNG seed for the shuffle")
    ap.add_argument("--patience", type=int, default=None,
                    help="Max shuffle frames before a pick goes through on its own")
    ap.add_argument("--frame-ms", type=int, default=None, help="Milliseconds per shuffle frame")
    ap.add_argument("--extra-balls", type=int, default=None,
                    help="Balls added to every drum (3 gives the real-world ranges)")
    ap.add_argument("--log-file", default=None, help="Write a debug log to this file")
    ap.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("--print", dest="echo", action="store_const", const="text",
                     help="Print the winning numbers after the game closes")
    out.add_argument("--json", dest="echo", action="store_const", const="json",
                     help="Print the winning numbers as JSON after the game closes")
    return ap


def settings_from_args(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    base = base or Settings.from_env()
    return base.override(
        seed=args.seed,
        patience=args.patience,
        frame_delay=None if args.frame_ms is None else args.frame_ms / 1000,
        extra_balls=args.extra_balls,
        log_file=args.log_file,
        log_level=None if args.log_level is None else args.log_level.upper(),
    )


def _play(stdscr, settings: Settings, variant: Optional[Variant]) -> Garapon:
    curses.cbreak()
    curses.noecho()
    game = Garapon(CursesDisplay(stdscr), CursesKeyboard(stdscr), settings)
    game.run(variant)
    return game


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings)
    variant = VARIANT_NAMES[args.variant] if args.variant else None

    try:
        if variant is not None:
            variant.rules.with_extra_balls(settings.extra_balls).validate()
        logger.info("starting (seed=%s, patience=%d)", settings.seed, settings.patience)
        game = curses.wrapper(_play, settings, variant)
    except GaraponError as exc:
        logger.error("%s: %s", exc.code, exc.message)
        print(f"garapon: {exc.message}", file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 0

    if args.echo == "text":
        for ticket in game.tickets:
            print(f"{ticket.variant}: {ticket.format()}")
    elif args.echo == "json":
        for ticket in game.tickets:
            print(ticket.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
