"""dicemode command line.

    dicemode roll 2d6, 1d4+        print the report for some dice
    dicemode expand notes.txt      roll every dice line of a file (or stdin)
    dicemode serve                 run the HTTP API
"""

from __future__ import annotations

import argparse
import logging
import sys

from dicemode.config import settings
from dicemode.errors import DiceError
from dicemode.pipeline import build_pipeline

logger = logging.getLogger(__name__)


def cmd_roll(args) -> int:
    pipeline = build_pipeline(seed=args.seed)
    sys.stdout.write(pipeline.parse_and_format(" ".join(args.text)))
    return 0


def cmd_expand(args) -> int:
    pipeline = build_pipeline(seed=args.seed)
    if args.file in (None, "-"):
        text = sys.stdin.read()
    else:
        with open(args.file, encoding="utf-8") as fh:
            text = fh.read()
    expanded, replaced = pipeline.expand_text(text, strict=args.strict)
    logger.debug("Replaced %d line(s)", replaced)
    sys.stdout.write(expanded)
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run(
        "dicemode.main:app",
        host=args.host or settings.server_host,
        port=args.port or settings.server_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dicemode",
        description="Roll dice written inline in plain text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--seed", type=int, default=None, help="Seed the random source")

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    p = sub.add_parser("roll", help="Roll dice notation and print the report")
    p.add_argument("text", nargs="+", help="Dice instructions, e.g. 2d6 d20+")
    p.set_defaults(func=cmd_roll)

    p = sub.add_parser("expand", help="Replace every dice line of a document")
    p.add_argument("file", nargs="?", default=None, help="Input file (default: stdin)")
    p.add_argument("--strict", action="store_true", help="Fail on any non-blank, non-dice line")
    p.set_defaults(func=cmd_expand)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=None, help="Override listen host")
    p.add_argument("--port", "-p", type=int, default=None, help="Override listen port")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (DiceError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
