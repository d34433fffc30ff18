# tmips/cli.py
import os
import sys
import logging
import argparse
from tmips.tmips_assembler import TmipsAssembler
from tmips.tmips_writer import write_output

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with status 2 on bad arguments; the assembler uses 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = _ArgumentParser(prog="tmips-asm", description="Two-pass TMIPS assembler")
    parser.add_argument("source", help="TMIPS assembly source file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log pass-by-pass debug output to stderr")
    return parser


def log_level(default="WARNING"):
    """Level named by TMIPS_LOG_LEVEL; unknown names fall back to 'default'."""
    fallback = getattr(logging, default)
    level = getattr(logging, os.environ.get("TMIPS_LOG_LEVEL", default).upper(), fallback)
    return level if isinstance(level, int) else fallback


def configure_logging(verbose=False, default="WARNING"):
    level = logging.DEBUG if verbose else log_level(default)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            source_text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error opening asm file: {args.source} ({e})", file=sys.stderr)
        return 1

    program = TmipsAssembler().assemble(source_text)

    try:
        path = write_output(program, args.source)
    except OSError as e:
        print(f"Error writing output for {args.source}: {e}", file=sys.stderr)
        return 1

    print(f"========\nCheck {path} for output\n=========")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
