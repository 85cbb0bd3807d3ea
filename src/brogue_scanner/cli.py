"""Find Brogue CE seeds whose seed catalog matches the requested objects."""

# ruff: noqa: T201  # CLI intentionally prints search results

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
import sys

import orjson

from brogue_scanner.categories import Category
from brogue_scanner.config import DEPTH_MAX, DEPTH_MIN, MATCHES_MAX, SEED_MAX, SEED_MIN, build_limits, load_settings
from brogue_scanner.display import TITLE, render_errors, render_matches, render_search
from brogue_scanner.errors import CompileError, ConfigurationError
from brogue_scanner.files import find_catalog_files
from brogue_scanner.observability.logging import configure_logging
from brogue_scanner.search.compiler import compile_criteria
from brogue_scanner.search.engine import INPUT_ERRORS, search_files
from brogue_scanner.search.query import SearchQuery


EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NO_FILES = 2
EXIT_FILE_ERRORS = 3

EPILOG = """\
Each object flag takes search terms and may be repeated. Terms for one flag
form criteria without separators; repeating a term already given starts a
new criterion. Common terms:
  N, <N, =N     at least / fewer than / exactly N (default: at least 1)
  dN            found by depth N
  +N, N-        enchantment of at least N / at most -N
  vault, novault  inside / outside a vault
  good, bad     benevolent / malevolent
  runic         any runic (armor, weapon, equipment, item)
  legendary, mutation, allied, caged, shackled  (ally)
  any other term is matched against kind, runic or mutation names

example: %(prog)s -w +3 quietus d10 -g 2600 -A legendary -m 2
"""

# (category, short flag, help) for each repeatable object flag
OBJECT_FLAGS: tuple[tuple[Category, str | None, str], ...] = (
    (Category.ALLY, "-A", "Allies, captives and legendary allies"),
    (Category.ALTAR, None, "Commutation or resurrection altars"),
    (Category.ARMOR, "-a", "Armor, with optional enchantment and runic"),
    (Category.CHARM, "-c", "Charms"),
    (Category.EQUIPMENT, "-e", "Any armor, ring or weapon"),
    (Category.FOOD, "-f", "Food; COUNT required"),
    (Category.GOLD, "-g", "Gold pieces; COUNT required"),
    (Category.ITEM, "-i", "Any armor, charm, potion, ring, scroll, staff, wand or weapon"),
    (Category.KEY, "-k", "Keys and crystal orbs"),
    (Category.POTION, "-p", "Potions"),
    (Category.RING, "-r", "Rings"),
    (Category.SCROLL, "-S", "Scrolls"),
    (Category.STAFF, "-s", "Staffs"),
    (Category.WAND, "-W", "Wands"),
    (Category.WEAPON, "-w", "Weapons, with optional enchantment and runic"),
)


def _bounded_int(lower: int, upper: int):
    def convert(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from None
        if not lower <= number <= upper:
            raise argparse.ArgumentTypeError(f"{number} is outside {lower}..{upper}")
        return number

    return convert


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brogue-scanner",
        description=__doc__,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-D", "--debug", action="store_true", help="Log each file and committed seed")
    parser.add_argument(
        "-F",
        "--filepath",
        type=Path,
        default=None,
        help="Directory holding seed catalog .csv files (default: BROGUE_SCANNER_DATA_DIR or '.')",
    )
    parser.add_argument(
        "--nesting",
        type=_bounded_int(0, 16),
        default=None,
        help="Subdirectory levels to search below --filepath (default: 0)",
    )
    parser.add_argument(
        "--mindepth",
        dest="depth_min",
        type=_bounded_int(DEPTH_MIN, DEPTH_MAX),
        default=None,
        help=f"Shallowest depth searched (default: {DEPTH_MIN})",
    )
    parser.add_argument(
        "-d",
        "--depth",
        "--maxdepth",
        dest="depth_max",
        type=_bounded_int(DEPTH_MIN, DEPTH_MAX),
        default=None,
        help=f"Deepest depth searched, also the default depth of each criterion (default: {DEPTH_MAX})",
    )
    parser.add_argument(
        "--minseed",
        "--start",
        dest="seed_min",
        type=_bounded_int(SEED_MIN, SEED_MAX),
        default=None,
        help=f"Lowest seed searched (default: {SEED_MIN})",
    )
    parser.add_argument(
        "--maxseed",
        "--stop",
        dest="seed_max",
        type=_bounded_int(SEED_MIN, SEED_MAX),
        default=None,
        help=f"Highest seed searched (default: {SEED_MAX})",
    )
    parser.add_argument(
        "-m",
        "--matches",
        dest="matches_max",
        type=_bounded_int(1, MATCHES_MAX),
        default=None,
        help="Number of matching seeds to find (default: 10)",
    )
    parser.add_argument("-R", "--random", action="store_true", help="Search catalog files in random order")
    encoding = parser.add_mutually_exclusive_group()
    encoding.add_argument("-U", "--utf8", dest="encoding", action="store_const", const="utf-8", help="UTF-8 catalogs")
    encoding.add_argument("--utf16", dest="encoding", action="store_const", const="utf-16", help="UTF-16LE catalogs")
    parser.add_argument(
        "-v",
        "--verbosity",
        type=int,
        choices=(1, 2, 3),
        default=3,
        help="1: seeds, 2: seeds and depths, 3: seeds, depths and objects (default: 3)",
    )
    parser.add_argument("--json", action="store_true", help="Print the search report as JSON")
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        default=None,
        help="Abort on the first unreadable catalog instead of skipping it",
    )

    objects = parser.add_argument_group("objects")
    for category, short, help_text in OBJECT_FLAGS:
        flags = [short, f"--{category.value}"] if short else [f"--{category.value}"]
        objects.add_argument(
            *flags,
            dest=category.value,
            action="append",
            nargs="+",
            metavar="TERM",
            help=help_text,
        )
    return parser


def collect_flag_tokens(args: argparse.Namespace) -> dict[Category, list[list[str]]]:
    """Map each category to the token lists of its flag occurrences."""
    return {
        category: getattr(args, category.value)
        for category, _, _ in OBJECT_FLAGS
        if getattr(args, category.value, None)
    }


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID

    configure_logging("DEBUG" if args.debug else settings.log_level, json_output=settings.log_json)

    try:
        limits = build_limits(
            seed_min=args.seed_min,
            seed_max=args.seed_max,
            depth_min=args.depth_min,
            depth_max=args.depth_max,
            matches_max=args.matches_max or settings.matches_max,
        )
        criteria = compile_criteria(collect_flag_tokens(args), default_depth=limits.depth_max)
    except (ConfigurationError, CompileError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    if not criteria:
        print("Error: no search terms given; pass at least one object flag (see --help)", file=sys.stderr)
        return EXIT_INVALID

    root = args.filepath or settings.data_dir
    nesting_max = settings.nesting_max if args.nesting is None else args.nesting
    try:
        paths, encoding = find_catalog_files(
            root,
            args.encoding or settings.encoding,
            nesting_max,
            shuffle=args.random,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    if not paths:
        print(f"Error: no seed catalog files found in {root}", file=sys.stderr)
        return EXIT_NO_FILES

    query = SearchQuery(limits=limits, criteria=criteria)
    if not args.json:
        print(f"\n{TITLE}\n")
        print(render_search(limits, criteria, encoding, args.verbosity))
        print()

    stop_on_error = settings.stop_on_error if args.stop_on_error is None else args.stop_on_error
    try:
        report = search_files(paths, query, encoding, stop_on_error=stop_on_error)
    except INPUT_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FILE_ERRORS

    if args.json:
        print(orjson.dumps(report.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8"))
    else:
        print(render_matches(report.matches, args.verbosity))
        if report.errors:
            print(render_errors(report), file=sys.stderr)
    return EXIT_FILE_ERRORS if report.errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
