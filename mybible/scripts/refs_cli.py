#!/usr/bin/env python3
"""
Command line access to MyBible scripture references.

Usage:
    mybible-refs parse "John 3:16-18" -m KJV
    mybible-refs get "Matt 28:18 - Mark 1:5" -m KJV
    mybible-refs get "Быт 1:1" -m RST -A
    mybible-refs list

Examples:
    # Show the ranges a citation resolves to
    mybible-refs -m KJV parse "Romans 8; Jude"

    # Print verses using the module's own book names
    mybible-refs -m KJV get "Jn 3:16, 18" --self-abbr

    # JSON output
    mybible-refs -m KJV get "Ps 23" --json
"""

import argparse
import json
import logging
import sys

from mybible.core import config
from mybible.services.references import (
    BibleModuleNotFoundError,
    IndexBuildError,
    MappingError,
    ModuleReadError,
    ReferenceParseError,
    ReferenceService,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mybible-refs",
        description="Parse scripture citations and print verses from MyBible modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mybible-refs -m KJV parse "John 3:16-18"     # Show ranges and verse counts
  mybible-refs -m KJV get "Jude"               # Print a whole book
  mybible-refs list                            # List installed modules
        """
    )
    parser.add_argument(
        "-m", "--module",
        default=None,
        help="Module name (default: MYBIBLE_DEFAULT_MODULE)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress messages"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("parse", "Resolve a citation into verse ranges"),
        ("get", "Print the verses of a citation"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("reference", help='Citation, e.g. "John 3:16-18"')
        command.add_argument(
            "-A", "--self-abbr",
            action="store_true",
            help="Use the module's own book names"
        )
        command.add_argument(
            "-a", "--abbr-prefix",
            default=None,
            metavar="PREFIX",
            help="Use <PREFIX>_mapping.json for book names"
        )
        command.add_argument(
            "-l", "--language",
            default=None,
            help="Also accept book names in this language"
        )
        command.add_argument(
            "-j", "--json",
            action="store_true",
            help="Print JSON"
        )

    commands.add_parser("list", help="List installed Bible modules")
    return parser


def setup_logging(verbose: bool):
    level = logging.INFO if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_parse(service: ReferenceService, args) -> int:
    result = service.parse(
        args.reference,
        module=args.module,
        use_module_abbreviations=args.self_abbr,
        prefix=args.abbr_prefix,
        user_language=args.language,
    )
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.ok else 1

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    for r in result.ranges:
        print(f"{r.start} - {r.end}  ({r.verse_count} verses, offset {r.start_offset})")
    return 0


def cmd_get(service: ReferenceService, args) -> int:
    passage = service.lookup(
        args.reference,
        module=args.module,
        use_module_abbreviations=args.self_abbr,
        prefix=args.abbr_prefix,
        user_language=args.language,
    )
    if args.json:
        print(json.dumps(passage.to_dict(), ensure_ascii=False, indent=2))
        return 0

    mapper = service.get_book_mapper(
        passage.module,
        use_module_abbreviations=args.self_abbr,
        prefix=args.abbr_prefix,
        user_language=args.language,
    )
    fallback = service.default_book_mapper()
    module_language = service.module_language(passage.module)

    for range_, verses in passage.by_range():
        typed = {range_.start.book: range_.start.book_name}
        typed.setdefault(range_.end.book, range_.end.book_name)
        for verse in verses:
            name = mapper.display_name(
                verse.book,
                typed=typed.get(verse.book),
                fallback=fallback,
                user_language=args.language,
                module_language=module_language,
            )
            print(f"{name} {verse.chapter}:{verse.verse} {verse.text}")
    return 0


def cmd_list(service: ReferenceService, args) -> int:
    modules = service.list_modules()
    if not modules:
        print(f"No modules found in {service.storage.modules_path}")
        return 0

    print(f"Modules in {service.storage.modules_path}:")
    print("-" * 60)
    for info in modules:
        print(f"  {info.language:5} {info.name:15} {info.description}")
    return 0


COMMANDS = {
    "parse": cmd_parse,
    "get": cmd_get,
    "list": cmd_list,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    service = ReferenceService()
    try:
        return COMMANDS[args.command](service, args)
    except ReferenceParseError as e:
        print(f"Error: {e.to_error()}", file=sys.stderr)
        return 1
    except BibleModuleNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (IndexBuildError, ModuleReadError, MappingError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
