#!/usr/bin/env python3
"""Build and maintain the vocabulary store from the command line.

Sub-commands:
  dictionary PATH              Rebuild the lexicon from a wiktextract JSONL dump
  frequency PATH               Rebuild corpus ranks from a frequency word list
  lemmatize PATH [--sentences] Add a text file to the lemma ledger
  ledger [--keep-blacklist]    Recreate the lemma ledger
  schedule                     Recreate the card schedule
  export PATH                  Write cards as an Anki text import file

Run with: python3 -m scripts.build_lexicon <command> [...]
"""
import argparse
import asyncio
import sys
import time
from datetime import timedelta

from core.config import settings
from core.database import Store
from core.errors import Err, Ok
from core.logging import configure_logging
from engines.service import VocabularyService

# ANSI color codes
C_RESET = "\033[0m"
C_BOLD = "\033[1m"
C_DIM = "\033[2m"
C_GREEN = "\033[32m"
C_CYAN = "\033[36m"
C_RED = "\033[31m"


def fmt_duration(seconds: float) -> str:
    """Format duration nicely."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    else:
        return str(timedelta(seconds=int(seconds)))


def print_header(title: str) -> None:
    print()
    print(f"{C_BOLD}{C_CYAN}{'═' * 60}{C_RESET}")
    print(f"{C_BOLD}{C_CYAN}  {title}{C_RESET}")
    print(f"{C_BOLD}{C_CYAN}{'═' * 60}{C_RESET}")


def print_result(value) -> None:
    if value is None:
        return
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, dict):
        for key, item in value.items():
            print(f"    {C_DIM}{key}:{C_RESET} {item}")
    else:
        print(f"    {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build the vocabulary store")
    commands = parser.add_subparsers(dest="command", required=True)

    dictionary = commands.add_parser("dictionary", help="Import a wiktextract JSONL dump")
    dictionary.add_argument("path")

    frequency = commands.add_parser("frequency", help="Import a frequency word list")
    frequency.add_argument("path")

    lemmatize = commands.add_parser("lemmatize", help="Lemmatize a text file into the ledger")
    lemmatize.add_argument("path")
    lemmatize.add_argument("--sentences", action="store_true", help="Also keep example sentences")

    ledger = commands.add_parser("ledger", help="Recreate the lemma ledger")
    ledger.add_argument("--keep-blacklist", action="store_true", help="Keep lemmas already blacklisted")

    commands.add_parser("schedule", help="Recreate the card schedule")

    export = commands.add_parser("export", help="Export cards for Anki")
    export.add_argument("path")

    return parser


async def run(args: argparse.Namespace, service: VocabularyService):
    match args.command:
        case "dictionary":
            return await service.import_dictionary(args.path)
        case "frequency":
            return await service.import_frequency(args.path)
        case "lemmatize":
            return await service.lemmatize_from_file(args.path, args.sentences)
        case "ledger":
            return await service.rebuild_ledger(args.keep_blacklist)
        case "schedule":
            return await service.rebuild_schedule()
        case "export":
            return await service.export_cards(args.path)
    raise ValueError(f"Unknown command: {args.command}")


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON, log_sql=settings.LOG_SQL)

    store = Store.from_settings(settings)
    try:
        await store.init()
        service = VocabularyService(store, settings)

        print_header(f"build_lexicon {args.command}")
        start = time.time()
        result = await run(args, service)
    finally:
        await store.dispose()

    match result:
        case Ok(value):
            print(f"\n  {C_GREEN}✓ Done{C_RESET} in {fmt_duration(time.time() - start)}")
            print_result(value)
            return 0
        case Err(error):
            print(f"\n  {C_RED}✗ {error}{C_RESET}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
