"""CLI entrypoint for slot extraction and pattern lookups."""

from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List

from crossfill.core.exceptions import CrossfillError
from crossfill.data.dictionary import DictionaryConfig, WordDictionary
from crossfill.data.config import resolve_dictionary_path
from crossfill.engine.grid import Board, GridConfig
from crossfill.utils.logger import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract crossword slots and query a pattern-constrained word index",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--dictionary", type=Path, help="Path to a word<TAB>explanation file")
    source.add_argument("--config", type=Path, help="INI file naming dictionary.dictionary_file_path")
    parser.add_argument("--grid", type=Path, help="Binary grid file (rows, cols, cell bytes)")
    parser.add_argument(
        "--pattern",
        nargs="+",
        metavar="PATTERN",
        default=[],
        help="Patterns to look up, '?' marks an unknown letter",
    )
    parser.add_argument(
        "--fill-patterns",
        action="store_true",
        help="Look up the current pattern of every slot in --grid",
    )
    parser.add_argument("--suggest", nargs="+", metavar="WORD", default=[], help="Fuzzy suggestions")
    parser.add_argument("--max-distance", type=int, default=2, help="Edit distance for --suggest")
    parser.add_argument("--limit", type=int, default=20, help="Maximum words listed per query")
    parser.add_argument(
        "--blocked-byte",
        type=lambda value: int(value, 0),
        default=GridConfig.blocked_byte,
        help="Cell byte marking a blocked grid cell (default 0x23)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for result shuffling")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def describe_matches(dictionary: WordDictionary, pattern: str, limit: int) -> Dict[str, Any]:
    matches = dictionary.find_matches(pattern)
    words = [word for _, word in zip(range(limit), matches)]
    return {
        "pattern": pattern,
        "count": len(matches),
        "words": [
            {
                "word": word,
                "surface": dictionary.get_surface_form(word),
                "explanation": dictionary.get_explanation(word),
            }
            for word in words
        ],
    }


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.fill_patterns and not args.grid:
        parser.error("--fill-patterns requires --grid")

    try:
        if args.dictionary:
            dictionary_path = args.dictionary
        else:
            dictionary_path = resolve_dictionary_path(args.config)
        rng = random.Random(args.seed) if args.seed is not None else None
        dictionary = WordDictionary(DictionaryConfig(path=dictionary_path, rng=rng))

        payload: Dict[str, Any] = {
            "dictionary": str(dictionary_path),
            "words_loaded": len(dictionary),
            "load_error": dictionary.load_error,
        }

        patterns = list(args.pattern)
        if args.grid:
            board = Board.load(args.grid, GridConfig(blocked_byte=args.blocked_byte))
            slots = board.extract_slots()
            payload["grid"] = board.rows()
            payload["slots"] = [
                {
                    "direction": slot.direction.value,
                    "start": list(slot.start),
                    "length": slot.length,
                    "cell_ids": slot.cell_ids,
                    "pattern": slot.pattern(dictionary.config.unknown),
                }
                for slot in slots
            ]
            if args.fill_patterns:
                patterns.extend(slot.pattern(dictionary.config.unknown) for slot in slots)
    except CrossfillError as exc:
        parser.exit(2, f"error: {exc}\n")

    payload["matches"] = [describe_matches(dictionary, pattern, args.limit) for pattern in patterns]
    payload["suggestions"] = {
        word: dictionary.suggest(word, max_distance=args.max_distance, limit=args.limit)
        for word in args.suggest
    }

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
