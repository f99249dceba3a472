#!/usr/bin/env python3
"""CLI tool to transpose a chord sheet or move it to another key.

Usage:
    python examples/transpose_sheet.py <input_file> [--key KEY | --semitones N]

Examples:
    python examples/transpose_sheet.py let_it_be.cho --key D
    python examples/transpose_sheet.py let_it_be.txt --semitones -2 --format text
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from chordsheet import (
    ChordProFormatter,
    ChordProParser,
    ChordSheetError,
    ChordSheetSerializer,
    ChordsOverWordsParser,
    Song,
    TextFormatter,
)

logger = logging.getLogger(__name__)

CHORDPRO_SUFFIXES = {".cho", ".chordpro", ".chopro", ".crd", ".pro"}


def read_song(path: Path, chords_over_words: bool) -> Song:
    """Parse a sheet, picking the reader from the file suffix unless told otherwise."""
    text = path.read_text()
    if chords_over_words or path.suffix.lower() not in CHORDPRO_SUFFIXES:
        parser = ChordsOverWordsParser()
    else:
        parser = ChordProParser()
    song = parser.parse(text)
    for warning in song.warnings:
        logger.warning("%s", warning)
    return song


def render(song: Song, output_format: str, evaluate: bool) -> str:
    if output_format == "json":
        return json.dumps(ChordSheetSerializer().serialize(song), indent=2, ensure_ascii=False)
    configuration = {"evaluate": evaluate}
    if output_format == "text":
        return TextFormatter(configuration).format(song)
    return ChordProFormatter(configuration).format(song)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Transpose a chord sheet or change its key",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s let_it_be.cho --key D
  %(prog)s let_it_be.txt --semitones -2 --format text
  %(prog)s let_it_be.cho --format json
        """,
    )
    parser.add_argument("input", type=Path, help="Chord sheet to read")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("-k", "--key", help="Key to change the song to (needs a {key} directive)")
    target.add_argument("-s", "--semitones", type=int, help="Semitones to transpose by")
    parser.add_argument(
        "-f", "--format",
        choices=("chordpro", "text", "json"),
        default="chordpro",
        help="Output format (default: chordpro)",
    )
    parser.add_argument(
        "--chords-over-words",
        action="store_true",
        help="Read the input as chords over words regardless of its suffix",
    )
    parser.add_argument("--evaluate", action="store_true", help="Evaluate meta expressions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        song = read_song(args.input, args.chords_over_words)
        if args.key:
            song = song.change_key(args.key)
        elif args.semitones:
            song = song.transpose(args.semitones)
    except ChordSheetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render(song, args.format, args.evaluate))
    return 0


if __name__ == "__main__":
    sys.exit(main())
