#!/usr/bin/env python3
"""
VoiceField Console
==================

Manual-entry front end for the voice field session. Each input line is one
fragment.

RUN:
    voicefield < notes.txt
    voicefield --file notes.txt --json
    voicefield --file notes.txt --speech --view

With --speech, lines are delivered as final recognition results through the
scripted recognition engine and the event channel, the same path a live
speech service takes.
"""

from __future__ import annotations
import argparse
import sys
from typing import Iterable, List, Optional, TextIO

from .engine import VoiceFieldEngine
from .ingestion import ScriptedRecognition, UnavailableRecognition
from .serialization import dumps_snapshot, dumps_view_model


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicefield",
        description="Map text fragments into keywords, sentiment, energy and insights"
    )
    parser.add_argument(
        '--file', '-f',
        default=None,
        help='Read fragments from this file instead of stdin (one per line)'
    )
    parser.add_argument(
        '--speech',
        action='store_true',
        help='Route lines through the scripted recognition channel'
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        '--json',
        action='store_true',
        help='Print the final session snapshot as JSON'
    )
    output.add_argument(
        '--view',
        action='store_true',
        help='Print the final presentation view model as JSON'
    )
    return parser


def run_session(
    lines: Iterable[str],
    speech: bool = False,
    out: Optional[TextIO] = None,
    echo: bool = True
) -> VoiceFieldEngine:
    """Feed every line into a fresh engine; returns the engine afterwards."""
    out = out or sys.stdout

    if speech:
        recognition = ScriptedRecognition()
        engine = VoiceFieldEngine(recognition=recognition)
        engine.start_listening()
    else:
        recognition = None
        engine = VoiceFieldEngine(recognition=UnavailableRecognition())

    for line in lines:
        text = line.rstrip("\n")
        if recognition is not None:
            recognition.emit_final(text)
            engine.pump()
            accepted = bool(text.strip())
        else:
            accepted = engine.submit_fragment(text)

        if echo and accepted:
            out.write(f"> {text.strip()}\n  {engine.snapshot().reply}\n")

    if recognition is not None:
        engine.stop_listening()
        engine.pump()

    return engine


def print_summary(engine: VoiceFieldEngine, out: TextIO):
    state = engine.snapshot()
    analysis = state.analysis
    gauges = engine.view_model().gauges

    out.write("\n" + "=" * 60 + "\n")
    out.write("VOICE FIELD SUMMARY\n")
    out.write("=" * 60 + "\n")
    out.write(f"Fragments accepted: {state.sequence}\n")
    out.write(f"Keywords: {', '.join(analysis.keywords) or '(none)'}\n")
    out.write(f"Sentiment: {gauges.sentiment_index} ({gauges.sentiment_label})\n")
    out.write(f"Energy: {gauges.energy_percent}%\n")
    out.write("\nInsights:\n")
    for card in engine.view_model().insights:
        out.write(f"  - {card.label}: {card.pulse_percent} pulse, {card.drift_label}\n")
    out.write("=" * 60 + "\n")


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = stdout or sys.stdout
    quiet = args.json or args.view

    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            engine = run_session(f.readlines(), speech=args.speech, out=out, echo=not quiet)
    else:
        source = stdin or sys.stdin
        engine = run_session(source, speech=args.speech, out=out, echo=not quiet)

    if args.json:
        out.write(dumps_snapshot(engine.snapshot()) + "\n")
    elif args.view:
        out.write(dumps_view_model(engine.view_model()) + "\n")
    else:
        print_summary(engine, out)

    return 0


if __name__ == "__main__":
    sys.exit(main())
