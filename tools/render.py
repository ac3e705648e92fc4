#!/usr/bin/env python3
"""
Canonical renderer tool with debug outputs, fingerprinting, and bake tracing.

Usage:
    python tools/render.py <subcommand> [options]

Subcommands:
    utterance                 Render one or more grammar-generated utterances
    symbol <code>             Render a single symbol on its own (S s A a B b w z _)

Options:
    --seed <int>          Fixed seed (default: random); --count N uses seed, seed+1, ...
    --debug               Save <name>.baked.json with the baked words
    --qc                  Run QC analysis
    --output-dir <path>   Output directory (default: unique timestamped dir)
"""
import sys
import os
import argparse
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tools.render_core import render_utterance, get_unique_output_dir, summarize
from robospeak.core.config import Settings
from robospeak.core.errors import RobospeakError
from robospeak.core.types import Symbol, Word


def _print_summary(debug_info: dict, show_qc: bool):
    print(f"\n=== Render Complete ===")
    print(f"Sequence: {debug_info['sequence']}")
    print(f"Output: {debug_info['wav_path']}")
    print(f"Seed: {debug_info['seed']}")
    print(f"Fingerprint SHA256: {debug_info['fingerprint']['sha256'][:16]}...")
    print(f"Peak: {debug_info['fingerprint']['peak']:.4f}, RMS: {debug_info['fingerprint']['rms']:.4f}")

    if debug_info.get("json_path"):
        print(f"Debug JSON: {debug_info['json_path']}")

    if show_qc and debug_info.get('qc_result'):
        qc = debug_info['qc_result']
        print(f"QC Status: {qc['status']}")
        if qc['failures']:
            print("  FAILURES:")
            for f in qc['failures']:
                print(f"    - {f}")
        if qc['warnings']:
            print("  WARNINGS:")
            for w in qc['warnings']:
                print(f"    - {w}")


def cmd_utterance(args):
    """Render grammar-generated utterances."""
    output_dir = Path(args.output_dir) if args.output_dir else get_unique_output_dir("utterance")
    settings = Settings.from_env()

    infos = []
    for i in range(args.count):
        seed = None if args.seed is None else args.seed + i
        prefix = f"{i:02d}_" if args.count > 1 else ""
        _, debug_info = render_utterance(
            output_dir=output_dir,
            seed=seed,
            settings=settings,
            debug=args.debug,
            qc=args.qc,
            prefix=prefix,
            script_name="render.py utterance",
        )
        _print_summary(debug_info, args.qc)
        infos.append(debug_info)

    if args.qc:
        failures = summarize(infos)
        if failures:
            print(f"\nQC FAILURES ({len(failures)}):")
            for f in failures:
                print(f"  - {f}")
            return 1
        print("\nAll renders PASSED QC checks!")
    return 0


def cmd_symbol(args):
    """Render one symbol as a single-word utterance."""
    try:
        symbol = Symbol.from_code(args.code)
    except RobospeakError as e:
        print(f"Error: {e}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else get_unique_output_dir(f"symbol_{symbol.name.lower()}")

    _, debug_info = render_utterance(
        output_dir=output_dir,
        seed=args.seed,
        words=[Word(symbol, "1")],
        settings=Settings.from_env(),
        debug=args.debug,
        qc=args.qc,
        script_name="render.py symbol",
    )
    _print_summary(debug_info, args.qc)
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Canonical renderer tool with debug outputs and fingerprinting"
    )

    subparsers = parser.add_subparsers(dest="command", help="Subcommand")

    # Common arguments
    def add_common_args(p):
        p.add_argument("--seed", type=int, default=None, help="Fixed seed (default: random)")
        p.add_argument("--debug", action="store_true", help="Save baked.json with the baked words")
        p.add_argument("--qc", action="store_true", help="Run QC analysis")
        p.add_argument("--output-dir", type=str, help="Output directory (default: unique timestamped)")

    # utterance subcommand
    p_utt = subparsers.add_parser("utterance", help="Render grammar-generated utterances")
    p_utt.add_argument("--count", type=int, default=1, help="Number of utterances")
    add_common_args(p_utt)

    # symbol subcommand
    p_sym = subparsers.add_parser("symbol", help="Render a single symbol")
    p_sym.add_argument("code", help="Symbol code: S s A a B b w z _")
    add_common_args(p_sym)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "utterance":
        if args.count < 1:
            parser.error("--count must be >= 1")
        return cmd_utterance(args)
    elif args.command == "symbol":
        return cmd_symbol(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
