"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.cpu import SpriteEdgePolicy
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils.debug import ALL, KNOWN_CATEGORIES, parse_categories, reload_categories
from pychip8.video import MONOCHROME, parse_hex_color


def _colour(text: str):
    try:
        return parse_hex_color(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _categories(text: str) -> str:
    unknown = parse_categories(text) - KNOWN_CATEGORIES - {ALL}
    if unknown:
        choices = ", ".join(sorted(KNOWN_CATEGORIES | {ALL}))
        raise argparse.ArgumentTypeError(f"unknown debug category {', '.join(sorted(unknown))} (choose from {choices})")
    return text


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 virtual machine",
    )
    parser.add_argument(
        "program",
        type=Path,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the RND instruction (default: random)",
    )
    parser.add_argument(
        "--sprite-edge",
        choices=[policy.value for policy in SpriteEdgePolicy],
        default=SpriteEdgePolicy.WRAP.value,
        help="How sprites crossing the screen edge are drawn (default: wrap)",
    )
    parser.add_argument(
        "--background",
        type=_colour,
        default=MONOCHROME[0],
        help="Colour of unlit pixels as #rrggbb (default: #000000)",
    )
    parser.add_argument(
        "--foreground",
        type=_colour,
        default=MONOCHROME[1],
        help="Colour of lit pixels as #rrggbb (default: #ffffff)",
    )
    parser.add_argument(
        "--debug",
        type=_categories,
        metavar="CATEGORIES",
        help="Comma-separated debug categories, overriding CHIP8_DEBUG",
    )
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        program_path=args.program,
        scale=args.scale,
        fullscreen=args.fullscreen,
        seed=args.seed,
        sprite_edge=SpriteEdgePolicy(args.sprite_edge),
        palette=(args.background, args.foreground),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.program.exists():
        parser.error(f"Program file not found: {args.program}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.debug is not None:
        reload_categories(args.debug)

    app = Chip8App(build_config(args))
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
