"""
Module: photostrip.cli

Purpose:
    Command-line driver.

        photostrip render a.jpg b.jpg c.jpg d.jpg -o strip.jpg --caption "hi"
        photostrip render *.jpg --suggest --order-dir orders/
        photostrip orders list --order-dir orders/
        photostrip orders export 4821 --order-dir orders/ -o out.jpg

    Exit codes: 0 success, 1 render / IO / order error, 2 usage error.

Key Functions:
    - main(): Entry point for the photostrip console script

Dependencies:
    - argparse (std)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from photostrip import __version__
from photostrip.compositor import render_strip
from photostrip.config import MAX_CAPTION_CHARS, PhotoFilter, StyleConfig, load_style
from photostrip.controller import text_color_for_border
from photostrip.delivery import OrderStore, default_filename, save_strip
from photostrip.enrichment import EnrichmentConfig, MoodSuggester, merge_suggestion
from photostrip.errors import EnrichmentError, PhotoStripError
from photostrip.layout.config import DEFAULT_SLOT_COUNT

logger = logging.getLogger("photostrip.cli")


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _caption(value: str) -> str:
    if len(value) > MAX_CAPTION_CHARS:
        raise argparse.ArgumentTypeError(
            f"caption must be at most {MAX_CAPTION_CHARS} characters: got {len(value)}"
        )
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photostrip",
        description="Compose up to four photos into a printable photo strip.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="More logging (-v info, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a strip")
    render.add_argument("images", nargs="+", type=Path, help=f"Up to {DEFAULT_SLOT_COUNT} photos, top to bottom")
    render.add_argument("-o", "--output", type=Path, default=None, help="Output JPEG (file or directory)")
    render.add_argument("--style", type=Path, default=None, help="JSON style file")
    render.add_argument("--caption", type=_caption, default=None)
    render.add_argument("--border-color", default=None)
    render.add_argument("--text-color", default=None)
    render.add_argument("--font", dest="font_family", default=None)
    render.add_argument("--filter", choices=[f.value for f in PhotoFilter], default=None)
    render.add_argument("--no-date", action="store_true", help="Omit the date stamp")
    render.add_argument("--suggest", action="store_true", help="Ask Gemini for caption and colours first")
    render.add_argument("--model", default=None, help="Gemini model for --suggest")
    render.add_argument("--order-dir", type=Path, default=None, help="Also submit the strip as an order")

    orders = sub.add_parser("orders", help="Manage the order history")
    orders.add_argument("action", choices=["list", "export", "clear"])
    orders.add_argument("order_id", nargs="?", default=None)
    orders.add_argument("--order-dir", type=Path, required=True)
    orders.add_argument("-o", "--output", type=Path, default=None)

    return parser


def _style_from_args(args: argparse.Namespace) -> StyleConfig:
    style = load_style(args.style) if args.style else StyleConfig()

    changes = {}
    for name in ("caption", "text_color", "font_family", "filter"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if args.border_color is not None:
        changes["border_color"] = args.border_color
        if args.text_color is None:
            changes["text_color"] = text_color_for_border(args.border_color)
    if args.no_date:
        changes["show_date"] = False
    return style.replace(**changes) if changes else style


def _cmd_render(args: argparse.Namespace) -> int:
    if len(args.images) > DEFAULT_SLOT_COUNT:
        print(f"error: at most {DEFAULT_SLOT_COUNT} images fit on a strip", file=sys.stderr)
        return 2

    style = _style_from_args(args)

    if args.suggest:
        config = EnrichmentConfig(model=args.model) if args.model else EnrichmentConfig()
        suggester = MoodSuggester(config)
        try:
            suggestion = suggester.suggest(args.images)
        except EnrichmentError as e:
            print(f"AI suggestion unavailable, keeping your style: {e}", file=sys.stderr)
        else:
            style = merge_suggestion(style, suggestion)
            print(f"Mood: {suggestion.mood}  caption: {suggestion.caption}  colour: {suggestion.suggested_color}")

    strip = render_strip(args.images, style)

    output = args.output or Path(default_filename())
    path = save_strip(strip, output)
    print(f"Wrote {path} ({strip.width}x{strip.height})")

    if args.order_dir is not None:
        order = OrderStore(args.order_dir).submit(strip)
        print(f"Order #{order.id} submitted")
    return 0


def _cmd_orders(args: argparse.Namespace) -> int:
    store = OrderStore(args.order_dir)

    if args.action == "list":
        orders = store.list_orders()
        if not orders:
            print("No orders")
        for order in orders:
            print(f"#{order.id}  {order.created_at:%Y-%m-%d %H:%M:%S}  {order.filename}")
        return 0

    if args.action == "export":
        if not args.order_id:
            print("error: export needs an order id", file=sys.stderr)
            return 2
        dest = args.output or Path.cwd()
        path = store.export(args.order_id, dest)
        print(f"Wrote {path}")
        return 0

    removed = store.clear()
    print(f"Removed {removed} order(s)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "render":
            return _cmd_render(args)
        return _cmd_orders(args)
    except (PhotoStripError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
