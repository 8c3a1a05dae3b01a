"""Scramble an image into rotated/flipped tiles reproducibly from a passphrase."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Tuple

from tilescramble.hit_test import GestureController
from tilescramble.image_io import load_image
from tilescramble.seed import SeedDerivationError
from tilescramble.session import ScrambleSession
from tilescramble.splitter import (
    GRID_COUNTS,
    STRENGTH_LEVELS,
    TILE_SIZES,
    PartitionConfig,
    PartitionVariant,
)
from tilescramble.utils import generate_checker_image

logger = logging.getLogger("scramble")


def parse_pair(value: str) -> Tuple[int, int]:
    """Parse a swap argument in format A,B, e.g. 0,5."""
    parts = value.replace(" ", "").split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("swap must be in format A,B, e.g. 0,5")
    try:
        a, b = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError("swap positions must be integers") from exc
    if a < 0 or b < 0:
        raise argparse.ArgumentTypeError("swap positions must be non-negative")
    return a, b


def build_config(args: argparse.Namespace) -> PartitionConfig:
    """Translate partition flags into a PartitionConfig."""
    if args.micro:
        return PartitionConfig(variant=PartitionVariant.MICRO, square_crop=args.square_crop)
    if args.tile_size is not None:
        return PartitionConfig(
            variant=PartitionVariant.PIXEL, tile_size=args.tile_size, square_crop=args.square_crop
        )
    if args.grid is not None:
        return PartitionConfig(grid_count=args.grid, square_crop=args.square_crop)
    return PartitionConfig.from_strength(args.strength, square_crop=args.square_crop)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(description="Scramble an image into a keyed tile puzzle.")
    parser.add_argument("--image", default=None, help="Input image path (default: generated)")
    parser.add_argument("--key", default="", help="Passphrase; empty gives a fixed arrangement")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--strength",
        choices=sorted(STRENGTH_LEVELS),
        default="normal",
        help="Grid preset: weak=3, normal=4, strong=6, max=10 (default: normal)",
    )
    group.add_argument("--grid", type=int, choices=GRID_COUNTS, help="Uniform NxN grid")
    group.add_argument("--tile-size", type=int, choices=TILE_SIZES, help="Fixed tile edge in px")
    group.add_argument("--micro", action="store_true", help="Dense 16px tiles")
    parser.add_argument("--square-crop", action="store_true", help="Crop to a centered square")
    parser.add_argument("--no-rotation", action="store_true", help="Do not rotate pieces")
    parser.add_argument("--flip", action="store_true", help="Also flip pieces")
    parser.add_argument(
        "--swap", type=parse_pair, action="append", default=[], help="Swap two cells after shuffling"
    )
    parser.add_argument(
        "--rotate", type=int, action="append", default=[], help="Rotate a cell 90 degrees after shuffling"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Optional output directory for the scrambled PNG (default: do not save)",
    )
    parser.add_argument("--no-show", action="store_true", help="Do not display images")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Open a viewer: click two tiles to swap, long-press/right-click to rotate",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def check_positions(args: argparse.Namespace, tile_count: int) -> None:
    """Reject --swap/--rotate cells that do not exist on the board."""
    positions = [p for pair in args.swap for p in pair] + list(args.rotate)
    for pos in positions:
        if not 0 <= pos < tile_count:
            raise argparse.ArgumentTypeError(
                f"position {pos} out of range for {tile_count} tiles (0..{tile_count - 1})"
            )


class _TimerHandle:
    """Expose a matplotlib timer through ``cancel()``."""

    def __init__(self, timer) -> None:
        self.timer = timer

    def cancel(self) -> None:
        self.timer.stop()


def run_viewer(session: ScrambleSession, args: argparse.Namespace) -> None:
    """Interactive board: r rotates the selection, s shuffles, u resets, e exports."""
    import matplotlib.pyplot as plt
    from matplotlib.backend_bases import MouseButton

    plt.rcParams["keymap.home"] = ["home"]
    plt.rcParams["keymap.save"] = ["ctrl+s"]

    fig, ax = plt.subplots(figsize=(7, 7))
    artist = ax.imshow(session.render(overlay=True))
    ax.set_title("click: select/swap   long-press or right-click: rotate")
    ax.axis("off")

    def redraw(*_) -> None:
        artist.set_data(session.render(overlay=True))
        fig.canvas.draw_idle()

    def schedule(delay: float, callback) -> _TimerHandle:
        timer = fig.canvas.new_timer(interval=int(delay * 1000))
        timer.single_shot = True
        timer.add_callback(callback)
        timer.start()
        return _TimerHandle(timer)

    controller = GestureController(session.board, schedule, on_change=redraw)
    tester = session.hit_tester

    def on_press(event) -> None:
        if event.inaxes is not ax or event.xdata is None:
            return
        # imshow puts pixel centers on integer data coordinates.
        controller.press(tester.position_at(event.xdata + 0.5, event.ydata + 0.5))

    def on_release(event) -> None:
        key = event.key or ""
        secondary = event.button == MouseButton.RIGHT or "control" in key or "cmd" in key
        controller.release(secondary=secondary)

    def on_key(event) -> None:
        if event.key == "r" and session.rotate_selected():
            redraw()
        elif event.key == "s":
            session.shuffle(args.key, allow_rotation=not args.no_rotation, allow_flip=args.flip)
            redraw()
        elif event.key == "u" and session.reset():
            redraw()
        elif event.key == "e":
            path = session.save(args.output or ".")
            if path is not None:
                print(f"Exported: {path.resolve()}")

    fig.canvas.mpl_connect("button_press_event", on_press)
    fig.canvas.mpl_connect("button_release_event", on_release)
    fig.canvas.mpl_connect("key_press_event", on_key)
    plt.show()


def main(argv: List[str] | None = None) -> int:
    """Load, scramble, optionally edit and export one image."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    image = load_image(Path(args.image)) if args.image else generate_checker_image(480, 360)
    session = ScrambleSession(build_config(args))
    partition = session.load_image(image)
    if partition.is_empty:
        print("Image is smaller than one tile; nothing to scramble.")
        return 1

    try:
        check_positions(args, partition.tile_count)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    try:
        session.shuffle(args.key, allow_rotation=not args.no_rotation, allow_flip=args.flip)
    except SeedDerivationError as exc:
        logger.error("shuffle aborted: %s", exc)
        return 1
    for a, b in args.swap:
        session.swap(a, b)
    for pos in args.rotate:
        session.rotate_at(pos)

    print(f"Input image: {args.image or 'generated checkerboard'}")
    print(f"Tiles: {partition.cols}x{partition.rows} of {partition.tile_w}x{partition.tile_h}px")
    print(f"Board order: {session.board.origin_indices()}")

    if args.output is not None:
        path = session.save(args.output)
        print(f"Output image: {path.resolve()}")
    else:
        print("Output image: not saved (no --output specified)")

    if args.interactive:
        run_viewer(session, args)
    elif not args.no_show:
        import matplotlib.pyplot as plt

        fig, axes = plt.subplots(1, 2, figsize=(10, 5))
        axes[0].imshow(partition.crop(image))
        axes[0].set_title("Original")
        axes[1].imshow(session.render(overlay=False))
        axes[1].set_title("Scrambled")
        for ax in axes:
            ax.axis("off")
        plt.tight_layout()
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
