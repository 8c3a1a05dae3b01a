"""Render a board of transformed tiles into an output raster."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from .board import BoardState
from .splitter import Partition
from .types import Piece

# (cos, sin) of clockwise rotation in image coordinates (y axis pointing down).
_ROTATION_TABLE = {0: (1, 0), 90: (0, 1), 180: (-1, 0), 270: (0, -1)}

SELECTION_COLOR = (59, 130, 246)


def piece_transform_matrix(piece: Piece, cell_w: float, cell_h: float) -> np.ndarray:
    """Affine 3x3 matrix from tile-centered coordinates to cell coordinates.

    Built as translate(center) @ scale(flip) @ rotate: the frame is mirrored
    first and then rotated, so a horizontal flip always mirrors across the
    cell's vertical axis regardless of the rotation.
    """
    cos, sin = _ROTATION_TABLE[piece.rotation]
    translate = np.array([[1, 0, cell_w / 2.0], [0, 1, cell_h / 2.0], [0, 0, 1]], dtype=np.float64)
    scale = np.diag([-1.0 if piece.flip_h else 1.0, -1.0 if piece.flip_v else 1.0, 1.0])
    rotate = np.array([[cos, -sin, 0], [sin, cos, 0], [0, 0, 1]], dtype=np.float64)
    return translate @ scale @ rotate


def transform_tile(tile: np.ndarray, piece: Piece) -> np.ndarray:
    """Pixel equivalent of :func:`piece_transform_matrix`."""
    out = np.rot90(tile, k=-(piece.rotation // 90), axes=(0, 1))
    if piece.flip_h:
        out = out[:, ::-1]
    if piece.flip_v:
        out = out[::-1, :]
    return out


def fit_to_cell(tile: np.ndarray, width: int, height: int) -> np.ndarray:
    """Nearest-neighbour scale `tile` to `width x height`; same-size tiles pass through."""
    if tile.shape[:2] == (height, width):
        return tile
    resized = cv2.resize(
        np.ascontiguousarray(tile), (width, height), interpolation=cv2.INTER_NEAREST
    )
    return resized.reshape((height, width) + tile.shape[2:])


def _color_for(canvas: np.ndarray, rgb: Tuple[int, int, int]):
    if canvas.ndim == 2:
        return int(round(sum(rgb) / 3.0))
    channels = canvas.shape[2]
    if channels == 4:
        return (*rgb, 255)
    if channels == 3:
        return rgb
    return int(round(sum(rgb) / 3.0))


class Compositor:
    """Draw every board cell from its source tile, in row-major order."""

    def __init__(self, background: int = 0) -> None:
        self.background = background

    def render(self, image: np.ndarray, partition: Partition, pieces: Sequence[Piece]) -> np.ndarray:
        """Return the scrambled region at source resolution.

        Remainder strips outside the tiled area keep the background value.
        Each transformed tile is scaled to fill its destination cell, which
        only changes pixels when the two differ in size (grid cells may vary
        by one pixel, quarter turns swap a tile's width and height).
        """
        if isinstance(pieces, BoardState):
            pieces = pieces.pieces
        if len(pieces) != partition.tile_count:
            raise ValueError(
                f"board has {len(pieces)} pieces but partition has {partition.tile_count} tiles"
            )

        canvas = np.full_like(partition.crop(image), self.background)
        for pos, piece in enumerate(pieces):
            source = partition.tiles[piece.origin_index].extract(image)
            x, y, w, h = partition.cell_rect(pos)
            canvas[y : y + h, x : x + w] = fit_to_cell(transform_tile(source, piece), w, h)
        return canvas


def draw_overlay(
    canvas: np.ndarray,
    partition: Partition,
    selected: Optional[int] = None,
    line_alpha: float = 0.15,
    line_width: int = 3,
) -> np.ndarray:
    """Return a copy of `canvas` with faint grid lines and a selection outline."""
    out = canvas.copy()
    if partition.is_empty:
        return out

    covered_w, covered_h = partition.covered_size
    keep = 1.0 - line_alpha
    for c in range(1, partition.cols):
        x = partition.col_edges[c]
        out[:covered_h, x] = (out[:covered_h, x].astype(np.float32) * keep).astype(out.dtype)
    for r in range(1, partition.rows):
        y = partition.row_edges[r]
        out[y, :covered_w] = (out[y, :covered_w].astype(np.float32) * keep).astype(out.dtype)

    if selected is not None:
        x, y, w, h = partition.cell_rect(selected)
        color = _color_for(out, SELECTION_COLOR)
        t = max(1, min(line_width, w // 2, h // 2))
        out[y : y + t, x : x + w] = color
        out[y + h - t : y + h, x : x + w] = color
        out[y : y + h, x : x + t] = color
        out[y : y + h, x + w - t : x + w] = color
    return out
