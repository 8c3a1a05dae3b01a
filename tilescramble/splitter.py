"""Image partitioning into scramble tiles."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .types import Rect, Tile

logger = logging.getLogger(__name__)

GRID_COUNTS = (3, 4, 6, 10)
TILE_SIZES = (16, 32, 64, 128)
MICRO_TILE_SIZE = TILE_SIZES[0]

# Strength slider labels mapped to grid counts.
STRENGTH_LEVELS = {
    "weak": 3,
    "normal": 4,
    "strong": 6,
    "max": 10,
}


class PartitionVariant(str, Enum):
    GRID = "grid"
    PIXEL = "pixel"
    MICRO = "micro"


@dataclass(frozen=True)
class PartitionConfig:
    """How to carve the source image into tiles."""

    variant: PartitionVariant = PartitionVariant.GRID
    grid_count: int = 4
    tile_size: int = 32
    square_crop: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "variant", PartitionVariant(self.variant))
        if self.variant is PartitionVariant.GRID and self.grid_count not in GRID_COUNTS:
            raise ValueError(f"grid_count must be one of {GRID_COUNTS}, got {self.grid_count}")
        if self.variant is PartitionVariant.PIXEL and self.tile_size not in TILE_SIZES:
            raise ValueError(f"tile_size must be one of {TILE_SIZES}, got {self.tile_size}")

    @classmethod
    def from_strength(cls, level: str, square_crop: bool = False) -> "PartitionConfig":
        """Build a grid config from a strength label (weak/normal/strong/max)."""
        key = level.strip().lower()
        if key not in STRENGTH_LEVELS:
            raise ValueError(f"unknown strength {level!r}; choose from {sorted(STRENGTH_LEVELS)}")
        return cls(
            variant=PartitionVariant.GRID,
            grid_count=STRENGTH_LEVELS[key],
            square_crop=square_crop,
        )

    @property
    def edge_pixels(self) -> Optional[int]:
        """Tile edge length for the pixel variants, None for the grid variant."""
        if self.variant is PartitionVariant.MICRO:
            return MICRO_TILE_SIZE
        if self.variant is PartitionVariant.PIXEL:
            return self.tile_size
        return None


@dataclass(frozen=True)
class Partition:
    """Result of splitting: tile rectangles plus the grid geometry."""

    config: PartitionConfig
    region: Rect
    cols: int
    rows: int
    tile_w: int
    tile_h: int
    tiles: Tuple[Tile, ...] = field(default_factory=tuple)
    col_edges: Tuple[int, ...] = (0,)
    row_edges: Tuple[int, ...] = (0,)

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    @property
    def covered_size(self) -> Tuple[int, int]:
        """Width and height of the tiled area, excluding remainder strips."""
        return self.col_edges[-1], self.row_edges[-1]

    def cell_rect(self, pos: int) -> Rect:
        """Destination rectangle of board cell `pos`, relative to the region."""
        if not 0 <= pos < self.tile_count:
            raise ValueError(f"position {pos} out of range for {self.tile_count} tiles")
        r, c = divmod(pos, self.cols)
        x0, x1 = self.col_edges[c], self.col_edges[c + 1]
        y0, y1 = self.row_edges[r], self.row_edges[r + 1]
        return (x0, y0, x1 - x0, y1 - y0)

    def cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Return ``(row, col)`` of the cell containing a region point, if any."""
        if self.is_empty or x < 0 or y < 0:
            return None
        c = bisect_right(self.col_edges, x) - 1
        r = bisect_right(self.row_edges, y) - 1
        if c >= self.cols or r >= self.rows:
            return None
        return r, c

    def crop(self, image: np.ndarray) -> np.ndarray:
        """Return the region of `image` that the board covers (with remainders)."""
        x, y, w, h = self.region
        return image[y : y + h, x : x + w]

    def suggested_filename(self) -> str:
        edge = self.config.edge_pixels
        if edge is None:
            n = self.config.grid_count
            return f"puzzle_{n}x{n}.png"
        return f"puzzle_{edge}px_{self.cols}x{self.rows}.png"


def _grid_edges(length: int, parts: int) -> Tuple[int, ...]:
    """Cell boundaries ``floor(k * length / parts)``; the last one is `length`."""
    return tuple((k * length) // parts for k in range(parts + 1))


class TileSplitter:
    """Split an image area into row-major tiles under one partition variant."""

    def __init__(self, config: Optional[PartitionConfig] = None) -> None:
        self.config = config if config is not None else PartitionConfig()

    def crop_region(self, width: int, height: int) -> Rect:
        """Return the centered square crop, or the full frame."""
        if self.config.square_crop:
            side = min(width, height)
            return ((width - side) // 2, (height - side) // 2, side, side)
        return (0, 0, width, height)

    def split(self, width: int, height: int) -> Partition:
        """Carve a `width x height` source into tiles in row-major order.

        The grid variant spreads the region over N cells per axis whose edges
        differ by at most one pixel; the pixel variants use fixed edges and
        leave the remainder strips untiled.
        """
        if width < 0 or height < 0:
            raise ValueError("width and height must be non-negative")

        region = self.crop_region(width, height)
        rx, ry, rw, rh = region

        edge = self.config.edge_pixels
        if edge is None:
            n = self.config.grid_count
            tile_w, tile_h = rw // n, rh // n
            cols = rows = n if tile_w > 0 and tile_h > 0 else 0
            col_edges = _grid_edges(rw, cols) if cols else (0,)
            row_edges = _grid_edges(rh, rows) if rows else (0,)
        else:
            tile_w = tile_h = edge
            cols, rows = rw // edge, rh // edge
            if cols == 0 or rows == 0:
                cols = rows = 0
            col_edges = tuple(k * edge for k in range(cols + 1))
            row_edges = tuple(k * edge for k in range(rows + 1))

        if cols == 0:
            logger.warning(
                "partition of %dx%d region with %s yields no tiles", rw, rh, self.config
            )
            return Partition(self.config, region, 0, 0, tile_w, tile_h, ())

        tiles: List[Tile] = []
        index = 0
        for r in range(rows):
            y0, y1 = row_edges[r], row_edges[r + 1]
            for c in range(cols):
                x0, x1 = col_edges[c], col_edges[c + 1]
                tiles.append(Tile(index=index, x=rx + x0, y=ry + y0, w=x1 - x0, h=y1 - y0))
                index += 1

        logger.debug(
            "split %dx%d region into %dx%d tiles of about %dx%d px", rw, rh, cols, rows, tile_w, tile_h
        )
        return Partition(
            self.config, region, cols, rows, tile_w, tile_h, tuple(tiles), col_edges, row_edges
        )

    def split_image(self, image: np.ndarray) -> Partition:
        """Split using the dimensions of an HxW[xC] image array."""
        if image.ndim not in (2, 3):
            raise ValueError("image must be an HxW or HxWxC numpy array")
        height, width = image.shape[:2]
        return self.split(width, height)
