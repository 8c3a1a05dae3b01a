"""Core value types shared across the scrambler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

Rect = Tuple[int, int, int, int]  # (x, y, w, h)

ROTATIONS = (0, 90, 180, 270)


@dataclass(frozen=True)
class Tile:
    """A source rectangle produced by partitioning, in row-major order."""

    index: int
    x: int
    y: int
    w: int
    h: int

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.w, self.h)

    def extract(self, image: np.ndarray) -> np.ndarray:
        """Return a copy of this tile's pixels from `image`."""
        return image[self.y : self.y + self.h, self.x : self.x + self.w].copy()


@dataclass(frozen=True)
class Piece:
    """A tile placed in a board cell with its rotation and flips."""

    origin_index: int
    rotation: int = 0
    flip_h: bool = False
    flip_v: bool = False

    def __post_init__(self) -> None:
        if self.rotation not in ROTATIONS:
            raise ValueError(f"rotation must be one of {ROTATIONS}, got {self.rotation}")

    @classmethod
    def identity(cls, origin_index: int) -> "Piece":
        return cls(origin_index=origin_index)

    def rotated(self) -> "Piece":
        """Return this piece turned a further 90 degrees clockwise."""
        return Piece(
            origin_index=self.origin_index,
            rotation=(self.rotation + 90) % 360,
            flip_h=self.flip_h,
            flip_v=self.flip_v,
        )
