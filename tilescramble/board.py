"""Board state: piece order, selection and the identity snapshot."""

from __future__ import annotations

import logging
from typing import List, Optional

from .shuffler import XorShift32, assign_transforms, permute_indices
from .types import Piece

logger = logging.getLogger(__name__)


class BoardState:
    """Ordered pieces, one per cell, plus at most one selected position.

    Every operation except :meth:`initialize` is a no-op (returning False)
    while no board exists.
    """

    def __init__(self) -> None:
        self._pieces: Optional[List[Piece]] = None
        self._snapshot: List[Piece] = []
        self._selected: Optional[int] = None

    def __len__(self) -> int:
        return len(self._pieces) if self._pieces is not None else 0

    def __getitem__(self, pos: int) -> Piece:
        if self._pieces is None:
            raise IndexError("board is not initialized")
        return self._pieces[pos]

    @property
    def is_loaded(self) -> bool:
        return self._pieces is not None

    @property
    def pieces(self) -> List[Piece]:
        """A copy of the current pieces in cell order."""
        return list(self._pieces) if self._pieces is not None else []

    @property
    def snapshot(self) -> List[Piece]:
        return list(self._snapshot)

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    def origin_indices(self) -> List[int]:
        return [p.origin_index for p in self.pieces]

    def is_identity(self) -> bool:
        return self._pieces is not None and self._pieces == self._snapshot

    def initialize(self, tile_count: int) -> None:
        """Build the identity board and remember it for :meth:`reset`."""
        if tile_count < 0:
            raise ValueError("tile_count must be non-negative")
        self._snapshot = [Piece.identity(i) for i in range(tile_count)]
        self._pieces = list(self._snapshot)
        self._selected = None
        logger.debug("board initialized with %d pieces", tile_count)

    def clear(self) -> None:
        """Drop the board entirely."""
        self._pieces = None
        self._snapshot = []
        self._selected = None

    def _check_pos(self, pos: int) -> None:
        if not 0 <= pos < len(self):
            raise ValueError(f"position {pos} out of range for board of {len(self)}")

    def shuffle(self, rng: XorShift32, allow_rotation: bool = True, allow_flip: bool = False) -> bool:
        """Permute the identity arrangement and assign transforms from `rng`.

        The new arrangement is built completely before it replaces the
        current one.
        """
        if not self._pieces:
            logger.debug("shuffle ignored: no pieces on board")
            return False
        base = [p.origin_index for p in self._snapshot]
        order = [base[i] for i in permute_indices(len(base), rng)]
        pieces = assign_transforms(order, rng, allow_rotation=allow_rotation, allow_flip=allow_flip)
        self._pieces = pieces
        self._selected = None
        return True

    def swap(self, pos_a: int, pos_b: int) -> bool:
        """Exchange the pieces in two cells; transforms travel with them."""
        if self._pieces is None:
            return False
        self._check_pos(pos_a)
        self._check_pos(pos_b)
        self._pieces[pos_a], self._pieces[pos_b] = self._pieces[pos_b], self._pieces[pos_a]
        return True

    def rotate_at(self, pos: int) -> bool:
        if self._pieces is None:
            return False
        self._check_pos(pos)
        self._pieces[pos] = self._pieces[pos].rotated()
        return True

    def rotate_selected(self) -> bool:
        if self._selected is None:
            return False
        return self.rotate_at(self._selected)

    def reset(self) -> bool:
        """Restore the snapshot taken at :meth:`initialize`."""
        if self._pieces is None:
            return False
        self._pieces = list(self._snapshot)
        self._selected = None
        return True

    def select(self, pos: int) -> bool:
        if self._pieces is None:
            return False
        self._check_pos(pos)
        self._selected = pos
        return True

    def deselect(self) -> bool:
        if self._pieces is None:
            return False
        self._selected = None
        return True
