"""Seeded permutation and per-piece transform assignment."""

from __future__ import annotations

from typing import List, Sequence

from .types import Piece

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = float(1 << 32)


class XorShift32:
    """Marsaglia xorshift generator with bit-exact unsigned 32-bit state."""

    def __init__(self, seed: int) -> None:
        state = int(seed) & _MASK32
        if state == 0:
            raise ValueError("xorshift32 seed must be non-zero")
        self._state = state

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        """Advance the state by one step and return it."""
        x = self._state
        x = (x ^ (x << 13)) & _MASK32
        x = (x ^ (x >> 17)) & _MASK32
        x = (x ^ (x << 5)) & _MASK32
        self._state = x
        return x

    def random(self) -> float:
        """Return the next draw in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32


def permute_indices(n: int, rng: XorShift32) -> List[int]:
    """Fisher-Yates shuffle of ``range(n)`` consuming one draw per step.

    Steps run from ``i = n - 1`` down to 1; the draw order is fixed so a seed
    always reproduces the same permutation.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    order = list(range(n))
    for i in range(n - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        order[i], order[j] = order[j], order[i]
    return order


def assign_transforms(
    order: Sequence[int],
    rng: XorShift32,
    allow_rotation: bool = True,
    allow_flip: bool = False,
) -> List[Piece]:
    """Build pieces for `order`, drawing rotation then flips per position.

    Disabled transforms consume no draws.
    """
    pieces: List[Piece] = []
    for origin in order:
        rotation = int(rng.random() * 4) * 90 if allow_rotation else 0
        flip_h = flip_v = False
        if allow_flip:
            flip_h = rng.random() < 0.5
            flip_v = rng.random() < 0.5
        pieces.append(
            Piece(origin_index=int(origin), rotation=rotation, flip_h=flip_h, flip_v=flip_v)
        )
    return pieces
