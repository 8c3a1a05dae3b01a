"""Tests for board state operations and invariants."""

from __future__ import annotations

import pytest

from tilescramble.board import BoardState
from tilescramble.seed import derive_seed
from tilescramble.shuffler import XorShift32
from tilescramble.types import Piece


def _board(n: int = 9) -> BoardState:
    board = BoardState()
    board.initialize(n)
    return board


def test_initialize_identity() -> None:
    """Position i holds tile i, unrotated and unflipped."""
    board = _board(4)
    assert board.pieces == [Piece(i) for i in range(4)]
    assert board.is_identity()
    assert board.snapshot == board.pieces


def test_operations_without_board_are_noops() -> None:
    """Nothing happens before initialize."""
    board = BoardState()
    assert not board.is_loaded
    assert board.shuffle(XorShift32(1)) is False
    assert board.swap(0, 1) is False
    assert board.rotate_at(0) is False
    assert board.reset() is False
    assert board.select(0) is False
    assert board.pieces == []


def test_shuffle_empty_board_is_noop() -> None:
    """A zero-tile board does not consume draws."""
    board = _board(0)
    rng = XorShift32(3)
    assert board.shuffle(rng) is False
    assert rng.state == 3


def test_shuffle_keeps_a_permutation() -> None:
    """Shuffled origin indices are exactly range(n)."""
    board = _board(36)
    assert board.shuffle(XorShift32(derive_seed("perm")), allow_rotation=True, allow_flip=True)
    assert sorted(board.origin_indices()) == list(range(36))


def test_shuffle_abc123_reproducible() -> None:
    """Two independent boards shuffled from abc123 are identical."""
    a, b = _board(9), _board(9)
    a.shuffle(XorShift32(derive_seed("abc123")), allow_rotation=True, allow_flip=True)
    b.shuffle(XorShift32(derive_seed("abc123")), allow_rotation=True, allow_flip=True)
    assert a.pieces == b.pieces
    assert a.origin_indices() == [5, 7, 4, 0, 2, 8, 6, 3, 1]


def test_shuffle_starts_from_identity() -> None:
    """Prior swaps do not change the shuffle result."""
    board = _board(9)
    board.shuffle(XorShift32(derive_seed("k")), allow_rotation=False)
    first = board.pieces
    board.swap(0, 8)
    board.rotate_at(3)
    board.shuffle(XorShift32(derive_seed("k")), allow_rotation=False)
    assert board.pieces == first
    assert all(p.rotation == 0 for p in first)


def test_swap_is_involution_and_carries_transforms() -> None:
    """Swapping twice restores the board; rotation moves with the piece."""
    board = _board(9)
    board.rotate_at(2)
    before = board.pieces
    board.swap(2, 7)
    assert board[7] == Piece(2, rotation=90)
    assert board[2] == Piece(7)
    board.swap(2, 7)
    assert board.pieces == before


def test_rotate_four_times_is_identity() -> None:
    """Four quarter turns return to the start."""
    board = _board(4)
    board.shuffle(XorShift32(derive_seed("spin")), allow_rotation=True, allow_flip=True)
    start = board[1]
    for expected in (90, 180, 270):
        board.rotate_at(1)
        assert board[1].rotation == (start.rotation + expected) % 360
    board.rotate_at(1)
    assert board[1] == start


def test_reset_restores_snapshot() -> None:
    """Reset after any edits reproduces the initial board."""
    board = _board(16)
    snapshot = board.snapshot
    board.shuffle(XorShift32(derive_seed("x")), allow_flip=True)
    board.swap(0, 15)
    board.rotate_at(4)
    board.select(3)
    assert board.reset()
    assert board.pieces == snapshot
    assert board.selected is None


def test_selection_and_rotate_selected() -> None:
    """At most one selected position; rotate_selected targets it."""
    board = _board(4)
    assert board.rotate_selected() is False
    board.select(2)
    assert board.selected == 2
    assert board.rotate_selected()
    assert board[2].rotation == 90
    board.deselect()
    assert board.selected is None


def test_out_of_range_positions_raise() -> None:
    """Invalid cells are rejected."""
    board = _board(4)
    with pytest.raises(ValueError):
        board.swap(0, 4)
    with pytest.raises(ValueError):
        board.rotate_at(-1)
    with pytest.raises(ValueError):
        board.select(10)


def test_piece_rejects_bad_rotation() -> None:
    """Rotation must be a multiple of 90 below 360."""
    with pytest.raises(ValueError):
        Piece(0, rotation=45)
