"""End-to-end tests for a scrambling session."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from tilescramble import session as session_module
from tilescramble.image_io import decode_image, load_image
from tilescramble.seed import SeedDerivationError
from tilescramble.session import ScrambleSession
from tilescramble.splitter import PartitionConfig, PartitionVariant
from tilescramble.types import Piece
from tilescramble.utils import generate_gradient_image, generate_random_image


def _loaded(config: PartitionConfig | None = None, width: int = 300, height: int = 300) -> ScrambleSession:
    session = ScrambleSession(config)
    session.load_image(generate_random_image(width, height, seed=1))
    return session


def test_no_image_operations_are_noops() -> None:
    """Without an image nothing changes and nothing is exported."""
    session = ScrambleSession()
    assert session.shuffle("abc") is False
    assert session.swap(0, 1) is False
    assert session.rotate_at(0) is False
    assert session.rotate_selected() is False
    assert session.reset() is False
    assert session.render() is None
    assert session.export() is None
    assert session.configure(PartitionConfig(grid_count=6)) is None
    assert session.hit_tester is None


def test_load_builds_identity_board() -> None:
    """Loading an image yields one identity piece per tile."""
    session = _loaded()
    assert len(session.board) == session.partition.tile_count == 16
    assert session.board.is_identity()
    np.testing.assert_array_equal(session.render(), session.image)


def test_abc123_reproducible_across_sessions() -> None:
    """Same key, grid and flags give the same board in independent sessions."""
    boards = []
    for _ in range(2):
        session = _loaded(PartitionConfig(grid_count=3), 90, 90)
        assert session.shuffle("abc123", allow_rotation=True, allow_flip=True)
        boards.append(session.board.pieces)
    assert boards[0] == boards[1]
    assert boards[0][0] == Piece(5, 180, True, False)
    assert boards[0][8] == Piece(1, 90, False, False)


def test_empty_passphrase_is_fixed() -> None:
    """An empty key shuffles identically every time."""
    first = _loaded()
    first.shuffle("")
    again = _loaded()
    again.shuffle(None)
    assert first.board.pieces == again.board.pieces
    assert not first.board.is_identity()


def test_seed_failure_leaves_board_intact(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failed hash aborts before any mutation and notifies the caller."""
    session = _loaded()
    session.shuffle("before")
    session.swap(0, 1)
    before = session.board.pieces

    def _fail(_text):
        raise SeedDerivationError("hash unavailable")

    monkeypatch.setattr(session_module, "derive_seed", _fail)
    with pytest.raises(SeedDerivationError):
        session.shuffle("after")
    assert session.board.pieces == before


def test_configure_rebuilds_identity_board() -> None:
    """Changing the partition discards edits and resizes the board."""
    session = _loaded()
    session.shuffle("x")
    partition = session.configure(PartitionConfig(variant=PartitionVariant.PIXEL, tile_size=64))
    assert (partition.cols, partition.rows) == (4, 4)
    assert len(session.board) == 16
    assert session.board.is_identity()


def test_reset_after_edits() -> None:
    """Reset restores the loaded arrangement."""
    session = _loaded()
    session.shuffle("edit", allow_flip=True)
    session.swap(3, 9)
    session.rotate_at(2)
    assert session.reset()
    np.testing.assert_array_equal(session.render(), session.image)


def test_degenerate_partition_disables_shuffle_and_export() -> None:
    """A source smaller than one tile has an empty board."""
    session = _loaded(PartitionConfig(variant=PartitionVariant.PIXEL, tile_size=128), 100, 100)
    assert len(session.board) == 0
    assert session.shuffle("abc") is False
    assert session.export() is None
    assert (session.render() == 0).all()


def test_export_png_full_resolution() -> None:
    """Export encodes the current arrangement losslessly with a descriptive name."""
    image = generate_gradient_image(120, 80)
    session = ScrambleSession(PartitionConfig(grid_count=4))
    session.load_image(image)
    session.shuffle("export", allow_flip=True)
    result = session.export()
    assert result.filename == "puzzle_4x4.png"
    assert result.data[:8] == b"\x89PNG\r\n\x1a\n"
    decoded = decode_image(result.data)
    assert decoded.shape == image.shape
    np.testing.assert_array_equal(decoded, session.render())


def test_export_filename_for_pixel_variant() -> None:
    """Pixel variants name the edge length and tile counts."""
    session = _loaded(PartitionConfig(variant=PartitionVariant.PIXEL, tile_size=64), 100, 100)
    assert session.export().filename == "puzzle_64px_1x1.png"


def test_render_overlay_shows_selection() -> None:
    """Overlay rendering marks the selected cell but export does not."""
    session = _loaded()
    session.board.select(0)
    plain = session.render()
    marked = session.render(overlay=True)
    assert not np.array_equal(plain, marked)
    np.testing.assert_array_equal(decode_image(session.export().data), plain)


def test_save_writes_suggested_file(tmp_path: Path) -> None:
    """save() writes the PNG under its suggested name."""
    session = _loaded(PartitionConfig(variant=PartitionVariant.MICRO), 64, 48)
    session.shuffle("save")
    path = session.save(tmp_path / "out")
    assert path.name == "puzzle_16px_4x3.png"
    assert path.read_bytes()[:4] == b"\x89PNG"
    np.testing.assert_array_equal(load_image(path), session.render())


def test_save_without_board_writes_nothing(tmp_path: Path) -> None:
    """No image or an empty board leaves the directory untouched."""
    assert ScrambleSession().save(tmp_path) is None
    session = _loaded(PartitionConfig(variant=PartitionVariant.PIXEL, tile_size=128), 100, 100)
    assert session.save(tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_load_image_missing_file(tmp_path: Path) -> None:
    """A missing input path is reported as ValueError."""
    with pytest.raises(ValueError, match="no image file"):
        load_image(tmp_path / "absent.png")
