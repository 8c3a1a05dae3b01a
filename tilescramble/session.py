"""A single image/board scrambling session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .board import BoardState
from .compositor import Compositor, draw_overlay
from .hit_test import HitTester
from .image_io import encode_png, save_image
from .seed import derive_seed
from .shuffler import XorShift32
from .splitter import Partition, PartitionConfig, TileSplitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """Encoded PNG of the current arrangement and a filename for it."""

    data: bytes
    filename: str


class ScrambleSession:
    """Owns the loaded image, its partition and board.

    Operations that need an image are no-ops returning False (or None) until
    :meth:`load_image` has been called.
    """

    def __init__(self, config: Optional[PartitionConfig] = None) -> None:
        self.config = config if config is not None else PartitionConfig()
        self.board = BoardState()
        self.compositor = Compositor()
        self.image: Optional[np.ndarray] = None
        self.partition: Optional[Partition] = None

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def hit_tester(self) -> Optional[HitTester]:
        return HitTester(self.partition) if self.partition is not None else None

    def load_image(self, image: np.ndarray) -> Partition:
        """Install a decoded image and rebuild an identity board."""
        if image.ndim not in (2, 3):
            raise ValueError("image must be an HxW or HxWxC numpy array")
        self.image = image
        return self._rebuild()

    def configure(self, config: PartitionConfig) -> Optional[Partition]:
        """Switch partition settings; the board returns to identity."""
        self.config = config
        if self.image is None:
            return None
        return self._rebuild()

    def _rebuild(self) -> Partition:
        self.partition = TileSplitter(self.config).split_image(self.image)
        self.board.initialize(self.partition.tile_count)
        logger.info(
            "loaded %dx%d image as %d tiles (%s)",
            self.image.shape[1],
            self.image.shape[0],
            self.partition.tile_count,
            self.config.variant.value,
        )
        return self.partition

    def shuffle(self, passphrase: Optional[str] = "", allow_rotation: bool = True, allow_flip: bool = False) -> bool:
        """Scramble reproducibly from `passphrase`.

        Seed failures raise :class:`SeedDerivationError` before the board is
        touched.
        """
        if self.image is None or len(self.board) == 0:
            logger.debug("shuffle ignored: nothing to shuffle")
            return False
        seed = derive_seed(passphrase)
        done = self.board.shuffle(XorShift32(seed), allow_rotation=allow_rotation, allow_flip=allow_flip)
        if done:
            logger.info("shuffled %d pieces with seed %#010x", len(self.board), seed)
        return done

    def swap(self, pos_a: int, pos_b: int) -> bool:
        if self.image is None:
            return False
        return self.board.swap(pos_a, pos_b)

    def rotate_at(self, pos: int) -> bool:
        if self.image is None:
            return False
        return self.board.rotate_at(pos)

    def rotate_selected(self) -> bool:
        if self.image is None:
            return False
        return self.board.rotate_selected()

    def reset(self) -> bool:
        if self.image is None:
            return False
        return self.board.reset()

    def render(self, overlay: bool = False) -> Optional[np.ndarray]:
        """Composite the current board; `overlay` adds grid and selection marks."""
        if self.image is None or self.partition is None:
            return None
        canvas = self.compositor.render(self.image, self.partition, self.board.pieces)
        if overlay:
            canvas = draw_overlay(canvas, self.partition, self.board.selected)
        return canvas

    def export(self) -> Optional[ExportResult]:
        """Encode the current arrangement at source resolution as PNG."""
        if self.image is None or self.partition is None or self.partition.is_empty:
            logger.debug("export ignored: no tiles to export")
            return None
        canvas = self.render(overlay=False)
        return ExportResult(data=encode_png(canvas), filename=self.partition.suggested_filename())

    def save(self, directory: Union[str, Path] = ".") -> Optional[Path]:
        """Write the current arrangement into `directory` under its suggested name."""
        if self.image is None or self.partition is None or self.partition.is_empty:
            return None
        return save_image(Path(directory) / self.partition.suggested_filename(), self.render())
