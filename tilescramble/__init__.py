"""Passphrase-reproducible image tile scrambling."""

from .board import BoardState
from .compositor import Compositor, draw_overlay, piece_transform_matrix, transform_tile
from .hit_test import NO_HIT, GestureController, GestureOutcome, GestureState, HitTester
from .image_io import decode_image, encode_png, load_image, save_image
from .seed import SeedDerivationError, derive_seed
from .session import ExportResult, ScrambleSession
from .shuffler import XorShift32, assign_transforms, permute_indices
from .splitter import Partition, PartitionConfig, PartitionVariant, TileSplitter
from .types import Piece, Tile

__all__ = [
    "Tile",
    "Piece",
    "derive_seed",
    "SeedDerivationError",
    "XorShift32",
    "permute_indices",
    "assign_transforms",
    "PartitionVariant",
    "PartitionConfig",
    "Partition",
    "TileSplitter",
    "BoardState",
    "Compositor",
    "piece_transform_matrix",
    "transform_tile",
    "draw_overlay",
    "NO_HIT",
    "HitTester",
    "GestureState",
    "GestureOutcome",
    "GestureController",
    "ScrambleSession",
    "ExportResult",
    "load_image",
    "save_image",
    "encode_png",
    "decode_image",
]
