"""Synthetic images for demos and tests."""

from __future__ import annotations

import numpy as np


def generate_random_image(width: int = 300, height: int = 300, seed: int = 42) -> np.ndarray:
    """Generate a purely random RGB image."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def generate_gradient_image(width: int = 300, height: int = 300) -> np.ndarray:
    """Horizontal ramp in red, vertical in green, diagonal in blue."""
    across = np.linspace(0.0, 255.0, width, dtype=np.float32)[None, :]
    down = np.linspace(0.0, 255.0, height, dtype=np.float32)[:, None]
    channels = np.broadcast_arrays(across, down, (across + down) / 2.0)
    return np.rint(np.stack(channels, axis=2)).astype(np.uint8)


def generate_checker_image(width: int = 300, height: int = 300, cell: int = 25) -> np.ndarray:
    """Generate a colored checkerboard, useful for seeing rotations and flips."""
    yy, xx = np.mgrid[0:height, 0:width]
    checker = ((yy // cell + xx // cell) % 2).astype(np.float32)
    r = checker * 200 + 40 * (xx / max(width - 1, 1))
    g = (1 - checker) * 180 + 60 * (yy / max(height - 1, 1))
    b = np.full_like(r, 90.0)
    img = np.stack([r, g, b], axis=2)
    return np.clip(img, 0, 255).astype(np.uint8)
