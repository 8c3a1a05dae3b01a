"""Reading and writing RGB images."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np

PathLike = Union[str, Path]


def _to_rgb_uint8(image: np.ndarray) -> np.ndarray:
    if image.dtype != np.uint8:
        image = np.clip(np.rint(image * 255.0), 0, 255).astype(np.uint8)
    if image.ndim == 2:
        image = np.repeat(image[:, :, None], 3, axis=2)
    if image.shape[2] > 3:
        image = image[:, :, :3]
    return image


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, ...) into an RGB uint8 array."""
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("image data could not be decoded")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def load_image(path: PathLike) -> np.ndarray:
    """Read a file from disk and decode it as RGB."""
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"no image file at {path}")
    try:
        return decode_image(path.read_bytes())
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGB image as lossless PNG bytes; float images are taken as 0..1."""
    ok, buf = cv2.imencode(".png", cv2.cvtColor(_to_rgb_uint8(image), cv2.COLOR_RGB2BGR))
    if not ok:
        raise ValueError("failed to encode image as PNG")
    return buf.tobytes()


def save_image(path: PathLike, image: np.ndarray) -> Path:
    """Write `image` as PNG at `path`, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(image))
    return path
