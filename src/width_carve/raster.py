"""In-memory pixel grid shared by every stage of the pipeline."""

from typing import Union

import numpy as np
from PIL import Image

from width_carve.errors import MalformedRasterError


class Raster:
    """Immutable RGB or RGBA image held in one row-major ``uint8`` buffer.

    The buffer has shape ``(height, width, channels)`` and is C-contiguous,
    so pixel ``(x, y)`` lives at offset ``index(x, y)`` of ``flat_pixels()``.
    Channels 0-2 are R, G, B; channel 3, when present, is alpha.
    """

    def __init__(self, pixels: np.ndarray):
        if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
            raise MalformedRasterError("raster pixels must be a uint8 numpy array")
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise MalformedRasterError(
                f"raster must have shape (H, W, 3|4), got {pixels.shape}"
            )
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise MalformedRasterError(f"raster is empty: {pixels.shape}")

        view = np.ascontiguousarray(pixels).view()
        view.flags.writeable = False
        self._pixels = view

    @classmethod
    def from_image(cls, image: Union[Image.Image, np.ndarray]) -> "Raster":
        """Build a raster from a PIL image or an ``(H, W[, C])`` array."""
        if isinstance(image, Image.Image):
            has_alpha = image.mode in ("RGBA", "LA", "PA") or (
                image.mode == "P" and "transparency" in image.info
            )
            image = image.convert("RGBA" if has_alpha else "RGB")
            return cls(np.array(image, dtype=np.uint8))

        arr = np.asarray(image)
        if arr.ndim == 2:
            arr = np.stack([arr] * 3, axis=-1)
        if arr.dtype != np.uint8:
            raise MalformedRasterError(f"expected uint8 pixels, got {arr.dtype}")
        return cls(arr.copy())

    @property
    def pixels(self) -> np.ndarray:
        """Read-only ``(H, W, C)`` view of the buffer."""
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def channels(self) -> int:
        return self._pixels.shape[2]

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def rgb(self) -> np.ndarray:
        """Colour channels only; alpha is never used for scoring."""
        return self._pixels[:, :, :3]

    def index(self, x: int, y: int) -> int:
        """Offset of pixel ``(x, y)`` in ``flat_pixels()``."""
        return y * self.width + x

    def flat_pixels(self) -> np.ndarray:
        """The buffer viewed as ``(H * W, C)``, one row per pixel."""
        return self._pixels.reshape(-1, self.channels)

    def pixel(self, x: int, y: int) -> tuple:
        return tuple(int(v) for v in self.flat_pixels()[self.index(x, y)])

    def to_rgba(self) -> "Raster":
        """Return this raster with an explicit alpha channel (opaque if absent)."""
        if self.has_alpha:
            return self
        alpha = np.full((self.height, self.width, 1), 255, dtype=np.uint8)
        return Raster(np.concatenate([self._pixels, alpha], axis=2))

    def to_image(self, keep_alpha: bool = False) -> Image.Image:
        """Convert to a PIL image; alpha is dropped unless ``keep_alpha``."""
        if keep_alpha and self.has_alpha:
            return Image.fromarray(self._pixels)
        return Image.fromarray(np.ascontiguousarray(self.rgb))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and np.array_equal(
            self._pixels, other._pixels
        )

    def __repr__(self) -> str:
        mode = "RGBA" if self.has_alpha else "RGB"
        return f"Raster({self.width}x{self.height}, {mode})"
