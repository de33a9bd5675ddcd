"""Main width reduction interface: image I/O around the seam carver."""

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from width_carve.energy import WrappedGradientEnergyFunction
from width_carve.errors import DecodeError, EncodeError, InvalidTargetError
from width_carve.raster import Raster
from width_carve.seam_carving import ProgressCallback, SeamCarver

logger = logging.getLogger(__name__)


def load_raster(path: Union[str, Path]) -> Raster:
    """Decode an image file into a raster (RGB, or RGBA if it has alpha)."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            raster = Raster.from_image(img)
    except FileNotFoundError as ex:
        raise DecodeError(f"Input not found: {path}") from ex
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as ex:
        raise DecodeError(f"Failed to open image '{path}': {ex}") from ex

    logger.info("Loaded %s (%dx%d)", path, raster.width, raster.height)
    return raster


def save_raster(raster: Raster, path: Union[str, Path], quality: int = 95) -> None:
    """Encode a raster to ``path``; alpha is dropped on save."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        raster.to_image().save(path, quality=quality)
    except (OSError, ValueError, KeyError) as ex:
        raise EncodeError(f"Failed to save image '{path}': {ex}") from ex

    logger.info("Saved %s", path)


def parse_target_width(text: str, current_width: int) -> int:
    """Parse a typed target width and check ``0 < width < current_width``.

    Only plain ASCII digits with an optional sign are accepted.
    """
    stripped = str(text).strip()
    try:
        if not (stripped.isascii() and stripped.lstrip("+-").isdigit()):
            raise ValueError(stripped)
        width = int(stripped)
    except ValueError:
        raise InvalidTargetError(
            f"Invalid input {text!r}. Please enter a number."
        ) from None

    if width <= 0:
        raise InvalidTargetError("Target width must be a positive number.")
    if width >= current_width:
        raise InvalidTargetError("Target width must be less than current width.")
    return width


class ResizeResult:
    """Result of a width reduction run."""

    def __init__(
        self,
        raster: Raster,
        original_size: tuple[int, int],
        output_path: Optional[Path] = None,
        saved: bool = False,
    ):
        self.raster = raster
        self.original_size = original_size
        self.output_path = output_path
        self.saved = saved

    @property
    def final_size(self) -> tuple[int, int]:
        """(width, height) of the carved raster."""
        return (self.raster.width, self.raster.height)

    @property
    def seams_removed(self) -> int:
        return self.original_size[0] - self.raster.width

    def to_pil(self) -> Image.Image:
        """Convert to PIL Image (RGB)."""
        return self.raster.to_image()


class WidthResizer:
    """High-level interface: load, carve to a target width, save.

    Decode and target errors propagate before any carving starts. A failure
    to save is logged as a warning and the in-memory result is still
    returned with ``saved=False``.
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        quality: int = 95,
        show_progress: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize resizer.

        Args:
            workers: Threads for the energy pass (None = default)
            quality: Output JPEG quality
            show_progress: Show progress bar while carving
            progress_callback: Called as ``callback(completed, total)`` per seam
        """
        self.quality = quality
        self.show_progress = show_progress
        self.carver = SeamCarver(
            energy_function=WrappedGradientEnergyFunction(workers=workers),
            progress_callback=progress_callback,
        )

    def run(
        self,
        source: Union[str, Path, Raster],
        target_width: int,
        output_path: Optional[Union[str, Path]] = None,
    ) -> ResizeResult:
        """Carve ``source`` down to ``target_width`` and optionally save it."""
        raster = source if isinstance(source, Raster) else load_raster(source)
        original_size = (raster.width, raster.height)

        carved = self.carver.resize(raster, target_width, show_progress=self.show_progress)
        result = ResizeResult(carved, original_size)

        if output_path is not None:
            result.output_path = Path(output_path)
            try:
                save_raster(carved, result.output_path, quality=self.quality)
            except EncodeError as ex:
                logger.warning("%s", ex)
            else:
                result.saved = True

        return result
