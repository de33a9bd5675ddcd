"""Energy functions for seam carving.

The energy map scores how visually important each pixel is; the seam
finder removes the path with the lowest total energy.
"""

import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from width_carve.raster import Raster

logger = logging.getLogger(__name__)

WORKERS_ENV_VAR = "WIDTH_CARVE_WORKERS"


def default_workers() -> int:
    """Worker count from ``WIDTH_CARVE_WORKERS``, else the CPU count."""
    value = os.environ.get(WORKERS_ENV_VAR)
    if value:
        try:
            workers = int(value)
        except ValueError:
            workers = 0
        if workers > 0:
            return workers
        logger.warning("Ignoring invalid %s=%r", WORKERS_ENV_VAR, value)
    return os.cpu_count() or 1


class EnergyFunction(ABC):
    """Abstract base class for energy functions."""

    @abstractmethod
    def compute(self, raster: Raster) -> np.ndarray:
        """Compute energy map for the given raster.

        Args:
            raster: Input raster (H, W, 3|4)

        Returns:
            Energy map as float64 numpy array (H, W), every value >= 0,
            with higher values indicating more important pixels
        """
        pass


class WrappedGradientEnergyFunction(EnergyFunction):
    """Colour-gradient energy with wrap-around neighbours.

    For pixel (x, y) the horizontal neighbours are columns (x - 1) mod W and
    (x + 1) mod W, the vertical ones rows (y - 1) mod H and (y + 1) mod H.
    With squared per-channel differences summed over R, G, B:

        energy = sqrt(dx) + sqrt(dy)

    Columns are independent, so the map is built by a thread pool where each
    worker fills a disjoint block of columns in a shared output array.
    """

    def __init__(self, workers: Optional[int] = None):
        """Initialize gradient energy function.

        Args:
            workers: Number of threads for the column pass
                (default: ``WIDTH_CARVE_WORKERS`` or the CPU count)
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers or default_workers()

    def compute(self, raster: Raster) -> np.ndarray:
        """Compute wrap-around gradient energy map."""
        rgb = raster.rgb.astype(np.int64)
        h, w = rgb.shape[:2]
        energy = np.empty((h, w), dtype=np.float64)

        chunks = [c for c in np.array_split(np.arange(w), min(self.workers, w)) if c.size]

        if len(chunks) == 1:
            self._fill_columns(rgb, energy, chunks[0])
            return energy

        logger.debug("Energy pass over %dx%d with %d column chunks", w, h, len(chunks))
        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            futures = [
                executor.submit(self._fill_columns, rgb, energy, cols) for cols in chunks
            ]
            for future in futures:
                future.result()

        return energy

    @staticmethod
    def _fill_columns(rgb: np.ndarray, out: np.ndarray, cols: np.ndarray) -> None:
        """Write energy for the contiguous column block ``cols`` into ``out``."""
        w = rgb.shape[1]
        start, stop = int(cols[0]), int(cols[-1]) + 1

        left = rgb[:, (cols - 1) % w]
        right = rgb[:, (cols + 1) % w]
        block = rgb[:, start:stop]
        up = np.roll(block, 1, axis=0)
        down = np.roll(block, -1, axis=0)

        dx = ((right - left) ** 2).sum(axis=2).astype(np.float64)
        dy = ((down - up) ** 2).sum(axis=2).astype(np.float64)

        out[:, start:stop] = np.sqrt(dx) + np.sqrt(dy)
