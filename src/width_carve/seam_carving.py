"""Seam carving implementation for content-aware width reduction.

Based on "Seam Carving for Content-Aware Image Resizing" by Avidan & Shamir (2007).
Only vertical seams are removed; each iteration recomputes energy on the
previous iteration's output.
"""

import logging
from typing import Callable, Optional

import numpy as np
from tqdm import tqdm

from width_carve.energy import EnergyFunction, WrappedGradientEnergyFunction
from width_carve.errors import (
    InvalidTargetError,
    MalformedEnergyError,
    MalformedSeamError,
)
from width_carve.raster import Raster

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

PROGRESS_BAR_FORMAT = "{desc} [{elapsed}] |{bar}| {n_fmt}/{total_fmt} ({remaining})"


def find_vertical_seam(energy: np.ndarray) -> np.ndarray:
    """Find the minimum-energy top-to-bottom seam by dynamic programming.

    Edges are clamped: columns 0 and W-1 have two candidate predecessors.
    Ties in the last row go to the smallest column. While backtracking the
    straight predecessor is kept unless the left one is strictly cheaper,
    and that choice is kept unless the right one is strictly cheaper.

    Returns array of column indices for each row.
    """
    energy = np.asarray(energy)
    if energy.ndim != 2 or energy.shape[0] == 0 or energy.shape[1] == 0:
        raise MalformedEnergyError(f"energy map must be non-empty 2D, got {energy.shape}")
    if not np.all(np.isfinite(energy)) or energy.min() < 0:
        raise MalformedEnergyError("energy map must hold finite non-negative values")

    h, w = energy.shape

    # Cumulative minimum cost ending at each cell
    cost = np.empty((h, w), dtype=np.float64)
    cost[0] = energy[0]

    shifted = np.full(w, np.inf)
    for y in range(1, h):
        prev = cost[y - 1]
        best = prev.copy()
        if w > 1:
            shifted[1:] = prev[:-1]
            shifted[0] = np.inf
            np.minimum(best, shifted, out=best)
            shifted[:-1] = prev[1:]
            shifted[-1] = np.inf
            np.minimum(best, shifted, out=best)
        cost[y] = energy[y] + best

    seam = np.zeros(h, dtype=np.intp)
    # argmin keeps the first of equal minima
    seam[-1] = int(np.argmin(cost[-1]))

    for y in range(h - 2, -1, -1):
        x = seam[y + 1]
        row = cost[y]
        best_x = x
        best_cost = row[x]

        if x > 0 and row[x - 1] < best_cost:
            best_x = x - 1
            best_cost = row[x - 1]
        if x < w - 1 and row[x + 1] < best_cost:
            best_x = x + 1

        seam[y] = best_x

    return seam


def remove_vertical_seam(raster: Raster, seam: np.ndarray) -> Raster:
    """Remove a vertical seam, returning a new RGBA raster one column narrower."""
    h, w = raster.height, raster.width
    seam = np.asarray(seam)

    if w < 2:
        raise MalformedSeamError("cannot remove a seam from a single-column raster")
    if seam.ndim != 1 or seam.shape[0] != h:
        raise MalformedSeamError(f"seam length {seam.shape} does not match height {h}")
    if not np.issubdtype(seam.dtype, np.integer):
        raise MalformedSeamError(f"seam must hold integers, got {seam.dtype}")
    if seam.min() < 0 or seam.max() > w - 1:
        raise MalformedSeamError(f"seam values must lie in [0, {w - 1}]")

    pixels = raster.to_rgba().pixels

    keep = np.ones((h, w), dtype=bool)
    keep[np.arange(h), seam] = False

    return Raster(pixels[keep].reshape(h, w - 1, 4))


class SeamCarver:
    """Content-aware width reduction using seam carving.

    Seam carving removes seams (connected top-to-bottom paths of pixels)
    with the lowest energy, preserving important content while narrowing.
    """

    def __init__(
        self,
        energy_function: Optional[EnergyFunction] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize seam carver.

        Args:
            energy_function: Energy function for pixel importance
                (default: wrap-around gradient)
            progress_callback: Called as ``callback(completed, total)``
                after every removed seam
        """
        self.energy_function = energy_function or WrappedGradientEnergyFunction()
        self.progress_callback = progress_callback

    def resize(
        self,
        raster: Raster,
        target_width: int,
        show_progress: bool = True,
    ) -> Raster:
        """Narrow ``raster`` to ``target_width`` by removing vertical seams.

        Args:
            raster: Input raster
            target_width: Final width, strictly between 0 and the current width
            show_progress: Show progress bar

        Returns:
            RGBA raster of width ``target_width``
        """
        w = raster.width
        if isinstance(target_width, bool) or not isinstance(target_width, (int, np.integer)):
            raise InvalidTargetError(f"target width must be an integer, got {target_width!r}")
        if not 0 < target_width < w:
            raise InvalidTargetError(
                f"target width must be between 1 and {w - 1}, got {target_width}"
            )

        n = w - int(target_width)
        logger.info("Removing %d vertical seams to reach width %d", n, target_width)

        current = raster
        with tqdm(
            total=n,
            desc="Removing vertical seams",
            bar_format=PROGRESS_BAR_FORMAT,
            disable=not show_progress,
        ) as progress:
            for completed in range(1, n + 1):
                energy = self.compute_energy(current)
                seam = find_vertical_seam(energy)
                current = remove_vertical_seam(current, seam)

                progress.update(1)
                if self.progress_callback is not None:
                    self.progress_callback(completed, n)

        logger.info("Resized size: %dx%d", current.width, current.height)
        return current

    def compute_energy(self, raster: Raster) -> np.ndarray:
        """Compute energy map and check it matches the raster."""
        energy = self.energy_function.compute(raster)
        if energy.shape != (raster.height, raster.width):
            raise MalformedEnergyError(
                f"energy map {energy.shape} does not match raster "
                f"{(raster.height, raster.width)}"
            )
        return energy

    def visualize_energy(self, raster: Raster) -> np.ndarray:
        """Visualize energy map for debugging."""
        energy = self.compute_energy(raster)

        # Rescale for display only; carving uses raw values
        e_min, e_max = energy.min(), energy.max()
        if e_max > e_min:
            energy = (energy - e_min) / (e_max - e_min)
        else:
            energy = np.zeros_like(energy)

        from matplotlib import colormaps

        cmap = colormaps.get_cmap("hot")
        colored = cmap(energy)[:, :, :3]

        return (colored * 255).astype(np.uint8)

    def visualize_seams(self, raster: Raster, n_seams: int = 10) -> np.ndarray:
        """Visualize which seams would be removed.

        Returns RGB image with seams highlighted in red, in the
        coordinates of the original raster.
        """
        if not 0 < n_seams < raster.width:
            raise InvalidTargetError(
                f"can only show between 1 and {raster.width - 1} seams, got {n_seams}"
            )

        result = np.array(raster.rgb)
        h = raster.height
        rows = np.arange(h)
        # Original column of every pixel still present in the working raster
        origin = np.tile(np.arange(raster.width), (h, 1))

        temp = raster
        for _ in range(n_seams):
            seam = find_vertical_seam(self.compute_energy(temp))
            result[rows, origin[rows, seam]] = [255, 0, 0]

            keep = np.ones(origin.shape, dtype=bool)
            keep[rows, seam] = False
            origin = origin[keep].reshape(h, -1)
            temp = remove_vertical_seam(temp, seam)

        return result
