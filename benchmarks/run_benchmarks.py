#!/usr/bin/env python3
"""
Timing benchmarks for width_carve.

Measures, per image size:
- Energy pass time for different worker counts
- Seam search and seam removal time
- End-to-end time to remove a fixed number of seams
"""

import argparse
import json
import sys
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from width_carve import (
    Raster,
    SeamCarver,
    WrappedGradientEnergyFunction,
    find_vertical_seam,
    remove_vertical_seam,
)


@dataclass
class BenchmarkResult:
    """Container for benchmark results."""
    image_size: Tuple[int, int]
    workers: int
    energy_time_ms: float
    seam_search_time_ms: float
    seam_removal_time_ms: float
    carve_time_ms: float
    seams_removed: int
    throughput_mpps: float  # Megapixels of energy computed per second

    def to_dict(self) -> Dict:
        return asdict(self)


def _time_ms(fn, repeats: int) -> float:
    start = time.perf_counter()
    for _ in range(repeats):
        fn()
    return (time.perf_counter() - start) * 1000 / repeats


def run_benchmark(
    size: Tuple[int, int], workers: int, seams: int, repeats: int
) -> BenchmarkResult:
    width, height = size
    rng = np.random.default_rng(0)
    raster = Raster(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))
    energy_fn = WrappedGradientEnergyFunction(workers=workers)

    energy_ms = _time_ms(lambda: energy_fn.compute(raster), repeats)
    energy = energy_fn.compute(raster)
    search_ms = _time_ms(lambda: find_vertical_seam(energy), repeats)
    seam = find_vertical_seam(energy)
    removal_ms = _time_ms(lambda: remove_vertical_seam(raster, seam), repeats)

    carver = SeamCarver(energy_function=energy_fn)
    start = time.perf_counter()
    carver.resize(raster, width - seams, show_progress=False)
    carve_ms = (time.perf_counter() - start) * 1000

    return BenchmarkResult(
        image_size=size,
        workers=workers,
        energy_time_ms=energy_ms,
        seam_search_time_ms=search_ms,
        seam_removal_time_ms=removal_ms,
        carve_time_ms=carve_ms,
        seams_removed=seams,
        throughput_mpps=(width * height / 1e6) / (energy_ms / 1000),
    )


def print_table(results: List[BenchmarkResult]) -> None:
    print(f"{'size':>12} {'workers':>8} {'energy':>10} {'search':>10} "
          f"{'remove':>10} {'carve':>10} {'MP/s':>8}")
    for r in results:
        size = f"{r.image_size[0]}x{r.image_size[1]}"
        print(f"{size:>12} {r.workers:>8} {r.energy_time_ms:>9.2f}ms "
              f"{r.seam_search_time_ms:>9.2f}ms {r.seam_removal_time_ms:>9.2f}ms "
              f"{r.carve_time_ms:>9.1f}ms {r.throughput_mpps:>8.1f}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark width_carve")
    parser.add_argument("--sizes", type=str, default="320x240,640x480,1280x720",
                        help="Comma-separated WxH sizes")
    parser.add_argument("--workers", type=str, default="1,2,4,8",
                        help="Comma-separated worker counts")
    parser.add_argument("--seams", type=int, default=10, help="Seams removed per carve run")
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--json", type=str, help="Write results to this JSON file")
    args = parser.parse_args()

    sizes = [tuple(int(v) for v in s.split("x")) for s in args.sizes.split(",")]
    worker_counts = [int(w) for w in args.workers.split(",")]

    results = []
    for size in sizes:
        for workers in worker_counts:
            results.append(run_benchmark(size, workers, args.seams, args.repeats))

    print_table(results)

    if args.json:
        Path(args.json).write_text(json.dumps([r.to_dict() for r in results], indent=2))
        print(f"\nResults written to {args.json}")


if __name__ == "__main__":
    main()
