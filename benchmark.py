#!/usr/bin/env python3
"""
Benchmark script to compare the sequential, joblib barrier-parallel and
queue pipeline versions of blur-then-invert.
"""
import json
import logging
import os
import sys
import time

import numpy as np

# Import all versions
import FilterSeq
import FilterParallel
import FilterPipeline
from config import default_workers
from generate_image import generate_block_image

logger = logging.getLogger(__name__)


def _time_runs(fn, n_runs):
    times = []
    result = None
    for i in range(n_runs):
        start = time.perf_counter()
        result = fn()
        elapsed = time.perf_counter() - start
        times.append(elapsed)
        print(f"Run {i+1}: {elapsed:.4f} seconds")
    avg = np.mean(times)
    std = np.std(times)
    print(f"Average: {avg:.4f} ± {std:.4f} seconds")
    return result, float(avg)


def benchmark_filters(arr, kernel_size, tile_size, worker_counts, n_runs=3):
    """Run every version on arr and return (rows, all_identical)."""
    h, w = arr.shape[0], arr.shape[1]
    print(f"Image size: {w}x{h} pixels")
    print(f"Kernel size: {kernel_size} | Tile size: {tile_size}")
    print(f"Number of runs: {n_runs}")
    print(f"CPU cores: {default_workers()}")
    print("=" * 70)

    rows = []

    def record(impl, workers, seconds):
        rows.append({
            "implementation": impl,
            "image_size": [w, h],
            "kernel_size": kernel_size,
            "tile_size": tile_size,
            "workers": workers,
            "seconds": seconds,
        })

    # Benchmark sequential version
    print("\n1. SEQUENTIAL VERSION")
    print("-" * 70)
    result_seq, avg_seq = _time_runs(lambda: FilterSeq.apply_filters(arr, kernel_size), n_runs)
    record("FilterSeq", 1, avg_seq)

    outputs = {}
    for workers in worker_counts:
        print(f"\n2. PARALLEL VERSION (joblib, barrier between stages) - {workers} workers")
        print("-" * 70)
        result_par, avg_par = _time_runs(
            lambda: FilterParallel.apply_filters(arr, kernel_size, tile_size=tile_size, n_jobs=workers),
            n_runs,
        )
        print(f"Speedup: {avg_seq / avg_par:.2f}x")
        record("FilterParallel", workers, avg_par)
        outputs[("FilterParallel", workers)] = result_par

        print(f"\n3. PIPELINE VERSION (stage queues, tile handoff) - {workers} workers")
        print("-" * 70)
        result_pipe, avg_pipe = _time_runs(
            lambda: FilterPipeline.apply_filters(arr, kernel_size, tile_size=tile_size, n_jobs=workers),
            n_runs,
        )
        print(f"Speedup: {avg_seq / avg_pipe:.2f}x")
        record("FilterPipeline", workers, avg_pipe)
        outputs[("FilterPipeline", workers)] = result_pipe

    # Summary
    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    for row in rows:
        label = f"{row['implementation']} ({row['workers']} workers)"
        print(f"{label:32s} {row['seconds']:.4f}s  ({avg_seq / row['seconds']:.2f}x)")

    best = min(rows, key=lambda r: r["seconds"])
    print(f"\n🏆 Best: {best['implementation']} with {best['workers']} workers ({best['seconds']:.4f}s)")

    # Verify results are identical
    print("\n" + "=" * 70)
    print("VERIFICATION")
    print("=" * 70)
    all_identical = True
    for (impl, workers), result in outputs.items():
        same = np.array_equal(result_seq, result)
        all_identical = all_identical and same
        print(f"Sequential vs {impl} ({workers} workers): {'identical' if same else 'DIFFERENT'}")

    if all_identical:
        print("✓ All results are identical!")
    else:
        print("⚠ Results differ")
        logger.error("benchmark outputs differ from the sequential reference")

    return rows, all_identical


def main():
    logging.basicConfig(
        level=os.environ.get("FILTER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Configuration
    kernel_size = 20
    tile_size = 64
    n_runs = 3
    worker_counts = sorted({1, 2, 4, default_workers()})
    output_json = "benchmark_results.json"

    print("=" * 70)
    print("FILTER BENCHMARK: Sequential vs Parallel vs Pipeline")
    print("=" * 70)

    if len(sys.argv) > 1:
        from image_io import load_image
        arr = load_image(sys.argv[1])
    else:
        arr = generate_block_image(seed=0)

    rows, all_identical = benchmark_filters(arr, kernel_size, tile_size, worker_counts, n_runs)

    data = {
        "metadata": {
            "cpu_count": default_workers(),
            "n_runs": n_runs,
            "identical": all_identical,
        },
        "results": rows,
    }
    with open(output_json, "w") as f:
        json.dump(data, f, indent=2)
    print(f"\n✓ Results saved to {output_json}")
    return 0 if all_identical else 1


if __name__ == "__main__":
    sys.exit(main())
