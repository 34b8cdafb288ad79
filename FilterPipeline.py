#!/usr/bin/env python3
"""
Two-stage tiled filter pipeline: box blur, then channel inversion.

Each stage has its own thread pool fed by a StageQueue. A blur worker pushes
every finished tile onto the invert queue, so a tile becomes eligible for
inversion as soon as its blurred pixels are written; there is no barrier
between the stages.
"""
import cProfile
import logging
import os
import pstats
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np

from config import DEFAULT_KERNEL_SIZE, DEFAULT_TILE_SIZE, PipelineConfig
from errors import PipelineCancelled, PipelineError
from filters import blur_tile, invert_tile, validate_image
from image_io import load_image, save_image
from stage_queue import NO_MORE_WORK, StageQueue
from tiles import partition_tiles

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    BLUR_RUNNING = "blur_running"
    BLUR_DRAINING = "blur_draining"
    INVERT_RUNNING = "invert_running"
    INVERT_DRAINING = "invert_draining"
    DONE = "done"


@dataclass
class RunStats:
    tiles: int = 0
    blur_tiles: List[int] = field(default_factory=list)    # tiles handled per blur worker
    invert_tiles: List[int] = field(default_factory=list)  # tiles handled per invert worker
    seconds: float = 0.0


def _cancelled(cancel_event):
    return cancel_event is not None and cancel_event.is_set()


def _blur_worker(src, blurred, kernel_size, blur_queue, invert_queue, cancel_event):
    done = 0
    while True:
        tile = blur_queue.pop()
        if tile is NO_MORE_WORK or _cancelled(cancel_event):
            break
        blur_tile(src, tile, kernel_size, out=tile.region(blurred))
        # handoff: only now may the invert stage read this tile
        invert_queue.push(tile)
        done += 1
    logger.debug("blur worker exiting after %d tiles", done)
    return done


def _invert_worker(blurred, out, invert_queue, cancel_event):
    done = 0
    while True:
        tile = invert_queue.pop()
        if tile is NO_MORE_WORK or _cancelled(cancel_event):
            break
        invert_tile(blurred, tile, out=tile.region(out))
        done += 1
    logger.debug("invert worker exiting after %d tiles", done)
    return done


def _join(futures, stage):
    """Wait for every worker of a stage. Returns (tiles per worker, first exception)."""
    counts, error = [], None
    for future in futures:
        try:
            counts.append(future.result())
        except Exception as exc:
            logger.error("%s worker failed: %s", stage, exc, exc_info=exc)
            counts.append(0)
            if error is None:
                error = exc
    return counts, error


class TiledPipeline:
    """
    Blur-then-invert over one image.

    The image and configuration are validated on construction, before any
    buffer is allocated or thread started. run() executes the pipeline once
    and returns the output image.
    """

    def __init__(self, img_arr, config: PipelineConfig = None, cancel_event=None):
        self.config = (config or PipelineConfig()).validate()
        self.src = validate_image(img_arr)
        self.height, self.width = self.src.shape[0], self.src.shape[1]
        self.tiles = partition_tiles(self.width, self.height, self.config.tile_size)
        self.blur_workers, self.invert_workers = self.config.pool_sizes()
        self.cancel_event = cancel_event
        self.state = PipelineState.IDLE
        self.stats = None

    def _transition(self, state):
        logger.debug("pipeline %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self):
        if self.state is not PipelineState.IDLE:
            raise PipelineError(f"pipeline already ran (state {self.state.value})")

        t0 = time.perf_counter()
        kernel_size = self.config.kernel_size

        # ==== BUFFERS AND QUEUES ====
        blurred = np.empty_like(self.src)
        out = np.empty_like(self.src)
        blur_queue = StageQueue("blur")
        invert_queue = StageQueue("invert")

        logger.info(
            "pipeline start: %dx%d image, %d tiles of %d px, kernel %d, workers blur=%d invert=%d",
            self.width, self.height, len(self.tiles), self.config.tile_size,
            kernel_size, self.blur_workers, self.invert_workers,
        )

        blur_pool = ThreadPoolExecutor(max_workers=self.blur_workers, thread_name_prefix="blur")
        invert_pool = ThreadPoolExecutor(max_workers=self.invert_workers, thread_name_prefix="invert")
        try:
            # ==== SPAWN BOTH POOLS (invert workers park until the first handoff) ====
            blur_futures = [
                blur_pool.submit(_blur_worker, self.src, blurred, kernel_size,
                                 blur_queue, invert_queue, self.cancel_event)
                for _ in range(self.blur_workers)
            ]
            invert_futures = [
                invert_pool.submit(_invert_worker, blurred, out, invert_queue, self.cancel_event)
                for _ in range(self.invert_workers)
            ]

            # ==== FEED THE BLUR STAGE ====
            self._transition(PipelineState.BLUR_RUNNING)
            for tile in self.tiles:
                if _cancelled(self.cancel_event):
                    break
                blur_queue.push(tile)

            # ==== DRAIN BLUR: every tile is on the invert queue once this returns ====
            self._transition(PipelineState.BLUR_DRAINING)
            blur_queue.close()
            blur_counts, blur_error = _join(blur_futures, "blur")

            # ==== DRAIN INVERT: no producers remain ====
            self._transition(PipelineState.INVERT_RUNNING)
            invert_queue.close()
            self._transition(PipelineState.INVERT_DRAINING)
            invert_counts, invert_error = _join(invert_futures, "invert")
        finally:
            # release parked workers if anything above raised
            blur_queue.close()
            invert_queue.close()
            blur_pool.shutdown(wait=True)
            invert_pool.shutdown(wait=True)

        self.stats = RunStats(
            tiles=len(self.tiles),
            blur_tiles=blur_counts,
            invert_tiles=invert_counts,
            seconds=time.perf_counter() - t0,
        )

        # ==== COMPLETION CHECKS ====
        if blur_error is not None:
            raise PipelineError("blur stage failed") from blur_error
        if invert_error is not None:
            raise PipelineError("invert stage failed") from invert_error
        if _cancelled(self.cancel_event):
            raise PipelineCancelled(
                f"cancelled after {sum(invert_counts)}/{len(self.tiles)} tiles"
            )
        if invert_queue.pushed != len(self.tiles) or sum(invert_counts) != len(self.tiles):
            raise PipelineError(
                f"tile accounting mismatch: {len(self.tiles)} partitioned, "
                f"{invert_queue.pushed} handed off, {sum(invert_counts)} inverted"
            )

        self._transition(PipelineState.DONE)
        logger.info("pipeline done: %d tiles in %.4fs", len(self.tiles), self.stats.seconds)
        return out


def process(img_arr, config: PipelineConfig = None, cancel_event=None):
    """Run the blur/invert pipeline over img_arr and return the output image."""
    return TiledPipeline(img_arr, config, cancel_event=cancel_event).run()


def apply_filters(img_arr, kernel_size=DEFAULT_KERNEL_SIZE, tile_size=DEFAULT_TILE_SIZE, n_jobs=-1):
    # n_jobs=-1 uses all available cores in both stages
    workers = None if n_jobs == -1 else n_jobs
    config = PipelineConfig(kernel_size=kernel_size, tile_size=tile_size,
                            blur_workers=workers, invert_workers=workers)
    return process(img_arr, config)


def apply_filters_timed(img_arr, kernel_size=DEFAULT_KERNEL_SIZE, tile_size=DEFAULT_TILE_SIZE, n_jobs=-1):
    t0 = time.perf_counter()
    out = apply_filters(img_arr, kernel_size=kernel_size, tile_size=tile_size, n_jobs=n_jobs)
    t1 = time.perf_counter()
    return out, (t1 - t0)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    # ==== PARAMETERS ====
    input_path = argv[0] if len(argv) > 0 else "input.ppm"
    output_path = argv[1] if len(argv) > 1 else "output.ppm"
    config = PipelineConfig.from_env()

    # ===== LOAD IMAGE =====
    arr = load_image(input_path)
    blur_workers, invert_workers = config.pool_sizes()
    print(f"Processing image: {arr.shape[1]}x{arr.shape[0]} pixels")
    print(f"Kernel size: {config.kernel_size} | Tile size: {config.tile_size}")
    print(f"Workers: blur={blur_workers} invert={invert_workers}")

    # ==== RUN PIPELINE =====
    pipeline = TiledPipeline(arr, config)
    result = pipeline.run()
    print(f"Pipeline: {pipeline.stats.tiles} tiles in {pipeline.stats.seconds:.4f} seconds")

    # ===== SAVE =====
    save_image(result, output_path)
    print(f"Output saved to {output_path}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("FILTER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if os.environ.get("FILTER_PROFILE") == "1":
        with cProfile.Profile() as pr:
            rc = main()
        stats = pstats.Stats(pr)
        stats.sort_stats('cumtime').print_stats(10)
    else:
        rc = main()
    sys.exit(rc)
