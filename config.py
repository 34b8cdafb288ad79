import numbers
import os
from dataclasses import dataclass
from typing import Optional

from joblib import cpu_count

from errors import PreconditionError

DEFAULT_KERNEL_SIZE = 20
DEFAULT_TILE_SIZE = 64


def default_workers() -> int:
    """Available hardware parallelism (respects cgroup / affinity limits)."""
    return max(1, cpu_count())


@dataclass(frozen=True)
class PipelineConfig:
    kernel_size: int = DEFAULT_KERNEL_SIZE   # radius = kernel_size // 2
    tile_size: int = DEFAULT_TILE_SIZE       # tile edge length in pixels

    # None -> default_workers(); 0 runs a single worker
    blur_workers: Optional[int] = None
    invert_workers: Optional[int] = None

    def validate(self) -> "PipelineConfig":
        for name in ("kernel_size", "tile_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                raise PreconditionError(f"{name} must be a positive integer, got {value!r}")
        for name in ("blur_workers", "invert_workers"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
                raise PreconditionError(f"{name} must be a non-negative integer, got {value!r}")
        return self

    def pool_sizes(self):
        """(blur, invert) worker counts actually spawned."""
        blur = default_workers() if self.blur_workers is None else max(1, self.blur_workers)
        invert = default_workers() if self.invert_workers is None else max(1, self.invert_workers)
        return blur, invert

    @classmethod
    def from_env(cls, environ=None) -> "PipelineConfig":
        """
        Build a config from FILTER_* environment variables.

        FILTER_WORKERS sets both pools; FILTER_BLUR_WORKERS and
        FILTER_INVERT_WORKERS override it per stage.
        """
        env = os.environ if environ is None else environ

        def read_int(key, default):
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise PreconditionError(f"{key} must be an integer, got {raw!r}") from None

        workers = read_int("FILTER_WORKERS", None)
        return cls(
            kernel_size=read_int("FILTER_KERNEL_SIZE", DEFAULT_KERNEL_SIZE),
            tile_size=read_int("FILTER_TILE_SIZE", DEFAULT_TILE_SIZE),
            blur_workers=read_int("FILTER_BLUR_WORKERS", workers),
            invert_workers=read_int("FILTER_INVERT_WORKERS", workers),
        ).validate()
