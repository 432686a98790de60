"""Throughput measurements produced by a benchmark."""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BenchResult:
    """Throughput samples, in messages per second, for one parameter value."""

    label: str
    parameter: str
    throughput: Tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "throughput", tuple(self.throughput))

    def _require_samples(self) -> None:
        if not self.throughput:
            raise ValueError("benchmark result holds no throughput samples")

    def mean(self) -> float:
        """Average throughput over all samples."""
        self._require_samples()
        return statistics.fmean(self.throughput)

    def std_dev(self) -> float:
        """Population standard deviation of the throughput samples."""
        self._require_samples()
        return statistics.pstdev(self.throughput)