#!/usr/bin/env python3
"""
Generation Profiler
===================
Lightweight timing for engine construction and word generation.

Usage:
    phonogen bench -l fr -n 20000 -s 1

    from phonogen.profiler import run_benchmark
    profiler = run_benchmark('metropolitan_french', iterations=5000)
    print(profiler.report())
"""

import json
import statistics
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .phonology.engine import Engine


@dataclass
class StageStats:
    """Statistics for a single profiled stage."""
    times: List[float] = field(default_factory=list)
    items: int = 0

    @property
    def total(self) -> float:
        return sum(self.times)

    @property
    def count(self) -> int:
        return len(self.times)

    @property
    def mean(self) -> float:
        return statistics.mean(self.times) if self.times else 0

    @property
    def median(self) -> float:
        return statistics.median(self.times) if self.times else 0

    @property
    def stdev(self) -> float:
        return statistics.stdev(self.times) if len(self.times) > 1 else 0

    @property
    def per_item(self) -> float:
        return self.total / self.items if self.items else 0

    @property
    def throughput(self) -> float:
        """Items per second."""
        return self.items / self.total if self.total else 0

    @property
    def min(self) -> float:
        return min(self.times) if self.times else 0

    @property
    def max(self) -> float:
        return max(self.times) if self.times else 0

    def to_dict(self) -> dict:
        return {
            'total_seconds': self.total,
            'count': self.count,
            'items': self.items,
            'mean_seconds': self.mean,
            'median_seconds': self.median,
            'stdev_seconds': self.stdev,
            'min_seconds': self.min,
            'max_seconds': self.max,
            'per_item_us': self.per_item * 1e6,
            'items_per_second': self.throughput,
        }


class GenerationProfiler:
    """
    Collects timings per named stage.

    Example:
        profiler = GenerationProfiler()
        profiler.start()

        with profiler.stage("construct"):
            engine = Engine('en')

        with profiler.stage("generate", items=1000):
            engine.generate_words(1000, 1)

        print(profiler.report())
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.stages: Dict[str, StageStats] = defaultdict(StageStats)
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self):
        if self.enabled:
            self.start_time = time.perf_counter()

    def stop(self):
        if self.enabled:
            self.end_time = time.perf_counter()

    @property
    def total_time(self) -> float:
        if not self.start_time:
            return 0
        end = self.end_time or time.perf_counter()
        return end - self.start_time

    @contextmanager
    def stage(self, name: str, items: int = 1):
        """Time the body of a ``with`` block as one call of ``name``."""
        if not self.enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, time.perf_counter() - start, items)

    def record(self, name: str, elapsed: float, items: int = 1):
        if not self.enabled:
            return
        self.stages[name].times.append(elapsed)
        self.stages[name].items += items

    def report(self) -> str:
        """Plain-text summary, slowest stage first."""
        if not self.enabled or not self.stages:
            return ""

        self.stop()
        total = self.total_time
        lines = [
            "",
            "=" * 70,
            "PROFILING REPORT",
            "=" * 70,
            f"Total time: {total:.3f}s",
            "",
        ]

        header = f"{'Stage':<16} {'Total':>9} {'Calls':>6} {'Items':>8} {'Per-item':>11} {'Items/s':>11}"
        lines.append(header)
        lines.append("-" * len(header))
        for name, stats in sorted(self.stages.items(), key=lambda x: -x[1].total):
            lines.append(
                f"{name:<16} {stats.total:>8.3f}s {stats.count:>6} {stats.items:>8} "
                f"{stats.per_item * 1e6:>9.1f}us {stats.throughput:>11,.0f}"
            )
        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        self.stop()
        return {
            'total_seconds': self.total_time,
            'stages': {name: stats.to_dict() for name, stats in self.stages.items()},
        }

    def save_json(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def run_benchmark(variety: str, iterations: int = 10000, max_syllables: int = 1,
                  seed: Optional[int] = None, batches: int = 10) -> GenerationProfiler:
    """
    Build an engine and time repeated ``generate_word`` calls.

    Iterations are split into ``batches`` timed calls so the report carries a
    spread, not just one number.

    Raises:
        ValueError: on a non-positive iteration count or an unknown variety.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}")
    batches = max(1, min(batches, iterations))

    profiler = GenerationProfiler()
    profiler.start()

    with profiler.stage("construct"):
        engine = Engine(variety, seed=seed)

    base, extra = divmod(iterations, batches)
    for b in range(batches):
        size = base + (1 if b < extra else 0)
        with profiler.stage("generate", items=size):
            for _ in range(size):
                engine.generate_word(max_syllables)

    profiler.stop()
    return profiler
