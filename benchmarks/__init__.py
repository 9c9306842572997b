"""
Benchmarks package for ordered index variants.

Measures insert, search, range query and delete throughput per variant
and size on deterministic workloads, and reports shape statistics
(height, node count, fill, rotations/splits) alongside the timings.
"""

from .config import BenchmarkConfig
from .runner import BenchmarkRunner

__all__ = ["BenchmarkConfig", "BenchmarkRunner"]
