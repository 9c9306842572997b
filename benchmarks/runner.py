"""Core benchmark runner for ordered index performance measurements."""

import logging
import time
from dataclasses import dataclass
from statistics import mean
from typing import List, Tuple

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tqdm import tqdm

from ordered_index.tree_stats import Stats, index_stats
from ordered_index.utils import perfect_height

from .config import BenchmarkConfig, BenchmarkMetadata, get_git_commit_hash
from .utils import Workload, build_index, generate_workload
from .verify import check_keys, verify_invariants


@dataclass
class BenchmarkResult:
    """Results from a single benchmark repetition."""
    stats: Stats
    insert_time: float
    search_time: float
    range_time: float
    delete_time: float
    range_hits: int
    verified: bool = True


class BenchmarkRunner:
    """
    Manages the benchmark lifecycle with proper phase separation.

    Phases:
    1. Setup (not timed): Configuration and workload generation
    2. Warmup (not timed): Optional warmup iterations
    3. Run (timed): insert, search, range query and delete, measured separately
    4. Verify (not timed): Correctness checks
    5. Teardown (not timed): Cleanup
    """

    def __init__(self, config: BenchmarkConfig):
        """
        Initialize benchmark runner.

        Args:
            config: Benchmark configuration
        """
        self.config = config
        self._check_logging_level()

    def _check_logging_level(self) -> None:
        """Warn if verbose logging is enabled during measurement."""
        current_level = logging.getLogger().getEffectiveLevel()
        if current_level < logging.INFO:
            level_name = logging.getLevelName(current_level)
            logging.warning(
                "⚠️  Verbose logging (%s) is enabled. This may affect benchmark timing! "
                "Set log level to INFO or higher for accurate measurements.",
                level_name
            )

    def setup(self, size: int, repetitions: int) -> List[Workload]:
        """
        Setup phase: Generate one workload per repetition.

        NOT TIMED.
        """
        base_seed = self.config.seed
        return [
            generate_workload(size, base_seed + i, self.config.range_queries, self.config.range_width)
            for i in range(repetitions)
        ]

    def warmup(self, variant: str, workloads: List[Workload]) -> None:
        """
        Warmup phase: Run a build and a lookup pass to warm caches.

        NOT TIMED.
        """
        if self.config.skip_warmup or not workloads:
            return
        workload = workloads[0]
        index = build_index(variant, workload.keys, self.config.min_degree, self.config.seed)
        search = index.search
        for key in workload.probes:
            search(key)

    def run_single(self, variant: str, workload: Workload, seed: int) -> BenchmarkResult:
        """
        Run measurement on a single workload.

        TIMED - only the actual operations are measured.
        """
        t0 = time.perf_counter()
        index = build_index(variant, workload.keys, self.config.min_degree, seed)
        insert_time = time.perf_counter() - t0

        search = index.search
        t0 = time.perf_counter()
        for key in workload.probes:
            search(key)
        search_time = time.perf_counter() - t0

        range_query = index.range_query
        range_hits = 0
        t0 = time.perf_counter()
        for low, high in workload.ranges:
            for _ in range_query(low, high):
                range_hits += 1
        range_time = time.perf_counter() - t0

        # === VERIFY PHASE (not timed) ===
        stats = index_stats(index)
        verified = True
        if self.config.verify_only or logging.getLogger().isEnabledFor(logging.DEBUG):
            verified = verify_invariants(index, stats) and check_keys(index, workload.keys)

        delete = index.delete
        t0 = time.perf_counter()
        for key in workload.delete_order:
            delete(key)
        delete_time = time.perf_counter() - t0

        if self.config.verify_only and not index.is_empty():
            logging.error("Index still holds %d keys after deleting all of them", len(index))
            verified = False

        return BenchmarkResult(
            stats=stats,
            insert_time=insert_time,
            search_time=search_time,
            range_time=range_time,
            delete_time=delete_time,
            range_hits=range_hits,
            verified=verified,
        )

    def run_benchmark(
        self,
        variant: str,
        size: int,
        repetitions: int,
    ) -> Tuple[List[BenchmarkResult], BenchmarkMetadata]:
        """
        Run complete benchmark with proper phase separation.

        Returns:
            (results, metadata)
        """
        metadata = BenchmarkMetadata(
            commit_hash=get_git_commit_hash(),
            config=self.config,
            variant=variant,
            size=size,
            repetitions=repetitions,
        )

        # === SETUP PHASE (not timed) ===
        logging.debug("Setup: Generating %d workloads...", repetitions)
        workloads = self.setup(size, repetitions)

        # === WARMUP PHASE (not timed) ===
        if not self.config.skip_warmup:
            logging.debug("Warmup: Running warmup iterations...")
            self.warmup(variant, workloads)

        # === MEASUREMENT PHASE (timed) ===
        results = []
        progress = tqdm(
            workloads,
            desc=f"{variant} n={size}",
            leave=False,
            disable=not self.config.progress,
        )
        for i, workload in enumerate(progress):
            results.append(self.run_single(variant, workload, self.config.seed + i))

        if self.config.verify_only:
            if all(r.verified for r in results):
                logging.info("✓ All verifications passed for %s, n=%d", variant, size)
            else:
                logging.error("✗ Some verifications failed for %s, n=%d", variant, size)

        # === TEARDOWN PHASE (not timed) ===
        # No explicit cleanup needed for Python

        return results, metadata

    def aggregate_and_report(
        self,
        results: List[BenchmarkResult],
        metadata: BenchmarkMetadata,
    ) -> None:
        """
        Aggregate results and report statistics.

        NOT TIMED.
        """
        size = metadata.size
        multiway = metadata.variant in ("btree", "bplus_tree")
        fanout = 2 * self.config.min_degree if multiway else 2
        perfect = perfect_height(size, fanout)

        def avg_var(values):
            values = list(values)
            avg = mean(values)
            return avg, mean((v - avg) ** 2 for v in values)

        height = avg_var(r.stats.height for r in results)
        node_count = avg_var(r.stats.node_count for r in results)
        slot_count = avg_var(r.stats.key_slot_count for r in results)
        fill = avg_var(r.stats.avg_fill for r in results)
        height_amp = avg_var((r.stats.height / perfect) if perfect else 0 for r in results)
        range_hits = avg_var(r.range_hits for r in results)

        logging.info("")
        logging.info("=== METADATA ===")
        for line in str(metadata).split('\n'):
            logging.info(line)

        rows = [
            ("Key slot count", *slot_count),
            ("Node count", *node_count),
            ("Avg node fill", *fill),
            ("Actual height", *height),
            ("Perfect height", perfect, None),
            ("Height amplification", *height_amp),
            ("Range hits", *range_hits),
        ]
        counters = sorted({name for r in results for name in r.stats.structural_counts})
        for name in counters:
            rows.append((name.capitalize(), *avg_var(r.stats.structural_counts.get(name, 0) for r in results)))

        header = f"{'Metric':<20} {'Avg':>15} {'(Var)':>15}"
        sep_line = "-" * len(header)

        logging.info("")
        logging.info("=== STATISTICS ===")
        logging.info(header)
        logging.info(sep_line)
        for name, avg, var in rows:
            if var is None:
                logging.info(f"{name:<20} {avg:>15}")
            else:
                var_str = f"({var:.2f})"
                avg_fmt = f"{avg:15.2f}"
                logging.info(f"{name:<20} {avg_fmt} {var_str:>15}")

        phases = [
            ("Insert time (s)", [r.insert_time for r in results]),
            ("Search time (s)", [r.search_time for r in results]),
            ("Range time (s)", [r.range_time for r in results]),
            ("Delete time (s)", [r.delete_time for r in results]),
        ]
        total_sum = sum(sum(times) for _, times in phases)

        header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
        sep = "-" * len(header)

        logging.info("")
        logging.info("=== PERFORMANCE ===")
        logging.info(header)
        logging.info(sep)
        for name, times in phases:
            avg, var = avg_var(times)
            total = sum(times)
            pct = (total / total_sum * 100) if total_sum else 0
            logging.info(
                f"{name:<20}"
                f"{avg:13.6f}"
                f"{var:13.6f}"
                f"{total:13.6f}"
                f"{pct:10.2f}%"
            )
        logging.info(sep)
