#!/usr/bin/env python3
"""
Time every ordered index variant on the same deterministic workloads.

For each size, one workload per repetition is generated and shared by all
variants, so the insert / search / range / delete timings are comparable.
Each built index is checked against its invariants before it is torn down.

Usage:
    python -m benchmarks.run_benchmarks --variants avl red_black bplus_tree --sizes 10000
    BENCHMARK_VERIFY_ONLY=true python -m benchmarks.run_benchmarks
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime
from typing import List, Optional

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ordered_index.factory import VARIANTS

from .config import BenchmarkConfig
from .runner import BenchmarkRunner


def setup_logging(level: str, log_dir: Optional[str] = None) -> None:
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(os.path.join(log_dir, f"ordered_index_bench_{ts}.log"), mode="w"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark ordered index variants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--variants", nargs="+", choices=VARIANTS,
                        help="Variants to compare (default: every variant except bst)")
    parser.add_argument("--sizes", type=int, nargs="+", help="Entry counts per index")
    parser.add_argument("--min-degree", type=int, help="Minimum degree t for btree and bplus_tree")
    parser.add_argument("--repetitions", type=int, help="Workloads per (variant, size)")
    parser.add_argument("--range-queries", type=int, help="Range queries per workload")
    parser.add_argument("--seed", type=int, help="Base seed for workload generation")
    parser.add_argument("--verify-only", action="store_true", help="Check invariants only, skip timing tables")
    parser.add_argument("--skip-warmup", action="store_true")
    parser.add_argument("--no-progress", action="store_true", help="Hide tqdm progress bars")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-dir", help="Write a timestamped log file here (default: benchmarks/logs)")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    """``BENCHMARK_*`` environment defaults, overridden by explicit arguments."""
    config = BenchmarkConfig.from_env()
    overrides = {
        "variants": args.variants,
        "sizes": args.sizes,
        "min_degree": args.min_degree,
        "repetitions": args.repetitions,
        "range_queries": args.range_queries,
        "seed": args.seed,
        "log_level": args.log_level,
    }
    for field, value in overrides.items():
        if value is not None:
            setattr(config, field, value)
    config.verify_only = config.verify_only or args.verify_only
    config.skip_warmup = config.skip_warmup or args.skip_warmup
    config.progress = config.progress and not args.no_progress
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = build_config(args)
    log_dir = args.log_dir or os.path.join(os.path.dirname(__file__), "logs")
    setup_logging(config.log_level, None if config.verify_only else log_dir)

    runner = BenchmarkRunner(config)
    failures = []
    start = time.perf_counter()

    for size in config.sizes:
        for variant in config.variants:
            logging.info(f"--- {variant}, n={size}, repetitions={config.repetitions}, t={config.min_degree}")
            results, metadata = runner.run_benchmark(variant=variant, size=size, repetitions=config.repetitions)
            if not all(r.verified for r in results):
                failures.append((variant, size))
            if not config.verify_only:
                runner.aggregate_and_report(results, metadata)

    logging.info(f"Finished {len(config.sizes) * len(config.variants)} configurations "
                 f"in {time.perf_counter() - start:.3f} seconds")
    for variant, size in failures:
        logging.error(f"Invariant check failed for {variant} at n={size}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
