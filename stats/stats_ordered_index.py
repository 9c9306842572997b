"""Statistics for ordered index variants."""

import argparse
import logging
import os
import time
from datetime import datetime
from statistics import mean

import numpy as np

from ordered_index.base import AbstractOrderedIndex
from ordered_index.factory import VARIANTS, create_index
from ordered_index.invariants import assert_index_invariants
from ordered_index.tree_stats import index_stats
from ordered_index.utils import perfect_height

logger = logging.getLogger(__name__)

MULTIWAY = ("btree", "bplus_tree")


def random_keys(n: int, order: str, rng: np.random.Generator) -> np.ndarray:
    """
    Draw ``n`` distinct integer keys from a key space of 2^24.

    ``order`` is "random" (insertion in draw order), "sorted" or "reversed";
    the sorted orders are the worst case for the unbalanced baseline.
    """
    space = 1 << 24
    if space <= n:
        raise ValueError(f"Key-space too small! Required: {n + 1}, Available: {space}")
    keys = rng.choice(space, size=n, replace=False)
    if order == "sorted":
        keys.sort()
    elif order == "reversed":
        keys = np.sort(keys)[::-1]
    return keys


def build_index(variant: str, keys: np.ndarray, min_degree: int, seed=None) -> AbstractOrderedIndex:
    options = {"min_degree": min_degree} if variant in MULTIWAY else {}
    if variant == "treap":
        options["seed"] = seed
    index = create_index(variant, **options)
    index_insert = index.insert
    for k in keys.tolist():
        index_insert(k, "val")
    return index


def repeated_experiment(
    variant: str,
    size: int,
    repetitions: int,
    min_degree: int,
    order: str,
    delete_fraction: float,
    rng: np.random.Generator,
) -> None:
    """
    Repeatedly build an index of ``size`` keys, optionally delete a share of
    them, and aggregate shape statistics and timings over all repetitions.
    """
    t_all_0 = time.perf_counter()

    results = []
    times_build = []
    times_delete = []
    times_stats = []

    for _ in range(repetitions):
        keys = random_keys(size, order, rng)

        t0 = time.perf_counter()
        index = build_index(variant, keys, min_degree, seed=int(rng.integers(1 << 31)))
        times_build.append(time.perf_counter() - t0)

        n_delete = int(size * delete_fraction)
        t0 = time.perf_counter()
        for k in rng.permutation(keys)[:n_delete].tolist():
            index.delete(k)
        times_delete.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        stats = index_stats(index)
        times_stats.append(time.perf_counter() - t0)

        assert_index_invariants(index)
        results.append(stats)

    remaining = size - int(size * delete_fraction)
    fanout = 2 * min_degree if variant in MULTIWAY else 2
    perfect = perfect_height(remaining, fanout)

    heights = np.array([s.height for s in results], dtype=float)
    node_counts = np.array([s.node_count for s in results], dtype=float)
    leaf_counts = np.array([s.leaf_count for s in results], dtype=float)
    slot_counts = np.array([s.key_slot_count for s in results], dtype=float)
    entry_counts = np.array([s.entry_count for s in results], dtype=float)
    fills = np.array([s.avg_fill for s in results], dtype=float)
    height_amp = heights / perfect if perfect else np.zeros_like(heights)
    space_amp = np.divide(slot_counts, entry_counts, out=np.zeros_like(slot_counts), where=entry_counts > 0)

    rows = [
        ("Entry count", entry_counts.mean(), entry_counts.var()),
        ("Key slot count", slot_counts.mean(), slot_counts.var()),
        ("Space amplification", space_amp.mean(), space_amp.var()),
        ("Node count", node_counts.mean(), node_counts.var()),
        ("Leaf count", leaf_counts.mean(), leaf_counts.var()),
        ("Avg node fill", fills.mean(), fills.var()),
        ("Actual height", heights.mean(), heights.var()),
        ("Perfect height", perfect, None),
        ("Height amplification", height_amp.mean(), height_amp.var()),
    ]

    structural = sorted({name for s in results for name in s.structural_counts})
    for name in structural:
        values = np.array([s.structural_counts.get(name, 0) for s in results], dtype=float)
        rows.append((f"{name.capitalize()}", values.mean(), values.var()))

    header = f"{'Metric':<20} {'Avg':>15} {'(Var)':>15}"
    sep_line = "-" * len(header)

    logger.info(header)
    logger.info(sep_line)
    for name, avg, var in rows:
        if var is None:
            logger.info(f"{name:<20} {avg:>15}")
        else:
            var_str = f"({var:.2f})"
            avg_fmt = f"{avg:15.2f}"
            logger.info(f"{name:<20} {avg_fmt} {var_str:>15}")

    sum_build = sum(times_build)
    sum_delete = sum(times_delete)
    sum_stats = sum(times_stats)
    total_sum = sum_build + sum_delete + sum_stats

    perf_rows = []
    for name, times, total in (
        ("Build time (s)", times_build, sum_build),
        ("Delete time (s)", times_delete, sum_delete),
        ("Stats time (s)", times_stats, sum_stats),
    ):
        avg = mean(times)
        var = mean((t - avg) ** 2 for t in times)
        pct = (total / total_sum * 100) if total_sum else 0
        perf_rows.append((name, avg, var, total, pct))

    header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
    sep = "-" * len(header)

    logger.info("")
    logger.info("Performance summary:")
    logger.info(header)
    logger.info(sep)
    for name, avg, var, total, pct in perf_rows:
        logger.info(f"{name:<20}{avg:13.6f}{var:13.6f}{total:13.6f}{pct:10.2f}%")

    logger.info(sep)
    t_all_1 = time.perf_counter() - t_all_0
    logger.info("Execution time: %.3f seconds", t_all_1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run statistics experiments for ordered index variants.")
    parser.add_argument(
        "--sizes", type=int, nargs="+", default=[10, 100, 1000, 10_000], help="List of index sizes to test."
    )
    parser.add_argument(
        "--variants", nargs="+", choices=VARIANTS, default=list(VARIANTS), help="Index variants to test."
    )
    parser.add_argument("--min-degree", type=int, default=3, help="Minimum degree t for the multiway variants.")
    parser.add_argument(
        "--order", choices=["random", "sorted", "reversed"], default="random", help="Key insertion order."
    )
    parser.add_argument(
        "--delete-fraction", type=float, default=0.0, help="Share of keys deleted after building (0..1)."
    )
    parser.add_argument("--repetitions", type=int, default=1, help="Number of repetitions for each experiment.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )

    args = parser.parse_args()

    if not 0.0 <= args.delete_fraction <= 1.0:
        parser.error("--delete-fraction must be between 0 and 1")

    rng = np.random.default_rng(args.seed)

    log_dir = os.path.join(os.getcwd(), "stats/logs/ordered_index_logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    log_level = getattr(logging, args.log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler(),
        ],
        force=True,
    )

    # Also apply the chosen level to the library logger so that
    # log records from ordered_index.* are emitted at the requested level.
    logging.getLogger("ordered_index").setLevel(log_level)

    for n in args.sizes:
        for variant in args.variants:
            logger.info("")
            logger.info("")
            logger.info(
                f"---------------- NOW RUNNING EXPERIMENT: variant = {variant}, n = {n}, "
                f"order = {args.order}, repetitions = {args.repetitions} ----------------"
            )
            t0 = time.perf_counter()
            repeated_experiment(
                variant=variant,
                size=n,
                repetitions=args.repetitions,
                min_degree=args.min_degree,
                order=args.order,
                delete_fraction=args.delete_fraction,
                rng=rng,
            )
            elapsed = time.perf_counter() - t0
            logger.info(f"Total experiment time: {elapsed:.3f} seconds")
