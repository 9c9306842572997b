"""Benchmark configuration and metadata management."""

import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from ordered_index.factory import VARIANTS


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""

    # Reproducibility
    seed: int = 42

    # Benchmark parameters
    sizes: list[int] = None
    variants: list[str] = None
    min_degree: int = 3
    repetitions: int = 20
    range_queries: int = 100
    range_width: int = 1000

    # Execution control
    verify_only: bool = False
    skip_warmup: bool = False
    progress: bool = True

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if self.sizes is None:
            self.sizes = [100, 1000, 10_000]
        if self.variants is None:
            self.variants = [v for v in VARIANTS if v != "bst"]

    @classmethod
    def from_env(cls) -> "BenchmarkConfig":
        """Create config from environment variables."""
        return cls(
            seed=int(os.environ.get("BENCHMARK_SEED", "42")),
            min_degree=int(os.environ.get("BENCHMARK_MIN_DEGREE", "3")),
            verify_only=os.environ.get("BENCHMARK_VERIFY_ONLY", "").lower() == "true",
            skip_warmup=os.environ.get("BENCHMARK_SKIP_WARMUP", "").lower() == "true",
            progress=os.environ.get("BENCHMARK_NO_PROGRESS", "").lower() != "true",
            log_level=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        )


def get_git_commit_hash() -> Optional[str]:
    """Get the current git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


@dataclass
class BenchmarkMetadata:
    """Metadata about a benchmark run."""

    commit_hash: Optional[str]
    config: BenchmarkConfig
    variant: str
    size: int
    repetitions: int

    def __str__(self) -> str:
        """Format metadata as string."""
        lines = [
            f"Commit: {self.commit_hash or 'unknown'}",
            f"Seed: {self.config.seed}",
            f"Variant: {self.variant}",
            f"Size (n): {self.size}",
            f"Repetitions: {self.repetitions}",
        ]
        if self.variant in ("btree", "bplus_tree"):
            lines.append(f"Minimum degree (t): {self.config.min_degree}")
        return "\n".join(lines)
