"""Construction defaults for ordered indexes, overridable via environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_VARIANT = "avl"
DEFAULT_MIN_DEGREE = 3

ENV_PREFIX = "ORDERED_INDEX_"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class IndexConfig:
    """Defaults consumed by :func:`ordered_index.factory.create_index`."""

    variant: str = DEFAULT_VARIANT
    min_degree: int = DEFAULT_MIN_DEGREE
    seed: Optional[int] = None
    check_invariants: bool = False
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "IndexConfig":
        """Create config with ``ORDERED_INDEX_*`` environment variable overrides."""
        seed = os.environ.get(f"{ENV_PREFIX}SEED")
        log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
        return cls(
            variant=os.environ.get(f"{ENV_PREFIX}VARIANT", DEFAULT_VARIANT),
            min_degree=int(os.environ.get(f"{ENV_PREFIX}MIN_DEGREE", str(DEFAULT_MIN_DEGREE))),
            seed=int(seed) if seed not in (None, "") else None,
            check_invariants=_env_bool(f"{ENV_PREFIX}CHECK_INVARIANTS", False),
            log_level=log_level.upper() if log_level else None,
        )

    def validate(self) -> None:
        if self.min_degree < 2:
            raise ValueError(f"min_degree must be >= 2, got {self.min_degree}")
        if self.log_level is not None and not isinstance(self.level_number(), int):
            raise ValueError(f"Unknown log_level {self.log_level!r}")

    def level_number(self) -> Optional[int]:
        """Numeric logging level, or ``None`` when no level is configured."""
        if self.log_level is None:
            return None
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else None
