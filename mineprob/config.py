"""Caller-supplied solver configuration."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_ENUMERATION_LIMIT = 30


@dataclass(frozen=True)
class SolverOptions:
    """
    Options for a single solve.

    Args:
        enumeration_limit: Maximum number of unknown cells an island may hold
            before exhaustive enumeration is refused with IslandTooLarge.
        deadline: Wall-clock budget in seconds for the whole solve, or None.
        max_workers: Thread pool size for per-island enumeration. None lets
            the executor choose; 1 enumerates inline on the calling thread.
        skip_oversized_islands: If True, islands over the limit are reported
            in ProbabilityReport.skipped_islands instead of failing the solve.
    """

    enumeration_limit: int = DEFAULT_ENUMERATION_LIMIT
    deadline: Optional[float] = None
    max_workers: Optional[int] = None
    skip_oversized_islands: bool = False

    def __post_init__(self) -> None:
        if self.enumeration_limit <= 0:
            raise ValueError("enumeration_limit must be positive.")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError("deadline must be positive seconds or None.")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be positive or None.")
