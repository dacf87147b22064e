"""Run a batch of independent calls concurrently and wait for every outcome."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")

log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass
class SettledBatch(Generic[R]):
    """Outcomes of one batch, both lists in submission order.

    ``succeeded`` and ``failed`` hold ``(index, value)`` / ``(index, error)``
    pairs so callers can relate an outcome back to its input.
    """

    succeeded: List[Tuple[int, R]] = field(default_factory=list)
    failed: List[Tuple[int, BaseException]] = field(default_factory=list)

    @property
    def values(self) -> List[R]:
        return [value for _, value in self.succeeded]

    @property
    def all_ok(self) -> bool:
        return not self.failed


def settle_all(
    fn: Callable[[T], R],
    items: Sequence[T],
    *,
    max_workers: Optional[int] = None,
) -> SettledBatch[R]:
    """Call ``fn`` for each item concurrently; never short-circuit.

    Every call is started before this returns and the function blocks until
    all of them finished. Exceptions are collected, not raised.
    """
    batch: SettledBatch[R] = SettledBatch()
    if not items:
        return batch
    workers = max(1, min(max_workers or DEFAULT_MAX_WORKERS, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(fn, item) for item in items]
        for index, future in enumerate(futures):
            try:
                batch.succeeded.append((index, future.result()))
            except Exception as exc:
                log.debug("Batch item %d failed: %s", index, exc)
                batch.failed.append((index, exc))
    return batch


__all__ = ["DEFAULT_MAX_WORKERS", "SettledBatch", "settle_all"]
