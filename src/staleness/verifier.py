"""Concurrent staleness checks over many breadcrumbs."""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import structlog

from .checker import StalenessResult, check_staleness

logger = structlog.get_logger(source="verifier")


@dataclass
class VerificationOutcome:
    """Staleness of one record; result is None when the check was never issued."""

    record: Any
    result: Optional[StalenessResult]

    @property
    def skipped(self) -> bool:
        return self.result is None


class StalenessVerifier:
    """Run check_staleness for many records with bounded concurrency.

    File reads go to worker threads, at most ``max_workers`` at a time.
    Once ``deadline_seconds`` has elapsed no new checks are started; reads
    already in flight finish normally and their outcomes are kept.
    """

    def __init__(
        self,
        cwd: str | Path,
        max_workers: int = 8,
        deadline_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.cwd = Path(cwd)
        self.max_workers = max_workers
        self.deadline_seconds = deadline_seconds
        self._clock = clock

    async def verify_all(self, records: Iterable[Any]) -> list[VerificationOutcome]:
        records = list(records)
        deadline = None
        if self.deadline_seconds is not None:
            deadline = self._clock() + self.deadline_seconds

        semaphore = asyncio.Semaphore(self.max_workers)
        tasks = [self._verify_limited(semaphore, r, deadline) for r in records]
        outcomes = await asyncio.gather(*tasks)

        skipped = sum(1 for o in outcomes if o.skipped)
        logger.debug("verify.done", checked=len(outcomes) - skipped, skipped=skipped)
        return outcomes

    async def _verify_limited(
        self, semaphore: asyncio.Semaphore, record: Any, deadline: Optional[float]
    ) -> VerificationOutcome:
        async with semaphore:
            if deadline is not None and self._clock() >= deadline:
                logger.debug("verify.deadline_skip", id=record.id)
                return VerificationOutcome(record, None)
            result = await asyncio.to_thread(
                check_staleness, record.code_hash, record.path, record.pattern_type, self.cwd
            )
            return VerificationOutcome(record, result)

    def run(self, records: Iterable[Any]) -> list[VerificationOutcome]:
        """Blocking entry point for synchronous callers such as the CLI."""
        return asyncio.run(self.verify_all(records))
