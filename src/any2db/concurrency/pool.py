"""Async concurrency pool for materializing many sources at once."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from any2db.types import BatchOutcome

logger = logging.getLogger(__name__)


class ConcurrencyPool:
    """Bounded async dispatcher over sources, one worker per source."""

    def __init__(self, max_workers: int = 5) -> None:
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    async def process_batch(
        self,
        fetch_fn: Callable[..., Awaitable[Path]],
        sources: list[str],
        **kwargs: object,
    ) -> list[BatchOutcome]:
        """Process a batch of sources concurrently.

        Args:
            fetch_fn: Async callable(source, **kwargs) -> Path, usually
                ``ArtifactCache.get_artifact_async``.
            sources: Source paths to materialize.
            **kwargs: Additional args passed to fetch_fn.

        Returns one BatchOutcome per source, in input order. A failing source
        doesn't abort the others.
        """
        semaphore = asyncio.Semaphore(self._max_workers)

        async def worker(source: str) -> Path:
            async with semaphore:
                return await fetch_fn(source, **kwargs)

        results = await asyncio.gather(*(worker(s) for s in sources), return_exceptions=True)

        outcomes: list[BatchOutcome] = []
        for source, result in zip(sources, results, strict=True):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.error("Source %s failed: %s", source, result)
                outcomes.append(BatchOutcome(source=source, error=str(result)))
            else:
                outcomes.append(BatchOutcome(source=source, path=result))
        return outcomes
