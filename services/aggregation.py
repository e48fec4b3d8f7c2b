import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from exceptions import AggregationFailure
from models import TRACKED_ENTITIES
from repositories.report import ReportRepository
from services.periods import ResolvedPeriod, bucket_index

logger = logging.getLogger(__name__)

SERIES_KEYS = tuple(TRACKED_ENTITIES.keys())


@dataclass
class SeriesCounts:
    """Dense per-bucket counts for each tracked entity kind, index-aligned to the buckets."""

    patients: List[int] = field(default_factory=list)
    appointments: List[int] = field(default_factory=list)
    reports: List[int] = field(default_factory=list)
    results: List[int] = field(default_factory=list)
    prescriptions: List[int] = field(default_factory=list)

    @classmethod
    def zeros(cls, n: int) -> "SeriesCounts":
        return cls(**{key: [0] * n for key in SERIES_KEYS})

    def series(self) -> List[List[int]]:
        return [getattr(self, key) for key in SERIES_KEYS]

    def totals(self) -> Dict[str, int]:
        return {key: sum(getattr(self, key)) for key in SERIES_KEYS}

    def as_dict(self) -> Dict[str, List[int]]:
        return {key: list(getattr(self, key)) for key in SERIES_KEYS}


def fold_counts(raw: Mapping[int, int], period: ResolvedPeriod) -> List[int]:
    """Write grouped (bucket id -> count) pairs into a zero-filled dense array.

    Counts are assigned, not added, so folding the same result twice gives
    the same array. Ids that map outside the period are dropped.
    """
    n = period.n
    dense = [0] * n
    for bucket_id, count in raw.items():
        try:
            idx = bucket_index(int(bucket_id), period)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric bucket id %r", bucket_id)
            continue
        if 0 <= idx < n:
            dense[idx] = int(count or 0)
        else:
            logger.debug("Ignoring bucket id %r outside %s", bucket_id, period.label)
    return dense


async def aggregate(repository: ReportRepository, period: ResolvedPeriod) -> SeriesCounts:
    """Run the five grouped counts concurrently and fold them into SeriesCounts.

    Any failing query aborts the whole aggregation with AggregationFailure;
    the queries still in flight are cancelled so their sessions close.
    """

    async def count(key: str, model) -> Dict[int, int]:
        try:
            return await repository.count_grouped(model, period.date_range, period.granularity)
        except Exception as e:
            raise AggregationFailure(key, e) from e

    tasks = [
        asyncio.ensure_future(count(key, model)) for key, model in TRACKED_ENTITIES.items()
    ]
    try:
        raw_results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    counts = SeriesCounts.zeros(period.n)
    for key, raw in zip(SERIES_KEYS, raw_results):
        setattr(counts, key, fold_counts(raw, period))

    logger.info("Aggregated %s: %s", period.label, counts.totals())
    return counts
