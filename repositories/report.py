from typing import Dict, Type
from sqlalchemy import select, func, extract, and_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database import Base
from services.periods import DateRange, Granularity


class ReportRepository:
    """Grouped counts used by the statistics report.

    Each query runs in its own session so the report can issue them
    concurrently; a single AsyncSession does not allow overlapping statements.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def count_grouped(
        self,
        model: Type[Base],
        date_range: DateRange,
        granularity: Granularity,
    ) -> Dict[int, int]:
        """Count rows created in [start, end) grouped by month of year or day of month."""
        field = "month" if granularity == Granularity.MONTH else "day"
        bucket = extract(field, model.created_date).label("bucket")

        stmt = (
            select(bucket, func.count(model.id))
            .where(
                and_(
                    model.created_date >= date_range.start,
                    model.created_date < date_range.end,
                )
            )
            .group_by(bucket)
        )

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            # Postgres returns numeric for extract(), so coerce the bucket ids.
            return {int(b): c for b, c in result.all() if b is not None}
