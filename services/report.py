import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from repositories.report import ReportRepository
from services.aggregation import SeriesCounts, aggregate
from services.pdf_renderer import render_report_pdf, report_filename
from services.periods import PeriodSpec, ResolvedPeriod, resolve_period

logger = logging.getLogger(__name__)


@dataclass
class ReportData:
    period: ResolvedPeriod
    counts: SeriesCounts


class ReportService:
    def __init__(self, repository: ReportRepository):
        self.repository = repository

    async def build(self, spec: PeriodSpec) -> ReportData:
        # Invalid periods fail here, before any query is issued.
        period = resolve_period(spec)
        counts = await aggregate(self.repository, period)
        return ReportData(period=period, counts=counts)

    async def generate_pdf(self, spec: PeriodSpec, generated_at: Optional[datetime] = None) -> Tuple[str, bytes]:
        data = await self.build(spec)
        pdf = render_report_pdf(data.period, data.counts, generated_at=generated_at)
        logger.info("Rendered report %s (%d bytes)", data.period.label, len(pdf))
        return report_filename(data.period), pdf

    async def get_statistics(self, spec: PeriodSpec) -> dict:
        data = await self.build(spec)
        return {
            "type": data.period.spec.mode,
            "period": data.period.label,
            "start": data.period.date_range.start,
            "end": data.period.date_range.end,
            "buckets": list(data.period.buckets),
            "series": data.counts.as_dict(),
            "totals": data.counts.totals(),
        }
