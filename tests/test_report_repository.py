import asyncio
import random
from datetime import datetime

from models import Appointment, LabResult, Patient, TRACKED_ENTITIES
from repositories.report import ReportRepository
from scripts.seed import seed_data
from services.aggregation import aggregate


def _patient(pid, created):
    return Patient(id=pid, first_name="Ana", last_name="García", created_date=created)


def _insert(factory, rows):
    async def _run():
        async with factory() as session:
            session.add_all(rows)
            await session.commit()
    asyncio.run(_run())


def test_counts_grouped_by_month(sqlite_factory, resolve):
    _, factory = sqlite_factory
    _insert(factory, [
        _patient("p1", datetime(2025, 4, 3, 10)),
        _patient("p2", datetime(2025, 4, 30, 23, 59)),
        _patient("p3", datetime(2025, 6, 15)),
        _patient("p4", datetime(2025, 7, 1)),  # range end is exclusive
        _patient("p5", datetime(2025, 3, 31, 23, 59)),
    ])
    period = resolve("quarter", quarter=2)

    counts = asyncio.run(
        ReportRepository(factory).count_grouped(Patient, period.date_range, period.granularity)
    )

    assert counts == {4: 2, 6: 1}


def test_counts_grouped_by_day(sqlite_factory, resolve):
    _, factory = sqlite_factory
    _insert(factory, [
        _patient("p1", datetime(2024, 1, 1)),
        Appointment(id="a1", patient_id="p1", status="pending", created_date=datetime(2024, 2, 29, 8)),
        Appointment(id="a2", patient_id="p1", status="pending", created_date=datetime(2024, 2, 29, 17)),
        Appointment(id="a3", patient_id="p1", status="pending", created_date=datetime(2024, 2, 1)),
        LabResult(id="r1", patient_id="p1", test_name="Glucose", created_date=datetime(2024, 3, 1)),
    ])
    period = resolve("month", year=2024, month=2)
    repository = ReportRepository(factory)

    appointments = asyncio.run(repository.count_grouped(Appointment, period.date_range, period.granularity))
    results = asyncio.run(repository.count_grouped(LabResult, period.date_range, period.granularity))

    assert appointments == {29: 2, 1: 1}
    assert results == {}


def test_seeded_year_totals_match_rows(sqlite_factory, resolve):
    engine, factory = sqlite_factory
    records = asyncio.run(
        seed_data(year=2023, patients=15, db_engine=engine, session_factory=factory, rng=random.Random(7))
    )

    counts = asyncio.run(aggregate(ReportRepository(factory), resolve("year", year=2023)))

    totals = counts.totals()
    for key, model in TRACKED_ENTITIES.items():
        assert totals[key] == sum(1 for r in records if isinstance(r, model))
