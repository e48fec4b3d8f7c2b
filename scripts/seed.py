import asyncio
import random
import sys
import os
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

# Add parent directory to path so we can import from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import AsyncSessionLocal, engine, Base
from models import Patient, Appointment, ClinicalReport, LabResult, Prescription

FIRST_NAMES = ["Ana", "Luis", "María", "José", "Carmen", "Diego", "Lucía", "Pedro"]
LAST_NAMES = ["García", "López", "Pérez", "Morales", "Castillo", "Ramírez"]
LAB_TESTS = [("Hemoglobin", "g/dL"), ("Glucose", "mg/dL"), ("Cholesterol", "mg/dL")]


def _new_id() -> str:
    return uuid.uuid4().hex


def _random_moment(rng: random.Random, year: int) -> datetime:
    start = datetime(year, 1, 1)
    seconds = (datetime(year + 1, 1, 1) - start).total_seconds()
    return start + timedelta(seconds=rng.randrange(int(seconds)))


def make_demo_records(year: int, patients: int = 40, rng: Optional[random.Random] = None) -> List:
    """Build patients plus related appointments, reports, results and prescriptions spread over a year."""
    rng = rng or random.Random()
    records = []
    for _ in range(patients):
        created = _random_moment(rng, year)
        patient = Patient(
            id=_new_id(),
            first_name=rng.choice(FIRST_NAMES),
            last_name=rng.choice(LAST_NAMES),
            date_of_birth=datetime(rng.randint(1940, 2020), rng.randint(1, 12), rng.randint(1, 28)),
            gender=rng.choice(["male", "female", "other"]),
            phone=f"+502 {rng.randint(1000, 9999)}-{rng.randint(1000, 9999)}",
            email=f"patient{rng.randint(1, 99999)}@example.com",
            created_date=created,
        )
        records.append(patient)

        for _ in range(rng.randint(0, 3)):
            records.append(Appointment(
                id=_new_id(),
                patient_id=patient.id,
                date=_random_moment(rng, year),
                time_slot=f"{rng.randint(8, 16):02d}:00",
                reason="General consultation",
                status=rng.choice(["pending", "confirmed", "cancelled", "completed"]),
                created_date=_random_moment(rng, year),
            ))
        if rng.random() < 0.5:
            records.append(ClinicalReport(
                id=_new_id(),
                patient_id=patient.id,
                title="Consultation notes",
                content="Patient in stable condition.",
                created_date=_random_moment(rng, year),
            ))
        for _ in range(rng.randint(0, 2)):
            test_name, unit = rng.choice(LAB_TESTS)
            records.append(LabResult(
                id=_new_id(),
                patient_id=patient.id,
                test_name=test_name,
                value=str(round(rng.uniform(5, 200), 1)),
                unit=unit,
                created_date=_random_moment(rng, year),
            ))
        if rng.random() < 0.6:
            records.append(Prescription(
                id=_new_id(),
                patient_id=patient.id,
                notes="Take with food.",
                created_date=_random_moment(rng, year),
            ))
    return records


async def seed_data(
    reset: bool = True,
    year: Optional[int] = None,
    patients: int = 40,
    db_engine=engine,
    session_factory=AsyncSessionLocal,
    rng: Optional[random.Random] = None,
) -> List:
    # 1. Recreate tables to ensure a clean slate
    # WARNING: This wipes existing data!
    async with db_engine.begin() as conn:
        if reset:
            print("Dropping existing tables...")
            await conn.run_sync(Base.metadata.drop_all)
        print("Creating tables...")
        await conn.run_sync(Base.metadata.create_all)

    # 2. Start a DB session to insert data
    records = make_demo_records(year or datetime.now().year, patients=patients, rng=rng)
    async with session_factory() as session:
        # Patients first so the other rows can reference them
        session.add_all([r for r in records if isinstance(r, Patient)])
        await session.commit()
        session.add_all([r for r in records if not isinstance(r, Patient)])
        await session.commit()

    print(f"Seeded {len(records)} records.")
    return records


if __name__ == "__main__":
    asyncio.run(seed_data())
