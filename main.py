import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CORS_ORIGINS, LOG_LEVEL
from database import engine, Base
from exceptions import AggregationFailure, InvalidParameter
from api.controllers import reports

import models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables
    async with engine.begin() as conn:
        # In production, we might use alembic instead of create_all
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(title="Hospital HOPE API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidParameter)
async def invalid_parameter_handler(request: Request, exc: InvalidParameter):
    logger.warning("Rejected report request (%s): %s", exc.field, exc.message)
    return JSONResponse(status_code=400, content={"message": exc.message})


@app.exception_handler(AggregationFailure)
async def aggregation_failure_handler(request: Request, exc: AggregationFailure):
    logger.error("Report aggregation failed for %s: %s", exc.entity, exc.error)
    return JSONResponse(status_code=500, content={"message": exc.message, "error": exc.error})


app.include_router(reports.router)

@app.get("/")
async def root():
    return {"message": "Hospital HOPE API is running"}
