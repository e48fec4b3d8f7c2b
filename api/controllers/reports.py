import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

"""
Controller for the hospital statistics report.
Builds the PDF (or its JSON equivalent) covering a year, a quarter or a month
from form-encoded parameters.
"""

from database import get_session_factory
from exceptions import ReportError
from repositories.report import ReportRepository
from services.pdf_renderer import iter_chunks
from services.periods import PeriodSpec
from services.report import ReportService
from api.report_schema import ErrorMessage, HospitalStatistics, ServerErrorMessage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])

ERROR_RESPONSES = {
    400: {"model": ErrorMessage},
    500: {"model": ServerErrorMessage},
}


# Provide repository instance per request.
def get_report_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ReportRepository:
    return ReportRepository(session_factory)


# Provide service instance per request.
def get_report_service(repository: ReportRepository = Depends(get_report_repository)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(repository)


def get_period_spec(
    type: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    quarter: Optional[str] = Form(None),
    month: Optional[str] = Form(None),
) -> PeriodSpec:
    logger.info("Hospital report requested: type=%r year=%r quarter=%r month=%r", type, year, quarter, month)
    return PeriodSpec.from_form(type=type, year=year, quarter=quarter, month=month)


@router.post(
    "/hospital/pdf",
    response_class=StreamingResponse,
    responses={200: {"content": {"application/pdf": {}}}, **ERROR_RESPONSES},
)
async def download_hospital_report(
    spec: PeriodSpec = Depends(get_period_spec),
    service: ReportService = Depends(get_report_service),
):
    try:
        filename, pdf = await service.generate_pdf(spec)
    except ReportError:
        # Mapped to a JSON response by the handlers registered in main.py.
        raise
    except Exception as e:
        logger.exception("Error generating PDF")
        return JSONResponse(
            status_code=500,
            content={"message": "An error occurred while generating the PDF", "error": str(e)},
        )

    # Everything that can fail has run; only buffered bytes are streamed from here.
    return StreamingResponse(
        iter_chunks(pdf),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/hospital/stats", response_model=HospitalStatistics, responses=ERROR_RESPONSES)
async def get_hospital_statistics(
    spec: PeriodSpec = Depends(get_period_spec),
    service: ReportService = Depends(get_report_service),
):
    return await service.get_statistics(spec)
