"""Form 16 (annual salary and TDS) generation endpoints."""

from fastapi import APIRouter, HTTPException, status

from payroll_statutory.api.dependencies import DbSession, OrganizationId
from payroll_statutory.api.schemas import (
    ErrorResponse,
    Form16GenerateRequest,
    Form16GenerateResponse,
)
from payroll_statutory.calculators.financial_year import InvalidFinancialYearError
from payroll_statutory.services.annual_aggregator import (
    AggregatePersistenceError,
    AnnualAggregatorService,
    NoEntriesError,
    NoLockedRunsError,
)

router = APIRouter(prefix="/form16", tags=["form16"])


@router.post(
    "/generate",
    response_model=Form16GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_form16(
    db: DbSession,
    organization_id: OrganizationId,
    payload: Form16GenerateRequest,
) -> Form16GenerateResponse:
    """Aggregate locked payroll of a financial year into Form 16 records."""
    service = AnnualAggregatorService(db)
    try:
        result = await service.generate(
            organization_id,
            payload.financial_year,
            generated_by=payload.generated_by,
        )
    except InvalidFinancialYearError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (NoLockedRunsError, NoEntriesError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AggregatePersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{e} ({e.result.generated} records saved; safe to retry)",
        )

    return Form16GenerateResponse(
        organization_id=organization_id,
        financial_year=result.financial_year,
        generated=result.generated,
    )
