"""Payroll run export endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status
from fastapi.responses import Response

from payroll_statutory.api.dependencies import DbSession, OrganizationId
from payroll_statutory.api.schemas import ErrorResponse
from payroll_statutory.config import get_settings
from payroll_statutory.exports.formatter import UnknownExportProfileError
from payroll_statutory.services.export_service import (
    ExportService,
    PayrollRunNotFoundError,
    PayrollRunNotLockedError,
)

router = APIRouter(prefix="/payroll-runs", tags=["exports"])


@router.get(
    "/{run_id}/exports/{profile}",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}},
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def export_payroll_run(
    db: DbSession,
    organization_id: OrganizationId,
    run_id: Annotated[UUID, Path()],
    profile: Annotated[str, Path()],
    bank_format: Annotated[str | None, Query(alias="format")] = None,
) -> Response:
    """Download a locked run as a PF ECR, bank transfer or payroll master file."""
    service = ExportService(db)
    try:
        export = await service.export_run(
            run_id,
            profile,
            organization_id=organization_id,
            bank_format=bank_format or get_settings().bank_transfer_format,
        )
    except UnknownExportProfileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PayrollRunNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PayrollRunNotLockedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
