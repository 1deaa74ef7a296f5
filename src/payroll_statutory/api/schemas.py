"""Pydantic schemas for API request/response models."""

from uuid import UUID

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None


class Form16GenerateRequest(BaseModel):
    """Request to generate Form 16 records for a financial year."""

    financial_year: str = Field(..., pattern=r"^\d{4}-\d{4}$", examples=["2023-2024"])
    generated_by: UUID | None = None


class Form16GenerateResponse(BaseModel):
    """Result of a Form 16 generation batch."""

    organization_id: UUID
    financial_year: str
    generated: int
