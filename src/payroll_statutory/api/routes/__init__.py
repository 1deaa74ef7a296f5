"""API routes."""

from payroll_statutory.api.routes.exports import router as exports_router
from payroll_statutory.api.routes.form16 import router as form16_router
from payroll_statutory.api.routes.health import router as health_router

__all__ = ["exports_router", "form16_router", "health_router"]
