"""Payroll export layouts."""

from payroll_statutory.exports.formatter import (
    ExportFile,
    ExportFormatter,
    ExportProfile,
    UnknownExportProfileError,
    format_cell,
)

__all__ = [
    "ExportFile",
    "ExportFormatter",
    "ExportProfile",
    "UnknownExportProfileError",
    "format_cell",
]
