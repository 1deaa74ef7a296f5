"""Statutory payroll contribution, export and annual aggregation engine."""

__version__ = "0.1.0"
