"""Statutory payroll command line interface.

Provides operational tools for:
- Exporting a locked payroll run (PF ECR, bank transfer, payroll master)
- Generating Form 16 annual records for a financial year
- Showing the pay-period window of a financial year

Usage:
    python -m payroll_statutory.cli export --run-id X --profile pf_ecr --output ecr.csv
    python -m payroll_statutory.cli form16 --organization-id X --financial-year 2023-2024
    python -m payroll_statutory.cli fy-window --financial-year 2023-2024
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable
from pathlib import Path
from uuid import UUID

from payroll_statutory.calculators.financial_year import (
    FinancialYear,
    InvalidFinancialYearError,
)
from payroll_statutory.config import configure_logging, get_settings
from payroll_statutory.database import dispose_db, get_session
from payroll_statutory.exports.formatter import ExportProfile
from payroll_statutory.services.annual_aggregator import (
    AggregatePersistenceError,
    AnnualAggregationError,
    AnnualAggregatorService,
)
from payroll_statutory.services.export_service import (
    ExportService,
    PayrollRunNotFoundError,
    PayrollRunNotLockedError,
)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class StatutoryCli:
    """Statutory payroll Command Line Interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m payroll_statutory.cli",
            description="Statutory payroll exports and Form 16 generation",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Logging level (default: $LOG_LEVEL or INFO)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # export command
        export = subparsers.add_parser(
            "export",
            help="Export a locked payroll run",
        )
        export.add_argument(
            "--run-id",
            type=parse_uuid,
            required=True,
            help="Payroll run ID",
        )
        export.add_argument(
            "--profile",
            type=str,
            choices=[p.value for p in ExportProfile],
            required=True,
            help="Export layout",
        )
        export.add_argument(
            "--format",
            type=str,
            dest="bank_format",
            help="Bank file format name (bank_transfer only)",
        )
        export.add_argument(
            "--output",
            type=str,
            help="Output path; a directory uses the suggested filename (default: stdout)",
        )

        # form16 command
        form16 = subparsers.add_parser(
            "form16",
            help="Generate Form 16 records for a financial year",
        )
        form16.add_argument(
            "--organization-id",
            type=parse_uuid,
            required=True,
            help="Organization ID",
        )
        form16.add_argument(
            "--financial-year",
            type=str,
            required=True,
            help="Financial year label, e.g. 2023-2024",
        )
        form16.add_argument(
            "--generated-by",
            type=parse_uuid,
            help="User ID recorded on the generated rows",
        )

        # fy-window command
        window = subparsers.add_parser(
            "fy-window",
            help="Show pay-period bounds of a financial year",
        )
        window.add_argument(
            "--financial-year",
            type=str,
            required=True,
            help="Financial year label, e.g. 2023-2024",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        handlers: dict[str, Callable[..., int]] = {
            "export": self._cmd_export,
            "form16": self._cmd_form16,
            "fy-window": self._cmd_fy_window,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_export(self, args: argparse.Namespace) -> int:
        """Export a locked payroll run."""
        try:
            export = asyncio.run(self._export(args))
        except (PayrollRunNotFoundError, PayrollRunNotLockedError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        if not args.output:
            sys.stdout.write(export.content)
            sys.stdout.write("\n")
            return 0

        path = Path(args.output)
        if path.is_dir():
            path = path / export.filename
        path.write_text(export.content, encoding="utf-8")
        print(f"Wrote {path}")
        return 0

    async def _export(self, args: argparse.Namespace):
        try:
            async with get_session() as session:
                return await ExportService(session).export_run(
                    args.run_id,
                    args.profile,
                    bank_format=args.bank_format or get_settings().bank_transfer_format,
                )
        finally:
            await dispose_db()

    def _cmd_form16(self, args: argparse.Namespace) -> int:
        """Generate Form 16 records."""
        try:
            result = asyncio.run(self._form16(args))
        except InvalidFinancialYearError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        except AggregatePersistenceError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            print(
                f"  {e.result.generated} record(s) saved before the failure; "
                "re-run to complete",
                file=sys.stderr,
            )
            return 1
        except AnnualAggregationError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        print(f"Form 16 generated for {result.generated} employees ({result.financial_year})")
        return 0

    async def _form16(self, args: argparse.Namespace):
        try:
            async with get_session() as session:
                return await AnnualAggregatorService(session).generate(
                    args.organization_id,
                    args.financial_year,
                    generated_by=args.generated_by,
                )
        finally:
            await dispose_db()

    def _cmd_fy_window(self, args: argparse.Namespace) -> int:
        """Print the pay-period window for a financial year."""
        try:
            fy = FinancialYear.parse(args.financial_year)
        except InvalidFinancialYearError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2

        print(f"Financial year: {fy.label}")
        print(f"  Dates:        {fy.start_date.isoformat()} .. {fy.end_date.isoformat()}")
        print(f"  Pay periods:  {fy.period_from} .. {fy.period_to}")
        return 0


def main() -> int:
    """CLI entry point."""
    cli = StatutoryCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
