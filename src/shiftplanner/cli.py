"""Command-line interface for the shift slot planner."""

import argparse
import json
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from shiftplanner.client.api import DEFAULT_API_URL, ShiftsApiClient
from shiftplanner.domain.models import DaySelection, Employee, WeekPlan, Weekday
from shiftplanner.errors import ShiftPlannerError
from shiftplanner.output.pdf_generator import SummaryPDFGenerator
from shiftplanner.output.text_generator import SummaryTextGenerator
from shiftplanner.planning.planner import SlotPlanner
from shiftplanner.planning.session import PlannerSession
from shiftplanner.planning.summary import build_weekly_summary
from shiftplanner.serialization.payload import from_payload
from shiftplanner.validation.validator import PlanValidator, ValidationResult

logger = logging.getLogger(__name__)


def create_sample_week(employee: Employee, week_date: Optional[date] = None) -> WeekPlan:
    """Build a sample week for an employee.

    Monday to Friday: 8 hours from 08:00 with lunch at noon.
    Saturday: 4 hours from 08:00 plus 2 hours of overtime.
    Sunday: day off.
    """
    week_start = WeekPlan.week_of(week_date or date.today())
    plan = WeekPlan.empty(employee.id, "C001", week_start, day_off=employee.default_day_off)
    planner = SlotPlanner()

    weekday = DaySelection(start=16, ordinary_hours=8, has_lunch=True)
    for day in (
        Weekday.MONDAY,
        Weekday.TUESDAY,
        Weekday.WEDNESDAY,
        Weekday.THURSDAY,
        Weekday.FRIDAY,
    ):
        plan = planner.apply_day(plan, day, weekday).plan

    saturday = DaySelection(start=16, ordinary_hours=4, extra_hours=2)
    return planner.apply_day(plan, Weekday.SATURDAY, saturday).plan


def print_validation(result: ValidationResult) -> None:
    if result.is_valid:
        print("\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"    - {warning}")


def report(plan: WeekPlan, employee_name: Optional[str], pdf_path: Optional[str]) -> None:
    """Print a plan's summary text and validation, optionally writing a PDF."""
    summary = build_weekly_summary(plan)
    print(SummaryTextGenerator().generate_to_string(summary, employee_name))
    print_validation(PlanValidator().validate_for_save(plan))

    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        SummaryPDFGenerator().generate(summary, pdf_path, employee_name)
        print("  PDF created successfully!")


def run_demo(output_path: Optional[str] = None) -> None:
    """Build and report a sample week."""
    employee = Employee(id="E001", name="Ana Ruiz", cedula="1020304050")
    plan = create_sample_week(employee)
    print(f"Sample week {plan.week_start} to {plan.week_end} for {employee.name}\n")
    report(plan, employee.name, output_path)


def run_summary(
    payload_path: str,
    week_date: date,
    employee_name: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> None:
    """Load a saved payload file and report it."""
    payload = json.loads(Path(payload_path).read_text(encoding="utf-8"))
    header = payload if isinstance(payload, dict) else {}
    loaded = from_payload(
        payload,
        week_date,
        employee_id=str(header.get("employeeId") or ""),
        center_id=str(header.get("laundryCenterId") or ""),
    )
    for warning in loaded.warnings:
        print(f"Dropped {warning}")
    if loaded.warnings:
        print("")
    report(loaded.plan, employee_name, pdf_path)


def run_fetch(
    client: ShiftsApiClient,
    employee_id: str,
    center_id: str,
    week_date: date,
    employee_name: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> None:
    """Load a plan from the shifts API and report it."""
    session = PlannerSession(client)
    employee = Employee(id=employee_id, name=employee_name or employee_id)
    session.load(employee, center_id, week_date)
    for warning in session.load_warnings:
        print(f"Dropped {warning}")
    report(session.plan, employee.name, pdf_path)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not a YYYY-MM-DD date: {value!r}")


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Shift Planner - Weekly shift slot planning tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                                  Print a sample week
  %(prog)s demo --output week.pdf                Also write a PDF

  %(prog)s summary week.json --week 2024-01-08   Summarize a saved payload
  %(prog)s summary week.json --week 2024-01-08 --pdf week.pdf

  %(prog)s fetch --employee E001 --center C001 --week 2024-01-08
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=os.environ.get("SHIFTPLANNER_API_URL", DEFAULT_API_URL),
        help=f"Shifts API base URL (default: $SHIFTPLANNER_API_URL or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=os.environ.get("SHIFTPLANNER_TOKEN"),
        help="Bearer token for the shifts API (default: $SHIFTPLANNER_TOKEN)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Print a sample week")
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )

    # Summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Summarize a saved shifts payload file",
    )
    summary_parser.add_argument("payload", type=str, help="Path to the JSON payload")
    summary_parser.add_argument(
        "--week", "-w",
        type=_parse_date,
        required=True,
        help="Any date of the week (YYYY-MM-DD)",
    )
    summary_parser.add_argument("--name", "-n", type=str, help="Employee name for the header")
    summary_parser.add_argument("--pdf", type=str, help="Output PDF file path")

    # Fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Load a week from the shifts API and summarize it",
    )
    fetch_parser.add_argument("--employee", "-e", type=str, required=True, help="Employee ID")
    fetch_parser.add_argument("--center", "-c", type=str, required=True, help="Laundry center ID")
    fetch_parser.add_argument(
        "--week", "-w",
        type=_parse_date,
        default=date.today(),
        help="Any date of the week (YYYY-MM-DD, default: today)",
    )
    fetch_parser.add_argument("--name", "-n", type=str, help="Employee name for the header")
    fetch_parser.add_argument("--pdf", type=str, help="Output PDF file path")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            run_demo(args.output)
            return 0
        elif args.command == "summary":
            run_summary(args.payload, args.week, args.name, args.pdf)
            return 0
        elif args.command == "fetch":
            client = ShiftsApiClient(args.api_url, token=args.token)
            run_fetch(client, args.employee, args.center, args.week, args.name, args.pdf)
            return 0
        else:
            parser.print_help()
            return 1
    except (ShiftPlannerError, OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
