"""
Main CLI entry point for the faculty schedule builder.

Commands:
    summary FILE             Print the events and hours summary of a .cccsched file
    export FILE --format F   Export a .cccsched file to PDF or Excel
    serve                    Run the web application
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .errors import ScheduleError
from .excel_export import ExcelExporter
from .models import AppState, day_label
from .pdf_export import PDFExporter
from .savefile import load_state
from .state import ScheduleController
from .totals import student_hours_on_target, summary_rows


def load_for_cli(path: Path) -> AppState:
    """Load a save file through a controller so totals are recomputed."""
    controller = ScheduleController()
    controller.replace_state(load_state(path))
    return controller.state


def print_summary(state: AppState):
    """Print faculty info, the events by day and the hours summary."""
    info = state.faculty_info
    print(f"Weekly Schedule for {info.name or 'N/A'} - {info.semester or 'N/A'}")
    print("=" * 60)

    for day, event in state.schedule.iter_events():
        flags = []
        if event.is_overload:
            flags.append("overload")
        if event.is_temporary:
            flags.append(f"temporary, {event.counted_hours:.2f}h counted")
        flag_str = f" [{'; '.join(flags)}]" if flags else ""
        location = getattr(event, "class_location", "")
        location_str = f" ({location})" if location else ""
        print(f"  {day_label(day):<10} {event.start_time}-{event.end_time}  "
              f"{event.label}{location_str}  {event.duration:.2f}h{flag_str}")

    if state.schedule.event_count == 0:
        print("  No events scheduled.")

    print("\nHours Summary")
    for label, hours in summary_rows(state.totals):
        marker = ""
        if label == "Student Hours" and not student_hours_on_target(state.totals):
            marker = "  (off target)"
        print(f"  {label + ':':<26} {hours:6.2f}{marker}")

    if state.notes.strip():
        print("\nNotes")
        print(state.notes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record weekly faculty hours and export them to PDF or Excel"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="Print the hours summary of a schedule file")
    summary.add_argument("file", type=Path, help="Path to a .cccsched file")

    export = subparsers.add_parser("export", help="Export a schedule file to PDF or Excel")
    export.add_argument("file", type=Path, help="Path to a .cccsched file")
    export.add_argument("--format", choices=["pdf", "excel"], required=True,
                        help="Output format")
    export.add_argument("-o", "--output-dir", type=Path, default=Path("."),
                        help="Output directory (default: current directory)")

    serve = subparsers.add_parser("serve", help="Run the web application")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    serve.add_argument("--debug", action="store_true", help="Run Flask in debug mode")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        from .app import app
        app.run(debug=args.debug, host=args.host, port=args.port)
        return

    if not args.file.exists():
        print(f"Error: schedule file not found: {args.file}")
        sys.exit(1)

    try:
        state = load_for_cli(args.file)
        if args.command == "summary":
            print_summary(state)
        elif args.command == "export":
            if args.format == "pdf":
                path = PDFExporter().export_to_file(state, args.output_dir)
            else:
                path = ExcelExporter().export_to_file(state, args.output_dir)
            print(f"Saved {args.format.upper()} export to: {path}")
    except ScheduleError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
