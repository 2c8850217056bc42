"""
Excel export of a weekly schedule.

Produces a workbook with a "Detailed Events" sheet (one row per event) and a
"Summary" sheet (hours per category and the totals).
"""

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from werkzeug.utils import secure_filename

from .errors import ExportError
from .logger import log
from .models import AppState, FacultyInfo, day_label, filename_part
from .totals import summary_rows


EVENT_HEADERS = [
    "Day", "Type", "Start Time", "End Time", "Description", "Class Name",
    "Location", "Hours", "Overload", "Temporary", "Counted Hours",
]

EVENT_COLUMN_WIDTHS = [15, 15, 15, 15, 30, 20, 20, 10, 10, 10, 14]
SUMMARY_COLUMN_WIDTHS = [30, 15]


def excel_filename(faculty_info: FacultyInfo) -> str:
    """e.g. "Jane_Doe_schedule_Fall_2026.xlsx"."""
    return (f"{filename_part(faculty_info.name)}_schedule_"
            f"{filename_part(faculty_info.semester)}.xlsx")


class ExcelExporter:
    """Builds .xlsx workbooks from the application state."""

    def build_workbook(self, state: AppState) -> Workbook:
        """Create the workbook for a state.

        Args:
            state: Schedule, faculty info and totals to export

        Returns:
            openpyxl Workbook ready to save
        """
        wb = Workbook()

        ws_events = wb.active
        ws_events.title = "Detailed Events"
        ws_events.append(["Detailed Schedule"])
        ws_events.append(EVENT_HEADERS)
        for row in self._event_rows(state):
            ws_events.append(row)
        for row_cells in ws_events.iter_rows(min_row=3, min_col=8, max_col=8):
            for cell in row_cells:
                cell.number_format = "0.00"

        ws_summary = wb.create_sheet("Summary")
        ws_summary.append(["Hours Summary"])
        ws_summary.append(["Category", "Hours"])
        for label, hours in summary_rows(state.totals):
            ws_summary.append([label, round(hours, 2)])
        for row_cells in ws_summary.iter_rows(min_row=3, min_col=2, max_col=2):
            for cell in row_cells:
                cell.number_format = "0.00"

        self._format_sheet(ws_events, EVENT_COLUMN_WIDTHS)
        self._format_sheet(ws_summary, SUMMARY_COLUMN_WIDTHS)
        return wb

    def _event_rows(self, state: AppState) -> List[list]:
        rows = []
        for day, event in state.schedule.iter_events():
            rows.append([
                day_label(day),
                event.type,
                event.start_time,
                event.end_time,
                event.description,
                getattr(event, "class_name", ""),
                getattr(event, "class_location", ""),
                round(event.duration, 2),
                "Yes" if event.is_overload else "No",
                "Yes" if event.is_temporary else "No",
                event.counted_hours if event.is_temporary else None,
            ])
        return rows

    def _format_sheet(self, ws, widths: List[int]):
        """Bold the title and header rows and set column widths."""
        bold = Font(bold=True)
        for row in ws.iter_rows(min_row=1, max_row=2):
            for cell in row:
                if cell.value is not None:
                    cell.font = bold
        for index, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width

    def to_bytes(self, state: AppState) -> bytes:
        """Workbook contents as bytes, for download responses."""
        buffer = BytesIO()
        try:
            self.build_workbook(state).save(buffer)
        except (OSError, ValueError, TypeError) as e:
            raise ExportError(f"Error exporting to Excel: {e}")
        return buffer.getvalue()

    def export_to_file(self, state: AppState, directory: Union[str, Path] = ".",
                       filename: Optional[str] = None) -> Path:
        """Write the workbook into a directory.

        Args:
            state: State to export
            directory: Output directory (created if missing)
            filename: Override the default file name (sanitized like the default)

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        name = secure_filename(filename or excel_filename(state.faculty_info))
        path = directory / (name or "schedule.xlsx")
        try:
            self.build_workbook(state).save(path)
        except (OSError, ValueError, TypeError) as e:
            raise ExportError(f"Error exporting to Excel: {e}")
        log.info(f"Exported schedule to Excel: {path}")
        return path
