"""
PDF export of a weekly schedule.

Draws one letter-size page: the title, the Monday-Saturday grid with an
event block per event, the hours summary under the grid, and the notes.
Notes that do not fit continue on a second page.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from werkzeug.utils import secure_filename

from .errors import ExportError
from .logger import log
from .models import CAMPUS, DAYS, STUDENT, TEACHING, AppState, FacultyInfo, ScheduleEvent, day_label
from .timecalc import event_row_span, time_slots, time_to_grid_row
from .totals import summary_rows, student_hours_on_target


TYPE_COLORS = {
    TEACHING: colors.HexColor("#FFB3BA"),  # light pink
    STUDENT: colors.HexColor("#BAFFC9"),   # light green
    CAMPUS: colors.HexColor("#BAE1FF"),    # light blue
}

MARGIN = 36
TITLE_HEIGHT = 30
HEADER_HEIGHT = 14
ROW_HEIGHT = 14
TIME_COLUMN_WIDTH = 44
SUMMARY_LINE_HEIGHT = 13
NOTES_LINE_HEIGHT = 11


def pdf_filename(faculty_info: FacultyInfo) -> str:
    """e.g. "faculty_schedule_Jane Doe_Fall 2026.pdf"."""
    return f"faculty_schedule_{faculty_info.name}_{faculty_info.semester}.pdf"


def _shorten(text: str, limit: int = 10) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


class PDFExporter:
    """Renders the schedule grid, hours summary and notes to PDF."""

    def __init__(self, pagesize=letter):
        """Initialize the exporter.

        Args:
            pagesize: (width, height) in points; defaults to US letter portrait
        """
        self.page_width, self.page_height = pagesize
        self.pagesize = pagesize

    def render(self, state: AppState, output) -> None:
        """Draw the document into a file path or binary file object."""
        pdf = canvas.Canvas(output, pagesize=self.pagesize)
        pdf.setTitle(f"Weekly Schedule for {state.faculty_info.name} - {state.faculty_info.semester}")

        y = self.page_height - MARGIN
        pdf.setFont("Helvetica-Bold", 14)
        pdf.drawString(MARGIN, y - 14,
                       f"Weekly Schedule for {state.faculty_info.name} - {state.faculty_info.semester}")
        y -= TITLE_HEIGHT

        y = self._draw_grid(pdf, state, y)
        y = self._draw_summary(pdf, state, y - 20)
        if state.notes.strip():
            self._draw_notes(pdf, state.notes, y - 12)

        pdf.showPage()
        pdf.save()

    def _draw_grid(self, pdf, state: AppState, top: float) -> float:
        """Draw the time column, day columns and events. Returns the grid bottom."""
        slots = time_slots()
        grid_left = MARGIN + TIME_COLUMN_WIDTH
        day_width = (self.page_width - 2 * MARGIN - TIME_COLUMN_WIDTH) / len(DAYS)
        body_top = top - HEADER_HEIGHT
        bottom = body_top - len(slots) * ROW_HEIGHT

        pdf.setFont("Helvetica", 7)
        pdf.setStrokeColor(colors.lightgrey)
        for i, label in enumerate(slots):
            row_top = body_top - i * ROW_HEIGHT
            pdf.drawRightString(grid_left - 4, row_top - ROW_HEIGHT / 2 - 2, label)
            pdf.line(grid_left, row_top, self.page_width - MARGIN, row_top)

        pdf.setFont("Helvetica-Bold", 8)
        pdf.setStrokeColor(colors.grey)
        for col, day in enumerate(DAYS):
            x = grid_left + col * day_width
            pdf.drawCentredString(x + day_width / 2, top - HEADER_HEIGHT + 4, day_label(day))
            pdf.line(x, top, x, bottom)
        pdf.line(self.page_width - MARGIN, top, self.page_width - MARGIN, bottom)
        pdf.line(grid_left, bottom, self.page_width - MARGIN, bottom)

        for col, day in enumerate(DAYS):
            x = grid_left + col * day_width
            for event in state.schedule.events_for(day):
                self._draw_event(pdf, event, x, day_width, body_top, bottom)

        return bottom

    def _draw_event(self, pdf, event: ScheduleEvent, x: float, width: float,
                    body_top: float, bottom: float):
        start_row = time_to_grid_row(event.start_time)
        span = event_row_span(event.start_time, event.end_time)
        block_top = min(body_top, body_top - (start_row - 2) * ROW_HEIGHT)
        block_bottom = max(bottom, block_top - span * ROW_HEIGHT)
        if block_top <= bottom or block_bottom >= body_top:
            log.warning(f"Event {event.start_time}-{event.end_time} is outside the printed grid")
            return
        height = block_top - block_bottom - 2

        pdf.setFillColor(TYPE_COLORS.get(event.type, colors.white))
        pdf.setStrokeColor(colors.darkgrey)
        pdf.rect(x + 2, block_bottom + 1, width - 4, height, stroke=1, fill=1)

        lines = [event.label + (" (OL)" if event.is_overload else ""),
                 f"{event.start_time} - {event.end_time}"]
        if getattr(event, "class_location", ""):
            lines.append(event.class_location)
        if event.description:
            lines.append(_shorten(event.description))

        pdf.setFillColor(colors.black)
        center = x + width / 2
        text_y = block_top - 8
        for i, line in enumerate(lines):
            if text_y < block_bottom + 2:
                break
            pdf.setFont("Helvetica-Bold" if i == 0 else "Helvetica", 6)
            pdf.drawCentredString(center, text_y, line)
            text_y -= 7

    def _draw_summary(self, pdf, state: AppState, top: float) -> float:
        """Draw the hours summary. Returns the y below the last line."""
        totals = state.totals
        pdf.setFillColor(colors.black)
        pdf.setFont("Helvetica-Bold", 11)
        pdf.drawString(MARGIN, top, "Hours Summary")
        y = top - SUMMARY_LINE_HEIGHT - 2

        for label, hours in summary_rows(totals):
            font = "Helvetica-Bold" if label.startswith("Total") else "Helvetica"
            if label == "Student Hours" and not student_hours_on_target(totals):
                pdf.setFillColor(colors.red)
                font = "Helvetica-Oblique"
            pdf.setFont(font, 9)
            pdf.drawString(MARGIN, y, f"{label}: {hours:.2f}")
            pdf.setFillColor(colors.black)
            y -= SUMMARY_LINE_HEIGHT
        return y

    def _draw_notes(self, pdf, notes: str, top: float):
        pdf.setFont("Helvetica-Bold", 11)
        pdf.drawString(MARGIN, top, "Notes")
        y = top - NOTES_LINE_HEIGHT - 2
        pdf.setFont("Helvetica", 9)
        width = self.page_width - 2 * MARGIN
        for paragraph in notes.splitlines() or [""]:
            for line in simpleSplit(paragraph, "Helvetica", 9, width) or [""]:
                if y < MARGIN:
                    pdf.showPage()
                    pdf.setFont("Helvetica", 9)
                    y = self.page_height - MARGIN
                pdf.drawString(MARGIN, y, line)
                y -= NOTES_LINE_HEIGHT

    def to_bytes(self, state: AppState) -> bytes:
        """PDF contents as bytes, for download responses."""
        buffer = BytesIO()
        try:
            self.render(state, buffer)
        except (OSError, ValueError, TypeError) as e:
            raise ExportError(f"Error exporting to PDF: {e}")
        return buffer.getvalue()

    def export_to_file(self, state: AppState, directory: Union[str, Path] = ".",
                       filename: Optional[str] = None) -> Path:
        """Write the PDF into a directory.

        The file name is passed through `secure_filename`, so a faculty name
        such as "../x" cannot place the file outside the directory.

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        name = secure_filename(filename or pdf_filename(state.faculty_info))
        path = directory / (name or "faculty_schedule.pdf")
        try:
            self.render(state, str(path))
        except (OSError, ValueError, TypeError) as e:
            raise ExportError(f"Error exporting to PDF: {e}")
        log.info(f"Exported schedule to PDF: {path}")
        return path
