"""Tests for PDF and Excel exports."""

from io import BytesIO

import pdfplumber
import pytest
from openpyxl import load_workbook
from facsched.excel_export import EVENT_HEADERS, ExcelExporter, excel_filename
from facsched.models import AppState, FacultyInfo, Schedule
from facsched.pdf_export import PDFExporter, pdf_filename
from facsched.schedule_store import add_event
from facsched.totals import recompute


@pytest.fixture
def state(draft):
    schedule = Schedule.empty()
    schedule, _ = add_event(schedule, ["monday", "wednesday"], draft("teaching", "09:00", "10:20"))
    schedule, _ = add_event(schedule, ["tuesday"], draft("student", "13:00", "14:00",
                                                         description="Office hours"))
    schedule, _ = add_event(schedule, ["friday"], draft("campus", "15:00", "16:00",
                                                        is_temporary=True, counted_hours="2"))
    return AppState(
        faculty_info=FacultyInfo(name="Jane Doe", semester="Fall 2026"),
        schedule=schedule,
        totals=recompute(schedule),
        notes="Committee meets every other Thursday."
    )


def test_filenames():
    """Test export file names."""
    info = FacultyInfo(name="Jane Doe", semester="Fall 2026")
    assert excel_filename(info) == "Jane_Doe_schedule_Fall_2026.xlsx"
    assert pdf_filename(info) == "faculty_schedule_Jane Doe_Fall 2026.pdf"


def test_excel_workbook(state):
    """Test the detailed events and summary sheets."""
    wb = load_workbook(BytesIO(ExcelExporter().to_bytes(state)))
    assert wb.sheetnames == ["Detailed Events", "Summary"]

    events = wb["Detailed Events"]
    assert events["A1"].value == "Detailed Schedule"
    assert [c.value for c in events[2]] == EVENT_HEADERS
    assert events["A1"].font.bold
    rows = list(events.iter_rows(min_row=3, values_only=True))
    assert len(rows) == 4
    assert rows[0][:4] == ("Monday", "teaching", "09:00", "10:20")
    assert rows[0][5:8] == ("CS 101", "Room 204", 1.5)
    assert rows[1][0] == "Tuesday"
    assert rows[1][4] == "Office hours"
    assert rows[3][9] == "Yes"
    assert rows[3][10] == 2

    summary = wb["Summary"]
    assert summary["A1"].value == "Hours Summary"
    values = {row[0]: row[1] for row in summary.iter_rows(min_row=3, values_only=True)}
    assert values["Teaching Hours"] == 3.0
    assert values["Student Hours"] == 1.0
    assert values["Campus Hours"] == 2.0
    assert values["Total Hours"] == 6.0


def test_excel_export_to_file(tmp_path, state):
    """Test writing the workbook to a directory."""
    path = ExcelExporter().export_to_file(state, tmp_path / "out")
    assert path == tmp_path / "out" / "Jane_Doe_schedule_Fall_2026.xlsx"
    assert path.exists()


def test_pdf_contents(state):
    """Test the PDF has the title, summary and notes."""
    content = PDFExporter().to_bytes(state)
    assert content.startswith(b"%PDF")

    with pdfplumber.open(BytesIO(content)) as pdf:
        text = "\n".join(page.extract_text() or "" for page in pdf.pages)

    assert "Weekly Schedule for Jane Doe - Fall 2026" in text
    assert "Hours Summary" in text
    assert "Teaching Hours: 3.00" in text
    assert "Total Hours: 6.00" in text
    assert "Committee meets every other Thursday." in text


def test_pdf_long_notes_continue_on_next_page(state):
    """Test notes that do not fit spill onto another page."""
    long_state = AppState(faculty_info=state.faculty_info, schedule=state.schedule,
                          totals=state.totals, notes="\n".join(f"Line {i}" for i in range(40)))
    with pdfplumber.open(BytesIO(PDFExporter().to_bytes(long_state))) as pdf:
        assert len(pdf.pages) == 2
        assert "Line 39" in (pdf.pages[1].extract_text() or "")


def test_pdf_empty_schedule(tmp_path):
    """Test exporting an empty state still produces a document."""
    path = PDFExporter().export_to_file(AppState(), tmp_path)
    assert path.name == "faculty_schedule__.pdf"
    assert path.read_bytes().startswith(b"%PDF")


@pytest.mark.parametrize("exporter", [PDFExporter(), ExcelExporter()])
def test_export_to_file_stays_in_directory(tmp_path, exporter):
    """Test a faculty name with path separators cannot leave the output directory."""
    out_dir = tmp_path / "out"
    evil = AppState(faculty_info=FacultyInfo(name="../../evil", semester="/tmp/x"))
    path = exporter.export_to_file(evil, out_dir)

    assert path.parent == out_dir
    assert path.exists()
    assert "/" not in path.name
    assert not list(tmp_path.glob("*evil*"))
