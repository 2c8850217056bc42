"""Tests for the command line interface."""

import pytest
from facsched.main import build_parser, main
from facsched.models import AppState, FacultyInfo, Schedule, Totals
from facsched.savefile import save_state
from facsched.schedule_store import add_event


@pytest.fixture
def schedule_file(tmp_path, draft):
    schedule, _ = add_event(Schedule.empty(), ["monday"], draft("teaching", "09:00", "10:20"))
    schedule, _ = add_event(schedule, ["tuesday"], draft("student", "13:00", "14:00",
                                                         is_overload=True))
    state = AppState(
        faculty_info=FacultyInfo(name="Jane Doe", semester="Fall 2026"),
        schedule=schedule,
        # Stale totals; the CLI recomputes them
        totals=Totals(teaching_hours=40.0),
        notes="Bring the syllabus."
    )
    return save_state(state, tmp_path / "jane.cccsched")


def test_summary(schedule_file, capsys):
    """Test printing a schedule summary."""
    main(["summary", str(schedule_file)])
    out = capsys.readouterr().out

    assert "Weekly Schedule for Jane Doe - Fall 2026" in out
    assert "Monday" in out
    assert "CS 101 (Room 204)" in out
    assert "[overload]" in out
    assert "Teaching Hours:" in out
    assert "1.50" in out
    assert "40.00" not in out
    assert "(off target)" in out
    assert "Bring the syllabus." in out


def test_export_pdf(schedule_file, tmp_path, capsys):
    """Test exporting to PDF."""
    out_dir = tmp_path / "exports"
    main(["export", str(schedule_file), "--format", "pdf", "-o", str(out_dir)])

    path = out_dir / "faculty_schedule_Jane_Doe_Fall_2026.pdf"
    assert path.exists()
    assert f"Saved PDF export to: {path}" in capsys.readouterr().out


def test_export_excel(schedule_file, tmp_path):
    """Test exporting to Excel."""
    main(["export", str(schedule_file), "--format", "excel", "-o", str(tmp_path)])
    assert (tmp_path / "Jane_Doe_schedule_Fall_2026.xlsx").exists()


def test_missing_file(tmp_path, capsys):
    """Test a missing schedule file exits with an error."""
    with pytest.raises(SystemExit) as exc_info:
        main(["summary", str(tmp_path / "missing.cccsched")])
    assert exc_info.value.code == 1
    assert "schedule file not found" in capsys.readouterr().out


def test_malformed_file(tmp_path, capsys):
    """Test a file that is not a schedule exits with an error."""
    path = tmp_path / "broken.cccsched"
    path.write_text("not json")
    with pytest.raises(SystemExit) as exc_info:
        main(["summary", str(path)])
    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_parser_requires_command():
    """Test a subcommand is required."""
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
