"""
Flask web application for the Faculty Schedule Builder.

This is the browser interface of the application. It provides:
- Faculty information and notes forms
- Adding, editing and deleting hours
- The weekly schedule grid and hours summary
- Saving and loading .cccsched files
- PDF and Excel export
- A JSON API exposing the same operations
"""

import uuid
from collections import OrderedDict
from io import BytesIO
from typing import Any, Dict, List

from flask import Flask, flash, jsonify, redirect, render_template, request, send_file, session, url_for
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from .config import settings
from .errors import ConflictError, EventNotFound, ExportError, ScheduleError, ValidationError
from .excel_export import ExcelExporter, excel_filename
from .forms import (
    add_request_from_form, changes_from_payload, days_from_payload,
    draft_from_payload, edit_changes_from_form
)
from .logger import log
from .models import DAYS, AppState, ScheduleEvent, day_label
from .pdf_export import PDFExporter, pdf_filename
from .savefile import FILE_EXTENSION, dumps_state, loads_state, serialize_event, serialize_totals, suggested_filename
from .schedule_store import get_event, locate_event
from .state import ScheduleController
from .timecalc import event_row_span, time_slots, time_to_grid_row
from .totals import student_hours_on_target, summary_rows


app = Flask(__name__)
app.secret_key = settings.secret_key

# Configuration
ALLOWED_EXTENSIONS = {FILE_EXTENSION.lstrip(".")}
SLOT_HEIGHT_PX = 30
MAX_SESSIONS = settings.max_sessions

app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes

# One controller per browser session, kept in memory. The app is meant to run
# locally, so only the MAX_SESSIONS most recently used sessions are kept.
_controllers: "OrderedDict[str, ScheduleController]" = OrderedDict()


def get_controller() -> ScheduleController:
    """Controller for the current browser session, created on first use.

    Creating a controller past MAX_SESSIONS drops the least recently used one;
    that session starts over with an empty schedule.
    """
    if 'session_id' not in session:
        session['session_id'] = str(uuid.uuid4())
    session_id = session['session_id']

    controller = _controllers.get(session_id)
    if controller is not None:
        _controllers.move_to_end(session_id)
        return controller

    controller = ScheduleController()
    _controllers[session_id] = controller
    while len(_controllers) > MAX_SESSIONS:
        evicted, _ = _controllers.popitem(last=False)
        log.info(f"Dropped schedule of inactive session {evicted}")
    return controller


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed.

    Args:
        filename: Name of the uploaded file

    Returns:
        True if file extension is allowed, False otherwise
    """
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def event_to_json(day: str, event: ScheduleEvent) -> Dict[str, Any]:
    result = serialize_event(event)
    result["day"] = day
    result["label"] = event.label
    return result


def totals_to_json(state: AppState) -> Dict[str, Any]:
    result = serialize_totals(state.totals)
    result["totalHours"] = state.totals.total_hours
    result["totalMinusOverload"] = state.totals.total_minus_overload
    result["studentHoursOnTarget"] = student_hours_on_target(state.totals)
    return result


def state_to_json(state: AppState) -> Dict[str, Any]:
    return {
        "facultyInfo": {"name": state.faculty_info.name, "semester": state.faculty_info.semester},
        "schedule": {
            day: [event_to_json(day, e) for e in state.schedule.events_for(day)]
            for day in DAYS
        },
        "totals": totals_to_json(state),
        "notes": state.notes,
    }


def build_grid(state: AppState) -> List[Dict[str, Any]]:
    """Day columns with pixel placement for each event block."""
    columns = []
    for day in DAYS:
        blocks = []
        for event in state.schedule.events_for(day):
            start_row = time_to_grid_row(event.start_time)
            blocks.append({
                'event': event,
                'top': (start_row - 1) * SLOT_HEIGHT_PX,
                'height': event_row_span(event.start_time, event.end_time) * SLOT_HEIGHT_PX - 4,
            })
        columns.append({'day': day, 'label': day_label(day), 'blocks': blocks})
    return columns


def flash_error(error: ScheduleError):
    """Show an error to the user; conflicts are listed one per message."""
    if isinstance(error, ConflictError):
        flash('Time conflict with existing events:', 'error')
        for conflict in error.conflicts:
            flash(conflict.describe(), 'error')
    else:
        flash(str(error), 'error')


# HTML routes

@app.route('/')
def index():
    """Main page: forms, hours summary and weekly grid.

    Passing ?edit=<event id> opens the edit form for that event.

    Returns:
        Rendered index.html template
    """
    controller = get_controller()
    state = controller.state

    editing = None
    edit_id = request.args.get('edit')
    if edit_id:
        try:
            editing = get_event(state.schedule, edit_id)
        except EventNotFound:
            flash('Event not found. It may have been deleted.', 'error')

    context = {
        'faculty_info': state.faculty_info,
        'notes': state.notes,
        'days': [(day, day_label(day)) for day in DAYS],
        'time_slots': time_slots(),
        'slot_height': SLOT_HEIGHT_PX,
        'grid': build_grid(state),
        'summary': summary_rows(state.totals),
        'student_on_target': student_hours_on_target(state.totals),
        'editing': editing,
    }
    return render_template('index.html', **context)


@app.route('/faculty', methods=['POST'])
def update_faculty():
    """Update faculty name and semester."""
    get_controller().set_faculty_info(request.form.get('name', ''), request.form.get('semester', ''))
    flash('Faculty information updated.', 'success')
    return redirect(url_for('index'))


@app.route('/notes', methods=['POST'])
def update_notes():
    """Update the notes printed on the PDF."""
    get_controller().set_notes(request.form.get('notes', ''))
    flash('Notes updated.', 'success')
    return redirect(url_for('index'))


@app.route('/hours', methods=['POST'])
def add_hours():
    """Handle the Add Hours form.

    Returns:
        Redirect to the main page with a success or error message
    """
    try:
        days, draft = add_request_from_form(request.form)
        get_controller().add_hours(days, draft)
    except ScheduleError as e:
        flash_error(e)
        return redirect(url_for('index'))

    flash('Hours added to schedule.', 'success')
    return redirect(url_for('index'))


@app.route('/events/<event_id>/edit', methods=['POST'])
def edit_event(event_id: str):
    """Handle the Edit Event form."""
    try:
        get_controller().edit_event(event_id, edit_changes_from_form(request.form))
    except ScheduleError as e:
        flash_error(e)
        return redirect(url_for('index', edit=event_id))

    flash('Event updated successfully.', 'success')
    return redirect(url_for('index'))


@app.route('/events/<event_id>/delete', methods=['POST'])
def delete_event(event_id: str):
    """Delete an event from the grid."""
    try:
        get_controller().delete_event(event_id)
    except EventNotFound as e:
        flash_error(e)
        return redirect(url_for('index'))

    flash('Event deleted from schedule.', 'success')
    return redirect(url_for('index'))


@app.route('/save')
def save_schedule():
    """Download the current state as a .cccsched file."""
    state = get_controller().state
    data = BytesIO(dumps_state(state).encode('utf-8'))
    log.info(f"Saving schedule for {state.faculty_info.name or 'unnamed faculty'}")
    # Shown on the next page load; the download itself does not navigate away.
    flash('Schedule saved successfully!', 'success')
    return send_file(
        data,
        as_attachment=True,
        download_name=suggested_filename(state.faculty_info),
        mimetype='application/json'
    )


@app.route('/load', methods=['POST'])
def load_schedule():
    """Handle a .cccsched upload, replacing the current state.

    A file that cannot be parsed leaves the current state untouched.
    """
    if 'schedule_file' not in request.files:
        flash('No file selected. Please choose a .cccsched file.', 'error')
        return redirect(url_for('index'))

    file = request.files['schedule_file']
    if file.filename == '':
        flash('No file selected. Please choose a .cccsched file.', 'error')
        return redirect(url_for('index'))

    filename = secure_filename(file.filename)
    if not allowed_file(filename):
        flash('Invalid file type. Please upload a .cccsched file.', 'error')
        return redirect(url_for('index'))

    try:
        get_controller().replace_state(loads_state(file.read()))
    except ScheduleError as e:
        log.warning(f"Rejected schedule file {filename}: {e}")
        flash('Error loading schedule. Please try again.', 'error')
        return redirect(url_for('index'))

    flash('Schedule loaded successfully!', 'success')
    return redirect(url_for('index'))


@app.route('/export/pdf')
def export_pdf():
    """Download the schedule and summary as PDF."""
    state = get_controller().state
    try:
        content = PDFExporter().to_bytes(state)
    except ExportError as e:
        log.error(str(e))
        flash('Error exporting to PDF. Please try again.', 'error')
        return redirect(url_for('index'))
    return send_file(
        BytesIO(content),
        as_attachment=True,
        download_name=pdf_filename(state.faculty_info),
        mimetype='application/pdf'
    )


@app.route('/export/excel')
def export_excel():
    """Download the schedule and summary as an Excel workbook."""
    state = get_controller().state
    try:
        content = ExcelExporter().to_bytes(state)
    except ExportError as e:
        log.error(str(e))
        flash('Error exporting to Excel. Please try again.', 'error')
        return redirect(url_for('index'))
    return send_file(
        BytesIO(content),
        as_attachment=True,
        download_name=excel_filename(state.faculty_info),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )


# JSON API

def api_error(error: ScheduleError):
    """JSON body and status code for a failed API call."""
    body = {'error': str(error)}
    if isinstance(error, ConflictError):
        body['conflicts'] = [c.to_dict() for c in error.conflicts]
        return jsonify(body), 409
    if isinstance(error, EventNotFound):
        return jsonify(body), 404
    return jsonify(body), 400


@app.route('/api/state')
def api_state():
    return jsonify(state_to_json(get_controller().state))


@app.route('/api/events', methods=['POST'])
def api_add_event():
    """Add hours. Body: event fields plus "days" (list of day names)."""
    payload = request.get_json(silent=True) or {}
    controller = get_controller()
    try:
        created = controller.add_hours(days_from_payload(payload), draft_from_payload(payload))
    except ScheduleError as e:
        return api_error(e)

    schedule = controller.state.schedule
    events = [event_to_json(locate_event(schedule, e.id)[0], e) for e in created]
    return jsonify({'events': events, 'totals': totals_to_json(controller.state)}), 201


@app.route('/api/events/<event_id>', methods=['PATCH'])
def api_edit_event(event_id: str):
    payload = request.get_json(silent=True) or {}
    controller = get_controller()
    try:
        updated = controller.edit_event(event_id, changes_from_payload(payload))
    except ScheduleError as e:
        return api_error(e)

    day, _index = locate_event(controller.state.schedule, updated.id)
    return jsonify({'event': event_to_json(day, updated), 'totals': totals_to_json(controller.state)})


@app.route('/api/events/<event_id>', methods=['DELETE'])
def api_delete_event(event_id: str):
    controller = get_controller()
    try:
        controller.delete_event(event_id)
    except ScheduleError as e:
        return api_error(e)
    return jsonify({'deleted': event_id, 'totals': totals_to_json(controller.state)})


@app.route('/api/faculty', methods=['PUT'])
def api_update_faculty():
    payload = request.get_json(silent=True) or {}
    controller = get_controller()
    controller.set_faculty_info(payload.get('name', ''), payload.get('semester', ''))
    return jsonify(state_to_json(controller.state)['facultyInfo'])


@app.route('/api/notes', methods=['PUT'])
def api_update_notes():
    payload = request.get_json(silent=True) or {}
    controller = get_controller()
    notes = payload.get('notes', '')
    if not isinstance(notes, str):
        return api_error(ValidationError('Notes must be text.'))
    controller.set_notes(notes)
    return jsonify({'notes': controller.state.notes})


@app.errorhandler(RequestEntityTooLarge)
def file_too_large(error):
    """Handle uploads over the configured size limit."""
    flash('File too large. Please upload a smaller schedule file.', 'error')
    return redirect(url_for('index'))


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return render_template('error.html', error='Page not found'), 404


@app.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return render_template('error.html', error='Internal server error'), 500


if __name__ == '__main__':
    # Run development server
    app.run(debug=True, host='127.0.0.1', port=5000)
