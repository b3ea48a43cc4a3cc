import threading

from flask import current_app, request
from flask_socketio import emit, join_room
from app import socketio
from app.decorators import get_current_professor, professor_room
from app.live_dashboard import LiveDashboard

# professor id -> [LiveDashboard, connection count]; several tabs share one dashboard
_dashboards = {}
# socket id -> professor id
_connections = {}
_registry_lock = threading.Lock()


def _make_dashboard(professor):
    room = professor_room(professor.id)

    def push(event, data):
        socketio.emit(event, data, to=room)

    return LiveDashboard(
        professor,
        push,
        repository=current_app.extensions['dashboard_repository'],
        interval=current_app.config['DEADLINE_CHECK_INTERVAL'],
        start_task=socketio.start_background_task,
        sleep=socketio.sleep,
    )


def _acquire_dashboard(professor):
    with _registry_lock:
        entry = _dashboards.get(professor.id)
        if entry is None:
            entry = _dashboards[professor.id] = [_make_dashboard(professor), 0]
        entry[1] += 1
        dashboard = entry[0]
    dashboard.start()
    return dashboard


def _release_dashboard(professor_id):
    with _registry_lock:
        entry = _dashboards.get(professor_id)
        if entry is None:
            return
        entry[1] -= 1
        if entry[1] > 0:
            return
        del _dashboards[professor_id]
    entry[0].stop()


def get_dashboard(professor_id):
    entry = _dashboards.get(professor_id)
    return entry[0] if entry else None


def refresh_dashboard(professor):
    """Point a running dashboard at the professor's current record."""
    dashboard = get_dashboard(professor.id)
    if dashboard is not None:
        dashboard.update_professor(professor)


def stop_dashboards(professor_id):
    """Tear down a professor's live dashboard, e.g. on logout."""
    with _registry_lock:
        entry = _dashboards.pop(professor_id, None)
        for sid in [s for s, pid in _connections.items() if pid == professor_id]:
            del _connections[sid]
    if entry is not None:
        entry[0].stop()
        socketio.emit('logged_out', {}, to=professor_room(professor_id))


@socketio.on('connect')
def handle_connect(auth=None):
    professor = get_current_professor()
    if professor is None:
        return False

    join_room(professor_room(professor.id))
    with _registry_lock:
        _connections[request.sid] = professor.id
    dashboard = _acquire_dashboard(professor)
    emit('dashboard_state', dashboard.state())


@socketio.on('disconnect')
def handle_disconnect(*args):
    with _registry_lock:
        professor_id = _connections.pop(request.sid, None)
    if professor_id is not None:
        _release_dashboard(professor_id)


@socketio.on('request_state')
def handle_request_state(data=None):
    professor_id = _connections.get(request.sid)
    dashboard = get_dashboard(professor_id) if professor_id else None
    if dashboard is None:
        emit('error', {'message': 'Authentication required'})
        return
    emit('dashboard_state', dashboard.state())


@socketio.on('select_section')
def handle_select_section(data):
    professor_id = _connections.get(request.sid)
    dashboard = get_dashboard(professor_id) if professor_id else None
    if dashboard is None:
        emit('error', {'message': 'Authentication required'})
        return

    section = (data or {}).get('section')
    if not section:
        emit('error', {'message': 'Section required'})
        return
    emit('section_breakdown', dashboard.section_breakdown(section))
