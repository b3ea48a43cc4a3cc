from functools import wraps
from flask import current_app, g, jsonify, session

from app.session_store import SessionStore
from app.theme import ThemeStore


def professor_room(professor_id):
    return f'professor_{professor_id}'


def load_session_store():
    """Build the request's SessionStore and restore the saved professor."""
    if hasattr(g, '_session_store'):
        return
    store = SessionStore(
        session,
        repository=current_app.extensions['dashboard_repository'],
        max_avatar_bytes=current_app.config['MAX_AVATAR_BYTES'],
    )
    store.restore()
    g._session_store = store


def get_session_store():
    if not hasattr(g, '_session_store'):
        load_session_store()
    return g._session_store


def get_current_professor():
    return get_session_store().professor


def get_theme_store():
    if not hasattr(g, '_theme_store'):
        from app import socketio

        store = ThemeStore(session, default=current_app.config['DEFAULT_THEME'])
        store.restore()

        professor = get_current_professor()
        if professor is not None:
            room = professor_room(professor.id)

            def broadcast(value, palette):
                socketio.emit('theme_changed', {'theme': value, 'colors': palette.colors}, to=room)
            store.subscribe(broadcast)
        g._theme_store = store
    return g._theme_store


def auth_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        professor = get_current_professor()
        if professor is None:
            return jsonify({'error': 'No professor logged in'}), 401
        g.current_professor = professor
        return f(*args, **kwargs)
    return decorated
