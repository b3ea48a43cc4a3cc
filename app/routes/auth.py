from flask import Blueprint, jsonify
from flask_wtf.csrf import generate_csrf

from app.decorators import get_session_store
from app.errors import AccountInactive, DashboardError, InvalidCredential, NotFound
from app.forms import LoginForm

bp = Blueprint('auth', __name__, url_prefix='/auth')

LOGIN_MESSAGES = {
    AccountInactive: 'Your account is no longer active. Please contact the administrator.',
    NotFound: 'Invalid email address. Please check your email and try again.',
    InvalidCredential: 'Wrong password. Please check your password and try again.',
}
DEFAULT_LOGIN_MESSAGE = 'Invalid email or password. Please check your credentials and try again.'


def _login_failure(form, message, status_code, errors=None):
    # Keep the email so the professor can retry; never echo the password
    form.password.data = ''
    body = {
        'error': message,
        'form': {'email': form.email.data or '', 'password': ''},
    }
    if errors:
        body['errors'] = errors
    return jsonify(body), status_code


@bp.route('/login', methods=['POST'])
def login():
    store = get_session_store()
    form = LoginForm()

    if not form.validate_on_submit():
        return _login_failure(form, DEFAULT_LOGIN_MESSAGE, 400, form.errors)

    try:
        professor = store.sign_in(form.email.data, form.password.data)
    except DashboardError as e:
        message = LOGIN_MESSAGES.get(type(e), DEFAULT_LOGIN_MESSAGE)
        return _login_failure(form, message, e.status_code)

    return jsonify({'professor': professor.to_public_dict()})


@bp.route('/logout', methods=['POST'])
def logout():
    from app.events import stop_dashboards

    store = get_session_store()
    professor = store.professor
    store.logout()
    if professor is not None:
        stop_dashboards(professor.id)
    return jsonify({'success': True})


@bp.route('/me')
def me():
    store = get_session_store()
    professor = store.professor
    return jsonify({
        'professor': professor.to_public_dict() if professor else None,
        'initializing': store.initializing,
        'loading': store.loading,
        'csrfToken': generate_csrf(),
    })
