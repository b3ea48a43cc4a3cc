from flask import Blueprint, jsonify, request

from app.decorators import auth_required, get_session_store
from app.forms import ProfileForm, PasswordChangeForm

bp = Blueprint('profile', __name__, url_prefix='/profile')


@bp.route('', methods=['GET'])
@auth_required
def show():
    return jsonify({'professor': get_session_store().professor.to_public_dict()})


@bp.route('', methods=['POST'])
@auth_required
def update():
    form = ProfileForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid profile data', 'errors': form.errors}), 400

    from app.events import refresh_dashboard

    professor = get_session_store().update_profile(form.name.data, form.email.data)
    refresh_dashboard(professor)
    return jsonify({'professor': professor.to_public_dict()})


@bp.route('/password', methods=['POST'])
@auth_required
def change_password():
    form = PasswordChangeForm()
    if not form.validate_on_submit():
        errors = form.errors
        first = next(iter(errors.values()))[0] if errors else 'Invalid password data'
        return jsonify({'error': first, 'errors': errors}), 400

    get_session_store().update_password(form.current_password.data, form.new_password.data)
    return jsonify({'success': True})


@bp.route('/avatar', methods=['POST'])
@auth_required
def upload_avatar():
    image_url = get_session_store().upload_avatar(request.files.get('file'))
    return jsonify({'imageUrl': image_url, 'success': True})


@bp.route('/avatar', methods=['DELETE'])
@auth_required
def delete_avatar():
    get_session_store().delete_avatar()
    return jsonify({'success': True})
