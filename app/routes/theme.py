from flask import Blueprint, jsonify

from app.decorators import get_theme_store
from app.forms import ThemeForm
from app.theme import COLOR_PALETTES

bp = Blueprint('theme', __name__, url_prefix='/theme')


def _theme_response(store):
    return jsonify({'theme': store.current_theme, 'colors': store.get_colors()})


@bp.route('', methods=['GET'])
def current():
    return _theme_response(get_theme_store())


@bp.route('/palettes')
def palettes():
    return jsonify({'palettes': [p.to_dict() for p in COLOR_PALETTES]})


@bp.route('', methods=['POST'])
def apply():
    form = ThemeForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Unknown theme', 'errors': form.errors}), 400

    store = get_theme_store()
    store.apply_theme(form.theme.data)
    return _theme_response(store)


@bp.route('/reset', methods=['POST'])
def reset():
    store = get_theme_store()
    store.reset()
    return _theme_response(store)
