import logging

from flask import Blueprint, current_app, jsonify, request

from app import csrf
from app.errors import ValidationError
from app.services.avatar import encode_avatar

logger = logging.getLogger(__name__)

bp = Blueprint('upload', __name__, url_prefix='/api')


@bp.route('/upload-image', methods=['POST'])
@csrf.exempt
def upload_image():
    """Convert an uploaded image to a data URL ready to store in Firestore."""
    try:
        data_url = encode_avatar(request.files.get('file'), current_app.config['MAX_AVATAR_BYTES'])
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        logger.exception('Error uploading image')
        return jsonify({'error': 'Failed to upload image'}), 500

    return jsonify({
        'url': data_url,
        'imageUrl': data_url,
        'success': True,
    })
