import base64
import logging

from app.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_AVATAR_BYTES = 500 * 1024


def encode_avatar(file, max_bytes=MAX_AVATAR_BYTES):
    """Validate an uploaded image and return it as a base64 data URL.

    Args:
        file: werkzeug FileStorage (or anything with ``mimetype`` and ``read()``)
        max_bytes: largest accepted upload; the encoded string is ~33% larger
            and must fit in a single Firestore field

    Returns:
        ``data:<mime>;base64,<payload>``
    """
    if file is None or not getattr(file, 'filename', None):
        raise ValidationError('No file provided. Please select an image file.')

    mimetype = getattr(file, 'mimetype', None) or ''
    if not mimetype.startswith('image/'):
        raise ValidationError('File must be an image')

    data = file.read()
    if len(data) > max_bytes:
        raise ValidationError(
            f'Image is too large. Maximum size is {round(max_bytes / 1024)}KB. '
            'Please compress or resize your image.'
        )

    payload = base64.b64encode(data).decode('ascii')
    logger.info('Image uploaded: %s, original size: %d bytes, base64 size: %d bytes',
                file.filename, len(data), len(payload))
    return f'data:{mimetype};base64,{payload}'
