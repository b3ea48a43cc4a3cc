import logging
import os
import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)

_app = None
_db = None


def _credentials(app_config):
    cred_path = app_config.get('GOOGLE_APPLICATION_CREDENTIALS') or './firebase-service-account.json'
    if os.path.exists(cred_path):
        logger.info('Using service account credentials from %s', cred_path)
        return credentials.Certificate(cred_path)
    logger.info('Service account file not found, using application default credentials')
    return credentials.ApplicationDefault()


def init_firebase(app_config=None):
    """Initialize the Firebase app once per process; later calls are no-ops."""
    global _app, _db

    if _app is not None:
        return

    app_config = app_config or {}
    project_id = app_config.get('FIREBASE_PROJECT_ID') or os.environ.get('FIREBASE_PROJECT_ID', '')
    options = {'projectId': project_id} if project_id else None

    if os.environ.get('FIRESTORE_EMULATOR_HOST'):
        # The emulator ignores credentials but the SDK still wants a project
        logger.info('Connecting to Firestore emulator at %s', os.environ['FIRESTORE_EMULATOR_HOST'])
        _app = firebase_admin.initialize_app(options=options)
    else:
        _app = firebase_admin.initialize_app(_credentials(app_config), options=options)
    _db = firestore.client()


def get_db():
    if _db is None:
        init_firebase()
    return _db
