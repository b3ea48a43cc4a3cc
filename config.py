import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID', '')
    GOOGLE_APPLICATION_CREDENTIALS = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS', '')
    FIREBASE_ENABLED = os.environ.get('FIREBASE_ENABLED', 'true').lower() in ('true', '1')
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'threading')
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 12))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Seconds between deadline re-checks while a dashboard is connected
    DEADLINE_CHECK_INTERVAL = float(os.environ.get('DEADLINE_CHECK_INTERVAL', 5))
    MAX_AVATAR_BYTES = 500 * 1024
    DEFAULT_THEME = os.environ.get('DEFAULT_THEME', 'ocean-deep')
