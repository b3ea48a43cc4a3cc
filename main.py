import logging
import os
from app import create_app, socketio

app = create_app()
logger = logging.getLogger(__name__)

if __name__ == '__main__':
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1')
    port = int(os.environ.get('PORT', 8080))
    logger.info('Evaluation dashboard listening on port %d (async mode: %s)',
                port, socketio.async_mode)
    # Development server only; outside debug Flask-SocketIO refuses to serve through werkzeug
    socketio.run(app, host='0.0.0.0', port=port, debug=debug, allow_unsafe_werkzeug=debug)
