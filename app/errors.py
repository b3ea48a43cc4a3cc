"""
Error taxonomy shared by the session store, the DAO layer and the routes.

Every error carries the HTTP status the JSON API answers with; the
message is passed through to the caller unchanged.
"""


class DashboardError(Exception):
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = 'Request failed'

    def to_dict(self):
        return {'error': self.message}


class NotFound(DashboardError):
    status_code = 404
    default_message = 'No professor found with this email'


class InvalidCredential(DashboardError):
    status_code = 401
    default_message = 'Invalid password'


class AccountInactive(DashboardError):
    status_code = 403
    default_message = 'Account is inactive. Please contact the administrator.'


class IncompleteProfile(DashboardError):
    status_code = 422
    default_message = 'Professor data is incomplete'


class NotAuthenticated(DashboardError):
    status_code = 401
    default_message = 'No professor logged in'


class ValidationError(DashboardError):
    status_code = 400
    default_message = 'Invalid input'


class TransportError(DashboardError):
    status_code = 503
    default_message = 'Database request failed'
