"""
Firestore Data Access Object (DAO) layer.

Every read and write the dashboard makes goes through this module. The
session store and the live dashboard receive it as their ``repository``
so tests can hand them an in-memory stand-in instead.

Collections:
  professors              professor identity records
  evaluation_deadlines    singleton document ``current``
  evaluation_results      one document per student evaluation
  users                   student accounts (counted, never modified)
"""

import logging
from datetime import datetime, timezone
from functools import wraps

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError
from google.cloud.firestore_v1 import FieldFilter

from app.errors import TransportError
from app.firebase_init import get_db

logger = logging.getLogger(__name__)

DEADLINE_COLLECTION = 'evaluation_deadlines'
DEADLINE_DOCUMENT = 'current'


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _doc_to_dict(doc_snapshot):
    """Convert a Firestore DocumentSnapshot to a dict with 'id' field."""
    if not doc_snapshot.exists:
        return None
    d = doc_snapshot.to_dict()
    d['id'] = doc_snapshot.id
    return d


def _query_to_list(query_ref):
    """Run a query and return a list of dicts."""
    return [_doc_to_dict(doc) for doc in query_ref.stream()]


def _now():
    return datetime.now(timezone.utc)


def _transport(f):
    """Re-raise client library failures as TransportError, message intact."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except GoogleAPICallError as e:
            raise TransportError(e.message or str(e)) from e
    return decorated


class Subscription:
    """Handle for a snapshot listener; ``unsubscribe()`` may be called twice."""

    def __init__(self, watch=None):
        self._watch = watch

    @property
    def active(self):
        return self._watch is not None

    def unsubscribe(self):
        watch, self._watch = self._watch, None
        if watch is not None:
            watch.unsubscribe()


def _listen(ref, on_update, on_error, convert):
    """Attach a snapshot listener to ``ref``.

    ``convert`` turns the list of snapshots of one delivery into the
    value handed to ``on_update``. Failures while attaching or while
    handling a delivery are reported through ``on_error``; the watch
    runs on a client library thread where a raised exception would be lost.
    """
    def callback(snapshots, changes, read_time):
        try:
            value = convert(snapshots)
        except Exception as e:
            on_error(e)
            return
        try:
            on_update(value)
        except Exception:
            logger.exception('Snapshot listener failed to apply update')

    try:
        return Subscription(ref.on_snapshot(callback))
    except GoogleAPICallError as e:
        on_error(TransportError(e.message or str(e)))
        return Subscription()


# ========================================================================
# Professors  (collection: professors)
# ========================================================================

@_transport
def get_professor(professor_id):
    """Get a professor document by ID. Returns dict or None."""
    doc = get_db().collection('professors').document(professor_id).get()
    return _doc_to_dict(doc)


@_transport
def get_professor_by_email(email):
    """Get a professor by exact email address. Returns dict or None."""
    docs = (
        get_db().collection('professors')
        .where(filter=FieldFilter('email', '==', email))
        .limit(1)
        .stream()
    )
    for doc in docs:
        return _doc_to_dict(doc)
    return None


@_transport
def create_professor(professor_id, data):
    """Create a professor document with the given ID."""
    data.setdefault('createdAt', _now())
    get_db().collection('professors').document(professor_id).set(data)


@_transport
def update_professor(professor_id, data):
    """Update fields on an existing professor document."""
    data.setdefault('updatedAt', _now())
    get_db().collection('professors').document(professor_id).update(data)


@_transport
def set_professor_password_hash(professor_id, password_hash):
    """Store a password hash and drop any legacy plaintext field."""
    get_db().collection('professors').document(professor_id).update({
        'passwordHash': password_hash,
        'password': firestore.DELETE_FIELD,
        'updatedAt': _now(),
    })


# ========================================================================
# Evaluation deadline  (document: evaluation_deadlines/current)
# ========================================================================

def _deadline_ref():
    return get_db().collection(DEADLINE_COLLECTION).document(DEADLINE_DOCUMENT)


@_transport
def get_current_deadline():
    """Get the current deadline document. Returns dict or None."""
    return _doc_to_dict(_deadline_ref().get())


@_transport
def set_current_deadline(data):
    """Replace the current deadline document."""
    data.setdefault('createdAt', _now())
    data['updatedAt'] = _now()
    _deadline_ref().set(data)


def watch_current_deadline(on_update, on_error):
    """Listen to the deadline document.

    ``on_update`` receives the document as a dict, or None when it does
    not exist.
    """
    def convert(snapshots):
        for snapshot in snapshots:
            return _doc_to_dict(snapshot)
        return None

    return _listen(_deadline_ref(), on_update, on_error, convert)


# ========================================================================
# Evaluation results  (collection: evaluation_results)
# ========================================================================

def _results_query(professor_email):
    return (
        get_db().collection('evaluation_results')
        .where(filter=FieldFilter('professorEmail', '==', professor_email))
    )


@_transport
def get_evaluation_results(professor_email):
    """Get all evaluation results addressed to a professor."""
    return _query_to_list(_results_query(professor_email))


@_transport
def create_evaluation_result(data):
    """Create an evaluation result. Returns the generated doc ID."""
    data.setdefault('createdAt', _now())
    _, doc_ref = get_db().collection('evaluation_results').add(data)
    return doc_ref.id


def watch_evaluation_results(professor_email, on_update, on_error):
    """Listen to a professor's evaluation results.

    ``on_update`` receives the full current result set as a list of dicts
    on every change.
    """
    def convert(snapshots):
        return [d for d in (_doc_to_dict(s) for s in snapshots) if d is not None]

    return _listen(_results_query(professor_email), on_update, on_error, convert)


# ========================================================================
# Students  (collection: users)
# ========================================================================

@_transport
def get_student_accounts():
    """Get all student account documents.

    accountStatus is matched case-insensitively by the caller, which
    Firestore equality filters cannot express.
    """
    return _query_to_list(get_db().collection('users'))


@_transport
def create_student_account(data):
    """Create a student account. Returns the generated doc ID."""
    _, doc_ref = get_db().collection('users').add(data)
    return doc_ref.id
