"""
Signed-in professor state.

A ``SessionStore`` is built around two collaborators handed to it by the
caller: ``storage``, a mutable mapping that outlives the store (the Flask
session cookie in the web process), and ``repository``, the data access
layer (``app.firestore_dao`` unless a test substitutes one).
"""

import hmac
import logging
from contextlib import contextmanager
from dataclasses import replace

from app.errors import (AccountInactive, DashboardError, IncompleteProfile,
                        InvalidCredential, NotAuthenticated, NotFound,
                        TransportError, ValidationError)
from app.firestore_models import Professor
from app.services.avatar import MAX_AVATAR_BYTES, encode_avatar

logger = logging.getLogger(__name__)

PROFESSOR_ID_KEY = 'professor_id'


class SessionStore:

    def __init__(self, storage, repository=None, hasher=None, max_avatar_bytes=MAX_AVATAR_BYTES):
        if repository is None:
            from app import firestore_dao as repository
        if hasher is None:
            from app import bcrypt as hasher
        self._storage = storage
        self._repository = repository
        self._hasher = hasher
        self._max_avatar_bytes = max_avatar_bytes
        self.professor = None
        self.initializing = True
        self._loading = True

    @property
    def loading(self):
        return self._loading or self.initializing

    @property
    def is_authenticated(self):
        return self.professor is not None

    @contextmanager
    def _busy(self):
        self._loading = True
        try:
            yield
        finally:
            self._loading = False

    def _require_professor(self):
        if self.professor is None:
            raise NotAuthenticated()
        return self.professor

    # -- Startup ---------------------------------------------------------------

    def restore(self):
        """Restore the professor saved in ``storage``, if still valid.

        Never raises: any problem with the saved identifier just clears it.
        """
        self.initializing = True
        try:
            professor_id = self._storage.get(PROFESSOR_ID_KEY)
            if not professor_id:
                return None
            try:
                data = self._repository.get_professor(professor_id)
            except TransportError as e:
                logger.error('Error restoring professor session: %s', e)
                self._storage.pop(PROFESSOR_ID_KEY, None)
                return None

            if data is None:
                logger.warning('Professor %s not found, clearing session', professor_id)
                self._storage.pop(PROFESSOR_ID_KEY, None)
                return None

            professor = Professor.from_dict(data, professor_id)
            if not professor.is_complete_profile:
                logger.warning('Invalid professor data for %s, clearing session', professor_id)
                self._storage.pop(PROFESSOR_ID_KEY, None)
                return None
            if not professor.is_active:
                logger.warning('Professor account is %s, clearing session', professor.status)
                self._storage.pop(PROFESSOR_ID_KEY, None)
                return None

            self.professor = professor
            return professor
        finally:
            self.initializing = False
            self._loading = False

    # -- Authentication --------------------------------------------------------

    def _verify_password(self, professor, password):
        if professor.password_hash:
            try:
                return self._hasher.check_password_hash(professor.password_hash, password)
            except ValueError:
                logger.error('Unreadable password hash for professor %s', professor.id)
                return False
        if professor.legacy_password:
            return hmac.compare_digest(professor.legacy_password.encode('utf-8'),
                                       password.encode('utf-8'))
        return False

    def _hash(self, password):
        return self._hasher.generate_password_hash(password).decode('utf-8')

    def sign_in(self, email, password):
        self.professor = None
        self._storage.pop(PROFESSOR_ID_KEY, None)
        try:
            data = self._repository.get_professor_by_email(email)
            if data is None:
                raise NotFound()
            professor = Professor.from_dict(data, data.get('id'))

            if not self._verify_password(professor, password):
                raise InvalidCredential()
            if not professor.is_active:
                raise AccountInactive(
                    f'Account is {professor.status.lower()}. Please contact the administrator.'
                )
            if not professor.is_complete_profile:
                raise IncompleteProfile()

            if not professor.password_hash:
                password_hash = self._hash(password)
                self._repository.set_professor_password_hash(professor.id, password_hash)
                professor = replace(professor, password_hash=password_hash, legacy_password=None)
                logger.info('Migrated legacy password for professor %s', professor.id)
        except DashboardError as e:
            logger.warning('Authentication error for %s: %s', email, e.message)
            self.professor = None
            raise

        self.professor = professor
        self._storage[PROFESSOR_ID_KEY] = professor.id
        logger.info('Professor authenticated successfully: %s', professor.name)
        return professor

    def logout(self):
        if self.professor is not None:
            logger.info('Professor logged out: %s', self.professor.name)
        self.professor = None
        self._storage.pop(PROFESSOR_ID_KEY, None)

    # -- Profile mutations -----------------------------------------------------

    def update_profile(self, name, email):
        professor = self._require_professor()
        with self._busy():
            self._repository.update_professor(professor.id, {'name': name, 'email': email})
            self.professor = replace(professor, name=name, email=email)
        return self.professor

    def update_password(self, current_password, new_password):
        professor = self._require_professor()
        if not self._verify_password(professor, current_password):
            raise InvalidCredential('Current password is incorrect')
        with self._busy():
            password_hash = self._hash(new_password)
            self._repository.set_professor_password_hash(professor.id, password_hash)
            self.professor = replace(professor, password_hash=password_hash, legacy_password=None)

    def upload_avatar(self, file):
        professor = self._require_professor()
        with self._busy():
            image_url = encode_avatar(file, self._max_avatar_bytes)
            self._repository.update_professor(professor.id, {
                'imageUrl': image_url,
                'profilePictureUrl': image_url,
            })
            self.professor = replace(professor, image_url=image_url)
        return image_url

    def delete_avatar(self):
        professor = self._require_professor()
        if not professor.image_url:
            raise ValidationError('No profile picture to delete')
        with self._busy():
            self._repository.update_professor(professor.id, {
                'imageUrl': '',
                'profilePictureUrl': '',
            })
            self.professor = replace(professor, image_url=None)
