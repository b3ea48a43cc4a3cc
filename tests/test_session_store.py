import io

import pytest
from werkzeug.datastructures import FileStorage

from app.errors import (AccountInactive, IncompleteProfile, InvalidCredential,
                        NotAuthenticated, NotFound, TransportError, ValidationError)
from app.session_store import PROFESSOR_ID_KEY, SessionStore

EMAIL = 'maria@college.edu'
PASSWORD = 'correct-horse'


@pytest.fixture()
def storage():
    return {}


@pytest.fixture()
def store(storage, repository, hasher):
    store = SessionStore(storage, repository=repository, hasher=hasher)
    store.restore()
    return store


def image(data=b'\x89PNG\r\n\x1a\nfake', mimetype='image/png', filename='me.png'):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=mimetype)


# -- restore -----------------------------------------------------------------

def test_restore_without_saved_id(storage, repository, hasher):
    store = SessionStore(storage, repository=repository, hasher=hasher)
    assert store.initializing
    assert store.loading
    assert store.restore() is None
    assert not store.initializing
    assert not store.loading
    assert not store.is_authenticated


def test_restore_saved_professor(store, storage):
    storage[PROFESSOR_ID_KEY] = 'prof-1'
    professor = store.restore()
    assert professor.name == 'Maria Santos'
    assert store.professor is professor
    assert storage[PROFESSOR_ID_KEY] == 'prof-1'


def test_restore_missing_record_clears_saved_id(store, storage):
    storage[PROFESSOR_ID_KEY] = 'deleted-prof'
    assert store.restore() is None
    assert PROFESSOR_ID_KEY not in storage
    assert not store.initializing


def test_restore_incomplete_record_clears_saved_id(store, storage, repository):
    repository.add_professor('prof-2', name='No Department', email='nd@college.edu')
    storage[PROFESSOR_ID_KEY] = 'prof-2'
    assert store.restore() is None
    assert PROFESSOR_ID_KEY not in storage


def test_restore_inactive_record_clears_saved_id(store, storage, repository):
    repository.professors['prof-1']['status'] = 'Retired'
    storage[PROFESSOR_ID_KEY] = 'prof-1'
    assert store.restore() is None
    assert PROFESSOR_ID_KEY not in storage


def test_restore_transport_failure_clears_saved_id(store, storage, repository):
    repository.fail.add('get_professor')
    storage[PROFESSOR_ID_KEY] = 'prof-1'
    assert store.restore() is None
    assert PROFESSOR_ID_KEY not in storage
    assert not store.initializing


# -- sign in -------------------------------------------------------------------

def test_sign_in_persists_id(store, storage):
    professor = store.sign_in(EMAIL, PASSWORD)
    assert professor.id == 'prof-1'
    assert store.is_authenticated
    assert storage[PROFESSOR_ID_KEY] == 'prof-1'


def test_unknown_email_is_not_found(store):
    with pytest.raises(NotFound) as excinfo:
        store.sign_in('nobody@college.edu', PASSWORD)
    assert excinfo.value.message == 'No professor found with this email'


def test_wrong_password_leaves_store_signed_out(store, storage):
    storage[PROFESSOR_ID_KEY] = 'prof-1'
    store.restore()

    with pytest.raises(InvalidCredential):
        store.sign_in(EMAIL, 'wrong')

    assert store.professor is None
    assert PROFESSOR_ID_KEY not in storage


def test_password_checked_before_status(store, repository):
    repository.professors['prof-1']['status'] = 'Inactive'
    with pytest.raises(InvalidCredential):
        store.sign_in(EMAIL, 'wrong')


@pytest.mark.parametrize('status', ['Inactive', 'Resigned', 'Retired'])
def test_inactive_account_rejected_with_status(store, repository, storage, status):
    repository.professors['prof-1']['status'] = status
    with pytest.raises(AccountInactive) as excinfo:
        store.sign_in(EMAIL, PASSWORD)
    assert excinfo.value.message == f'Account is {status.lower()}. Please contact the administrator.'
    assert store.professor is None
    assert storage == {}


def test_incomplete_profile_rejected(store, repository):
    del repository.professors['prof-1']['departmentName']
    with pytest.raises(IncompleteProfile):
        store.sign_in(EMAIL, PASSWORD)
    assert store.professor is None


def test_legacy_plaintext_password_migrated(store, repository, hasher):
    repository.add_professor(
        'prof-legacy', name='Jose Reyes', email='jose@college.edu',
        departmentId='dept-math', departmentName='Mathematics', password='letmein',
    )

    professor = store.sign_in('jose@college.edu', 'letmein')

    record = repository.professors['prof-legacy']
    assert 'password' not in record
    assert hasher.check_password_hash(record['passwordHash'], 'letmein')
    assert professor.password_hash == record['passwordHash']
    assert professor.legacy_password is None


def test_transport_failure_during_sign_in_propagates(store, repository):
    repository.fail.add('get_professor_by_email')
    with pytest.raises(TransportError):
        store.sign_in(EMAIL, PASSWORD)
    assert store.professor is None


def test_logout_is_idempotent(store, storage):
    store.sign_in(EMAIL, PASSWORD)
    store.logout()
    store.logout()
    assert store.professor is None
    assert PROFESSOR_ID_KEY not in storage


# -- profile mutations ---------------------------------------------------------------

@pytest.mark.parametrize('call', [
    lambda s: s.update_profile('Name', 'a@b.c'),
    lambda s: s.update_password(PASSWORD, 'new-secret'),
    lambda s: s.upload_avatar(image()),
    lambda s: s.delete_avatar(),
])
def test_mutations_require_sign_in(store, repository, call):
    with pytest.raises(NotAuthenticated):
        call(store)
    assert repository.updates == []


def test_update_profile(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    professor = store.update_profile('Maria S. Santos', 'msantos@college.edu')

    assert professor.name == 'Maria S. Santos'
    assert repository.professors['prof-1']['email'] == 'msantos@college.edu'
    assert not store.loading


def test_failed_update_leaves_professor_unchanged(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    repository.fail.add('update_professor')

    with pytest.raises(TransportError):
        store.update_profile('Someone Else', 'else@college.edu')

    assert store.professor.name == 'Maria Santos'
    assert not store.loading


def test_update_password(store, repository, hasher):
    store.sign_in(EMAIL, PASSWORD)
    store.update_password(PASSWORD, 'battery-staple')

    stored = repository.professors['prof-1']['passwordHash']
    assert hasher.check_password_hash(stored, 'battery-staple')

    store.logout()
    store.sign_in(EMAIL, 'battery-staple')


def test_update_password_rejects_wrong_current(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    with pytest.raises(InvalidCredential) as excinfo:
        store.update_password('guess', 'battery-staple')
    assert excinfo.value.message == 'Current password is incorrect'
    assert repository.updates == []


def test_upload_avatar_stores_data_url(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    url = store.upload_avatar(image(b'abc'))

    assert url == 'data:image/png;base64,YWJj'
    assert store.professor.image_url == url
    assert repository.professors['prof-1']['imageUrl'] == url
    assert repository.professors['prof-1']['profilePictureUrl'] == url


def test_upload_avatar_rejects_non_image(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    with pytest.raises(ValidationError) as excinfo:
        store.upload_avatar(image(b'hello', mimetype='text/plain', filename='notes.txt'))
    assert excinfo.value.message == 'File must be an image'
    assert repository.updates == []


def test_upload_avatar_rejects_oversized_file(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    with pytest.raises(ValidationError) as excinfo:
        store.upload_avatar(image(b'x' * (500 * 1024 + 1)))
    assert 'too large' in excinfo.value.message
    assert store.professor.image_url is None


def test_upload_avatar_accepts_exact_limit(store):
    store.sign_in(EMAIL, PASSWORD)
    assert store.upload_avatar(image(b'x' * (500 * 1024))).startswith('data:image/png;base64,')


def test_delete_avatar(store, repository):
    store.sign_in(EMAIL, PASSWORD)
    store.upload_avatar(image())
    store.delete_avatar()

    assert store.professor.image_url is None
    assert repository.professors['prof-1']['imageUrl'] == ''


def test_delete_avatar_without_picture(store):
    store.sign_in(EMAIL, PASSWORD)
    with pytest.raises(ValidationError) as excinfo:
        store.delete_avatar()
    assert excinfo.value.message == 'No profile picture to delete'
