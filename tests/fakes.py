"""In-memory stand-in for app.firestore_dao."""

import copy

from app.errors import TransportError


class FakeSubscription:

    def __init__(self, registry, entry):
        self._registry = registry
        self._entry = entry

    @property
    def active(self):
        return self._entry in self._registry

    def unsubscribe(self):
        if self._entry in self._registry:
            self._registry.remove(self._entry)


class FakeRepository:
    """Mirrors the DAO functions the app calls.

    Listeners get the current data immediately on subscribe, as Firestore
    delivers an initial snapshot. ``fail`` names operations that should
    raise TransportError.
    """

    def __init__(self):
        self.professors = {}
        self.deadline = None
        self.results = []
        self.students = []
        self.updates = []
        self.fail = set()
        self.deadline_listeners = []
        self.result_listeners = []

    def _check(self, operation):
        if operation in self.fail:
            raise TransportError(f'{operation} unavailable')

    # -- Professors ------------------------------------------------------------

    def add_professor(self, professor_id, **data):
        self.professors[professor_id] = data
        return professor_id

    def get_professor(self, professor_id):
        self._check('get_professor')
        data = self.professors.get(professor_id)
        if data is None:
            return None
        d = copy.deepcopy(data)
        d['id'] = professor_id
        return d

    def get_professor_by_email(self, email):
        self._check('get_professor_by_email')
        for professor_id, data in self.professors.items():
            if data.get('email') == email:
                return self.get_professor(professor_id)
        return None

    def update_professor(self, professor_id, data):
        self._check('update_professor')
        self.professors[professor_id].update(data)
        self.updates.append((professor_id, dict(data)))

    def set_professor_password_hash(self, professor_id, password_hash):
        self._check('set_professor_password_hash')
        record = self.professors[professor_id]
        record['passwordHash'] = password_hash
        record.pop('password', None)
        self.updates.append((professor_id, {'passwordHash': password_hash}))

    # -- Deadline ----------------------------------------------------------------

    def get_current_deadline(self):
        self._check('get_current_deadline')
        return copy.deepcopy(self.deadline)

    def watch_current_deadline(self, on_update, on_error):
        if 'watch_current_deadline' in self.fail:
            on_error(TransportError('watch_current_deadline unavailable'))
            return FakeSubscription([], None)
        entry = (on_update, on_error)
        self.deadline_listeners.append(entry)
        on_update(copy.deepcopy(self.deadline))
        return FakeSubscription(self.deadline_listeners, entry)

    def push_deadline(self, data):
        self.deadline = data
        for on_update, _ in list(self.deadline_listeners):
            on_update(copy.deepcopy(data))

    def fail_deadline_listeners(self, error):
        for _, on_error in list(self.deadline_listeners):
            on_error(error)

    # -- Results -------------------------------------------------------------------

    def _results_for(self, email):
        return [copy.deepcopy(r) for r in self.results if r.get('professorEmail') == email]

    def get_evaluation_results(self, professor_email):
        self._check('get_evaluation_results')
        return self._results_for(professor_email)

    def watch_evaluation_results(self, professor_email, on_update, on_error):
        entry = (professor_email, on_update, on_error)
        self.result_listeners.append(entry)
        on_update(self._results_for(professor_email))
        return FakeSubscription(self.result_listeners, entry)

    def push_results(self, results):
        self.results = results
        for email, on_update, _ in list(self.result_listeners):
            on_update(self._results_for(email))

    def fail_result_listeners(self, error):
        for _, _, on_error in list(self.result_listeners):
            on_error(error)

    # -- Students ------------------------------------------------------------------

    def get_student_accounts(self):
        self._check('get_student_accounts')
        return copy.deepcopy(self.students)
