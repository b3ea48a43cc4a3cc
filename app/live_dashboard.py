"""
Per-professor real-time dashboard.

Owns everything that is open while a professor has the dashboard on
screen: the deadline listener, the evaluation result listener, the
one-shot student count and the deadline re-check timer. Listener
callbacks arrive on client library threads; they are applied one at a
time under ``_lock``.
"""

import logging
import threading

from app.aggregator import ResultAggregator
from app.deadline import DeadlineWatcher, utcnow
from app.errors import TransportError
from app.firestore_models import EvaluationDeadline
from app.services import analytics

logger = logging.getLogger(__name__)


class LiveDashboard:

    def __init__(self, professor, emit, repository=None, interval=5,
                 clock=utcnow, start_task=None, sleep=None):
        if repository is None:
            from app import firestore_dao as repository
        self.professor = professor
        self._emit = emit
        self._repository = repository
        self._interval = interval
        self._start_task = start_task
        self._sleep = sleep

        self.watcher = DeadlineWatcher(clock)
        self.aggregator = ResultAggregator(self.watcher)
        self.watcher.subscribe(self._on_deadline_change)
        self.student_count = None

        self._lock = threading.RLock()
        self._running = False
        self._deadline_subscription = None
        self._results_subscription = None
        # Bumped whenever the results listener is replaced; stale deliveries are dropped
        self._results_generation = 0
        self._run_id = 0

    @property
    def running(self):
        return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self.aggregator.loading = True
            self._deadline_subscription = self._repository.watch_current_deadline(
                self._handle_deadline, self._handle_deadline_error
            )
            self._run_id += 1
            if self._start_task is not None:
                self._start_task(self._run_ticks, self._run_id)
        self.refresh_student_count()

    def stop(self):
        with self._lock:
            if not self._running:
                return
            self._running = False
            if self._deadline_subscription is not None:
                self._deadline_subscription.unsubscribe()
                self._deadline_subscription = None
            self._close_results()
        logger.info('Dashboard stopped for professor %s', self.professor.id)

    def update_professor(self, professor):
        """Swap in the edited professor record.

        The results listener is keyed by email, so an email change reopens it.
        """
        with self._lock:
            previous = self.professor
            self.professor = professor
            if not self._running or previous.email == professor.email:
                return
            logger.info('Professor %s changed email, reopening results listener', professor.id)
            if self._results_subscription is not None:
                self._close_results()
                self.aggregator.clear()
                self.aggregator.loading = True
                self._open_results()

    # -- Deadline --------------------------------------------------------------

    def _handle_deadline(self, data):
        with self._lock:
            if not self._running:
                return
            try:
                deadline = EvaluationDeadline.from_dict(data) if data is not None else None
            except ValueError as e:
                self.watcher.apply_error(e)
                return
            if deadline is None:
                logger.info('No deadline document found, showing results')
            self.watcher.apply_deadline_update(deadline)

    def _handle_deadline_error(self, error):
        with self._lock:
            if self._running:
                self.watcher.apply_error(error)

    def tick(self, now=None):
        with self._lock:
            if self._running:
                self.watcher.apply_tick(now)

    def _run_ticks(self, run_id):
        while self._running and run_id == self._run_id:
            self._sleep(self._interval)
            self.tick()

    def _on_deadline_change(self, change):
        self.aggregator.on_deadline_change(change)
        if not self.aggregator.active:
            self._close_results()
        elif change.period_changed or self._results_subscription is None:
            self._close_results()
            self._open_results()
        self._emit('deadline_status', change.to_dict())
        self._emit('evaluation_summary', self.aggregator.to_dict())

    # -- Evaluation results ------------------------------------------------------

    def _open_results(self):
        self._results_generation += 1
        generation = self._results_generation

        def on_update(documents):
            self._handle_results(generation, documents)

        def on_error(error):
            self._handle_results_error(generation, error)

        self._results_subscription = self._repository.watch_evaluation_results(
            self.professor.email, on_update, on_error
        )

    def _close_results(self):
        self._results_generation += 1
        if self._results_subscription is not None:
            self._results_subscription.unsubscribe()
            self._results_subscription = None

    def _handle_results(self, generation, documents):
        with self._lock:
            if not self._running or generation != self._results_generation:
                return
            if self.aggregator.apply_snapshot(documents):
                self._emit('evaluation_summary', self.aggregator.to_dict())

    def _handle_results_error(self, generation, error):
        with self._lock:
            if not self._running or generation != self._results_generation:
                return
            self.aggregator.apply_error(error)
            self._emit('evaluation_summary', self.aggregator.to_dict())

    def section_breakdown(self, section):
        with self._lock:
            return self.aggregator.section_breakdown(section)

    # -- Students ----------------------------------------------------------------

    def refresh_student_count(self):
        try:
            students = self._repository.get_student_accounts()
        except TransportError as e:
            logger.error('Error fetching students: %s', e)
            students = []
        count = analytics.count_active_students(self.professor, students)
        with self._lock:
            if not self._running:
                return
            self.student_count = count
        logger.info('Total students handled by %s: %d', self.professor.id, count)
        self._emit('student_count', {'totalStudents': count})

    def state(self):
        with self._lock:
            return {
                'deadline': self.watcher.snapshot().to_dict(),
                'evaluations': self.aggregator.to_dict(),
                'totalStudents': self.student_count,
            }
