"""
Deadline-gated visibility of evaluation results.

Results stay hidden while the current evaluation period is open and
become visible once its end date has passed. Two event sources drive
the watcher: pushed deadline documents and a periodic clock tick. Both
reduce into ``_commit()``, the only place state changes, so listeners
hear about a transition exactly once.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from app.firestore_models import EvaluationDeadline

logger = logging.getLogger(__name__)


class Visibility(enum.Enum):
    UNKNOWN = 'unknown'
    HIDDEN = 'hidden'
    VISIBLE = 'visible'


@dataclass(frozen=True)
class DeadlineChange:
    visibility: Visibility
    period_id: Optional[str]
    previous_period_id: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]

    @property
    def period_changed(self) -> bool:
        return self.previous_period_id is not None and self.period_id != self.previous_period_id

    @property
    def results_visible(self) -> bool:
        return self.visibility is Visibility.VISIBLE

    def to_dict(self):
        return {
            'visibility': self.visibility.value,
            'resultsVisible': self.results_visible,
            'periodId': self.period_id,
            'periodChanged': self.period_changed,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
        }


def utcnow():
    return datetime.now(timezone.utc)


class DeadlineWatcher:

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._listeners: List[Callable[[DeadlineChange], None]] = []
        self.visibility = Visibility.UNKNOWN
        self.period_id: Optional[str] = None
        self.start_date: Optional[datetime] = None
        self.end_date: Optional[datetime] = None

    @property
    def results_visible(self) -> bool:
        return self.visibility is Visibility.VISIBLE

    def subscribe(self, listener):
        """Register ``listener(change)``; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def snapshot(self) -> DeadlineChange:
        return DeadlineChange(self.visibility, self.period_id, self.period_id,
                              self.start_date, self.end_date)

    # -- Reducers ------------------------------------------------------------

    def apply_deadline_update(self, deadline: Optional[EvaluationDeadline], now=None):
        """Handle a pushed deadline document, or its absence."""
        if deadline is None:
            # No deadline configured: nothing to hide
            return self._commit(Visibility.VISIBLE, None, None, None)

        now = now or self._clock()
        visibility = Visibility.VISIBLE if now >= deadline.end_date else Visibility.HIDDEN
        return self._commit(visibility, deadline.resolved_period_id,
                            deadline.start_date, deadline.end_date)

    def apply_tick(self, now=None):
        """Re-derive visibility from the last pushed end date."""
        if self.end_date is None:
            return None
        now = now or self._clock()
        visibility = Visibility.VISIBLE if now >= self.end_date else Visibility.HIDDEN
        if visibility is not self.visibility:
            logger.info('Deadline status changed via time check: %s (end %s)',
                        visibility.value, self.end_date.isoformat())
        return self._commit(visibility, self.period_id, self.start_date, self.end_date)

    def apply_error(self, error):
        """Subscription failures fail open so results are never stuck hidden."""
        logger.error('Error listening to deadline: %s', error)
        return self._commit(Visibility.VISIBLE, self.period_id, self.start_date, self.end_date)

    # -- Single mutation point -------------------------------------------------

    def _commit(self, visibility, period_id, start_date, end_date):
        previous_period_id = self.period_id
        changed = visibility is not self.visibility or period_id != previous_period_id

        self.visibility = visibility
        self.period_id = period_id
        self.start_date = start_date
        self.end_date = end_date

        if not changed:
            return None

        change = DeadlineChange(visibility, period_id, previous_period_id, start_date, end_date)
        if change.period_changed:
            logger.info('New evaluation period detected: %s -> %s', previous_period_id, period_id)
        for listener in list(self._listeners):
            listener(change)
        return change
