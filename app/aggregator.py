"""
Period-scoped aggregation of a professor's evaluation results.
"""

import logging

from app.firestore_models import EvaluationResult, normalize_timestamp
from app.services import analytics

logger = logging.getLogger(__name__)


def belongs_to_period(result, period_id, start_date):
    """Whether ``result`` belongs to the evaluation period ``period_id``.

    A tagged result matches on its tag alone. An untagged one matches when
    it was created (or, lacking that, submitted) no earlier than the
    period's start. Untagged results without any timestamp are kept;
    those whose timestamp cannot be read are dropped.
    """
    if result.evaluation_period_id:
        return result.evaluation_period_id == period_id

    raw = result.created_at or result.submitted_at
    if raw is None or start_date is None:
        return True
    created = normalize_timestamp(raw)
    if created is None:
        logger.debug('Dropping result %s with unreadable timestamp %r', result.id, raw)
        return False
    return created >= start_date


class ResultAggregator:
    """Holds the current period's results and their summary.

    Active only while the watcher reports results as visible for a known
    period. The watcher is read at the moment each batch is filtered, never
    from a cached copy.
    """

    def __init__(self, watcher):
        self.watcher = watcher
        self.results = []
        self.summary = analytics.summarize([])
        self.loading = False

    @property
    def active(self):
        return self.watcher.results_visible and self.watcher.period_id is not None

    def on_deadline_change(self, change):
        if change.period_changed or not change.results_visible:
            if self.results:
                logger.info('Clearing %d results for period %s', len(self.results),
                            change.previous_period_id)
            self.clear()
        self.loading = self.active

    def clear(self):
        self.results = []
        self.summary = analytics.summarize([])

    def apply_snapshot(self, documents):
        """Replace the result set with the matching subset of ``documents``.

        ``documents`` are raw dicts or EvaluationResult instances. Returns
        False, without touching state, while inactive.
        """
        if not self.active:
            return False

        period_id = self.watcher.period_id
        start_date = self.watcher.start_date
        results = []
        for doc in documents:
            result = doc if isinstance(doc, EvaluationResult) else EvaluationResult.from_dict(doc, doc.get('id'))
            if belongs_to_period(result, period_id, start_date):
                results.append(result)

        logger.info('Evaluation update for period %s: %d of %d results',
                    period_id, len(results), len(documents))
        self.results = results
        self.summary = analytics.summarize(results)
        self.loading = False
        return True

    def apply_error(self, error):
        """Keep the last good result set; only stop reporting as loading."""
        logger.error('Error listening to evaluations: %s', error)
        self.loading = False

    # -- Presentation helpers -------------------------------------------------

    def sections(self):
        return analytics.available_sections(self.results)

    def section_breakdown(self, section):
        return analytics.section_breakdown(self.results, section)

    def to_dict(self):
        return {
            'active': self.active,
            'loading': self.loading,
            'periodId': self.watcher.period_id,
            'resultCount': len(self.results),
            'summary': self.summary.to_dict(),
            'sections': self.sections() if self.results else [],
        }
