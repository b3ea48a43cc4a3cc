import logging

from flask import Blueprint, current_app, g, jsonify

from app.aggregator import ResultAggregator
from app.deadline import DeadlineWatcher
from app.decorators import auth_required
from app.errors import TransportError
from app.firestore_models import EvaluationDeadline
from app.services import analytics

logger = logging.getLogger(__name__)

bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


def _load_results(professor):
    """One-shot read through the same watcher/aggregator the live view uses."""
    repository = current_app.extensions['dashboard_repository']
    watcher = DeadlineWatcher()
    aggregator = ResultAggregator(watcher)
    watcher.subscribe(aggregator.on_deadline_change)

    try:
        data = repository.get_current_deadline()
        deadline = EvaluationDeadline.from_dict(data) if data is not None else None
    except (TransportError, ValueError) as e:
        watcher.apply_error(e)
    else:
        watcher.apply_deadline_update(deadline)

    if aggregator.active:
        try:
            aggregator.apply_snapshot(repository.get_evaluation_results(professor.email))
        except TransportError as e:
            aggregator.apply_error(e)
    return watcher, aggregator


@bp.route('/summary')
@auth_required
def summary():
    professor = g.current_professor
    watcher, aggregator = _load_results(professor)

    repository = current_app.extensions['dashboard_repository']
    try:
        students = repository.get_student_accounts()
    except TransportError as e:
        logger.error('Error fetching students: %s', e)
        students = []

    return jsonify({
        'professor': professor.to_public_dict(),
        'deadline': watcher.snapshot().to_dict(),
        'evaluations': aggregator.to_dict(),
        'totalStudents': analytics.count_active_students(professor, students),
    })


@bp.route('/sections')
@auth_required
def sections():
    watcher, aggregator = _load_results(g.current_professor)
    return jsonify({
        'resultsVisible': watcher.results_visible,
        'sections': aggregator.sections() if aggregator.results else [],
    })


@bp.route('/sections/<path:section>')
@auth_required
def section_detail(section):
    watcher, aggregator = _load_results(g.current_professor)
    if not aggregator.results:
        return jsonify({'resultsVisible': watcher.results_visible, 'breakdown': None})
    return jsonify({
        'resultsVisible': watcher.results_visible,
        'breakdown': aggregator.section_breakdown(section),
    })
