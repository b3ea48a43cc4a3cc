from datetime import datetime, timedelta, timezone

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


def deadline_doc(start=T0, end=None, period_id=None):
    d = {
        'startDate': start,
        'endDate': end or start + timedelta(days=7),
        'isActive': True,
    }
    if period_id:
        d['periodId'] = period_id
    return d


def result_doc(answers, complete=True, email='maria@college.edu', period_id=None,
               created_at=None, section='Instructional Competence', question_type='rating'):
    d = {
        'professorEmail': email,
        'professorId': 'prof-1',
        'professorName': 'Maria Santos',
        'departmentName': 'Computer Science',
        'evaluationStatus': 'completed' if complete else 'in_progress',
        'isComplete': complete,
        'responses': [
            {
                'questionText': f'Question {i + 1}',
                'questionType': question_type,
                'answer': answer,
                'section': section,
            }
            for i, answer in enumerate(answers)
        ],
    }
    if period_id:
        d['evaluationPeriodId'] = period_id
    if created_at is not None:
        d['createdAt'] = created_at
    return d
