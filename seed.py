import random
from datetime import datetime, timezone, timedelta
from app import create_app, bcrypt
from app import firestore_dao as dao
from app.services.analytics import SECTIONS
from app.firestore_models import ANSWER_ORDER


QUESTIONS = {
    'Instructional Competence': [
        'Explains the lesson clearly',
        'Relates the subject to real-life situations',
        'Uses varied teaching strategies',
    ],
    'Classroom Management': [
        'Starts and ends class on time',
        'Maintains an orderly learning environment',
    ],
    'Research': [
        'Integrates current research into lessons',
    ],
    'Student Support & Development': [
        'Is available for consultation',
        'Gives timely feedback on outputs',
    ],
    'Professionalism & Personal Qualities': [
        'Treats students with respect',
        'Comes to class prepared',
    ],
}
COMMENTS = [
    'Very approachable and patient.',
    'Please post the slides before class.',
    'Great examples during lectures.',
    '',
]


def _responses(rng):
    responses = []
    for section in SECTIONS:
        for question in QUESTIONS.get(section, []):
            responses.append({
                'questionText': question,
                'questionType': 'rating',
                'answer': rng.choices(ANSWER_ORDER, weights=[5, 4, 2, 1, 1])[0],
                'section': section,
            })
    responses.append({
        'questionText': 'Comments and suggestions',
        'questionType': 'text',
        'answer': rng.choice(COMMENTS),
        'section': 'verbal interpretation',
    })
    return responses


def seed_database():
    app = create_app()
    rng = random.Random(7)
    with app.app_context():
        password = 'password123'
        now = datetime.now(timezone.utc)

        print("Creating professors...")
        professors = [
            ('prof-santos', 'Maria Santos', 'maria.santos@example.edu', 'Active',
             [{'subject': 'Data Structures', 'sections': ['BSCS-2A', 'BSCS-2B']}]),
            ('prof-reyes', 'Jose Reyes', 'jose.reyes@example.edu', 'Active',
             [{'subject': 'Calculus I', 'sections': ['BSMATH-1A']}]),
            ('prof-cruz', 'Ana Cruz', 'ana.cruz@example.edu', 'Retired',
             [{'subject': 'Philosophy', 'sections': ['AB-3A']}]),
        ]
        for professor_id, name, email, status, subject_sections in professors:
            dao.create_professor(professor_id, {
                'name': name,
                'email': email,
                'departmentId': 'dept-cas',
                'departmentName': 'College of Arts and Sciences',
                'passwordHash': bcrypt.generate_password_hash(password).decode('utf-8'),
                'status': status,
                'subjectSections': subject_sections,
                'subjects': [s['subject'] for s in subject_sections],
                'imageUrl': '',
            })

        print("Creating students...")
        sections = ['BSCS-2A', 'BSCS-2B', 'BSMATH-1A', 'AB-3A']
        for i in range(1, 41):
            dao.create_student_account({
                'name': f'Student {i}',
                'email': f'student{i}@example.edu',
                'section': sections[i % len(sections)],
                'accountStatus': 'active' if i % 10 else 'inactive',
            })

        print("Creating evaluation deadline...")
        start = now - timedelta(days=14)
        end = now - timedelta(days=1)
        period_id = f'period_{int(start.timestamp() * 1000)}'
        dao.set_current_deadline({
            'startDate': start,
            'endDate': end,
            'isActive': True,
            'periodId': period_id,
        })

        print("Creating evaluation results...")
        for professor_id, name, email, status, _ in professors[:2]:
            for i in range(12):
                complete = i % 6 != 5
                dao.create_evaluation_result({
                    'professorEmail': email,
                    'professorId': professor_id,
                    'professorName': name,
                    'departmentName': 'College of Arts and Sciences',
                    'evaluationStatus': 'completed' if complete else 'in_progress',
                    'isComplete': complete,
                    'responses': _responses(rng),
                    'evaluationPeriodId': period_id,
                    'createdAt': start + timedelta(days=1, hours=i),
                })
            # From the previous period; never counted
            dao.create_evaluation_result({
                'professorEmail': email,
                'professorId': professor_id,
                'professorName': name,
                'isComplete': True,
                'evaluationStatus': 'completed',
                'responses': _responses(rng),
                'createdAt': start - timedelta(days=120),
            })

        print("\n" + "=" * 60)
        print("    Test accounts")
        print("=" * 60)
        for _, name, email, status, _ in professors:
            print(f"  {name} ({status}): {email}")
        print(f"  Password: {password} (all accounts)")
        print("\n" + "=" * 60)
        print("Database seeded.")


if __name__ == '__main__':
    seed_database()
