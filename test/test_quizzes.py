"""
Test cases for the quiz catalog: authoring, listing, visibility of
answer keys, updates and soft deletion.
"""
import pytest

from conftest import question_payload, quiz_payload
from quizmaster import db
from quizmaster.quiz.models import Question, Quiz
from quizmaster.submissions.models import Submission


class TestCreateQuiz:
    """Test cases for quiz creation."""

    def test_create_quiz_with_questions(self, client, teacher):
        """A quiz with N questions persists N questions retrievable by get."""
        response = client.post('/api/quizzes', json=quiz_payload(correct_options=(0, 1, 2)),
                               headers=teacher['headers'])
        assert response.status_code == 201
        body = response.get_json()
        assert body['teacher_id'] == teacher['id']
        assert body['teacher']['id'] == teacher['id']
        assert len(body['questions']) == 3
        assert [q['correct_option'] for q in body['questions']] == [0, 1, 2]

        fetched = client.get(f"/api/quizzes/{body['id']}", headers=teacher['headers'])
        assert fetched.status_code == 200
        assert len(fetched.get_json()['questions']) == 3

    def test_published_defaults_to_false(self, client, teacher):
        payload = quiz_payload()
        del payload['published']
        response = client.post('/api/quizzes', json=payload, headers=teacher['headers'])
        assert response.status_code == 201
        assert response.get_json()['published'] is False

    def test_admin_can_create(self, client, admin):
        response = client.post('/api/quizzes', json=quiz_payload(), headers=admin['headers'])
        assert response.status_code == 201

    def test_student_cannot_create(self, client, student):
        response = client.post('/api/quizzes', json=quiz_payload(), headers=student['headers'])
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Forbidden'

    def test_anonymous_cannot_create(self, client):
        response = client.post('/api/quizzes', json=quiz_payload())
        assert response.status_code == 401

    @pytest.mark.parametrize('overrides', [
        {'title': 'ab'},
        {'title': 'x' * 201},
        {'title': None},
        {'time_limit': 0},
        {'time_limit': 181},
        {'time_limit': '30'},
        {'time_limit': True},
        {'questions': []},
        {'published': 'yes'},
    ])
    def test_invalid_quiz_fields_rejected(self, client, teacher, overrides):
        response = client.post('/api/quizzes', json=quiz_payload(**overrides),
                               headers=teacher['headers'])
        assert response.status_code == 400

    @pytest.mark.parametrize('question', [
        question_payload(text='Too short'),
        question_payload(options=['a', 'b', 'c']),
        question_payload(options=['a', 'b', 'c', 'd', 'e']),
        question_payload(options=['a', 'b', '   ', 'd']),
        question_payload(correct_option=4),
        question_payload(correct_option=-1),
        question_payload(order=-1),
    ])
    def test_invalid_question_rejected(self, app, client, teacher, question):
        response = client.post('/api/quizzes', json=quiz_payload(questions=[question]),
                               headers=teacher['headers'])
        assert response.status_code == 400
        with app.app_context():
            assert Quiz.query.count() == 0

    def test_title_is_trimmed(self, client, teacher):
        response = client.post('/api/quizzes', json=quiz_payload(title='   Trimmed title   '),
                               headers=teacher['headers'])
        assert response.get_json()['title'] == 'Trimmed title'


class TestGetQuiz:
    """Answer keys are only visible to the owner or an admin."""

    def test_owner_sees_answer_key(self, client, teacher, create_quiz):
        quiz = create_quiz()
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).get_json()
        assert all('correct_option' in q for q in body['questions'])
        assert all('explanation' in q for q in body['questions'])

    def test_admin_sees_answer_key(self, client, admin, create_quiz):
        quiz = create_quiz()
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=admin['headers']).get_json()
        assert all('correct_option' in q for q in body['questions'])

    def test_student_does_not_see_answer_key(self, client, student, create_quiz):
        quiz = create_quiz()
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=student['headers']).get_json()
        assert len(body['questions']) == 2
        assert all('correct_option' not in q for q in body['questions'])
        assert all('explanation' not in q for q in body['questions'])

    def test_other_teacher_does_not_see_answer_key(self, client, other_teacher, create_quiz):
        quiz = create_quiz()
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=other_teacher['headers']).get_json()
        assert all('correct_option' not in q for q in body['questions'])

    def test_questions_ordered_by_order(self, client, teacher):
        payload = quiz_payload(questions=[
            question_payload(text='Second question text', order=2),
            question_payload(text='First question text', order=1),
        ])
        quiz = client.post('/api/quizzes', json=payload, headers=teacher['headers']).get_json()
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).get_json()
        assert [q['text'] for q in body['questions']] == ['First question text', 'Second question text']

    def test_missing_quiz_not_found(self, client, student):
        response = client.get('/api/quizzes/9999', headers=student['headers'])
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Not Found'


class TestListQuizzes:
    """Test cases for filtering and paginating the quiz list."""

    def test_list_newest_first_with_question_count(self, client, student, create_quiz):
        first = create_quiz(title='First quiz')
        second = create_quiz(title='Second quiz', correct_options=(0, 1, 2))

        body = client.get('/api/quizzes', headers=student['headers']).get_json()
        assert [q['id'] for q in body['data']] == [second['id'], first['id']]
        assert body['data'][0]['question_count'] == 3
        assert 'questions' not in body['data'][0]
        assert body['meta'] == {'total': 2, 'page': 1, 'limit': 10, 'total_pages': 1}

    def test_filter_by_published(self, client, student, create_quiz):
        create_quiz(title='Draft quiz', published=False)
        live = create_quiz(title='Live quiz', published=True)

        body = client.get('/api/quizzes?published=true', headers=student['headers']).get_json()
        assert [q['id'] for q in body['data']] == [live['id']]

        body = client.get('/api/quizzes?published=false', headers=student['headers']).get_json()
        assert [q['title'] for q in body['data']] == ['Draft quiz']

    def test_filter_by_teacher(self, client, student, other_teacher, create_quiz):
        create_quiz(title='Mine')
        theirs = create_quiz(owner=other_teacher, title='Theirs')

        body = client.get(f"/api/quizzes?teacher_id={other_teacher['id']}",
                          headers=student['headers']).get_json()
        assert [q['id'] for q in body['data']] == [theirs['id']]

    def test_search_is_case_insensitive_on_title_and_description(self, client, student, create_quiz):
        create_quiz(title='Algebra warmup', description='Numbers')
        create_quiz(title='History', description='The ALGEBRA of empires')
        create_quiz(title='Biology', description='Cells')

        body = client.get('/api/quizzes?search=algebra', headers=student['headers']).get_json()
        assert sorted(q['title'] for q in body['data']) == ['Algebra warmup', 'History']

    def test_search_treats_wildcards_literally(self, client, student, create_quiz):
        create_quiz(title='Plain title')
        body = client.get('/api/quizzes?search=%25', headers=student['headers']).get_json()
        assert body['data'] == []

    def test_pagination(self, client, student, create_quiz):
        for idx in range(5):
            create_quiz(title=f'Quiz number {idx}')

        body = client.get('/api/quizzes?page=2&limit=2', headers=student['headers']).get_json()
        assert len(body['data']) == 2
        assert body['meta'] == {'total': 5, 'page': 2, 'limit': 2, 'total_pages': 3}

        body = client.get('/api/quizzes?page=4&limit=2', headers=student['headers']).get_json()
        assert body['data'] == []

    @pytest.mark.parametrize('query', [
        'page=0', 'limit=0', 'limit=101', 'page=abc', 'published=maybe', 'teacher_id=x',
    ])
    def test_invalid_query_rejected(self, client, student, query):
        response = client.get(f'/api/quizzes?{query}', headers=student['headers'])
        assert response.status_code == 400

    def test_soft_deleted_quizzes_excluded(self, client, teacher, create_quiz):
        quiz = create_quiz()
        client.delete(f"/api/quizzes/{quiz['id']}", headers=teacher['headers'])
        body = client.get('/api/quizzes', headers=teacher['headers']).get_json()
        assert body['data'] == []
        assert body['meta']['total'] == 0

    def test_list_requires_authentication(self, client):
        assert client.get('/api/quizzes').status_code == 401


class TestUpdateQuiz:
    """Test cases for quiz updates."""

    def test_patch_fields(self, client, teacher, create_quiz):
        quiz = create_quiz(published=False)
        response = client.patch(f"/api/quizzes/{quiz['id']}",
                                json={'title': 'Renamed quiz', 'published': True},
                                headers=teacher['headers'])
        assert response.status_code == 200
        body = response.get_json()
        assert body['title'] == 'Renamed quiz'
        assert body['published'] is True
        assert body['time_limit'] == quiz['time_limit']
        assert len(body['questions']) == 2

    def test_replace_questions_soft_deletes_old_ones(self, app, client, teacher, create_quiz):
        quiz = create_quiz(correct_options=(0, 1))
        response = client.put(f"/api/quizzes/{quiz['id']}",
                              json={'questions': [question_payload(text='Only remaining question')]},
                              headers=teacher['headers'])
        assert response.status_code == 200
        assert [q['text'] for q in response.get_json()['questions']] == ['Only remaining question']

        with app.app_context():
            rows = Question.query.filter_by(quiz_id=quiz['id']).all()
            assert len(rows) == 3
            assert sum(1 for q in rows if q.deleted_at is not None) == 2

    def test_invalid_patch_changes_nothing(self, client, teacher, create_quiz):
        quiz = create_quiz()
        response = client.patch(f"/api/quizzes/{quiz['id']}",
                                json={'title': 'Valid title', 'time_limit': 500},
                                headers=teacher['headers'])
        assert response.status_code == 400
        body = client.get(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).get_json()
        assert body['title'] == quiz['title']

    def test_non_owner_forbidden(self, client, other_teacher, create_quiz):
        quiz = create_quiz()
        response = client.patch(f"/api/quizzes/{quiz['id']}", json={'title': 'Hijacked'},
                                headers=other_teacher['headers'])
        assert response.status_code == 403

    def test_missing_quiz_not_found(self, client, teacher):
        response = client.patch('/api/quizzes/9999', json={'title': 'Nothing here'},
                                headers=teacher['headers'])
        assert response.status_code == 404

    @pytest.mark.parametrize('patch', [
        {'title': 'New title'},
        {'published': False},
        {},
        {'questions': [question_payload(text='Replacement question')]},
    ])
    def test_quiz_with_submissions_is_frozen(self, client, teacher, student, create_quiz, patch):
        quiz = create_quiz()
        started = client.post('/api/submissions/start', json={'quiz_id': quiz['id']},
                              headers=student['headers'])
        assert started.status_code == 201

        response = client.patch(f"/api/quizzes/{quiz['id']}", json=patch, headers=teacher['headers'])
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Conflict'

    def test_invalid_patch_on_frozen_quiz_is_validation_error(self, client, teacher, student, create_quiz):
        """Body validation runs before the frozen check."""
        quiz = create_quiz()
        client.post('/api/submissions/start', json={'quiz_id': quiz['id']}, headers=student['headers'])

        response = client.patch(f"/api/quizzes/{quiz['id']}", json={'time_limit': 0},
                                headers=teacher['headers'])
        assert response.status_code == 400


class TestRemoveQuiz:
    """Soft deletion keeps questions and submissions."""

    def test_remove_keeps_rows(self, app, client, teacher, student, create_quiz):
        quiz = create_quiz()
        client.post('/api/submissions/start', json={'quiz_id': quiz['id']},
                    headers=student['headers'])

        response = client.delete(f"/api/quizzes/{quiz['id']}", headers=teacher['headers'])
        assert response.status_code == 200
        assert response.get_json()['deleted_at'] is not None

        assert client.get(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).status_code == 404

        with app.app_context():
            assert db.session.get(Quiz, quiz['id']) is not None
            assert Question.query.filter_by(quiz_id=quiz['id']).count() == 2
            assert Submission.query.filter_by(quiz_id=quiz['id']).count() == 1

    def test_non_owner_forbidden(self, client, other_teacher, create_quiz):
        quiz = create_quiz()
        response = client.delete(f"/api/quizzes/{quiz['id']}", headers=other_teacher['headers'])
        assert response.status_code == 403

    def test_remove_twice_not_found(self, client, teacher, create_quiz):
        quiz = create_quiz()
        assert client.delete(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).status_code == 200
        assert client.delete(f"/api/quizzes/{quiz['id']}", headers=teacher['headers']).status_code == 404

    def test_failed_commit_leaves_quiz_active(self, app, teacher, create_quiz, monkeypatch):
        from sqlalchemy.exc import OperationalError
        from quizmaster.quiz import service

        quiz = create_quiz()

        def failing_commit():
            raise OperationalError("UPDATE quizzes", {}, Exception("database is locked"))

        with app.app_context():
            monkeypatch.setattr(db.session, 'commit', failing_commit)
            with pytest.raises(OperationalError):
                service.remove_quiz(quiz['id'], teacher['id'])

            assert db.session.get(Quiz, quiz['id']).deleted_at is None
