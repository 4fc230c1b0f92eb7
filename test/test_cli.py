"""
Test cases for the ``flask seed`` command.
"""
from quizmaster.auth.models import User
from quizmaster.quiz.models import Question, Quiz
from quizmaster.submissions.models import Answer, Submission


class TestSeedCommand:

    def test_seed_loads_demo_data(self, app):
        result = app.test_cli_runner().invoke(args=['seed'])
        assert result.exit_code == 0, result.output
        assert 'Seeded 5 users, 2 quizzes, 4 submissions' in result.output

        with app.app_context():
            assert User.query.filter_by(role='TEACHER').count() == 2
            assert User.query.filter_by(role='STUDENT').count() == 3
            assert Quiz.query.filter_by(published=True).count() == 2
            assert Question.query.count() == 10
            assert Submission.query.filter(Submission.submitted_at.isnot(None)).count() == 4
            assert Answer.query.count() == 20
            # every other answer correct: questions 1, 3 and 5
            assert {s.score for s in Submission.query.all()} == {3}

    def test_seed_is_repeatable(self, app):
        runner = app.test_cli_runner()
        runner.invoke(args=['seed'])
        result = runner.invoke(args=['seed'])
        assert result.exit_code == 0, result.output

        with app.app_context():
            assert User.query.count() == 5

    def test_seeded_account_can_log_in(self, app, client):
        app.test_cli_runner().invoke(args=['seed'])
        response = client.post('/api/auth/login', json={
            'email': 'teacher1@demo.com',
            'password': app.config['SEED_PASSWORD'],
        })
        assert response.status_code == 201
