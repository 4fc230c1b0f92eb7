"""
``flask seed``: wipe the database and load demo data.

Demo accounts share the password from SEED_PASSWORD.
"""
from datetime import datetime

import click
from flask import Flask, current_app

from quizmaster import db
from quizmaster.auth.models import User
from quizmaster.auth.utils import hash_password
from quizmaster.quiz.models import OPTION_COUNT, Question, Quiz
from quizmaster.submissions.models import Answer, Submission


DEMO_USERS = [
    ("teacher1@demo.com", "Alice Teacher", "TEACHER"),
    ("teacher2@demo.com", "Bob Teacher", "TEACHER"),
    ("student1@demo.com", "Charlie Student", "STUDENT"),
    ("student2@demo.com", "Dana Student", "STUDENT"),
    ("student3@demo.com", "Evan Student", "STUDENT"),
]

PYTHON_BASICS = [
    ("Which keyword defines a function in Python?",
     ["func", "def", "lambda", "fn"], 1,
     "def starts a function definition; lambda builds an anonymous expression."),
    ("What does len([1, 2, 3]) return?",
     ["2", "3", "4", "An error"], 1,
     "len returns the number of items in a container."),
    ("Which of these types is immutable?",
     ["list", "dict", "set", "tuple"], 3,
     "Tuples cannot be changed after creation."),
    ("How do you start a comment in Python?",
     ["//", "#", "--", "/*"], 1,
     "Everything after # on a line is ignored."),
    ("Which statement handles an exception?",
     ["try/except", "catch/throw", "do/rescue", "begin/end"], 0,
     "try/except catches exceptions raised in the try block."),
]

SQL_FUNDAMENTALS = [
    ("Which clause filters rows before grouping?",
     ["HAVING", "WHERE", "ORDER BY", "LIMIT"], 1,
     "WHERE filters rows; HAVING filters groups."),
    ("Which join returns only matching rows from both tables?",
     ["LEFT JOIN", "RIGHT JOIN", "INNER JOIN", "FULL JOIN"], 2,
     "INNER JOIN keeps rows with a match on both sides."),
    ("Which statement removes rows from a table?",
     ["DROP", "DELETE", "REMOVE", "TRUNCATE COLUMN"], 1,
     "DELETE removes rows; DROP removes the whole table."),
    ("What does COUNT(*) return for an empty table?",
     ["NULL", "0", "1", "An error"], 1,
     "COUNT never returns NULL."),
    ("Which constraint forbids duplicate values in a column?",
     ["CHECK", "DEFAULT", "UNIQUE", "FOREIGN KEY"], 2,
     "UNIQUE rejects a second row with the same value."),
]


def _clear_data() -> None:
    for model in (Answer, Submission, Question, Quiz, User):
        model.query.delete()
    db.session.flush()


def _create_quiz(teacher: User, title: str, description: str, time_limit: int, questions) -> Quiz:
    quiz = Quiz(title=title, description=description, time_limit=time_limit,
                published=True, teacher_id=teacher.id)
    db.session.add(quiz)
    for order, (text, options, correct_option, explanation) in enumerate(questions, start=1):
        db.session.add(Question(quiz=quiz, text=text, options=options,
                                correct_option=correct_option, explanation=explanation, order=order))
    db.session.flush()
    return quiz


def _create_graded_submission(student: User, quiz: Quiz) -> Submission:
    """A finished attempt with every other answer correct."""
    questions = quiz.active_questions().all()
    submission = Submission(user_id=student.id, quiz_id=quiz.id,
                            total_questions=len(questions), in_progress=None)
    db.session.add(submission)
    db.session.flush()

    score = 0
    for idx, question in enumerate(questions):
        selected = question.correct_option if idx % 2 == 0 else (question.correct_option + 1) % OPTION_COUNT
        is_correct = question.is_correct(selected)
        score += int(is_correct)
        db.session.add(Answer(submission_id=submission.id, question_id=question.id,
                              selected_option=selected, is_correct=is_correct))

    submission.score = score
    submission.submitted_at = datetime.utcnow()
    return submission


def seed_demo_data() -> dict:
    """Replace all data with demo users, quizzes and submissions."""
    _clear_data()

    password_hash = hash_password(current_app.config["SEED_PASSWORD"])
    users = {}
    for email, name, role in DEMO_USERS:
        user = User(email=email, name=name, role=role, password_hash=password_hash)
        db.session.add(user)
        users[email] = user
    db.session.flush()

    python_quiz = _create_quiz(users["teacher1@demo.com"], "Python Basics",
                               "Core Python syntax and built-in types.", 30, PYTHON_BASICS)
    sql_quiz = _create_quiz(users["teacher2@demo.com"], "SQL Fundamentals",
                            "Querying and constraining relational data.", 45, SQL_FUNDAMENTALS)

    _create_graded_submission(users["student1@demo.com"], python_quiz)
    _create_graded_submission(users["student2@demo.com"], python_quiz)
    _create_graded_submission(users["student3@demo.com"], sql_quiz)
    _create_graded_submission(users["student1@demo.com"], sql_quiz)

    db.session.commit()
    return {"users": len(users), "quizzes": 2, "submissions": 4}


def register_commands(app: Flask) -> None:
    @app.cli.command("seed")
    def seed_command():
        """Wipe the database and load demo data."""
        counts = seed_demo_data()
        current_app.logger.info(f"Seed completed: {counts}")
        click.echo(
            f"Seeded {counts['users']} users, {counts['quizzes']} quizzes, "
            f"{counts['submissions']} submissions"
        )
