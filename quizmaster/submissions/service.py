"""
Submission lifecycle: start -> submit (terminal).

A submission is created open by ``start``, scored and frozen by ``submit``
and never modified afterwards. Reads are folded into the ownership check so
another user's submission looks exactly like a missing one.
"""
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quizmaster import db
from quizmaster.common.errors import BadRequestError, NotFoundError, ValidationError
from quizmaster.common.pagination import paginate
from quizmaster.quiz.models import OPTION_COUNT, Quiz
from quizmaster.submissions.models import Answer, Submission


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _get_own_submission(submission_id: int, user_id: int) -> Submission:
    submission = Submission.query.filter_by(id=submission_id, user_id=user_id).first()
    if submission is None:
        raise NotFoundError("Submission not found")
    return submission


def start(quiz_id: int, user_id: int) -> Submission:
    """
    Open a new attempt at a published quiz.

    Raises:
        NotFoundError: quiz missing, soft-deleted or unpublished
        BadRequestError: the user already has an open attempt at this quiz
    """
    quiz = Quiz.active().filter(Quiz.id == quiz_id, Quiz.published.is_(True)).first()
    if quiz is None:
        raise NotFoundError("Quiz not found or not published")

    open_attempt = Submission.query.filter_by(
        user_id=user_id, quiz_id=quiz_id, submitted_at=None
    ).first()
    if open_attempt is not None:
        raise BadRequestError("You already have an active submission for this quiz")

    submission = Submission(
        user_id=user_id,
        quiz_id=quiz.id,
        total_questions=quiz.get_question_count(),
        in_progress=True,
    )
    db.session.add(submission)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent start for the same pair won the race
        db.session.rollback()
        raise BadRequestError("You already have an active submission for this quiz")

    current_app.logger.info(
        f"Submission started: id={submission.id}, quiz_id={quiz.id}, user_id={user_id}"
    )
    return submission


def _clean_answers(answers) -> dict[int, int]:
    """Map question_id -> selected_option, rejecting malformed entries."""
    if not isinstance(answers, list):
        raise ValidationError("answers must be a list")

    selected = {}
    for position, answer in enumerate(answers, start=1):
        if not isinstance(answer, dict):
            raise ValidationError(f"Answer {position} must be an object")
        question_id = answer.get("question_id")
        option = answer.get("selected_option")
        if not _is_int(question_id):
            raise ValidationError(f"Answer {position}: question_id must be an integer")
        if not _is_int(option) or not 0 <= option < OPTION_COUNT:
            raise ValidationError(
                f"Answer {position}: selected_option must be an integer between 0 and {OPTION_COUNT - 1}"
            )
        if question_id in selected:
            raise ValidationError("All questions must be answered")
        selected[question_id] = option
    return selected


def _check_deadline(submission: Submission) -> None:
    if not current_app.config.get("ENFORCE_TIME_LIMIT"):
        return
    grace = current_app.config.get("TIME_LIMIT_GRACE_SECONDS", 0)
    deadline = submission.started_at + timedelta(minutes=submission.quiz.time_limit, seconds=grace)
    if datetime.utcnow() > deadline:
        current_app.logger.warning(
            f"Late submission rejected: id={submission.id}, deadline={deadline.isoformat()}"
        )
        raise BadRequestError("Time limit for this quiz has expired")


def submit(submission_id: int, answers, user_id: int) -> Submission:
    """
    Score an open attempt and freeze it.

    Every current question of the quiz must be answered exactly once.
    Answers and the score are written in a single commit.

    Args:
        submission_id: The open submission
        answers: List of ``{"question_id": int, "selected_option": int}``
        user_id: The caller; must own the submission
    """
    submission = _get_own_submission(submission_id, user_id)

    if submission.is_submitted:
        raise BadRequestError("Quiz has already been submitted")

    selected = _clean_answers(answers)
    questions = {q.id: q for q in submission.quiz.active_questions().all()}

    for question_id in selected:
        if question_id not in questions:
            raise BadRequestError(f"Question {question_id} not found in this quiz")

    if set(selected) != set(questions):
        raise ValidationError("All questions must be answered")

    _check_deadline(submission)

    score = 0
    rows = []
    for question_id, option in selected.items():
        is_correct = questions[question_id].is_correct(option)
        if is_correct:
            score += 1
        rows.append(Answer(
            submission_id=submission.id,
            question_id=question_id,
            selected_option=option,
            is_correct=is_correct,
        ))

    try:
        db.session.add_all(rows)
        submission.score = score
        submission.submitted_at = datetime.utcnow()
        submission.in_progress = None
        db.session.commit()
    except IntegrityError:
        # A concurrent submit of the same attempt committed first
        db.session.rollback()
        raise BadRequestError("Quiz has already been submitted")
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Submission scored: id={submission.id}, score={score}/{len(questions)}, user_id={user_id}"
    )
    return submission


def list_mine(user_id: int, page: int = 1, limit: int = 10) -> tuple[list[Submission], dict]:
    """The caller's submissions, newest first."""
    query = Submission.query.filter_by(user_id=user_id).order_by(
        Submission.started_at.desc(), Submission.id.desc()
    )
    return paginate(query, page, limit)


def get(submission_id: int, user_id: int) -> Submission:
    return _get_own_submission(submission_id, user_id)


def list_for_quiz(quiz_id: int, teacher_id: int) -> list[Submission]:
    """
    Every submission for a quiz owned by ``teacher_id``.

    Submitted attempts come first, most recent first; open attempts last.
    """
    quiz = Quiz.active().filter(Quiz.id == quiz_id, Quiz.teacher_id == teacher_id).first()
    if quiz is None:
        raise NotFoundError("Quiz not found or you do not have access")

    return (
        Submission.query.filter_by(quiz_id=quiz.id)
        .order_by(
            Submission.submitted_at.is_(None),
            Submission.submitted_at.desc(),
            Submission.id.desc(),
        )
        .all()
    )
