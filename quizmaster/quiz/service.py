"""
Quiz catalog operations.

Routes stay thin: every authorship and "no edits after submissions"
rule lives here so it holds for every caller.
"""
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from quizmaster import db
from quizmaster.auth.models import User
from quizmaster.common.errors import ConflictError, ForbiddenError, NotFoundError
from quizmaster.common.pagination import paginate
from quizmaster.quiz.models import Question, Quiz


def _build_questions(quiz: Quiz, drafts: list[dict]) -> list[Question]:
    return [Question(quiz=quiz, **draft) for draft in drafts]


def create_quiz(draft: dict, teacher_id: int) -> Quiz:
    """
    Persist a validated quiz draft and its questions in one transaction.

    Args:
        draft: Output of ``validators.clean_quiz_draft``
        teacher_id: Owner of the new quiz
    """
    quiz = Quiz(
        title=draft["title"],
        description=draft.get("description"),
        time_limit=draft["time_limit"],
        published=draft.get("published", False),
        teacher_id=teacher_id,
    )
    try:
        db.session.add(quiz)
        db.session.add_all(_build_questions(quiz, draft["questions"]))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Quiz created: id={quiz.id}, teacher_id={teacher_id}, questions={len(draft['questions'])}"
    )
    return quiz


def list_quizzes(published: Optional[bool] = None, teacher_id: Optional[int] = None,
                 search: Optional[str] = None, page: int = 1, limit: int = 10) -> tuple[list[Quiz], dict]:
    """List non-deleted quizzes, newest first, with optional filters."""
    query = Quiz.active()

    if published is not None:
        query = query.filter(Quiz.published.is_(published))

    if teacher_id is not None:
        query = query.filter(Quiz.teacher_id == teacher_id)

    if search:
        query = query.filter(or_(
            Quiz.title.icontains(search, autoescape=True),
            Quiz.description.icontains(search, autoescape=True),
        ))

    query = query.order_by(Quiz.created_at.desc(), Quiz.id.desc())
    return paginate(query, page, limit)


def get_quiz(quiz_id: int) -> Quiz:
    """Fetch a non-deleted quiz or raise NotFoundError."""
    quiz = Quiz.active().filter(Quiz.id == quiz_id).first()
    if quiz is None:
        raise NotFoundError(f"Quiz with ID {quiz_id} not found")
    return quiz


def can_view_answers(quiz: Quiz, user: User) -> bool:
    """Answer keys are visible to the owning teacher and to admins only."""
    return user.is_admin() or quiz.is_owned_by(user.id)


def _get_owned_quiz(quiz_id: int, actor_id: int, action: str) -> Quiz:
    quiz = get_quiz(quiz_id)
    if not quiz.is_owned_by(actor_id):
        current_app.logger.warning(
            f"Quiz {action} refused: quiz_id={quiz_id}, owner={quiz.teacher_id}, actor={actor_id}"
        )
        raise ForbiddenError(f"You can only {action} your own quizzes")
    return quiz


def update_quiz(quiz_id: int, patch: dict, actor_id: int) -> Quiz:
    """
    Apply a validated patch to a quiz.

    A quiz that already has submissions is frozen. When the patch carries
    ``questions`` the current questions are soft-deleted and the new set is
    created in the same transaction as the field updates.
    """
    quiz = _get_owned_quiz(quiz_id, actor_id, "update")

    if quiz.has_submissions():
        raise ConflictError(
            "Cannot modify a quiz that has existing submissions. Create a new quiz instead."
        )

    try:
        for field in ("title", "description", "time_limit", "published"):
            if field in patch:
                setattr(quiz, field, patch[field])

        if "questions" in patch:
            now = datetime.utcnow()
            Question.active().filter(Question.quiz_id == quiz.id).update(
                {Question.deleted_at: now}, synchronize_session=False
            )
            db.session.add_all(_build_questions(quiz, patch["questions"]))

        quiz.updated_at = datetime.utcnow()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Quiz updated: id={quiz.id}, fields={sorted(patch)}, actor={actor_id}"
    )
    return quiz


def remove_quiz(quiz_id: int, actor_id: int) -> Quiz:
    """Soft-delete a quiz. Questions and submissions are left untouched."""
    quiz = _get_owned_quiz(quiz_id, actor_id, "delete")

    try:
        quiz.deleted_at = datetime.utcnow()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(f"Quiz removed: id={quiz.id}, actor={actor_id}")
    return quiz
