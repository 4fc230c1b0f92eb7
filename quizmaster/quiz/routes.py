"""
Quiz catalog routes.

Teachers (and admins) create, update and soft-delete their own quizzes.
Any signed-in user can list and read them; answer keys are only shown
to the owning teacher or an admin.
"""
from flask import jsonify, request
from flask_login import current_user, login_required

from quizmaster.common.decorators import teacher_required
from quizmaster.common.errors import ValidationError
from quizmaster.common.pagination import parse_page_args
from quizmaster.quiz import quiz_bp, service
from quizmaster.quiz.validators import clean_quiz_draft, clean_quiz_patch
from quizmaster.submissions import service as submission_service


def _parse_bool_arg(name: str):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValidationError(f"{name} must be 'true' or 'false'")


def _parse_int_arg(name: str):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


@quiz_bp.route("", methods=["GET"])
@login_required
def list_quizzes():
    """
    List quizzes, newest first.

    Query params: published, teacher_id, search, page, limit
    """
    page, limit = parse_page_args()
    search = (request.args.get("search") or "").strip() or None

    quizzes, meta = service.list_quizzes(
        published=_parse_bool_arg("published"),
        teacher_id=_parse_int_arg("teacher_id"),
        search=search,
        page=page,
        limit=limit,
    )

    data = []
    for quiz in quizzes:
        item = quiz.summary_dict()
        item["question_count"] = quiz.get_question_count()
        data.append(item)

    return jsonify({"data": data, "meta": meta}), 200


@quiz_bp.route("/<int:quiz_id>", methods=["GET"])
@login_required
def get_quiz(quiz_id):
    quiz = service.get_quiz(quiz_id)
    include_answers = service.can_view_answers(quiz, current_user)
    return jsonify(quiz.to_dict(include_answers=include_answers)), 200


@quiz_bp.route("", methods=["POST"])
@teacher_required
def create_quiz():
    """
    Create a quiz with its questions.

    Request body:
    {
        "title": "Python Basics",
        "description": "Optional",
        "time_limit": 30,              // minutes, 1..180
        "published": false,            // optional
        "questions": [
            {
                "text": "What does len() return?",
                "options": ["a", "b", "c", "d"],
                "correct_option": 0,   // 0..3
                "explanation": "Optional",
                "order": 0             // optional, defaults to position
            }
        ]
    }
    """
    draft = clean_quiz_draft(request.get_json(silent=True))
    quiz = service.create_quiz(draft, current_user.id)
    return jsonify(quiz.to_dict(include_answers=True)), 201


@quiz_bp.route("/<int:quiz_id>", methods=["PUT", "PATCH"])
@teacher_required
def update_quiz(quiz_id):
    """Update any subset of title, description, time_limit, published, questions."""
    patch = clean_quiz_patch(request.get_json(silent=True))
    quiz = service.update_quiz(quiz_id, patch, current_user.id)
    return jsonify(quiz.to_dict(include_answers=True)), 200


@quiz_bp.route("/<int:quiz_id>", methods=["DELETE"])
@teacher_required
def delete_quiz(quiz_id):
    quiz = service.remove_quiz(quiz_id, current_user.id)
    return jsonify(quiz.to_dict(include_questions=False)), 200


@quiz_bp.route("/<int:quiz_id>/submissions", methods=["GET"])
@teacher_required
def list_quiz_submissions(quiz_id):
    """All submissions for one of the caller's quizzes."""
    submissions = submission_service.list_for_quiz(quiz_id, current_user.id)
    return jsonify([s.to_teacher_dict() for s in submissions]), 200
