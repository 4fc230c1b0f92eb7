"""
Submission routes.

Students start an attempt, submit their answers once and read back their
own history. The quiz owner's view of submissions lives under
``/quizzes/<id>/submissions``.
"""
from flask import jsonify
from flask_login import current_user, login_required

from quizmaster.common.decorators import student_required
from quizmaster.common.errors import ValidationError, get_json_object
from quizmaster.common.pagination import parse_page_args
from quizmaster.submissions import service, submissions_bp


@submissions_bp.route("/start", methods=["POST"])
@student_required
def start_submission():
    """
    Start a timed attempt.

    Request body:
    {
        "quiz_id": 1
    }
    """
    data = get_json_object()
    quiz_id = data.get("quiz_id")
    if not isinstance(quiz_id, int) or isinstance(quiz_id, bool):
        raise ValidationError("quiz_id must be an integer")

    submission = service.start(quiz_id, current_user.id)
    return jsonify(submission.to_detail_dict()), 201


@submissions_bp.route("/<int:submission_id>/submit", methods=["POST"])
@login_required
def submit_submission(submission_id):
    """
    Submit answers for an open attempt.

    Request body:
    {
        "answers": [
            {"question_id": 1, "selected_option": 2}
        ]
    }
    """
    data = get_json_object()
    submission = service.submit(submission_id, data.get("answers"), current_user.id)
    return jsonify(submission.to_detail_dict()), 201


@submissions_bp.route("/my-submissions", methods=["GET"])
@login_required
def my_submissions():
    page, limit = parse_page_args()
    submissions, meta = service.list_mine(current_user.id, page, limit)
    return jsonify({
        "data": [s.to_summary_dict() for s in submissions],
        "meta": meta,
    }), 200


@submissions_bp.route("/<int:submission_id>", methods=["GET"])
@login_required
def get_submission(submission_id):
    submission = service.get(submission_id, current_user.id)
    return jsonify(submission.to_detail_dict()), 200
