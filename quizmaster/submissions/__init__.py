"""
Submissions: a student's timed attempt at a quiz, from start to score.
"""
from flask import Blueprint

submissions_bp = Blueprint("submissions", __name__)

from quizmaster.submissions import routes  # noqa: E402,F401
