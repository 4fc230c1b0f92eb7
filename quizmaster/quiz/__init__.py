"""
Quiz catalog: teachers author timed multiple-choice quizzes,
everyone signed in can browse the published ones.
"""
from flask import Blueprint

quiz_bp = Blueprint("quiz", __name__)

from quizmaster.quiz import routes  # noqa: E402,F401
