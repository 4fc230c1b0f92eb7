"""
Database models for quizzes and their questions.

Quizzes and questions are never hard-deleted. ``deleted_at`` marks a
tombstone, and every read path goes through ``Quiz.active()`` /
``Question.active()`` so the filter lives in one place.
"""
from datetime import datetime

from quizmaster import db


OPTION_COUNT = 4


class Quiz(db.Model):
    """
    A timed set of multiple-choice questions owned by a teacher.
    """
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    time_limit = db.Column(db.Integer, nullable=False)  # minutes
    published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    teacher = db.relationship("User", back_populates="quizzes")
    questions = db.relationship("Question", back_populates="quiz", lazy="dynamic")
    submissions = db.relationship("Submission", back_populates="quiz", lazy="dynamic")

    __table_args__ = (
        db.Index('ix_quizzes_teacher_deleted', 'teacher_id', 'deleted_at'),
    )

    def __repr__(self) -> str:
        return f"<Quiz {self.id}: {self.title}>"

    @classmethod
    def active(cls):
        """Query over quizzes that have not been soft-deleted."""
        return cls.query.filter(cls.deleted_at.is_(None))

    def active_questions(self):
        """Non-deleted questions in display order."""
        return Question.active().filter(Question.quiz_id == self.id).order_by(Question.order, Question.id)

    def get_question_count(self) -> int:
        return Question.active().filter(Question.quiz_id == self.id).count()

    def has_submissions(self) -> bool:
        return self.submissions.count() > 0

    def is_owned_by(self, user_id: int) -> bool:
        return self.teacher_id == user_id

    def summary_dict(self) -> dict:
        """Quiz fields without questions."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "time_limit": self.time_limit,
            "published": self.published,
            "teacher_id": self.teacher_id,
            "teacher": self.teacher.public_profile() if self.teacher else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
        }

    def to_dict(self, include_questions: bool = True, include_answers: bool = False) -> dict:
        """
        Serialize the quiz.

        Args:
            include_questions: Embed the non-deleted questions
            include_answers: Include each question's correct_option
        """
        data = self.summary_dict()
        if include_questions:
            data["questions"] = [
                q.to_dict(include_answer=include_answers) for q in self.active_questions().all()
            ]
        return data


class Question(db.Model):
    """
    One multiple-choice prompt with exactly four options and one correct index.
    """
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=False)  # list of OPTION_COUNT strings
    correct_option = db.Column(db.Integer, nullable=False)  # zero-based index into options
    explanation = db.Column(db.Text, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    quiz = db.relationship("Quiz", back_populates="questions")

    __table_args__ = (
        db.Index('ix_questions_quiz_order', 'quiz_id', 'order'),
    )

    def __repr__(self) -> str:
        return f"<Question {self.id} of quiz {self.quiz_id}>"

    @classmethod
    def active(cls):
        """Query over questions that have not been soft-deleted."""
        return cls.query.filter(cls.deleted_at.is_(None))

    def is_correct(self, selected_option: int) -> bool:
        """Plain index equality: no partial credit, no negative marking."""
        return selected_option == self.correct_option

    def to_dict(self, include_answer: bool = False) -> dict:
        data = {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "text": self.text,
            "options": list(self.options or []),
            "order": self.order,
        }
        # explanation is part of the answer key
        if include_answer:
            data["correct_option"] = self.correct_option
            data["explanation"] = self.explanation
        return data
