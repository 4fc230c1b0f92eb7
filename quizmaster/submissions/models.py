"""
Database models for quiz attempts and the answers recorded for them.
"""
from datetime import datetime

from quizmaster import db
from quizmaster.quiz.models import Question


class Submission(db.Model):
    """
    One student's attempt at one quiz.

    ``in_progress`` is True while the attempt is open and NULL once it is
    submitted. The unique constraint over (user_id, quiz_id, in_progress)
    therefore allows any number of finished attempts but only one open one.
    """
    __tablename__ = "submissions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False, index=True)
    total_questions = db.Column(db.Integer, nullable=False)
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    score = db.Column(db.Integer, nullable=True)
    submitted_at = db.Column(db.DateTime, nullable=True, index=True)
    in_progress = db.Column(db.Boolean, nullable=True, default=True)

    user = db.relationship("User", back_populates="submissions")
    quiz = db.relationship("Quiz", back_populates="submissions")
    answers = db.relationship("Answer", back_populates="submission", lazy="dynamic")

    __table_args__ = (
        db.UniqueConstraint("user_id", "quiz_id", "in_progress", name="uq_submission_open_attempt"),
    )

    def __repr__(self) -> str:
        return f"<Submission {self.id}: user {self.user_id} quiz {self.quiz_id}>"

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    def ordered_answers(self):
        """Answers in the display order of their questions."""
        return (
            self.answers.join(Question, Answer.question_id == Question.id)
            .order_by(Question.order, Question.id)
            .all()
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "quiz_id": self.quiz_id,
            "status": "submitted" if self.is_submitted else "in_progress",
            "total_questions": self.total_questions,
            "score": self.score,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }

    def to_detail_dict(self) -> dict:
        """
        Submission with its quiz, questions and answers.

        Answer keys are revealed only after the attempt is submitted.
        """
        data = self.to_dict()
        data["quiz"] = self.quiz.to_dict(include_answers=self.is_submitted)
        data["answers"] = [answer.to_dict() for answer in self.ordered_answers()]
        return data

    def to_summary_dict(self) -> dict:
        """Submission with a short quiz summary, for the student's history."""
        data = self.to_dict()
        quiz = self.quiz
        data["quiz"] = {
            "id": quiz.id,
            "title": quiz.title,
            "description": quiz.description,
            "time_limit": quiz.time_limit,
            "teacher": {"id": quiz.teacher.id, "name": quiz.teacher.name} if quiz.teacher else None,
        }
        return data

    def to_teacher_dict(self) -> dict:
        """Submission with the student's public profile, for the quiz owner."""
        data = self.to_dict()
        data["user"] = self.user.public_profile() if self.user else None
        return data


class Answer(db.Model):
    """The option a student picked for one question of a submission."""
    __tablename__ = "answers"

    id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.Integer, db.ForeignKey("submissions.id"), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False, index=True)
    selected_option = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)

    submission = db.relationship("Submission", back_populates="answers")
    question = db.relationship("Question")

    __table_args__ = (
        db.UniqueConstraint("submission_id", "question_id", name="uq_answer_submission_question"),
    )

    def __repr__(self) -> str:
        return f"<Answer {self.id}: q{self.question_id}={self.selected_option}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "submission_id": self.submission_id,
            "question_id": self.question_id,
            "selected_option": self.selected_option,
            "is_correct": self.is_correct,
            "question": self.question.to_dict(include_answer=True) if self.question else None,
        }
