from datetime import datetime
from flask_login import UserMixin

from quizmaster import db


ROLES = ("STUDENT", "TEACHER", "ADMIN")


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="STUDENT", index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    quizzes = db.relationship("Quiz", back_populates="teacher", lazy="dynamic")
    submissions = db.relationship("Submission", back_populates="user", lazy="dynamic")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.email} ({self.role})>"

    def is_student(self) -> bool:
        return self.role == "STUDENT"

    def is_teacher(self) -> bool:
        return self.role == "TEACHER"

    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def public_profile(self) -> dict:
        """Fields other users may see."""
        return {"id": self.id, "name": self.name, "email": self.email}

    def to_dict(self) -> dict:
        """Full profile for the user themselves. Never includes the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
