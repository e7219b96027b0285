"""
SQLAlchemy models

users            — account used for sign-in; owns papers
question_papers  — one row per generated paper; `content` holds the full paper JSON
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from questify.database.database import Base


class User(Base):
    """
    Signed-in identity.
    refresh_token is set on sign-in, cleared on sign-out (server-side revocation).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    refresh_token = Column(String(512), nullable=True, index=True)

    papers = relationship("QuestionPaperRecord", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class QuestionPaperRecord(Base):
    """A persisted question paper. `content` is the QuestionPaper body as generated."""
    __tablename__ = "question_papers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    domain = Column(String(50), nullable=False)
    sub_domain = Column(String(255), nullable=False)
    content = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", back_populates="papers")

    def __repr__(self):
        return f"<QuestionPaperRecord(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
