# app/models/question.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base
from app.models.enums import QuestionType


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    question_text = Column(Text, nullable=False)
    question_type = Column(
        String(30), nullable=False, default=QuestionType.MULTIPLE_CHOICE.value
    )  # MULTIPLE_CHOICE, TRUE_FALSE, ESSAY
    points = Column(Integer, nullable=False, default=1)
    explanation = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Question(id={self.id}, type='{self.question_type}', points={self.points})>"


class QuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<QuestionOption(id={self.id}, question_id={self.question_id})>"
