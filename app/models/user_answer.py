# app/models/user_answer.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text

from app.core.database import Base


class UserAnswer(Base):
    __tablename__ = "user_answers"

    id = Column(Integer, primary_key=True, index=True)

    test_result_id = Column(
        Integer,
        ForeignKey("user_test_results.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    selected_option_id = Column(
        Integer, ForeignKey("question_options.id", ondelete="SET NULL"), nullable=True
    )
    answer_text = Column(Text, nullable=True)

    is_correct = Column(Boolean, nullable=True)  # null = needs manual grading
    points_earned = Column(Integer, nullable=False, default=0)
    answered_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<UserAnswer(id={self.id}, question_id={self.question_id}, correct={self.is_correct})>"
