# app/models/test.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from app.core.database import Base


class Test(Base):
    __tablename__ = "tests"
    __test__ = False  # not a pytest class

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Catalog references (owned by the catalog service)
    course_id = Column(Integer, nullable=True, index=True)
    lesson_id = Column(Integer, nullable=True, index=True)
    created_by = Column(Integer, nullable=True, index=True)

    # Settings
    time_limit_minutes = Column(Integer, nullable=True)  # null = no limit
    max_attempts = Column(Integer, nullable=True)  # null = unlimited
    passing_score = Column(Float, nullable=False, default=60.0)  # percentage
    shuffle_questions = Column(Boolean, nullable=False, default=False)
    shuffle_options = Column(Boolean, nullable=False, default=False)
    show_results_immediately = Column(Boolean, nullable=False, default=True)
    is_published = Column(Boolean, nullable=False, default=False)

    # Availability window, inclusive on both ends
    available_from = Column(DateTime, nullable=True)
    available_until = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Test(id={self.id}, title='{self.title}', published={self.is_published})>"


class TestQuestion(Base):
    __tablename__ = "test_questions"
    __table_args__ = (UniqueConstraint("test_id", "question_id"),)
    __test__ = False  # not a pytest class

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(
        Integer, ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sort_order = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<TestQuestion(test_id={self.test_id}, question_id={self.question_id})>"
