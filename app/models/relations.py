# app/models/relations.py

from sqlalchemy.orm import relationship

from .question import Question, QuestionOption
from .test import Test, TestQuestion
from .test_result import UserTestResult
from .user_answer import UserAnswer


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Catalog ---

    # 1. Test to its question links, in presentation order
    Test.test_questions = relationship(
        "TestQuestion",
        back_populates="test",
        cascade="all, delete-orphan",
        order_by="TestQuestion.sort_order",
    )
    TestQuestion.test = relationship("Test", back_populates="test_questions")

    # 2. Link to question
    TestQuestion.question = relationship("Question", lazy="joined")

    # 3. Question to Options
    Question.options = relationship(
        "QuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionOption.sort_order, QuestionOption.id",
    )
    QuestionOption.question = relationship("Question", back_populates="options")

    # --- Attempts ---

    # 4. Test to Results
    Test.results = relationship(
        "UserTestResult",
        back_populates="test",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    UserTestResult.test = relationship("Test", back_populates="results")

    # 5. Result to Answers
    UserTestResult.answers = relationship(
        "UserAnswer",
        back_populates="test_result",
        cascade="all, delete-orphan",
        order_by="UserAnswer.id",
    )
    UserAnswer.test_result = relationship("UserTestResult", back_populates="answers")
