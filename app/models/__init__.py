"""
Models package initialization
Import all models and setup relationships
"""

from .enums import QuestionType, TestStatus
from .question import Question, QuestionOption

# Import and setup relationships
from .relations import setup_relationships
from .test import Test, TestQuestion
from .test_result import UserTestResult
from .user_answer import UserAnswer

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Question",
    "QuestionOption",
    "QuestionType",
    "Test",
    "TestQuestion",
    "TestStatus",
    "UserAnswer",
    "UserTestResult",
]
