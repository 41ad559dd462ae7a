# app/schemas/test.py
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import QuestionType

# ==================== Test Definition (read-only snapshot) ====================


class OptionDefinition(BaseModel):
    """Option as stored in the catalog - INCLUDES the correctness flag"""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    option_text: str
    is_correct: bool = False
    sort_order: int = 0


class QuestionDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    question_text: str
    question_type: QuestionType
    points: int = Field(..., ge=0)
    explanation: Optional[str] = None
    options: Tuple[OptionDefinition, ...] = ()

    def find_option(self, option_id: Optional[int]) -> Optional[OptionDefinition]:
        if option_id is None:
            return None
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class TestDefinition(BaseModel):
    """Immutable view of a test and its ordered questions, taken per request."""

    __test__ = False  # not a pytest class
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    course_id: Optional[int] = None
    lesson_id: Optional[int] = None
    created_by: Optional[int] = None
    time_limit_minutes: Optional[int] = None
    max_attempts: Optional[int] = None
    passing_score: float
    shuffle_questions: bool = False
    shuffle_options: bool = False
    show_results_immediately: bool = True
    is_published: bool = False
    available_from: Optional[datetime] = None
    available_until: Optional[datetime] = None
    questions: Tuple[QuestionDefinition, ...] = ()

    @property
    def total_points(self) -> int:
        return sum(question.points for question in self.questions)

    def find_question(self, question_id: int) -> Optional[QuestionDefinition]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


# ==================== Presented questions ====================


class PresentedOption(BaseModel):
    """Option shown to a learner - WITHOUT the correctness flag"""

    id: int
    option_text: str
    sort_order: int


class PresentedQuestion(BaseModel):
    id: int
    title: str
    question_text: str
    question_type: QuestionType
    points: int
    options: List[PresentedOption]
