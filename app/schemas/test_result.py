# app/schemas/test_result.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import TestStatus
from app.schemas.test import PresentedQuestion

# ==================== Eligibility ====================


class Eligibility(BaseModel):
    allowed: bool
    reason: Optional[str] = None


# ==================== Submission ====================


class AnswerSubmission(BaseModel):
    """User's answer for one question"""

    question_id: int = Field(..., ge=1)
    selected_option_id: Optional[int] = Field(
        None, ge=1, description="Selected option (null for essay or unanswered)"
    )
    answer_text: Optional[str] = Field(None, max_length=10000)


class SubmitTestRequest(BaseModel):
    test_result_id: int = Field(..., ge=1, description="ID of the in-progress attempt")
    answers: List[AnswerSubmission]


# ==================== Scoring ====================


class AnswerResult(BaseModel):
    question_id: int
    selected_option_id: Optional[int] = None
    answer_text: Optional[str] = None
    is_correct: Optional[bool] = None  # None = not auto-gradable
    points_earned: int = 0


class ScoreResult(BaseModel):
    earned_points: int
    total_points: int
    percentage: float
    is_passed: bool
    answers: List[AnswerResult]


# ==================== Attempt responses ====================


class UserAnswerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    selected_option_id: Optional[int] = None
    answer_text: Optional[str] = None
    is_correct: Optional[bool] = None
    points_earned: int
    answered_at: datetime


class TestResultResponse(BaseModel):
    __test__ = False  # not a pytest class
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    test_id: int
    attempt_number: int
    status: TestStatus
    total_points: int
    earned_points: Optional[int] = None
    score: Optional[float] = None
    is_passed: Optional[bool] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    time_spent_minutes: Optional[int] = None


class TestResultDetailResponse(TestResultResponse):
    # Hidden when the test does not show results immediately
    answers: Optional[List[UserAnswerResponse]] = None
    show_results: bool = True


class TestSessionResponse(BaseModel):
    """An in-progress attempt together with the questions to answer"""

    session: Optional[TestResultResponse] = None
    questions: List[PresentedQuestion] = []
    time_limit_minutes: Optional[int] = None


class TestResultListResponse(BaseModel):
    results: List[TestResultResponse]
    total: int
    page: int
    size: int
    total_pages: int


# ==================== Statistics ====================


class TestStatistics(BaseModel):
    __test__ = False  # not a pytest class

    total_attempts: int = 0
    passed_attempts: int = 0
    failed_attempts: int = 0
    average_score: float = 0.0
    average_time_spent: float = 0.0
    highest_score: float = 0.0
    lowest_score: float = 0.0
