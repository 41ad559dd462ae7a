# app/routers/tests.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_principal
from app.core.limiter import limiter
from app.core.security import Principal
from app.models.test_result import UserTestResult
from app.schemas.test import PresentedQuestion
from app.schemas.test_result import (
    Eligibility,
    SubmitTestRequest,
    TestResultDetailResponse,
    TestResultListResponse,
    TestResultResponse,
    TestSessionResponse,
    TestStatistics,
)
from app.services.catalog import CatalogService
from app.services.eligibility import EligibilityChecker
from app.services.question_presenter import QuestionPresenter
from app.services.test_result import TestResultService, ensure_can_view_reports
from app.services.test_session import TestSessionService
from app.services.test_statistics import TestStatisticsService

router = APIRouter(
    prefix="/tests",
    tags=["Tests"],
    responses={404: {"description": "Not found"}},
)


def build_result_detail(
    attempt: UserTestResult, show_results: bool
) -> TestResultDetailResponse:
    detail = TestResultDetailResponse.model_validate(attempt)
    if not show_results:
        # Score is stored but per-answer feedback stays hidden
        return detail.model_copy(update={"answers": None, "show_results": False})
    return detail


# ==================== Learner Results ====================


@router.get("/results/me", response_model=TestResultListResponse)
def get_my_results(
    test_id: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the current user's attempts, newest first.
    Optionally filtered by test.
    """
    service = TestResultService(db)
    results, pagination = service.get_user_test_results(
        principal.user_id, test_id, page, size
    )
    return {"results": results, **pagination}


@router.get("/results/{result_id}", response_model=TestResultDetailResponse)
def get_my_result(
    result_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get one of the current user's attempts with its answers.
    Answers are hidden when the test does not show results immediately.
    """
    attempt = TestResultService(db).get_attempt(result_id, principal.user_id)
    test = CatalogService(db).require_test_definition(attempt.test_id)
    return build_result_detail(attempt, test.show_results_immediately)


@router.post("/results/{result_id}/abandon", response_model=TestResultResponse)
def abandon_attempt(
    result_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Give up an in-progress attempt.
    The attempt still consumes an attempt number but not a max_attempts slot.
    """
    return TestSessionService(db).abandon(result_id, user_id=principal.user_id)


# ==================== Test Session Endpoints ====================


@router.get("/{test_id}/can-take", response_model=Eligibility)
def can_take_test(
    test_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Check whether the current user may start the test right now.
    Read only; safe to call repeatedly.
    """
    return EligibilityChecker(db).can_attempt(test_id, principal.user_id)


@router.get("/{test_id}/questions", response_model=List[PresentedQuestion])
def get_test_questions(
    test_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the test's questions without correct answers.
    Only available to users who may currently take the test.
    """
    return QuestionPresenter(db).present(test_id, principal.user_id)


@router.get("/{test_id}/session", response_model=TestSessionResponse)
def get_test_session(
    test_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the current user's in-progress attempt to resume after a disconnect.
    Returns a null session when there is nothing to resume.
    """
    test = CatalogService(db).require_test_definition(test_id)
    attempt, questions = TestSessionService(db).resume_session(
        principal.user_id, test_id
    )
    return {
        "session": attempt,
        "questions": questions,
        "time_limit_minutes": test.time_limit_minutes,
    }


@router.post("/{test_id}/start", response_model=TestSessionResponse, status_code=201)
@limiter.limit(settings.rate_limit_default)
def start_test(
    request: Request,
    test_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Start a new attempt and get its questions.
    Eligibility is checked again here, whatever /can-take said earlier.
    """
    service = TestSessionService(db)
    attempt, questions = service.start_session(principal.user_id, test_id)
    test = service.catalog.require_test_definition(test_id)
    return {
        "session": attempt,
        "questions": questions,
        "time_limit_minutes": test.time_limit_minutes,
    }


@router.post("/{test_id}/submit", response_model=TestResultDetailResponse)
@limiter.limit(settings.rate_limit_default)
def submit_test(
    request: Request,
    test_id: int,
    submission: SubmitTestRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Submit answers for an in-progress attempt.
    Scores the attempt and completes it in one transaction.
    """
    service = TestSessionService(db)
    attempt = service.submit(
        submission.test_result_id,
        submission.answers,
        user_id=principal.user_id,
        test_id=test_id,
    )
    attempt = TestResultService(db).get_attempt(attempt.id, principal.user_id)
    test = service.catalog.require_test_definition(test_id)
    return build_result_detail(attempt, test.show_results_immediately)


# ==================== Reports (creator / admin) ====================


@router.get("/{test_id}/statistics", response_model=TestStatistics)
def get_test_statistics(
    test_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Summary statistics over completed attempts.
    Test creator or admin only.
    """
    test = CatalogService(db).require_test_definition(test_id)
    ensure_can_view_reports(test, principal)
    return TestStatisticsService(db).statistics(test_id)


@router.get("/{test_id}/results", response_model=TestResultListResponse)
def get_test_results(
    test_id: int,
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    All users' attempts at a test, newest first.
    Test creator or admin only.
    """
    test = CatalogService(db).require_test_definition(test_id)
    ensure_can_view_reports(test, principal)
    results, pagination = TestResultService(db).get_test_results(test_id, page, size)
    return {"results": results, **pagination}
