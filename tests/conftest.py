"""
Shared fixtures: an in-memory SQLite database, catalog factories,
a controllable clock and authenticated API clients.
"""

import os
import random
from datetime import datetime, timedelta

# Must be set before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ABANDON_SWEEP_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.core.security import jwt_manager
from app.models.enums import QuestionType
from app.models.question import Question, QuestionOption
from app.models.test import Test, TestQuestion
from app.schemas.test_result import AnswerSubmission
from app.services.test_session import TestSessionService

NOW = datetime(2024, 6, 1, 12, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def session_service(db_session, clock, rng):
    return TestSessionService(db_session, clock=clock, rng=rng)


@pytest.fixture
def make_question(db_session):
    """Factory for a question; options are (text, is_correct) pairs."""

    def _make(
        points=10,
        question_type=QuestionType.MULTIPLE_CHOICE,
        options=(("Right", True), ("Wrong", False)),
        title="Question",
    ):
        question = Question(
            title=title,
            question_text=f"{title}?",
            question_type=question_type.value,
            points=points,
        )
        db_session.add(question)
        db_session.flush()
        for order, (text, is_correct) in enumerate(options):
            db_session.add(
                QuestionOption(
                    question_id=question.id,
                    option_text=text,
                    is_correct=is_correct,
                    sort_order=order,
                )
            )
        db_session.commit()
        db_session.refresh(question)
        return question

    return _make


@pytest.fixture
def make_test(db_session):
    """Factory for a published test linking the given questions in order."""

    def _make(questions=(), **fields):
        values = {"title": "Midterm", "is_published": True, "passing_score": 60.0}
        values.update(fields)
        test = Test(**values)
        db_session.add(test)
        db_session.flush()
        for order, question in enumerate(questions):
            db_session.add(
                TestQuestion(test_id=test.id, question_id=question.id, sort_order=order)
            )
        db_session.commit()
        db_session.refresh(test)
        return test

    return _make


@pytest.fixture
def two_question_test(make_question, make_test):
    """Two multiple-choice questions worth 10 and 15 points, pass mark 60"""
    q1 = make_question(points=10, title="Q1")
    q2 = make_question(points=15, title="Q2")
    test = make_test([q1, q2])
    return test, q1, q2


def correct_option(question):
    return next(option for option in question.options if option.is_correct)


def wrong_option(question):
    return next(option for option in question.options if not option.is_correct)


def choose(question, option):
    return AnswerSubmission(question_id=question.id, selected_option_id=option.id)


# ==================== HTTP ====================


def auth_headers_for(user_id: int, role: str = "student") -> dict:
    token = jwt_manager.create_access_token(user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_session):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return auth_headers_for(1)
