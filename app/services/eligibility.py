# app/services/eligibility.py
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.clock import Clock, to_naive_utc, utcnow
from app.models.enums import COUNTED_STATUSES, TestStatus
from app.schemas.test import TestDefinition
from app.schemas.test_result import Eligibility
from app.services.attempt_store import AttemptStore
from app.services.catalog import CatalogService

NOT_PUBLISHED = "Test is not published"
NOT_YET_AVAILABLE = "Test is not yet available"
NO_LONGER_AVAILABLE = "Test is no longer available"
ALREADY_IN_PROGRESS = "Test is already in progress"


def max_attempts_reason(max_attempts: int) -> str:
    return f"Maximum attempts ({max_attempts}) exceeded"


def evaluate_eligibility(
    test: TestDefinition, attempts: Iterable, now: datetime
) -> Eligibility:
    """
    Decide whether a user may begin an attempt.

    ``attempts`` is the user's full attempt history for this test (anything
    with a ``status``). Checks run in a fixed order and stop at the first
    failure:

    1. the test is published
    2. ``now`` is not before ``available_from``
    3. ``now`` is not after ``available_until``
    4. completed + in-progress attempts are below ``max_attempts``
    5. no attempt is currently in progress
    """
    if not test.is_published:
        return Eligibility(allowed=False, reason=NOT_PUBLISHED)

    now = to_naive_utc(now)
    available_from = to_naive_utc(test.available_from)
    available_until = to_naive_utc(test.available_until)

    if available_from and now < available_from:
        return Eligibility(allowed=False, reason=NOT_YET_AVAILABLE)
    if available_until and now > available_until:
        return Eligibility(allowed=False, reason=NO_LONGER_AVAILABLE)

    statuses = [TestStatus(attempt.status) for attempt in attempts]

    if test.max_attempts:
        used = sum(1 for status in statuses if status in COUNTED_STATUSES)
        if used >= test.max_attempts:
            return Eligibility(
                allowed=False, reason=max_attempts_reason(test.max_attempts)
            )

    if TestStatus.IN_PROGRESS in statuses:
        return Eligibility(allowed=False, reason=ALREADY_IN_PROGRESS)

    return Eligibility(allowed=True)


class EligibilityChecker:
    """Side-effect free admission check against current store state."""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        catalog: Optional[CatalogService] = None,
        store: Optional[AttemptStore] = None,
    ):
        self.db = db
        self.clock = clock or utcnow
        self.catalog = catalog or CatalogService(db)
        self.store = store or AttemptStore(db)

    def check(self, test: TestDefinition, user_id: int) -> Eligibility:
        attempts = self.store.find_attempts(user_id=user_id, test_id=test.id)
        return evaluate_eligibility(test, attempts, self.clock())

    def can_attempt(self, test_id: int, user_id: int) -> Eligibility:
        """Raises NotFoundException when the test does not exist"""
        test = self.catalog.require_test_definition(test_id)
        return self.check(test, user_id)
