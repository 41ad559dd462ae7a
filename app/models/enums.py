# app/models/enums.py
from enum import Enum

from app.core.exceptions import InvalidTransitionError


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    ESSAY = "ESSAY"

    @property
    def is_auto_scored(self) -> bool:
        return self in (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)


class TestStatus(str, Enum):
    """Lifecycle of a single attempt. COMPLETED and ABANDONED are terminal."""

    __test__ = False  # not a pytest class

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"

    @property
    def is_terminal(self) -> bool:
        return self in (TestStatus.COMPLETED, TestStatus.ABANDONED)


_ALLOWED_TRANSITIONS = {
    TestStatus.NOT_STARTED: {TestStatus.IN_PROGRESS},
    TestStatus.IN_PROGRESS: {TestStatus.COMPLETED, TestStatus.ABANDONED},
    TestStatus.COMPLETED: set(),
    TestStatus.ABANDONED: set(),
}

# Statuses counted against max_attempts
COUNTED_STATUSES = (TestStatus.COMPLETED, TestStatus.IN_PROGRESS)
# Statuses that consume an attempt number
RESOLVED_STATUSES = (TestStatus.COMPLETED, TestStatus.ABANDONED)


def ensure_transition(current, target: TestStatus) -> TestStatus:
    """Return ``target`` if ``current -> target`` is a legal edge, else raise."""
    current = TestStatus(current)
    if target in _ALLOWED_TRANSITIONS[current]:
        return target
    if current is not TestStatus.IN_PROGRESS and target.is_terminal:
        raise InvalidTransitionError(current, target, "Test is not in progress")
    raise InvalidTransitionError(current, target)
