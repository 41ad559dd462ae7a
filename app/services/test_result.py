# app/services/test_result.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, PermissionDeniedException
from app.core.security import Principal
from app.models.test_result import UserTestResult
from app.schemas.test import TestDefinition
from app.services.attempt_store import AttemptStore
from app.services.catalog import CatalogService


class TestResultService:
    """Read access to finished and running attempts"""

    __test__ = False  # not a pytest class

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogService(db)
        self.store = AttemptStore(db)

    def get_attempt(self, attempt_id: int, user_id: int) -> UserTestResult:
        """A user's own attempt with its answers"""
        attempt = self.store.get_attempt(attempt_id, with_answers=True)
        if not attempt or attempt.user_id != user_id:
            raise NotFoundException("Test result not found")
        return attempt

    def get_user_test_results(
        self,
        user_id: int,
        test_id: Optional[int] = None,
        page: int = 1,
        size: int = 10,
    ) -> Tuple[List[UserTestResult], dict]:
        """All of a user's attempts, newest first"""
        return self.store.paginate_attempts(
            user_id=user_id, test_id=test_id, page=page, size=size
        )

    def get_test_results(
        self, test_id: int, page: int = 1, size: int = 10
    ) -> Tuple[List[UserTestResult], dict]:
        """Every user's attempts at one test, newest first"""
        self.catalog.require_test_definition(test_id)
        return self.store.paginate_attempts(test_id=test_id, page=page, size=size)


def ensure_can_view_reports(test: TestDefinition, principal: Principal) -> None:
    """Only admins and the test's creator see cross-user reports"""
    if principal.is_admin or (
        test.created_by is not None and test.created_by == principal.user_id
    ):
        return
    raise PermissionDeniedException(
        "You can only view statistics and results for tests you created"
    )
