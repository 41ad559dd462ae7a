# app/services/attempt_store.py
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.enums import TestStatus
from app.models.test import Test
from app.models.test_result import UserTestResult
from app.models.user_answer import UserAnswer


class AttemptStore:
    """
    Persistence for attempts and their answers.

    Plain CRUD: every rule about when these calls are legal lives in the
    services that use the store. Nothing here commits unless asked to.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- reads ----------

    def get_attempt(
        self, attempt_id: int, with_answers: bool = False
    ) -> Optional[UserTestResult]:
        query = self.db.query(UserTestResult).filter(UserTestResult.id == attempt_id)
        if with_answers:
            query = query.options(selectinload(UserTestResult.answers))
        return query.first()

    def _filtered(
        self,
        user_id: Optional[int] = None,
        test_id: Optional[int] = None,
        statuses: Optional[Sequence[TestStatus]] = None,
    ):
        query = self.db.query(UserTestResult)
        if user_id is not None:
            query = query.filter(UserTestResult.user_id == user_id)
        if test_id is not None:
            query = query.filter(UserTestResult.test_id == test_id)
        if statuses:
            query = query.filter(
                UserTestResult.status.in_([TestStatus(s).value for s in statuses])
            )
        return query

    def find_attempts(
        self,
        user_id: Optional[int] = None,
        test_id: Optional[int] = None,
        statuses: Optional[Sequence[TestStatus]] = None,
    ) -> List[UserTestResult]:
        return (
            self._filtered(user_id, test_id, statuses)
            .order_by(UserTestResult.started_at.asc(), UserTestResult.id.asc())
            .all()
        )

    def count_attempts(
        self,
        user_id: Optional[int] = None,
        test_id: Optional[int] = None,
        statuses: Optional[Sequence[TestStatus]] = None,
    ) -> int:
        return self._filtered(user_id, test_id, statuses).count()

    def find_active_attempt(self, user_id: int, test_id: int) -> Optional[UserTestResult]:
        return self._filtered(user_id, test_id, [TestStatus.IN_PROGRESS]).first()

    def paginate_attempts(
        self,
        user_id: Optional[int] = None,
        test_id: Optional[int] = None,
        page: int = 1,
        size: int = 10,
    ) -> Tuple[List[UserTestResult], dict]:
        query = self._filtered(user_id, test_id)

        # Get total count
        total = query.count()

        # Apply pagination
        offset = (page - 1) * size
        results = (
            query.order_by(UserTestResult.started_at.desc(), UserTestResult.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        # Pagination metadata
        total_pages = math.ceil(total / size) if size > 0 else 0
        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": total_pages,
        }

        return results, pagination

    # ---------- writes ----------

    def create_attempt(self, **values) -> UserTestResult:
        attempt = UserTestResult(**values)
        self.db.add(attempt)
        self.db.flush()
        return attempt

    def close_attempt(self, attempt_id: int, **values) -> bool:
        """
        Conditionally move an attempt out of IN_PROGRESS.

        Returns False when another writer got there first.
        """
        updated = (
            self.db.query(UserTestResult)
            .filter(
                UserTestResult.id == attempt_id,
                UserTestResult.status == TestStatus.IN_PROGRESS.value,
            )
            .update(values, synchronize_session=False)
        )
        return updated == 1

    def create_answers(self, answers: Iterable[dict]) -> List[UserAnswer]:
        rows = [UserAnswer(**values) for values in answers]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def find_timed_active_attempts(self) -> List[Tuple[UserTestResult, int]]:
        """IN_PROGRESS attempts whose test has a time limit, with that limit"""
        return (
            self.db.query(UserTestResult, Test.time_limit_minutes)
            .join(Test, Test.id == UserTestResult.test_id)
            .filter(
                UserTestResult.status == TestStatus.IN_PROGRESS.value,
                Test.time_limit_minutes.isnot(None),
            )
            .all()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, attempt: UserTestResult) -> UserTestResult:
        self.db.refresh(attempt)
        return attempt
