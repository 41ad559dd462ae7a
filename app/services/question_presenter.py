# app/services/question_presenter.py
import random
from typing import List, Optional, Sequence, TypeVar

from sqlalchemy.orm import Session

from app.core.exceptions import IneligibleException
from app.schemas.test import PresentedOption, PresentedQuestion, TestDefinition
from app.services.catalog import CatalogService
from app.services.eligibility import EligibilityChecker

T = TypeVar("T")


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a shuffled copy of ``items``; the input is left untouched."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_presentation(
    test: TestDefinition, rng: random.Random
) -> List[PresentedQuestion]:
    """Questions in presentation order, with correctness stripped from options"""
    questions = list(test.questions)
    if test.shuffle_questions:
        questions = fisher_yates_shuffle(questions, rng)

    presented = []
    for question in questions:
        options = list(question.options)
        if test.shuffle_options:
            options = fisher_yates_shuffle(options, rng)

        presented.append(
            PresentedQuestion(
                id=question.id,
                title=question.title,
                question_text=question.question_text,
                question_type=question.question_type,
                points=question.points,
                options=[
                    PresentedOption(
                        id=option.id,
                        option_text=option.option_text,
                        sort_order=option.sort_order,
                    )
                    for option in options
                ],
            )
        )
    return presented


class QuestionPresenter:
    def __init__(
        self,
        db: Session,
        rng: Optional[random.Random] = None,
        checker: Optional[EligibilityChecker] = None,
        catalog: Optional[CatalogService] = None,
    ):
        self.db = db
        self.rng = rng or random.Random()
        self.catalog = catalog or CatalogService(db)
        self.checker = checker or EligibilityChecker(db, catalog=self.catalog)

    def present(self, test_id: int, user_id: int) -> List[PresentedQuestion]:
        """
        Questions for a user who may currently take the test.

        Eligibility is re-checked so ineligible users never see question
        content.
        """
        test = self.catalog.require_test_definition(test_id)
        eligibility = self.checker.check(test, user_id)
        if not eligibility.allowed:
            raise IneligibleException(eligibility.reason or "Cannot access test questions")
        return build_presentation(test, self.rng)

    def present_definition(self, test: TestDefinition) -> List[PresentedQuestion]:
        """Presentation for a caller that already holds an admission (a live session)"""
        return build_presentation(test, self.rng)
