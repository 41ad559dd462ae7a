# app/services/catalog.py
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundException
from app.models.question import Question
from app.models.test import Test, TestQuestion
from app.schemas.test import OptionDefinition, QuestionDefinition, TestDefinition


class CatalogService:
    """Read-only lookup of test definitions owned by the catalog."""

    def __init__(self, db: Session):
        self.db = db

    def get_test_definition(self, test_id: int) -> Optional[TestDefinition]:
        """Snapshot a test with its ordered questions and options, or None"""
        test = (
            self.db.query(Test)
            .filter(Test.id == test_id)
            .options(
                selectinload(Test.test_questions)
                .selectinload(TestQuestion.question)
                .selectinload(Question.options)
            )
            .first()
        )

        if not test:
            return None

        questions = []
        for link in test.test_questions:
            question = link.question
            questions.append(
                QuestionDefinition(
                    id=question.id,
                    title=question.title,
                    question_text=question.question_text,
                    question_type=question.question_type,
                    points=question.points,
                    explanation=question.explanation,
                    options=tuple(
                        OptionDefinition.model_validate(option)
                        for option in question.options
                    ),
                )
            )

        return TestDefinition(
            id=test.id,
            title=test.title,
            course_id=test.course_id,
            lesson_id=test.lesson_id,
            created_by=test.created_by,
            time_limit_minutes=test.time_limit_minutes,
            max_attempts=test.max_attempts,
            passing_score=test.passing_score,
            shuffle_questions=test.shuffle_questions,
            shuffle_options=test.shuffle_options,
            show_results_immediately=test.show_results_immediately,
            is_published=test.is_published,
            available_from=test.available_from,
            available_until=test.available_until,
            questions=tuple(questions),
        )

    def require_test_definition(self, test_id: int) -> TestDefinition:
        test = self.get_test_definition(test_id)
        if not test:
            raise NotFoundException("Test not found")
        return test
