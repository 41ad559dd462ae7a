# app/services/scoring.py
from typing import List, Sequence

from app.schemas.test import TestDefinition
from app.schemas.test_result import AnswerResult, AnswerSubmission, ScoreResult


def score_answer(question, answer: AnswerSubmission) -> AnswerResult:
    """
    Score a single answer against its question.

    ``selected_option_id`` is kept only when it names one of the question's
    own options; anything else is stored as no selection.
    """
    option = question.find_option(answer.selected_option_id)
    result = AnswerResult(
        question_id=answer.question_id,
        selected_option_id=option.id if option else None,
        answer_text=answer.answer_text,
    )

    # Essay answers wait for manual grading
    if not question.question_type.is_auto_scored:
        return result

    result.is_correct = bool(option and option.is_correct)
    result.points_earned = question.points if result.is_correct else 0
    return result


def calculate_percentage(earned_points: int, total_points: int) -> float:
    if total_points <= 0:
        return 0.0
    # Divide first: 29/100 gives 28.999999999999996, below a 29.0 pass mark
    return earned_points / total_points * 100


def score_attempt(
    test: TestDefinition,
    total_points: int,
    answers: Sequence[AnswerSubmission],
) -> ScoreResult:
    """
    Score a batch of answers.

    ``total_points`` is the attempt's snapshot taken at start, not the
    test's current total. Answers referencing questions the test does not
    contain are skipped. The percentage is left unrounded.
    """
    results: List[AnswerResult] = []
    for answer in answers:
        question = test.find_question(answer.question_id)
        if question is None:
            continue
        results.append(score_answer(question, answer))

    earned_points = sum(result.points_earned for result in results)
    percentage = calculate_percentage(earned_points, total_points)

    return ScoreResult(
        earned_points=earned_points,
        total_points=total_points,
        percentage=percentage,
        is_passed=percentage >= test.passing_score,
        answers=results,
    )
