import itertools

import pytest

from app.models.enums import QuestionType
from app.schemas.test import OptionDefinition, QuestionDefinition, TestDefinition
from app.schemas.test_result import AnswerSubmission
from app.services.scoring import calculate_percentage, score_answer, score_attempt


def choice_question(question_id, points, correct_id, wrong_id):
    return QuestionDefinition(
        id=question_id,
        title=f"Q{question_id}",
        question_text="?",
        question_type=QuestionType.MULTIPLE_CHOICE,
        points=points,
        options=(
            OptionDefinition(id=correct_id, option_text="yes", is_correct=True),
            OptionDefinition(id=wrong_id, option_text="no", is_correct=False),
        ),
    )


@pytest.fixture
def quiz():
    return TestDefinition(
        id=1,
        title="Quiz",
        passing_score=60.0,
        is_published=True,
        questions=(
            choice_question(1, 10, correct_id=11, wrong_id=12),
            choice_question(2, 15, correct_id=21, wrong_id=22),
            QuestionDefinition(
                id=3,
                title="Essay",
                question_text="Explain.",
                question_type=QuestionType.ESSAY,
                points=5,
            ),
        ),
    )


def answer(question_id, option_id=None, text=None):
    return AnswerSubmission(
        question_id=question_id, selected_option_id=option_id, answer_text=text
    )


class TestScoreAnswer:
    def test_correct_choice_earns_full_points(self, quiz):
        result = score_answer(quiz.find_question(2), answer(2, 21))
        assert result.is_correct is True
        assert result.points_earned == 15

    def test_wrong_choice_earns_nothing(self, quiz):
        result = score_answer(quiz.find_question(2), answer(2, 22))
        assert result.is_correct is False
        assert result.points_earned == 0

    def test_missing_or_unknown_option_is_incorrect(self, quiz):
        question = quiz.find_question(1)
        assert score_answer(question, answer(1)).is_correct is False
        assert score_answer(question, answer(1, 999)).is_correct is False

    def test_only_the_questions_own_option_is_kept(self, quiz):
        assert score_answer(quiz.find_question(1), answer(1, 21)).selected_option_id is None
        assert score_answer(quiz.find_question(1), answer(1, 12)).selected_option_id == 12

    def test_essay_is_left_for_manual_grading(self, quiz):
        result = score_answer(quiz.find_question(3), answer(3, text="Because."))
        assert result.is_correct is None
        assert result.points_earned == 0
        assert result.answer_text == "Because."


class TestScoreAttempt:
    def test_one_right_one_wrong(self, quiz):
        result = score_attempt(quiz, 25, [answer(1, 11), answer(2, 22)])
        assert result.earned_points == 10
        assert result.total_points == 25
        assert result.percentage == 40
        assert result.is_passed is False

    def test_all_right(self, quiz):
        result = score_attempt(quiz, 25, [answer(1, 11), answer(2, 21)])
        assert result.earned_points == 25
        assert result.percentage == 100
        assert result.is_passed is True

    def test_pass_mark_is_inclusive(self, quiz):
        # 15 / 25 = 60%
        result = score_attempt(quiz, 25, [answer(2, 21)])
        assert result.percentage == pytest.approx(60.0)
        assert result.is_passed is True

    def test_percentage_is_not_rounded(self, quiz):
        result = score_attempt(quiz, 30, [answer(1, 11)])
        assert result.percentage == pytest.approx(100 / 3)

    def test_percentage_divides_before_scaling(self):
        quiz = TestDefinition(
            id=2,
            title="Boundary",
            passing_score=29.0,
            is_published=True,
            questions=(choice_question(1, 29, correct_id=11, wrong_id=12),),
        )
        result = score_attempt(quiz, 100, [answer(1, 11)])
        assert result.percentage == 29 / 100 * 100
        assert result.is_passed is False

    def test_uses_the_given_total_not_the_current_one(self, quiz):
        # Snapshot of 50 points taken when the attempt started
        result = score_attempt(quiz, 50, [answer(1, 11), answer(2, 21)])
        assert result.percentage == 50
        assert result.is_passed is False

    def test_zero_total_gives_zero_percent(self, quiz):
        result = score_attempt(quiz, 0, [answer(3, text="...")])
        assert result.percentage == 0
        assert result.is_passed is False

    def test_unknown_questions_are_skipped(self, quiz):
        result = score_attempt(quiz, 25, [answer(1, 11), answer(42, 1)])
        assert [a.question_id for a in result.answers] == [1]
        assert result.earned_points == 10

    def test_order_does_not_change_the_score(self, quiz):
        answers = [answer(1, 11), answer(2, 22), answer(3, text="x")]
        outcomes = {
            score_attempt(quiz, 30, list(order)).earned_points
            for order in itertools.permutations(answers)
        }
        assert outcomes == {10}

    def test_scoring_twice_gives_the_same_result(self, quiz):
        answers = [answer(1, 12), answer(2, 21)]
        assert score_attempt(quiz, 25, answers) == score_attempt(quiz, 25, answers)


def test_calculate_percentage():
    assert calculate_percentage(0, 0) == 0
    assert calculate_percentage(5, 20) == 25
