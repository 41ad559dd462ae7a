from types import SimpleNamespace

import pytest

from app.core.exceptions import NotFoundException
from app.services.test_statistics import TestStatisticsService, compute_statistics
from tests.conftest import choose, correct_option, wrong_option


def row(status, score=None, passed=None, minutes=None):
    return SimpleNamespace(
        status=status, score=score, is_passed=passed, time_spent_minutes=minutes
    )


class TestComputeStatistics:
    def test_empty_set_is_all_zeros(self):
        stats = compute_statistics([])
        assert stats.model_dump() == {
            "total_attempts": 0,
            "passed_attempts": 0,
            "failed_attempts": 0,
            "average_score": 0.0,
            "average_time_spent": 0.0,
            "highest_score": 0.0,
            "lowest_score": 0.0,
        }

    def test_only_completed_attempts_count(self):
        stats = compute_statistics(
            [
                row("COMPLETED", 80.0, True, 10),
                row("COMPLETED", 40.0, False, 20),
                row("IN_PROGRESS"),
                row("ABANDONED", minutes=3),
            ]
        )
        assert stats.total_attempts == 2
        assert stats.passed_attempts == 1
        assert stats.failed_attempts == 1
        assert stats.average_score == pytest.approx(60.0)
        assert stats.average_time_spent == pytest.approx(15.0)
        assert stats.highest_score == 80.0
        assert stats.lowest_score == 40.0


class TestStatisticsServiceQueries:
    def test_statistics_over_stored_attempts(
        self, db_session, session_service, two_question_test
    ):
        test, q1, q2 = two_question_test

        first = session_service.start(1, test.id)
        session_service.submit(
            first.id, [choose(q1, correct_option(q1)), choose(q2, correct_option(q2))]
        )
        second = session_service.start(2, test.id)
        session_service.submit(second.id, [choose(q1, correct_option(q1))])
        session_service.start(3, test.id)
        abandoned = session_service.start(4, test.id)
        session_service.abandon(abandoned.id)

        stats = TestStatisticsService(db_session).statistics(test.id)

        assert stats.total_attempts == 2
        assert stats.passed_attempts == 1
        assert stats.failed_attempts == 1
        assert stats.average_score == pytest.approx(70.0)
        assert stats.highest_score == 100
        assert stats.lowest_score == 40

    def test_test_without_attempts(self, db_session, make_test):
        test = make_test()
        stats = TestStatisticsService(db_session).statistics(test.id)
        assert stats.total_attempts == 0
        assert stats.average_score == 0

    def test_unknown_test(self, db_session):
        with pytest.raises(NotFoundException):
            TestStatisticsService(db_session).statistics(77)


def test_wrong_answers_count_as_failures(db_session, session_service, two_question_test):
    test, q1, q2 = two_question_test
    attempt = session_service.start(5, test.id)
    session_service.submit(
        attempt.id, [choose(q1, wrong_option(q1)), choose(q2, wrong_option(q2))]
    )

    stats = TestStatisticsService(db_session).statistics(test.id)

    assert stats.failed_attempts == 1
    assert stats.lowest_score == 0
