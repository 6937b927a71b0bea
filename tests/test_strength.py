"""Tests for the password strength policy."""

from __future__ import annotations

from signupgate.strength import (
    GENERIC_WEAK_MESSAGE,
    StrengthPolicy,
    ZxcvbnEstimator,
    context_inputs,
)

from conftest import FakeEstimator


def test_short_password_rejected_before_scoring():
    estimator = FakeEstimator(score=4)
    policy = StrengthPolicy(estimator=estimator)

    verdict = policy.evaluate("Zq8#vL2!")

    assert verdict.acceptable is False
    assert "at least 12 characters" in verdict.feedback[0]
    assert estimator.calls == []


def test_overlong_password_rejected():
    policy = StrengthPolicy(estimator=FakeEstimator(score=4))

    verdict = policy.evaluate("a" * 129)

    assert verdict.acceptable is False
    assert "fewer than 128" in verdict.feedback[0]


def test_low_score_collects_estimator_feedback():
    estimator = FakeEstimator(score=2, warning="This is similar to a commonly used password.",
                              suggestions=["Add another word or two."])
    policy = StrengthPolicy(estimator=estimator)

    verdict = policy.evaluate("summer-holiday-2024", ["user@example.com"])

    assert verdict.acceptable is False
    assert verdict.score == 2
    assert verdict.feedback == [
        "This is similar to a commonly used password.",
        "Add another word or two.",
    ]
    assert estimator.calls == [("summer-holiday-2024", ["user@example.com"])]


def test_low_score_without_feedback_uses_generic_message():
    policy = StrengthPolicy(estimator=FakeEstimator(score=1))

    verdict = policy.evaluate("aaaaaaaaaaaaaaaa")

    assert verdict.feedback == [GENERIC_WEAK_MESSAGE]


def test_threshold_is_inclusive():
    assert StrengthPolicy(estimator=FakeEstimator(score=3)).evaluate("long enough pass").acceptable
    assert not StrengthPolicy(estimator=FakeEstimator(score=3), min_score=4).evaluate("long enough pass").acceptable


def test_zxcvbn_rejects_common_password():
    policy = StrengthPolicy(estimator=ZxcvbnEstimator())

    verdict = policy.evaluate("password123456")

    assert verdict.acceptable is False
    assert verdict.score < 3
    assert verdict.feedback


def test_zxcvbn_accepts_random_password():
    policy = StrengthPolicy(estimator=ZxcvbnEstimator())

    verdict = policy.evaluate("tR7#qLm2!vXz9@Pw")

    assert verdict.acceptable is True
    assert verdict.score >= 3


def test_context_inputs():
    assert context_inputs(" Jane.Doe@Example.com ", "Jane", "", "Doe") == [
        "jane.doe@example.com",
        "jane.doe",
        "Jane",
        "Doe",
    ]
    assert context_inputs("") == []
