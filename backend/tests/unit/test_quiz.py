"""
Unit tests for the career quiz scorer: weights per tag, tie order, invalid answers, top five.
"""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from domain.mentoring.quiz import (
    CAREER_QUESTIONS,
    TOP_CAREERS,
    Answer,
    QuizOption,
    QuizQuestion,
    score_answers,
)


def test_question_bank_shape() -> None:
    assert [q.id for q in CAREER_QUESTIONS] == [1, 2, 3, 4, 5]
    assert all(len(q.options) == 4 for q in CAREER_QUESTIONS)


def test_two_analytical_answers_score_engineering_six() -> None:
    ranked = score_answers([Answer(1, 0), Answer(2, 0)])
    scores = {r.career: r.score for r in ranked}
    assert scores["Engineering"] == 6
    assert scores["Computer Science"] == 6
    assert ranked[0].career == "Engineering"


def test_ties_keep_first_seen_order() -> None:
    ranked = score_answers([Answer(1, 1)])
    assert [r.career for r in ranked] == ["Arts", "Literature", "Teaching", "Law"]
    assert {r.score for r in ranked} == {2}


def test_unknown_questions_and_options_are_skipped() -> None:
    assert score_answers([Answer(99, 0), Answer(1, 7), Answer(2, -1)]) == []


def test_only_top_five_returned() -> None:
    answers = [Answer(q.id, 0) for q in CAREER_QUESTIONS]
    ranked = score_answers(answers)
    assert len(ranked) == TOP_CAREERS
    assert [r.score for r in ranked] == sorted((r.score for r in ranked), reverse=True)


def test_custom_question_bank() -> None:
    bank = (QuizQuestion(1, "Pick", (QuizOption("a", ("X", "Y"), 4),)),)
    ranked = score_answers([Answer(1, 0), Answer(1, 0)], questions=bank, top=1)
    assert [r.to_dict() for r in ranked] == [{"career": "X", "score": 8}]
