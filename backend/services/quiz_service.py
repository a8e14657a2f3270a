"""Career quiz: question bank access, answer submission and stored results."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from domain.mentoring.quiz import CAREER_INFO, CAREER_QUESTIONS, Answer, score_answers
from models.base import utcnow
from models.student import Student
from repositories.student_repo import StudentRepository

QUIZ_INFO = {
    "message": "Career Interest Quiz API",
    "description": "Answer a short set of questions to discover careers that match your interests.",
    "total_questions": len(CAREER_QUESTIONS),
}


def questions() -> Dict[str, Any]:
    return {
        "questions": [q.to_dict() for q in CAREER_QUESTIONS],
        "total_questions": len(CAREER_QUESTIONS),
    }


def careers() -> Dict[str, Any]:
    return {"careers": CAREER_INFO}


async def submit(session: AsyncSession, student: Student, answers: Iterable[Answer]) -> Dict[str, Any]:
    """Score the answers and store them as the student's quiz results."""
    ranked = [c.to_dict() for c in score_answers(list(answers))]
    student.quiz_results = {
        "completed": True,
        "recommended_careers": ranked,
        "completed_at": utcnow().isoformat(),
    }
    await StudentRepository(session).save(student)
    return {
        "message": "Quiz submitted successfully",
        "recommended_careers": ranked,
        "quiz_results": student.quiz_results,
    }


def results(student: Student) -> Dict[str, Any]:
    quiz_results = student.quiz_results or {}
    if not quiz_results.get("completed"):
        raise NotFoundError("Quiz not completed yet.")
    recommended: List[Dict[str, Any]] = quiz_results.get("recommended_careers") or []
    return {
        "quiz_results": quiz_results,
        "career_details": {
            c["career"]: CAREER_INFO[c["career"]]
            for c in recommended
            if c.get("career") in CAREER_INFO
        },
    }
