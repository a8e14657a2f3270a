"""Career quiz endpoints under /api/quiz."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_current_student, get_db_session
from domain.mentoring.quiz import Answer
from models.student import Student
from services import quiz_service

router = APIRouter(prefix="/quiz", tags=["quiz"])


class AnswerBody(BaseModel):
    question_id: int = Field(..., ge=1)
    selected_option: int = Field(..., ge=0)


class SubmitBody(BaseModel):
    answers: List[AnswerBody] = Field(..., min_length=1)


@router.get("")
async def quiz_info():
    return quiz_service.QUIZ_INFO


@router.get("/questions")
async def questions(student: Student = Depends(get_current_student)):
    return quiz_service.questions()


@router.post("/submit")
async def submit(
    body: SubmitBody,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    answers = [Answer(question_id=a.question_id, selected_option=a.selected_option) for a in body.answers]
    return await quiz_service.submit(session, student, answers)


@router.get("/results")
async def results(student: Student = Depends(get_current_student)):
    return quiz_service.results(student)


@router.get("/careers")
async def careers():
    return quiz_service.careers()
