# vgen/api/routers/interview.py
import datetime as dt
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.models import User
from vgen.schemas.requests import Difficulty
from vgen.services import interview
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

router = APIRouter(prefix="/interview", tags=["interview"])

PREVIEW_MAX_QUESTIONS = 5
PREVIEW_NOTE = "This is a preview. Generate full set for complete question bank."


class QuestionsIn(BaseModel):
    jobDescription: str = Field(min_length=50)
    questionType: Literal["technical", "behavioral", "situational", "mixed"] = "mixed"
    difficulty: Difficulty = "mixed"
    count: int = Field(default=10, ge=5, le=20)
    industry: str = "general"
    customization: dict = Field(default_factory=dict)

    def options(self) -> dict:
        return {
            "questionType": self.questionType,
            "difficulty": self.difficulty,
            "count": self.count,
            "industry": self.industry,
            "customization": self.customization,
        }


class PreviewQuestionsIn(QuestionsIn):
    count: int = Field(default=PREVIEW_MAX_QUESTIONS, ge=1, le=20)


class AnswersIn(BaseModel):
    questions: List[dict] = Field(min_length=1, max_length=10)
    resumeData: dict = Field(default_factory=dict)
    experience: str = ""


class MockInterviewIn(BaseModel):
    jobDescription: str = Field(min_length=50)
    duration: int = Field(default=30, ge=15, le=60)
    questionCount: int = Field(default=8, ge=5, le=15)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.post("/generate-questions")
async def generate_questions(
    body: QuestionsIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate interview questions for a job description (quota).

    Returns:
        dict: questions, totalQuestions, questionDistribution, jobDescription
            (first 200 chars), options, generatedAt
    """
    with handle_failures("Failed to generate interview questions. Please try again."):
        result = await interview.generate_questions(
            ai, body.jobDescription, body.questionType, body.difficulty, body.count, body.industry
        )
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Interview questions generated successfully",
            "data": {
                **result,
                "jobDescription": interview.job_excerpt(body.jobDescription),
                "options": body.options(),
                "generatedAt": _now(),
            },
        }


@router.get("/question-types")
async def question_types():
    items = interview.QUESTION_TYPES
    return {
        "success": True,
        "data": {
            "questionTypes": items,
            "total": len(items),
            "recommendedDistribution": interview.RECOMMENDED_DISTRIBUTION,
        },
    }


@router.get("/industries")
async def industries():
    items = interview.INDUSTRIES
    return {"success": True, "data": {"industries": items, "total": len(items)}}


@router.post("/preview-questions")
async def preview_questions(
    body: PreviewQuestionsIn,
    user: User = Depends(get_current_user),
    ai: GeminiClient = Depends(get_ai),
):
    with handle_failures("Failed to generate interview questions preview. Please try again."):
        count = min(body.count, PREVIEW_MAX_QUESTIONS)
        result = await interview.generate_questions(
            ai, body.jobDescription, body.questionType, body.difficulty, count, body.industry
        )
        return {
            "success": True,
            "message": "Interview questions preview generated successfully",
            "data": {
                "questions": result["questions"],
                "totalQuestions": result["totalQuestions"],
                "isPreview": True,
                "previewNote": PREVIEW_NOTE,
            },
        }


@router.post("/generate-answers")
async def generate_answers(
    body: AnswersIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Answer guidance for 1-10 questions (quota, charged once).

    A reply that cannot be parsed yields a fallback record (isFallback) for
    that question instead of failing the request.
    """
    with handle_failures("Failed to generate answer guidance. Please try again."):
        answers = await interview.answer_guidance(ai, body.questions, body.resumeData, body.experience)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Answer guidance generated successfully",
            "data": {"answers": answers, "totalQuestions": len(body.questions), "generatedAt": _now()},
        }


@router.get("/answer-structure")
async def answer_structure():
    items = interview.ANSWER_STRUCTURES
    return {
        "success": True,
        "data": {"structures": items, "total": len(items), "recommended": interview.RECOMMENDED_STRUCTURE},
    }


@router.post("/mock-interview")
async def mock_interview(
    body: MockInterviewIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    with handle_failures("Failed to generate mock interview. Please try again."):
        session = await interview.mock_interview(ai, body.jobDescription, body.duration, body.questionCount)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Mock interview generated successfully",
            "data": {
                "mockInterview": session,
                "estimatedDuration": body.duration,
                "totalQuestions": session["totalQuestions"],
                "generatedAt": _now(),
            },
        }


@router.get("/tips")
async def tips(industry: Optional[str] = None):
    return {"success": True, "data": interview.tips_for(industry)}
