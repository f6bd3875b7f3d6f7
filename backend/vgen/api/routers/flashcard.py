# vgen/api/routers/flashcard.py
import datetime as dt
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.models import User
from vgen.schemas.requests import Difficulty
from vgen.services import flashcards, history
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

router = APIRouter(prefix="/flashcard", tags=["flashcard"])

PREVIEW_MAX_CARDS = 5


class FlashcardIn(BaseModel):
    content: str = Field(min_length=50)
    subject: str = "general"
    difficulty: Difficulty = "mixed"
    count: int = Field(default=10, ge=5, le=20)
    customization: dict = Field(default_factory=dict)


class PreviewIn(FlashcardIn):
    count: int = Field(default=PREVIEW_MAX_CARDS, ge=1, le=20)


class StudyPlanIn(BaseModel):
    flashcardIds: List[str] = Field(min_length=1)
    studyDays: int = Field(default=7, ge=1, le=30)
    dailyCards: int = Field(default=20, ge=5, le=50)
    algorithm: Literal["leitner", "sm2", "anki", "custom"] = "sm2"


class ScheduleReviewIn(BaseModel):
    flashcardId: str = Field(min_length=1)
    performance: Literal["easy", "good", "hard", "again"]
    algorithm: Literal["leitner", "sm2", "anki", "custom"] = "sm2"
    interval: int = Field(default=1, ge=1)
    easeFactor: float = Field(default=2.5, ge=1.3)
    repetitions: int = Field(default=0, ge=0)


class StudyCardsIn(BaseModel):
    cards: List[dict] = Field(default_factory=list)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.post("/generate")
async def generate(
    body: FlashcardIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate a flashcard set from study material (quota).

    Args:
        body: content (50+ chars), subject, difficulty, count (5-20)

    Returns:
        dict: flashcards, totalCards, estimatedStudyTime, subject, difficulty, generatedAt

    Raises:
        HTTPException (400): Validation failed
        HTTPException (429): Monthly quota exhausted
        HTTPException (500): Model call failed or returned invalid JSON
    """
    with handle_failures("Failed to generate flashcards. Please try again."):
        result = await flashcards.generate_flashcards(ai, body.content, body.subject, body.difficulty, body.count)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Flashcards generated successfully",
            "data": {
                "flashcards": result["flashcards"],
                "totalCards": result["totalCards"],
                "estimatedStudyTime": result["estimatedStudyTime"],
                "subject": body.subject,
                "difficulty": body.difficulty,
                "generatedAt": _now(),
            },
        }


@router.get("/subjects")
async def subjects():
    items = flashcards.SUBJECTS
    return {"success": True, "data": {"subjects": items, "total": len(items)}}


@router.post("/preview")
async def preview(body: PreviewIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    with handle_failures("Failed to generate flashcard preview. Please try again."):
        count = min(body.count, PREVIEW_MAX_CARDS)
        result = await flashcards.generate_flashcards(ai, body.content, body.subject, body.difficulty, count)
        return {
            "success": True,
            "message": "Flashcard preview generated successfully",
            "data": {
                "flashcards": result["flashcards"],
                "totalCards": result["totalCards"],
                "subject": body.subject,
                "isPreview": True,
            },
        }


@router.post("/generate-study-plan")
async def generate_study_plan(body: StudyPlanIn, user: User = Depends(get_current_user)):
    """Spread the given card ids over studyDays, at most dailyCards per day."""
    with handle_failures("Failed to generate study plan. Please try again."):
        plan = flashcards.study_plan(body.flashcardIds, body.studyDays, body.dailyCards, body.algorithm)
        return {
            "success": True,
            "message": "Study plan generated successfully",
            "data": {
                "studyPlan": plan,
                "totalCards": len(body.flashcardIds),
                "studyDays": body.studyDays,
                "dailyCards": body.dailyCards,
                "generatedAt": _now(),
            },
        }


@router.get("/spaced-repetition-algorithms")
async def spaced_repetition_algorithms():
    items = flashcards.ALGORITHMS
    return {
        "success": True,
        "data": {"algorithms": items, "total": len(items), "recommended": flashcards.RECOMMENDED_ALGORITHM},
    }


@router.post("/schedule-review")
async def schedule_review(body: ScheduleReviewIn, user: User = Depends(get_current_user)):
    """
    Apply one SM-2 step to the card state sent by the client.

    Returns:
        dict: flashcardId, performance, algorithm, nextReview, interval, easeFactor
    """
    with handle_failures("Failed to schedule review. Please try again."):
        try:
            next_review = flashcards.schedule_review(
                body.flashcardId, body.performance, body.interval, body.easeFactor, body.repetitions
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {
            "success": True,
            "message": "Next review scheduled successfully",
            "data": {
                "flashcardId": body.flashcardId,
                "performance": body.performance,
                "algorithm": body.algorithm,
                "nextReview": next_review,
                "interval": next_review["interval"],
                "easeFactor": next_review["easeFactor"],
            },
        }


@router.post("/study-recommendations")
async def study_recommendations(body: StudyCardsIn, user: User = Depends(get_current_user)):
    with handle_failures("Failed to generate study recommendations. Please try again."):
        return {
            "success": True,
            "data": {
                "recommendations": flashcards.study_recommendations(body.cards),
                "reminders": flashcards.study_reminders(body.cards),
                "difficultyAssessment": flashcards.assess_difficulty(body.cards),
                "organization": flashcards.organize(body.cards),
                "generatedAt": _now(),
            },
        }


@router.get("/study-stats/{user_id}")
async def study_stats(user_id: str, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """
    Study statistics computed from the user's saved flashcard sets.

    Raises:
        HTTPException (403): Another user's stats requested by a non-admin
    """
    if user.id != user_id and user.role != "admin":
        raise HTTPException(status_code=403, detail="Access denied. Can only view your own statistics.")
    with handle_failures("Failed to retrieve study statistics. Please try again."):
        items = await history.all_for_user(store, user_id, "flashcard")
        return {"success": True, "data": {"stats": flashcards.study_stats(items), "generatedAt": _now()}}
