# vgen/api/routers/bio.py
import datetime as dt
from typing import Any, List, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.models import User
from vgen.services import bio as bio_service
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

router = APIRouter(prefix="/bio", tags=["bio"])

Platform = Literal["linkedin", "twitter", "instagram", "general", "website"]
Tone = Literal["professional", "casual", "creative", "technical", "friendly"]


class BioProfile(BaseModel):
    personalInfo: dict
    experience: List[dict] = Field(default_factory=list)
    skills: Any = Field(default_factory=list)
    achievements: List[Any] = Field(default_factory=list)

    def bio_data(self) -> dict:
        return {
            "personalInfo": self.personalInfo,
            "experience": self.experience,
            "skills": self.skills,
            "achievements": self.achievements,
        }


class BioIn(BioProfile):
    platform: Platform = "general"
    tone: Tone = "professional"
    includeEmojis: bool = False
    keywords: List[str] = Field(default_factory=list)
    customization: dict = Field(default_factory=dict)


class OptimizeKeywordsIn(BaseModel):
    currentBio: str = Field(min_length=1)
    keywords: List[str] = Field(min_length=1)
    platform: Platform
    tone: Tone = "professional"


class VariationsIn(BioProfile):
    platform: Platform
    count: int = Field(default=3, ge=2, le=5)


class AnalyzeBioIn(BaseModel):
    bio: str = Field(min_length=1)
    platform: Platform = "general"
    userData: dict = Field(default_factory=dict)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


async def _generate(ai: GeminiClient, body: BioIn) -> str:
    return await bio_service.generate_bio(
        ai, body.bio_data(), body.platform, body.tone, body.includeEmojis, body.keywords
    )


@router.post("/generate")
async def generate(
    body: BioIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate a platform-specific bio (quota).

    Returns:
        dict: bio, platform, tone, characterCount, wordCount, generatedAt
    """
    with handle_failures("Failed to generate bio. Please try again."):
        text = await _generate(ai, body)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Bio generated successfully",
            "data": {
                "bio": text,
                "platform": body.platform,
                "tone": body.tone,
                "characterCount": len(text),
                "wordCount": bio_service.word_count(text),
                "generatedAt": _now(),
            },
        }


@router.get("/platforms")
async def platforms():
    items = bio_service.PLATFORMS
    return {"success": True, "data": {"platforms": items, "total": len(items)}}


@router.get("/tones")
async def tones():
    items = bio_service.TONES
    return {"success": True, "data": {"tones": items, "total": len(items)}}


@router.post("/preview")
async def preview(body: BioIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    with handle_failures("Failed to generate bio preview. Please try again."):
        text = await _generate(ai, body)
        return {
            "success": True,
            "message": "Bio preview generated successfully",
            "data": {
                "bio": text,
                "platform": body.platform,
                "tone": body.tone,
                "characterCount": len(text),
                "isPreview": True,
            },
        }


@router.post("/optimize-keywords")
async def optimize_keywords(
    body: OptimizeKeywordsIn,
    user: User = Depends(get_current_user),
    ai: GeminiClient = Depends(get_ai),
):
    """Rewrite an existing bio so the given keywords appear naturally."""
    with handle_failures("Failed to optimize bio. Please try again."):
        optimized = await bio_service.optimize_bio(ai, body.currentBio, body.keywords, body.platform, body.tone)
        return {
            "success": True,
            "message": "Bio optimized with keywords successfully",
            "data": {
                "originalBio": body.currentBio,
                "optimizedBio": optimized,
                "keywords": body.keywords,
                "platform": body.platform,
                "characterCount": len(optimized),
                "improvements": "Keywords integrated naturally into bio",
            },
        }


@router.post("/generate-variations")
async def generate_variations(
    body: VariationsIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate `count` bios, one per tone in catalogue order (quota, charged once).
    """
    with handle_failures("Failed to generate bio variations. Please try again."):
        variations = await bio_service.generate_variations(ai, body.bio_data(), body.platform, body.count)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Bio variations generated successfully",
            "data": {
                "variations": variations,
                "platform": body.platform,
                "count": len(variations),
                "generatedAt": _now(),
            },
        }


@router.post("/analyze")
async def analyze(body: AnalyzeBioIn, user: User = Depends(get_current_user)):
    """Local analytics for a bio: counts, platform limit, readability, keyword density, hashtags."""
    with handle_failures("Failed to analyze bio. Please try again."):
        analytics = bio_service.analyze_bio(body.bio, body.platform, body.userData)
        return {"success": True, "data": {"analytics": analytics, "platform": body.platform, "analyzedAt": _now()}}
