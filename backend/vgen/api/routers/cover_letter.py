# vgen/api/routers/cover_letter.py
import datetime as dt
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.models import User
from vgen.services import cover_letter as cover_letter_service, history
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

router = APIRouter(prefix="/cover-letter", tags=["cover-letter"])


class CoverLetterIn(BaseModel):
    resumeData: dict
    jobDescription: str = Field(min_length=10)
    companyInfo: dict | None = None
    tone: Literal["formal", "professional", "enthusiastic", "confident"] = "professional"
    customization: dict = Field(default_factory=dict)


class JobDescriptionIn(BaseModel):
    jobDescription: str = Field(min_length=10)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.post("/generate")
async def generate(
    body: CoverLetterIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate a cover letter tailored to a job description (quota).

    Returns:
        dict: {"success": True, "data": {"coverLetter": str, "tone": str, "generatedAt": iso}}
    """
    with handle_failures("Failed to generate cover letter. Please try again."):
        text = await cover_letter_service.generate_cover_letter(
            ai, body.resumeData, body.jobDescription, body.tone, body.companyInfo
        )
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Cover letter generated successfully",
            "data": {"coverLetter": text, "tone": body.tone, "generatedAt": _now()},
        }


@router.get("/templates")
async def templates():
    items = cover_letter_service.TEMPLATES
    return {"success": True, "data": {"templates": items, "total": len(items)}}


@router.get("/tones")
async def tones():
    items = cover_letter_service.TONES
    return {"success": True, "data": {"tones": items, "total": len(items)}}


@router.post("/preview")
async def preview(body: CoverLetterIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    with handle_failures("Failed to generate cover letter preview. Please try again."):
        text = await cover_letter_service.generate_cover_letter(
            ai, body.resumeData, body.jobDescription, body.tone, body.companyInfo
        )
        return {
            "success": True,
            "message": "Cover letter preview generated successfully",
            "data": {"coverLetter": text, "tone": body.tone, "isPreview": True},
        }


@router.post("/analyze-job")
async def analyze_job(body: JobDescriptionIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    """
    Extract requirements, keywords, level and a suggested tone from a posting.

    Raises:
        HTTPException (500): Model call failed or returned invalid JSON
    """
    with handle_failures("Failed to analyze job description. Please try again."):
        analysis = await cover_letter_service.analyze_job(ai, body.jobDescription)
        return {
            "success": True,
            "message": "Job description analyzed successfully",
            "data": {"analysis": analysis.model_dump(), "analyzedAt": _now()},
        }


@router.get("/download/{content_id}")
async def download(
    content_id: str,
    format: str = Query("text", pattern="^(text|html)$"),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Download a saved cover letter as plain text or a print-ready HTML page."""
    with handle_failures("Failed to download cover letter. Please try again."):
        item = await store.content.get(content_id)
        if item is None or item.type != "cover-letter" or not item.is_accessible(user.id):
            raise HTTPException(status_code=404, detail="Cover letter not found")
        body = cover_letter_service.render_cover_letter(item.content, format)
        await history.count_download(store, item)
        media_type = "text/html; charset=utf-8" if format == "html" else "text/plain; charset=utf-8"
        ext = "html" if format == "html" else "txt"
        return Response(
            content=body,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="cover-letter-{item.id}.{ext}"'},
        )
