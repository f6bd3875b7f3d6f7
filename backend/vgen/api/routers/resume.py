# vgen/api/routers/resume.py
import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.models import User
from vgen.schemas.requests import ResumeIn
from vgen.services import history, resume as resume_service
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

router = APIRouter(prefix="/resume", tags=["resume"])

_MEDIA_TYPES = {
    "markdown": ("text/markdown; charset=utf-8", "md"),
    "html": ("text/html; charset=utf-8", "html"),
    "json": ("application/json", "json"),
}


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.post("/generate")
async def generate(
    body: ResumeIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Generate a resume from structured data (counts against the monthly quota).

    Args:
        body: personalInfo (firstName, lastName, email required), experience,
            education, skills, projects, certifications, languages, template

    Returns:
        dict: {"success": True, "data": {"resume": str, "template": str, "generatedAt": iso}}

    Raises:
        HTTPException (400): Validation failed
        HTTPException (429): Monthly quota exhausted
        HTTPException (500): Model call failed
    """
    with handle_failures("Failed to generate resume. Please try again."):
        text = await resume_service.generate_resume(ai, body.resume_data(), body.template)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Resume generated successfully",
            "data": {"resume": text, "template": body.template, "generatedAt": _now()},
        }


@router.get("/templates")
async def templates():
    return {"success": True, "data": {"templates": resume_service.TEMPLATES, "total": len(resume_service.TEMPLATES)}}


@router.post("/preview")
async def preview(body: ResumeIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    """Same as /generate without consuming quota."""
    with handle_failures("Failed to generate resume preview. Please try again."):
        text = await resume_service.generate_resume(ai, body.resume_data(), body.template)
        return {
            "success": True,
            "message": "Resume preview generated successfully",
            "data": {"resume": text, "template": body.template, "isPreview": True},
        }


@router.get("/download/{content_id}")
async def download(
    content_id: str,
    format: str = Query("markdown", pattern="^(markdown|html|json)$"),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Download a saved resume rendered as markdown, html or json.

    Raises:
        HTTPException (404): No accessible resume with this id
    """
    with handle_failures("Failed to download resume. Please try again."):
        item = await store.content.get(content_id)
        if item is None or item.type != "resume" or not item.is_accessible(user.id):
            raise HTTPException(status_code=404, detail="Resume not found")
        body = resume_service.render_resume(item.content, format)
        await history.count_download(store, item)
        media_type, ext = _MEDIA_TYPES[format]
        return Response(
            content=body,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="resume-{item.id}.{ext}"'},
        )
