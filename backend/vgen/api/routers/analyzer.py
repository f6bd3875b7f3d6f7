# vgen/api/routers/analyzer.py
import datetime as dt
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from vgen.api.deps import check_usage_limit, get_ai, get_current_user, get_store, handle_failures, record_usage
from vgen.core.errors import FileProcessingError, FileTooLargeError, UnsupportedFileTypeError
from vgen.models import User
from vgen.services import analyzer, file_text
from vgen.services.ai_client import GeminiClient
from vgen.services.ats import calculate_ats_score
from vgen.storage.base import Store

router = APIRouter(prefix="/analyzer", tags=["analyzer"])

ExperienceLevel = Literal["entry", "mid", "senior", "executive"]


class AnalyzeIn(BaseModel):
    resumeText: Optional[str] = Field(default=None, min_length=100)
    jobDescription: Optional[str] = Field(default=None, min_length=50)
    industry: str = "general"
    experienceLevel: ExperienceLevel = "mid"


class AtsScoreIn(BaseModel):
    resumeText: str = Field(min_length=100)
    jobDescription: str = ""


class KeywordOptimizationIn(BaseModel):
    resumeText: str = Field(min_length=100)
    jobDescription: str = Field(min_length=50)
    industry: str = "general"


class CompareIn(BaseModel):
    resumes: List[str] = Field(min_length=2, max_length=5)
    jobDescription: str = Field(min_length=50)


class ResumeTextIn(BaseModel):
    resumeText: str = Field(min_length=100)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


async def _read_upload(upload: UploadFile) -> tuple[bytes, str]:
    try:
        data = await file_text.read_limited(upload)
        return data, file_text.extract_text(data, upload.filename, upload.content_type)
    except UnsupportedFileTypeError:
        raise HTTPException(status_code=400, detail=file_text.INVALID_TYPE_MESSAGE)
    except FileTooLargeError:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB.")
    except FileProcessingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/analyze")
async def analyze(
    body: AnalyzeIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Full resume analysis: AI review, ATS score, keyword optimization and skills (quota).

    Args:
        body: resumeText (100+ chars), optional jobDescription (50+ chars),
            industry, experienceLevel

    Returns:
        dict: analysis, industry, experienceLevel, analyzedAt, textLength

    Raises:
        HTTPException (400): No resume text or validation failed
        HTTPException (429): Monthly quota exhausted
        HTTPException (500): A model call failed or returned invalid JSON
    """
    if not body.resumeText:
        raise HTTPException(status_code=400, detail="Either resume text or file must be provided")
    with handle_failures("Failed to analyze resume. Please try again."):
        analysis = await analyzer.analyze_resume(
            ai, body.resumeText, body.jobDescription or "", body.industry, body.experienceLevel
        )
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Resume analyzed successfully",
            "data": {
                "analysis": analysis,
                "industry": body.industry,
                "experienceLevel": body.experienceLevel,
                "analyzedAt": _now(),
                "textLength": len(body.resumeText),
            },
        }


@router.post("/analyze-file")
async def analyze_file(
    resume: UploadFile = File(...),
    jobDescription: str = Form(""),
    industry: str = Form("general"),
    experienceLevel: ExperienceLevel = Form("mid"),
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """
    Analyze an uploaded resume (txt, pdf or docx, at most 5 MB; quota).

    Raises:
        HTTPException (400): Unsupported type, oversized or unreadable file
    """
    data, text = await _read_upload(resume)
    with handle_failures("Failed to analyze resume file. Please try again."):
        analysis = await analyzer.analyze_resume(ai, text, jobDescription, industry, experienceLevel)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Resume file analyzed successfully",
            "data": {
                "analysis": analysis,
                "filename": resume.filename,
                "fileSize": len(data),
                "industry": industry,
                "experienceLevel": experienceLevel,
                "analyzedAt": _now(),
            },
        }


@router.post("/ats-score")
async def ats_score(body: AtsScoreIn, user: User = Depends(get_current_user)):
    with handle_failures("Failed to calculate ATS score. Please try again."):
        score = calculate_ats_score(body.resumeText, body.jobDescription)
        return {
            "success": True,
            "message": "ATS score calculated successfully",
            "data": {"atsScore": score, "calculatedAt": _now()},
        }


@router.get("/industries")
async def industries():
    items = analyzer.INDUSTRIES
    return {"success": True, "data": {"industries": items, "total": len(items)}}


@router.post("/keyword-optimization")
async def keyword_optimization(
    body: KeywordOptimizationIn,
    user: User = Depends(get_current_user),
    ai: GeminiClient = Depends(get_ai),
):
    with handle_failures("Failed to optimize keywords. Please try again."):
        optimization = await analyzer.optimize_keywords(ai, body.resumeText, body.jobDescription, body.industry)
        return {
            "success": True,
            "message": "Keywords optimized successfully",
            "data": {"optimization": optimization, "industry": body.industry, "optimizedAt": _now()},
        }


@router.get("/ats-tips")
async def ats_tips():
    tips = analyzer.ATS_TIPS
    return {
        "success": True,
        "data": {
            "tips": tips,
            "categories": list(tips),
            "totalTips": sum(len(items) for items in tips.values()),
        },
    }


@router.post("/compare-resumes")
async def compare_resumes(
    body: CompareIn,
    user: User = Depends(check_usage_limit),
    store: Store = Depends(get_store),
    ai: GeminiClient = Depends(get_ai),
):
    """Rank 2-5 resumes against one job description (quota, charged once)."""
    with handle_failures("Failed to compare resumes. Please try again."):
        comparison = await analyzer.compare_resumes(ai, body.resumes, body.jobDescription)
        await record_usage(store, user)
        return {
            "success": True,
            "message": "Resume comparison completed successfully",
            "data": {"comparison": comparison, "totalResumes": len(body.resumes), "comparedAt": _now()},
        }


@router.post("/extract-skills")
async def extract_skills(body: ResumeTextIn, user: User = Depends(get_current_user), ai: GeminiClient = Depends(get_ai)):
    with handle_failures("Failed to extract skills. Please try again."):
        skills = await analyzer.extract_skills(ai, body.resumeText)
        return {
            "success": True,
            "message": "Skills extracted successfully",
            "data": {"skills": skills, "extractedAt": _now()},
        }
