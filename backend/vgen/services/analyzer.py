# vgen/services/analyzer.py
"""
Resume analyzer: AI review merged with the local ATS heuristics.

analyze_resume() makes three model calls (analysis, keyword optimization,
skill extraction) and one local ATS scoring pass, then merges the results
into a single document for the client.
"""
import datetime as dt
import logging

from vgen.schemas.ai import KeywordOptimization, ResumeAnalysis, SkillExtraction
from vgen.services import prompts
from vgen.services.ai_client import GeminiClient
from vgen.services.ats import calculate_ats_score

logger = logging.getLogger("uvicorn.error")

EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")

INDUSTRIES = [
    {
        "id": "technology",
        "name": "Technology",
        "description": "Software, Hardware, IT Services",
        "keywords": ["JavaScript", "Python", "React", "Node.js", "AWS", "Docker", "Kubernetes"],
    },
    {
        "id": "healthcare",
        "name": "Healthcare",
        "description": "Medical, Pharmaceutical, Biotechnology",
        "keywords": ["HIPAA", "FDA", "Clinical", "Patient Care", "Medical Records"],
    },
    {
        "id": "finance",
        "name": "Finance",
        "description": "Banking, Investment, Insurance",
        "keywords": ["Financial Analysis", "Risk Management", "CFA", "Bloomberg", "Excel"],
    },
    {
        "id": "education",
        "name": "Education",
        "description": "Teaching, Administration, Research",
        "keywords": ["Curriculum Development", "Classroom Management", "Assessment", "Pedagogy"],
    },
    {
        "id": "marketing",
        "name": "Marketing",
        "description": "Digital Marketing, Advertising, PR",
        "keywords": ["SEO", "Content Marketing", "Google Analytics", "Social Media", "Branding"],
    },
    {
        "id": "engineering",
        "name": "Engineering",
        "description": "Mechanical, Electrical, Civil Engineering",
        "keywords": ["CAD", "AutoCAD", "Project Management", "Quality Control", "Safety"],
    },
    {
        "id": "sales",
        "name": "Sales",
        "description": "Business Development, Account Management",
        "keywords": ["CRM", "Lead Generation", "Relationship Building", "Negotiation"],
    },
    {
        "id": "general",
        "name": "General",
        "description": "General business and administration",
        "keywords": ["Project Management", "Communication", "Leadership", "Organization"],
    },
]

ATS_TIPS = {
    "formatting": [
        "Use standard fonts (Arial, Calibri, Times New Roman)",
        "Keep font size between 10-12 points",
        "Use bold for headings, not italics or underline",
        "Avoid tables, graphics, and images",
        "Use standard section headings (Experience, Education, Skills)",
    ],
    "content": [
        "Include relevant keywords from job description",
        "Quantify achievements with numbers",
        "Use action verbs to start bullet points",
        "Keep bullet points concise (1-2 lines)",
        "Include location and contact information",
        "Save as .docx or .pdf with standard naming",
    ],
    "structure": [
        "Put most important information first",
        "Use reverse chronological order",
        "Include all standard sections",
        "Keep resume to 1-2 pages",
        "Use consistent formatting throughout",
    ],
    "commonMistakes": [
        "Using fancy graphics or unusual fonts",
        "Including personal information (age, marital status)",
        "Using headers/footers for important information",
        "Submitting in wrong file format",
        "Having spelling or grammatical errors",
    ],
}


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


async def optimize_keywords(
    ai: GeminiClient,
    resume_text: str,
    job_description: str,
    industry: str = "general",
) -> dict:
    result = await ai.generate_json(
        prompts.keyword_optimization_prompt(resume_text, job_description, industry),
        KeywordOptimization,
        max_tokens=1000,
        temperature=0.3,
    )
    return {**result.model_dump(), "optimizedAt": _now_iso()}


async def extract_skills(ai: GeminiClient, resume_text: str) -> dict:
    result = await ai.generate_json(
        prompts.skill_extraction_prompt(resume_text),
        SkillExtraction,
        max_tokens=800,
        temperature=0.2,
    )
    skills = result.model_dump()
    if skills["totalSkills"] is None:
        skills["totalSkills"] = sum(
            len(skills[key]) for key in ("technical", "soft", "languages", "tools", "certifications")
        )
    return {**skills, "extractedAt": _now_iso()}


async def analyze_resume(
    ai: GeminiClient,
    resume_text: str,
    job_description: str = "",
    industry: str = "general",
    experience_level: str = "mid",
) -> dict:
    """
    Full resume review.

    Args:
        ai: Completion client
        resume_text: Plain resume text
        job_description: Optional posting to match against
        industry: Industry id used for keyword suggestions
        experience_level: entry | mid | senior | executive

    Returns:
        The AI analysis fields plus atsScore, keywordOptimization, skills,
        industry, experienceLevel and analysisDate

    Raises:
        AIServiceError: Any model call failed
        AIResponseError: A model reply did not validate
    """
    analysis = await ai.generate_json(
        prompts.resume_analysis_prompt(resume_text, job_description),
        ResumeAnalysis,
        max_tokens=2000,
        temperature=0.3,
    )
    ats_score = calculate_ats_score(resume_text, job_description)
    keywords = await optimize_keywords(ai, resume_text, job_description, industry)
    skills = await extract_skills(ai, resume_text)

    return {
        **analysis.model_dump(),
        "atsScore": ats_score,
        "keywordOptimization": keywords,
        "skills": skills,
        "industry": industry,
        "experienceLevel": experience_level,
        "analysisDate": _now_iso(),
    }


async def compare_resumes(ai: GeminiClient, resumes: list[str], job_description: str) -> dict:
    """
    Rank resumes for one posting by the AI overall score (highest first).

    Each resume gets one AI analysis and one ATS pass; resumeIndex refers to
    the position in the submitted list.
    """
    rankings = []
    for index, resume_text in enumerate(resumes):
        analysis = await ai.generate_json(
            prompts.resume_analysis_prompt(resume_text, job_description),
            ResumeAnalysis,
            max_tokens=2000,
            temperature=0.3,
        )
        ats_score = calculate_ats_score(resume_text, job_description)
        rankings.append({
            "resumeIndex": index,
            "overallScore": analysis.overallScore,
            "atsScore": ats_score["overallScore"],
            "strengths": analysis.strengths,
            "weaknesses": analysis.weaknesses,
        })
    rankings.sort(key=lambda r: r["overallScore"], reverse=True)
    logger.info("[Analyzer] Compared %d resumes", len(resumes))

    return {
        "totalResumes": len(resumes),
        "rankings": rankings,
        "strengths": {},
        "weaknesses": {},
        "recommendations": {},
    }
