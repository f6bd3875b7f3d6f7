# vgen/services/cover_letter.py
"""
Cover letter generation, job description analysis and HTML rendering.
"""
import datetime as dt
from html import escape

from vgen.schemas.ai import JobAnalysis
from vgen.services import prompts
from vgen.services.ai_client import GeminiClient

TEMPLATES = [
    {
        "id": "standard",
        "name": "Standard",
        "description": "Traditional cover letter format with professional structure",
        "features": ["Professional format", "Standard sections", "Classic layout"],
    },
    {
        "id": "modern",
        "name": "Modern",
        "description": "Contemporary design with clean formatting and modern language",
        "features": ["Modern language", "Clean design", "Current trends"],
    },
    {
        "id": "creative",
        "name": "Creative",
        "description": "Unique approach for creative industries and innovative companies",
        "features": ["Creative approach", "Unique structure", "Industry-specific"],
    },
    {
        "id": "executive",
        "name": "Executive",
        "description": "Leadership-focused format for senior-level positions",
        "features": ["Leadership focus", "Achievement emphasis", "Strategic approach"],
    },
    {
        "id": "technical",
        "name": "Technical",
        "description": "Designed for technical roles with emphasis on skills and expertise",
        "features": ["Technical focus", "Skills emphasis", "Project highlights"],
    },
    {
        "id": "career-change",
        "name": "Career Change",
        "description": "Specialized format for transitioning to a new career field",
        "features": ["Transition focus", "Transferable skills", "Adaptation emphasis"],
    },
]

TONES = [
    {
        "id": "formal",
        "name": "Formal",
        "description": "Traditional, professional tone suitable for conservative industries",
        "useCase": "Corporate, Legal, Finance, Government positions",
    },
    {
        "id": "professional",
        "name": "Professional",
        "description": "Balanced, business-appropriate tone for most industries",
        "useCase": "General business, Technology, Healthcare positions",
    },
    {
        "id": "enthusiastic",
        "name": "Enthusiastic",
        "description": "Energetic, passionate tone showing genuine interest",
        "useCase": "Startups, Creative fields, Education, Non-profit",
    },
    {
        "id": "confident",
        "name": "Confident",
        "description": "Assertive, self-assured tone highlighting achievements",
        "useCase": "Sales, Marketing, Leadership, Executive positions",
    },
]
TONE_IDS = tuple(t["id"] for t in TONES)

DOWNLOAD_FORMATS = ("text", "html")


def format_resume_for_cover_letter(resume_data: dict) -> dict:
    """Condense structured resume data to what a cover letter draws on."""
    info = resume_data.get("personalInfo") or {}
    skills = resume_data.get("skills") or {}
    if not isinstance(skills, dict):
        skills = {}

    experience = []
    for exp in (resume_data.get("experience") or [])[:3]:
        description = exp.get("description")
        achievements = description[:2] if isinstance(description, list) else [description or ""]
        end = "Present" if exp.get("current") else exp.get("endDate", "")
        experience.append({
            "position": exp.get("position"),
            "company": exp.get("company"),
            "duration": f"{exp.get('startDate', '')} - {end}",
            "keyAchievements": achievements,
        })

    return {
        "name": f"{info.get('firstName', '')} {info.get('lastName', '')}".strip(),
        "contact": {
            "email": info.get("email"),
            "phone": info.get("phone") or "",
            "location": info.get("location") or "",
        },
        "summary": info.get("summary") or "",
        "experience": experience,
        "skills": list(skills.get("technical") or [])[:5] + list(skills.get("soft") or [])[:3],
        "education": [
            {"degree": edu.get("degree"), "field": edu.get("fieldOfStudy"), "institution": edu.get("institution")}
            for edu in (resume_data.get("education") or [])[:2]
        ],
    }


async def generate_cover_letter(
    ai: GeminiClient,
    resume_data: dict,
    job_description: str,
    tone: str = "professional",
    company_info: dict | None = None,
) -> str:
    """
    Generate a tailored cover letter.

    Structured resumes (with personalInfo) are condensed first so the prompt
    stays focused on recent experience and key skills.
    """
    if resume_data.get("personalInfo"):
        resume_data = format_resume_for_cover_letter(resume_data)
    return await ai.generate_completion(
        prompts.cover_letter_prompt(resume_data, job_description, tone, company_info),
        max_tokens=1200,
        temperature=0.5,
    )


async def analyze_job(ai: GeminiClient, job_description: str) -> JobAnalysis:
    return await ai.generate_json(
        prompts.job_analysis_prompt(job_description),
        JobAnalysis,
        max_tokens=1000,
        temperature=0.3,
    )


_HTML_STYLE = """
        body { font-family: 'Georgia', serif; margin: 0; padding: 20px; line-height: 1.6; max-width: 800px; }
        .header { margin-bottom: 30px; }
        .contact-info { margin-bottom: 20px; }
        .date { text-align: right; margin-bottom: 20px; }
        .body { margin-bottom: 30px; }
        .paragraph { margin-bottom: 15px; text-align: justify; }
        .closing { margin-top: 30px; }
        .signature { margin-top: 40px; }
        .name { font-weight: bold; border-top: 1px solid #000; padding-top: 10px; width: fit-content; }
"""


def long_date(day: dt.date) -> str:
    """US long date without zero padding, e.g. January 5, 2025."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def render_html(cover_letter: str, personal_info: dict, today: dt.date | None = None) -> str:
    today = today or dt.date.today()
    name = escape(f"{personal_info.get('firstName', '')} {personal_info.get('lastName', '')}".strip())
    contact = [name, escape(personal_info.get("email") or "")]
    if personal_info.get("phone"):
        contact.append(escape(personal_info["phone"]))
    if personal_info.get("location"):
        contact.append(escape(personal_info["location"]))

    paragraphs = "\n".join(
        f'<p class="paragraph">{escape(p.strip())}</p>'
        for p in cover_letter.split("\n\n")
        if p.strip()
    )
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n"
        "<meta charset=\"UTF-8\">\n"
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">\n"
        f"<title>Cover Letter - {name}</title>\n"
        f"<style>{_HTML_STYLE}</style>\n</head>\n<body>\n"
        f'<div class="header"><div class="contact-info">{"<br>".join(contact)}</div></div>\n'
        f'<div class="date">{long_date(today)}</div>\n'
        f'<div class="body">\n{paragraphs}\n</div>\n'
        '<div class="closing">Sincerely,<br><br>'
        f'<div class="signature"><div class="name">{name}</div></div></div>\n'
        "</body>\n</html>\n"
    )


def render_cover_letter(content: dict, fmt: str = "text") -> str:
    """
    Render saved cover letter content ({"coverLetter": str, "resumeData"?: {...}}).

    Raises:
        ValueError: Unknown format
    """
    if fmt not in DOWNLOAD_FORMATS:
        raise ValueError(f"Unsupported format: {fmt}")
    text = str(content.get("coverLetter") or content.get("text") or "")
    if fmt == "text":
        return text
    personal_info = (content.get("resumeData") or {}).get("personalInfo") or content.get("personalInfo") or {}
    return render_html(text, personal_info)
