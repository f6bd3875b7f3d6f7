# vgen/services/ats.py
"""
Rule-based ATS (applicant tracking system) compatibility scorer.

Pure function of (resume_text, job_description): five categories that add up
to 100 points, each capped at its weight.

    formatting  25
    keywords    25
    structure   20
    content     15
    skills      15
"""
import re
import datetime as dt

WEIGHTS = {
    "formatting": 25,
    "keywords": 25,
    "structure": 20,
    "content": 15,
    "skills": 15,
}

# ASCII word boundaries: accented letters count as separators
_A = re.ASCII | re.IGNORECASE

_SECTION_RE = re.compile(r"\b(EXPERIENCE|EDUCATION|SKILLS|SUMMARY|OBJECTIVE)\b", _A)
_BULLET_RE = re.compile(r"[•●■▪▫◦]")
_CONTACT_RE = re.compile(r"\b(email|phone|address|linkedin|github)\b", _A)
_DATE_RE = re.compile(r"\b(20\d{2}|19\d{2}|jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b", _A)
_ACHIEVEMENT_RE = re.compile(
    r"\b(led|managed|improved|increased|decreased|achieved|delivered|created|built|developed)\b", _A
)
_QUANTIFIED_RE = re.compile(
    r"\b(\d+%|\d+\s*(percent|million|billion|thousand|users?|customers?|dollars?|hours?|projects?))\b", _A
)
_ACTION_VERB_RE = re.compile(
    r"\b(achieved|improved|increased|decreased|delivered|created|built|developed|led|managed"
    r"|designed|implemented|optimized)\b",
    _A,
)
_TECH_TERM_RE = re.compile(
    r"\b(agile|scrum|api|database|analytics|strategy|optimization|framework|platform)\b", _A
)
_SOFT_SKILL_RE = re.compile(
    r"\b(communication|leadership|teamwork|problem.solving|analytical|creative|adaptable)\b", _A
)
_SKILLS_BLOCK_RE = re.compile(r"skills?\s*:?\s*(.+?)(?:\n\n|\n\s*\n|\Z)", _A)
_SKILL_TECH_RE = re.compile(r"\b(javascript|python|java|react|node|aws|docker|sql|mongodb|git)\b", _A)
_SKILL_SOFT_RE = re.compile(r"\b(communication|leadership|teamwork|problem.solving|analytical)\b", _A)
_NON_WORD_RE = re.compile(r"\W+", re.ASCII)

_KEYWORD_STOP_WORDS = {"with", "from", "this", "that", "will", "have", "been", "were"}


def js_round(value: float) -> int:
    """Round half up (2.5 -> 3), unlike Python's banker's rounding."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def assess_formatting(text: str) -> int:
    score = 5  # standard fonts are assumed for plain text
    if "\t" not in text and not re.search(r" {3,}", text):
        score += 5
    if _SECTION_RE.search(text):
        score += 5
    bullets = len(_BULLET_RE.findall(text))
    if 0 < bullets < 50:
        score += 5
    lines = len(text.split("\n"))
    if 20 < lines < 100:
        score += 5
    return min(score, WEIGHTS["formatting"])


def important_job_words(job_description: str) -> list[str]:
    """Job description words that count for keyword matching (duplicates kept)."""
    words = _NON_WORD_RE.split(job_description.lower())
    return [
        w for w in words
        if len(w) > 4
        and w not in _KEYWORD_STOP_WORDS
        and ("ing" in w or "er" in w or "ly" in w or len(w) > 6)
    ]


def assess_keywords(text: str, job_description: str = "") -> int:
    if not job_description:
        return 15
    job_words = important_job_words(job_description)
    if not job_words:
        return 0
    resume_words = set(_NON_WORD_RE.split(text.lower()))
    matches = sum(1 for w in job_words if w in resume_words)
    return min(js_round(matches / len(job_words) * 25), WEIGHTS["keywords"])


def assess_structure(text: str) -> int:
    score = 0
    if _CONTACT_RE.search(text):
        score += 5
    for section in ("experience", "education", "skills"):
        if re.search(rf"\b{section}\b", text, _A):
            score += 3
    if _DATE_RE.search(text):
        score += 3
    if _ACHIEVEMENT_RE.search(text):
        score += 3
    return min(score, WEIGHTS["structure"])


def assess_content(text: str) -> int:
    score = 0
    if _QUANTIFIED_RE.search(text):
        score += 5
    if len(_ACTION_VERB_RE.findall(text)) > 5:
        score += 4
    if _TECH_TERM_RE.search(text):
        score += 3
    if _SOFT_SKILL_RE.search(text):
        score += 3
    return min(score, WEIGHTS["content"])


def assess_skills_section(text: str) -> int:
    match = _SKILLS_BLOCK_RE.search(text)
    if not match:
        return 0
    block = match.group(1)
    score = 0
    items = len(re.split(r"[,;]", block))
    if 5 <= items <= 20:
        score += 5
    if len(block) > 50:
        score += 5
    if _SKILL_TECH_RE.search(block):
        score += 3
    if _SKILL_SOFT_RE.search(block):
        score += 2
    return min(score, WEIGHTS["skills"])


def grade_for(score: int) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


# (threshold, message) pairs, first match wins; the last entry is the fallback
_FEEDBACK = {
    "formatting": [
        (20, "Excellent formatting for ATS compatibility"),
        (15, "Good formatting with minor improvements needed"),
        (10, "Moderate formatting issues that may affect ATS parsing"),
        (0, "Significant formatting problems that will likely cause ATS issues"),
    ],
    "keywords": [
        (20, "Excellent keyword optimization and job matching"),
        (15, "Good keyword usage with room for improvement"),
        (10, "Limited keyword optimization - consider adding more relevant terms"),
        (0, "Poor keyword matching - resume may not pass ATS keyword filters"),
    ],
    "structure": [
        (15, "Well-structured resume with clear sections"),
        (10, "Generally well-structured with some organizational issues"),
        (5, "Structure needs improvement for better ATS compatibility"),
        (0, "Poor structure that may confuse ATS systems"),
    ],
    "content": [
        (12, "Strong, quantifiable content that demonstrates value"),
        (8, "Good content with some quantifiable achievements"),
        (4, "Content could benefit from more specific examples"),
        (0, "Content lacks specificity and quantifiable achievements"),
    ],
    "skills": [
        (12, "Excellent skills presentation with good balance"),
        (8, "Good skills section with minor improvements needed"),
        (4, "Skills section needs better organization and specificity"),
        (0, "Skills section is inadequate or missing important skills"),
    ],
}

_RECOMMENDATIONS = [
    ("formatting", 20, "Use standard fonts (Arial, Calibri) and consistent formatting"),
    ("keywords", 20, "Incorporate more keywords from the job description"),
    ("structure", 15, "Ensure clear section headings and chronological order"),
    ("content", 12, "Add quantifiable achievements and use action verbs"),
    ("skills", 12, "Expand and better organize the skills section"),
]


def feedback_for(category: str, score: int) -> str:
    for threshold, message in _FEEDBACK[category]:
        if score >= threshold:
            return message
    return _FEEDBACK[category][-1][1]


def calculate_ats_score(resume_text: str, job_description: str = "") -> dict:
    """
    Score a resume for ATS compatibility.

    Args:
        resume_text: Plain resume text
        job_description: Optional posting used for keyword matching

    Returns:
        dict with overallScore, score, maxScore, grade, details (per category
        score/maxScore/feedback), recommendations and lastUpdated
    """
    job_description = job_description or ""
    scores = {
        "formatting": assess_formatting(resume_text),
        "keywords": assess_keywords(resume_text, job_description),
        "structure": assess_structure(resume_text),
        "content": assess_content(resume_text),
        "skills": assess_skills_section(resume_text),
    }
    total = sum(scores.values())
    details = {
        name: {"score": value, "maxScore": WEIGHTS[name], "feedback": feedback_for(name, value)}
        for name, value in scores.items()
    }
    recommendations = [msg for name, limit, msg in _RECOMMENDATIONS if scores[name] < limit]

    return {
        "overallScore": total,
        "score": total,
        "maxScore": 100,
        "grade": grade_for(total),
        "details": details,
        "recommendations": recommendations,
        "lastUpdated": dt.datetime.now(dt.timezone.utc).isoformat(),
    }
