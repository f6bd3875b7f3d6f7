# vgen/services/resume.py
"""
Resume generation and rendering.

generate_resume asks the model for a formatted resume; the render_* helpers
turn saved structured data back into Markdown / HTML / JSON for download.
"""
import json
from html import escape
from typing import Any

from vgen.services import prompts
from vgen.services.ai_client import GeminiClient

TEMPLATES = [
    {
        "id": "modern",
        "name": "Modern",
        "description": "Clean, contemporary design with modern typography and spacing",
        "preview": "/templates/modern-preview.png",
        "features": ["Clean layout", "Modern fonts", "Professional colors"],
    },
    {
        "id": "minimalist",
        "name": "Minimalist",
        "description": "Simple, clean design with plenty of white space",
        "preview": "/templates/minimalist-preview.png",
        "features": ["Minimal design", "Clean lines", "Focus on content"],
    },
    {
        "id": "academic",
        "name": "Academic",
        "description": "Traditional academic format emphasizing research and publications",
        "preview": "/templates/academic-preview.png",
        "features": ["Research focus", "Publication emphasis", "Formal structure"],
    },
    {
        "id": "technical",
        "name": "Technical",
        "description": "Designed for IT and technical professionals with skills emphasis",
        "preview": "/templates/technical-preview.png",
        "features": ["Skills highlight", "Project focus", "Technical layout"],
    },
    {
        "id": "creative",
        "name": "Creative",
        "description": "Unique, eye-catching design for creative professionals",
        "preview": "/templates/creative-preview.png",
        "features": ["Unique layout", "Creative elements", "Visual appeal"],
    },
    {
        "id": "executive",
        "name": "Executive",
        "description": "Professional, leadership-focused design for senior positions",
        "preview": "/templates/executive-preview.png",
        "features": ["Leadership focus", "Achievement emphasis", "Professional tone"],
    },
]
TEMPLATE_IDS = tuple(t["id"] for t in TEMPLATES)

DOWNLOAD_FORMATS = ("markdown", "html", "json")
SKILL_CATEGORIES = ("technical", "soft", "languages", "tools")


async def generate_resume(ai: GeminiClient, resume_data: dict, template: str = "modern") -> str:
    """Ask the model for a complete resume in the given template style."""
    return await ai.generate_completion(
        prompts.resume_prompt(resume_data, template),
        max_tokens=1500,
        temperature=0.3,
    )


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def format_resume_data(raw: dict) -> dict:
    """
    Normalize request/saved resume data into the shape the renderers expect.

    Missing fields become empty strings or lists; skills keep only the known
    categories and are always lists.
    """
    info = raw.get("personalInfo") or {}
    personal = {
        "fullName": f"{info.get('firstName', '')} {info.get('lastName', '')}".strip(),
        "email": info.get("email", ""),
        "phone": info.get("phone") or "",
        "location": info.get("location") or "",
        "website": info.get("website") or "",
        "linkedin": info.get("linkedin") or "",
        "github": info.get("github") or "",
        "summary": info.get("summary") or "",
    }

    experience = []
    for exp in raw.get("experience") or []:
        description = exp.get("description") or ""
        if isinstance(description, list):
            description = "\n".join(description)
        experience.append({
            "company": exp.get("company") or "",
            "position": exp.get("position") or "",
            "startDate": exp.get("startDate") or "",
            "endDate": exp.get("endDate") or "",
            "current": bool(exp.get("current")),
            "location": exp.get("location") or "",
            "description": description,
            "achievements": exp.get("achievements") or [],
        })

    education = [
        {
            "institution": edu.get("institution") or "",
            "degree": edu.get("degree") or "",
            "fieldOfStudy": edu.get("fieldOfStudy") or "",
            "startDate": edu.get("startDate") or "",
            "endDate": edu.get("endDate") or "",
            "gpa": edu.get("gpa") or "",
            "honors": edu.get("honors") or "",
            "relevantCoursework": edu.get("relevantCoursework") or [],
        }
        for edu in raw.get("education") or []
    ]

    raw_skills = raw.get("skills") or {}
    skills = {}
    if isinstance(raw_skills, dict):
        for category in SKILL_CATEGORIES:
            if raw_skills.get(category):
                skills[category] = _as_list(raw_skills[category])

    projects = [
        {
            "name": p.get("name") or "",
            "description": p.get("description") or "",
            "technologies": p.get("technologies") or [],
            "startDate": p.get("startDate") or "",
            "endDate": p.get("endDate") or "",
            "url": p.get("url") or "",
            "github": p.get("github") or "",
        }
        for p in raw.get("projects") or []
    ]

    certifications = [
        {
            "name": c.get("name") or "",
            "issuer": c.get("issuer") or "",
            "date": c.get("date") or "",
            "expiryDate": c.get("expiryDate") or "",
            "credentialId": c.get("credentialId") or "",
            "url": c.get("url") or "",
        }
        for c in raw.get("certifications") or []
    ]

    languages = [
        {"language": lang.get("language") or "", "proficiency": lang.get("proficiency") or "Intermediate"}
        for lang in raw.get("languages") or []
    ]

    return {
        "personalInfo": personal,
        "experience": experience,
        "education": education,
        "skills": skills,
        "projects": projects,
        "certifications": certifications,
        "languages": languages,
    }


def _dates(start: str, end: str, current: bool = False) -> str:
    return f"{start} - {'Present' if current else end}"


def render_markdown(data: dict) -> str:
    info = data["personalInfo"]
    out = [f"# {info['fullName']}\n\n"]

    if info["email"] or info["phone"] or info["location"]:
        out.append(f"{info['email']} | {info['phone']} | {info['location']}\n\n")
    links = [link for link in (info["website"], info["linkedin"], info["github"]) if link]
    if links:
        out.append(" | ".join(links) + "\n\n")
    if info["summary"]:
        out.append(f"## Professional Summary\n\n{info['summary']}\n\n")

    if data["experience"]:
        out.append("## Professional Experience\n\n")
        for exp in data["experience"]:
            out.append(f"### {exp['position']}\n**{exp['company']}**")
            if exp["location"]:
                out.append(f" | {exp['location']}")
            out.append(f"\n\n{_dates(exp['startDate'], exp['endDate'], exp['current'])}\n\n")
            out.append(f"{exp['description']}\n\n")

    if data["education"]:
        out.append("## Education\n\n")
        for edu in data["education"]:
            out.append(f"### {edu['degree']} in {edu['fieldOfStudy']}\n**{edu['institution']}**")
            out.append(f"\n\n{_dates(edu['startDate'], edu['endDate'])}")
            if edu["gpa"]:
                out.append(f" | GPA: {edu['gpa']}")
            out.append("\n\n")

    if data["skills"]:
        out.append("## Skills\n\n")
        for category, items in data["skills"].items():
            if items:
                out.append(f"**{category.capitalize()}:** {', '.join(items)}\n\n")

    if data["projects"]:
        out.append("## Projects\n\n")
        for project in data["projects"]:
            out.append(f"### {project['name']}\n\n{project['description']}\n\n")
            if project["technologies"]:
                out.append(f"**Technologies:** {', '.join(project['technologies'])}\n\n")
            project_links = [link for link in (project["url"], project["github"]) if link]
            if project_links:
                out.append(f"**Links:** {', '.join(project_links)}\n\n")

    if data["certifications"]:
        out.append("## Certifications\n\n")
        for cert in data["certifications"]:
            out.append(f"- **{cert['name']}** - {cert['issuer']} ({cert['date']})\n")
        out.append("\n")

    if data["languages"]:
        out.append("## Languages\n\n")
        for lang in data["languages"]:
            out.append(f"- {lang['language']} - {lang['proficiency']}\n")
        out.append("\n")

    return "".join(out)


_HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; margin-bottom: 30px; }
        .section { margin-bottom: 25px; }
        .section h2 { border-bottom: 2px solid #333; padding-bottom: 5px; }
        .experience-item, .education-item, .project-item { margin-bottom: 15px; }
        .date { font-weight: bold; color: #666; }
        .company, .institution { font-weight: bold; }
        .skills { display: flex; flex-wrap: wrap; gap: 10px; }
        .skill-tag { background: #f0f0f0; padding: 5px 10px; border-radius: 15px; font-size: 14px; }
"""


def _section(title: str, body: str) -> str:
    return f'<div class="section">\n<h2>{title}</h2>\n{body}\n</div>\n'


def render_html(data: dict) -> str:
    """Standalone HTML page; every user-supplied value is escaped."""
    e = lambda value: escape(str(value))  # noqa: E731
    info = data["personalInfo"]
    parts = [
        '<div class="header">\n',
        f"<h1>{e(info['fullName'])}</h1>\n",
        f"<p>{e(info['email'])} | {e(info['phone'])} | {e(info['location'])}</p>\n",
    ]
    if info["website"]:
        parts.append(f'<p><a href="{e(info["website"])}">{e(info["website"])}</a></p>\n')
    parts.append("</div>\n")

    if info["summary"]:
        parts.append(_section("Professional Summary", f"<p>{e(info['summary'])}</p>"))

    if data["experience"]:
        items = []
        for exp in data["experience"]:
            location = f"<div>{e(exp['location'])}</div>" if exp["location"] else ""
            items.append(
                '<div class="experience-item">'
                f'<div class="company">{e(exp["position"])}</div>'
                f'<div class="company">{e(exp["company"])}</div>'
                f'<div class="date">{e(_dates(exp["startDate"], exp["endDate"], exp["current"]))}</div>'
                f"{location}<p>{e(exp['description'])}</p></div>"
            )
        parts.append(_section("Professional Experience", "\n".join(items)))

    if data["education"]:
        items = []
        for edu in data["education"]:
            gpa = f"<div>GPA: {e(edu['gpa'])}</div>" if edu["gpa"] else ""
            items.append(
                '<div class="education-item">'
                f'<div class="institution">{e(edu["degree"])} in {e(edu["fieldOfStudy"])}</div>'
                f'<div class="institution">{e(edu["institution"])}</div>'
                f'<div class="date">{e(_dates(edu["startDate"], edu["endDate"]))}</div>'
                f"{gpa}</div>"
            )
        parts.append(_section("Education", "\n".join(items)))

    if data["skills"]:
        tags = "".join(
            f'<span class="skill-tag">{e(skill)}</span>'
            for items in data["skills"].values()
            for skill in items
        )
        parts.append(_section("Skills", f'<div class="skills">{tags}</div>'))

    if data["projects"]:
        items = []
        for project in data["projects"]:
            tech = (
                f"<div><strong>Technologies:</strong> {e(', '.join(project['technologies']))}</div>"
                if project["technologies"] else ""
            )
            items.append(
                '<div class="project-item">'
                f'<div class="company">{e(project["name"])}</div>'
                f"<p>{e(project['description'])}</p>{tech}</div>"
            )
        parts.append(_section("Projects", "\n".join(items)))

    if data["certifications"]:
        items = [
            f"<div>{e(c['name'])} - {e(c['issuer'])} ({e(c['date'])})</div>"
            for c in data["certifications"]
        ]
        parts.append(_section("Certifications", "\n".join(items)))

    if data["languages"]:
        items = [f"<div>{e(lang['language'])} - {e(lang['proficiency'])}</div>" for lang in data["languages"]]
        parts.append(_section("Languages", "\n".join(items)))

    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n"
        "<meta charset=\"UTF-8\">\n"
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">\n"
        f"<title>{e(info['fullName'])} - Resume</title>\n"
        f"<style>{_HTML_STYLE}</style>\n</head>\n<body>\n"
        + "".join(parts)
        + "</body>\n</html>\n"
    )


def render_resume(content: dict, fmt: str = "markdown") -> str:
    """
    Render saved resume content for download.

    Structured content (with personalInfo) goes through format_resume_data and
    the renderers; content that only holds generated text is returned as that
    text (wrapped in <pre> for html).

    Raises:
        ValueError: Unknown format
    """
    if fmt not in DOWNLOAD_FORMATS:
        raise ValueError(f"Unsupported format: {fmt}")

    if fmt == "json":
        return json.dumps(content, indent=2, default=str)

    if content.get("personalInfo"):
        data = format_resume_data(content)
        return render_html(data) if fmt == "html" else render_markdown(data)

    text = str(content.get("resume") or content.get("text") or "")
    if fmt == "html":
        return f"<!DOCTYPE html>\n<html lang=\"en\">\n<body>\n<pre>{escape(text)}</pre>\n</body>\n</html>\n"
    return text
