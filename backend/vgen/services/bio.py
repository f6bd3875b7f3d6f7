# vgen/services/bio.py
"""
Bio generation plus local text analytics (readability, keyword density,
hashtag ideas).
"""
import re
from collections import Counter

from vgen.services import prompts
from vgen.services.ai_client import GeminiClient

PLATFORM_LIMITS = prompts.BIO_PLATFORM_LIMITS
DEFAULT_LIMIT = 500

PLATFORMS = [
    {
        "id": "linkedin",
        "name": "LinkedIn",
        "description": "Professional networking platform",
        "maxLength": 2600,
        "audience": "Professionals, recruiters, business contacts",
        "bestFor": "Career networking, job searching, professional branding",
        "tips": [
            "Focus on professional achievements and expertise",
            "Include industry keywords for better visibility",
            "Mention career goals and aspirations",
            "Use complete sentences and professional language",
        ],
        "features": ["Professional tone", "Industry keywords", "Achievement focus"],
    },
    {
        "id": "twitter",
        "name": "Twitter/X",
        "description": "Micro-blogging and social networking",
        "maxLength": 160,
        "audience": "General public, professionals, industry peers",
        "bestFor": "Quick professional updates, networking, personal branding",
        "tips": [
            "Be concise and impactful",
            "Use relevant hashtags",
            "Show personality while maintaining professionalism",
            "Include call-to-action when appropriate",
        ],
        "features": ["Concise format", "Hashtag support", "Personal touch"],
    },
    {
        "id": "instagram",
        "name": "Instagram",
        "description": "Photo and video sharing platform",
        "maxLength": 150,
        "audience": "Visual audience, younger professionals, creatives",
        "bestFor": "Creative professionals, visual storytelling, personal brand",
        "tips": [
            "Can include emojis for visual appeal",
            "Focus on creativity and unique perspective",
            "Use engaging, conversational tone",
            "Highlight visual or creative work",
        ],
        "features": ["Visual appeal", "Emoji support", "Creative focus"],
    },
    {
        "id": "general",
        "name": "General Purpose",
        "description": "All-purpose professional bio",
        "maxLength": 500,
        "audience": "General professional use",
        "bestFor": "Websites, portfolios, general professional profiles",
        "tips": [
            "Balanced length and detail",
            "Professional yet approachable tone",
            "Comprehensive overview of expertise",
            "Include key achievements and skills",
        ],
        "features": ["Balanced length", "Comprehensive info", "Professional tone"],
    },
    {
        "id": "website",
        "name": "Website/About Page",
        "description": "Personal or professional website bio",
        "maxLength": 1000,
        "audience": "Website visitors, potential clients, employers",
        "bestFor": "Personal websites, about pages, professional portfolios",
        "tips": [
            "More detailed and narrative style",
            "Tell your professional story",
            "Include unique value proposition",
            "Show personality and approachability",
        ],
        "features": ["Detailed narrative", "Story telling", "Personal touch"],
    },
]
PLATFORM_IDS = tuple(p["id"] for p in PLATFORMS)

TONES = [
    {
        "id": "professional",
        "name": "Professional",
        "description": "Formal, business-appropriate tone",
        "useCase": "Corporate environments, conservative industries",
        "characteristics": ["Formal language", "Achievement focused", "Industry terminology"],
    },
    {
        "id": "casual",
        "name": "Casual",
        "description": "Friendly, approachable tone",
        "useCase": "Creative industries, startups, personal branding",
        "characteristics": ["Conversational", "Personable", "Approachable"],
    },
    {
        "id": "creative",
        "name": "Creative",
        "description": "Unique, expressive tone",
        "useCase": "Design, arts, creative fields",
        "characteristics": ["Expressive", "Unique voice", "Creative flair"],
    },
    {
        "id": "technical",
        "name": "Technical",
        "description": "Precise, expertise-focused tone",
        "useCase": "IT, engineering, technical fields",
        "characteristics": ["Technical terminology", "Expertise focus", "Precise language"],
    },
    {
        "id": "friendly",
        "name": "Friendly",
        "description": "Warm, welcoming tone",
        "useCase": "Service industries, education, community roles",
        "characteristics": ["Warm language", "Welcoming", "Approachable"],
    },
]
TONE_IDS = tuple(t["id"] for t in TONES)

INDUSTRY_HASHTAGS = {
    "tech": ["#Technology", "#Innovation", "#DigitalTransformation"],
    "design": ["#Design", "#Creativity", "#UX", "#UI"],
    "business": ["#Business", "#Leadership", "#Strategy"],
    "marketing": ["#Marketing", "#DigitalMarketing", "#Growth"],
    "default": ["#Professional", "#Career", "#Growth"],
}

_WHITESPACE_RE = re.compile(r"\s+")


def word_count(text: str) -> int:
    """Words separated by single spaces (an empty string counts as one)."""
    return len(text.split(" "))


def sentence_count(text: str) -> int:
    return len(re.split(r"[.!?]+", text)) - 1


async def generate_bio(
    ai: GeminiClient,
    bio_data: dict,
    platform: str = "general",
    tone: str = "professional",
    include_emojis: bool = False,
    keywords: list[str] | None = None,
    temperature: float = 0.6,
) -> str:
    return await ai.generate_completion(
        prompts.bio_prompt(bio_data, platform, tone, include_emojis, keywords),
        max_tokens=800,
        temperature=temperature,
    )


async def optimize_bio(
    ai: GeminiClient,
    current_bio: str,
    keywords: list[str],
    platform: str = "general",
    tone: str = "professional",
) -> str:
    return await ai.generate_completion(
        prompts.bio_keywords_prompt(current_bio, keywords, platform, tone),
        max_tokens=600,
        temperature=0.5,
    )


async def generate_variations(ai: GeminiClient, bio_data: dict, platform: str, count: int = 3) -> list[dict]:
    """One bio per tone, in TONE_IDS order, `count` of them (at most five)."""
    variations = []
    for i, tone in enumerate(TONE_IDS[:count], start=1):
        bio = await generate_bio(ai, bio_data, platform, tone, temperature=0.7)
        variations.append({
            "id": f"variation_{i}",
            "tone": tone,
            "content": bio,
            "characterCount": len(bio),
            "wordCount": word_count(bio),
            "platform": platform,
        })
    return variations


def readability_score(text: str) -> float:
    """
    Simplified Flesch reading ease, clamped to 0..100.

    Syllables are approximated by vowel groups.
    """
    sentences = sentence_count(text)
    words = word_count(text)
    syllables = len(re.split(r"[^aeiouy]+", text, flags=re.IGNORECASE)) - 1
    if sentences == 0 or words == 0:
        return 100
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    return max(0, min(100, score))


def keyword_density(text: str) -> dict:
    words = [w for w in re.split(r"\W+", text.lower()) if len(w) > 3]
    counts = Counter(words)
    total = len(words)
    top = [
        {"word": word, "count": count, "density": f"{count / total * 100:.2f}"}
        for word, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:5]
    ]
    average = sum(float(kw["density"]) for kw in top) / len(top) if top else 0
    return {
        "totalWords": total,
        "uniqueWords": len(counts),
        "topKeywords": top,
        "averageDensity": average,
    }


def hashtag_suggestions(user_data: dict, platform: str) -> list[str]:
    """
    Hashtags from skills and job titles, then two industry tags.

    Instagram gets up to five personal tags, other platforms three.
    """
    skills = user_data.get("skills") or {}
    if not isinstance(skills, dict):
        skills = {}
    sources = [
        *(skills.get("technical") or []),
        *(skills.get("soft") or []),
        *(exp.get("position") for exp in user_data.get("experience") or []),
    ]
    sources = [s for s in sources if s]

    limit = 5 if platform == "instagram" else 3
    hashtags = ["#" + _WHITESPACE_RE.sub("", s) for s in sources if len(s) > 2][:limit]

    industry = "default"
    if any("tech" in s.lower() for s in sources):
        industry = "tech"
    elif any("design" in s.lower() for s in sources):
        industry = "design"
    hashtags.extend(INDUSTRY_HASHTAGS[industry][:2])

    return list(dict.fromkeys(hashtags))


def analyze_bio(bio: str, platform: str = "general", user_data: dict | None = None) -> dict:
    limit = PLATFORM_LIMITS.get(platform, DEFAULT_LIMIT)
    analytics = {
        "characterCount": len(bio),
        "wordCount": word_count(bio),
        "sentenceCount": sentence_count(bio),
        "platformLimit": limit,
        "isWithinLimit": len(bio) <= limit,
        "readabilityScore": readability_score(bio),
        "keywordDensity": keyword_density(bio),
        "suggestions": [],
        "hashtags": hashtag_suggestions(user_data or {}, platform),
    }

    if platform == "linkedin" and len(bio) < 100:
        analytics["suggestions"].append("LinkedIn bio is quite short. Consider adding more professional details.")
    if platform == "twitter" and len(bio) > 140:
        analytics["suggestions"].append("Twitter bio exceeds 160 characters. Consider shortening for better visibility.")
    if analytics["readabilityScore"] < 60:
        analytics["suggestions"].append("Consider simplifying the language for better readability.")

    return analytics
