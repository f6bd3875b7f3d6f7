# vgen/services/flashcards.py
"""
Flashcard generation and spaced repetition helpers.

Cards are never stored individually: review state (interval, easeFactor,
repetitions, nextReview, ...) travels with the client, which sends it back to
schedule_review and study_recommendations. Saved flashcard sets (content of
type "flashcard") feed study_stats.
"""
import math
import re
import random
import string
import time
import datetime as dt
from typing import Iterable

from vgen.models import Content, parse_iso, utcnow
from vgen.schemas.ai import FlashcardSet
from vgen.services import prompts
from vgen.services.ai_client import GeminiClient

MINUTES_PER_CARD = 2

SUBJECTS = [
    {
        "id": "general",
        "name": "General Knowledge",
        "description": "General topics and concepts",
        "categories": ["General", "Miscellaneous", "Basic Knowledge"],
    },
    {
        "id": "programming",
        "name": "Programming",
        "description": "Programming languages and concepts",
        "categories": ["JavaScript", "Python", "Java", "C++", "Algorithms", "Data Structures"],
    },
    {
        "id": "mathematics",
        "name": "Mathematics",
        "description": "Math concepts and formulas",
        "categories": ["Algebra", "Calculus", "Geometry", "Statistics", "Trigonometry"],
    },
    {
        "id": "science",
        "name": "Science",
        "description": "Scientific concepts and principles",
        "categories": ["Physics", "Chemistry", "Biology", "Earth Science"],
    },
    {
        "id": "language",
        "name": "Language Learning",
        "description": "Vocabulary and grammar",
        "categories": ["English", "Spanish", "French", "German", "Grammar", "Vocabulary"],
    },
    {
        "id": "history",
        "name": "History",
        "description": "Historical events and figures",
        "categories": ["World History", "Ancient History", "Modern History", "Geography"],
    },
    {
        "id": "medical",
        "name": "Medical",
        "description": "Medical terminology and concepts",
        "categories": ["Anatomy", "Physiology", "Medical Terms", "Diseases"],
    },
    {
        "id": "business",
        "name": "Business",
        "description": "Business concepts and terminology",
        "categories": ["Marketing", "Finance", "Management", "Economics"],
    },
]

ALGORITHMS = [
    {
        "id": "leitner",
        "name": "Leitner System",
        "description": "Cards move between boxes based on performance",
        "intervals": [1, 3, 7, 14, 30],
        "difficulty": "Simple",
        "bestFor": "Beginners and consistent study patterns",
    },
    {
        "id": "sm2",
        "name": "SM-2 Algorithm",
        "description": "SuperMemo-2 algorithm with variable intervals",
        "intervals": "Dynamic based on performance",
        "difficulty": "Moderate",
        "bestFor": "Long-term retention and adaptive scheduling",
    },
    {
        "id": "anki",
        "name": "Anki Algorithm",
        "description": "Modified SM-2 with fuzzy intervals",
        "intervals": "Dynamic with randomization",
        "difficulty": "Advanced",
        "bestFor": "Complex subjects and varied study sessions",
    },
    {
        "id": "custom",
        "name": "Custom Schedule",
        "description": "User-defined study intervals",
        "intervals": "User configurable",
        "difficulty": "Flexible",
        "bestFor": "Personalized study preferences",
    },
]
ALGORITHM_IDS = tuple(a["id"] for a in ALGORITHMS)
RECOMMENDED_ALGORITHM = "sm2"

PERFORMANCE_QUALITY = {"again": 0, "hard": 3, "good": 4, "easy": 5}
MIN_EASE_FACTOR = 1.3

_COMMON_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "must", "can",
}

_BASE36 = string.digits + string.ascii_lowercase


def _iso(value: dt.datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def new_card_id(prefix: str = "fc") -> str:
    """<prefix>_<epoch ms>_<9 random base36 chars>"""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def extract_tags(text: str) -> list[str]:
    """Up to five unique words longer than 3 letters, skipping common words."""
    words = [w for w in re.split(r"\W+", text.lower()) if len(w) > 3 and w not in _COMMON_WORDS]
    return list(dict.fromkeys(words))[:5]


def enrich_card(card: dict, difficulty: str = "mixed", now: dt.datetime | None = None) -> dict:
    """Attach spaced repetition state to a model-generated question/answer pair."""
    now = now or utcnow()
    return {
        **card,
        "id": new_card_id(),
        "createdAt": _iso(now),
        "lastReviewed": None,
        "nextReview": _iso(now),
        "interval": 1,  # days
        "easeFactor": 2.5,
        "repetitions": 0,
        "totalReviews": 0,
        "correctReviews": 0,
        "streak": 0,
        "difficulty": card.get("difficulty") or difficulty,
        "tags": extract_tags(f"{card['question']} {card['answer']}"),
        "performance": "new",
    }


def study_time(card_count: int) -> str:
    return f"{math.ceil(card_count * MINUTES_PER_CARD)} minutes"


async def generate_flashcards(
    ai: GeminiClient,
    content: str,
    subject: str = "general",
    difficulty: str = "mixed",
    count: int = 10,
) -> dict:
    """
    Generate `count` flashcards from study material.

    Returns:
        {"flashcards", "totalCards", "estimatedStudyTime", "subject",
         "difficulty", "algorithm", "createdAt"}
    """
    result = await ai.generate_json(
        prompts.flashcards_prompt(content, subject, difficulty, count),
        FlashcardSet,
        max_tokens=1500,
        temperature=0.4,
    )
    now = utcnow()
    cards = [
        enrich_card(item.model_dump(exclude_none=True), difficulty, now)
        for item in result.flashcards[:count]
    ]
    return {
        "flashcards": cards,
        "totalCards": len(cards),
        "estimatedStudyTime": study_time(len(cards)),
        "subject": subject,
        "difficulty": difficulty,
        "algorithm": RECOMMENDED_ALGORITHM,
        "createdAt": _iso(now),
    }


def study_plan(
    flashcard_ids: list[str],
    study_days: int = 7,
    daily_cards: int = 20,
    algorithm: str = RECOMMENDED_ALGORITHM,
    now: dt.datetime | None = None,
) -> dict:
    """Spread the cards over `study_days`, at most `daily_cards` per day."""
    now = now or utcnow()
    total = len(flashcard_ids)
    per_day = min(daily_cards, math.ceil(total / study_days))

    schedule = []
    for day in range(1, study_days + 1):
        start = (day - 1) * per_day
        cards = flashcard_ids[start:min(start + per_day, total)]
        schedule.append({
            "day": day,
            "date": _iso(now + dt.timedelta(days=day)),
            "cards": cards,
            "cardCount": len(cards),
            "estimatedTime": f"{len(cards) * MINUTES_PER_CARD} minutes",
        })

    return {
        "totalCards": total,
        "studyDays": study_days,
        "cardsPerDay": per_day,
        "algorithm": algorithm,
        "schedule": schedule,
        "createdAt": _iso(now),
    }


def updated_ease_factor(ease_factor: float, performance: str) -> float:
    q = PERFORMANCE_QUALITY[performance]
    return max(MIN_EASE_FACTOR, ease_factor + 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))


def schedule_review(
    flashcard_id: str,
    performance: str,
    interval: int = 1,
    ease_factor: float = 2.5,
    repetitions: int = 0,
    now: dt.datetime | None = None,
) -> dict:
    """
    SM-2 step for one review.

    Args:
        performance: again | hard | good | easy
        interval, ease_factor, repetitions: the card's current state

    Returns:
        {"flashcardId", "nextReview", "interval", "easeFactor", "repetitions",
         "performance", "scheduledAt"}
    """
    if performance not in PERFORMANCE_QUALITY:
        raise ValueError(f"Unknown performance rating: {performance}")
    now = now or utcnow()

    ef = updated_ease_factor(ease_factor, performance)
    if repetitions == 0:
        new_interval = 1
    elif repetitions == 1:
        new_interval = 6
    else:
        new_interval = math.ceil(interval * ef)
    new_repetitions = repetitions

    if performance == "again":
        new_repetitions = 0
        new_interval = 1
    elif performance == "hard":
        new_interval = max(1, math.ceil(interval * 1.2))
    elif performance == "good":
        new_repetitions += 1
    elif performance == "easy":
        new_repetitions += 1
        new_interval = math.ceil(interval * ef)

    return {
        "flashcardId": flashcard_id,
        "nextReview": _iso(now + dt.timedelta(days=new_interval)),
        "interval": new_interval,
        "easeFactor": ef,
        "repetitions": new_repetitions,
        "performance": performance,
        "scheduledAt": _iso(now),
    }


def _is_due(card: dict, now: dt.datetime) -> bool:
    value = card.get("nextReview")
    if not value:
        return False
    try:
        return parse_iso(value) <= now
    except ValueError:
        return False


def _reviewed_since(card: dict, since: dt.datetime) -> bool:
    value = card.get("lastReviewed")
    if not value:
        return False
    try:
        return parse_iso(value) > since
    except ValueError:
        return False


def study_recommendations(cards: list[dict], now: dt.datetime | None = None) -> dict:
    now = now or utcnow()
    due = [c for c in cards if _is_due(c, now)]
    recommendations = {
        "cardsToStudy": len(due),
        "recommendedSessionTime": min(len(due) * MINUTES_PER_CARD, 30),
        "priorityCards": due[:10],
        "suggestedBreaks": len(due) > 20,
        "focusAreas": [],
        "tips": [],
    }

    again = sum(1 for c in due if c.get("performance") == "again")
    hard = sum(1 for c in due if c.get("performance") == "hard")
    if again:
        recommendations["focusAreas"].append("Review cards that need more practice")
        recommendations["tips"].append('Spend extra time on cards marked as "Again"')
    if hard > len(due) * 0.3:
        recommendations["focusAreas"].append("Focus on difficult concepts")
        recommendations["tips"].append("Consider reviewing related study materials for hard cards")

    return recommendations


def study_reminders(cards: list[dict], now: dt.datetime | None = None) -> list[dict]:
    now = now or utcnow()
    reminders = []

    due = sum(1 for c in cards if _is_due(c, now))
    if due:
        reminders.append({
            "type": "due_cards",
            "message": f"You have {due} cards due for review",
            "priority": "high",
            "actionUrl": "/study/due",
        })

    week_ago = now - dt.timedelta(days=7)
    recent = sum(1 for c in cards if _reviewed_since(c, week_ago))
    if recent < len(cards) * 0.3:
        reminders.append({
            "type": "weekly_goal",
            "message": "Consider increasing your weekly study frequency",
            "priority": "medium",
            "actionUrl": "/study/weekly",
        })

    return reminders


def _count(value) -> int:
    """Non-negative int from a client-supplied counter; junk counts as 0."""
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def assess_difficulty(cards: list[dict]) -> dict:
    assessment = {
        "overallDifficulty": "medium",
        "distribution": {"easy": 0, "medium": 0, "hard": 0},
        "recommendations": [],
        "averageLength": {"question": 0, "answer": 0},
    }
    if not cards:
        return assessment

    question_chars = answer_chars = 0
    for card in cards:
        level = _text(card.get("difficulty")) or "medium"
        assessment["distribution"][level] = assessment["distribution"].get(level, 0) + 1
        question_chars += len(_text(card.get("question")))
        answer_chars += len(_text(card.get("answer")))

    total = len(cards)
    assessment["averageLength"] = {
        "question": round(question_chars / total),
        "answer": round(answer_chars / total),
    }

    easy_pct = assessment["distribution"]["easy"] / total * 100
    hard_pct = assessment["distribution"]["hard"] / total * 100
    if easy_pct > 70:
        assessment["recommendations"].append("Consider increasing difficulty for better learning")
        assessment["overallDifficulty"] = "easy"
    elif hard_pct > 50:
        assessment["recommendations"].append("Consider reviewing prerequisite concepts")
        assessment["overallDifficulty"] = "hard"

    return assessment


def organize(cards: list[dict]) -> dict:
    categories: dict[str, list[dict]] = {}
    for card in cards:
        categories.setdefault(card.get("category") or "General", []).append(card)
    return {
        "categories": categories,
        "totalCategories": len(categories),
        "cardsByCategory": {name: len(items) for name, items in categories.items()},
    }


def _saved_cards(item: Content) -> list:
    cards = item.content.get("flashcards")
    return cards if isinstance(cards, list) else []


def cards_from_content(items: Iterable[Content]) -> list[dict]:
    """All cards held by saved flashcard sets."""
    cards = []
    for item in items:
        for card in _saved_cards(item):
            if isinstance(card, dict):
                cards.append(card)
    return cards


def study_stats(items: list[Content], now: dt.datetime | None = None) -> dict:
    """Aggregate study statistics over a user's saved flashcard sets."""
    now = now or utcnow()
    cards = cards_from_content(items)
    end_of_today = now.replace(hour=23, minute=59, second=59, microsecond=999999)

    total_reviews = sum(_count(c.get("totalReviews")) for c in cards)
    correct_reviews = sum(_count(c.get("correctReviews")) for c in cards)
    performance = {"easy": 0, "good": 0, "hard": 0, "again": 0}
    for card in cards:
        if isinstance(card.get("performance"), str) and card["performance"] in performance:
            performance[card["performance"]] += 1

    progress = {
        "daily": sum(1 for c in cards if _reviewed_since(c, now - dt.timedelta(days=1))),
        "weekly": sum(1 for c in cards if _reviewed_since(c, now - dt.timedelta(days=7))),
        "monthly": sum(1 for c in cards if _reviewed_since(c, now - dt.timedelta(days=30))),
    }

    return {
        "totalSets": len(items),
        "totalCards": len(cards),
        "cardsStudied": sum(1 for c in cards if _count(c.get("totalReviews"))),
        "averageAccuracy": round(correct_reviews / total_reviews * 100) if total_reviews else 0,
        "studyStreak": max((_count(c.get("streak")) for c in cards), default=0),
        "totalStudyTime": total_reviews * MINUTES_PER_CARD,
        "cardsDue": sum(1 for c in cards if _is_due(c, now)),
        "cardsDueToday": sum(1 for c in cards if _is_due(c, end_of_today)),
        "performance": performance,
        "recentActivity": [
            {
                "id": item.id,
                "title": item.title,
                "cardCount": len(_saved_cards(item)),
                "createdAt": _iso(item.created_at),
            }
            for item in items[:5]
        ],
        "studyGoal": {"daily": 20, "weekly": 100, "monthly": 400},
        "currentProgress": progress,
    }
