# vgen/services/interview.py
"""
Interview preparation: question generation, answer guidance and mock
interview sessions, plus the static interview catalogues.
"""
import datetime as dt
import logging

from vgen.core.errors import AIResponseError
from vgen.schemas.ai import AnswerGuidance, InterviewQuestionSet
from vgen.services import prompts
from vgen.services.ai_client import GeminiClient, parse_model_output
from vgen.services.flashcards import new_card_id

logger = logging.getLogger("uvicorn.error")

QUESTION_TYPE_IDS = ("technical", "behavioral", "situational", "mixed")
DIFFICULTY_IDS = ("easy", "medium", "hard", "mixed")

QUESTION_TYPES = [
    {
        "id": "technical",
        "name": "Technical Questions",
        "description": "Questions about specific technical skills and knowledge",
        "purpose": "Assess technical competency and expertise",
        "examples": [
            "Explain how you would optimize a slow database query.",
            "How does garbage collection work in Java?",
            "Describe the difference between REST and GraphQL APIs.",
        ],
        "bestFor": ["Technical roles", "Engineering positions", "Developer roles"],
        "weight": 40,
    },
    {
        "id": "behavioral",
        "name": "Behavioral Questions",
        "description": "Questions about past experiences and behavior patterns",
        "purpose": "Predict future performance based on past behavior",
        "examples": [
            "Tell me about a time when you faced a challenging deadline.",
            "Describe a situation where you had to resolve a conflict in a team.",
            "Give an example of when you took initiative on a project.",
        ],
        "bestFor": ["All roles", "Leadership positions", "Team-based roles"],
        "weight": 35,
    },
    {
        "id": "situational",
        "name": "Situational Questions",
        "description": "Hypothetical scenarios to assess problem-solving",
        "purpose": "Evaluate decision-making and problem-solving skills",
        "examples": [
            "How would you handle a situation where a project is behind schedule?",
            "What would you do if you discovered a major bug right before deployment?",
            "How would you approach learning a new technology for a project?",
        ],
        "bestFor": ["Problem-solving roles", "Leadership positions", "Complex projects"],
        "weight": 25,
    },
]
RECOMMENDED_DISTRIBUTION = {q["id"]: q["weight"] for q in QUESTION_TYPES}

INDUSTRIES = [
    {
        "id": "technology",
        "name": "Technology",
        "description": "Software, IT, and Tech industry",
        "focusAreas": ["System Design", "Algorithms", "Programming Languages", "Agile/Scrum"],
        "commonQuestionTypes": ["technical", "behavioral", "situational"],
        "difficulty": "medium-hard",
    },
    {
        "id": "finance",
        "name": "Finance",
        "description": "Banking, Investment, and Financial Services",
        "focusAreas": ["Risk Management", "Financial Analysis", "Regulatory Compliance", "Client Relations"],
        "commonQuestionTypes": ["behavioral", "situational", "technical"],
        "difficulty": "medium",
    },
    {
        "id": "healthcare",
        "name": "Healthcare",
        "description": "Medical, Pharmaceutical, and Healthcare services",
        "focusAreas": ["Patient Care", "Medical Knowledge", "Ethics", "Team Coordination"],
        "commonQuestionTypes": ["behavioral", "situational"],
        "difficulty": "medium",
    },
    {
        "id": "marketing",
        "name": "Marketing",
        "description": "Digital Marketing, Advertising, and Brand Management",
        "focusAreas": ["Campaign Strategy", "Analytics", "Creative Thinking", "Market Research"],
        "commonQuestionTypes": ["behavioral", "situational", "technical"],
        "difficulty": "easy-medium",
    },
    {
        "id": "consulting",
        "name": "Consulting",
        "description": "Management Consulting and Advisory Services",
        "focusAreas": ["Problem Solving", "Client Management", "Strategic Thinking", "Project Management"],
        "commonQuestionTypes": ["behavioral", "situational", "technical"],
        "difficulty": "hard",
    },
    {
        "id": "sales",
        "name": "Sales",
        "description": "Business Development and Sales",
        "focusAreas": ["Relationship Building", "Negotiation", "Goal Achievement", "Customer Focus"],
        "commonQuestionTypes": ["behavioral", "situational"],
        "difficulty": "easy-medium",
    },
]

ANSWER_STRUCTURES = {
    "star": {
        "name": "STAR Method",
        "description": "Situation, Task, Action, Result",
        "steps": [
            "Situation: Set the context and background",
            "Task: Explain your specific responsibility",
            "Action: Detail the steps you took",
            "Result: Share the outcome and impact",
        ],
        "bestFor": ["Behavioral questions", "Leadership examples", "Problem-solving situations"],
    },
    "car": {
        "name": "CAR Method",
        "description": "Challenge, Action, Result",
        "steps": [
            "Challenge: Describe the challenge or context",
            "Action: Explain your specific actions",
            "Result: Share the outcome and learning",
        ],
        "bestFor": ["Concise responses", "Technical challenges", "Quick examples"],
    },
    "behavioral": {
        "name": "Behavioral Framework",
        "description": "Past behavior predicts future performance",
        "steps": [
            "Recall a specific example from your experience",
            "Explain the situation and your role",
            "Detail your thought process and actions",
            "Share the results and what you learned",
        ],
        "bestFor": ["Behavioral interview questions", "Experience-based questions"],
    },
    "technical": {
        "name": "Technical Framework",
        "description": "Structured approach for technical questions",
        "steps": [
            "Clarify understanding of the question",
            "Outline your approach or methodology",
            "Provide step-by-step solution",
            "Explain trade-offs and alternatives",
        ],
        "bestFor": ["Technical questions", "Algorithm problems", "System design"],
    },
}
RECOMMENDED_STRUCTURE = "star"

TIPS = {
    "preparation": [
        "Research the company thoroughly",
        "Prepare specific examples from your experience",
        "Practice common interview questions",
        "Prepare questions to ask the interviewer",
    ],
    "during_interview": [
        "Arrive 10-15 minutes early",
        "Make good eye contact and smile",
        "Use the STAR method for behavioral questions",
        "Ask clarifying questions when needed",
        "Take notes during the interview",
    ],
    "technical_interviews": [
        "Think out loud when solving problems",
        "Ask about constraints and edge cases",
        "Explain your thought process clearly",
        "Discuss trade-offs and alternatives",
    ],
    "follow_up": [
        "Send a thank-you email within 24 hours",
        "Reference specific discussion points",
        "Reiterate your interest in the role",
        "Follow up if you haven't heard back in 1-2 weeks",
    ],
}

COMMON_MISTAKES = [
    {
        "mistake": "Not researching the company",
        "impact": "Shows lack of genuine interest",
        "howToAvoid": "Research company values, recent news, and culture",
    },
    {
        "mistake": "Being too vague in examples",
        "impact": "Makes responses less compelling",
        "howToAvoid": "Use specific metrics and detailed examples",
    },
    {
        "mistake": "Not asking questions",
        "impact": "Misses opportunity to show engagement",
        "howToAvoid": "Prepare thoughtful questions about the role and company",
    },
    {
        "mistake": "Dominating the conversation",
        "impact": "Can come across as arrogant",
        "howToAvoid": "Listen actively and engage in dialogue",
    },
    {
        "mistake": "Bad-mouthing previous employers",
        "impact": "Raises red flags about attitude",
        "howToAvoid": "Focus on positive learning experiences",
    },
]

INDUSTRY_STRATEGIES = {
    "technology": {
        "focus": "Technical depth and problem-solving ability",
        "preparation": [
            "Practice coding interviews on LeetCode/HackerRank",
            "Understand system design principles",
            "Be ready to discuss specific technologies",
        ],
        "tips": [
            "Explain your thought process clearly",
            "Ask clarifying questions",
            "Show enthusiasm for learning new technologies",
        ],
    },
    "finance": {
        "focus": "Analytical thinking and attention to detail",
        "preparation": [
            "Review financial concepts and terminology",
            "Practice case studies and market analysis",
            "Understand regulatory environment",
        ],
        "tips": [
            "Be precise with numbers and calculations",
            "Show understanding of risk management",
            "Demonstrate ethical decision-making",
        ],
    },
    "consulting": {
        "focus": "Structured thinking and communication",
        "preparation": [
            "Practice case interviews extensively",
            "Develop structured problem-solving approach",
            "Work on presentation and communication skills",
        ],
        "tips": [
            "Structure your answers clearly",
            "Show logical thinking process",
            "Ask insightful questions",
        ],
    },
}
GENERAL_STRATEGY = {
    "focus": "General professional skills and experience",
    "preparation": [
        "Research company and role thoroughly",
        "Prepare specific examples from your experience",
        "Practice common interview questions",
    ],
    "tips": [
        "Be authentic and enthusiastic",
        "Show clear communication skills",
        "Demonstrate problem-solving ability",
    ],
}

FOLLOW_UPS = {
    "technical": [
        "Can you explain your thought process?",
        "What are the trade-offs of your approach?",
        "How would you handle edge cases?",
    ],
    "behavioral": [
        "What did you learn from that experience?",
        "How would you handle that situation differently now?",
        "What was the impact on your team?",
    ],
    "situational": [
        "What would be your immediate next steps?",
        "How would you measure success?",
        "What potential challenges do you anticipate?",
    ],
}

# Minutes per question by type and difficulty
QUESTION_MINUTES = {
    "technical": {"easy": 3, "medium": 5, "hard": 8},
    "behavioral": {"easy": 2, "medium": 4, "hard": 6},
    "situational": {"easy": 3, "medium": 5, "hard": 7},
}
DEFAULT_QUESTION_MINUTES = 4

MOCK_INTERVIEW_TIPS = [
    "Take your time to think before answering",
    "Ask clarifying questions if needed",
    "Use specific examples from your experience",
    "Show enthusiasm for the role and company",
]

FALLBACK_KEY_POINTS = ["Structure your answer clearly", "Use specific examples", "Show enthusiasm"]
FALLBACK_TIPS = ["Be specific", "Use metrics", "Show self-awareness"]
FALLBACK_MISTAKES = ["Being too vague", "Not providing examples"]


def job_excerpt(job_description: str) -> str:
    return job_description[:200] + "..."


def total_tips() -> int:
    return sum(len(items) for items in TIPS.values())


def tips_for(industry: str | None = None) -> dict:
    """General tips, common mistakes and the strategy for `industry`."""
    return {
        "tips": TIPS,
        "categories": list(TIPS),
        "totalTips": total_tips(),
        "commonMistakes": COMMON_MISTAKES,
        "industry": industry or "general",
        "industryStrategy": INDUSTRY_STRATEGIES.get(industry or "", GENERAL_STRATEGY),
    }


async def generate_questions(
    ai: GeminiClient,
    job_description: str,
    question_type: str = "mixed",
    difficulty: str = "mixed",
    count: int = 10,
    industry: str = "general",
) -> dict:
    """
    Generate interview questions for a posting.

    Questions missing an id get one; the list is truncated to `count` and
    the distribution is recomputed when the model omits it.

    Returns:
        {"questions": [...], "totalQuestions": int, "questionDistribution": {...}}
    """
    result = await ai.generate_json(
        prompts.interview_questions_prompt(job_description, question_type, difficulty, count, industry),
        InterviewQuestionSet,
        max_tokens=1800,
        temperature=0.5,
    )
    questions = []
    for i, question in enumerate(result.questions[:count], start=1):
        item = question.model_dump()
        if not item.get("id"):
            item["id"] = f"q_{i}"
        questions.append(item)

    distribution = result.questionDistribution or {}
    if not distribution or len(result.questions) > count:
        distribution = {kind: 0 for kind in ("technical", "behavioral", "situational")}
        for item in questions:
            distribution[item["type"]] = distribution.get(item["type"], 0) + 1

    return {
        "questions": questions,
        "totalQuestions": len(questions),
        "questionDistribution": distribution,
    }


def fallback_guidance(question: dict, raw: str) -> dict:
    """Guidance record used when the model reply is not valid guidance JSON."""
    return {
        "question": question.get("question"),
        "questionId": question.get("id"),
        "questionType": question.get("type"),
        "difficulty": question.get("difficulty"),
        "suggestedApproach": raw[:200],
        "keyPoints": list(FALLBACK_KEY_POINTS),
        "structure": "STAR",
        "tips": list(FALLBACK_TIPS),
        "exampleOutline": "Brief example structure",
        "commonMistakes": list(FALLBACK_MISTAKES),
        "isFallback": True,
    }


async def answer_guidance(
    ai: GeminiClient,
    questions: list[dict],
    resume_data: dict | None = None,
    experience: str = "",
) -> list[dict]:
    """
    One guidance record per question, generated sequentially.

    Transport failures propagate; an unparseable reply degrades to
    fallback_guidance() for that question only.
    """
    answers = []
    for question in questions:
        raw = await ai.generate_completion(
            prompts.answer_guidance_prompt(question, resume_data, experience),
            max_tokens=800,
            temperature=0.6,
        )
        try:
            guidance = parse_model_output(raw, AnswerGuidance)
        except AIResponseError as e:
            logger.warning("[Interview] Guidance fallback for %r: %s", question.get("id"), e)
            answers.append(fallback_guidance(question, raw))
            continue
        answers.append({
            **guidance.model_dump(),
            "question": guidance.question or question.get("question"),
            "questionId": question.get("id"),
            "questionType": question.get("type"),
            "difficulty": question.get("difficulty"),
        })
    return answers


def question_minutes(question_type: str, difficulty: str) -> int:
    return QUESTION_MINUTES.get(question_type, {}).get(difficulty, DEFAULT_QUESTION_MINUTES)


def follow_up_questions(question: dict) -> list[str]:
    return FOLLOW_UPS.get(question.get("type"), FOLLOW_UPS["behavioral"])


async def mock_interview(
    ai: GeminiClient,
    job_description: str,
    duration: int = 30,
    question_count: int = 8,
) -> dict:
    generated = await generate_questions(ai, job_description, "mixed", "mixed", question_count)
    questions = [
        {
            **q,
            "order": i,
            "estimatedTime": question_minutes(q["type"], q["difficulty"]),
            "followUpQuestions": follow_up_questions(q),
        }
        for i, q in enumerate(generated["questions"], start=1)
    ]

    def count_of(kind: str) -> int:
        return sum(1 for q in questions if q["type"] == kind)

    return {
        "id": new_card_id("mi"),
        "jobDescription": job_excerpt(job_description),
        "questions": questions,
        "totalQuestions": len(questions),
        "estimatedDuration": duration,
        "structure": {
            "introduction": "Welcome and overview of the role",
            "technical": count_of("technical"),
            "behavioral": count_of("behavioral"),
            "situational": count_of("situational"),
            "conclusion": "Your questions and next steps",
        },
        "tips": MOCK_INTERVIEW_TIPS,
        "createdAt": dt.datetime.now(dt.timezone.utc).isoformat(),
    }
