# vgen/schemas/ai.py
"""
Pydantic schemas for JSON returned by the generative model.
Every generate_json() call validates against one of these; unknown keys
are kept so richer model output still reaches the client.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_score(value: Any) -> Any:
    """Accept 85, 85.5, "85" and "85%" for percentage fields."""
    if isinstance(value, str):
        cleaned = value.strip().rstrip("%").strip()
        try:
            number = float(cleaned)
        except ValueError:
            return value  # let pydantic report the bad value
        return int(number) if number.is_integer() else number
    return value


class ModelOutput(BaseModel):
    """Base for model output: extra keys allowed and preserved."""
    model_config = ConfigDict(extra="allow")


class FlashcardItem(ModelOutput):
    question: str  # Front of the card
    answer: str  # Back of the card
    difficulty: Optional[str] = None  # easy | medium | hard
    category: Optional[str] = None  # Topic label used for grouping


class FlashcardSet(ModelOutput):
    flashcards: List[FlashcardItem] = Field(min_length=1)
    totalCards: Optional[int] = None
    estimatedStudyTime: Optional[str] = None


class SectionScore(ModelOutput):
    score: Optional[float] = None
    feedback: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, v):
        return _coerce_score(v)


class ResumeAnalysis(ModelOutput):
    overallScore: float  # 0-100
    atsCompatibility: Optional[float] = None  # 0-100
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    missingKeywords: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    sectionAnalysis: dict[str, SectionScore] = Field(default_factory=dict)
    keywordOptimization: List[str] = Field(default_factory=list)

    @field_validator("overallScore", "atsCompatibility", mode="before")
    @classmethod
    def _percent(cls, v):
        return _coerce_score(v)


class KeywordOptimization(ModelOutput):
    missingKeywords: List[str] = Field(default_factory=list)
    recommendedAdditions: List[str] = Field(default_factory=list)
    keywordDensity: dict[str, Any] = Field(default_factory=dict)  # {"current": "2%", "recommended": "3%"}
    industryKeywords: List[str] = Field(default_factory=list)
    skillMatches: List[str] = Field(default_factory=list)
    optimizationTips: List[str] = Field(default_factory=list)


class SkillExtraction(ModelOutput):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    totalSkills: Optional[int] = None

    @field_validator("totalSkills", mode="before")
    @classmethod
    def _total(cls, v):
        # Models sometimes echo the placeholder text instead of a number
        if isinstance(v, str) and not v.strip().isdigit():
            return None
        return v


class JobAnalysis(ModelOutput):
    keyRequirements: List[str] = Field(default_factory=list)
    preferredQualifications: List[str] = Field(default_factory=list)
    companyValues: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    industry: str = ""
    jobLevel: str = ""  # entry | mid | senior | executive
    suggestedTone: str = ""  # formal | professional | enthusiastic | confident
    focusAreas: List[str] = Field(default_factory=list)


class InterviewQuestion(ModelOutput):
    id: Optional[str] = None
    question: str
    type: str = "behavioral"  # technical | behavioral | situational
    difficulty: str = "medium"  # easy | medium | hard
    category: Optional[str] = None
    suggestedAnswer: Optional[str] = None


class InterviewQuestionSet(ModelOutput):
    questions: List[InterviewQuestion] = Field(min_length=1)
    totalQuestions: Optional[int] = None
    questionDistribution: dict[str, int] = Field(default_factory=dict)


class AnswerGuidance(ModelOutput):
    question: Optional[str] = None
    suggestedApproach: str
    keyPoints: List[str] = Field(default_factory=list)
    structure: str = "STAR"  # STAR | CAR | Technical | Behavioral
    tips: List[str] = Field(default_factory=list)
    exampleOutline: str = ""
    commonMistakes: List[str] = Field(default_factory=list)
