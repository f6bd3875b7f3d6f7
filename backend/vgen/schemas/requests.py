# vgen/schemas/requests.py
"""
Request bodies shared by more than one router.
Field names are camelCase to match the JSON the frontend sends.
"""
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ResumeTemplate = Literal["modern", "minimalist", "academic", "technical", "creative", "executive"]
Difficulty = Literal["easy", "medium", "hard", "mixed"]


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class PersonalInfo(BaseModel):
    """Contact block of a resume. Unknown keys (summary, website, ...) are kept."""
    model_config = ConfigDict(extra="allow")

    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    location: Optional[str] = None

    @field_validator("firstName", "lastName", mode="before")
    @classmethod
    def _trim(cls, v):
        return _strip(v)


class ResumeIn(BaseModel):
    """Structured resume data for generate and preview."""
    model_config = ConfigDict(extra="allow")

    personalInfo: PersonalInfo
    experience: List[dict] = Field(default_factory=list)
    education: List[dict] = Field(default_factory=list)
    skills: Any = Field(default_factory=list)  # list of names or {"technical": [...], "soft": [...]}
    projects: List[dict] = Field(default_factory=list)
    certifications: List[Any] = Field(default_factory=list)
    languages: List[Any] = Field(default_factory=list)
    template: ResumeTemplate = "modern"
    customization: dict = Field(default_factory=dict)
    sections: Optional[List[str]] = None

    def resume_data(self) -> dict:
        """The data passed to the model (template and layout options removed)."""
        return self.model_dump(mode="json", exclude={"template", "customization", "sections"})
