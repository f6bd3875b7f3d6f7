# vgen/models/content.py
"""
Saved content (generated resumes, bios, flashcard sets, ...) owned by a user.
"""
import json
import uuid
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vgen.models.user import utcnow

CONTENT_TYPES = ("resume", "cover-letter", "bio", "flashcard", "interview", "analyzer")
CONTENT_TTL_DAYS = 30


def _default_expiry() -> dt.datetime:
    return utcnow() + dt.timedelta(days=CONTENT_TTL_DAYS)


class ContentUsage(BaseModel):
    views: int = 0
    downloads: int = 0
    shares: int = 0


class Content(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    type: str
    title: str
    content: dict = Field(default_factory=dict)
    metadata: dict = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    is_public: bool = False
    is_template: bool = False
    is_favorite: bool = False
    usage: ContentUsage = Field(default_factory=ContentUsage)
    expires_at: dt.datetime | None = Field(default_factory=_default_expiry)
    last_accessed: dt.datetime = Field(default_factory=utcnow)
    version: int = 1
    parent_content: str | None = None
    related_content: list[str] = Field(default_factory=list)
    settings: dict = Field(default_factory=dict)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    def is_accessible(self, user_id: str | None) -> bool:
        return self.is_public or (user_id is not None and str(self.user_id) == str(user_id))

    def is_owned_by(self, user_id: str) -> bool:
        return str(self.user_id) == str(user_id)

    def is_expired(self, now: dt.datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=dt.timezone.utc)
        return expires < (now or utcnow())

    @property
    def age_days(self) -> int:
        created = self.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=dt.timezone.utc)
        return (utcnow() - created).days

    @property
    def character_count(self) -> int:
        return len(json.dumps(self.content))

    @property
    def size_category(self) -> str:
        size = self.character_count
        if size < 500:
            return "short"
        if size < 2000:
            return "medium"
        return "long"

    def touch(self) -> None:
        self.last_accessed = utcnow()
        self.usage.views += 1

    def to_row(self) -> dict:
        return self.model_dump(mode="json")

    def to_public(self) -> dict:
        data = self.model_dump(mode="json", by_alias=True)
        data["sizeCategory"] = self.size_category
        data["ageDays"] = self.age_days
        return data
