# vgen/models/user.py
"""
User record shared by every storage backend.

Rows are stored with snake_case columns; the JSON columns (preferences,
subscription) keep camelCase keys. API responses are camelCase throughout.
"""
import uuid
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def parse_iso(value: str | dt.datetime) -> dt.datetime:
    """Parse an ISO-8601 timestamp (a trailing "Z" allowed); naive values are taken as UTC."""
    if isinstance(value, dt.datetime):
        parsed = value
    else:
        parsed = dt.datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=dt.timezone.utc)


class Subscription(BaseModel):
    """Monthly quota state. usageCount resets when the calendar month changes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan: str = "free"
    usage_count: int = 0
    monthly_limit: int = 10
    reset_date: dt.datetime = Field(default_factory=utcnow)


class Preferences(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    email_notifications: bool = True
    theme: str = "auto"
    language: str = "en"


class User(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    password_hash: str | None = None
    first_name: str = ""
    last_name: str = ""
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    linkedin: str | None = None
    github: str | None = None
    role: str = "user"
    preferences: Preferences = Field(default_factory=Preferences)
    subscription: Subscription = Field(default_factory=Subscription)
    is_active: bool = True
    email_verified: bool = False
    last_login: dt.datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires: dt.datetime | None = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    # ---- quota ---------------------------------------------------------

    def refresh_usage_window(self, now: dt.datetime | None = None) -> bool:
        """
        Start a new quota window if the calendar month changed since resetDate.

        Returns:
            True if the counter was reset (caller should persist the user)
        """
        now = now or utcnow()
        reset = self.subscription.reset_date
        if (reset.year, reset.month) != (now.year, now.month):
            self.subscription.usage_count = 0
            self.subscription.reset_date = now
            return True
        return False

    def can_make_request(self) -> bool:
        return self.subscription.usage_count < self.subscription.monthly_limit

    def record_usage(self) -> None:
        self.subscription.usage_count += 1

    # ---- password reset ------------------------------------------------

    def reset_token_valid(self, now: dt.datetime | None = None) -> bool:
        if not self.password_reset_token or not self.password_reset_expires:
            return False
        expires = self.password_reset_expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=dt.timezone.utc)
        return expires > (now or utcnow())

    def clear_reset_token(self) -> None:
        self.password_reset_token = None
        self.password_reset_expires = None

    # ---- serialization -------------------------------------------------

    def to_row(self) -> dict:
        """Database row: snake_case columns, camelCase JSON columns."""
        row = self.model_dump(mode="json", exclude={"preferences", "subscription"})
        row["preferences"] = self.preferences.model_dump(mode="json", by_alias=True)
        row["subscription"] = self.subscription.model_dump(mode="json", by_alias=True)
        return row

    def to_public(self) -> dict:
        """API representation without credentials."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude={"password_hash", "password_reset_token", "password_reset_expires"},
        )
