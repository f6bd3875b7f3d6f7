# vgen/models/session.py
import uuid
import datetime as dt
from pydantic import BaseModel, Field

from vgen.models.user import utcnow


class UserSession(BaseModel):
    """
    Login session row. session_token holds the sha256 of the issued JWT,
    never the token itself.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    session_token: str
    expires_at: dt.datetime
    user_agent: str | None = None
    ip_address: str | None = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    last_activity: dt.datetime = Field(default_factory=utcnow)

    def to_row(self) -> dict:
        return self.model_dump(mode="json")
