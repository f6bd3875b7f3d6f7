# vgen/models/__init__.py
"""
Record models shared by the storage backends.

Models exported:
- User: account, profile and monthly quota state
- Content: saved generated content owned by a user
- UserSession: login session bookkeeping
"""
from .user import User, Subscription, Preferences, utcnow, parse_iso
from .content import Content, ContentUsage, CONTENT_TYPES
from .session import UserSession
