# vgen/api/routers/__init__.py
from . import analyzer, auth, bio, cover_letter, flashcard, history, interview, resume, service

__all__ = ["analyzer", "auth", "bio", "cover_letter", "flashcard", "history", "interview", "resume", "service"]
