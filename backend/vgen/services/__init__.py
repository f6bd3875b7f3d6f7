# vgen/services/__init__.py
"""
Services Module

One module per tool, plus the shared pieces they build on:
- ai_client: Gemini generateContent client and JSON output parsing
- prompts: Prompt builders for every generator
- ats: Rule-based ATS scoring (no model call)
- resume, cover_letter, bio, flashcards, interview, analyzer: Tool logic
- file_text: Text extraction for uploaded resumes
- local_services: Demo local service finder data
- history: Saved content listing, stats and bulk operations
"""
