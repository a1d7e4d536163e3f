# backend/prompts/__init__.py
"""
Resume Prompts Package

Contains LLM prompt templates for resume Q&A and search.
"""

from .resume_prompts import PromptTemplates, NO_MATCH_MARKER

__all__ = [
    "PromptTemplates",
    "NO_MATCH_MARKER",
]
