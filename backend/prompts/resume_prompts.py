# backend/prompts/resume_prompts.py
"""
Resume Prompt Templates

Prompt builders for resume question answering and corpus search. Every
system instruction embeds exactly one resume's text and tells the model to
answer from that text alone.

Usage:
    from prompts.resume_prompts import PromptTemplates

    system = PromptTemplates.question_system_prompt(resume.extracted_text)
    user = question
"""

from typing import Tuple


# Literal marker the model is told to use when a resume does not match
NO_MATCH_MARKER = "No match"


class PromptTemplates:
    """
    Static class containing all resume prompt templates.

    All methods are static and return strings ready for the LLM.
    """

    @staticmethod
    def _resume_block(resume_text: str) -> str:
        return f"Resume Content:\n---\n{resume_text}\n---"

    @staticmethod
    def question_system_prompt(resume_text: str) -> str:
        """System instruction for answering a question about one resume."""
        return (
            "You are a helpful AI assistant specialized in analyzing resumes.\n"
            "Your task is to answer questions based *only* on the provided resume text.\n"
            "If the information is not explicitly present in the resume, state that you "
            "cannot find the answer in the document.\n"
            "Be concise and direct in your answers.\n"
            f"{PromptTemplates._resume_block(resume_text)}"
        )

    @staticmethod
    def search_question(criterion: str) -> str:
        """Yes/no question that embeds the search criterion."""
        return (
            f"Based on the following resume, {criterion}. "
            "If yes, state their name and relevant experience. "
            f"If no, state exactly '{NO_MATCH_MARKER}'."
        )

    @staticmethod
    def search_system_prompt(resume_text: str, structured: bool = False) -> str:
        """
        System instruction for judging one resume against a search criterion.

        With ``structured`` the model is also asked for a JSON object
        ``{"matchesCriteria": bool, "answer": str}``.
        """
        prompt = (
            "You are an AI assistant that screens resumes against a search criterion.\n"
            "Judge the criterion using *only* the resume text below; ignore anything you "
            "may know about other candidates or documents.\n"
            f"If the resume does not satisfy the criterion, answer exactly '{NO_MATCH_MARKER}'.\n"
            "If it does, give the candidate's name and the experience that satisfies the "
            "criterion, in one or two sentences.\n"
        )
        if structured:
            prompt += (
                "Return ONLY a JSON object with this shape:\n"
                '{"matchesCriteria": boolean, "answer": string}\n'
                f"When matchesCriteria is false, answer must be exactly '{NO_MATCH_MARKER}'.\n"
                "No markdown. No extra keys.\n"
            )
        return prompt + PromptTemplates._resume_block(resume_text)

    @staticmethod
    def search_prompt(resume_text: str, criterion: str, structured: bool = False) -> Tuple[str, str]:
        """(system, user) pair for one resume in a search."""
        return (
            PromptTemplates.search_system_prompt(resume_text, structured=structured),
            PromptTemplates.search_question(criterion),
        )
