"""Prompt templating helpers.

Every builder is a pure function of its arguments; user text is interpolated
as-is.
"""
from __future__ import annotations
from typing import Any, Callable

IMAGE_DESCRIPTION_PROMPT = (
    "Describe this image in detail, including objects, actions, and overall context. "
    "Keep the description concise, 2-3 sentences."
)

# Summary types whose output already is a list of key points.
KEY_POINT_SUMMARY_TYPES = frozenset({"bullets", "key"})


def translate_prompt(text: str, from_lang: str, to_lang: str) -> str:
    """
    Render the translation prompt.

    Args:
        text: Text to translate.
        from_lang: Source language name.
        to_lang: Target language name.
    """
    return (
        f"Translate the following text from {from_lang} to {to_lang}. "
        f"Only provide the translated text, nothing else.\nText: \"{text}\""
    )


def _brief(text: str) -> str:
    return f"Provide a very brief, 1-2 sentence summary of the following text. Only the summary.\nText: \"{text}\""


def _detailed(text: str) -> str:
    return f"Provide a detailed, 3-5 sentence summary of the following text. Only the summary.\nText: \"{text}\""


def _bullets(text: str) -> str:
    return f"Summarize the following text into 3-5 key bullet points. Only the bullet points.\nText: \"{text}\""


def _key(text: str) -> str:
    return (
        "Extract the absolute 3-5 most important key points from the following text "
        f"as a numbered list. Only the numbered list.\nText: \"{text}\""
    )


def _default_summary(text: str) -> str:
    return f"Summarize the following text. Only the summary.\nText: \"{text}\""


SUMMARY_TEMPLATES: dict[str, Callable[[str], str]] = {
    "brief": _brief,
    "detailed": _detailed,
    "bullets": _bullets,
    "key": _key,
}


def summary_prompt(text: str, summary_type: str) -> str:
    """
    Render the summary prompt for ``summary_type``.

    Unknown types fall back to an unqualified summary.
    """
    return SUMMARY_TEMPLATES.get(summary_type, _default_summary)(text)


def key_points_prompt(text: str) -> str:
    """Prompt for the separate key-takeaways call."""
    return f"Extract 3-5 key takeaways from the following text as bullet points:\n\"{text}\""


def resume_summary_prompt(existing_summary: Any, role: Any, experience_level: Any) -> str:
    return (
        f"Generate a concise, impactful professional summary for a {role} with {experience_level} experience. "
        f"Incorporate this existing information: \"{existing_summary}\". "
        "Focus on achievements and relevant skills. Keep it to 3-5 sentences."
    )


def optimize_skills_prompt(current_skills: Any, job_description_keywords: Any) -> str:
    return (
        "Optimize the following skills for a resume, considering these job requirements/keywords: "
        f"\"{job_description_keywords}\". Suggest 5-10 strong, relevant skills based on \"{current_skills}\". "
        "Provide as a comma-separated list of skills."
    )
