"""System prompt construction shared by every provider."""

from __future__ import annotations

from typing import Any

ROLE_PREAMBLE = "You are a social media assistant answering messages sent to a Facebook Page."

_TONE_CLAUSES: dict[str, str] = {
    "professional": "Use a professional and courteous tone.",
    "friendly": "Be friendly and warm in your replies.",
    "humorous": "Use appropriate humour and keep a relaxed tone.",
    "formal": "Keep a formal and respectful tone.",
}
_NEUTRAL_TONE_CLAUSE = "Be natural and adapt to the context."

_STYLE_CLAUSES: dict[str, str] = {
    "short": "Keep your replies short and concise (50 words maximum).",
    "medium": "Use medium-length replies (50 to 150 words).",
    "long": "You may give detailed replies when needed.",
}

DEFAULT_LANGUAGE = "fr"


def build_system_prompt(config: Any) -> str:
    """Return the system instruction text for an AI configuration.

    Sections are always emitted in the same order: role preamble, tone, style
    (omitted when unrecognized), custom instructions (verbatim) and the reply
    language. The function reads ``tone``, ``style``, ``instructions`` and
    ``language`` attributes and nothing else, so identical inputs always yield
    identical text.
    """

    tone = _normalize_choice(getattr(config, "tone", None))
    style = _normalize_choice(getattr(config, "style", None))
    instructions = getattr(config, "instructions", None)
    language = _normalize_choice(getattr(config, "language", None)) or DEFAULT_LANGUAGE

    parts = [ROLE_PREAMBLE, _TONE_CLAUSES.get(tone, _NEUTRAL_TONE_CLAUSE)]
    style_clause = _STYLE_CLAUSES.get(style)
    if style_clause:
        parts.append(style_clause)
    if instructions:
        parts.append(f"Special instructions: {instructions}")
    parts.append(f"Always reply in {'French' if language == 'fr' else 'English'}.")
    return " ".join(parts)


def _normalize_choice(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()
