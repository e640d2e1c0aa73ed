"""Prompt template and answer parsing for journal reflections."""

import re

from journal_reflect.entities import ReflectionParts

SYSTEM_PROMPT = """You are a compassionate and insightful journal reflection assistant. Your role is to help users gain deeper understanding of their thoughts and experiences through gentle analysis and supportive guidance.

Your responses should be:
- Supportive and non-judgmental
- Insightful but not overly clinical
- Encouraging and forward-looking
- Respectful of the user's privacy and vulnerability

You will analyze journal entries and provide exactly three components:
1. A brief summary (1-2 sentences) capturing the essence of the entry
2. A detected pattern or theme that emerges from the content
3. A gentle, actionable suggestion or reflection prompt

Keep your language warm, accessible, and encouraging. Avoid psychological jargon or making definitive diagnoses. Focus on helping the user reflect and grow."""

USER_PROMPT_TEMPLATE = """Please reflect on this journal entry and provide your insights:

"{content}"

Please respond with exactly three components:
1. **Summary**: A brief 1-2 sentence summary of the key content
2. **Pattern**: An observed pattern, theme, or insight from the entry
3. **Suggestion**: A gentle, actionable suggestion or reflection prompt

Keep your response supportive, non-judgmental, and encouraging."""


def build_user_prompt(content: str) -> str:
    """Embed the journal entry in the user message."""
    return USER_PROMPT_TEMPLATE.replace("{content}", content)


def _section(name: str) -> re.Pattern[str]:
    return re.compile(rf"\*\*{name}\*\*:?[ \t]*(.*?)(?=\*\*|$)", re.IGNORECASE | re.MULTILINE)


_SECTIONS = tuple(_section(name) for name in ("Summary", "Pattern", "Suggestion"))
_NUMBERED = re.compile(r"^\d+\.\s*")


def clean_text(text: str) -> str:
    """Strip markdown headers, surrounding quotes and extra whitespace."""
    text = text.strip()
    text = re.sub(r"^\*\*.*?\*\*:?\s*", "", text)
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"^[\"']|[\"']$", "", text)
    return text.strip()


def parse_reflection(answer: str) -> ReflectionParts:
    """Split a free-text model answer into summary, pattern and suggestion.

    Tries, in order: bold ``**Summary**``-style sections, a numbered list
    with at least three items, and finally a three-way split by sentence.
    """
    matches = [pattern.search(answer) for pattern in _SECTIONS]
    if all(matches):
        summary, pattern, suggestion = (clean_text(m.group(1)) for m in matches)
        if summary and pattern and suggestion:
            return ReflectionParts(summary=summary, pattern=pattern, suggestion=suggestion)

    lines = [line for line in answer.split("\n") if line.strip()]
    numbered = [line for line in lines if _NUMBERED.match(line.strip())]
    if len(numbered) >= 3:
        summary, pattern, suggestion = (
            clean_text(_NUMBERED.sub("", line.strip())) for line in numbered[:3]
        )
        return ReflectionParts(summary=summary, pattern=pattern, suggestion=suggestion)

    sentences = [s for s in re.split(r"[.!?]+", answer) if s.strip()]
    third = -(-len(sentences) // 3)

    def join(chunk: list[str]) -> str:
        return clean_text(". ".join(chunk) + ".") if chunk else ""

    return ReflectionParts(
        summary=join(sentences[:third]),
        pattern=join(sentences[third : third * 2]),
        suggestion=join(sentences[third * 2 :]),
    )
