"""Keyword classifier that tags a conversation with a TaskType.

The tag only selects a model chain; a wrong guess costs a less suited
model, never a failed request.
"""

from collections.abc import Iterable

from analogix.llm.schemas import ChatMessage, Role, TaskType

CODING_KEYWORDS: tuple[str, ...] = (
    "code", "coding", "program", "programming", "function", "method", "class",
    "debug", "debugging", "algorithm", "script", "syntax", "compiler", "variable",
    "api", "endpoint", "database", "sql", "query", "javascript", "python", "java",
    "typescript", "react", "node", "html", "css", "git", "github", "array", "object",
    "loop", "json", "const", "let", "var", "npm", "component", "interface",
)  # fmt: skip

REASONING_KEYWORDS: tuple[str, ...] = (
    "prove", "proof", "derive", "calculate", "solve", "integral", "derivative",
    "equation", "theorem", "physics", "chemistry", "biology", "logic", "math",
    "algebra", "geometry", "calculus", "trigonometry", "statistics", "probability",
    "science", "molecular", "atomic", "quantum", "formula", "vector", "matrix",
    "limit", "fraction", "decimal", "ratio", "percentage", "square root", "exponent",
)  # fmt: skip

CODING_SUBJECTS: frozenset[str] = frozenset({"computing"})
REASONING_SUBJECTS: frozenset[str] = frozenset(
    {"math", "physics", "chemistry", "biology", "engineering"}
)


def classify_task_type(
    messages: Iterable[ChatMessage],
    subject: str | None = None,
    *,
    min_matches: int = 1,
) -> TaskType:
    """Classify a conversation as coding, reasoning or default.

    An explicit subject wins. Otherwise keyword hits in the user turns
    are counted; the larger count wins if it reaches min_matches.
    Keywords are substring matches, as in "class" within "classroom".
    """
    if subject:
        normalized = subject.strip().lower()
        if normalized in CODING_SUBJECTS:
            return TaskType.CODING
        if normalized in REASONING_SUBJECTS:
            return TaskType.REASONING

    text = " ".join(m.content.lower() for m in messages if m.role == Role.USER)
    coding = sum(1 for keyword in CODING_KEYWORDS if keyword in text)
    reasoning = sum(1 for keyword in REASONING_KEYWORDS if keyword in text)

    if coding > reasoning and coding >= min_matches:
        return TaskType.CODING
    if reasoning > coding and reasoning >= min_matches:
        return TaskType.REASONING
    return TaskType.DEFAULT
