"""JSON replies (quizzes, grading) parsed into Pydantic models.

Models often wrap JSON in prose or markdown fences and emit LaTeX with
single backslashes, which is invalid JSON. Parse failures raise
StructuredOutputError, which the router treats like any failed attempt.
"""

import re
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from analogix.errors import CompletionAttemptError
from analogix.llm.retry import FailureKind

logger = structlog.get_logger()

_MD_JSON_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
# \int -> \\int; an already doubled backslash is left alone
_LATEX_ESCAPE_RE = re.compile(r"(?<!\\)\\([a-zA-Z])")


class StructuredOutputError(CompletionAttemptError):
    """Raised when a reply cannot be parsed into the expected schema.

    Attributes:
        raw_content: The raw reply text that failed validation.
        schema_name: Name of the expected Pydantic model.
    """

    def __init__(
        self,
        model: str,
        raw_content: str,
        schema_name: str,
        cause: Exception | None = None,
    ) -> None:
        self.raw_content = raw_content
        self.schema_name = schema_name
        super().__init__(
            model,
            f"{model}: failed to parse response as {schema_name}",
            kind=FailureKind.INVALID_OUTPUT,
        )
        self.__cause__ = cause


def extract_json_object(text: str) -> str | None:
    """Return the outermost {...} block of a reply, or None."""
    fenced = _MD_JSON_RE.search(text)
    if fenced:
        text = fenced.group(1)
    match = _OBJECT_RE.search(text)
    return match.group(0) if match else None


def parse_structured(
    text: str,
    response_schema: type[BaseModel],
    model: str = "",
) -> Any:
    """Validate a reply against response_schema.

    Retries once with LaTeX backslashes escaped before giving up.

    Raises:
        StructuredOutputError: no JSON object found, or it does not
            match the schema.
    """
    raw = extract_json_object(text)
    if raw is None:
        raise StructuredOutputError(model, text, response_schema.__name__)

    try:
        return response_schema.model_validate_json(raw)
    except ValidationError as first_error:
        sanitized = _LATEX_ESCAPE_RE.sub(r"\\\\\1", raw)
        try:
            return response_schema.model_validate_json(sanitized)
        except ValidationError:
            logger.error(
                "structured_output_parse_failed",
                model=model,
                schema=response_schema.__name__,
                raw_content=raw[:500],
            )
            raise StructuredOutputError(
                model, raw, response_schema.__name__, first_error
            ) from first_error
