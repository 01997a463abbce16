"""Smoke tests against the configured provider.

Requires ``LLM_API_KEY`` (and optionally ``LLM_API_KEY_2``) in ``.env``.
Run with: ``pytest tests/integration --run-live -v``
"""

import pytest
from pydantic import BaseModel

from analogix.llm import CompletionRouter, TaskType

pytestmark = pytest.mark.requires_live_api


class Verdict(BaseModel):
    isCorrect: bool
    feedback: str


class TestLiveCompletion:
    async def test_plain_reply(self, live_router: CompletionRouter) -> None:
        reply = await live_router.complete(
            [{"role": "user", "content": "Reply with the single word: pong"}],
            max_tokens=10,
            temperature=0,
        )
        assert "pong" in reply.lower()

    async def test_reasoning_chain(self, live_router: CompletionRouter) -> None:
        reply = await live_router.complete(
            [
                {"role": "system", "content": "Answer with a number only."},
                {"role": "user", "content": "What is 6 times 7?"},
            ],
            max_tokens=20,
            temperature=0,
            task_type=TaskType.REASONING,
        )
        assert "42" in reply

    async def test_structured_reply(self, live_router: CompletionRouter) -> None:
        verdict, raw = await live_router.complete_structured(
            [
                {
                    "role": "user",
                    "content": (
                        'The student answered "4" to "2 + 2". Respond only with '
                        'JSON: {"isCorrect": bool, "feedback": str}'
                    ),
                }
            ],
            Verdict,
            max_tokens=100,
            temperature=0,
        )
        assert verdict.isCorrect is True
        assert raw
