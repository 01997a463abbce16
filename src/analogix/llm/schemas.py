"""Shared schemas for the completion router."""

from collections.abc import Iterable
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class Role(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class TaskType(StrEnum):
    """Question category, used only to pick a pre-configured model chain."""

    CODING = "coding"
    REASONING = "reasoning"
    DEFAULT = "default"


class ChatMessage(BaseModel):
    """One chat turn."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class CompletionRequest(BaseModel):
    """Provider-agnostic chat completion input.

    Immutable: the router and invokers build copies instead of
    mutating a request that may be reused for the next model.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[ChatMessage, ...] = Field(min_length=1)
    max_tokens: PositiveInt = 1024
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    def with_messages(self, messages: Iterable[ChatMessage]) -> "CompletionRequest":
        return self.model_copy(update={"messages": tuple(messages)})

    def as_payload(self) -> list[dict[str, str]]:
        """Messages in the wire shape expected by chat-completions APIs."""
        return [{"role": m.role.value, "content": m.content} for m in self.messages]


class CompletionAttempt(BaseModel):
    """One (model, credential) network attempt, reported to the log callback."""

    model_id: str
    provider: str
    credential_index: int
    retry_offset: int
    task_type: TaskType = TaskType.DEFAULT
    latency_ms: int = 0
    finished_at: datetime = Field(default_factory=datetime.now)


def fold_system_prompt(messages: Iterable[ChatMessage]) -> list[ChatMessage]:
    """Merge system messages into the first user message.

    Some reasoning models ignore system prompts; they follow the same
    instructions when prepended to the first user turn. Without a user
    turn the system text is dropped.
    """
    items = list(messages)
    system_text = "\n\n".join(m.content for m in items if m.role == Role.SYSTEM)
    rest = [m for m in items if m.role != Role.SYSTEM]
    if not system_text:
        return rest

    folded: list[ChatMessage] = []
    merged = False
    for message in rest:
        if not merged and message.role == Role.USER:
            message = ChatMessage(
                role=Role.USER,
                content=f"{system_text}\n\n{message.content}",
            )
            merged = True
        folded.append(message)
    return folded
