from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(TypedDict):
    """Chat completion message payload.

    Attributes:
        role: Message author role.
        content: Message text content.
    """

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class CompletionRequest:
    """One chat-completion request: a model id and its ordered messages."""

    model: str
    messages: list[ChatMessage] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"model": self.model, "messages": [dict(message) for message in self.messages]}


class ResponseMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: str | None = None
    # Some providers return the model's reasoning trace beside the answer.
    reasoning: str | None = None
    reasoning_content: str | None = None

    @property
    def reasoning_text(self) -> str | None:
        if self.reasoning is not None:
            return self.reasoning
        return self.reasoning_content


class Choice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: ResponseMessage
    finish_reason: str | None = None


class CompletionResponse(BaseModel):
    """Chat-completion response body. Only `choices` matters for the reply."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    model: str | None = None
    choices: list[Choice] = Field(default_factory=list)
    error: dict[str, Any] | None = None
