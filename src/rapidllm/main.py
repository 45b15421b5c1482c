"""rapidllm public interface for single-shot chat completions."""

from __future__ import annotations

from rapidllm.config import DEFAULT_CHARACTER_LIMIT, DEFAULT_ENDPOINT, Settings, get_api_key
from rapidllm.errors import APIStatusError, EmptyResponseError, InputError
from rapidllm.logger import logger
from rapidllm.schemas import ChatMessage, CompletionRequest, CompletionResponse
from rapidllm.utils import make_chat_request


def build_messages(user: str, system: str | None = None) -> list[ChatMessage]:
    """Order the conversation: the optional system message, then the user message."""
    messages: list[ChatMessage] = []
    if system is not None:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": user})
    return messages


def check_input_size(messages: list[ChatMessage], character_limit: int) -> int:
    """Return the total message size, rejecting empty or oversized input.

    Raises:
        InputError: If there is nothing to send or the input exceeds `character_limit`.
    """
    size = sum(len(message["content"]) for message in messages)
    if size == 0:
        raise InputError("Input is empty")
    if size > character_limit:
        raise InputError(f"Input too long: {size} characters given, but the limit is {character_limit}")
    return size


def extract_reply(response: CompletionResponse) -> str:
    """Return the first choice's final answer, leaving out any reasoning trace.

    Raises:
        APIStatusError: If the body carries an API error instead of choices.
        EmptyResponseError: If there is no choice or the first one has no content.
    """
    if not response.choices:
        if response.error:
            message = response.error.get("message", response.error)
            code = response.error.get("code")
            status = code if isinstance(code, int) else None
            raise APIStatusError(f"API returned an error: {message}", status=status, body=str(response.error))
        raise EmptyResponseError("No response from LLM API")

    message = response.choices[0].message
    if (reasoning := message.reasoning_text) is not None:
        logger.debug(f"Dropping {len(reasoning)} characters of reasoning from the reply")

    if message.content is None:
        raise EmptyResponseError("Model returned empty content")
    return message.content


class CompletionClient:
    """Sends one chat completion per call to an OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        character_limit: int = DEFAULT_CHARACTER_LIMIT,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.character_limit = character_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionClient:
        """Create a client from a settings snapshot, looking up the API key.

        Raises:
            CredentialError: If no API key is configured.
        """
        return cls(
            api_key=get_api_key(settings),
            endpoint=settings.endpoint,
            character_limit=settings.character_limit,
        )

    def build_request(self, model: str, user: str, system: str | None = None) -> CompletionRequest:
        """Build and size-check the request without sending it."""
        messages = build_messages(user, system)
        size = check_input_size(messages, self.character_limit)
        logger.debug(f"Built request for {model}: {len(messages)} messages, {size} characters")
        return CompletionRequest(model=model, messages=messages)

    def send(self, request: CompletionRequest) -> str:
        """Send a prepared request and return the reply text."""
        response = make_chat_request(request, self.api_key, self.endpoint)
        return extract_reply(response)

    def complete(self, model: str, user: str, system: str | None = None) -> str:
        """Send a chat completion request.

        Args:
            model: Model identifier, e.g. `mistralai/mistral-7b-instruct`.
            user: User message content.
            system: Optional system message, sent first.

        Returns:
            The first choice's message text.
        """
        return self.send(self.build_request(model, user, system))
