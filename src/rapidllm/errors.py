"""Exceptions raised by rapidllm. Each one names the stage that failed."""


class RapidLLMError(Exception):
    """Base class for every error the `rlm` command reports."""

    stage = "rlm"


class ConfigurationError(RapidLLMError):
    stage = "configuration"


class CredentialError(RapidLLMError):
    stage = "credentials"


class PromptReadError(RapidLLMError):
    stage = "system prompt"


class InputError(RapidLLMError):
    stage = "input"


class TransportError(RapidLLMError):
    stage = "request"


class APIStatusError(RapidLLMError):
    """The API answered, but not with a usable completion."""

    stage = "api"

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class ResponseFormatError(RapidLLMError):
    stage = "response"


class EmptyResponseError(ResponseFormatError):
    pass
