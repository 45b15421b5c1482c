import json
import urllib.error
import urllib.request
from http.client import HTTPException

from pydantic import ValidationError

from rapidllm.errors import APIStatusError, ResponseFormatError, TransportError
from rapidllm.logger import logger
from rapidllm.schemas import CompletionRequest, CompletionResponse


def _read_error_body(exc: urllib.error.HTTPError) -> str:
    try:
        return exc.read().decode("utf-8", errors="replace")
    except OSError:
        return ""


def make_chat_request(request: CompletionRequest, api_key: str, endpoint: str) -> CompletionResponse:
    """Send a synchronous chat completion request.

    Args:
        request: Model id and messages to send.
        api_key: Bearer credential for the API.
        endpoint: Full URL of the chat completions endpoint.

    Returns:
        The parsed response body.

    Raises:
        TransportError: If the request could not be sent or the reply could not be read.
        APIStatusError: If the API answered with a non-2xx status.
        ResponseFormatError: If the body is not a chat completion.
    """
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }
    http_request = urllib.request.Request(
        endpoint,
        data=json.dumps(request.to_payload()).encode("utf-8"),
        headers=headers,
        method="POST",
    )

    logger.debug(f"POST {endpoint} (model {request.model}, {len(request.messages)} messages)")
    try:
        with urllib.request.urlopen(http_request) as response:
            status = response.status
            raw = response.read()
    except urllib.error.HTTPError as exc:
        body = _read_error_body(exc)
        raise APIStatusError(
            f"API responded with status {exc.code}; response body was: {body}", status=exc.code, body=body
        ) from exc
    except (urllib.error.URLError, HTTPException, OSError) as exc:
        reason = getattr(exc, "reason", exc)
        raise TransportError(f"Failed to send API request to {endpoint}: {reason}") from exc

    logger.debug(f"API responded with status {status}, {len(raw)} bytes")

    text = raw.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(f"Failed to parse JSON response body: {text}") from exc

    try:
        return CompletionResponse.model_validate(payload)
    except ValidationError as exc:
        raise ResponseFormatError(f"Unexpected response body: {exc}") from exc
