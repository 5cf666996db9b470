import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from . import copilot
from .errors import (
    ApiError,
    DecodeError,
    EmptyResponseError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from .prompt import sanitize_command
from .providers import AuthType, Provider

logger = logging.getLogger(__name__)

MAX_TOKENS = 1000

ANTHROPIC_VERSION = "2023-06-01"

CHUNK_SIZE = 1024


def _build_request(model: str, prompt_text: str) -> Dict[str, Any]:
    """Builds the chat request body shared by both HTTP dialects."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt_text}],
        "maxTokens": MAX_TOKENS,
    }


def _error_message(payload: Any) -> Optional[str]:
    """Extracts the message of an `{"error": {"message": ...}}` payload."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def _is_timeout(error: requests.exceptions.RequestException) -> bool:
    # A stalled body surfaces as a ConnectionError wrapping urllib3's ReadTimeoutError.
    if isinstance(error, requests.exceptions.Timeout):
        return True
    return any(isinstance(arg, ReadTimeoutError) for arg in error.args)


def _read_body(response: requests.Response, deadline: float) -> str:
    chunks = []
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        chunks.append(chunk)
        if time.monotonic() > deadline:
            raise RequestTimeoutError()
    return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")


def _unexpected(provider: Provider, payload: Any) -> DecodeError:
    return DecodeError(f"unexpected response from {provider.name}: {json.dumps(payload)}")


def _post_json(provider: Provider, headers: Dict[str, str], body: Dict[str, Any], timeout: float) -> Dict[str, Any]:
    """
    Sends a JSON request to the provider and returns the decoded response.

    The timeout applies to connecting and to each socket read, and the body
    must arrive in full before the same deadline.

    Args:
        provider: The provider whose endpoint is called.
        headers: Authentication headers for the request.
        body: The request body.
        timeout: The request timeout in seconds.

    Returns:
        The decoded JSON object of a successful response.
    """
    try:
        data = json.dumps(body)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to marshal request: {e}") from e

    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers)

    logger.info(f"Sending request to {provider.name} ({body.get('model')})")
    deadline = time.monotonic() + timeout
    try:
        response = requests.post(provider.endpoint, data=data, headers=request_headers, timeout=timeout, stream=True)
        try:
            status_code = response.status_code
            text = _read_body(response, deadline)
        finally:
            response.close()
    except requests.exceptions.RequestException as e:
        if _is_timeout(e):
            raise RequestTimeoutError() from e
        raise TransportError(f"failed to send request: {e}") from e

    status_ok = status_code == requests.codes.ok
    logger.info(f"{provider.name} responded with status {status_code}")

    try:
        payload = json.loads(text)
    except ValueError as e:
        if not status_ok:
            raise ApiError(text, status_code=status_code, body=text) from e
        raise DecodeError(f"failed to parse response: {e}") from e

    message = _error_message(payload)
    if message is not None:
        raise ApiError(message)

    if not status_ok:
        raise ApiError(text, status_code=status_code, body=text)

    if not isinstance(payload, dict):
        raise DecodeError(f"unexpected response from {provider.name}: {text}")

    return payload


def _query_openai_compatible(provider: Provider, api_key: str, model: str, prompt_text: str, timeout: float) -> str:
    payload = _post_json(
        provider,
        {"Authorization": f"Bearer {api_key}"},
        _build_request(model, prompt_text),
        timeout,
    )

    choices = payload.get("choices") or []
    if not isinstance(choices, list):
        raise _unexpected(provider, payload)
    if not choices:
        raise EmptyResponseError(f"no response from {provider.name}")

    if not isinstance(choices[0], dict):
        raise _unexpected(provider, payload)
    message = choices[0].get("message") or {}
    if not isinstance(message, dict):
        raise _unexpected(provider, payload)

    content = message.get("content") or ""
    if not isinstance(content, str):
        raise _unexpected(provider, payload)
    return content


def _query_anthropic(provider: Provider, api_key: str, model: str, prompt_text: str, timeout: float) -> str:
    payload = _post_json(
        provider,
        {"X-Api-Key": api_key, "Anthropic-Version": ANTHROPIC_VERSION},
        _build_request(model, prompt_text),
        timeout,
    )

    content = payload.get("content") or []
    if not isinstance(content, list):
        raise _unexpected(provider, payload)

    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text") or ""
            if not isinstance(text, str):
                raise _unexpected(provider, payload)
            return text

    raise EmptyResponseError(f"no response from {provider.name}")


def _query_copilot(provider: Provider, api_key: str, model: str, prompt_text: str, timeout: float) -> str:
    # Requires gh on the search path, an active Copilot subscription and `gh auth login`.
    result = copilot.run_copilot(prompt_text, model, timeout)
    if not result:
        raise EmptyResponseError(f"no suggestion from {provider.name}")

    # Remove any markdown formatting that might slip through
    return sanitize_command(result)


_DISPATCH: Dict[AuthType, Callable[[Provider, str, str, str, float], str]] = {
    AuthType.BEARER: _query_openai_compatible,
    AuthType.API_KEY: _query_anthropic,
    AuthType.CLI: _query_copilot,
}


def query(provider: Provider, api_key: str, model: str, prompt_text: str, timeout: float) -> str:
    """
    Sends a prompt to the provider and returns its raw reply.

    Args:
        provider: The provider to query.
        api_key: The provider's API key (empty for GitHub Copilot).
        model: The model to use.
        prompt_text: The full prompt.
        timeout: The request timeout in seconds.

    Returns:
        The text of the provider's answer.

    Raises:
        HowtoError: A subclass describing why the query failed.
    """
    handler = _DISPATCH[provider.auth_type]
    return handler(provider, api_key, model, prompt_text, timeout)
