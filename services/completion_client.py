"""Wrapper for the Mistral chat-completions endpoint."""

from typing import Any, Callable, Optional

import requests

import config
from api_clients import build_session
from utils.logger import get_logger
from utils.error_handler import CompletionError, FormatError, HttpStatusError, NetworkError
from utils.retry import retry_on_exception

logger = get_logger()

# Failures worth another attempt. FormatError is never retried.
RETRYABLE_COMPLETION_ERRORS = (NetworkError, HttpStatusError)

class CompletionClient:
    """Sends single-message prompts to the completion endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = config.MISTRAL_API_KEY,
        model: str = config.MISTRAL_MODEL,
        base_url: str = config.MISTRAL_BASE_URL,
        max_attempts: int = config.MAX_ATTEMPTS,
        retry_delay: float = config.RETRY_DELAY_SECONDS,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float], Any]] = None,
    ):
        """Initializes the CompletionClient.

        Args:
            api_key: Bearer credential. Defaults to the value from config.
            model: Model identifier sent with every request.
            base_url: Endpoint root; requests go to {base_url}/chat/completions.
            max_attempts: Attempts per prompt, including the first.
            retry_delay: Linear backoff unit in seconds.
            timeout: Per-request timeout in seconds.
            session: Pre-built HTTP session; built from api_key when omitted.
            sleep: Wait function used between attempts (tests pass a recorder).

        Raises:
            ConfigError: If no session is given and the API key is missing.
        """
        logger.debug("Initializing CompletionClient...")
        self.session = session if session is not None else build_session(api_key)
        self.model = model
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._send_with_retry = retry_on_exception(
            exceptions=RETRYABLE_COMPLETION_ERRORS,
            max_attempts=max_attempts,
            initial_delay=retry_delay,
            sleep=sleep,
        )(self._send)
        logger.info(f"CompletionClient initialized with model: {self.model}")

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Returns the request body for one prompt."""
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": config.MAX_TOKENS,
            "temperature": config.TEMPERATURE,
        }

    def _send(self, prompt: str) -> str:
        """Performs one POST and returns the first choice's content."""
        try:
            response = self.session.post(self.url, json=self.build_payload(prompt), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Transport error calling completion endpoint: {e}")
            raise NetworkError(f"Network error: {e}") from e

        logger.debug(f"Completion endpoint response status: {response.status_code}")
        if not 200 <= response.status_code < 300:
            detail = response.text
            logger.warning(f"Completion endpoint error response ({response.status_code}): {detail[:500]}")
            raise HttpStatusError(
                f"API request failed with status {response.status_code}: {detail}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Completion endpoint returned a non-JSON success body.")
            raise FormatError("Invalid response format from API: body is not JSON", status=response.status_code) from e

        content = _extract_content(data)
        if content is None:
            logger.error(f"Unexpected completion response structure: {str(data)[:500]}")
            raise FormatError("Invalid response format from API", status=response.status_code)
        return content

    def complete(self, prompt: str) -> str:
        """Sends a prompt and returns the generated text.

        Raises:
            FormatError: On a malformed success body, after a single attempt.
            CompletionError: When every attempt failed with a network or HTTP error.
        """
        logger.info(f"Requesting completion from {self.model} ({len(prompt)} chars prompt)...")
        if config.DEBUG:
            # Avoid logging potentially large submissions unless debugging
            logger.debug(f"Prompt (first 100 chars): {prompt[:100]}...")

        try:
            text = self._send_with_retry(prompt)
        except RETRYABLE_COMPLETION_ERRORS as e:
            raise CompletionError(
                f"Failed to generate AI response after {self.max_attempts} attempts: {e.message}",
                status=e.status,
                attempts=self.max_attempts,
            ) from e

        logger.info(f"Successfully generated completion ({len(text)} chars).")
        return text

def _extract_content(data: Any) -> Optional[str]:
    """Returns choices[0].message.content, or None when the shape is wrong."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
