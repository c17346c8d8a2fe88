"""
BeliLite Backend — xAI (Grok) Summarization Service
=====================================================

What:  Concrete LLMService that summarizes text with xAI's chat-completion API.
Why:   The summarize button in the browser client proxies through here so the
       API key never leaves the server.
How:   One POST to XAI_API_URL (OpenAI-compatible body) with httpx; the first
       choice's message content is trimmed and returned.
Who:   Created once by create_app() and stored on app.state.summarizer.

Call Semantics:
    - Single shot: no retry, no backoff, no cache. Identical input text
      triggers a full upstream call every time.
    - No timeout of its own: the request is done when the upstream answers or
      the transport fails. The call is a coroutine, so cancelling the task
      cancels the request.

Error Classification:
    The HTTP status of the upstream response decides first:
        401 / 403 → UpstreamAuthError      (→ 401 to our caller)
        429       → UpstreamRateLimitError (→ 429)
        other     → UpstreamError          (→ 500)
    The upstream error message is also scanned for "401"/"unauthorized" and
    "429"/"rate limit", which catches providers that report these conditions
    under a different status code.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from belilite.config import Settings
from belilite.exceptions import (
    ConfigurationError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    ValidationError,
)
from belilite.services.llm_base import LLMService

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise, clear summaries of text. "
    "Summarize the given text in 2-3 sentences, capturing the main points."
)

USER_PROMPT_TEMPLATE = "Please summarize the following text:\n\n{text}"

MAX_TOKENS = 150
TEMPERATURE = 0.7


def build_payload(model: str, text: str) -> Dict[str, Any]:
    """Request body for the chat-completion endpoint."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT_TEMPLATE.format(text=text)},
        ],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
        "stream": False,
    }


def extract_error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an upstream error response."""
    try:
        data = response.json()
    except ValueError:
        data = {}

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
    return f"API returned status {response.status_code}"


def classify_failure(status_code: Optional[int], message: str) -> UpstreamError:
    """
    Map an upstream failure to the matching UpstreamError subclass.

    The status code decides. The message is only scanned when there is no
    status (transport failure) or a non-5xx one, since some upstreams report
    auth and quota problems under a generic 400.
    """
    if status_code in (401, 403):
        return UpstreamAuthError(status_code=status_code, detail=message)
    if status_code == 429:
        return UpstreamRateLimitError(status_code=status_code, detail=message)
    if status_code is not None and status_code >= 500:
        return UpstreamError(status_code=status_code, detail=message)

    lowered = message.lower()
    if "401" in message or "unauthorized" in lowered:
        return UpstreamAuthError(status_code=status_code, detail=message)
    if "429" in message or "rate limit" in lowered:
        return UpstreamRateLimitError(status_code=status_code, detail=message)
    return UpstreamError(status_code=status_code, detail=message)


class XAIService(LLMService):
    """
    xAI Grok chat-completion client.

    Args:
        settings:  Supplies xai_api_url, xai_api_key and xai_model
        transport: Optional httpx transport; tests pass httpx.MockTransport
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = settings.xai_api_url
        self.api_key = settings.xai_api_key
        self.model = settings.xai_model
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def summarize(self, text: Optional[str]) -> str:
        if not text or not text.strip():
            raise ValidationError(message="Text is required for summarization", field="text")

        if not self.is_configured:
            raise ConfigurationError(
                message="xAI API key not configured. Please set XAI_API_KEY in your .env file.",
                setting="XAI_API_KEY",
            )

        logger.info("Calling xAI API: %s", self.api_url)
        data = await self._post(build_payload(self.model, text))

        try:
            summary = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.error("xAI API returned an unexpected response shape: %s", data)
            raise UpstreamError(detail="Unexpected response format from xAI API")

        if not isinstance(summary, str):
            raise UpstreamError(detail="Unexpected response format from xAI API")

        return summary.strip()

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send the request and return the decoded JSON body of a 2xx response."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("xAI API transport error: %s", str(e))
            raise classify_failure(None, str(e) or type(e).__name__)

        if not response.is_success:
            message = extract_error_message(response)
            logger.error(
                "xAI API error: status=%d reason=%s message=%s url=%s",
                response.status_code,
                response.reason_phrase,
                message,
                self.api_url,
            )
            raise classify_failure(response.status_code, message)

        try:
            return response.json()
        except ValueError:
            logger.error("xAI API returned a non-JSON body")
            raise UpstreamError(
                status_code=response.status_code,
                detail="xAI API returned a non-JSON response",
            )
