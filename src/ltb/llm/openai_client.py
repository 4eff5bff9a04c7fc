# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model gateway OpenAI implementation."""

import logging
from urllib.parse import urlparse

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    OpenAI,
    OpenAIError,
    PermissionDeniedError,
    RateLimitError,
)

from ltb.errors import EmptyResponseError, TransportError
from ltb.llm_client import DEFAULT_SAMPLING, SamplingParams

logger = logging.getLogger(__name__)

OPENAI_DEFAULT_BASE_URL: str = "https://api.openai.com/v1"


class OpenAIGateway:
    """Complete prompts using OpenAI's Responses API.

    The Responses API has no ``top_k`` knob; only temperature and top-p are
    forwarded.
    """

    def __init__(
        self,
        provider_url: str,
        sampling: SamplingParams = DEFAULT_SAMPLING,
        client: OpenAI | None = None,
    ) -> None:
        """Initialize gateway configuration.

        Args:
            provider_url: OpenAI-compatible endpoint base URL.
            sampling: Sampling parameters sent with every request.
            client: Preconstructed SDK client, mainly for tests.
        """
        self._provider_url = provider_url
        self._sampling = sampling
        self._client = client

    def complete(self, prompt_text: str, max_tokens: int, model_id: str) -> str:
        """Complete a prompt with OpenAI Responses API.

        Args:
            prompt_text: Full prompt text.
            max_tokens: Maximum number of output tokens.
            model_id: Model identifier used for generation.

        Returns:
            Reply text.

        Raises:
            TransportError: If the request fails.
            EmptyResponseError: If the response has no content.
        """
        client = self._get_client()
        logger.debug(
            f"Sending OpenAI request (provider_url={self._provider_url} "
            f"model={model_id} max_tokens={max_tokens})"
        )
        try:
            response = client.responses.create(
                model=model_id,
                input=prompt_text,
                max_output_tokens=max_tokens,
                temperature=self._sampling.temperature,
                top_p=self._sampling.top_p,
            )
        except (
            APIConnectionError,
            APIError,
            APITimeoutError,
            AuthenticationError,
            BadRequestError,
            InternalServerError,
            NotFoundError,
            PermissionDeniedError,
            RateLimitError,
            AttributeError,
            OSError,
            ValueError,
        ) as exc:
            logger.warning(
                f"OpenAI request failed (provider_url={self._provider_url} "
                f"model={model_id} error={exc})"
            )
            raise TransportError(str(exc)) from exc

        content = _extract_response_content(response)
        if content is None:
            logger.warning(
                f"OpenAI response did not contain content "
                f"(provider_url={self._provider_url} model={model_id} response={response!r})"
            )
            raise EmptyResponseError("OpenAI response does not contain content.")
        return content

    def _get_client(self) -> OpenAI:
        """Get or initialize OpenAI SDK client.

        Raises:
            TransportError: If client initialization fails.
        """
        if self._client is not None:
            return self._client
        try:
            self._client = OpenAI(base_url=_normalize_provider_url(self._provider_url))
        except (OpenAIError, OSError, ValueError) as exc:
            logger.warning(
                f"OpenAI client initialization failed "
                f"(provider_url={self._provider_url} error={exc})"
            )
            raise TransportError(str(exc)) from exc
        return self._client


def _normalize_provider_url(provider_url: str) -> str:
    """Normalize OpenAI provider URL to a valid base URL.

    Args:
        provider_url: User-provided provider URL or alias.

    Returns:
        Normalized base URL suitable for OpenAI Python client.

    Raises:
        ValueError: If provider URL is invalid.
    """
    normalized_raw = provider_url.strip()
    if not normalized_raw:
        return OPENAI_DEFAULT_BASE_URL

    lowered_raw = normalized_raw.lower().rstrip("/")
    if lowered_raw in {"openai", "openai.com", "www.openai.com", "api.openai.com"}:
        return OPENAI_DEFAULT_BASE_URL

    candidate = normalized_raw
    if "://" not in candidate:
        candidate = f"https://{candidate}"

    parsed = urlparse(candidate)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(
            f"Invalid OpenAI provider URL: expected host URL, got '{provider_url}'."
        )
    return candidate.rstrip("/")


def _extract_response_content(response: object) -> str | None:
    """Extract reply text from an OpenAI response object.

    Returns:
        Reply text, possibly empty, or ``None`` when the response carries no
        output items.
    """
    if isinstance(response, dict):
        output = response.get("output")
        output_text = response.get("output_text")
    else:
        output = getattr(response, "output", None)
        output_text = getattr(response, "output_text", None)
    if isinstance(output, list) and not output:
        return None
    return output_text if isinstance(output_text, str) else None
