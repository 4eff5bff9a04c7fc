# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model gateway Ollama implementation."""

import logging

import ollama

from ltb.errors import EmptyResponseError, TransportError
from ltb.llm_client import DEFAULT_SAMPLING, SamplingParams

logger = logging.getLogger(__name__)

OLLAMA_DEFAULT_URL: str = "http://localhost:11434"


class OllamaGateway:
    """Complete prompts using an Ollama provider endpoint."""

    def __init__(
        self,
        provider_url: str = OLLAMA_DEFAULT_URL,
        sampling: SamplingParams = DEFAULT_SAMPLING,
        client: ollama.Client | None = None,
    ) -> None:
        self._provider_url = provider_url or OLLAMA_DEFAULT_URL
        self._sampling = sampling
        self._client = client or ollama.Client(host=self._provider_url)

    def complete(self, prompt_text: str, max_tokens: int, model_id: str) -> str:
        """Complete a prompt with Ollama generate API.

        Raises:
            TransportError: If the request fails.
            EmptyResponseError: If the response has no content.
        """
        logger.debug(
            f"Sending Ollama request (provider_url={self._provider_url} "
            f"model={model_id} max_tokens={max_tokens})"
        )
        try:
            response = self._client.generate(
                model=model_id,
                prompt=prompt_text,
                stream=False,
                options={
                    "num_predict": max_tokens,
                    "temperature": self._sampling.temperature,
                    "top_p": self._sampling.top_p,
                    "top_k": self._sampling.top_k,
                },
            )
        except (ollama.RequestError, ollama.ResponseError, OSError, ValueError) as exc:
            logger.warning(
                f"Ollama request failed (provider_url={self._provider_url} "
                f"model={model_id} error={exc})"
            )
            raise TransportError(str(exc)) from exc

        content = _extract_response_content(response)
        if content is None:
            logger.warning(
                f"Ollama response did not contain content "
                f"(provider_url={self._provider_url} model={model_id} response={response!r})"
            )
            raise EmptyResponseError("Ollama response does not contain content.")
        return content


def _extract_response_content(response: object) -> str | None:
    """Extract reply text from an Ollama response object, typically mapping-like.

    Returns:
        Reply text, possibly empty, or ``None`` when no response field exists.
    """
    if isinstance(response, dict):
        content = response.get("response")
        if isinstance(content, str):
            return content
    content_obj = getattr(response, "response", None)
    if isinstance(content_obj, str):
        return content_obj
    return None
