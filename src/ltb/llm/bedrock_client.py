# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model gateway AWS Bedrock implementation."""

import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ltb.errors import EmptyResponseError, TransportError
from ltb.llm_client import DEFAULT_SAMPLING, SamplingParams

logger = logging.getLogger(__name__)

BEDROCK_ANTHROPIC_VERSION: str = "bedrock-2023-05-31"
BEDROCK_DEFAULT_REGION: str = "us-east-1"


class BedrockGateway:
    """Complete prompts with Anthropic models hosted on AWS Bedrock."""

    def __init__(
        self,
        region: str | None = BEDROCK_DEFAULT_REGION,
        profile: str | None = None,
        sampling: SamplingParams = DEFAULT_SAMPLING,
        client: Any | None = None,
    ) -> None:
        """Initialize gateway configuration.

        Args:
            region: AWS region hosting the Bedrock runtime endpoint.
            profile: Optional named AWS credentials profile.
            sampling: Sampling parameters sent with every request.
            client: Preconstructed ``bedrock-runtime`` client, mainly for tests.
        """
        self._region = region or BEDROCK_DEFAULT_REGION
        self._profile = profile
        self._sampling = sampling
        self._client = client

    def complete(self, prompt_text: str, max_tokens: int, model_id: str) -> str:
        """Invoke a Bedrock model with the Anthropic messages body.

        Args:
            prompt_text: Full prompt text.
            max_tokens: Maximum number of tokens to generate.
            model_id: Bedrock model identifier.

        Returns:
            Text of the first reply content block.

        Raises:
            TransportError: If the request fails or the reply body is unreadable.
            EmptyResponseError: If the reply has no content blocks.
        """
        client = self._get_client()
        body = build_request_body(prompt_text, max_tokens, self._sampling)
        logger.debug(
            f"Sending Bedrock request (model={model_id} max_tokens={max_tokens} "
            f"region={self._region})"
        )
        try:
            response = client.invoke_model(
                modelId=model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(body),
            )
            payload = json.loads(response["body"].read())
        except (
            BotoCoreError,
            ClientError,
            OSError,
            ValueError,
            KeyError,
            RecursionError,
        ) as exc:
            logger.warning(
                f"Bedrock request failed (region={self._region} "
                f"model={model_id} error={exc})"
            )
            raise TransportError(str(exc)) from exc

        _log_usage(payload, model_id)
        content = _extract_response_content(payload)
        if content is None:
            logger.warning(
                f"Bedrock response did not contain content "
                f"(region={self._region} model={model_id} response={payload!r})"
            )
            raise EmptyResponseError("Bedrock response does not contain content.")
        return content

    def _get_client(self) -> Any:
        """Get or initialize the ``bedrock-runtime`` client.

        Raises:
            TransportError: If the session or client cannot be created.
        """
        if self._client is not None:
            return self._client
        try:
            session = boto3.Session(profile_name=self._profile, region_name=self._region)
            self._client = session.client("bedrock-runtime")
        except (BotoCoreError, ClientError, ValueError) as exc:
            logger.warning(
                f"Bedrock client initialization failed (region={self._region} "
                f"profile={self._profile} error={exc})"
            )
            raise TransportError(str(exc)) from exc
        return self._client


def build_request_body(
    prompt_text: str, max_tokens: int, sampling: SamplingParams
) -> dict[str, Any]:
    """Build the Anthropic messages request body for Bedrock."""
    return {
        "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
        "max_tokens": max_tokens,
        "temperature": sampling.temperature,
        "top_p": sampling.top_p,
        "top_k": sampling.top_k,
        "stop_sequences": [],
        "messages": [
            {
                "role": "user",
                "content": [{"type": "text", "text": prompt_text}],
            }
        ],
    }


def _extract_response_content(payload: object) -> str | None:
    """Return the text of the first content block, or ``None`` if absent."""
    if not isinstance(payload, dict):
        return None
    blocks = payload.get("content")
    if not isinstance(blocks, list) or not blocks:
        return None
    first = blocks[0]
    if not isinstance(first, dict):
        return None
    text = first.get("text")
    return text if isinstance(text, str) else ""


def _log_usage(payload: object, model_id: str) -> None:
    usage = payload.get("usage") if isinstance(payload, dict) else None
    if isinstance(usage, dict):
        logger.debug(
            f"Bedrock usage (model={model_id} input_tokens={usage.get('input_tokens')} "
            f"output_tokens={usage.get('output_tokens')})"
        )
