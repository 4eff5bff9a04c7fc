# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model gateway abstractions."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplingParams:
    """Fixed sampling parameters sent with every completion request."""

    temperature: float = 0.0
    top_p: float = 0.999
    top_k: int = 250


DEFAULT_SAMPLING = SamplingParams()


class ModelGateway(Protocol):
    """Define one completion round trip against a hosted model."""

    def complete(self, prompt_text: str, max_tokens: int, model_id: str) -> str:
        """Send a prompt and return the reply text.

        Args:
            prompt_text: Full prompt text.
            max_tokens: Maximum number of tokens to generate.
            model_id: Provider model identifier.

        Returns:
            First text segment of the first reply content block.

        Raises:
            TransportError: If the request fails for network, auth or service
                reasons.
            EmptyResponseError: If the reply carries no content.
        """
