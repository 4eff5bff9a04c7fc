# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model gateway implementations for the legacy transformer builder."""

from ltb.llm.bedrock_client import BedrockGateway
from ltb.llm.ollama_client import OllamaGateway
from ltb.llm.openai_client import OpenAIGateway

__all__ = ["BedrockGateway", "OllamaGateway", "OpenAIGateway"]
