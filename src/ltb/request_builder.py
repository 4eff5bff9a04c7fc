# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Prompt construction and analysis request decoding."""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ltb.errors import InvalidInputError, SerializationError
from ltb.lenient import LenientObject
from ltb.model import AnalysisRequest, Metadata

logger = logging.getLogger(__name__)


def serialize_request(request: AnalysisRequest) -> str:
    """Serialize a request to its JSON wire form.

    Args:
        request: Request to serialize.

    Returns:
        JSON text with ``metadata``, ``sourceCode`` and
        ``enterpriseDomainsJson`` keys.

    Raises:
        SerializationError: If the request cannot be encoded.
    """
    try:
        return json.dumps(request.to_dict(), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize analysis request: {exc}") from exc


def build_prompt(
    metadata: Metadata,
    source_code: str,
    enterprise_domains_json: str,
    prompt_template: str,
) -> str:
    """Build the prompt text sent to the completion service.

    The prompt is the template, a blank line, then the serialized request.

    Args:
        metadata: Object metadata.
        source_code: Object source code.
        enterprise_domains_json: Shared enterprise domain taxonomy text.
        prompt_template: Instruction text placed before the payload.

    Returns:
        Prompt text.

    Raises:
        SerializationError: If the payload cannot be encoded.
    """
    request = AnalysisRequest(
        metadata=metadata,
        source_code=source_code,
        enterprise_domains_json=enterprise_domains_json,
    )
    return f"{prompt_template}\n\n{serialize_request(request)}"


def parse_analysis_request(text: str) -> AnalysisRequest:
    """Decode one input document into an analysis request.

    Keys are matched case-insensitively. An ``enterpriseDomainsJson`` value
    present in the document is kept; input files normally do not carry one.

    Args:
        text: Raw input document text.

    Returns:
        Decoded request.

    Raises:
        InvalidInputError: If the document is not JSON, or ``metadata`` or
            ``sourceCode`` is absent or of the wrong type.
    """
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise InvalidInputError(f"Input is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise InvalidInputError("Input document must be a JSON object.")

    document = LenientObject(raw)
    raw_metadata = document.get("metadata")
    if not isinstance(raw_metadata, Mapping):
        raise InvalidInputError("Input document is missing required field 'metadata'.")
    source_code = document.get("sourceCode")
    if not isinstance(source_code, str):
        raise InvalidInputError(
            "Input document is missing required field 'sourceCode'."
        )
    domains = document.get("enterpriseDomainsJson")

    return AnalysisRequest(
        metadata=_parse_metadata(LenientObject(raw_metadata)),
        source_code=source_code,
        enterprise_domains_json=domains if isinstance(domains, str) else "",
    )


def _parse_metadata(raw: LenientObject) -> Metadata:
    return Metadata(
        object_name=_optional_str(raw, "objectName"),
        object_type=_optional_str(raw, "objectType"),
        object_attribute=_optional_str(raw, "objectAttribute"),
        object_family=_optional_str(raw, "objectFamily"),
        object_description=_optional_str(raw, "objectDescription"),
        object_first_defined=_parse_timestamp(raw, "objectFirstDefined"),
        object_last_touched=_parse_timestamp(raw, "objectLastTouched"),
        object_dependency_count=_parse_count(raw, "objectDependencyCount"),
        object_referenced_by_count=_parse_count(raw, "objectReferencedByCount"),
    )


def _optional_str(raw: LenientObject, name: str) -> str | None:
    value = raw.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"Metadata field '{name}' must be a string.")
    return value


def _parse_timestamp(raw: LenientObject, name: str) -> datetime | None:
    """Parse an ISO-8601 timestamp field; a trailing ``Z`` means UTC."""
    value = raw.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"Metadata field '{name}' must be an ISO-8601 string.")
    candidate = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise InvalidInputError(
            f"Metadata field '{name}' is not an ISO-8601 timestamp: {value!r}"
        ) from exc


def _parse_count(raw: LenientObject, name: str) -> int:
    value: Any = raw.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"Metadata field '{name}' must be an integer.")
    return value
