# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Map extracted model JSON onto the canonical analysis response."""

import json
import logging
from collections.abc import Mapping

from ltb.errors import MalformedJsonError
from ltb.lenient import LenientObject
from ltb.model import (
    Action,
    AnalysisResponse,
    Documentation,
    Message,
    Output,
    Parameter,
)

logger = logging.getLogger(__name__)


def map_response(json_text: str) -> AnalysisResponse:
    """Parse and normalize an extracted JSON fragment.

    Field names are matched case-insensitively; absent scalars become empty
    strings, absent lists become empty tuples and a missing documentation
    object becomes an empty ``Documentation``. Unknown fields are ignored.

    Args:
        json_text: JSON object text returned by the extractor.

    Returns:
        Canonical analysis response.

    Raises:
        MalformedJsonError: If the text is not a JSON object.
    """
    try:
        raw = json.loads(json_text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise MalformedJsonError(f"Model reply JSON could not be parsed: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise MalformedJsonError(
            f"Model reply JSON must be an object, got {type(raw).__name__}."
        )
    return _decode_response(LenientObject(raw))


def to_output(response: AnalysisResponse) -> Output:
    """Flatten a response into the persisted record.

    Only the documentation description is kept.
    """
    return Output(
        object_name=response.object_name,
        object_type=response.object_type,
        level_one_domain=response.level_one_domain,
        level_two_domain=response.level_two_domain,
        documentation=response.documentation.description,
    )


def _decode_response(raw: LenientObject) -> AnalysisResponse:
    return AnalysisResponse(
        object_name=raw.get_str("objectName"),
        object_type=raw.get_str("objectType"),
        level_one_domain=raw.get_str("levelOneDomain"),
        level_two_domain=raw.get_str("levelTwoDomain"),
        documentation=_decode_documentation(raw.get("documentation")),
    )


def _decode_documentation(value: object) -> Documentation:
    if isinstance(value, str):
        return Documentation(description=value)
    raw = LenientObject.coerce(value)
    return Documentation(
        program_name=raw.get_str("programName"),
        description=raw.get_str("description", "programDescription"),
        creation_date=raw.get_str("creationDate"),
        author=raw.get_str("author"),
        actions=tuple(
            Action(type=item.get_str("type"), description=item.get_str("description"))
            for item in _objects(raw.get_list("actions"))
        ),
        parameters=tuple(
            Parameter(
                name=item.get_str("name"),
                type=item.get_str("type"),
                description=item.get_str("description"),
                default_value=item.get_str("defaultValue"),
            )
            for item in _objects(raw.get_list("parameters"))
        ),
        messages=tuple(
            Message(
                message_id=item.get_str("messageId"),
                description=item.get_str("description"),
            )
            for item in _objects(raw.get_list("messages"))
        ),
    )


def _objects(items: list[object]) -> list[LenientObject]:
    """Wrap list entries that are objects; other entries are dropped."""
    return [LenientObject(item) for item in items if isinstance(item, Mapping)]
