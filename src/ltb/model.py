# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for legacy object analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Metadata:
    """Describe one legacy object under analysis.

    Attributes:
        object_name: Object name in the legacy system.
        object_type: Object type, such as program, screen or report.
        object_attribute: Free-form type attribute.
        object_family: Object family or grouping.
        object_description: Free-text description.
        object_first_defined: Timestamp the object was first defined.
        object_last_touched: Timestamp the object was last changed.
        object_dependency_count: Number of objects this object depends on.
        object_referenced_by_count: Number of objects referencing this object.
    """

    object_name: str | None = None
    object_type: str | None = None
    object_attribute: str | None = None
    object_family: str | None = None
    object_description: str | None = None
    object_first_defined: datetime | None = None
    object_last_touched: datetime | None = None
    object_dependency_count: int = 0
    object_referenced_by_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire view of the metadata."""
        return {
            "objectName": self.object_name,
            "objectType": self.object_type,
            "objectAttribute": self.object_attribute,
            "objectFamily": self.object_family,
            "objectDescription": self.object_description,
            "objectFirstDefined": _isoformat(self.object_first_defined),
            "objectLastTouched": _isoformat(self.object_last_touched),
            "objectDependencyCount": self.object_dependency_count,
            "objectReferencedByCount": self.object_referenced_by_count,
        }


@dataclass(frozen=True)
class AnalysisRequest:
    """Represent the unit submitted for analysis.

    Attributes:
        metadata: Descriptive facts about the object.
        source_code: Object source code.
        enterprise_domains_json: Shared domain taxonomy injected per run.
    """

    metadata: Metadata
    source_code: str
    enterprise_domains_json: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire view of the request."""
        return {
            "metadata": self.metadata.to_dict(),
            "sourceCode": self.source_code,
            "enterpriseDomainsJson": self.enterprise_domains_json,
        }


@dataclass(frozen=True)
class Action:
    type: str = ""
    description: str = ""


@dataclass(frozen=True)
class Parameter:
    name: str = ""
    type: str = ""
    description: str = ""
    default_value: str = ""


@dataclass(frozen=True)
class Message:
    message_id: str = ""
    description: str = ""


@dataclass(frozen=True)
class Documentation:
    """Hold the documentation section of a model reply."""

    program_name: str = ""
    description: str = ""
    creation_date: str = ""
    author: str = ""
    actions: tuple[Action, ...] = field(default_factory=tuple)
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)
    messages: tuple[Message, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AnalysisResponse:
    """Represent a validated model reply.

    Every field is optional in the reply; absent values are empty.
    """

    object_name: str = ""
    object_type: str = ""
    level_one_domain: str = ""
    level_two_domain: str = ""
    documentation: Documentation = field(default_factory=Documentation)


@dataclass(frozen=True)
class Output:
    """Represent the persisted documentation record."""

    object_name: str
    object_type: str
    level_one_domain: str
    level_two_domain: str
    documentation: str

    def to_dict(self) -> dict[str, str]:
        """Return the camelCase wire view of the output."""
        return {
            "objectName": self.object_name,
            "objectType": self.object_type,
            "levelOneDomain": self.level_one_domain,
            "levelTwoDomain": self.level_two_domain,
            "documentation": self.documentation,
        }


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
