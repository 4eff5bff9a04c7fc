# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Error taxonomy for the documentation pipeline."""

from typing import Literal

FileStage = Literal[
    "pending",
    "read",
    "requested",
    "replied",
    "extracted",
    "mapped",
    "written",
    "archived",
]


class ConfigurationError(RuntimeError):
    """Represent a fatal startup configuration failure."""


class PipelineError(RuntimeError):
    """Represent a recoverable failure while processing one input file.

    Attributes:
        kind: Stable error kind name used in logs and reports.
        stage: Pipeline stage at which the failure occurred.
    """

    kind: str = "PipelineError"
    stage: FileStage = "pending"


class InvalidInputError(PipelineError):
    """Represent a malformed or incomplete input file."""

    kind = "InvalidInputError"
    stage = "read"


class SerializationError(PipelineError):
    """Represent a failure to encode the request payload."""

    kind = "SerializationError"
    stage = "requested"


class TransportError(PipelineError):
    """Represent a network, authentication or service failure."""

    kind = "TransportError"
    stage = "replied"


class EmptyResponseError(PipelineError):
    """Represent a model reply without any content."""

    kind = "EmptyResponseError"
    stage = "replied"


class NoJsonFoundError(PipelineError):
    """Represent a model reply with no JSON object in it."""

    kind = "NoJsonFoundError"
    stage = "extracted"


class MalformedJsonError(PipelineError):
    """Represent an extracted JSON fragment that cannot be parsed."""

    kind = "MalformedJsonError"
    stage = "mapped"


class StorageError(PipelineError):
    """Represent a failure writing output or archiving the input file."""

    kind = "StorageError"

    def __init__(self, message: str, stage: FileStage) -> None:
        super().__init__(message)
        self.stage = stage
