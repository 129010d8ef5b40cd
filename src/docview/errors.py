from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    VECTORS_NOT_LOADED = "vectors-not-loaded"
    INVALID_ARGUMENT = "invalid-argument"
    MISSING_PIPELINE_STAGE = "missing-pipeline-stage"
    MALFORMED_PAYLOAD = "malformed-payload"
    CAPACITY_EXCEEDED = "capacity-exceeded"


class DocViewError(Exception):
    """Base error carrying a machine-readable kind alongside the message."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class VectorsNotLoadedError(DocViewError):
    kind = ErrorKind.VECTORS_NOT_LOADED


class InvalidArgumentError(DocViewError):
    kind = ErrorKind.INVALID_ARGUMENT


class MissingPipelineStageError(DocViewError):
    kind = ErrorKind.MISSING_PIPELINE_STAGE


class MalformedPayloadError(DocViewError):
    """Raised when an analysis payload breaks the range or record invariants."""

    kind = ErrorKind.MALFORMED_PAYLOAD


class CapacityExceededError(DocViewError):
    """Raised when a value does not fit its packed bit-field."""

    kind = ErrorKind.CAPACITY_EXCEEDED
