"""Exceptions raised while translating SimpleJSON requests.

Each exception carries the HTTP status code the framework adapters answer
with, so adapters never need to know which layer raised it.
"""


class SimpleJSONError(Exception):
    """Base class for all protocol translation errors."""

    status_code: int = 500


class DecodeError(SimpleJSONError):
    """The request body or one of its fields could not be decoded."""

    status_code = 400


class UnknownTargetKind(SimpleJSONError):
    """A query target asked for a type other than timeserie or table."""

    status_code = 400

    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown query type {kind!r}, timeserie or table")
        self.kind = kind


class InvalidColumnType(SimpleJSONError):
    """A table column holds data that is not a known column variant."""

    status_code = 500


class ColumnLengthMismatch(SimpleJSONError):
    """Columns of one table do not all have the same number of values."""

    status_code = 500


class UnknownTagType(SimpleJSONError):
    """A tag key or value is not a known tag variant."""

    status_code = 500


class CollaboratorError(SimpleJSONError):
    """A wired data source failed while serving a request.

    The status code differs per endpoint: ``/query`` answers 500 while the
    annotation, search and tag endpoints answer 400.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class CapabilityNotImplemented(SimpleJSONError):
    """The route's capability is not wired into the configuration."""

    status_code = 501

    def __init__(self, capability: str) -> None:
        super().__init__(f"{capability} is not implemented by this datasource")
        self.capability = capability


class Unauthorized(SimpleJSONError):
    """Basic-auth credentials were missing or wrong."""

    status_code = 401
