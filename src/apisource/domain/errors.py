"""Error kinds raised by the fetch-and-normalize pipeline, plus warning categories.

The warning classes are never raised; they tag ``log.warning`` records through
``extra={"category": ...}`` so callers can filter them.
"""

from __future__ import annotations


class ApiSourceError(RuntimeError):
    """Base class for pipeline failures that abort a single source."""


class AuthError(ApiSourceError):
    """Raised when the bearer token request fails."""


class FetchError(ApiSourceError):
    """Raised when an HTTP request fails or returns an unusable body."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(ApiSourceError):
    """Raised when the entity collection cannot be located in a document."""


class PathResolutionError(ExtractionError):
    """Raised when a selector path segment does not exist in the document."""

    def __init__(self, message: str, *, selector: str, segment: str | int | None = None):
        super().__init__(message)
        self.selector = selector
        self.segment = segment


class InvalidShapeError(ExtractionError):
    """Raised when the selected value is not an object or a list of objects."""


class NamingConflictWarning(UserWarning):
    """A key was renamed, or two keys of one object ended up with the same name."""


class RefreshConfigWarning(UserWarning):
    """Refresh ids are misconfigured: the endpoint flag is off or keys repeat."""
