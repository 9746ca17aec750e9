"""Exception types raised by the section builder.

Request guards raise subclasses of :class:`RequestRejected`; the hook entry
points catch them and leave page data untouched. Configuration and registry
problems surface as :class:`BuilderConfigError` and :class:`SectionTypeError`
and are never caught inside the package.
"""

from __future__ import annotations


class RequestRejected(Exception):
    """Raised when a save or content-filter request must not touch the page."""


class AuthorizationDenied(RequestRejected):
    """Raised when the requesting user may not edit the page."""


class IntegrityCheckFailed(RequestRejected):
    """Raised when the request token is missing or does not verify."""


class UnsupportedPageType(RequestRejected):
    """Raised when the submitted page template is not a builder template."""


class AutosaveInProgress(RequestRejected):
    """Raised for autosave requests, which never run the builder."""


class SectionTypeError(LookupError):
    """Raised for duplicate or unknown section type identifiers."""


class BuilderConfigError(ValueError):
    """Raised when the builder configuration is invalid or incomplete."""


__all__ = [
    "AuthorizationDenied",
    "AutosaveInProgress",
    "BuilderConfigError",
    "IntegrityCheckFailed",
    "RequestRejected",
    "SectionTypeError",
    "UnsupportedPageType",
]
