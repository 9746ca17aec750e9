"""Request integrity tokens and edit permissions.

Builder forms carry a token proving the submission came from an editing
session for the same user and action. :class:`NonceSigner` issues and checks
those tokens with HMAC-SHA256. :class:`EditorAuthorizer` is the default
permission check: a fixed set of users may edit every page.

Example
-------
>>> signer = NonceSigner("s3cret")
>>> token = signer.create("save", "admin")
>>> signer.verify(token, "save", "admin")
True
>>> signer.verify(token, "save", "guest")
False
"""

from __future__ import annotations

import collections.abc as cabc
import hashlib
import hmac
import typing as typ


class Authorizer(typ.Protocol):
    """Decides whether a user may edit a page."""

    def can_edit_page(self, user: str | None, page_id: int | None) -> bool: ...


class EditorAuthorizer:
    """Allow a fixed set of users to edit any page."""

    def __init__(self, editors: cabc.Iterable[str]) -> None:
        self.editors = frozenset(editors)

    def can_edit_page(self, user: str | None, page_id: int | None) -> bool:
        return user is not None and user in self.editors


class NonceSigner:
    """Issue and verify HMAC request tokens bound to an action and user."""

    def __init__(self, secret: str | bytes) -> None:
        if not secret:
            msg = "A non-empty secret is required to sign request tokens."
            raise ValueError(msg)
        self._key = secret.encode("utf-8") if isinstance(secret, str) else secret

    def create(self, action: str, user: str | None) -> str:
        payload = f"{action}|{user or ''}".encode()
        return hmac.new(self._key, payload, hashlib.sha256).hexdigest()

    def verify(self, token: object, action: str, user: str | None) -> bool:
        """Return True when ``token`` was issued for ``action`` and ``user``."""
        if not isinstance(token, str) or not token:
            return False
        return hmac.compare_digest(self.create(action, user), token)


__all__ = ["Authorizer", "EditorAuthorizer", "NonceSigner"]
