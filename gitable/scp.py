"""SCP-style locators: ``[user@]host:path`` without a scheme.

These render back exactly the way they were written. In particular the
path keeps its textual form, so ``git@github.com:user/repo.git`` (relative
to the login directory) and ``git@host.com:/srv/repo.git`` (absolute) stay
distinct even though the generic URI layer always roots a path that
follows a host.
"""

from __future__ import annotations

from typing import ClassVar

from gitable.errors import InvalidURIError
from gitable.locator import GitLocator, LocatorKind
from gitable.uri import URI


def split_scp(text: str) -> tuple[str, str] | None:
    """Split ``[user@]host:path`` into ``(authority, path)``.

    The separating colon comes before the first ``/`` and must leave a
    non-empty authority and a non-empty path. Returns None for scheme URIs
    (the first colon starts ``://``) and for Windows drive paths such as
    ``C:\\repo`` or ``c:repo`` (a one-letter authority).
    """
    first = text.find(":")
    if first < 1 or text.startswith("://", first):
        return None

    slash = text.find("/")
    colon = text.rfind(":", 0, len(text) if slash == -1 else slash)
    while colon >= first:
        if colon + 1 < len(text):
            break
        colon = text.rfind(":", 0, colon)
    else:
        return None

    authority, path = text[:colon], text[colon + 1 :]
    if len(authority) == 1 and authority.isascii() and authority.isalpha():
        return None
    return authority, path


class ScpLocator(GitLocator):
    """A scheme-less ``[user@]host:path`` locator; always ssh, never a port."""

    kind: ClassVar[LocatorKind] = "scp"

    @classmethod
    def from_parts(cls, authority: str, path: str) -> ScpLocator:
        uri = URI()
        uri.authority = authority
        # validation waits until the path is in place
        locator = cls(uri, validate=False)
        locator.path = path
        return locator

    def _set_path(self, value: str) -> None:
        self._uri.path = value
        current = self._uri.path
        if not value.startswith("/") and current.startswith("/"):
            self._uri.set_raw_path(current[1:])
        self.validate()

    @property
    def inferred_scheme(self) -> str:
        return "ssh"

    @property
    def is_ssh(self) -> bool:
        return True

    @property
    def is_scp(self) -> bool:
        return True

    def validate(self) -> None:
        super().validate()
        if not self._uri.host:
            self._invalid("Hostname segment missing")
        if self._uri.scheme:
            self._invalid("Scp style URI must not have a scheme")
        if self._uri.port is not None:
            self._invalid("Scp style URI cannot have a port")
        if not self._uri.path:
            self._invalid("Absolute URI missing hierarchical segment")

    def _invalid(self, reason: str) -> None:
        raise InvalidURIError(f"{reason}: '{self}'")

    def normalize(self) -> ScpLocator:
        return ScpLocator.from_parts(self.normalized_authority or "", self.normalized_path)

    def __str__(self) -> str:
        return f"{self.normalized_authority or ''}:{self.normalized_path}"
