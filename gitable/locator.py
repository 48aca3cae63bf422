"""Git repository locators.

A locator wraps (composes) a generic `gitable.uri.URI` and adds the
git-specific view of it: predicates such as `is_github` or `is_ssh`, the
project name, a web link, and in-place mutators for the path, basename and
extension.

Variants:
- `StandardLocator`: scheme URIs (``https://``, ``ssh://``, ``git://``,
  ``file://``) and local paths.
- `ScpLocator` (`gitable.scp`): scheme-less ``[user@]host:path`` remotes.

Both variants validate after construction and after every mutation. A
mutation that raises leaves the new values in place; there is no rollback.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import ClassVar, Literal

from gitable.uri import URI

GITHUB_HOST = re.compile(r"(^|\.)github\.com$")
DEFAULT_WEB_SCHEME = "https"

_GIT_SUFFIX = re.compile(r"\.git/?$")
# C:\repo parses with the drive letter as its scheme
_DRIVE_LETTER = re.compile(r"^[a-z]$")

LocatorKind = Literal["standard", "scp"]


class GitLocator(ABC):
    """Behavior shared by both locator variants."""

    kind: ClassVar[LocatorKind]

    def __init__(self, uri: URI, *, validate: bool = True) -> None:
        self._uri = uri
        if validate:
            self.validate()

    # --- Components ------------------------------------------------------------

    @property
    def uri(self) -> URI:
        """A copy of the underlying generic URI."""
        return self._uri.copy()

    @property
    def scheme(self) -> str | None:
        return self._uri.scheme

    @property
    def user(self) -> str | None:
        return self._uri.user

    @property
    def password(self) -> str | None:
        return self._uri.password

    @property
    def host(self) -> str | None:
        return self._uri.host

    @property
    def port(self) -> int | None:
        return self._uri.port

    @property
    def query(self) -> str | None:
        return self._uri.query

    @property
    def fragment(self) -> str | None:
        return self._uri.fragment

    @property
    def path(self) -> str:
        return self._uri.path

    @path.setter
    def path(self, value: str) -> None:
        self._set_path(value)

    def _set_path(self, value: str) -> None:
        self._uri.path = value
        self.validate()

    @property
    def normalized_scheme(self) -> str | None:
        return self._uri.normalized_scheme

    @property
    def normalized_user(self) -> str | None:
        return self._uri.normalized_user

    @property
    def normalized_password(self) -> str | None:
        return self._uri.normalized_password

    @property
    def normalized_host(self) -> str | None:
        return self._uri.normalized_host

    @property
    def normalized_port(self) -> int | None:
        return self._uri.normalized_port

    @property
    def normalized_authority(self) -> str | None:
        return self._uri.normalized_authority

    @property
    def normalized_path(self) -> str:
        return self._uri.normalized_path

    # --- Git predicates ------------------------------------------------------------

    @property
    def is_github(self) -> bool:
        return bool(GITHUB_HOST.search(self.normalized_host or ""))

    @property
    def inferred_scheme(self) -> str:
        """The scheme, or ``file`` for local paths.

        A locator is local when it has no host and either no scheme or a
        Windows drive letter where the scheme would be.
        """
        scheme = self.normalized_scheme or ""
        if not self.normalized_host and (not scheme or _DRIVE_LETTER.match(scheme)):
            return "file"
        return scheme

    @property
    def is_local(self) -> bool:
        return self.inferred_scheme == "file"

    @property
    def is_ssh(self) -> bool:
        return "ssh" in (self.normalized_scheme or "")

    @property
    def is_scp(self) -> bool:
        return False

    @property
    def is_authenticated(self) -> bool:
        """True when git will need credentials: ssh, or a user without password."""
        return self.is_ssh or self.is_interactive_authenticated

    @property
    def is_interactive_authenticated(self) -> bool:
        """True when git will prompt for a password (a user is given, no password)."""
        return (
            not self.is_ssh
            and self.normalized_user is not None
            and self.normalized_password is None
        )

    # --- Derived values --------------------------------------------------------------

    def to_web_uri(self, scheme: str = DEFAULT_WEB_SCHEME) -> URI | None:
        """Web link for hosts that follow the github layout.

        Returns None when there is no host. Pair with `is_github` when the
        host layout matters.
        """
        host = self.normalized_host
        if not host:
            return None
        return URI(
            scheme=scheme,
            host=host,
            port=self.normalized_port,
            path=_GIT_SUFFIX.sub("", self.normalized_path),
        )

    @property
    def project_name(self) -> str:
        return self.basename.removesuffix(".git")

    @property
    def basename(self) -> str:
        base = self._uri.basename
        # the generic layer reports "/" for a root path
        return "" if base == "/" else base

    @basename.setter
    def basename(self, value: str) -> None:
        base = self.basename
        path = self.path
        if not base:
            self.path = path + value
            return
        index = path.rfind(base)
        self.path = path[:index] + value + path[index + len(base) :]

    @property
    def extname(self) -> str:
        """Text after the last dot of the basename (``git`` for ``repo.git``)."""
        stem, dot, ext = self.basename.rpartition(".")
        return ext if dot and stem else ""

    @extname.setter
    def extname(self, value: str) -> None:
        base = self.basename
        if not base:
            return
        self.basename = f"{base.removesuffix('.git')}.{value.lstrip('.')}"

    def set_git_extname(self) -> None:
        self.extname = "git"

    def equivalent(self, other: object) -> bool:
        """Does *other* (a locator or a string) probably name the same repository?"""
        from gitable.equivalence import equivalent

        return equivalent(self, other)

    # --- Validation and conversions ----------------------------------------------------

    def validate(self) -> None:
        self._uri.validate()

    def copy(self) -> GitLocator:
        return type(self)(self._uri.copy())

    @abstractmethod
    def normalize(self) -> GitLocator:
        """A new locator of the same kind built from the normalized components."""

    def __str__(self) -> str:
        return str(self._uri)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            from gitable.parser import parse_when_valid

            other = parse_when_valid(other)
            if other is None:
                return False
        if not isinstance(other, GitLocator):
            return NotImplemented
        return self.kind == other.kind and str(self.normalize()) == str(other.normalize())


class StandardLocator(GitLocator):
    """A locator written as a scheme URI or a local filesystem path."""

    kind: ClassVar[LocatorKind] = "standard"

    def normalize(self) -> StandardLocator:
        return StandardLocator(self._uri.normalize())
