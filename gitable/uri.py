"""Generic URI values (RFC 3986 split, normalization, validated setters).

This is the layer the git locators are built on. A `URI` keeps the raw
components it was given and renders them verbatim with `str()`; the
``normalized_*`` accessors run each component through the matching
`url_normalize` normalizer (lowercased scheme and host, IDNA hosts,
percent-encoding normalized, dot segments removed, default ports dropped).
`url_normalize` knows nothing of ssh or git ports, so those defaults live
here.

Heuristics:
- `heuristic_correct` repairs copy-pasted strings (scheme typos, missing or
  extra slashes, Windows drive paths, bare host names, a scp-style
  ``host:path`` pasted behind a scheme) before they are parsed.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterator
from contextlib import contextmanager

from url_normalize.url_normalize import (
    normalize_fragment,
    normalize_host,
    normalize_path,
    normalize_port,
    normalize_query,
    normalize_scheme,
    normalize_userinfo,
)

from gitable.errors import InvalidURIError

# Default ports of the schemes git speaks that url_normalize does not know.
GIT_DEFAULT_PORTS = {
    "ssh": 22,
    "git+ssh": 22,
    "svn+ssh": 22,
    "sftp": 22,
    "git": 9418,
}

# Schemes whose URIs need a host or a path.
HIERARCHICAL_SCHEMES = frozenset(
    {"http", "https", "ftp", "tftp", "telnet", "nntp", "gopher", "wais", "ldap", "prospero"}
    | GIT_DEFAULT_PORTS.keys()
)

# Scheme given to a scp-style "host:path" found behind a web scheme.
SCP_FALLBACK_SCHEME = "git"

_WEB_SCHEMES = {"http", "https"}
_EMPTY_PATH_SLASH_SCHEMES = {"http", "https", "ftp", "tftp"}

_URI_PATTERN = re.compile(
    r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$", re.DOTALL
)
_REFERENCE_PATTERN = re.compile(r"^(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$", re.DOTALL)
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_DIGITS = re.compile(r"^[0-9]+$")
_INVALID_HOST = re.compile(r'[<>{}/\\?#@"\s]')

# --- Heuristic patterns ------------------------------------------------------

_SCHEME_TYPO = re.compile(r"^(?:htp|ttp|hhtp|htttp)(s?):/", re.IGNORECASE)
_DRIVE = re.compile(r"^[A-Za-z]:\\")
_SLASH_FIXES = (
    (re.compile(r"^(https?|git|ssh|git\+ssh|ftp):/+", re.IGNORECASE), r"\1://"),
    (re.compile(r"^file:/{4,}", re.IGNORECASE), "file:////"),
    (re.compile(r"^file://localhost/+", re.IGNORECASE), "file:///"),
    (re.compile(r"^file:/+", re.IGNORECASE), "file:///"),
)
_HOSTLIKE_SCHEME = re.compile(r"^[^/?#.]+\.[^/?#]+$")
_PORT_PREFIX = re.compile(r"^[0-9]+(?:[/?#]|$)")
_DOTTED_HOST = re.compile(r"^[^/?#:@.\s]+\.[^/?#:@\s]+(?:[/?#]|$)")
_AUTHORITY_URI = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://([^/?#]*)(.*)$", re.DOTALL)


def _split_host_port(hostport: str) -> tuple[str, str | None]:
    host, colon, port = hostport.rpartition(":")
    # "[::1]" has colons but no port
    if not colon or any(c in port for c in "[]@"):
        return hostport, None
    return host, port or None


def _encode_host(host: str) -> str:
    """Lowercase and IDNA-encode *host*; IP literals are only lowercased."""
    host = host.strip()
    if not host or host.startswith("["):
        return host.lower()
    if ".." in host.strip("."):
        raise InvalidURIError(f"Invalid character in host: '{host}'")
    try:
        return normalize_host(host)
    except UnicodeError as exc:
        raise InvalidURIError(f"Invalid character in host: '{host}'") from exc


class URI:
    """A mutable URI reference.

    Every setter validates the result unless validation is deferred with
    `defer_validation()`. Assigning a relative path while a host is present
    prepends ``/`` (an authority cannot be followed by a relative path).
    """

    def __init__(
        self,
        *,
        scheme: str | None = None,
        authority: str | None = None,
        user: str | None = None,
        password: str | None = None,
        host: str | None = None,
        port: int | str | None = None,
        path: str = "",
        query: str | None = None,
        fragment: str | None = None,
    ) -> None:
        self._scheme: str | None = None
        self._user: str | None = None
        self._password: str | None = None
        self._host: str | None = None
        self._port: int | None = None
        self._path = ""
        self._query: str | None = None
        self._fragment: str | None = None
        self._validation_deferred = False

        with self.defer_validation():
            self.scheme = scheme
            if authority is not None:
                self.authority = authority
            else:
                self.user = user
                self.password = password
                self.host = host
                self.port = port
            self.path = path
            self.query = query
            self.fragment = fragment

    # --- Raw components ------------------------------------------------------

    @property
    def scheme(self) -> str | None:
        return self._scheme

    @scheme.setter
    def scheme(self, value: str | None) -> None:
        if value == "":
            value = None
        if value is not None and not _SCHEME.match(value):
            raise InvalidURIError(f"Invalid scheme format: '{value}'")
        self._scheme = value
        self.validate()

    @property
    def user(self) -> str | None:
        return self._user

    @user.setter
    def user(self, value: str | None) -> None:
        self._user = value
        self.validate()

    @property
    def password(self) -> str | None:
        return self._password

    @password.setter
    def password(self, value: str | None) -> None:
        self._password = value
        self.validate()

    @property
    def host(self) -> str | None:
        return self._host

    @host.setter
    def host(self, value: str | None) -> None:
        self._host = value
        self.validate()

    @property
    def port(self) -> int | None:
        return self._port

    @port.setter
    def port(self, value: int | str | None) -> None:
        if value is None or value == "":
            self._port = None
        elif isinstance(value, int):
            self._port = value
        elif _DIGITS.match(str(value)):
            self._port = int(value)
        else:
            raise InvalidURIError(f"Invalid port number: {value!r}")
        self.validate()

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: str | None) -> None:
        path = "" if value is None else str(value)
        if path and not path.startswith("/") and self._host is not None:
            path = f"/{path}"
        self._path = path
        self.validate()

    def set_raw_path(self, value: str) -> None:
        """Store *value* verbatim, without the ``/`` the `path` setter may add."""
        self._path = value
        self.validate()

    @property
    def query(self) -> str | None:
        return self._query

    @query.setter
    def query(self, value: str | None) -> None:
        self._query = value
        self.validate()

    @property
    def fragment(self) -> str | None:
        return self._fragment

    @fragment.setter
    def fragment(self, value: str | None) -> None:
        self._fragment = value
        self.validate()

    @property
    def userinfo(self) -> str | None:
        if self._user is None:
            return None
        if self._password is None:
            return self._user
        return f"{self._user}:{self._password}"

    @property
    def authority(self) -> str | None:
        if self._host is None:
            return None
        authority = self._host
        if self.userinfo is not None:
            authority = f"{self.userinfo}@{authority}"
        if self._port is not None:
            authority = f"{authority}:{self._port}"
        return authority

    @authority.setter
    def authority(self, value: str | None) -> None:
        with self.defer_validation():
            if value is None:
                self.user = self.password = self.host = None
                self.port = None
                return
            userinfo, at, hostport = value.rpartition("@")
            if at:
                user, colon, password = userinfo.partition(":")
                self.user = user
                self.password = password if colon else None
            else:
                self.user = self.password = None
            host, port = _split_host_port(hostport)
            self.host = host
            self.port = port

    @property
    def basename(self) -> str:
        """Final path segment, ignoring trailing slashes; a root path gives ``/``."""
        trimmed = self._path.rstrip("/")
        if not trimmed:
            return "/" if self._path else ""
        return trimmed.rpartition("/")[2]

    # --- Normalized components ---------------------------------------------

    @property
    def normalized_scheme(self) -> str | None:
        if self._scheme is None:
            return None
        return normalize_scheme(self._scheme.strip())

    @property
    def normalized_userinfo(self) -> str | None:
        userinfo = self.userinfo
        if userinfo is None:
            return None
        # url_normalize drops empty credentials ("@", ":@") as browsers do
        normalized = normalize_userinfo(f"{userinfo}@")
        if not normalized:
            return None if self.normalized_scheme in _WEB_SCHEMES else userinfo
        return normalized.removesuffix("@")

    @property
    def normalized_user(self) -> str | None:
        userinfo = self.normalized_userinfo
        if userinfo is None:
            return None
        return userinfo.partition(":")[0]

    @property
    def normalized_password(self) -> str | None:
        userinfo = self.normalized_userinfo
        if userinfo is None:
            return None
        _, colon, password = userinfo.partition(":")
        return password if colon else None

    @property
    def normalized_host(self) -> str | None:
        if self._host is None:
            return None
        return _encode_host(self._host)

    @property
    def normalized_port(self) -> int | None:
        if self._port is None:
            return None
        scheme = self.normalized_scheme or ""
        if scheme in GIT_DEFAULT_PORTS:
            return None if GIT_DEFAULT_PORTS[scheme] == self._port else self._port
        port = normalize_port(str(self._port), scheme)
        return int(port) if port else None

    @property
    def normalized_authority(self) -> str | None:
        host = self.normalized_host
        if host is None:
            return None
        authority = host
        userinfo = self.normalized_userinfo
        if userinfo is not None:
            authority = f"{userinfo}@{authority}"
        if self.normalized_port is not None:
            authority = f"{authority}:{self.normalized_port}"
        return authority

    @property
    def normalized_path(self) -> str:
        path = self._path.strip()
        if not path:
            if self._host is not None and self.normalized_scheme in _EMPTY_PATH_SLASH_SCHEMES:
                return "/"
            return ""
        # dot segments are only removed for the web schemes, so ask for https
        return normalize_path(path, scheme="https")

    @property
    def normalized_query(self) -> str | None:
        if self._query is None:
            return None
        return normalize_query(self._query)

    @property
    def normalized_fragment(self) -> str | None:
        if self._fragment is None:
            return None
        return normalize_fragment(self._fragment)

    # --- Validation ----------------------------------------------------------

    @contextmanager
    def defer_validation(self) -> Iterator[None]:
        """Suspend validation for a multi-step edit; validate once on success."""
        previous = self._validation_deferred
        self._validation_deferred = True
        try:
            yield
        finally:
            self._validation_deferred = previous
        self.validate()

    def validate(self) -> None:
        if self._validation_deferred:
            return
        if (
            self.normalized_scheme in HIERARCHICAL_SCHEMES
            and not self._host
            and not self._path
        ):
            self._invalid("Absolute URI missing hierarchical segment")
        if self._host is None and (
            self._port is not None or self._user is not None or self._password is not None
        ):
            self._invalid("Hostname not supplied")
        if self._path.startswith("//") and self._host is None:
            self._invalid("Cannot have a path with two leading slashes without an authority set")
        if self._host:
            if _INVALID_HOST.search(self._host):
                raise InvalidURIError(f"Invalid character in host: '{self._host}'")
            # the host must also IDNA-encode
            _encode_host(self._host)

    def _invalid(self, reason: str) -> None:
        raise InvalidURIError(f"{reason}: '{self}'")

    # --- Conversions ---------------------------------------------------------

    def copy(self) -> URI:
        return copy.copy(self)

    def normalize(self) -> URI:
        """Return a new URI built from the normalized components."""
        return URI(
            scheme=self.normalized_scheme,
            authority=self.normalized_authority,
            path=self.normalized_path,
            query=self.normalized_query,
            fragment=self.normalized_fragment,
        )

    def __str__(self) -> str:
        parts = []
        if self._scheme is not None:
            parts.append(f"{self._scheme}:")
        if self.authority is not None:
            parts.append(f"//{self.authority}")
        parts.append(self._path)
        if self._query is not None:
            parts.append(f"?{self._query}")
        if self._fragment is not None:
            parts.append(f"#{self._fragment}")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"<URI {self}>"


# --- Parsing -------------------------------------------------------------------


def _split(pattern: re.Pattern[str], text: str) -> re.Match[str]:
    match = pattern.match(text)
    if match is None:
        raise InvalidURIError(f"Cannot split URI: '{text}'")
    return match


def parse(text: str) -> URI:
    """Split *text* into a `URI`.

    A leading ``word:`` that is not a valid scheme (``git@github.com:...``)
    leaves the whole text as a relative reference without a scheme.
    """
    scheme, authority, path, query, fragment = _split(_URI_PATTERN, text).groups()
    if scheme is not None and not _SCHEME.match(scheme):
        scheme = None
        authority, path, query, fragment = _split(_REFERENCE_PATTERN, text).groups()
    return URI(scheme=scheme, authority=authority, path=path, query=query, fragment=fragment)


def _fix_authority(text: str) -> str:
    match = _AUTHORITY_URI.match(text)
    if match is None:
        return text
    scheme, authority, rest = match.groups()
    if "\\" in authority:
        authority, _, tail = authority.partition("\\")
        rest = "/" + tail.replace("\\", "/") + rest
        text = f"{scheme}://{authority}{rest}"

    _, port = _split_host_port(authority.rpartition("@")[2])
    if port is None or _DIGITS.match(port):
        return text
    # "http://github.com:user/repo": a scp-style remote pasted behind a scheme
    if scheme.lower() in _WEB_SCHEMES:
        scheme = SCP_FALLBACK_SCHEME
    return f"{scheme}://{authority[: -len(port) - 1]}/{port}{rest}"


def heuristic_correct(text: str, scheme: str = "http") -> str:
    """Best-effort repair of a hand-typed or copy-pasted URI string.

    *scheme* is used when a bare host name (``example.com/x``) needs one.
    Strings that already parse sensibly, including scp-style remotes such as
    ``git@github.com:user/repo.git``, come back unchanged apart from
    surrounding whitespace.
    """
    text = _SCHEME_TYPO.sub(r"http\1:/", text.strip(), count=1)
    if _DRIVE.match(text):
        return "file:///" + text.replace("\\", "/")
    for pattern, replacement in _SLASH_FIXES:
        fixed, count = pattern.subn(replacement, text, count=1)
        if count:
            text = fixed
            break

    if text.startswith("//") and not text.startswith("///"):
        text = f"{scheme}:{text}"
    match = _split(_URI_PATTERN, text)
    candidate, authority = match.group(1), match.group(2)
    if authority is None:
        if (
            candidate
            and _HOSTLIKE_SCHEME.match(candidate)
            and _PORT_PREFIX.match(text[len(candidate) + 1 :])
        ):
            text = f"{scheme}://{text}"
        elif candidate is None and _DOTTED_HOST.match(text):
            text = f"{scheme}://{text}"
    return _fix_authority(text)


def heuristic_parse(text: str, scheme: str = "http") -> URI:
    return parse(heuristic_correct(text, scheme=scheme))
