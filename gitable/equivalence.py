"""Relaxed "same repository" comparison of two locators.

Two locators are equivalent when they share a host and a path:

- github: a trailing ``.git`` and a single leading ``/`` are ignored, since
  github accepts ``user/repo`` and ``/user/repo`` alike; users never matter.
- elsewhere: one trailing ``/`` is ignored and the users must match, unless
  the first locator's path is absolute.

An absolute path waives the user check on every host. On a multi-tenant
host two accounts can each own ``/srv/repo.git`` and still compare equal.
"""

from __future__ import annotations

import re

from gitable.errors import InvalidURIError
from gitable.locator import GitLocator
from gitable.parser import parse

_GIT_SUFFIX = re.compile(r"\.git/?$")


def _github_path(locator: GitLocator) -> str:
    path = _GIT_SUFFIX.sub("", locator.normalized_path)
    return path[1:] if path.startswith("/") else path


def _plain_path(locator: GitLocator) -> str:
    path = locator.normalized_path
    return path[:-1] if path.endswith("/") else path


def equivalent(locator: object, other: object) -> bool:
    """Return True if *locator* and *other* probably name the same repository.

    *locator* is parsed when it is not already a locator (errors propagate);
    an *other* that fails to parse as a locator simply compares unequal.
    """
    first = locator if isinstance(locator, GitLocator) else parse(locator)
    if first is None:
        raise TypeError("Can't compare an empty locator.")
    try:
        second = parse(other)
    except InvalidURIError:
        return False
    if second is None:
        return False

    same_host = (first.normalized_host or "") == (second.normalized_host or "")

    if first.is_github and second.is_github:
        return same_host and _github_path(first) == _github_path(second)

    same_path = _plain_path(first) == _plain_path(second)
    same_user = first.normalized_user == second.normalized_user
    return same_host and same_path and (first.path.startswith("/") or same_user)
