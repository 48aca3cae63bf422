from __future__ import annotations

import pytest

from gitable.errors import InvalidURIError
from gitable.parser import parse
from gitable.scp import ScpLocator, split_scp


def _scp(text: str) -> ScpLocator:
    loc = parse(text)
    assert isinstance(loc, ScpLocator)
    return loc


@pytest.mark.parametrize(
    ("text", "parts"),
    [
        ("git@github.com:martinemde/gitable.git", ("git@github.com", "martinemde/gitable.git")),
        ("host.com:/srv/repo.git", ("host.com", "/srv/repo.git")),
        ("user:pw@host.com:repo.git", ("user:pw@host.com", "repo.git")),
        ("[::1]:repo.git", ("[::1]", "repo.git")),
        ("host.com:repo:with:colons", ("host.com:repo:with", "colons")),
        ("@:/path", ("@", "/path")),
    ],
)
def test_split_scp(text: str, parts: tuple[str, str]) -> None:
    assert split_scp(text) == parts


@pytest.mark.parametrize(
    "text",
    [
        "https://github.com/martinemde/gitable.git",
        "file:///srv/repo.git",
        "C:\\path",
        "C:/path",
        "c:repo",
        "/srv/a:b",
        "host.com:",
        ":path",
        "plain",
    ],
)
def test_split_scp_rejects(text: str) -> None:
    assert split_scp(text) is None


def test_predicates() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    assert loc.inferred_scheme == "ssh"
    assert loc.is_ssh
    assert loc.is_scp
    assert loc.is_authenticated
    assert not loc.is_interactive_authenticated
    assert not loc.is_local
    assert loc.scheme is None
    assert loc.port is None


def test_to_web_uri() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    assert str(loc.to_web_uri()) == "https://github.com/martinemde/gitable"
    assert str(loc.to_web_uri("http")) == "http://github.com/martinemde/gitable"


def test_path_setter_keeps_relative_paths() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    loc.path = "other/repo.git"
    assert loc.path == "other/repo.git"
    assert str(loc) == "git@github.com:other/repo.git"


def test_path_setter_keeps_absolute_paths() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    loc.path = "/srv/repo.git"
    assert loc.path == "/srv/repo.git"
    assert str(loc) == "git@github.com:/srv/repo.git"


def test_rendering_follows_every_mutation() -> None:
    """
    Each mutator is immediately visible in the rendering; nothing is cached.
    """
    loc = _scp("git@github.com:martinemde/gitable")
    assert str(loc) == "git@github.com:martinemde/gitable"

    loc.set_git_extname()
    assert str(loc) == "git@github.com:martinemde/gitable.git"

    loc.basename = "other.git"
    assert str(loc) == "git@github.com:martinemde/other.git"

    loc.extname = "bundle"
    assert str(loc) == "git@github.com:martinemde/other.bundle"

    loc.path = "/abs/repo.git"
    assert str(loc) == "git@github.com:/abs/repo.git"


def test_project_name_and_basename() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    assert loc.basename == "gitable.git"
    assert loc.project_name == "gitable"
    assert loc.extname == "git"


def test_rendering_is_normalized() -> None:
    loc = _scp("GIT@GitHub.COM:Martin/Repo.git")
    assert str(loc) == "GIT@github.com:Martin/Repo.git"
    assert str(loc.normalize()) == "GIT@github.com:Martin/Repo.git"


def test_from_parts() -> None:
    loc = ScpLocator.from_parts("git@host.com", "repo.git")
    assert str(loc) == "git@host.com:repo.git"
    assert loc.path == "repo.git"


@pytest.mark.parametrize(
    ("authority", "path", "reason"),
    [
        ("@", "/path", "Hostname segment missing"),
        ("git@host.com:2222", "repo.git", "Scp style URI cannot have a port"),
    ],
)
def test_from_parts_validates(authority: str, path: str, reason: str) -> None:
    with pytest.raises(InvalidURIError, match=reason):
        ScpLocator.from_parts(authority, path)


def test_empty_path_is_invalid_and_not_rolled_back() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    with pytest.raises(InvalidURIError, match="Absolute URI missing hierarchical segment"):
        loc.path = ""
    # no rollback: the failed mutation stays applied
    assert loc.path == ""


def test_copy_is_independent() -> None:
    loc = _scp("git@github.com:martinemde/gitable.git")
    dup = loc.copy()
    assert isinstance(dup, ScpLocator)
    dup.path = "other/repo.git"
    assert loc.path == "martinemde/gitable.git"
    assert dup.path == "other/repo.git"
