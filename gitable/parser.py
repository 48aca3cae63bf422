"""Entry points that turn raw text into git locators.

`parse` hands the text to the generic URI parser first. When that finds no
host and the text reads as ``[user@]host:path``, the result is an
`ScpLocator`; everything else becomes a `StandardLocator`. Requiring both
conditions keeps strings the generic parser already understood (``ssh://``,
``file:///``) away from the scp branch.
"""

from __future__ import annotations

import os
from urllib.parse import ParseResult, SplitResult

from gitable import uri as generic
from gitable.errors import InvalidURIError
from gitable.locator import GitLocator, StandardLocator
from gitable.logging import get_logger
from gitable.scp import ScpLocator, split_scp

log = get_logger()


def _to_text(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, generic.URI):
        return str(value)
    if isinstance(value, (SplitResult, ParseResult)):
        return value.geturl()
    if isinstance(value, os.PathLike):
        text = os.fspath(value)
        if isinstance(text, str):
            return text
    raise TypeError(f"Can't convert {type(value).__name__} into str.")


def parse(value: object) -> GitLocator | None:
    """Parse a git repository locator.

    *value* may be a string, a `gitable.uri.URI`, a `urllib.parse` result,
    a path-like object, or a locator (which is copied). None and the empty
    string give None.

    Raises TypeError for values that cannot be read as text and
    `InvalidURIError` when the text is not a usable locator.
    """
    if value is None:
        return None
    if isinstance(value, GitLocator):
        return value.copy()

    text = _to_text(value)
    if not text:
        return None
    address = generic.parse(text)
    if address.host is None:
        parts = split_scp(text)
        if parts is not None:
            log.debug("scp-style locator detected", extra={"locator": text})
            return ScpLocator.from_parts(*parts)
    return StandardLocator(address)


def parse_when_valid(value: object) -> GitLocator | None:
    """Like `parse`, but None instead of TypeError or `InvalidURIError`."""
    try:
        return parse(value)
    except (TypeError, InvalidURIError):
        return None


def heuristic_parse(value: object) -> GitLocator | None:
    """Turn a copied URL bar or a sloppy remote into a git locator.

    The generic corrector repairs the text first (scheme typos, slashes,
    ``http://host:user/repo``); github locators then get a ``.git``
    extension when they have a basename.
    """
    if value is None or isinstance(value, GitLocator):
        return value

    text = _to_text(value)
    corrected = generic.heuristic_correct(text)
    if corrected != text:
        log.debug("heuristic rewrite to %s", corrected, extra={"locator": text})

    locator = parse(corrected)
    if locator is not None and locator.is_github:
        locator.set_git_extname()
    return locator
