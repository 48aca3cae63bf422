"""Exceptions shared by the generic URI layer and the git locators."""

from __future__ import annotations


class InvalidURIError(ValueError):
    """A string (or a mutation) does not describe a valid URI or locator.

    Messages follow the form ``"<reason>: '<rendering>'"`` so the offending
    value is visible in logs and CLI output.
    """
