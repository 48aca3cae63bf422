"""Pydantic report describing a parsed locator."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from gitable.locator import GitLocator


class LocatorReport(BaseModel):
    """Flattened, serializable view of a locator.

    Attributes
    ----------
    uri: str
        The locator rendering (scp locators keep their ``host:path`` form).
    kind: "standard" | "scp"
        Which locator variant parsed the input.
    inferred_scheme: str
        ``ssh`` for scp locators, ``file`` for local paths.
    web_uri: str | None
        Web link derived from host and path, when there is a host.
    """

    uri: str
    kind: Literal["standard", "scp"]
    scheme: str | None = None
    inferred_scheme: str
    user: str | None = None
    host: str | None = None
    port: int | None = None
    path: str
    basename: str
    extname: str
    project_name: str
    github: bool = False
    ssh: bool = False
    scp: bool = False
    local: bool = False
    authenticated: bool = False
    interactive_authenticated: bool = False
    web_uri: str | None = None


def describe(locator: GitLocator) -> LocatorReport:
    web = locator.to_web_uri()
    return LocatorReport(
        uri=str(locator),
        kind=locator.kind,
        scheme=locator.normalized_scheme,
        inferred_scheme=locator.inferred_scheme,
        user=locator.normalized_user,
        host=locator.normalized_host,
        port=locator.normalized_port,
        path=locator.path,
        basename=locator.basename,
        extname=locator.extname,
        project_name=locator.project_name,
        github=locator.is_github,
        ssh=locator.is_ssh,
        scp=locator.is_scp,
        local=locator.is_local,
        authenticated=locator.is_authenticated,
        interactive_authenticated=locator.is_interactive_authenticated,
        web_uri=str(web) if web is not None else None,
    )
