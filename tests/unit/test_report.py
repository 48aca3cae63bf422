from __future__ import annotations

import json
import logging

import pytest
from jsonschema import ValidationError

from gitable import logging as gitable_logging
from gitable.parser import parse
from gitable.types import describe
from gitable.validator import validate_report


def _payload(text: str) -> dict:
    loc = parse(text)
    assert loc is not None
    return describe(loc).model_dump(mode="json")


def test_describe_scp_locator() -> None:
    """
    An scp report keeps the scp rendering, has no scheme or port and passes
    the schema checks that tie those fields together.
    """
    payload = _payload("git@github.com:martinemde/gitable.git")

    assert payload["uri"] == "git@github.com:martinemde/gitable.git"
    assert payload["kind"] == "scp"
    assert payload["scheme"] is None
    assert payload["port"] is None
    assert payload["inferred_scheme"] == "ssh"
    assert payload["user"] == "git"
    assert payload["host"] == "github.com"
    assert payload["path"] == "martinemde/gitable.git"
    assert (payload["basename"], payload["extname"], payload["project_name"]) == (
        "gitable.git",
        "git",
        "gitable",
    )
    assert payload["github"] and payload["ssh"] and payload["scp"]
    assert payload["web_uri"] == "https://github.com/martinemde/gitable"

    validate_report(payload)


def test_describe_local_path() -> None:
    payload = _payload("/srv/repo.git")

    assert payload["kind"] == "standard"
    assert payload["inferred_scheme"] == "file"
    assert payload["local"] is True
    assert payload["scp"] is False
    assert payload["host"] is None
    assert payload["web_uri"] is None

    validate_report(payload)


def test_describe_keeps_non_default_port() -> None:
    payload = _payload("ssh://git@example.com:2222/srv/repo.git")
    assert payload["port"] == 2222
    assert payload["scheme"] == "ssh"
    validate_report(payload)


def test_scp_report_with_a_port_is_rejected() -> None:
    payload = _payload("git@github.com:martinemde/gitable.git")
    payload["port"] = 22
    with pytest.raises(ValidationError):
        validate_report(payload)


def test_standard_report_claiming_scp_is_rejected() -> None:
    payload = _payload("https://github.com/martinemde/gitable.git")
    payload["scp"] = True
    with pytest.raises(ValidationError):
        validate_report(payload)


def test_unknown_report_field_is_rejected() -> None:
    payload = _payload("https://github.com/martinemde/gitable.git")
    payload["extra"] = "nope"
    with pytest.raises(ValidationError):
        validate_report(payload)


# --- Logging -----------------------------------------------------------------


def test_json_formatter_includes_locator() -> None:
    record = logging.LogRecord(
        name="gitable",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="parsed %s",
        args=("scp",),
        exc_info=None,
    )
    record.locator = "git@github.com:martinemde/gitable.git"

    line = json.loads(gitable_logging.JsonFormatter().format(record))

    assert line["level"] == "DEBUG"
    assert line["name"] == "gitable"
    assert line["msg"] == "parsed scp"
    assert line["locator"] == "git@github.com:martinemde/gitable.git"
    assert "ts" in line


@pytest.mark.parametrize(
    ("env", "level"),
    [("debug", "DEBUG"), (" Info ", "INFO"), ("bogus", "WARNING"), ("", "WARNING")],
)
def test_configured_level(monkeypatch: pytest.MonkeyPatch, env: str, level: str) -> None:
    monkeypatch.setenv("GITABLE_LOG_LEVEL", env)
    assert gitable_logging._configured_level() == level


def test_configured_level_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITABLE_LOG_LEVEL", raising=False)
    assert gitable_logging._configured_level() == gitable_logging.DEFAULT_LEVEL


def test_get_logger_adds_a_single_handler() -> None:
    logger = gitable_logging.get_logger("gitable.tests.report")
    again = gitable_logging.get_logger("gitable.tests.report")

    assert logger is again
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, gitable_logging.JsonFormatter)
