"""Tests for logging configuration.

Stdlib loggers (services, repositories) and structlog loggers (entry point,
email delivery) must share one output format.
"""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from urbanease.core.config import settings
from urbanease.core.logging import configure_logging


@pytest.fixture
def production_logging(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> Iterator[None]:
    """Configure production logging, then put the root logger back.

    Depends on capsys so the new handler writes to the captured stderr.
    """
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.setattr(settings, "environment", "production")
    monkeypatch.setattr(settings, "log_level", "INFO")
    configure_logging()

    yield

    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def _last_json_line(err: str) -> dict:
    return json.loads(err.strip().splitlines()[-1])


class TestProductionLogging:
    def test_stdlib_records_render_as_json(
        self, production_logging: None, capsys: pytest.CaptureFixture[str]
    ):
        logging.getLogger("urbanease.services.example").info("Registered %s", "x")

        line = _last_json_line(capsys.readouterr().err)
        assert line["event"] == "Registered x"
        assert line["level"] == "info"
        assert line["logger"] == "urbanease.services.example"
        assert "timestamp" in line

    def test_structlog_events_render_as_json(
        self, production_logging: None, capsys: pytest.CaptureFixture[str]
    ):
        structlog.get_logger("urbanease.core.email").warning(
            "Email delivery failed, retrying", attempt=1
        )

        line = _last_json_line(capsys.readouterr().err)
        assert line["event"] == "Email delivery failed, retrying"
        assert line["attempt"] == 1
        assert line["level"] == "warning"

    def test_level_filters_stdlib_records(
        self, production_logging: None, capsys: pytest.CaptureFixture[str]
    ):
        logging.getLogger("urbanease.services.example").debug("hidden")

        assert "hidden" not in capsys.readouterr().err
