from __future__ import annotations

import io
import logging

from propstrip.logging_config import get_logger, set_log_level, setup_logging


def test_setup_logging_routes_to_stream():
    buf = io.StringIO()
    logger = setup_logging(level="DEBUG", stream=buf)
    assert logger.name == "propstrip"
    get_logger("plugin").debug("hello %s", "there")
    assert "DEBUG propstrip.plugin: hello there" in buf.getvalue()


def test_level_from_env_and_set_log_level(monkeypatch):
    monkeypatch.setenv("PROPSTRIP_LOG_LEVEL", "ERROR")
    buf = io.StringIO()
    logger = setup_logging(stream=buf)
    assert logger.level == logging.ERROR
    get_logger().warning("quiet")
    assert buf.getvalue() == ""
    set_log_level("INFO")
    get_logger().info("loud")
    assert "loud" in buf.getvalue()


def test_setup_is_idempotent():
    setup_logging()
    setup_logging()
    assert len(logging.getLogger("propstrip").handlers) == 1


def test_rich_format(monkeypatch):
    monkeypatch.setenv("PROPSTRIP_LOG_FORMAT", "rich")
    buf = io.StringIO()
    setup_logging(level="INFO", stream=buf)
    get_logger("x").info("msg")
    assert " | INFO | propstrip.x:" in buf.getvalue()
