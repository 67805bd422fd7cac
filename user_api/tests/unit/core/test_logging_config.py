"""Tests for the logging configuration helpers."""

import logging

from user_api.core import logging_config
from user_api.core.logging_config import LOGGING_CONFIG, build_logging_config, setup_logging


def test_build_logging_config_overrides_levels():
    config = build_logging_config("warning")

    assert config["handlers"]["console"]["level"] == "WARNING"
    assert config["loggers"]["user_api"]["level"] == "WARNING"
    assert config["root"]["level"] == "WARNING"
    # errors file and SQL echo keep their own levels
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert config["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"


def test_build_logging_config_does_not_touch_default():
    before = LOGGING_CONFIG["loggers"]["user_api"]["level"]

    build_logging_config("CRITICAL")

    assert LOGGING_CONFIG["loggers"]["user_api"]["level"] == before


def test_setup_logging_creates_log_directory(tmp_path):
    config = build_logging_config("INFO")
    log_dir = tmp_path / "nested" / "logs"
    for name in ("service_file", "error_file"):
        config["handlers"][name]["filename"] = str(log_dir / f"{name}.log")

    setup_logging(config)
    try:
        assert log_dir.is_dir()
        assert logging.getLogger("user_api").level == logging.INFO
    finally:
        setup_logging(build_logging_config(logging_config.LOG_LEVEL))
