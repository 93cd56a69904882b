from __future__ import annotations

import json
import logging

import pytest

from utils import load_config, parse_color, setup_logging


def test_load_config_reads_json_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"engine": {"capacity": 8}}), encoding="utf-8")
    assert load_config(str(path)) == {"engine": {"capacity": 8}}


def test_load_config_missing_file_is_reraised(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json_is_reraised(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_parse_color():
    default = (1, 2, 3)
    assert parse_color([10, 20, 30], default) == (10, 20, 30)
    assert parse_color(None, default) == default
    assert parse_color([10, 20], default) == default
    assert parse_color("red", default) == default
    assert parse_color([10, 20, 300], default) == default


def test_setup_logging_writes_to_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "engine.log"
    try:
        setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
        logging.info("hello from the test")
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
