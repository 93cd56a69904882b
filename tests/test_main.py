from __future__ import annotations

import json
import logging

import pytest

import main
from export import parse_dump


def _write_config(tmp_path, **run_control) -> None:
    run = {
        "max_ticks": 6,
        "log_throttle_steps": 2,
        "export_every": 3,
        "output_dir": "out",
    }
    run.update(run_control)
    config = {
        "engine": {
            "canvas_width": 64,
            "canvas_height": 64,
            "capacity": 16,
            "trail_length": 3,
            "construction_time_ms": 0,
        },
        "run_control": run,
        "visualization": {"preview": False, "dot_radius": 2.0, "trail_radius": 1.0},
        "logging": {"level": "INFO", "log_file": str(tmp_path / "logs" / "run.log")},
    }
    (tmp_path / "config.json").write_text(json.dumps(config), encoding="utf-8")


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_main_exports_frames_and_dumps_at_interval(tmp_path, monkeypatch, restore_root_logger):
    _write_config(tmp_path)
    monkeypatch.chdir(tmp_path)

    main.main()

    out = tmp_path / "out"
    assert sorted(path.name for path in out.iterdir()) == [
        "dots_000003.txt",
        "dots_000006.txt",
        "frame_000003.png",
        "frame_000006.png",
    ]
    assert (out / "frame_000006.png").read_bytes().startswith(b"\x89PNG")

    dump = parse_dump((out / "dots_000006.txt").read_text(encoding="utf-8"))
    assert dump.tick == 6
    assert len(dump.rows) == 16


def test_main_without_export_interval_writes_nothing(tmp_path, monkeypatch, restore_root_logger):
    _write_config(tmp_path, export_every=0)
    monkeypatch.chdir(tmp_path)

    main.main()

    assert not (tmp_path / "out").exists()


@pytest.mark.parametrize("run_control", [{"log_throttle_steps": 0}, {"export_every": -1}])
def test_main_rejects_invalid_run_control(tmp_path, monkeypatch, restore_root_logger, run_control):
    _write_config(tmp_path, **run_control)
    monkeypatch.chdir(tmp_path)

    main.main()

    for handler in logging.getLogger().handlers:
        handler.flush()
    assert not (tmp_path / "out").exists()
    assert "Invalid run_control" in (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")


def test_main_reports_missing_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    main.main()

    assert "FATAL: Could not load config.json" in capsys.readouterr().out
