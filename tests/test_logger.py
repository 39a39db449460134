import json
import logging

from haconnect.logger import LOGGER_NAME, ConfigLogger, configure_logging


def test_events_are_written_as_json_lines(tmp_path, restore_logger) -> None:
    configure_logging(tmp_path / "haconnect.log")
    events = ConfigLogger()
    events.provisioned(tmp_path / "haproxy-connect-abc")
    events.written(tmp_path / "haproxy-connect-abc" / "haproxy.conf", 120)
    events.stop("got signal SIGTERM")
    for h in logging.getLogger(LOGGER_NAME).handlers:
        h.flush()

    records = [json.loads(ln) for ln in (tmp_path / "haconnect.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["event"] for r in records] == ["provisioned", "written", "stop"]
    assert records[1]["bytes"] == 120
    assert records[2]["reason"] == "got signal SIGTERM"
    assert all(r["ts"].endswith("Z") for r in records)


def test_console_only_without_log_path(tmp_path, restore_logger, capsys) -> None:
    root = configure_logging(None)
    assert len(root.handlers) == 1
    ConfigLogger().cleaning(tmp_path)
    err = capsys.readouterr().err
    assert "INFO cleaning base=" in err


def test_reconfigure_replaces_handlers(tmp_path, restore_logger) -> None:
    configure_logging(tmp_path / "a.log")
    root = configure_logging(tmp_path / "b.log")
    assert len(root.handlers) == 2
