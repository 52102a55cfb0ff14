import json
import logging
import sys

from smokecheck.logging_utils import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="smokecheck.db",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Added missing column",
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_schema_upgrade_record_carries_table_and_column():
    payload = json.loads(
        JsonFormatter().format(_record(event="schema_upgrade", table="comments", column="date"))
    )

    assert payload["level"] == "INFO"
    assert payload["logger"] == "smokecheck.db"
    assert payload["msg"] == "Added missing column"
    assert payload["event"] == "schema_upgrade"
    assert payload["table"] == "comments"
    assert payload["column"] == "date"
    assert "ts" in payload
    assert "rows" not in payload


def test_request_record_carries_method_path_and_status():
    payload = json.loads(
        JsonFormatter().format(_record(event="request", method="GET", path="/", status=200))
    )

    assert (payload["method"], payload["path"], payload["status"]) == ("GET", "/", 200)


def test_unknown_extra_keys_are_dropped():
    payload = json.loads(JsonFormatter().format(_record(event="startup", player_id="p1")))

    assert payload["event"] == "startup"
    assert "player_id" not in payload


def test_exception_is_rendered():
    try:
        raise RuntimeError("Database problem!")
    except RuntimeError:
        record = _record(event="startup_check_failed")
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: Database problem!" in payload["exc_info"]
