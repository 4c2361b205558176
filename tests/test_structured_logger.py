import io
import json
import logging

from ops.structured_logger import JsonFormatter, setup_logging
from utils.redact import dest_hint
from verification.errors import APIError
from verification.wire import log_failure


def test_json_formatter_merges_extra():
    record = logging.LogRecord("checkhim.client", logging.INFO, __file__, 1, "verify_result", None, None)
    record.extra = {"event": "verify_result", "valid": True}
    out = json.loads(JsonFormatter().format(record))
    assert out["severity"] == "INFO"
    assert out["message"] == "verify_result"
    assert out["logger"] == "checkhim.client"
    assert out["event"] == "verify_result"
    assert out["valid"] is True


def test_dest_hint():
    assert dest_hint("+5511984339000") == "...9000"
    assert dest_hint("+12") == "+12"
    assert dest_hint("  ") == ""


def test_failure_log_redacts_number(caplog):
    logger = logging.getLogger("checkhim.test")
    with caplog.at_level(logging.WARNING, logger="checkhim.test"):
        log_failure(logger, "+5511984339000", APIError(401, "Invalid API key", "unauthorized"))

    rec = caplog.records[-1]
    assert rec.extra["dest"] == "...9000"
    assert rec.extra["status_code"] == 401
    assert "+5511984339000" not in json.dumps(rec.extra)


def test_setup_logging_writes_to_given_stream():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    buf = io.StringIO()
    try:
        setup_logging("debug", stream=buf, service="checkhim-cli")
        logging.getLogger("checkhim.client").info("verify_attempt", extra={"extra": {"dest": "...9000"}})
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    out = json.loads(buf.getvalue().strip().splitlines()[-1])
    assert out["service"] == "checkhim-cli"
    assert out["logger"] == "checkhim.client"
    assert out["dest"] == "...9000"
