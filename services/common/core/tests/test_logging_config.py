import json
import logging
import sys

from services.common.core import logging_config, request_context


def _record(msg="Test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test_path.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_custom_json_formatter_includes_request_id():
    """Ensure the formatter includes the RequestID from context."""
    request_context.clear_request_id()
    req_id_str = request_context.generate_request_id()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))

    assert log_json["message"] == "Test message"
    assert log_json["level"] == "INFO"
    assert log_json["logger"] == "test_logger"
    assert log_json["request_id"] == req_id_str
    request_context.clear_request_id()


def test_custom_json_formatter_without_request_id():
    request_context.clear_request_id()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))

    assert "request_id" not in log_json


def test_custom_json_formatter_includes_extra_fields():
    record = _record(method="GET", path="/api/products", status=200, latency_ms=1.5)

    log_json = json.loads(logging_config.CustomJsonFormatter().format(record))

    assert log_json["method"] == "GET"
    assert log_json["path"] == "/api/products"
    assert log_json["status"] == 200
    assert log_json["latency_ms"] == 1.5


def test_custom_json_formatter_includes_exception():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = _record(level=logging.ERROR)
        record.exc_info = sys.exc_info()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(record))

    assert "ValueError: bad value" in log_json["exception"]


def test_setup_logging_falls_back_when_file_missing(monkeypatch):
    called = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: called.update(kw))

    logging_config.setup_logging("/tmp/catalog-missing-logging.yml")

    assert called == {"level": logging.INFO}


def test_setup_logging_substitutes_env(tmp_path, monkeypatch):
    config_file = tmp_path / "logging.yml"
    config_file.write_text(
        "\n".join(
            [
                "version: 1",
                "disable_existing_loggers: false",
                "loggers:",
                "  catalog.test_setup:",
                "    level: ${LOG_LEVEL}",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(config_file))

    assert logging.getLogger("catalog.test_setup").level == logging.WARNING
