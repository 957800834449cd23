import json
import logging

from book_likes_api.context import request_id_var
from book_likes_api.logging_config import JsonFormatter, configure_logging


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="book_likes_api.main",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_expected_fields() -> None:
    formatter = JsonFormatter(service_name="book-likes-api")

    payload = json.loads(formatter.format(make_record()))

    assert payload["service"] == "book-likes-api"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "book_likes_api.main"
    assert payload["message"] == "hello"
    assert "timestamp" in payload
    assert "request_id" not in payload


def test_json_formatter_emits_request_id_and_extras() -> None:
    formatter = JsonFormatter(service_name="book-likes-api")

    token = request_id_var.set("req-456")
    try:
        payload = json.loads(formatter.format(make_record(status_code=200, path="/likes")))
    finally:
        request_id_var.reset(token)

    assert payload["request_id"] == "req-456"
    assert payload["status_code"] == 200
    assert payload["path"] == "/likes"


def test_configure_logging_plain_text_format() -> None:
    configure_logging(level="DEBUG", output_format="plain", service_name="book-likes-api")

    root_logger = logging.getLogger()

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert not isinstance(root_logger.handlers[0].formatter, JsonFormatter)


def test_configure_logging_json_format() -> None:
    configure_logging(level="info", output_format="JSON", service_name="book-likes-api")

    root_logger = logging.getLogger()

    assert root_logger.level == logging.INFO
    assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)
